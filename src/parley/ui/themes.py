"""Theme definitions for the TUI.

This module hides the design decisions about:
- Color palettes and visual appearance
- Theme variables (borders, scrollbars, etc.)

To add a new theme, define it here and register in the app.
"""

from textual.theme import Theme

# Purple/blue palette: purple for the assistant and accents, blue for the user
PARLEY_DUSK = Theme(
    name="parley-dusk",
    primary="#9d7cf4",      # Purple - main accent
    secondary="#5b9cf6",    # Blue - user turns
    accent="#c4b5fd",       # Lavender - highlights
    foreground="#e6e4f0",
    background="#14121c",
    success="#7ad3a1",
    warning="#f5b97a",
    error="#f07f8f",
    surface="#1d1a29",
    panel="#18161f",
    dark=True,
    variables={
        "block-cursor-foreground": "#14121c",
        "block-cursor-background": "#c4b5fd",
        "block-cursor-text-style": "bold",

        "input-cursor-background": "#e6e4f0",
        "input-cursor-foreground": "#14121c",
        "input-selection-background": "#9d7cf4 30%",

        "border": "#3d3852",
        "border-blurred": "#2a2638",

        "scrollbar": "#2a2638",
        "scrollbar-hover": "#3d3852",
        "scrollbar-active": "#9d7cf4",
        "scrollbar-background": "#18161f",
        "scrollbar-corner-color": "#18161f",

        "footer-foreground": "#bdb8d4",
        "footer-background": "#14121c",
        "footer-key-foreground": "#c4b5fd",
        "footer-key-background": "#2a2638",

        "text-muted": "#7a7494",
        "text-error": "#f07f8f",
    },
)
