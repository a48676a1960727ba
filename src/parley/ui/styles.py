"""CSS styles for the TUI.

Hides layout and styling decisions from the application logic.
Uses Textual CSS features: nesting, pseudo-classes, variables.
"""

APP_CSS = """
/* ============================================
   Main Screen Layout - Single Column
   ============================================ */
Screen {
    layout: vertical;
    background: $background;
}

/* ============================================
   Greeting - Always visible
   ============================================ */
#greeting {
    height: auto;
    padding: 1 2 0 2;
    text-align: center;
}

.greeting-title {
    width: 100%;
    text-align: center;
    text-style: bold;
    color: $foreground;
}

.greeting-subtitle {
    width: 100%;
    text-align: center;
    color: $primary;
    text-style: bold;
}

.greeting-hint {
    width: 100%;
    text-align: center;
    color: $text-muted;
}

/* ============================================
   Prompt Suggestions - Only while empty
   ============================================ */
SuggestionBar {
    height: auto;
    padding: 1 2;
    align: center top;
}

.suggestion {
    width: 1fr;
    height: 5;
    margin: 0 1;
    background: $surface;
    border: round $border;
    color: $foreground;

    &:hover {
        border: round $primary;
        background: $primary 12%;
    }
}

/* ============================================
   Chat History Panel - Primary Focus Area
   ============================================ */
#chat-history {
    height: 1fr;
    background: $panel;
    border: round $primary 60%;
    border-title-color: $primary;
    border-title-style: bold;
    border-title-align: left;
    border-subtitle-color: $text-muted;
    border-subtitle-align: right;
    padding: 0 1;
    scrollbar-gutter: stable;

    &:focus-within {
        border: round $primary;
    }
}

/* ============================================
   Chat Messages - Conversation Display
   ============================================ */
.chat-message {
    width: 100%;
    height: auto;
    margin: 0 0 1 0;
    padding: 1 2;
    background: transparent;
}

/* User messages - Blue accent */
.user-message {
    border-right: tall $secondary;
    background: $secondary 10%;

    & .message-header {
        color: $secondary;
        text-style: bold;
        text-align: right;
    }
}

/* Assistant messages - Purple accent */
.assistant-message {
    border-left: tall $primary;
    background: $primary 8%;

    & .message-header {
        color: $primary;
        text-style: bold;
    }
}

/* Error replies from the service */
.error-message {
    border-left: tall $error;
    background: $error 8%;

    & .message-header {
        color: $error;
    }
}

.message-header {
    height: auto;
}

.message-content {
    height: auto;
    color: $foreground;
}

/* ============================================
   Thinking Indicator
   ============================================ */
#thinking {
    height: 1;
    padding: 0 2;
    color: $accent;
    text-style: italic;
}

/* ============================================
   Log Panel - Hidden by default
   ============================================ */
#log-panel {
    height: auto;
    min-height: 6;
    max-height: 12;
    background: $panel;
    border: round $warning 60%;
    border-title-color: $warning;
    border-title-style: bold;
    border-subtitle-color: $text-muted;
    border-subtitle-align: right;
    padding: 0 1;
    overflow-y: scroll;
    scrollbar-gutter: stable;
}

/* ============================================
   Chat Input Bar - Text Entry + Send
   ============================================ */
ChatInputBar {
    height: 5;
    margin: 0 1;
    border: round $primary 60%;
    border-subtitle-color: $text-muted;
    border-subtitle-align: right;
    background: $panel;

    &:focus-within {
        border: round $primary;
    }
}

#chat-input {
    width: 1fr;
    height: 100%;
    border: none;
    padding: 0 1;
    background: transparent;

    &:focus {
        background: transparent;
    }
}

#send-btn {
    width: 10;
    height: 100%;
    margin: 0 0 0 1;
    min-width: 8;
    border: tall $primary;
    background: $primary;
    color: $background;
    text-style: bold;

    &:hover {
        background: $primary-lighten-1;
        border: tall $primary-lighten-1;
    }

    &:disabled {
        opacity: 50%;
    }
}

/* ============================================
   Notification Toasts
   ============================================ */
Toast {
    background: $surface;
    border: tall $border;
    padding: 0 1;

    &.-error {
        border: tall $error;
        background: $error 12%;
    }

    &.-warning {
        border: tall $warning;
        background: $warning 12%;
    }
}
"""
