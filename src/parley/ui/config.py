"""UI configuration constants.

Centralizes copy text and limits for the UI module.
"""

GREETING_TITLE = "Hi there!"
GREETING_SUBTITLE = "What would you like to know?"
GREETING_HINT = "Use one of the most common prompts below or use your own to begin"

# Shown as buttons while the conversation is empty
PROMPT_SUGGESTIONS: tuple[tuple[str, str], ...] = (
    ("Write a to-do list for a personal project or task",
     "Write a to-do list for building a full-stack EdTech platform"),
    ("Generate an email reply to a job offer",
     "Generate an email reply to a job offer"),
    ("Summarise this article or text for me in one paragraph",
     "Summarise this article or text for me in one paragraph"),
    ("How does AI work in a technical capacity",
     "How does AI work in a technical capacity"),
)

INPUT_PLACEHOLDER = "Ask whatever you want..."
INPUT_SOFT_LIMIT = 1000  # Characters shown in the input counter

THINKING_TEXT = "Thinking..."

# Log panel configuration
LOG_TIMESTAMP_FORMAT = "%H:%M:%S"
LOG_MAX_MESSAGE_LENGTH = 500  # Characters before truncating log messages
