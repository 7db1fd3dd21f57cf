"""Constants and configuration for the splitmark editor."""

class EditorConstants:
    """Central configuration constants for the editor."""

    # Frame layout
    TITLE_HEIGHT = 3  # Blank row, title row, blank row
    HELP_HEIGHT = 5  # Blank row, help line, status line, two blank rows
    DEFAULT_TITLE = "A New File"

    # Input pane
    PLACEHOLDER = "Type something"
    TAB_WIDTH = 4
    MIN_LINE_NUMBER_DIGITS = 3

    # Preview
    DEFAULT_STYLE = "dark"

    # Session timer
    TICK_INTERVAL = 1.0  # Seconds between timer ticks

    # Front matter
    FRONT_MATTER_DELIMITER = "---"
    UNKNOWN_USER = "unknown"

    # File operations
    ATOMIC_SAVE_PREFIX = "."  # Prefix for temporary save files
    ATOMIC_SAVE_SUFFIX = ".tmp"  # Suffix for temporary save files
    DEFAULT_FILE_MODE = 0o666  # Masked by the process umask

    # Resize handling
    RESIZE_PIPE_MARKER = b'R'  # Byte written to pipe to signal resize
    INTERRUPT_PIPE_MARKER = b'C'  # Byte written to pipe on SIGINT

    # Status messages
    SAVED_MESSAGE = "Saved to {}"
    SAVE_FAILED_MESSAGE = "Save failed: {}"
    RENDER_ERROR_MESSAGE = "render error: {}"
