"""Display messages for errors raised while reading input or writing files.

Exceptions from the filesystem often carry an errno prefix or an empty
str() (e.g. a bare TimeoutError from a clipboard tool). These helpers turn
them into one readable line for the console.
"""

from __future__ import annotations

from rich.markup import escape as _escape_markup

# Fallback text for exception types whose str() is commonly empty
FRIENDLY_MESSAGES: dict[type, str] = {
    TimeoutError: "Operation timed out.",
    PermissionError: "Permission denied.",
    IsADirectoryError: "Expected a file but found a directory.",
    BrokenPipeError: "Output stream was closed unexpectedly.",
    KeyboardInterrupt: "Operation interrupted by user.",
}


def format_error_message(e: BaseException, *, include_type: bool = True) -> str:
    """Format an exception into a non-empty display message.

    OSErrors that name a file are shown as ``<reason>: <file>`` without
    the ``[Errno N]`` prefix.

    Args:
        e: The exception to format
        include_type: Whether to prefix the exception type name

    Returns:
        A non-empty message

    Examples:
        >>> format_error_message(TimeoutError())
        'TimeoutError: Operation timed out.'

        >>> format_error_message(PermissionError(13, "Permission denied", "out/a.ts"), include_type=False)
        'Permission denied: out/a.ts'
    """
    error_type = type(e).__name__

    if isinstance(e, OSError) and e.strerror and e.filename:
        message = f"{e.strerror}: {e.filename}"
    else:
        message = str(e)

    if message:
        if include_type and error_type not in message:
            return f"{error_type}: {message}"
        return message

    for exc_type, friendly_msg in FRIENDLY_MESSAGES.items():
        if isinstance(e, exc_type):
            return f"{error_type}: {friendly_msg}"

    return f"{error_type}: (no additional details)"


def escape_markup(value: object) -> str:
    """Escape a value for interpolation into Rich markup.

    Parsed paths such as ``app/[id]/page.tsx`` would otherwise be read as
    markup tags.
    """
    return _escape_markup(str(value))
