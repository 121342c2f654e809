"""Safe error message formatting utilities.

Ensures exceptions always have useful display messages, even when their
str() representation is empty, and renders the extra context vendetta
errors carry (the chain of imports that led to the failure, and the
diagnostics of a failed git command).
"""

from __future__ import annotations

import subprocess

from rich.markup import escape as _escape_markup

from ..errors import SubmoduleOperationFailure
from ..errors import VendettaError

# Friendly messages for specific exception types known to have empty str()
FRIENDLY_MESSAGES: dict[type, str] = {
    TimeoutError: "Operation timed out.",
    subprocess.TimeoutExpired: "Command timed out.",
    KeyboardInterrupt: "Operation interrupted by user.",
    PermissionError: "Permission denied.",
}


def format_error_message(e: BaseException, *, include_type: bool = True) -> str:
    """Format an exception into a useful display message.

    Args:
        e: The exception to format
        include_type: Whether to include the exception type name

    Returns:
        A non-empty, user-friendly error message

    Examples:
        >>> format_error_message(ValueError("invalid input"))
        'ValueError: invalid input'

        >>> format_error_message(ValueError("invalid input"), include_type=False)
        'invalid input'
    """
    error_str = str(e)
    error_type = type(e).__name__

    if error_str:
        if include_type and error_type not in error_str:
            return f"{error_type}: {error_str}"
        return error_str

    for exc_type, friendly_msg in FRIENDLY_MESSAGES.items():
        if isinstance(e, exc_type):
            return f"{error_type}: {friendly_msg}"

    return f"{error_type}: (no additional details)"


def format_error_details(e: VendettaError) -> list[str]:
    """Context lines for a vendetta error: import chain, then command output."""
    lines: list[str] = []

    if e.import_chain:
        lines.append("Import chain:")
        lines.extend(f"  {edge}" for edge in e.import_chain)

    if isinstance(e, SubmoduleOperationFailure) and e.output:
        lines.append(e.output)

    return lines


def escape_markup(value: object) -> str:
    """Escape a value for safe interpolation into Rich markup strings.

    Args:
        value: Any value to escape (will be converted to str)

    Returns:
        String safe for interpolation into Rich markup f-strings
    """
    return _escape_markup(str(value))
