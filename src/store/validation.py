"""
Validation Utilities

Input checks shared by the comment bridge and the participant service.
"""

from typing import Dict, Optional, Tuple, Union

from .errors import ValidationError

# Comment validation constants
MIN_COMMENT_LENGTH = 1
MAX_COMMENT_LENGTH = 500
MAX_HANDLE_LENGTH = 50


def validate_comment_content(content: str) -> Tuple[bool, Optional[str]]:
    """
    Validate comment content.

    Args:
        content: The comment text to validate

    Returns:
        tuple: (is_valid, error_message)
    """
    if not isinstance(content, str):
        return False, "Comment content must be a string"

    if len(content) < MIN_COMMENT_LENGTH:
        return False, "Comment content cannot be empty"

    if len(content) > MAX_COMMENT_LENGTH:
        return (
            False,
            f"Comment content too long (max {MAX_COMMENT_LENGTH} characters)",
        )

    return True, None


def validate_user_handle(user_handle: str) -> Tuple[bool, Optional[str]]:
    """
    Validate a caller-supplied user handle.

    Args:
        user_handle: The handle to validate

    Returns:
        tuple: (is_valid, error_message)
    """
    if not isinstance(user_handle, str) or not user_handle:
        return False, "User handle cannot be empty"

    if len(user_handle) > MAX_HANDLE_LENGTH:
        return (
            False,
            f"User handle too long (max {MAX_HANDLE_LENGTH} characters)",
        )

    return True, None


def coerce_event_id(event_id: Union[int, str]) -> int:
    """
    Convert an event id given as int or decimal string to int.

    Raises:
        ValidationError: If the value is not an integer
    """
    if isinstance(event_id, bool):
        raise ValidationError({"eventId": "Invalid Event ID"})
    if isinstance(event_id, int):
        return event_id
    if isinstance(event_id, str):
        try:
            return int(event_id.strip())
        except ValueError:
            raise ValidationError({"eventId": "Invalid Event ID"}) from None
    raise ValidationError({"eventId": "Invalid Event ID"})


def check_comment_input(user_handle: str, content: str) -> None:
    """
    Validate both fields of a new comment and collect every problem.

    Raises:
        ValidationError: With one entry per invalid field
    """
    field_errors: Dict[str, str] = {}

    ok, error = validate_comment_content(content)
    if not ok:
        field_errors["content"] = error

    ok, error = validate_user_handle(user_handle)
    if not ok:
        field_errors["userHandle"] = error

    if field_errors:
        raise ValidationError(field_errors)
