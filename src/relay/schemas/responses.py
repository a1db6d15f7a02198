"""
Response Schema Definitions

Contains functions for creating frames the relay sends back to the
originating client.
"""

from typing import Any, Dict

from .events import ERROR


def create_error_response(
    error_code: str,
    message: str,
) -> Dict[str, Any]:
    """
    Create an error frame for a rejected client frame.

    Args:
        error_code: Machine-readable error code
        message: Error message text

    Returns:
        dict: Error response
    """
    return {
        "type": ERROR,
        "data": {
            "error_code": error_code,
            "message": message,
        },
    }
