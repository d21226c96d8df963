"""
Utility functions for the application.
"""
from typing import Any, Dict, List, Optional
from datetime import datetime, timezone


def utcnow() -> datetime:
    """Current UTC time as a naive datetime (the storage convention)."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def format_message(message: str) -> Dict[str, Any]:
    """Format a plain message response."""
    return {"message": message}


def format_error(message: str, details: Optional[List[Any]] = None) -> Dict[str, Any]:
    """Format error response."""
    response = {"message": message}
    if details:
        response["errors"] = details
    return response


def describe_validation_errors(errors: List[Dict[str, Any]]) -> str:
    """Build a one-line message from pydantic validation errors."""
    if not errors:
        return "Invalid input"
    first = errors[0]
    # drop the leading "body"/"path"/"query" segment
    loc = [str(part) for part in first.get("loc", ())[1:]]
    field = ".".join(loc)
    msg = first.get("msg", "Invalid value")
    return f"{field}: {msg}" if field else msg
