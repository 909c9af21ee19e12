from typing import Any, Dict, List, Optional, Sequence
from pydantic import BaseModel, Field

VALUE_ERROR_PREFIX = "Value error, "


class ApiResponse(BaseModel):
    """Envelope shared by every JSON endpoint"""
    success: bool
    data: Optional[Any] = None
    error: Optional[str] = Field(None, description="Short error label")
    message: Optional[str] = Field(None, description="Human readable detail")


def first_error_message(errors: Sequence[Dict[str, Any]]) -> str:
    """Render the first pydantic error as a single user-facing message"""
    if not errors:
        return "Invalid request"

    error = errors[0]
    message = str(error.get("msg", "Invalid value"))
    if message.startswith(VALUE_ERROR_PREFIX):
        return message[len(VALUE_ERROR_PREFIX):]

    loc: List[str] = [str(part) for part in error.get("loc", ()) if part not in ("body", "query", "path")]
    if loc:
        return f"{'.'.join(loc)}: {message}"
    return message
