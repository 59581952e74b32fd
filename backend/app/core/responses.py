"""
Uniform API envelope: {success, data?, message?, pagination?, error?}
"""
from typing import Any, Dict, Optional


def envelope(
    data: Any = None,
    message: Optional[str] = None,
    pagination: Any = None,
) -> Dict[str, Any]:
    """Successful response body; empty keys are left out"""
    body: Dict[str, Any] = {"success": True}
    if message is not None:
        body["message"] = message
    if data is not None:
        body["data"] = data
    if pagination is not None:
        body["pagination"] = pagination
    return body


def error_body(error: Dict[str, Any]) -> Dict[str, Any]:
    return {"success": False, "error": error}
