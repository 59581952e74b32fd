"""
Shared Pydantic base classes
"""
from typing import Any, Dict, Iterable, List

from pydantic import BaseModel
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """camelCase on the wire, snake_case in Python; both accepted on input"""

    class Config:
        alias_generator = to_camel
        populate_by_name = True
        from_attributes = True


def error_details(errors: Iterable[Dict[str, Any]], skip=()) -> List[Dict[str, str]]:
    """
    Flatten pydantic/FastAPI errors into ``{field, message}`` pairs.

    ``skip`` drops location prefixes such as ``body`` or ``query``.
    """
    details = []
    for error in errors:
        parts = [str(part) for part in error.get("loc", ()) if part not in skip]
        details.append({"field": ".".join(parts) or "body", "message": error["msg"]})
    return details
