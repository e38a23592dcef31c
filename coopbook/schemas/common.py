from pydantic import BaseModel
from typing import Any, Optional


class OperationResult(BaseModel):
    """Structured outcome of an engine mutation. Domain errors never raise past it."""
    success: bool
    message: str
    error: Optional[str] = None
    data: Optional[Any] = None
