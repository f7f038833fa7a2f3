"""
System API models.
"""

from typing import Any, Dict

from pydantic import BaseModel


class SystemStatus(BaseModel):
    """Service status"""

    status: str
    version: str
    uptime: float
    store: Dict[str, Any]
    engine: Dict[str, Any]
