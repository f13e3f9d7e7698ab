"""
Record shapes for action history.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, List, Optional


@dataclass(frozen=True)
class ActionRecord:
    id: Optional[str]  # assigned by the store
    user_id: str
    created_at: datetime
    payload: Dict[str, Any]


@dataclass(frozen=True)
class ResponseItem:
    created_at: datetime
    payload: Dict[str, Any]
    save_interval: int


@dataclass(frozen=True)
class ActionPage:
    """One page of a windowed listing."""
    items: List[ResponseItem]
    count: int
