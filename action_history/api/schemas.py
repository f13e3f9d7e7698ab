"""
Wire models for the action history API. Field names are camelCase on the wire.
"""

from pydantic import BaseModel, ConfigDict, Field
from typing import Optional, List, Dict, Any
from datetime import datetime

from ..core.schema import ResponseItem


class CreateActionRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    action: Dict[str, Any]
    action_created_at: datetime = Field(alias="actionCreatedAt")
    # Accepted for compatibility; the path userId owns the record
    user_id: Optional[str] = Field(default=None, alias="userId")


class ActionResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    action_created_at: datetime = Field(alias="actionCreatedAt")
    save_interval: int = Field(alias="saveInterval")
    action: Dict[str, Any]

    @classmethod
    def from_item(cls, item: ResponseItem) -> "ActionResponse":
        return cls(
            action_created_at=item.created_at,
            save_interval=item.save_interval,
            action=item.payload,
        )


class ActionsListResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    actions_list: List[ActionResponse] = Field(default_factory=list, alias="actionsList")
    total_count: int = Field(alias="totalCount")
    save_interval: int = Field(alias="saveInterval")


class DeleteActionsResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    deleted_count: int = Field(alias="deletedCount")
    save_interval: int = Field(alias="saveInterval")


class HealthResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    status: str
    version: str
    db_health: bool = Field(alias="dbHealth")
    save_interval: int = Field(alias="saveInterval")


class Problem(BaseModel):
    type: str = "about:blank"
    title: str
    status: int
    detail: str
