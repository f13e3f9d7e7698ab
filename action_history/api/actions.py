"""
Action history endpoints.

Self-service paths (/v1/actions/{userId}) require the caller's identity token
to name the same user. The operator listing (/v1/actions) has no ownership
filter.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Header, Query, Request

from ..core.access import AccessGuard
from ..core.query import QueryEngine
from ..core.retention import RetentionSweeper
from .schemas import (
    ActionResponse,
    ActionsListResponse,
    CreateActionRequest,
    DeleteActionsResponse,
    Problem,
)

PROBLEM_RESPONSES = {
    status: {"model": Problem, "content": {"application/problem+json": {}}}
    for status in (400, 401, 403, 500)
}

router = APIRouter(responses=PROBLEM_RESPONSES)


def get_engine(request: Request) -> QueryEngine:
    return request.app.state.engine


def get_sweeper(request: Request) -> RetentionSweeper:
    return request.app.state.sweeper


def get_guard(request: Request) -> AccessGuard:
    return request.app.state.guard


def _list_response(page, save_interval: int) -> ActionsListResponse:
    return ActionsListResponse(
        actions_list=[ActionResponse.from_item(item) for item in page.items],
        total_count=page.count,
        save_interval=save_interval,
    )


@router.post("/{user_id}", response_model=ActionResponse)
async def create_action(
    user_id: str,
    body: CreateActionRequest,
    x_auth_identity: Optional[str] = Header(None),
    x_request_id: Optional[str] = Header(None),
    engine: QueryEngine = Depends(get_engine),
    guard: AccessGuard = Depends(get_guard),
):
    """Store one action for the user."""
    guard.validate_user_id(user_id, x_auth_identity)
    item = await engine.create(user_id, body.action, body.action_created_at, request_id=x_request_id)
    return ActionResponse.from_item(item)


@router.get("/{user_id}", response_model=ActionsListResponse)
async def get_actions(
    user_id: str,
    page: int = Query(1),
    page_size: Optional[int] = Query(None, alias="pageSize"),
    show_last_hours: Optional[int] = Query(None, alias="showLastHours"),
    x_auth_identity: Optional[str] = Header(None),
    x_request_id: Optional[str] = Header(None),
    engine: QueryEngine = Depends(get_engine),
    guard: AccessGuard = Depends(get_guard),
):
    """List the user's own actions, newest first, within the last showLastHours."""
    guard.validate_user_id(user_id, x_auth_identity)
    config = engine.config
    result = await engine.list_for_user(
        user_id,
        page,
        page_size if page_size is not None else config.default_page_size,
        show_last_hours if show_last_hours is not None else config.save_interval,
        request_id=x_request_id,
    )
    return _list_response(result, config.save_interval)


@router.delete("/{user_id}", response_model=DeleteActionsResponse)
async def delete_actions(
    user_id: str,
    delete_after_hours: int = Query(..., alias="deleteAfterHours"),
    x_auth_identity: Optional[str] = Header(None),
    x_request_id: Optional[str] = Header(None),
    sweeper: RetentionSweeper = Depends(get_sweeper),
    guard: AccessGuard = Depends(get_guard),
):
    """Delete the user's actions older than deleteAfterHours."""
    guard.validate_user_id(user_id, x_auth_identity)
    deleted = await sweeper.delete_for_user(user_id, delete_after_hours, request_id=x_request_id)
    return DeleteActionsResponse(deleted_count=deleted, save_interval=sweeper.config.save_interval)


@router.get("", response_model=ActionsListResponse)
async def list_actions(
    page: int = Query(1),
    page_size: Optional[int] = Query(None, alias="pageSize"),
    show_last_hours: Optional[int] = Query(None, alias="showLastHours"),
    x_request_id: Optional[str] = Header(None),
    engine: QueryEngine = Depends(get_engine),
):
    """Operator view: actions of all users."""
    config = engine.config
    result = await engine.list_all(
        page,
        page_size if page_size is not None else config.default_page_size,
        show_last_hours if show_last_hours is not None else config.save_interval,
        request_id=x_request_id,
    )
    return _list_response(result, config.save_interval)
