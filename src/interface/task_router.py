"""Task routes. Every route requires a bearer token."""

from typing import Any

from fastapi import APIRouter, Depends, Query, status

from src.domain.create_models import TaskCreate
from src.domain.update_models import TaskUpdate
from src.domain.user import RequestContext
from src.interface.auth_guard import require_user
from src.services import task_service


router = APIRouter(prefix="/tasks", tags=["tasks"])


@router.get("")
async def list_tasks(
    *,
    task_status: str | None = Query(default=None, alias="status"),
    priority: str | None = None,
    search: str | None = None,
    sort_by: str | None = Query(default=None, alias="sortBy"),
    order: str | None = None,
    ctx: RequestContext = Depends(require_user),
) -> dict[str, Any]:
    """List the caller's tasks, optionally filtered, searched, and sorted."""
    listing = await task_service.list_tasks(
        ctx=ctx,
        status=task_status,
        priority=priority,
        search=search,
        sort_by=sort_by,
        order=order,
    )
    return {
        "success": True,
        "count": listing.count,
        "data": [task.to_public() for task in listing.tasks],
    }


@router.get("/{task_id}")
async def get_task(task_id: str, ctx: RequestContext = Depends(require_user)) -> dict[str, Any]:
    """Get a single task owned by the caller."""
    task = await task_service.get_task(ctx=ctx, task_id=task_id)
    return {"success": True, "data": task.to_public()}


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_task(payload: TaskCreate, ctx: RequestContext = Depends(require_user)) -> dict[str, Any]:
    """Create a task owned by the caller."""
    task = await task_service.create_task(ctx=ctx, payload=payload)
    return {"success": True, "data": task.to_public()}


@router.put("/{task_id}")
async def update_task(
    task_id: str, payload: TaskUpdate, ctx: RequestContext = Depends(require_user)
) -> dict[str, Any]:
    """Apply a partial update to a task owned by the caller."""
    task = await task_service.update_task(ctx=ctx, task_id=task_id, payload=payload)
    return {"success": True, "data": task.to_public()}


@router.delete("/{task_id}")
async def delete_task(task_id: str, ctx: RequestContext = Depends(require_user)) -> dict[str, Any]:
    """Permanently delete a task owned by the caller."""
    await task_service.delete_task(ctx=ctx, task_id=task_id)
    return {"success": True, "message": "Task deleted successfully"}
