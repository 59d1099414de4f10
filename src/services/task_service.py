"""Task service: owner-scoped CRUD over the tasks collection."""

import logging
from dataclasses import dataclass
from typing import Any

from src.core import db_client
from src.core.config import constants
from src.core.errors import ForbiddenError, InternalError, NotFoundError
from src.core.logging import log_with_user_context, span
from src.domain.create_models import TaskCreate
from src.domain.task import Task
from src.domain.update_models import TaskUpdate
from src.domain.user import RequestContext
from src.services.task_query import build_task_query


logger = logging.getLogger(__name__)

TASKS = constants.TASKS_COLLECTION


@dataclass(frozen=True)
class TaskListing:
    """Every task matching a list query, with the match count."""

    count: int
    tasks: list[Task]


async def list_tasks(
    *,
    ctx: RequestContext,
    status: str | None = None,
    priority: str | None = None,
    search: str | None = None,
    sort_by: str | None = None,
    order: str | None = None,
) -> TaskListing:
    """List the caller's tasks, filtered and sorted.

    Raises:
        InternalError: If the store query fails
    """
    with span("task_service.list_tasks"):
        query = build_task_query(
            owner_id=ctx.user_id,
            status=status,
            priority=priority,
            search=search,
            sort_by=sort_by,
            order=order,
        )

        try:
            records = await db_client.list_records(collection=TASKS, filters=query.filters, sort=query.sort)
        except db_client.DatabaseError as e:
            logger.exception("Get tasks error", extra={"user_id": ctx.user_id})
            raise InternalError("Server error fetching tasks") from e

        tasks = [Task.model_validate(record) for record in records]
        return TaskListing(count=len(tasks), tasks=tasks)


async def _get_owned_record(*, ctx: RequestContext, task_id: str, action: str) -> dict[str, Any]:
    """Fetch a task document, checking existence before ownership.

    Raises:
        NotFoundError: If no task has this id
        ForbiddenError: If the task belongs to another user
    """
    try:
        record = await db_client.get_record(collection=TASKS, record_id=task_id)
    except db_client.RecordNotFoundError as e:
        raise NotFoundError("Task not found") from e

    if record.get("owner") != ctx.user_id:
        log_with_user_context(logger, "warning", "Task ownership mismatch", user_id=ctx.user_id, task_id=task_id)
        raise ForbiddenError(f"Not authorized to {action} this task")

    return record


async def get_task(*, ctx: RequestContext, task_id: str) -> Task:
    """Get one of the caller's tasks.

    Raises:
        NotFoundError: If no task has this id
        ForbiddenError: If the task belongs to another user
        InternalError: If the store fails
    """
    with span("task_service.get_task"):
        try:
            record = await _get_owned_record(ctx=ctx, task_id=task_id, action="access")
        except db_client.DatabaseError as e:
            logger.exception("Get task error", extra={"user_id": ctx.user_id, "task_id": task_id})
            raise InternalError("Server error fetching task") from e

        return Task.model_validate(record)


async def create_task(*, ctx: RequestContext, payload: TaskCreate) -> Task:
    """Create a task owned by the caller.

    Raises:
        InternalError: If the store fails
    """
    with span("task_service.create_task"):
        data = payload.model_dump(mode="json", by_alias=True)
        data["owner"] = ctx.user_id

        try:
            record = await db_client.create_record(collection=TASKS, data=data)
        except db_client.DatabaseError as e:
            logger.exception("Create task error", extra={"user_id": ctx.user_id})
            raise InternalError("Server error creating task") from e

        log_with_user_context(logger, "info", "Task created", user_id=ctx.user_id, task_id=record["id"])
        return Task.model_validate(record)


async def update_task(*, ctx: RequestContext, task_id: str, payload: TaskUpdate) -> Task:
    """Merge the fields present in ``payload`` into one of the caller's tasks.

    The owner is never part of the merge.

    Raises:
        NotFoundError: If no task has this id, including one deleted mid-update
        ForbiddenError: If the task belongs to another user
        InternalError: If the store fails
    """
    with span("task_service.update_task"):
        changes = payload.changes()
        changes.pop("owner", None)

        try:
            await _get_owned_record(ctx=ctx, task_id=task_id, action="update")
            record = await db_client.update_record(collection=TASKS, record_id=task_id, data=changes)
        except db_client.RecordNotFoundError as e:
            raise NotFoundError("Task not found") from e
        except db_client.DatabaseError as e:
            logger.exception("Update task error", extra={"user_id": ctx.user_id, "task_id": task_id})
            raise InternalError("Server error updating task") from e

        log_with_user_context(
            logger, "info", "Task updated", user_id=ctx.user_id, task_id=task_id, fields=sorted(changes)
        )
        return Task.model_validate(record)


async def delete_task(*, ctx: RequestContext, task_id: str) -> None:
    """Permanently delete one of the caller's tasks.

    Raises:
        NotFoundError: If no task has this id, including one already deleted
        ForbiddenError: If the task belongs to another user
        InternalError: If the store fails
    """
    with span("task_service.delete_task"):
        try:
            await _get_owned_record(ctx=ctx, task_id=task_id, action="delete")
            await db_client.delete_record(collection=TASKS, record_id=task_id)
        except db_client.RecordNotFoundError as e:
            raise NotFoundError("Task not found") from e
        except db_client.DatabaseError as e:
            logger.exception("Delete task error", extra={"user_id": ctx.user_id, "task_id": task_id})
            raise InternalError("Server error deleting task") from e

        log_with_user_context(logger, "info", "Task deleted", user_id=ctx.user_id, task_id=task_id)
