"""Domain models and DTOs."""

from src.domain.create_models import LoginRequest, TaskCreate, UserCreate
from src.domain.task import Task, TaskPriority, TaskStatus
from src.domain.update_models import ProfileUpdate, TaskUpdate
from src.domain.user import AuthResult, RequestContext, User


__all__ = [
    "AuthResult",
    "LoginRequest",
    "ProfileUpdate",
    "RequestContext",
    "Task",
    "TaskCreate",
    "TaskPriority",
    "TaskStatus",
    "TaskUpdate",
    "User",
    "UserCreate",
]
