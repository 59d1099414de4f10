from src.services import (
    task_query,
    task_service,
    user_service,
)


__all__ = [
    "task_query",
    "task_service",
    "user_service",
]
