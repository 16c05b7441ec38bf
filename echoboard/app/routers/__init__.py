from .users import router as user_router
from .projects import router as project_router
from .members import router as member_router

__all__ = [
    "user_router",
    "project_router",
    "member_router",
]
