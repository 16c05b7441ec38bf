from .user import UserFactory
from .project import ProjectFactory, ProjectMemberFactory

__all__ = [
    "UserFactory",
    "ProjectFactory",
    "ProjectMemberFactory",
]
