from .role import Role, RoleInfo, ROLES, ROLE_INFO
from .user import User
from .project_member import ProjectMember, MemberStatus, JoinMethod
from .project import Project, ProjectStatus


__all__ = [
    "Role",
    "RoleInfo",
    "ROLES",
    "ROLE_INFO",
    "User",
    "ProjectMember",
    "MemberStatus",
    "JoinMethod",
    "Project",
    "ProjectStatus",
]
