from .user import User
from .project import Project
from .association import ProjectMember

__all__ = ["User", "Project", "ProjectMember"]
