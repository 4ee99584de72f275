from .project import IProjectRepository
from .user import IUserRepository

__all__ = ["IProjectRepository", "IUserRepository"]
