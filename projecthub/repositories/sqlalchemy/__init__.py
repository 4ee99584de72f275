from .sqlalchemy_project_repository import SqlalchemyProjectRepository
from .sqlalchemy_user_repository import SqlalchemyUserRepository

__all__ = ["SqlalchemyProjectRepository", "SqlalchemyUserRepository"]
