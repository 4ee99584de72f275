from sqlalchemy import Column, Integer, String, DateTime, func
from sqlalchemy.orm import relationship
from ..database import Base
from ._ids import new_id

ROLE_ADMIN = "admin"
ROLE_USER = "user"


class User(Base):
    """
    시스템에 로그인하고 프로젝트를 소유하거나 멤버로 참여할 수 있는 사용자를 나타냅니다.
    role은 'admin' 또는 'user' 중 하나이며, token_version은 로그아웃 시 증가하여
    이전에 발급된 토큰을 무효화합니다.
    """
    __tablename__ = "users"
    id = Column(String(32), primary_key=True, default=new_id)
    username = Column(String, unique=True, nullable=False, index=True)
    password_hash = Column(String, nullable=False)
    role = Column(String, nullable=False, default=ROLE_USER)
    token_version = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime, server_default=func.now())

    owned_projects = relationship("Project", back_populates="owner")
    memberships = relationship("ProjectMember", back_populates="user", cascade="all, delete-orphan")

    @property
    def is_admin(self) -> bool:
        return self.role == ROLE_ADMIN
