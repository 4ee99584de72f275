from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, func
from sqlalchemy.orm import relationship
from ..database import Base


class ProjectMember(Base):
    """
    프로젝트(Project)와 멤버 사용자(User) 사이의 다대다(many-to-many) 관계를
    연결하는 연관 테이블(Association Table) 모델입니다.
    (project_id, user_id) 복합 기본 키로 한 사용자가 같은 프로젝트에 두 번 들어가지 않습니다.
    position은 멤버가 추가된 순서를 보존합니다.
    """
    __tablename__ = "project_members"
    project_id = Column(String(32), ForeignKey("projects.id"), primary_key=True)
    user_id = Column(String(32), ForeignKey("users.id"), primary_key=True)
    position = Column(Integer, nullable=False, default=0)
    added_at = Column(DateTime, server_default=func.now())

    project = relationship("Project", back_populates="member_associations")
    user = relationship("User", back_populates="memberships")
