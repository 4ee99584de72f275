from sqlalchemy import Column, Date, DateTime, ForeignKey, Integer, String, Text, func
from sqlalchemy.orm import relationship
from ..database import Base
from ._ids import new_id


class Project(Base):
    """
    사용자가 생성하고 관리하는 프로젝트를 나타냅니다.
    owner는 생성자이며 변경되지 않습니다. 멤버는 ProjectMember 연관 테이블을 통해
    추가된 순서대로 유지됩니다.

    name은 서비스 계층의 조회 후 생성(check-then-create)으로만 중복을 막습니다.
    DB 유니크 제약은 두지 않습니다.
    """
    __tablename__ = "projects"
    id = Column(String(32), primary_key=True, default=new_id)
    name = Column(String, nullable=False, index=True)
    description = Column(Text, nullable=False)
    start_date = Column(Date, nullable=False)
    end_date = Column(Date, nullable=False)
    status = Column(String, nullable=True)
    total_hours = Column(Integer, nullable=False, default=0)
    owner_id = Column(String(32), ForeignKey("users.id"), nullable=False, index=True)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    owner = relationship("User", back_populates="owned_projects")
    member_associations = relationship(
        "ProjectMember",
        back_populates="project",
        cascade="all, delete-orphan",
        order_by="ProjectMember.position",
    )

    @property
    def member_ids(self):
        return [assoc.user_id for assoc in self.member_associations]
