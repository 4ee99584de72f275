from typing import List, Optional, Dict, Any
from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, selectinload
from projecthub.database import models
from projecthub.repositories.interfaces import IProjectRepository
from projecthub.services.exceptions import MemberAlreadyExistsError


class SqlalchemyProjectRepository(IProjectRepository):
    def __init__(self, db_session: Session):
        self.db = db_session

    def _query(self):
        return self.db.query(models.Project).options(selectinload(models.Project.member_associations))

    def create(self, project_model: models.Project) -> models.Project:
        self.db.add(project_model)
        self.db.commit()
        self.db.refresh(project_model)
        return project_model

    def find_by_id(self, project_id: str) -> Optional[models.Project]:
        return self._query().filter(models.Project.id == project_id).first()

    def find_by_name(self, name: str) -> Optional[models.Project]:
        return self._query().filter(models.Project.name == name).first()

    def list_all(self) -> List[models.Project]:
        return self._query().order_by(models.Project.created_at.asc(), models.Project.name.asc()).all()

    def list_by_owner(self, owner_id: str) -> List[models.Project]:
        return (
            self._query()
            .filter(models.Project.owner_id == owner_id)
            .order_by(models.Project.created_at.asc(), models.Project.name.asc())
            .all()
        )

    def list_by_member(self, user_id: str) -> List[models.Project]:
        return (
            self._query()
            .join(models.ProjectMember, models.ProjectMember.project_id == models.Project.id)
            .filter(models.ProjectMember.user_id == user_id)
            .order_by(models.Project.created_at.asc(), models.Project.name.asc())
            .all()
        )

    def update(self, project: models.Project, changes: Dict[str, Any]) -> models.Project:
        for field, value in changes.items():
            setattr(project, field, value)
        self.db.commit()
        self.db.refresh(project)
        return project

    def delete(self, project: models.Project) -> bool:
        if project:
            self.db.delete(project)
            self.db.commit()
            return True
        return False

    def add_member(self, project: models.Project, user: models.User) -> models.Project:
        next_position = (
            self.db.query(func.coalesce(func.max(models.ProjectMember.position), -1))
            .filter(models.ProjectMember.project_id == project.id)
            .scalar()
            + 1
        )
        project.member_associations.append(
            models.ProjectMember(project_id=project.id, user_id=user.id, position=next_position)
        )
        try:
            self.db.commit()
        except IntegrityError:
            # 조회와 저장 사이에 다른 요청이 같은 멤버를 먼저 추가한 경우
            self.db.rollback()
            raise MemberAlreadyExistsError(f"User '{user.id}' is already a member of project '{project.id}'.")
        self.db.refresh(project)
        return project
