import logging
from datetime import date
from typing import Any, Dict, List, Optional

from projecthub.database import models
from projecthub.repositories.interfaces import IProjectRepository, IUserRepository
from projecthub.validation import UPDATABLE_PROJECT_FIELDS, is_valid_id, normalize_id
from projecthub.services.exceptions import (
    ValidationError, ProjectNotFoundError, UserNotFoundError,
    ProjectAlreadyExistsError, MemberAlreadyExistsError, NotProjectOwnerError,
)

logger = logging.getLogger(__name__)


def _isoformat(value) -> Optional[str]:
    return value.isoformat() if value is not None else None


def project_to_dict(project: models.Project) -> Dict[str, Any]:
    """프로젝트 모델을 API 응답 형식의 딕셔너리로 변환합니다."""
    return {
        "id": project.id,
        "name": project.name,
        "description": project.description,
        "startDate": _isoformat(project.start_date),
        "endDate": _isoformat(project.end_date),
        "status": project.status,
        "totalHours": project.total_hours,
        "owner": project.owner_id,
        "members": list(project.member_ids),
        "createdAt": _isoformat(project.created_at),
        "updatedAt": _isoformat(project.updated_at),
    }


def _as_date(field: str, value) -> date:
    if isinstance(value, date):
        return value
    try:
        return date.fromisoformat(str(value).strip())
    except ValueError:
        raise ValidationError(
            f"'{field}' must be an ISO date (YYYY-MM-DD).",
            [{"field": field, "message": "Invalid date format"}],
        )


class ProjectService:
    """프로젝트 생성, 조회, 수정, 삭제와 멤버 관리를 담당합니다."""

    def __init__(self, project_repo: IProjectRepository, user_repo: IUserRepository, require_owner_on_delete: bool = False):
        """
        ProjectService를 초기화합니다.

        Args:
            project_repo: 프로젝트 데이터에 접근하기 위한 리포지토리.
            user_repo: 멤버 추가 시 대상 사용자를 확인하기 위한 리포지토리.
            require_owner_on_delete: True이면 소유자만 프로젝트를 삭제할 수 있습니다.
                기본값 False는 누구나 삭제할 수 있는 기존 동작입니다.
        """
        self.project_repo = project_repo
        self.user_repo = user_repo
        self.require_owner_on_delete = require_owner_on_delete

    # ------------------------------------------------------------------
    ## 내부 헬퍼
    # ------------------------------------------------------------------

    @staticmethod
    def _checked_id(value, field: str) -> str:
        if not is_valid_id(value):
            raise ValidationError(f"Invalid {field}.", [{"field": field, "message": "Malformed identifier"}])
        return normalize_id(value)

    def _load_project(self, project_id: str) -> models.Project:
        project = self.project_repo.find_by_id(project_id)
        if not project:
            raise ProjectNotFoundError(f"Project with id '{project_id}' not found.")
        return project

    @staticmethod
    def _ensure_owner(project: models.Project, caller_id: str):
        if project.owner_id != caller_id:
            raise NotProjectOwnerError("Only the owner of this project can perform this action.")

    # ------------------------------------------------------------------
    ## 프로젝트 CRUD
    # ------------------------------------------------------------------

    def create_project(self, name: str, description: str, start_date, end_date, caller_id: str) -> Dict[str, Any]:
        """
        새로운 프로젝트를 생성합니다. 호출자가 소유자가 됩니다.

        이름 중복 검사와 생성은 하나의 트랜잭션이 아니므로, 동시에 들어온 요청이
        같은 이름의 프로젝트를 둘 다 만들 수 있습니다.

        Returns:
            생성된 프로젝트의 딕셔너리.

        Raises:
            ValidationError: 필수 값 중 하나라도 비어 있을 때.
            ProjectAlreadyExistsError: 동일한 이름의 프로젝트가 이미 존재할 때.
        """
        fields = {"name": name, "description": description, "startDate": start_date, "endDate": end_date}
        blank = [key for key, value in fields.items() if value is None or str(value).strip() == ""]
        if blank:
            raise ValidationError(
                "All fields are required.",
                [{"field": key, "message": "Field is required"} for key in blank],
            )

        name = name.strip()
        if self.project_repo.find_by_name(name):
            raise ProjectAlreadyExistsError(f"Project with name '{name}' already exists.")

        new_project = models.Project(
            name=name,
            description=description.strip(),
            start_date=_as_date("startDate", start_date),
            end_date=_as_date("endDate", end_date),
            owner_id=caller_id,
            total_hours=0,
        )
        created_project = self.project_repo.create(new_project)
        logger.info("Project '%s' (%s) created by user %s", created_project.name, created_project.id, caller_id)
        return project_to_dict(created_project)

    def get_project_by_id(self, project_id: str) -> Dict[str, Any]:
        """
        ID로 특정 프로젝트를 조회합니다. 인증된 사용자라면 누구나 조회할 수 있습니다.

        Raises:
            ValidationError: ID 형식이 올바르지 않을 때. (조회 전에 검사)
            ProjectNotFoundError: 해당 ID의 프로젝트를 찾을 수 없을 때.
        """
        project_id = self._checked_id(project_id, "projectId")
        return project_to_dict(self._load_project(project_id))

    def get_projects_of_user(self, caller_id: str) -> List[Dict[str, Any]]:
        """호출자가 소유한 프로젝트 목록을 조회합니다. 없으면 빈 리스트를 반환합니다."""
        return [project_to_dict(p) for p in self.project_repo.list_by_owner(caller_id)]

    def get_all_projects(self) -> List[Dict[str, Any]]:
        """모든 프로젝트의 목록을 조회합니다. 관리자 제한은 라우팅 계층에서 적용됩니다."""
        return [project_to_dict(p) for p in self.project_repo.list_all()]

    def update_project(self, project_id: str, patch: Dict[str, Any], caller_id: str) -> Dict[str, Any]:
        """
        프로젝트의 일부 필드를 수정합니다. patch에 포함된 필드만 반영됩니다.

        Args:
            project_id: 수정할 프로젝트의 ID.
            patch: name, description, start_date, end_date, status 중 변경할 값.
            caller_id: 요청한 사용자의 ID. 소유자여야 합니다.

        Raises:
            ValidationError: ID 형식이 잘못되었거나 변경할 값이 하나도 없을 때.
            ProjectNotFoundError: 해당 ID의 프로젝트를 찾을 수 없을 때.
            NotProjectOwnerError: 호출자가 프로젝트 소유자가 아닐 때.
            ProjectAlreadyExistsError: 다른 프로젝트가 이미 사용 중인 이름으로 바꾸려 할 때.
        """
        project_id = self._checked_id(project_id, "projectId")

        changes = {}
        for field in UPDATABLE_PROJECT_FIELDS:
            value = (patch or {}).get(field)
            if isinstance(value, str):
                value = value.strip()
            if value is None or value == "":
                continue
            changes[field] = value
        if not changes:
            raise ValidationError("Enter some details to change/update.")
        for field, label in (("start_date", "startDate"), ("end_date", "endDate")):
            if field in changes:
                changes[field] = _as_date(label, changes[field])

        project = self._load_project(project_id)
        self._ensure_owner(project, caller_id)

        new_name = changes.get("name")
        if new_name is not None and new_name != project.name:
            existing = self.project_repo.find_by_name(new_name)
            if existing and existing.id != project.id:
                raise ProjectAlreadyExistsError(f"Project with name '{new_name}' already exists.")

        updated_project = self.project_repo.update(project, changes)
        logger.info("Project %s updated by user %s (fields: %s)", project_id, caller_id, ", ".join(sorted(changes)))
        return project_to_dict(updated_project)

    def delete_project(self, project_id: str, caller_id: Optional[str] = None) -> Dict[str, Any]:
        """
        프로젝트를 삭제하고, 삭제 직전 상태를 반환합니다.

        소유자 확인은 require_owner_on_delete 설정에 따릅니다. 기본값에서는 소유자 확인 없이 삭제합니다.

        Raises:
            ValidationError: ID 형식이 올바르지 않을 때.
            ProjectNotFoundError: 해당 ID의 프로젝트를 찾을 수 없을 때.
            NotProjectOwnerError: 소유자 확인이 켜져 있고 호출자가 소유자가 아닐 때.
        """
        project_id = self._checked_id(project_id, "projectId")
        project = self._load_project(project_id)
        if self.require_owner_on_delete:
            self._ensure_owner(project, caller_id)

        snapshot = project_to_dict(project)
        self.project_repo.delete(project)
        logger.info("Project %s deleted by user %s", project_id, caller_id)
        return snapshot

    # ------------------------------------------------------------------
    ## 멤버 관리
    # ------------------------------------------------------------------

    def add_member_to_project(self, project_id: str, target_user_id: str, caller_id: str) -> Dict[str, Any]:
        """
        프로젝트에 멤버를 추가합니다. 소유자만 추가할 수 있습니다.

        Raises:
            ValidationError: 프로젝트 ID 또는 사용자 ID 형식이 올바르지 않을 때.
            ProjectNotFoundError: 해당 ID의 프로젝트를 찾을 수 없을 때.
            UserNotFoundError: 추가할 사용자를 찾을 수 없을 때.
            NotProjectOwnerError: 호출자가 프로젝트 소유자가 아닐 때.
            MemberAlreadyExistsError: 사용자가 이미 멤버일 때.
        """
        project_id = self._checked_id(project_id, "projectId")
        target_user_id = self._checked_id(target_user_id, "userId")

        project = self._load_project(project_id)
        user = self.user_repo.find_by_id(target_user_id)
        if not user:
            raise UserNotFoundError(f"User with id '{target_user_id}' not found.")

        self._ensure_owner(project, caller_id)
        if target_user_id in project.member_ids:
            raise MemberAlreadyExistsError("User is already a member of this project.")

        updated_project = self.project_repo.add_member(project, user)
        logger.info("User %s added to project %s by user %s", target_user_id, project_id, caller_id)
        return project_to_dict(updated_project)

    def get_projects_user_is_member_of(self, user_id: str) -> List[Dict[str, Any]]:
        """
        사용자가 멤버로 포함된 프로젝트 목록을 조회합니다. 없으면 빈 리스트를 반환합니다.

        Raises:
            ValidationError: 사용자 ID 형식이 올바르지 않을 때.
            UserNotFoundError: 해당 ID의 사용자를 찾을 수 없을 때.
        """
        user_id = self._checked_id(user_id, "userId")
        if not self.user_repo.find_by_id(user_id):
            raise UserNotFoundError(f"User with id '{user_id}' not found.")
        return [project_to_dict(p) for p in self.project_repo.list_by_member(user_id)]
