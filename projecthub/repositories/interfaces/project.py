from abc import ABC, abstractmethod
from typing import List, Optional, Dict, Any
from projecthub.database import models


class IProjectRepository(ABC):
    @abstractmethod
    def create(self, project_model: models.Project) -> models.Project:
        """새로운 프로젝트를 데이터베이스에 생성합니다."""
        pass

    @abstractmethod
    def find_by_id(self, project_id: str) -> Optional[models.Project]:
        """고유 ID로 특정 프로젝트를 조회합니다."""
        pass

    @abstractmethod
    def find_by_name(self, name: str) -> Optional[models.Project]:
        """이름으로 특정 프로젝트를 조회합니다."""
        pass

    @abstractmethod
    def list_all(self) -> List[models.Project]:
        """모든 프로젝트의 목록을 조회합니다."""
        pass

    @abstractmethod
    def list_by_owner(self, owner_id: str) -> List[models.Project]:
        """특정 사용자가 소유한 프로젝트 목록을 조회합니다."""
        pass

    @abstractmethod
    def list_by_member(self, user_id: str) -> List[models.Project]:
        """특정 사용자가 멤버로 포함된 프로젝트 목록을 조회합니다."""
        pass

    @abstractmethod
    def update(self, project: models.Project, changes: Dict[str, Any]) -> models.Project:
        """
        프로젝트에 주어진 필드만 반영하고 저장합니다.

        Args:
            project: 수정할 프로젝트 모델.
            changes: 컬럼 이름과 새 값의 딕셔너리. 포함되지 않은 필드는 그대로 둡니다.
        """
        pass

    @abstractmethod
    def delete(self, project: models.Project) -> bool:
        """특정 프로젝트를 데이터베이스에서 삭제합니다."""
        pass

    @abstractmethod
    def add_member(self, project: models.Project, user: models.User) -> models.Project:
        """
        프로젝트 멤버 목록의 끝에 사용자를 추가하고 저장합니다.

        Raises:
            MemberAlreadyExistsError: 저장 시점에 이미 멤버로 등록되어 있을 때.
        """
        pass
