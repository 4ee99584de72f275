from abc import ABC, abstractmethod
from typing import Optional
from projecthub.database import models


class IUserRepository(ABC):
    @abstractmethod
    def create(self, user_model: models.User) -> models.User:
        """새로운 사용자를 데이터베이스에 생성합니다."""
        pass

    @abstractmethod
    def find_by_id(self, user_id: str) -> Optional[models.User]:
        """고유 ID로 특정 사용자를 조회합니다."""
        pass

    @abstractmethod
    def find_by_username(self, username: str) -> Optional[models.User]:
        """사용자 이름으로 특정 사용자를 조회합니다."""
        pass

    @abstractmethod
    def bump_token_version(self, user: models.User) -> models.User:
        """사용자의 토큰 버전을 1 증가시켜 기존에 발급된 토큰을 무효화합니다."""
        pass
