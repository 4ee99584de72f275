import logging
from typing import Any, Dict

from projecthub.database import models
from projecthub.database.models.user import ROLE_USER
from projecthub.repositories.interfaces import IUserRepository
from projecthub.services.auth_service import Identity
from projecthub.services.security import PasswordHasher, TokenSigner
from projecthub.services.exceptions import (
    AuthenticationError, UserAlreadyExistsError, UserNotFoundError,
)

logger = logging.getLogger(__name__)


def user_to_dict(user: models.User) -> Dict[str, Any]:
    """사용자 모델을 응답용 딕셔너리로 변환합니다. (비밀번호 해시 제외)"""
    return {
        "id": user.id,
        "username": user.username,
        "role": user.role,
        "createdAt": user.created_at.isoformat() if user.created_at else None,
    }


class UserService:
    """회원 가입, 로그인, 로그아웃을 담당합니다."""

    def __init__(self, user_repo: IUserRepository, password_hasher: PasswordHasher, token_signer: TokenSigner):
        self.user_repo = user_repo
        self.password_hasher = password_hasher
        self.token_signer = token_signer

    def register(self, username: str, password: str) -> Dict[str, Any]:
        """
        새로운 사용자를 생성합니다. 비밀번호는 해시하여 저장합니다.

        Raises:
            UserAlreadyExistsError: 동일한 이름의 사용자가 이미 존재할 때.
        """
        if self.user_repo.find_by_username(username):
            raise UserAlreadyExistsError(f"User with username '{username}' already exists.")

        new_user = models.User(
            username=username,
            password_hash=self.password_hasher.hash(password),
            role=ROLE_USER,
            token_version=0,
        )
        created_user = self.user_repo.create(new_user)
        logger.info("User '%s' registered (%s)", created_user.username, created_user.id)
        return user_to_dict(created_user)

    def login(self, username: str, password: str) -> Dict[str, Any]:
        """
        자격증명을 검증하고, 성공 시 액세스 토큰을 발급합니다.

        Returns:
            {"accessToken": ..., "user": {...}}

        Raises:
            AuthenticationError: 사용자가 없거나 비밀번호가 일치하지 않을 때.
        """
        user = self.user_repo.find_by_username(username)
        if not user or not self.password_hasher.verify(user.password_hash, password):
            logger.warning("Failed login attempt for '%s'", username)
            raise AuthenticationError("Invalid username or password.")

        token = self.token_signer.sign({
            "sub": user.id,
            "username": user.username,
            "role": user.role,
            "ver": user.token_version,
        })
        return {"accessToken": token, "user": user_to_dict(user)}

    def logout(self, identity: Identity) -> None:
        """
        사용자의 토큰 버전을 올려 지금까지 발급된 모든 토큰을 무효화합니다.

        Raises:
            UserNotFoundError: 토큰의 사용자가 더 이상 존재하지 않을 때.
        """
        user = self.user_repo.find_by_id(identity.user_id)
        if not user:
            raise UserNotFoundError(f"User with id '{identity.user_id}' not found.")
        self.user_repo.bump_token_version(user)
        logger.info("User '%s' logged out", user.username)
