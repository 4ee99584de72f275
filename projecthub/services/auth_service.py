import logging
from dataclasses import dataclass

from projecthub.database.models.user import ROLE_ADMIN
from projecthub.repositories.interfaces import IUserRepository
from projecthub.services.security import TokenSigner
from projecthub.services.exceptions import TokenInvalidError, AdminRequiredError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Identity:
    """인증을 통과한 호출자의 신원 정보"""
    user_id: str
    username: str
    role: str

    @property
    def is_admin(self) -> bool:
        return self.role == ROLE_ADMIN


class AuthService:
    """Bearer 토큰을 검증하여 호출자의 Identity를 확인하고, 관리자 권한을 검사합니다."""

    def __init__(self, user_repo: IUserRepository, token_signer: TokenSigner):
        self.user_repo = user_repo
        self.token_signer = token_signer

    def authenticate(self, token: str) -> Identity:
        """
        액세스 토큰을 검증하고, 토큰에 담긴 사용자의 Identity를 반환합니다.

        Raises:
            TokenInvalidError: 토큰이 없거나, 서명/만료 검증에 실패했거나,
                사용자가 없거나, 로그아웃으로 무효화된 토큰일 때.
        """
        if not token or not token.strip():
            raise TokenInvalidError("Missing access token.")

        claims = self.token_signer.verify(token.strip())
        user_id = claims.get("sub")
        if not user_id:
            raise TokenInvalidError("Invalid token payload.")

        user = self.user_repo.find_by_id(user_id)
        if not user:
            logger.warning("Rejected token for unknown user %s", user_id)
            raise TokenInvalidError("Token not found or invalid.")

        if claims.get("ver") != user.token_version:
            logger.warning("Rejected revoked token for user %s", user_id)
            raise TokenInvalidError("Token has been revoked.")

        return Identity(user_id=user.id, username=user.username, role=user.role)

    def require_admin(self, identity: Identity):
        """
        Raises:
            AdminRequiredError: 호출자가 관리자가 아닐 때.
        """
        if not identity.is_admin:
            raise AdminRequiredError("Only admin can access this resource.")
