# tests/services/test_auth_service.py
import uuid

import pytest
from unittest.mock import MagicMock

from projecthub.services.auth_service import AuthService, Identity
from projecthub.services.security import TokenSigner
from projecthub.services.exceptions import *
from projecthub.repositories.interfaces import IUserRepository
from projecthub.database import models

USER_ID = uuid.uuid4().hex
TEST_SECRET = "projecthub-test-secret-0123456789abcdef"


@pytest.fixture
def mock_user_repo() -> MagicMock:
    """IUserRepository에 대한 모의 객체를 생성합니다."""
    return MagicMock(spec=IUserRepository)

@pytest.fixture
def token_signer() -> TokenSigner:
    return TokenSigner(TEST_SECRET, "HS256", expires_minutes=5)

@pytest.fixture
def auth_service(mock_user_repo: MagicMock, token_signer: TokenSigner) -> AuthService:
    return AuthService(mock_user_repo, token_signer)


class TestAuthenticate:
    def test_authenticate_success(self, auth_service: AuthService, mock_user_repo: MagicMock, token_signer: TokenSigner):
        """유효한 토큰이면 사용자 정보로 Identity를 만드는지 테스트합니다."""
        # === Arrange ===
        mock_user_repo.find_by_id.return_value = models.User(id=USER_ID, username="u1", role="user", token_version=0)
        token = token_signer.sign({"sub": USER_ID, "ver": 0})

        # === Act ===
        identity = auth_service.authenticate(token)

        # === Assert ===
        assert identity == Identity(user_id=USER_ID, username="u1", role="user")
        assert identity.is_admin is False
        mock_user_repo.find_by_id.assert_called_once_with(USER_ID)

    @pytest.mark.parametrize("token", ["", "   ", None])
    def test_authenticate_missing_token(self, auth_service: AuthService, mock_user_repo: MagicMock, token):
        with pytest.raises(TokenInvalidError):
            auth_service.authenticate(token)
        mock_user_repo.find_by_id.assert_not_called()

    def test_authenticate_bad_signature(self, auth_service: AuthService, mock_user_repo: MagicMock):
        forged = TokenSigner("another-projecthub-secret-0123456789").sign({"sub": USER_ID, "ver": 0})

        with pytest.raises(AuthenticationError):
            auth_service.authenticate(forged)
        mock_user_repo.find_by_id.assert_not_called()

    def test_authenticate_expired_token(self, auth_service: AuthService):
        expired = TokenSigner(TEST_SECRET, expires_minutes=-1).sign({"sub": USER_ID, "ver": 0})

        with pytest.raises(TokenInvalidError, match="expired"):
            auth_service.authenticate(expired)

    def test_authenticate_unknown_user(self, auth_service: AuthService, mock_user_repo: MagicMock, token_signer: TokenSigner):
        mock_user_repo.find_by_id.return_value = None

        with pytest.raises(TokenInvalidError):
            auth_service.authenticate(token_signer.sign({"sub": USER_ID, "ver": 0}))

    def test_authenticate_revoked_token(self, auth_service: AuthService, mock_user_repo: MagicMock, token_signer: TokenSigner):
        """로그아웃으로 토큰 버전이 올라가면 이전 토큰이 거부되는지 테스트합니다."""
        mock_user_repo.find_by_id.return_value = models.User(id=USER_ID, username="u1", role="user", token_version=1)

        with pytest.raises(TokenInvalidError, match="revoked"):
            auth_service.authenticate(token_signer.sign({"sub": USER_ID, "ver": 0}))

    def test_authenticate_token_without_subject(self, auth_service: AuthService, token_signer: TokenSigner):
        with pytest.raises(TokenInvalidError):
            auth_service.authenticate(token_signer.sign({"ver": 0}))


class TestRequireAdmin:
    def test_admin_passes(self, auth_service: AuthService):
        auth_service.require_admin(Identity(user_id=USER_ID, username="root", role="admin"))

    def test_non_admin_rejected(self, auth_service: AuthService):
        with pytest.raises(AdminRequiredError):
            auth_service.require_admin(Identity(user_id=USER_ID, username="u1", role="user"))

    def test_admin_required_is_authorization_error(self):
        assert issubclass(AdminRequiredError, AuthorizationError)
