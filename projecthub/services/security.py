# projecthub/services/security.py
from datetime import datetime, timedelta, timezone
from typing import Any, Dict

import jwt
from argon2 import PasswordHasher as Argon2Hasher, exceptions as argon_exc

from projecthub.services.exceptions import TokenInvalidError


class PasswordHasher:
    """비밀번호 해시 생성과 검증을 담당합니다. 다이제스트는 Argon2id 인코딩 문자열입니다."""

    def __init__(self, hasher: Argon2Hasher = None):
        self._hasher = hasher or Argon2Hasher()

    def hash(self, password: str) -> str:
        return self._hasher.hash(password)

    def verify(self, digest: str, password: str) -> bool:
        try:
            return self._hasher.verify(digest or "", password)
        except (argon_exc.VerifyMismatchError, argon_exc.VerificationError, argon_exc.InvalidHashError):
            return False


class TokenSigner:
    """
    JWT 액세스 토큰을 발급하고 검증합니다.

    Args:
        secret: 서명 키.
        algorithm: 서명 알고리즘 (예: 'HS256').
        expires_minutes: 토큰 유효 시간(분).
    """

    def __init__(self, secret: str, algorithm: str = "HS256", expires_minutes: int = 60):
        self.secret = secret
        self.algorithm = algorithm
        self.expires_minutes = expires_minutes

    def sign(self, claims: Dict[str, Any]) -> str:
        now = datetime.now(timezone.utc)
        payload = dict(claims)
        payload["iat"] = now
        payload["exp"] = now + timedelta(minutes=self.expires_minutes)
        return jwt.encode(payload, self.secret, algorithm=self.algorithm)

    def verify(self, token: str) -> Dict[str, Any]:
        """
        토큰의 서명과 만료 시간을 검증하고 클레임을 반환합니다.

        Raises:
            TokenInvalidError: 토큰이 만료되었거나 서명이 올바르지 않을 때.
        """
        try:
            return jwt.decode(token, self.secret, algorithms=[self.algorithm])
        except jwt.ExpiredSignatureError:
            raise TokenInvalidError("Token has expired.")
        except jwt.InvalidTokenError:
            raise TokenInvalidError("Token not found or invalid.")
