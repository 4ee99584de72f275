# projecthub/services/exceptions.py

class ProjectHubError(Exception):
    """모든 서비스 예외의 기반 클래스"""
    pass

# --- Validation Exceptions ---
class ValidationError(ProjectHubError):
    """요청 값의 형식이 잘못되었거나 필수 값이 없을 때"""

    def __init__(self, message: str, errors=None):
        super().__init__(message)
        # 필드 단위 상세 정보: [{"field": "name", "message": "..."}]
        self.errors = list(errors or [])

# --- Auth Exceptions ---
class AuthenticationError(ProjectHubError):
    """사용자 자격 증명 실패 시"""
    pass

class TokenInvalidError(AuthenticationError):
    """토큰이 유효하지 않거나 없을 때"""
    pass

class AuthorizationError(ProjectHubError):
    """인증은 되었으나 해당 작업을 수행할 권한이 없을 때"""
    pass

class NotProjectOwnerError(AuthorizationError):
    """프로젝트 소유자만 가능한 작업을 다른 사용자가 요청했을 때"""
    pass

class AdminRequiredError(AuthorizationError):
    """관리자 전용 작업을 일반 사용자가 요청했을 때"""
    pass

# --- Not Found Exceptions ---
class NotFoundError(ProjectHubError):
    """요청한 리소스를 찾을 수 없을 때"""
    pass

class ProjectNotFoundError(NotFoundError):
    """프로젝트를 찾을 수 없을 때"""
    pass

class UserNotFoundError(NotFoundError):
    """사용자를 찾을 수 없을 때"""
    pass

# --- Conflict Exceptions ---
class ConflictError(ProjectHubError):
    """이미 존재하는 리소스와 충돌할 때"""
    pass

class ProjectAlreadyExistsError(ConflictError):
    """프로젝트 이름이 이미 존재할 때"""
    pass

class MemberAlreadyExistsError(ConflictError):
    """사용자가 이미 프로젝트 멤버일 때"""
    pass

class UserAlreadyExistsError(ConflictError):
    """사용자 이름이 이미 존재할 때"""
    pass

# --- Server Exceptions ---
class ServerError(ProjectHubError):
    """예상하지 못한 서버 내부 오류"""
    pass
