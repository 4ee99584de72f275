# projecthub/app.py
from wsgiref.simple_server import make_server
import json
import logging
import re

from projecthub.config import Settings, ensure_secure, get_settings
from projecthub.database.database import Database
from projecthub.database.db_init import initialize_db
from projecthub.repositories.sqlalchemy import SqlalchemyProjectRepository, SqlalchemyUserRepository
from projecthub.services.auth_service import AuthService
from projecthub.services.project_service import ProjectService
from projecthub.services.user_service import UserService
from projecthub.services.security import PasswordHasher, TokenSigner
from projecthub.services.exceptions import (
    ProjectHubError, ValidationError, AuthenticationError, AuthorizationError,
    NotFoundError, ConflictError, TokenInvalidError,
)
from projecthub.utils.log import configure_logging
from projecthub.validation import (
    validate, CreateProjectRequest, UpdateProjectRequest, RegisterUserRequest, LoginRequest,
)

logger = logging.getLogger(__name__)

API_PREFIX = "/api/v1"

# --------------------------------------------------------------------------
## 요청 처리 유틸리티 함수
# --------------------------------------------------------------------------

def get_request_data(environ):
    try:
        content_length = int(environ.get("CONTENT_LENGTH") or 0)
        return json.loads(environ["wsgi.input"].read(content_length)) if content_length > 0 else {}
    except (ValueError, json.JSONDecodeError):
        raise ValidationError("Invalid or missing JSON body.", [{"field": "body", "message": "Malformed JSON"}])

def get_bearer_token(environ):
    header = environ.get("HTTP_AUTHORIZATION", "")
    scheme, _, token = header.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        raise TokenInvalidError("Missing 'Authorization: Bearer <token>' header.")
    return token.strip()

def authorize(environ):
    """요청 헤더의 토큰을 검증하고 호출자의 Identity를 반환합니다."""
    return environ['services']['auth'].authenticate(get_bearer_token(environ))

def authorize_admin(environ):
    identity = authorize(environ)
    environ['services']['auth'].require_admin(identity)
    return identity

def ok(data, message, status='200 OK'):
    return status, json.dumps({"data": data, "message": message})

ERROR_STATUS = {
    ValidationError: "400 Bad Request",
    ConflictError: "400 Bad Request",
    AuthenticationError: "401 Unauthorized",
    AuthorizationError: "401 Unauthorized",
    NotFoundError: "404 Not Found",
}

def handle_exception(e):
    """예외를 HTTP 상태와 JSON 본문으로 변환합니다. 예상하지 못한 예외는 내부 정보를 숨깁니다."""
    if isinstance(e, ProjectHubError):
        status = next(
            (ERROR_STATUS[cls] for cls in type(e).__mro__ if cls in ERROR_STATUS),
            "500 Internal Server Error",
        )
        body = {"error": type(e).__name__, "message": str(e)}
        if isinstance(e, ValidationError) and e.errors:
            body["details"] = e.errors
        return status, json.dumps(body)

    logger.exception("Unhandled error while processing request")
    return "500 Internal Server Error", json.dumps(
        {"error": "ServerError", "message": "Some server error occurred while processing the request."}
    )

# --------------------------------------------------------------------------
## 핸들러 함수
# --------------------------------------------------------------------------

def register_handler(environ, *args):
    req = validate(RegisterUserRequest, get_request_data(environ))
    user = environ['services']['user'].register(req.username, req.password)
    return ok(user, "User registered successfully", '201 Created')

def login_handler(environ, *args):
    req = validate(LoginRequest, get_request_data(environ))
    result = environ['services']['user'].login(req.username, req.password)
    return ok(result, "User logged in successfully")

def logout_handler(environ, *args):
    identity = authorize(environ)
    environ['services']['user'].logout(identity)
    return ok(None, "User logged out successfully")

def create_project_handler(environ, *args):
    identity = authorize(environ)
    req = validate(CreateProjectRequest, get_request_data(environ))
    project = environ['services']['project'].create_project(
        req.name, req.description, req.start_date, req.end_date, caller_id=identity.user_id
    )
    return ok(project, "Project created successfully")

def get_project_handler(environ, project_id):
    authorize(environ)
    project = environ['services']['project'].get_project_by_id(project_id)
    return ok(project, "Project fetched successfully")

def list_own_projects_handler(environ, *args):
    identity = authorize(environ)
    projects = environ['services']['project'].get_projects_of_user(identity.user_id)
    return ok(projects, "All projects of user fetched successfully")

def list_all_projects_handler(environ, *args):
    authorize_admin(environ)
    projects = environ['services']['project'].get_all_projects()
    return ok(projects, "All projects fetched successfully")

def update_project_handler(environ, project_id):
    identity = authorize(environ)
    req = validate(UpdateProjectRequest, get_request_data(environ))
    project = environ['services']['project'].update_project(project_id, req.changes(), caller_id=identity.user_id)
    return ok(project, "Project updated successfully")

def delete_project_handler(environ, project_id):
    identity = authorize(environ)
    project = environ['services']['project'].delete_project(project_id, caller_id=identity.user_id)
    return ok(project, "Project deleted successfully")

def add_member_handler(environ, project_id, user_id):
    identity = authorize(environ)
    project = environ['services']['project'].add_member_to_project(project_id, user_id, caller_id=identity.user_id)
    return ok(project, "Member added successfully")

def list_member_projects_handler(environ, user_id):
    authorize(environ)
    projects = environ['services']['project'].get_projects_user_is_member_of(user_id)
    return ok(projects, "Projects found successfully")

ROUTES = [
    ('POST', r'^/users/register$', register_handler),
    ('POST', r'^/users/login$', login_handler),
    ('POST', r'^/users/logout$', logout_handler),
    ('POST', r'^/project/createProject$', create_project_handler),
    ('GET', r'^/project/getProjectById/([^/]+)$', get_project_handler),
    ('GET', r'^/project/getProjectsOfAUser$', list_own_projects_handler),
    ('GET', r'^/project/getAllProjects$', list_all_projects_handler),
    ('PATCH', r'^/project/updateProject/([^/]+)$', update_project_handler),
    ('DELETE', r'^/project/deleteProject/([^/]+)$', delete_project_handler),
    ('PATCH', r'^/project/addMembersToProject/([^/]+)/user/([^/]+)$', add_member_handler),
    ('GET', r'^/project/getAllProjectsUserIsMemberOf/([^/]+)$', list_member_projects_handler),
]

def resolve_route(method, path):
    if not path.startswith(API_PREFIX):
        return None, ()
    path = path[len(API_PREFIX):]
    for route_method, pattern, route_handler in ROUTES:
        if method == route_method and (match := re.match(pattern, path)):
            return route_handler, match.groups()
    return None, ()

# --------------------------------------------------------------------------
## WSGI 애플리케이션 (의존성 주입 및 라우팅)
# --------------------------------------------------------------------------

def create_app(database: Database, settings: Settings):
    """
    요청마다 세션과 리포지토리, 서비스를 새로 구성하는 WSGI 애플리케이션을 만듭니다.

    Args:
        database: 프로세스 수명 동안 유지되는 Database 객체.
        settings: 토큰 서명 키, 삭제 정책 등을 담은 설정.
    """
    password_hasher = PasswordHasher()
    token_signer = TokenSigner(settings.jwt_secret, settings.jwt_algorithm, settings.access_token_minutes)

    def application(environ, start_response):
        db_session = database.session()
        try:
            # 1. 의존성 생성 (Repositories -> Services)
            user_repo = SqlalchemyUserRepository(db_session)
            project_repo = SqlalchemyProjectRepository(db_session)

            # 2. 생성된 서비스 객체들을 environ을 통해 핸들러에 전달
            environ['services'] = {
                'auth': AuthService(user_repo, token_signer),
                'user': UserService(user_repo, password_hasher, token_signer),
                'project': ProjectService(
                    project_repo, user_repo,
                    require_owner_on_delete=settings.project_delete_requires_owner,
                ),
            }

            # 3. 라우팅 및 핸들러 실행
            path = environ.get("PATH_INFO", "")
            method = environ.get("REQUEST_METHOD", "")
            handler, path_args = resolve_route(method, path)

            if handler:
                status, response_body = handler(environ, *path_args)
            else:
                status, response_body = '404 Not Found', json.dumps({'error': 'NotFound', 'message': 'Not Found'})

        except Exception as e:
            db_session.rollback()
            status, response_body = handle_exception(e)
        finally:
            db_session.close()

        logger.debug("%s %s -> %s", environ.get("REQUEST_METHOD"), environ.get("PATH_INFO"), status)
        start_response(status, [("Content-Type", "application/json")])
        return [response_body.encode("utf-8")]

    return application

# --------------------------------------------------------------------------
## 서버 실행
# --------------------------------------------------------------------------

def main():
    settings = get_settings()
    ensure_secure(settings)
    configure_logging(settings.log_level)

    database = Database(settings.database_url)
    initialize_db(database, settings)
    try:
        with make_server(settings.host, settings.port, create_app(database, settings)) as httpd:
            logger.info("Serving projecthub on port %d...", settings.port)
            httpd.serve_forever()
    except KeyboardInterrupt:
        logger.info("Shutting down.")
    finally:
        database.dispose()


if __name__ == "__main__":
    main()
