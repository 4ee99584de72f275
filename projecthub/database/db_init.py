import logging

from projecthub.config import Settings, get_settings
from projecthub.database.database import Database
from projecthub.database.models import User
from projecthub.database.models.user import ROLE_ADMIN
from projecthub.services.security import PasswordHasher

logger = logging.getLogger(__name__)


def initialize_db(database: Database, settings: Settings, password_hasher: PasswordHasher = None):
    """
    테이블을 생성하고, 관리자 계정이 설정되어 있으면 기본 관리자를 삽입합니다.
    SQLAlchemy 모델을 사용하여 모든 작업을 수행합니다.
    """
    logger.info("Initializing database...")

    # 모든 테이블을 생성합니다. (이미 존재하면 생성하지 않음)
    database.create_all()

    if not (settings.admin_username and settings.admin_password):
        logger.info("ADMIN_USERNAME/ADMIN_PASSWORD not set, skipping admin seed.")
        return

    password_hasher = password_hasher or PasswordHasher()
    db = database.session()
    try:
        # 관리자 계정이 이미 있는지 확인
        if db.query(User).filter(User.username == settings.admin_username).first():
            logger.info("Admin user '%s' already exists, skipping seed.", settings.admin_username)
            return

        admin_user = User(
            username=settings.admin_username,
            password_hash=password_hasher.hash(settings.admin_password),
            role=ROLE_ADMIN,
            token_version=0,
        )
        db.add(admin_user)
        db.commit()
        logger.info("Admin user '%s' created.", settings.admin_username)

    except Exception:
        db.rollback()
        raise
    finally:
        db.close()


if __name__ == '__main__':
    from projecthub.utils.log import configure_logging

    settings = get_settings()
    configure_logging(settings.log_level)
    database = Database(settings.database_url)
    try:
        initialize_db(database, settings)
    finally:
        database.dispose()
