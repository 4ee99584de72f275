import logging

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, declarative_base
from sqlalchemy.pool import StaticPool

logger = logging.getLogger(__name__)

# 모든 모델 클래스가 상속받을 Base 클래스
# 이 클래스를 상속받아 모델을 정의하면, SQLAlchemy가 테이블을 인식합니다.
Base = declarative_base()


class Database:
    """
    SQLAlchemy 엔진과 세션 팩토리를 소유하는 영속성 계층 진입점입니다.

    프로세스 시작 시 한 번 생성하고, 요청마다 session()으로 세션을 열어 사용한 뒤
    종료 시 dispose()로 커넥션 풀을 정리합니다.
    """

    def __init__(self, url: str):
        connect_args = {}
        engine_kwargs = {}
        if url.startswith("sqlite"):
            # connect_args는 SQLite에서만 필요합니다. (thread-safe 설정)
            connect_args["check_same_thread"] = False
            if url in ("sqlite://", "sqlite:///:memory:"):
                # 인메모리 DB는 커넥션마다 별도 DB가 되므로 하나의 커넥션을 공유합니다.
                engine_kwargs["poolclass"] = StaticPool

        self.url = url
        self.engine = create_engine(url, connect_args=connect_args, **engine_kwargs)
        # autocommit=False, autoflush=False로 설정하여, 명시적으로 commit을 호출해야 DB에 반영됩니다.
        self._session_factory = sessionmaker(autocommit=False, autoflush=False, bind=self.engine)

    def create_all(self):
        """모든 테이블을 생성합니다. (이미 존재하면 생성하지 않음)"""
        # 모델 모듈을 임포트해야 Base.metadata에 테이블이 등록됩니다.
        from projecthub.database import models  # noqa: F401
        Base.metadata.create_all(bind=self.engine)

    def drop_all(self):
        from projecthub.database import models  # noqa: F401
        Base.metadata.drop_all(bind=self.engine)

    def session(self):
        return self._session_factory()

    def dispose(self):
        logger.info("Disposing database engine for %s", self.engine.url.render_as_string(hide_password=True))
        self.engine.dispose()
