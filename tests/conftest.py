# tests/conftest.py
import pytest

from projecthub.database.database import Database


@pytest.fixture
def database(tmp_path):
    """테스트마다 새 SQLite 파일 DB를 만들고, 끝나면 엔진을 정리합니다."""
    db = Database(f"sqlite:///{tmp_path / 'projecthub_test.db'}")
    db.create_all()
    yield db
    db.drop_all()
    db.dispose()

@pytest.fixture
def db_session(database):
    session = database.session()
    yield session
    session.close()
