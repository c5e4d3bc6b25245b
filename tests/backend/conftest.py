import os

os.environ.setdefault('DATABASE_URL', 'sqlite:///./test.db')
os.environ.setdefault('JWT_SECRET_KEY', 'test-secret-key')
os.environ.setdefault('BCRYPT_ROUNDS', '4')

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy import create_engine, event  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from backend.core import config  # noqa: E402
from backend.database import Base, get_db  # noqa: E402
from backend.main import app  # noqa: E402


@pytest.fixture
def db_engine():
    engine = create_engine(
        'sqlite://',
        connect_args={'check_same_thread': False},
        poolclass=StaticPool,
    )

    @event.listens_for(engine, 'connect')
    def enable_foreign_keys(dbapi_connection, _connection_record) -> None:
        dbapi_connection.execute('PRAGMA foreign_keys=ON')

    Base.metadata.create_all(bind=engine)
    try:
        yield engine
    finally:
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture
def testing_session_local(db_engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=db_engine)


@pytest.fixture
def db(testing_session_local):
    session = testing_session_local()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client(testing_session_local, tmp_path, monkeypatch: pytest.MonkeyPatch):
    def override_get_db():
        session = testing_session_local()
        try:
            yield session
        finally:
            session.close()

    monkeypatch.setattr(config, 'UPLOAD_DIR', str(tmp_path / 'uploads'))
    app.dependency_overrides[get_db] = override_get_db
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()
