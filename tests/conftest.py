"""
Configuração global para testes

Este arquivo é carregado automaticamente pelo pytest antes de qualquer teste.
As variáveis de ambiente precisam existir antes de importar o app, pois
Settings é instanciado na importação.
"""
import os
import shutil
import tempfile

import pytest

TEST_DIR = tempfile.mkdtemp(prefix="car_market_tests_")

TEST_ENV_VARS = {
    "SECRET_KEY": "test_secret_key_for_testing_only",
    "DATABASE_URL": f"sqlite:///{os.path.join(TEST_DIR, 'test.db')}",
    "ALGORITHM": "HS256",
    "JWT_ISSUER": "car-market-tests",
    "ACCESS_TOKEN_EXPIRE_MINUTES": "30",
    "ADMIN_USERNAME": "admin",
    "ADMIN_EMAIL": "admin@test.com",
    "ADMIN_PASSWORD": "admin123",
    "ENVIRONMENT": "testing",
    "CORS_ORIGINS": "*",
    "UPLOADS_DIR": os.path.join(TEST_DIR, "uploads"),
    "MAX_FILE_SIZE_MB": "5",
    "DEFAULT_PAGE_SIZE": "20",
    "MAX_PAGE_SIZE": "100",
    "RATE_LIMIT_ENABLED": "false",
}

for key, value in TEST_ENV_VARS.items():
    os.environ[key] = value

from fastapi.testclient import TestClient  # noqa: E402

from app.core import database  # noqa: E402
from app.core.security import create_access_token  # noqa: E402
from app.main import app  # noqa: E402
from app.models import car_model, user_model  # noqa: E402,F401
from app.schemas import car_schema  # noqa: E402
from app.services import car_service, user_service  # noqa: E402


def pytest_sessionfinish(session, exitstatus):
    shutil.rmtree(TEST_DIR, ignore_errors=True)


@pytest.fixture(scope="function", autouse=True)
def reset_database():
    """Recria o schema e a pasta de uploads a cada teste"""
    database.Base.metadata.drop_all(bind=database.engine)
    database.Base.metadata.create_all(bind=database.engine)
    shutil.rmtree(TEST_ENV_VARS["UPLOADS_DIR"], ignore_errors=True)
    os.makedirs(TEST_ENV_VARS["UPLOADS_DIR"], exist_ok=True)
    yield


@pytest.fixture(scope="function")
def db_session():
    """Cria uma sessão de banco de dados para cada teste"""
    db = database.SessionLocal()
    try:
        yield db
    finally:
        db.rollback()
        db.close()


@pytest.fixture(scope="function")
def client():
    """Cria um cliente de teste (o lifespan cria o admin inicial)"""
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture(scope="function")
def make_user(db_session):
    """Fábrica de usuários: make_user("alice", role=..., blocked=...)"""
    def _make_user(username, role=user_model.ROLE_USER, blocked=False, password="password123"):
        user = user_service.create_user(
            db_session, username, f"{username}@test.com", password, role=role
        )
        if blocked:
            user.is_blocked = True
            db_session.commit()
            db_session.refresh(user)
        return user
    return _make_user


@pytest.fixture(scope="function")
def owner(make_user):
    return make_user("owner")


@pytest.fixture(scope="function")
def admin(make_user):
    return make_user("moderator", role=user_model.ROLE_ADMIN)


def auth_headers(user):
    return {"Authorization": f"Bearer {create_access_token(user)}"}


def car_payload(**overrides):
    data = {
        "title": "Toyota Corolla 2020",
        "brand": "Toyota",
        "model": "Corolla",
        "year": 2020,
        "price": 15000,
        "features": [{"key": "Fuel", "value": "Diesel"}],
    }
    data.update(overrides)
    return data


@pytest.fixture(scope="function")
def car(db_session, owner):
    return car_service.create_car(db_session, owner, car_schema.CarIn(**car_payload()))
