import os
import sys

# Rate Limiter 우회 및 설정 로드를 위한 테스트 환경 변수 (main import 전에 설정)
os.environ["TESTING"] = "true"
os.environ.setdefault("SECRET_KEY", "test-secret-key-for-admin-backoffice-0123456789")
os.environ.setdefault("DB_HOST", "127.0.0.1")
os.environ.setdefault("DB_PORT", "3306")
os.environ.setdefault("DB_USER", "test")
os.environ.setdefault("DB_PASSWORD", "test")
os.environ.setdefault("DB_NAME", "autinoa_test")
os.environ.setdefault("STORAGE_TYPE", "local")
os.environ.setdefault("REALTIME_ENABLED", "false")

sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import pytest
import pytest_asyncio
from faker import Faker
from httpx import ASGITransport, AsyncClient

from dependencies.auth import AdminContext, require_admin
from main import app
from models.admin_models import AdminCredential
from utils.password import hash_password
from utils.processing import processing_registry

ADMIN_PASSWORD = "Password123!"


@pytest.fixture(autouse=True)
def clear_processing():
    """테스트 간 처리 중 표시가 남지 않도록 정리합니다."""
    processing_registry._keys.clear()
    yield
    processing_registry._keys.clear()


@pytest.fixture
def fake():
    return Faker("ko_KR")


@pytest.fixture(scope="session")
def admin_password_hash() -> str:
    return hash_password(ADMIN_PASSWORD)


@pytest.fixture
def admin_credential(admin_password_hash) -> AdminCredential:
    return AdminCredential(
        id="a0000000-0000-0000-0000-000000000001",
        username="root",
        email="root@autinoa.com",
        full_name="최고 관리자",
        password_hash=admin_password_hash,
    )


@pytest.fixture
def admin() -> AdminContext:
    return AdminContext(admin_id="a0000000-0000-0000-0000-000000000001", username="root")


@pytest_asyncio.fixture
async def client():
    """인증 없는 API 테스트 클라이언트 (lifespan 미실행, DB 연결 없음)."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest_asyncio.fixture
async def admin_client(client, admin):
    """require_admin을 고정 관리자로 대체한 클라이언트."""
    app.dependency_overrides[require_admin] = lambda: admin
    try:
        yield client
    finally:
        app.dependency_overrides.pop(require_admin, None)
