"""全局测试 fixtures：共享目录样例树、隔离的配置与数据库、HTTP 客户端、用户工厂。"""

from __future__ import annotations

import os
from collections.abc import AsyncIterator, Callable
from pathlib import Path

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from portfolio.core.config import Settings, get_settings
from portfolio.core.security import create_session_token
from portfolio.db.clients.database import dispose_engine, get_session_factory, init_db
from portfolio.db.models import User, UserRole
from portfolio.services.file_service import get_file_client
from portfolio.services.user_service import create_user

TEST_PASSWORD = "correct-horse-battery"


# ---------------------------------------------------------------------------
# 共享目录样例
# ---------------------------------------------------------------------------


@pytest.fixture
def shared_dir(tmp_path: Path) -> Path:
    """
    tmp_path/
      share/              <- 根目录
        docs/report.pdf
        docs/notes.txt
        readme.md
        empty/
      share-private/secret.txt   <- 与根目录同前缀的兄弟目录
      outside.txt
    """
    base = tmp_path / "share"
    (base / "docs").mkdir(parents=True)
    (base / "empty").mkdir()
    (base / "docs" / "report.pdf").write_bytes(b"%PDF-1.4 fake report\x00\x01\x02")
    (base / "docs" / "notes.txt").write_text("hello notes", encoding="utf-8")
    (base / "readme.md").write_text("# readme\n", encoding="utf-8")
    (tmp_path / "share-private").mkdir()
    (tmp_path / "share-private" / "secret.txt").write_text("top secret", encoding="utf-8")
    (tmp_path / "outside.txt").write_text("outside", encoding="utf-8")
    return base


# ---------------------------------------------------------------------------
# 配置与数据库隔离
# ---------------------------------------------------------------------------


def _clear_caches() -> None:
    get_settings.cache_clear()
    get_file_client.cache_clear()


@pytest.fixture
def app_env(monkeypatch, tmp_path: Path, shared_dir: Path) -> Settings:
    """所有 APP_ 配置指向 tmp_path，返回生效的 Settings。"""
    for key in list(os.environ):
        if key.startswith("APP_"):
            monkeypatch.delenv(key, raising=False)
    monkeypatch.delenv("SHARED_DIRECTORY", raising=False)
    monkeypatch.setenv("APP_SHARED_DIRECTORY", str(shared_dir))
    monkeypatch.setenv("APP_DATABASE_URL", f"sqlite+aiosqlite:///{tmp_path / 'test.db'}")
    monkeypatch.setenv("APP_LOG_DIR", str(tmp_path / "logs"))
    monkeypatch.setenv("APP_SECRET_KEY", "test-secret-key-0123456789abcdef0123")
    monkeypatch.setenv("APP_RATE_LIMIT", "")
    _clear_caches()
    yield get_settings()
    _clear_caches()


@pytest_asyncio.fixture
async def db_ready(app_env: Settings) -> AsyncIterator[None]:
    await dispose_engine()
    await init_db()
    yield
    await dispose_engine()


@pytest_asyncio.fixture
async def db_session(db_ready):
    async with get_session_factory()() as session:
        yield session


@pytest_asyncio.fixture
async def client(db_ready) -> AsyncIterator[AsyncClient]:
    """进程内调用新建的 app（ASGITransport 不触发 lifespan，表结构已由 db_ready 创建）。"""
    from portfolio.main import create_application

    application = create_application()
    async with AsyncClient(transport=ASGITransport(app=application), base_url="http://test") as c:
        yield c


# ---------------------------------------------------------------------------
# 用户工厂
# ---------------------------------------------------------------------------


@pytest.fixture
def make_user(db_ready) -> Callable:
    """创建用户并返回 (user, Authorization 头)。"""

    async def _make(role: UserRole = UserRole.USER, email: str | None = None, name: str = "Tester"):
        factory = get_session_factory()
        async with factory() as session:
            async with session.begin():
                user = await create_user(
                    session,
                    email=email or f"{role.value.lower()}-{os.urandom(4).hex()}@example.com",
                    password=TEST_PASSWORD,
                    name=name,
                    role=role,
                )
        return user, {"Authorization": f"Bearer {create_session_token(user)}"}

    return _make


@pytest.fixture
def auth_headers_for() -> Callable[[User], dict[str, str]]:
    def _headers(user: User) -> dict[str, str]:
        return {"Authorization": f"Bearer {create_session_token(user)}"}

    return _headers


@pytest.fixture
def user_password() -> str:
    """make_user 创建的用户统一使用的明文密码。"""
    return TEST_PASSWORD
