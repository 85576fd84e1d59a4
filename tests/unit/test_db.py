"""数据库客户端与模型的单元测试。"""

import pytest
from sqlalchemy import select

from portfolio.db.models import Base, Comment, Post, Project, TimestampMixin, User, UserRole, gen_uuid


# ---------------------------------------------------------------------------
# models/base.py
# ---------------------------------------------------------------------------


class TestBase:
    def test_tables_registered(self):
        assert {"users", "posts", "comments", "projects"} <= set(Base.metadata.tables)


class TestGenUuid:
    def test_returns_string(self):
        uid = gen_uuid()
        assert isinstance(uid, str)
        assert len(uid) == 36  # uuid4 format: 8-4-4-4-12

    def test_unique(self):
        ids = {gen_uuid() for _ in range(100)}
        assert len(ids) == 100


class TestTimestampMixin:
    def test_has_fields(self):
        assert hasattr(TimestampMixin, "created_at")
        assert hasattr(TimestampMixin, "updated_at")


class TestUserRole:
    def test_staff(self):
        assert User(email="a@x.com", role=UserRole.ADMIN).is_staff
        assert User(email="b@x.com", role=UserRole.SUPERUSER).is_staff
        assert not User(email="c@x.com", role=UserRole.USER).is_staff


# ---------------------------------------------------------------------------
# clients/database.py
# ---------------------------------------------------------------------------


class TestDatabaseClient:
    @pytest.mark.asyncio
    async def test_get_engine_is_singleton(self, db_ready):
        from portfolio.db.clients.database import get_engine

        assert get_engine() is get_engine()

    @pytest.mark.asyncio
    async def test_get_db_commits(self, db_ready):
        from portfolio.db.clients.database import get_db, get_session_factory

        gen = get_db()
        session = await gen.__anext__()
        session.add(User(email="commit@example.com", role=UserRole.USER))
        with pytest.raises(StopAsyncIteration):
            await gen.__anext__()

        async with get_session_factory()() as check:
            result = await check.execute(select(User).where(User.email == "commit@example.com"))
            assert result.scalar_one_or_none() is not None

    @pytest.mark.asyncio
    async def test_get_db_rolls_back_on_error(self, db_ready):
        from portfolio.db.clients.database import get_db, get_session_factory

        gen = get_db()
        session = await gen.__anext__()
        session.add(User(email="rollback@example.com", role=UserRole.USER))
        with pytest.raises(RuntimeError):
            await gen.athrow(RuntimeError("boom"))

        async with get_session_factory()() as check:
            result = await check.execute(select(User).where(User.email == "rollback@example.com"))
            assert result.scalar_one_or_none() is None

    @pytest.mark.asyncio
    async def test_post_cascade_deletes_comments(self, db_session):
        user = User(email="author@example.com", role=UserRole.USER)
        db_session.add(user)
        await db_session.flush()
        post = Post(title="t", content="c", author_id=user.id, comments=[])
        db_session.add(post)
        await db_session.flush()
        db_session.add(Comment(content="nice", author_id=user.id, post_id=post.id))
        await db_session.flush()

        loaded = await db_session.execute(select(Post).where(Post.id == post.id))
        target = loaded.scalar_one()
        await db_session.refresh(target, attribute_names=["comments"])
        await db_session.delete(target)
        await db_session.commit()

        remaining = await db_session.execute(select(Comment))
        assert remaining.scalars().all() == []

    @pytest.mark.asyncio
    async def test_project_defaults(self, db_session):
        user = User(email="owner@example.com", role=UserRole.ADMIN)
        db_session.add(user)
        await db_session.flush()
        project = Project(title="p", description="d", author_id=user.id)
        db_session.add(project)
        await db_session.flush()
        assert project.technologies == "[]"
        assert project.emoji == "🚀"
        assert project.gradient_start == "from-blue-500"
        assert project.published is False
        assert project.created_at is not None
