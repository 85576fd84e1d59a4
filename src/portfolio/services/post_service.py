"""博客文章与评论领域服务。"""

from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from portfolio.core.exceptions import ForbiddenError, ResourceNotFoundError, ValidationFailedError
from portfolio.db.models import Comment, Post, User
from portfolio.observability.logging import get_logger
from portfolio.schemas.post import CommentCreate, PostCreate, PostUpdate

logger = get_logger(__name__)


async def list_published_posts(
    db: AsyncSession,
    *,
    homepage_only: bool = False,
    author_id: str | None = None,
    limit: int | None = None,
) -> list[Post]:
    """已发布文章，按创建时间倒序。"""
    stmt = (
        select(Post)
        .options(selectinload(Post.author))
        .where(Post.published.is_(True))
        .order_by(Post.created_at.desc())
    )
    if homepage_only:
        stmt = stmt.where(Post.show_on_homepage.is_(True))
    if author_id:
        stmt = stmt.where(Post.author_id == author_id)
    if limit is not None:
        stmt = stmt.limit(limit)
    result = await db.execute(stmt)
    return list(result.scalars().all())


async def get_post(db: AsyncSession, post_id: str, *, with_comments: bool = False) -> Post:
    options = [selectinload(Post.author)]
    if with_comments:
        options.append(selectinload(Post.comments).selectinload(Comment.author))
    result = await db.execute(
        select(Post)
        .options(*options)
        .where(Post.id == post_id)
        .execution_options(populate_existing=True)
    )
    post = result.scalar_one_or_none()
    if post is None:
        raise ResourceNotFoundError("Post not found")
    return post


def _ensure_can_edit(post: Post, user: User, action: str) -> None:
    """作者本人或 ADMIN/SUPERUSER 可修改、删除。"""
    if post.author_id != user.id and not user.is_staff:
        raise ForbiddenError(f"Forbidden: You do not have permission to {action} this post")


async def create_post(db: AsyncSession, payload: PostCreate, author: User) -> Post:
    if not payload.title or not payload.content:
        raise ValidationFailedError("Title and content are required")
    post = Post(
        title=payload.title,
        content=payload.content,
        featured_image=payload.featured_image or None,
        published=payload.published,
        show_on_homepage=payload.show_on_homepage,
        published_at=payload.published_at,
        author_id=author.id,
    )
    db.add(post)
    await db.flush()
    logger.info("post_created", post_id=post.id, author_id=author.id, published=post.published)
    return await get_post(db, post.id)


async def update_post(db: AsyncSession, post_id: str, payload: PostUpdate, user: User) -> Post:
    post = await get_post(db, post_id)
    _ensure_can_edit(post, user, "update")

    provided = payload.model_fields_set
    if payload.title is not None:
        post.title = payload.title
    if payload.content is not None:
        post.content = payload.content
    if "featured_image" in provided:
        post.featured_image = payload.featured_image
    if payload.published is not None:
        post.published = payload.published
    if payload.show_on_homepage is not None:
        post.show_on_homepage = payload.show_on_homepage
    if payload.published_at is not None:
        post.published_at = payload.published_at
    await db.flush()
    logger.info("post_updated", post_id=post.id, user_id=user.id)
    return post


async def delete_post(db: AsyncSession, post_id: str, user: User) -> None:
    post = await get_post(db, post_id, with_comments=True)
    _ensure_can_edit(post, user, "delete")
    await db.delete(post)
    await db.flush()
    logger.info("post_deleted", post_id=post_id, user_id=user.id)


async def create_comment(db: AsyncSession, payload: CommentCreate, author: User) -> Comment:
    if not payload.content or not payload.post_id:
        raise ValidationFailedError("Comment content and post ID are required")
    post = await db.get(Post, payload.post_id)
    if post is None:
        raise ResourceNotFoundError("Post not found")
    comment = Comment(content=payload.content, author_id=author.id, post_id=post.id)
    db.add(comment)
    await db.flush()
    result = await db.execute(
        select(Comment).options(selectinload(Comment.author)).where(Comment.id == comment.id)
    )
    logger.info("comment_created", comment_id=comment.id, post_id=post.id)
    return result.scalar_one()
