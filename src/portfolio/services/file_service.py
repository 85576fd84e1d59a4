"""共享目录领域服务：构建带根目录的客户端，记录访问日志与指标。

根目录只在首次构建客户端时从配置读取，之后只读。
"""

from __future__ import annotations

from functools import lru_cache

from portfolio.core.config import get_settings
from portfolio.core.exceptions import FileAccessError, PathTraversalError
from portfolio.core.path_validator import PathValidator
from portfolio.db.clients.file_client import FileDownload, SharedDirectoryClient
from portfolio.observability.logging import get_logger
from portfolio.observability.metrics import (
    path_traversal_blocked_total,
    shared_files_download_total,
    shared_files_listing_total,
)
from portfolio.schemas.files import DirectoryEntry

logger = get_logger(__name__)


@lru_cache
def get_file_client() -> SharedDirectoryClient:
    """依赖注入：按配置构建单例客户端，测试时可用 dependency_overrides 替换。"""
    settings = get_settings()
    validator = PathValidator(settings.shared_directory)
    logger.info("shared_directory_configured", base=str(validator.base))
    return SharedDirectoryClient(validator, chunk_size=settings.files_chunk_size)


async def list_shared_directory(
    client: SharedDirectoryClient,
    virtual_path: str | None,
    *,
    user_id: str,
) -> list[DirectoryEntry]:
    try:
        entries = await client.list_directory(virtual_path)
    except PathTraversalError:
        path_traversal_blocked_total.labels(operation="list").inc()
        shared_files_listing_total.labels(outcome="blocked").inc()
        logger.warning("path_traversal_blocked", operation="list", requested=virtual_path, user_id=user_id)
        raise
    except FileAccessError as exc:
        shared_files_listing_total.labels(outcome=type(exc).__name__).inc()
        logger.info("files_listing_rejected", requested=virtual_path, reason=type(exc).__name__, user_id=user_id)
        raise
    shared_files_listing_total.labels(outcome="ok").inc()
    logger.info("files_listing_served", requested=virtual_path, count=len(entries), user_id=user_id)
    return entries


async def prepare_download(
    client: SharedDirectoryClient,
    virtual_path: str,
    *,
    user_id: str,
    buffer_threshold: int,
) -> tuple[FileDownload, bool]:
    """返回 (download, streamed)：超过 buffer_threshold 的文件走分块流式下载。"""
    try:
        download = await client.open_download(virtual_path)
    except PathTraversalError:
        path_traversal_blocked_total.labels(operation="download").inc()
        logger.warning("path_traversal_blocked", operation="download", requested=virtual_path, user_id=user_id)
        raise
    except FileAccessError as exc:
        logger.info("file_download_rejected", requested=virtual_path, reason=type(exc).__name__, user_id=user_id)
        raise
    streamed = download.size > buffer_threshold
    shared_files_download_total.labels(mode="stream" if streamed else "buffer").inc()
    logger.info(
        "file_download_started",
        requested=virtual_path,
        size=download.size,
        streamed=streamed,
        user_id=user_id,
    )
    return download, streamed
