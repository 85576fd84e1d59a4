"""共享目录客户端：路径隔离、异步 IO、防目录穿越；只读。"""

from __future__ import annotations

import asyncio
import stat as stat_mod
from collections.abc import AsyncIterator
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from urllib.parse import quote

import aiofiles
import aiofiles.os

from portfolio.core.exceptions import (
    AccessDeniedError,
    InternalFileError,
    InvalidTargetError,
    NotADirectory,
    NotFoundError,
)
from portfolio.core.path_validator import PathValidator
from portfolio.observability.logging import get_logger
from portfolio.schemas.files import DirectoryEntry

logger = get_logger(__name__)

OCTET_STREAM = "application/octet-stream"
STAT_ERROR_MARKER = "Could not read file information"


def encode_filename(filename: str) -> str:
    """按 encodeURIComponent 规则编码，并额外转义 ' ( ) *，可安全放入 Content-Disposition。"""
    return quote(filename, safe="!", errors="surrogateescape")


def display_name(name: str) -> str:
    """非 UTF-8 文件名（listdir 返回的孤立代理字符）替换为 U+FFFD，保证可序列化为 JSON。"""
    return name.encode("utf-8", "surrogateescape").decode("utf-8", "replace")


def _mtime(st) -> datetime:
    return datetime.fromtimestamp(st.st_mtime, tz=timezone.utc)


@dataclass(frozen=True)
class FileDownload:
    """一次下载的元信息；内容通过 read() 或 iter_chunks() 获取。"""

    path: Path
    size: int
    filename: str
    chunk_size: int
    media_type: str = OCTET_STREAM

    @property
    def encoded_filename(self) -> str:
        return encode_filename(self.filename)

    @property
    def content_disposition(self) -> str:
        enc = self.encoded_filename
        return f"attachment; filename=\"{enc}\"; filename*=UTF-8''{enc}"

    async def read(self) -> bytes:
        async with aiofiles.open(self.path, "rb") as f:
            return await f.read()

    async def iter_chunks(self) -> AsyncIterator[bytes]:
        async with aiofiles.open(self.path, "rb") as f:
            while True:
                chunk = await f.read(self.chunk_size)
                if not chunk:
                    break
                yield chunk


class SharedDirectoryClient:
    """基于 PathValidator 的只读文件访问：目录列表与文件下载。"""

    def __init__(self, validator: PathValidator, chunk_size: int = 64 * 1024) -> None:
        self.validator = validator
        self.chunk_size = chunk_size

    async def list_directory(self, virtual_path: str | None) -> list[DirectoryEntry]:
        """
        列出目录内容，顺序与文件系统返回一致。

        单个条目 stat 失败时仍返回该条目（size=0，带 error 标记），不影响整个列表。

        Raises:
            PathTraversalError: 路径逃出根目录。
            NotFoundError: 目录本身无法 stat。
            NotADirectory: 目标不是目录。
            AccessDeniedError: 无权读取目录。
        """
        full_path = await asyncio.to_thread(self.validator.resolve, virtual_path)
        try:
            st = await aiofiles.os.stat(full_path)
        except OSError as exc:
            logger.info("shared_directory_stat_failed", errno=exc.errno)
            raise NotFoundError("Directory not accessible") from exc
        if not stat_mod.S_ISDIR(st.st_mode):
            raise NotADirectory()

        try:
            names = await aiofiles.os.listdir(full_path)
        except PermissionError as exc:
            raise AccessDeniedError("Cannot read directory") from exc
        except OSError as exc:
            logger.error("shared_directory_read_failed", errno=exc.errno)
            raise InternalFileError() from exc

        base_virtual = display_name(self.validator.to_virtual(full_path)).rstrip("/")
        entries: list[DirectoryEntry] = []
        for name in names:
            shown = display_name(name)
            entry_virtual = f"{base_virtual}/{shown}"
            try:
                est = await aiofiles.os.stat(full_path / name)
            except OSError as exc:
                logger.warning("shared_entry_stat_failed", entry=entry_virtual, errno=exc.errno)
                entries.append(
                    DirectoryEntry(
                        name=shown,
                        path=entry_virtual,
                        is_directory=False,
                        size=0,
                        modified_time=datetime.now(timezone.utc),
                        error=STAT_ERROR_MARKER,
                    )
                )
                continue
            entries.append(
                DirectoryEntry(
                    name=shown,
                    path=entry_virtual,
                    is_directory=stat_mod.S_ISDIR(est.st_mode),
                    size=max(0, est.st_size),
                    modified_time=_mtime(est),
                )
            )
        return entries

    async def open_download(self, virtual_path: str | None) -> FileDownload:
        """
        校验下载目标并返回 FileDownload。

        Raises:
            PathTraversalError: 路径逃出根目录。
            NotFoundError: 文件不存在。
            InvalidTargetError: 目标是目录或非普通文件。
            AccessDeniedError: 无读权限。
        """
        full_path = await asyncio.to_thread(self.validator.resolve, virtual_path)
        try:
            st = await aiofiles.os.stat(full_path)
        except OSError as exc:
            raise NotFoundError("File not found or access denied") from exc
        if stat_mod.S_ISDIR(st.st_mode):
            raise InvalidTargetError()
        if not stat_mod.S_ISREG(st.st_mode):
            raise InvalidTargetError("Not a regular file")
        # 先试探性打开一次，流式响应开始后就无法再改状态码
        try:
            async with aiofiles.open(full_path, "rb"):
                pass
        except PermissionError as exc:
            raise AccessDeniedError() from exc
        except OSError as exc:
            raise NotFoundError("File not found or access denied") from exc
        return FileDownload(
            path=full_path,
            size=st.st_size,
            filename=full_path.name,
            chunk_size=self.chunk_size,
        )
