"""共享目录 API。

GET  /api/files?path=<虚拟路径>   目录列表
POST /api/files {"filePath": ...}  下载文件
"""

from __future__ import annotations

from collections.abc import AsyncIterator

from fastapi import APIRouter, Depends, Query
from fastapi.responses import Response, StreamingResponse

from portfolio.api.dependencies import require_user
from portfolio.core.config import get_settings
from portfolio.db.clients.file_client import FileDownload, SharedDirectoryClient
from portfolio.db.models import User
from portfolio.observability.logging import get_logger
from portfolio.observability.metrics import shared_files_download_bytes_total
from portfolio.schemas.files import DirectoryEntry, FileDownloadRequest
from portfolio.services.file_service import get_file_client, list_shared_directory, prepare_download

router = APIRouter()
logger = get_logger(__name__)


@router.get(
    "",
    response_model=list[DirectoryEntry],
    response_model_exclude_none=True,
    summary="列出共享目录",
)
async def list_files(
    path: str = Query("/", description="相对共享根目录的路径"),
    user: User = Depends(require_user),
    client: SharedDirectoryClient = Depends(get_file_client),
) -> list[DirectoryEntry]:
    return await list_shared_directory(client, path, user_id=user.id)


async def _counted(download: FileDownload) -> AsyncIterator[bytes]:
    async for chunk in download.iter_chunks():
        shared_files_download_bytes_total.inc(len(chunk))
        yield chunk


@router.post("", summary="下载共享文件", response_class=Response)
async def download_file(
    body: FileDownloadRequest,
    user: User = Depends(require_user),
    client: SharedDirectoryClient = Depends(get_file_client),
) -> Response:
    settings = get_settings()
    download, streamed = await prepare_download(
        client,
        body.file_path,
        user_id=user.id,
        buffer_threshold=settings.files_buffer_threshold,
    )
    headers = {"Content-Disposition": download.content_disposition}
    if streamed:
        headers["Content-Length"] = str(download.size)
        return StreamingResponse(_counted(download), media_type=download.media_type, headers=headers)

    content = await download.read()
    shared_files_download_bytes_total.inc(len(content))
    return Response(content=content, media_type=download.media_type, headers=headers)
