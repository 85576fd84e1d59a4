"""共享目录浏览与下载的请求/响应契约。"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class DirectoryEntry(BaseModel):
    """目录中的一个条目；仅在请求内构建，不持久化。"""

    model_config = ConfigDict(populate_by_name=True)

    name: str = Field(..., description="条目名称")
    path: str = Field(..., description="相对共享根目录的虚拟路径，以 / 开头")
    is_directory: bool = Field(..., alias="isDirectory")
    size: int = Field(..., ge=0, description="字节数；stat 失败时为 0")
    modified_time: datetime = Field(..., alias="modifiedTime")
    error: str | None = Field(None, description="stat 失败时的标记")


class FileDownloadRequest(BaseModel):
    """POST /files 请求体。"""

    model_config = ConfigDict(populate_by_name=True)

    file_path: str = Field(..., alias="filePath", min_length=1, description="要下载的虚拟路径")
