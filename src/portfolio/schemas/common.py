"""通用 Response 契约：code、message、request_id；以及驼峰字段基类。"""

from typing import Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

T = TypeVar("T")


class ErrorDetail(BaseModel):
    """统一错误响应体。"""

    code: int = Field(..., description="业务/HTTP 错误码")
    message: str = Field(..., description="可展示给用户的信息")
    request_id: str = Field("", description="便于日志关联的请求 ID")


class ApiResponse(BaseModel, Generic[T]):
    """统一成功响应体。"""

    code: int = Field(0, description="0 表示成功")
    message: str = Field("ok", description="提示信息")
    data: T | None = Field(None, description="业务数据")
    request_id: str = Field("", description="请求 ID")


class CamelModel(BaseModel):
    """对外 JSON 使用驼峰命名（与前端约定），Python 侧使用下划线命名。"""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )
