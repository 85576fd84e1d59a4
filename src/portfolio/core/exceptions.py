"""业务异常：服务层抛出，由 main 中的全局处理器统一转换为 HTTP 响应。"""

from fastapi import status


class AppError(Exception):
    """可直接映射为 HTTP 状态码的业务异常；message 会原样返回给调用方。"""

    status_code: int = status.HTTP_400_BAD_REQUEST
    message: str = "Bad request"

    def __init__(self, message: str | None = None, status_code: int | None = None) -> None:
        if message is not None:
            self.message = message
        if status_code is not None:
            self.status_code = status_code
        super().__init__(self.message)


class ResourceNotFoundError(AppError):
    status_code = status.HTTP_404_NOT_FOUND
    message = "Not found"


class ValidationFailedError(AppError):
    status_code = status.HTTP_400_BAD_REQUEST


class UnauthorizedError(AppError):
    status_code = status.HTTP_401_UNAUTHORIZED
    message = "Unauthorized"


class ForbiddenError(AppError):
    status_code = status.HTTP_403_FORBIDDEN
    message = "Forbidden"


class ConflictError(AppError):
    status_code = status.HTTP_409_CONFLICT
    message = "Conflict"


# ---------------------------------------------------------------------------
# 共享目录访问
# ---------------------------------------------------------------------------


class FileAccessError(AppError):
    """共享目录访问失败；message 不包含任何服务端绝对路径。"""

    status_code = status.HTTP_404_NOT_FOUND
    message = "Invalid path or file not found"


class PathTraversalError(FileAccessError):
    """解析后的路径逃出了共享根目录。对外与 NotFound 无法区分。"""


class NotFoundError(FileAccessError):
    pass


class NotADirectory(FileAccessError):
    status_code = status.HTTP_400_BAD_REQUEST
    message = "Not a directory"


class InvalidTargetError(FileAccessError):
    status_code = status.HTTP_400_BAD_REQUEST
    message = "Cannot download a directory"


class AccessDeniedError(FileAccessError):
    status_code = status.HTTP_403_FORBIDDEN
    message = "Access denied"


class InternalFileError(FileAccessError):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    message = "Internal server error"
