"""共享目录路径校验：把调用方传入的虚拟路径解析为根目录内的绝对路径。"""

import os
from pathlib import Path

from portfolio.core.exceptions import NotFoundError, PathTraversalError


class PathValidator:
    """
    绑定一个固定根目录的路径校验器。

    根目录在构造时解析一次（跟随符号链接），之后只读；
    resolve() 对每个请求路径做 join + resolve + 边界检查。
    """

    def __init__(self, base_directory: str | os.PathLike[str]) -> None:
        self.base = Path(base_directory).expanduser().resolve()
        self._base_str = str(self.base)
        # 根目录为 / 时前缀本身已以分隔符结尾
        self._prefix = self._base_str if self._base_str.endswith(os.sep) else self._base_str + os.sep

    def contains(self, path: Path) -> bool:
        """path 与根目录相同，或位于根目录之下（前缀后紧跟分隔符）。"""
        s = str(path)
        return s == self._base_str or s.startswith(self._prefix)

    def resolve(self, virtual_path: str | None) -> Path:
        """
        将虚拟路径解析为绝对路径。

        Raises:
            PathTraversalError: 解析结果不在根目录内（.. 逃逸、外部绝对路径、符号链接逃逸）。
            NotFoundError: 路径无法解析（符号链接循环等）。

        会触发 lstat/readlink，在事件循环中请经 asyncio.to_thread 调用。
        """
        relative = virtual_path or ""
        if relative[:1] in ("/", "\\"):
            relative = relative[1:]
        if "\x00" in relative:
            raise PathTraversalError()
        try:
            resolved = (self.base / relative).resolve()
        except (OSError, RuntimeError) as exc:
            # 3.13 之前符号链接循环抛 RuntimeError，消息里带绝对路径，不向外传
            raise NotFoundError() from exc
        if not self.contains(resolved):
            raise PathTraversalError()
        return resolved

    def to_virtual(self, path: Path) -> str:
        """把根目录内的绝对路径还原为以 / 开头、/ 分隔的虚拟路径。"""
        rel = path.relative_to(self.base)
        parts = rel.parts
        return "/" + "/".join(parts) if parts else "/"
