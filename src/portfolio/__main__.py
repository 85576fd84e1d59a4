"""服务启动入口：python -m portfolio 或安装后的 portfolio 命令。

生产环境关闭自动重载；开发环境只监听 src 目录的改动。
"""

import os

import uvicorn

from portfolio.core.config import get_settings


def main() -> None:
    settings = get_settings()
    src_dir = os.path.join(os.path.abspath(os.curdir), "src")
    reload = not settings.is_production
    uvicorn.run(
        "portfolio.main:app",
        host=settings.host,
        port=settings.port,
        reload=reload,
        reload_dirs=[src_dir] if reload and os.path.isdir(src_dir) else None,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
