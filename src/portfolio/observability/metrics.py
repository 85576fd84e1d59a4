"""Prometheus 指标：HTTP 通用 + 共享目录访问专用。"""

from prometheus_client import Counter

# HTTP 通用由 prometheus-fastapi-instrumentator 自动暴露

shared_files_listing_total = Counter(
    "shared_files_listing_total",
    "共享目录列表请求次数",
    ["outcome"],
)
shared_files_download_total = Counter(
    "shared_files_download_total",
    "共享文件下载次数",
    ["mode"],
)
shared_files_download_bytes_total = Counter(
    "shared_files_download_bytes_total",
    "共享文件下载的字节数",
)
path_traversal_blocked_total = Counter(
    "path_traversal_blocked_total",
    "被拦截的目录穿越尝试次数",
    ["operation"],
)
