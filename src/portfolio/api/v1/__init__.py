"""API 路由聚合。"""

from fastapi import APIRouter

from portfolio.api.v1 import auth, comments, files, posts, projects, users

api_router = APIRouter(prefix="/api")

api_router.include_router(auth.router, prefix="/auth", tags=["auth"])
api_router.include_router(posts.router, prefix="/posts", tags=["posts"])
api_router.include_router(comments.router, prefix="/comments", tags=["comments"])
api_router.include_router(projects.router, prefix="/projects", tags=["projects"])
api_router.include_router(users.router, tags=["users"])
# 共享目录浏览与下载
api_router.include_router(files.router, prefix="/files", tags=["files"])
