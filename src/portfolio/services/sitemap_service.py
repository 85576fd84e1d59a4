"""站点地图：静态页面 + 已发布文章与项目。"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from xml.sax.saxutils import escape

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from portfolio.db.models import Post, Project
from portfolio.db.models.base import utcnow

STATIC_ROUTES = ("", "/blog", "/projects", "/files", "/login", "/register")


@dataclass(frozen=True)
class SitemapEntry:
    url: str
    last_modified: datetime
    change_frequency: str
    priority: float


async def build_sitemap(db: AsyncSession, site_url: str) -> list[SitemapEntry]:
    base = site_url.rstrip("/")
    now = utcnow()
    entries = [
        SitemapEntry(f"{base}{route}", now, "daily", 1.0 if route == "" else 0.8)
        for route in STATIC_ROUTES
    ]

    posts = await db.execute(select(Post.id, Post.updated_at).where(Post.published.is_(True)))
    entries.extend(
        SitemapEntry(f"{base}/blog/{pid}", updated, "weekly", 0.7) for pid, updated in posts.all()
    )
    projects = await db.execute(select(Project.id, Project.updated_at).where(Project.published.is_(True)))
    entries.extend(
        SitemapEntry(f"{base}/projects/{pid}", updated, "weekly", 0.7) for pid, updated in projects.all()
    )
    return entries


def render_sitemap_xml(entries: list[SitemapEntry]) -> str:
    lines = [
        '<?xml version="1.0" encoding="UTF-8"?>',
        '<urlset xmlns="http://www.sitemaps.org/schemas/sitemap/0.9">',
    ]
    for e in entries:
        lines.append(
            "  <url>"
            f"<loc>{escape(e.url)}</loc>"
            f"<lastmod>{e.last_modified.isoformat()}</lastmod>"
            f"<changefreq>{e.change_frequency}</changefreq>"
            f"<priority>{e.priority:.1f}</priority>"
            "</url>"
        )
    lines.append("</urlset>")
    return "\n".join(lines) + "\n"
