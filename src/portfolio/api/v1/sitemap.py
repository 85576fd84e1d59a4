"""站点地图：GET /sitemap.xml。"""

from fastapi import APIRouter, Depends
from fastapi.responses import Response
from sqlalchemy.ext.asyncio import AsyncSession

from portfolio.core.config import get_settings
from portfolio.db.clients.database import get_db
from portfolio.services.sitemap_service import build_sitemap, render_sitemap_xml

router = APIRouter()


@router.get("/sitemap.xml", response_class=Response, include_in_schema=False)
async def sitemap(db: AsyncSession = Depends(get_db)) -> Response:
    entries = await build_sitemap(db, get_settings().site_url)
    return Response(content=render_sitemap_xml(entries), media_type="application/xml")
