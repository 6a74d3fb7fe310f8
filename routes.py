"""FastAPI routes for Image Random."""
import logging
import secrets
from typing import Optional

from fastapi import Header, HTTPException, Query, Request
from fastapi.responses import FileResponse, HTMLResponse, JSONResponse
from starlette.concurrency import run_in_threadpool

from catalog import Catalog
from config import Config
from errors import ImageNotFoundError
from folders import thumbnails_dir
from ingest import save_upload
from models import Category, UploadStatus
from templates_static import jinja_env
from utils import resolve_under_root

logger = logging.getLogger(__name__)

MEDIA_TYPE = "image/webp"


def render(name: str, **ctx) -> HTMLResponse:
    """Render template with context."""
    template = jinja_env.get_template(name)
    ctx.setdefault("title", "Image Random")
    ctx.setdefault("categories", [c.value for c in Category])
    return HTMLResponse(template.render(**ctx))


def visitor(request: Request) -> tuple[str, str]:
    """Client IP and country, preferring Cloudflare's headers."""
    ip = request.headers.get("CF-Connecting-IP")
    if not ip:
        ip = request.client.host if request.client else ""
    country = request.headers.get("CF-IPCountry") or "Unknown country"
    return ip, country


def _catalog(request: Request) -> Catalog:
    return request.app.state.catalog


def _config(request: Request) -> Config:
    return request.app.state.config


def _category(subfolder: str) -> Category:
    category = Category.parse(subfolder)
    if category is None:
        raise HTTPException(404, "Invalid subfolder.")
    return category


def _serve(path) -> FileResponse:
    if not path.exists():
        raise HTTPException(404, "Image not found.")
    return FileResponse(path, media_type=MEDIA_TYPE)


def index(request: Request, category: str = Query("all")):
    """Gallery of thumbnails for a category."""
    active = _category(category)
    names = [p.name for p in _catalog(request).by_category(active)]
    return render("gallery.html", active=active.value, names=names)


def get_image(filename: str, request: Request):
    """Serve a catalogued image by file name."""
    ip, country = visitor(request)
    logger.info("Visitor IP: %s, Country: %s, file: %s", ip, country, filename)
    path = _catalog(request).by_filename(filename)
    if path is None:
        raise HTTPException(404, "Image not found.")
    return _serve(path)


def get_list(subfolder: str, request: Request):
    """List image file names in a category."""
    images = _catalog(request).by_category(_category(subfolder))
    if not images:
        raise HTTPException(404, "No images found.")
    return [p.name for p in images]


def random_image(subfolder: str, request: Request):
    """Serve a random image from a category."""
    ip, country = visitor(request)
    logger.info("Visitor IP: %s, Country: %s, Subfolder: %s", ip, country, subfolder)
    category = _category(subfolder)
    try:
        path = _catalog(request).random(category)
    except ImageNotFoundError:
        raise HTTPException(404, "No images found.")
    return _serve(path)


def get_thumbnail(filename: str, request: Request):
    """Serve a cached thumbnail."""
    folder = thumbnails_dir(_config(request).root)
    path = resolve_under_root(folder, folder / filename)
    if not path.is_file():
        raise HTTPException(404, "Thumbnail not found.")
    return FileResponse(path, media_type=MEDIA_TYPE)


async def upload_image(
    subfolder: str,
    request: Request,
    authorization: Optional[str] = Header(None),
):
    """Save uploaded images into a category. Requires the bearer token."""
    config = _config(request)
    ip, country = visitor(request)
    expected = f"Bearer {config.token}"
    if authorization is None or not secrets.compare_digest(
        authorization.encode("latin-1"), expected.encode("latin-1")
    ):
        logger.warning("Unauthorized access from IP: %s, Country: %s", ip, country)
        raise HTTPException(401, "Unauthorized.")

    category = _category(subfolder)
    if category is Category.ALL:
        raise HTTPException(404, "Invalid subfolder.")

    form = await request.form()
    uploads = []
    for _, value in form.multi_items():
        if isinstance(value, str) or not value.filename:
            raise HTTPException(400, "No filename found.")
        uploads.append((value.filename, await value.read()))

    results = []
    for filename, data in uploads:
        result = await run_in_threadpool(
            save_upload, config.root, category, filename, data, _catalog(request)
        )
        if result.status is not UploadStatus.FAILED:
            logger.info("Image uploaded from %s saved to %s", ip, result.path)
        results.append(result)

    statuses = {r.status for r in results}
    if UploadStatus.FAILED in statuses:
        return JSONResponse(
            status_code=500,
            content={
                "detail": "Failed to save image.",
                "files": [r.to_dict() for r in results],
            },
        )
    if UploadStatus.THUMBNAIL_FAILED in statuses:
        return JSONResponse(
            status_code=207,
            content={
                "detail": "Image uploaded successfully, but failed to create thumbnail.",
                "files": [r.to_dict() for r in results],
            },
        )
    return [r.url for r in results]
