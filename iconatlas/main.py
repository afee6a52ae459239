import logging
from pathlib import Path
from typing import Optional
from urllib.parse import quote

from fastapi import FastAPI, Form, Request
from fastapi.responses import HTMLResponse, JSONResponse, Response
from fastapi.templating import Jinja2Templates

from . import crud
from .catalog import CatalogQuery, index as build_index
from .config.settings import DEFAULT_ICON_SIZE, DEFAULT_PROVIDER, GRID_ICON_SIZE, PAGE_SIZE
from .database import Base, SessionLocal, engine, ensure_postgres_indexes
from .descriptors import IconDescriptor
from .palettes import COLOR_THEMES, DEFAULT_PALETTE, is_valid_color, resolve_color
from .providers import ALL_CATEGORIES, UnknownProviderError, build_default_registry
from .render import MAX_SIZE, MIN_SIZE, render_cell
from .selection import export_snippet, export_svg
from .session import CatalogSession, IconNotFoundError
from .write_safety import favorite_limiter, get_client_ip, validate_favorite

logger = logging.getLogger(__name__)

app = FastAPI(title="Icon Atlas")

templates = Jinja2Templates(directory=str(Path(__file__).parent / "templates"))

MAX_PAGE_SIZE = 500


@app.on_event("startup")
async def startup_event():
    """Initialize the favorites schema and open the default provider."""
    try:
        Base.metadata.create_all(bind=engine)
        logger.info("Base tables created/verified")
    except Exception as e:
        logger.warning(f"Could not create base tables (might already exist in managed DB): {e}")

    try:
        ensure_postgres_indexes()
    except Exception as e:
        logger.warning(f"Could not create indexes: {e}")

    session = CatalogSession(build_default_registry())
    app.state.catalog_session = session
    try:
        await session.activate(DEFAULT_PROVIDER)
    except UnknownProviderError:
        logger.warning(f"DEFAULT_PROVIDER {DEFAULT_PROVIDER!r} is not registered; no provider active")


@app.on_event("shutdown")
async def shutdown_event():
    session: Optional[CatalogSession] = getattr(app.state, "catalog_session", None)
    if session is not None:
        await session.registry.aclose()


# ==================================================
# ERRORS
# ==================================================


@app.exception_handler(UnknownProviderError)
async def unknown_provider_handler(request: Request, exc: UnknownProviderError):
    return JSONResponse({"error": f"Unknown provider: {exc.args[0]}"}, status_code=404)


@app.exception_handler(IconNotFoundError)
async def icon_not_found_handler(request: Request, exc: IconNotFoundError):
    return JSONResponse({"error": f"Icon not found: {exc.args[0]}"}, status_code=404)


class BadRequest(Exception):
    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


@app.exception_handler(BadRequest)
async def bad_request_handler(request: Request, exc: BadRequest):
    logger.warning(f"{request.method} {request.url.path}: {exc.message}")
    return JSONResponse({"error": exc.message}, status_code=400)


# ==================================================
# HELPERS
# ==================================================


def get_catalog(request: Request) -> CatalogSession:
    return request.app.state.catalog_session


def _render_params(palette: str, shade: int, color: Optional[str], size: int) -> tuple[str, int]:
    """Explicit color wins over palette/shade. Raises BadRequest on invalid input."""
    if color:
        if not is_valid_color(color):
            raise BadRequest(f"Invalid color {color!r}")
        resolved = color.strip()
    else:
        resolved = resolve_color(palette, shade)
    if not MIN_SIZE <= size <= MAX_SIZE:
        raise BadRequest(f"size must be between {MIN_SIZE} and {MAX_SIZE}")
    return resolved, size


def _catalog_query(q: str, sort: str, page: int, page_size: int) -> CatalogQuery:
    if sort not in ("asc", "desc"):
        raise BadRequest(f"sort must be 'asc' or 'desc', got {sort!r}")
    return CatalogQuery(
        query=q,
        sort_ascending=sort != "desc",
        page=page,
        page_size=min(page_size, MAX_PAGE_SIZE),
    )


def _find_icon(session: CatalogSession, provider: str, name: str) -> IconDescriptor:
    """Look up any registered provider's icon (not only the active one)."""
    if provider == session.active_key:
        return session.find(name)
    for d in session.registry.get(provider).descriptors():
        if d.name == name:
            return d
    raise IconNotFoundError(f"{provider}/{name}")


def _get_grid_results(session: CatalogSession, q: str, sort: str, page: int, palette: str, shade: int, size: int):
    """
    Shared grid logic for the full page and the AJAX partial.
    Returns template context: rendered cells, paging and A-Z groups.
    """
    query = _catalog_query(q, sort, page, PAGE_SIZE)
    color, size = _render_params(palette, shade, None, size)
    result = session.browse(query)
    dispatcher = session.dispatcher()

    cells = [
        {
            "name": d.name,
            "kind": d.kind.value,
            "markup": render_cell(dispatcher, d, size, color),
        }
        for d in result.paginated
    ]
    q = (q or "").strip()
    return {
        "cells": cells,
        "provider": session.active_key,
        "query": q,
        "query_encoded": quote(q),
        "sort": sort,
        "palette": palette,
        "shade": shade,
        "color": color,
        "size": size,
        "page": result.page,
        "total_pages": result.total_pages,
        "total_results": result.total_results,
        "page_size": result.page_size,
        "has_previous": result.has_previous,
        "has_next": result.has_next,
        "groups": [(initial, len(group)) for initial, group in result.grouped_by_initial],
        "assets": session.asset_counts(),
    }


# ==================================================
# PAGES
# ==================================================


@app.get("/", response_class=HTMLResponse)
async def index(
    request: Request,
    provider: str = "",
    q: str = "",
    sort: str = "asc",
    page: int = 1,
    palette: str = DEFAULT_PALETTE,
    shade: int = 0,
    category: str = ALL_CATEGORIES,
):
    session = get_catalog(request)
    if provider:
        await session.activate(provider)
    ctx = _get_grid_results(session, q, sort, page, palette, shade, GRID_ICON_SIZE)
    selected = session.selection.current()
    return templates.TemplateResponse(
        request,
        "index.html",
        {
            "providers": session.registry.filter_providers("", category),
            "categories": session.registry.categories(),
            "category": category,
            "palettes": list(COLOR_THEMES),
            "selected": selected,
            "selected_markup": render_cell(session.dispatcher(), selected, DEFAULT_ICON_SIZE, ctx["color"]) if selected else "",
            "snippet": export_snippet(selected, ctx["color"], DEFAULT_ICON_SIZE) if selected else "",
            **ctx,
        },
    )


@app.get("/grid", response_class=HTMLResponse)
def grid(
    request: Request,
    q: str = "",
    sort: str = "asc",
    page: int = 1,
    palette: str = DEFAULT_PALETTE,
    shade: int = 0,
    size: int = GRID_ICON_SIZE,
):
    """Returns only the results grid HTML (partial) for AJAX replacement."""
    ctx = _get_grid_results(get_catalog(request), q, sort, page, palette, shade, size)
    return templates.TemplateResponse(
        request,
        "results.html",
        ctx,
    )


# ==================================================
# PROVIDERS
# ==================================================


@app.get("/api/providers")
def list_providers(request: Request, q: str = "", category: str = ALL_CATEGORIES):
    session = get_catalog(request)
    return JSONResponse({
        "providers": [info.to_dict() for info in session.registry.filter_providers(q, category)],
        "categories": session.registry.categories(),
        "active": session.active_key,
    })


@app.get("/api/providers/{key}/icons")
def provider_icons(request: Request, key: str, q: str = "", sort: str = "asc", page: int = 1, page_size: int = PAGE_SIZE):
    """Catalog view of one provider's icons. Does not change the active provider."""
    spec = get_catalog(request).registry.get(key)
    result = build_index(spec.descriptors(), _catalog_query(q, sort, page, page_size))
    return JSONResponse({"provider": key, **result.to_dict()})


@app.post("/api/providers/{key}/activate")
async def activate_provider(request: Request, key: str, wait: bool = False):
    """
    Make `key` the active provider and start prefetching its async assets.
    With wait=true the response is sent after every asset has settled.
    """
    session = get_catalog(request)
    logger.info(f"POST /api/providers/{key}/activate from {get_client_ip(request)}")
    await session.activate(key)
    if wait:
        await session.wait_for_assets()
    return JSONResponse({
        "active": session.active_key,
        "icons": len(session.descriptors),
        "assets": session.asset_counts(),
    })


@app.get("/api/assets")
def asset_status(request: Request):
    session = get_catalog(request)
    return JSONResponse({"provider": session.active_key, **session.asset_counts()})


@app.get("/api/suggestions")
def suggestions(request: Request, q: str = ""):
    """Autocomplete names from the active provider."""
    q = (q or "").strip()
    if not q:
        return JSONResponse({"suggestions": []})
    return JSONResponse({"suggestions": get_catalog(request).suggest(q)})


# ==================================================
# SELECTION & EXPORT
# ==================================================


@app.post("/api/select")
def select_icon(request: Request, name: str = Form(...)):
    selected = get_catalog(request).select(name.strip())
    return JSONResponse({"selected": selected.to_dict()})


@app.get("/api/selection")
def current_selection(request: Request):
    selected = get_catalog(request).selection.current()
    return JSONResponse({"selected": selected.to_dict() if selected else None})


@app.get("/api/icons/{provider}/{name}/snippet")
def icon_snippet(
    request: Request,
    provider: str,
    name: str,
    palette: str = DEFAULT_PALETTE,
    shade: int = 0,
    color: Optional[str] = None,
    size: int = DEFAULT_ICON_SIZE,
):
    descriptor = _find_icon(get_catalog(request), provider, name)
    color, size = _render_params(palette, shade, color, size)
    db = SessionLocal()
    try:
        favorite = crud.is_favorite(db, provider, name)
    finally:
        db.close()
    return JSONResponse({
        "provider": provider,
        "name": name,
        "color": color,
        "size": size,
        "favorite": favorite,
        "snippet": export_snippet(descriptor, color, size),
    })


@app.get("/api/icons/{provider}/{name}.svg")
def icon_svg(
    request: Request,
    provider: str,
    name: str,
    palette: str = DEFAULT_PALETTE,
    shade: int = 0,
    color: Optional[str] = None,
    size: int = DEFAULT_ICON_SIZE,
):
    session = get_catalog(request)
    descriptor = _find_icon(session, provider, name)
    color, size = _render_params(palette, shade, color, size)
    assets = session.loader.cache if provider == session.active_key else None
    svg = export_svg(descriptor, size, color, assets)
    if svg is None:
        return JSONResponse(
            {"error": f"No SVG available for {provider}/{name} ({descriptor.kind.value})"},
            status_code=404,
        )
    return Response(
        svg,
        media_type="image/svg+xml",
        headers={"Content-Disposition": f'attachment; filename="{quote(name)}.svg"'},
    )


@app.get("/api/icons/{provider}/{name}.png")
def icon_png(request: Request, provider: str, name: str):
    """Raster export is left to the client; point it at the SVG download."""
    _find_icon(get_catalog(request), provider, name)
    return JSONResponse(
        {
            "error": "PNG export is not available; convert the SVG download instead",
            "svg": f"/api/icons/{quote(provider)}/{quote(name)}.svg",
        },
        status_code=501,
    )


# ==================================================
# FAVORITES
# ==================================================


@app.get("/api/favorites")
def list_favorites(provider: str = ""):
    db = SessionLocal()
    try:
        favorites = crud.list_favorites(db, provider or None)
        return JSONResponse({"favorites": [f.to_dict() for f in favorites]})
    finally:
        db.close()


@app.post("/api/favorites")
async def add_favorite(
    request: Request,
    provider: str = Form(...),
    name: str = Form(...),
    color: Optional[str] = Form(None),
    size: Optional[int] = Form(None),
):
    """
    Star an icon. Rate limited per IP.
    The icon must exist in a registered provider.
    """
    ip = get_client_ip(request)
    provider, name = provider.strip(), name.strip()
    logger.info(f"POST /api/favorites from {ip}: {provider}/{name}")

    if not favorite_limiter.is_allowed(ip):
        return JSONResponse(
            {"error": "Too many requests. Please wait before trying again."},
            status_code=429,
        )

    ok, error = validate_favorite(provider, name, size)
    if not ok:
        raise BadRequest(error)
    if color and not is_valid_color(color):
        raise BadRequest(f"Invalid color {color!r}")
    _find_icon(get_catalog(request), provider, name)

    db = SessionLocal()
    try:
        favorite, created = crud.add_favorite(db, provider, name, color=color, size=size)
        return JSONResponse(
            {"status": "created" if created else "exists", "favorite": favorite.to_dict()},
            status_code=201 if created else 200,
        )
    finally:
        db.close()


@app.delete("/api/favorites/{provider}/{name}")
def remove_favorite(request: Request, provider: str, name: str):
    ip = get_client_ip(request)
    if not favorite_limiter.is_allowed(ip):
        return JSONResponse(
            {"error": "Too many requests. Please wait before trying again."},
            status_code=429,
        )

    db = SessionLocal()
    try:
        if not crud.remove_favorite(db, provider, name):
            return JSONResponse({"error": f"{provider}/{name} is not a favorite"}, status_code=404)
        return JSONResponse({"status": "removed"})
    finally:
        db.close()


# ==================================================
# PALETTES
# ==================================================


@app.get("/api/palettes")
def palettes():
    return JSONResponse({"palettes": COLOR_THEMES, "default": DEFAULT_PALETTE})
