"""
FastAPI application: catalog pages, admin panel and the admin proxy.

Run with:
    uvicorn plywood_catalog.main:app --reload
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Any, AsyncIterator, Dict, List, Optional
from urllib.parse import urlencode

import httpx
from fastapi import Depends, FastAPI, Form, HTTPException, Request
from fastapi.responses import HTMLResponse, JSONResponse, RedirectResponse, Response
from fastapi.templating import Jinja2Templates

from .admin import forward_to_script, send_admin_request, validate_row
from .config import Settings, load_settings
from .csv_codec import Record, encode_records
from .errors import AdminError, CatalogError, SheetNotConfigured
from .formatting import format_description
from .models import AdminCommand, CatalogItem, CatalogResponse, CategoryRow, HealthResponse
from .rules import COLUMNS, PRICE_SIZES, price_label, record_key
from .sheet import Catalog, load_catalog

logger = logging.getLogger(__name__)

templates = Jinja2Templates(directory=str(Path(__file__).parent / "templates"))


def configure_logging(settings: Settings) -> None:
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    configure_logging(load_settings())
    yield


app = FastAPI(
    title="plywood-catalog",
    description="Plywood price list rendered from a published spreadsheet",
    version="0.1.0",
    lifespan=lifespan,
)


def get_settings() -> Settings:
    return load_settings()


async def get_http_client(settings: Settings = Depends(get_settings)) -> AsyncIterator[httpx.AsyncClient]:
    async with httpx.AsyncClient(timeout=settings.request_timeout) as client:
        yield client


def _view_item(record: Record) -> Dict[str, Any]:
    return {
        "key": record_key(record),
        "record": record,
        "description_html": format_description(record.get("description", "")),
        "prices": [(size, price_label(record.get(column, ""))) for size, column in PRICE_SIZES],
    }


def _edit_row(rows: List[Record], edit: Optional[str], new: bool) -> Optional[CategoryRow]:
    if new:
        return CategoryRow()
    if not edit:
        return None
    for row in rows:
        if record_key(row) == edit:
            return CategoryRow(**{col: row.get(col, "") for col in COLUMNS})
    return None


def _admin_redirect(ok: bool, message: str) -> RedirectResponse:
    query = urlencode({"status": "success" if ok else "error", "message": message})
    return RedirectResponse(url=f"/admin?{query}", status_code=303)


@app.get("/health", response_model=HealthResponse)
def health():
    return {"ok": True}


@app.get("/", response_class=HTMLResponse)
async def catalog_page(
    request: Request,
    settings: Settings = Depends(get_settings),
    client: httpx.AsyncClient = Depends(get_http_client),
):
    error = None
    catalog = Catalog()
    try:
        catalog = await load_catalog(settings, client)
    except CatalogError as exc:
        error = str(exc)

    return templates.TemplateResponse(
        request,
        "catalog.html",
        {
            "title": settings.site_title,
            "items": [_view_item(record) for record in catalog.items],
            "error": error,
        },
    )


@app.get("/api/catalog", response_model=CatalogResponse)
async def catalog_api(
    settings: Settings = Depends(get_settings),
    client: httpx.AsyncClient = Depends(get_http_client),
):
    try:
        catalog = await load_catalog(settings, client)
    except SheetNotConfigured as exc:
        raise HTTPException(status_code=503, detail=str(exc))
    except CatalogError as exc:
        raise HTTPException(status_code=502, detail=str(exc))

    items = [
        CatalogItem(record=record, description_html=str(format_description(record.get("description", ""))))
        for record in catalog.items
    ]
    return CatalogResponse(items=items, total_rows=len(catalog.rows), visible_rows=len(catalog.items))


@app.get("/catalog.csv")
async def catalog_csv(
    settings: Settings = Depends(get_settings),
    client: httpx.AsyncClient = Depends(get_http_client),
):
    try:
        catalog = await load_catalog(settings, client)
    except SheetNotConfigured as exc:
        raise HTTPException(status_code=503, detail=str(exc))
    except CatalogError as exc:
        raise HTTPException(status_code=502, detail=str(exc))

    columns = list(catalog.rows[0].keys()) if catalog.rows else list(COLUMNS)
    return Response(
        content=encode_records(catalog.items, columns=columns),
        media_type="text/csv; charset=utf-8",
        headers={"Content-Disposition": 'attachment; filename="catalog.csv"'},
    )


@app.get("/admin", response_class=HTMLResponse)
async def admin_page(
    request: Request,
    edit: Optional[str] = None,
    new: bool = False,
    status: Optional[str] = None,
    message: Optional[str] = None,
    settings: Settings = Depends(get_settings),
    client: httpx.AsyncClient = Depends(get_http_client),
):
    error = None
    catalog = Catalog()
    try:
        catalog = await load_catalog(settings, client)
    except CatalogError as exc:
        error = str(exc)

    return templates.TemplateResponse(
        request,
        "admin.html",
        {
            "title": settings.site_title,
            "rows": [_view_item(record) for record in catalog.rows],
            "editing": _edit_row(catalog.rows, edit, new),
            "bypass_proxy": settings.bypass_proxy,
            "status": status,
            "message": message,
            "error": error,
        },
    )


@app.post("/admin/save")
async def admin_save(
    id: str = Form(""),
    category: str = Form(""),
    photo_url: str = Form(""),
    description: str = Form(""),
    price_18mm: str = Form(""),
    price_12mm: str = Form(""),
    price_8mm: str = Form(""),
    price_6mm: str = Form(""),
    stock: str = Form(""),
    visible: str = Form("true"),
    settings: Settings = Depends(get_settings),
    client: httpx.AsyncClient = Depends(get_http_client),
):
    row = CategoryRow(
        id=id,
        category=category,
        photo_url=photo_url,
        description=description,
        price_18mm=price_18mm,
        price_12mm=price_12mm,
        price_8mm=price_8mm,
        price_6mm=price_6mm,
        stock=stock,
        visible=visible,
    )
    try:
        validate_row(row)
        result = await send_admin_request(settings, client, "upsert", row.model_dump())
    except AdminError as exc:
        return _admin_redirect(False, str(exc))
    return _admin_redirect(result.ok, result.message)


@app.post("/admin/delete")
async def admin_delete(
    id: str = Form(""),
    settings: Settings = Depends(get_settings),
    client: httpx.AsyncClient = Depends(get_http_client),
):
    if not id.strip():
        return _admin_redirect(False, "id required")
    try:
        result = await send_admin_request(settings, client, "delete", {"id": id})
    except AdminError as exc:
        return _admin_redirect(False, str(exc))
    return _admin_redirect(result.ok, result.message)


@app.post("/api/proxy")
async def admin_proxy(
    command: AdminCommand,
    settings: Settings = Depends(get_settings),
    client: httpx.AsyncClient = Depends(get_http_client),
):
    try:
        status_code, body = await forward_to_script(settings, client, command.action, command.payload)
    except AdminError as exc:
        return JSONResponse(status_code=500, content={"error": str(exc)})
    return JSONResponse(status_code=status_code, content=body)


if __name__ == "__main__":
    import uvicorn

    settings = load_settings()
    configure_logging(settings)
    uvicorn.run(app, host=settings.host, port=settings.port)
