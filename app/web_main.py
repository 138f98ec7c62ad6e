from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from pathlib import Path
from typing import cast

from fastapi import Depends, FastAPI, HTTPException, Query, Request
from fastapi.responses import HTMLResponse, ORJSONResponse
from fastapi.templating import Jinja2Templates

from app.config import AppSettings, load_settings
from app.wiring import LayoutContext, build_context
from domain.errors import StructuralError, ValidationError
from domain.models import LayoutNode, Page
from domain.services.layout_options import options_for_select

TEMPLATES_DIR = Path(__file__).parent / "web" / "templates"

templates = Jinja2Templates(directory=str(TEMPLATES_DIR))
logger = logging.getLogger(__name__)


def create_app(settings: AppSettings, context: LayoutContext | None = None) -> FastAPI:
    context = context if context is not None else build_context(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        if settings.layouts.bootstrap_on_start:
            bootstrap_app_layouts(context)
        yield

    app = FastAPI(title=settings.layouts.title, lifespan=lifespan)
    app.state.context = context

    @app.exception_handler(StructuralError)
    def structural_error_handler(request: Request, exc: StructuralError) -> ORJSONResponse:
        logger.error("Broken layout tree while serving %s: %s", request.url.path, exc)
        return ORJSONResponse(status_code=409, content={"detail": str(exc)})

    @app.get("/api/sites/{site_id}/layouts/options")
    def api_layout_options(
        site_id: str,
        exclude_id: str | None = Query(default=None),
        context: LayoutContext = Depends(get_context),
    ) -> ORJSONResponse:
        if context.sites.get(site_id) is None:
            raise HTTPException(status_code=404, detail="Site not found")
        excluded = context.layouts.get(exclude_id) if exclude_id else None
        options = options_for_select(
            context.layouts,
            site_id,
            exclude=excluded,
            spacer=context.settings.layouts.spacer,
        )
        return ORJSONResponse(
            {"options": [{"label": label, "id": layout_id} for label, layout_id in options]}
        )

    @app.get("/api/layouts/{layout_id}/merged")
    def api_layout_merged(
        layout_id: str,
        context: LayoutContext = Depends(get_context),
    ) -> ORJSONResponse:
        layout = require_layout(context, layout_id)
        chain = context.merger.ancestry(layout)
        return ORJSONResponse(
            {
                "layout_id": layout.id,
                "chain": [node.identifier for node in chain],
                "content": context.merger.merged_content(layout),
            }
        )

    @app.get("/api/layouts/{layout_id}/css")
    def api_layout_css(
        layout_id: str,
        context: LayoutContext = Depends(get_context),
    ) -> ORJSONResponse:
        layout = require_layout(context, layout_id)
        return ORJSONResponse({"layout_id": layout.id, "css": context.merger.processed_css(layout)})

    @app.post("/api/layouts/{layout_id}/invalidate")
    def api_layout_invalidate(
        layout_id: str,
        context: LayoutContext = Depends(get_context),
    ) -> ORJSONResponse:
        layout = require_layout(context, layout_id)
        report = context.invalidator.cascade(layout)
        return ORJSONResponse(
            {
                "visited_layout_ids": report.visited_layout_ids,
                "cleared_page_ids": report.cleared_page_ids,
                "failed_layout_ids": report.failed_layout_ids,
            }
        )

    @app.get("/api/pages/{page_id}/render")
    def api_page_render(
        page_id: str,
        context: LayoutContext = Depends(get_context),
    ) -> ORJSONResponse:
        page = require_page(context, page_id)
        return ORJSONResponse(context.renderer.render(page).to_dict())

    @app.get("/pages/{page_id}", response_class=HTMLResponse)
    def page_view(
        page_id: str,
        request: Request,
        context: LayoutContext = Depends(get_context),
    ) -> HTMLResponse:
        page = require_page(context, page_id)
        rendered = context.renderer.render(page)
        return templates.TemplateResponse(
            request,
            "page.html",
            {"page": page, "rendered": rendered},
        )

    return app


def get_context(request: Request) -> LayoutContext:
    return cast(LayoutContext, request.app.state.context)


def require_layout(context: LayoutContext, layout_id: str) -> LayoutNode:
    layout = context.layouts.get(layout_id)
    if layout is None:
        raise HTTPException(status_code=404, detail="Layout not found")
    return layout


def require_page(context: LayoutContext, page_id: str) -> Page:
    page = context.pages.get(page_id)
    if page is None:
        raise HTTPException(status_code=404, detail="Page not found")
    return page


def bootstrap_app_layouts(context: LayoutContext) -> None:
    for site in context.sites.list_all():
        try:
            layouts = context.bootstrap.run(site)
        except ValidationError:
            logger.exception("Could not bootstrap application layouts for site %r.", site.identifier)
            continue
        logger.info(
            "Bootstrapped %d application layout(s) for site %r.", len(layouts), site.identifier
        )


def create_default_app() -> FastAPI:
    return create_app(load_settings())
