from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import cast

from fastapi import Depends, FastAPI, HTTPException, Query, Request
from fastapi.responses import ORJSONResponse, Response

from app.config import AppSettings, load_settings
from app.render_wiring import build_export_service, build_timeline_source
from domain.errors import RenderEncodingError, TimelineNotFoundError
from domain.models import ExportFormat, RenderedArtifact
from domain.ports.repositories import TimelineSource
from domain.services.export_timeline import ExportTimeline

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ExportContext:
    settings: AppSettings
    source: TimelineSource


def create_app(settings: AppSettings) -> FastAPI:
    app = FastAPI(title=settings.title)
    app.state.context = ExportContext(settings=settings, source=build_timeline_source(settings))

    @app.get("/health")
    def health() -> dict[str, str]:
        return {"status": "ok"}

    @app.get("/api/timelines")
    def api_timelines(context: ExportContext = Depends(get_context)) -> ORJSONResponse:
        return ORJSONResponse({"timelines": list(context.source.list_ids())})

    @app.get("/api/timelines/{timeline_id}/export.svg")
    def api_export_svg(
        timeline_id: str,
        download: bool = Query(default=False),
        service: ExportTimeline = Depends(get_export_service),
    ) -> Response:
        artifact = run_export(service, timeline_id, ExportFormat.SVG)
        return artifact_response(artifact, download)

    @app.get("/api/timelines/{timeline_id}/export.pdf")
    def api_export_pdf(
        timeline_id: str,
        download: bool = Query(default=False),
        service: ExportTimeline = Depends(get_export_service),
    ) -> Response:
        artifact = run_export(service, timeline_id, ExportFormat.PDF)
        return artifact_response(artifact, download)

    return app


def get_context(request: Request) -> ExportContext:
    return cast(ExportContext, request.app.state.context)


def get_export_service(context: ExportContext = Depends(get_context)) -> ExportTimeline:
    # Renderers hold per-render drawing state, so each request gets its own.
    return build_export_service(context.settings, context.source)


def run_export(service: ExportTimeline, timeline_id: str, fmt: ExportFormat) -> RenderedArtifact:
    try:
        return service.export(timeline_id, fmt)
    except TimelineNotFoundError as exc:
        raise HTTPException(status_code=404, detail="Timeline not found") from exc
    except RenderEncodingError as exc:
        logger.exception("Failed to export timeline %s as %s", timeline_id, fmt.value)
        raise HTTPException(status_code=500, detail="Export failed") from exc


def artifact_response(artifact: RenderedArtifact, download: bool) -> Response:
    headers = {}
    if download:
        headers["Content-Disposition"] = f'attachment; filename="{artifact.filename}"'
    return Response(content=artifact.content, media_type=artifact.media_type, headers=headers)


app = create_app(load_settings())
