"""Read-only REST endpoints over the sculpture dataset."""

from __future__ import annotations

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from ..data.models import GeneralInfoBlock, SculptureRecord
from ..data.store import DatasetStore

router = APIRouter(prefix="/api")


def _store(request: Request) -> DatasetStore:
    return request.app.state.store


def _not_found(message: str) -> JSONResponse:
    return JSONResponse(status_code=404, content={"error": message})


@router.get("/general/gallery", response_model=GeneralInfoBlock)
async def gallery_info(request: Request) -> GeneralInfoBlock | JSONResponse:
    info = _store(request).get_gallery_info()
    if info is None:
        return _not_found("Gallery information not found")
    return info


@router.get("/general/gothic", response_model=GeneralInfoBlock)
async def gothic_style_info(request: Request) -> GeneralInfoBlock | JSONResponse:
    info = _store(request).get_gothic_style_info()
    if info is None:
        return _not_found("Gothic style information not found")
    return info


@router.get(
    "/sculptures",
    response_model=list[SculptureRecord],
    response_model_exclude_none=True,
)
async def search_sculptures(
    request: Request,
    name: str | None = None,
    artist: str | None = None,
    location: str | None = None,
    year: str | None = None,
) -> list[SculptureRecord]:
    """Search by any combination of fields; no criteria yields an empty list."""
    return _store(request).search(name=name, artist=artist, location=location, year=year)


@router.get(
    "/sculptures/{name}",
    response_model=SculptureRecord,
    response_model_exclude_none=True,
)
async def get_sculpture(name: str, request: Request) -> SculptureRecord | JSONResponse:
    sculpture = _store(request).get_by_name(name)
    if sculpture is None:
        return _not_found("Sculpture not found")
    return sculpture
