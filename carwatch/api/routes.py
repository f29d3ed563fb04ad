# carwatch/api/routes.py
from typing import Any, List
from fastapi import APIRouter, Body, Depends, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from .. import schemas
from ..errors import ConfigError, InvalidFilters, RunInProgress
from ..pipeline import Pipeline
from ..utils import logger

router = APIRouter()


def invalid_filters_detail(field: str, message: str) -> dict:
    return {"error": "Invalid filters", "field": field, "message": message}


async def malformed_body(request: Request, exc: RequestValidationError):
    """Answer an unparseable JSON body like any other invalid filter payload."""
    errors = exc.errors()
    message = errors[0].get("msg", "Malformed request body") if errors else "Malformed request body"
    return JSONResponse(status_code=400, content={"detail": invalid_filters_detail("body", message)})


def get_pipeline(request: Request) -> Pipeline:
    return request.app.state.pipeline


@router.get("/health")
def health():
    return {"status": "ok"}


@router.get("/api/listings", response_model=List[schemas.ScoredListing])
def listings(pipeline: Pipeline = Depends(get_pipeline)):
    return pipeline.listings()


@router.get("/api/filters", response_model=schemas.SearchFilters)
def default_filters(pipeline: Pipeline = Depends(get_pipeline)):
    try:
        return pipeline.defaults.get()
    except ConfigError as e:
        logger.error("Failed to read filter config: %s", e)
        raise HTTPException(status_code=500, detail="Unable to load default filters")


@router.post("/api/filters/reload", response_model=schemas.SearchFilters)
def reload_filters(pipeline: Pipeline = Depends(get_pipeline)):
    try:
        return pipeline.defaults.reload()
    except ConfigError as e:
        logger.error("Failed to reload filter config: %s", e)
        raise HTTPException(status_code=500, detail="Unable to load default filters")


@router.post("/api/search", response_model=List[schemas.ScoredListing])
def search(payload: Any = Body(None), pipeline: Pipeline = Depends(get_pipeline)):
    try:
        filters = schemas.validate_filters(payload)
    except InvalidFilters as e:
        raise HTTPException(status_code=400, detail=invalid_filters_detail(e.field, e.message))
    try:
        return pipeline.search(filters)
    except RunInProgress:
        raise HTTPException(status_code=409, detail="A search is already running")
    except Exception as e:
        logger.exception("Search failed: %s", e)
        raise HTTPException(status_code=500, detail="Search failed")
