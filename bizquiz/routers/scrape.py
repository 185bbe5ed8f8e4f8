from fastapi import APIRouter, HTTPException, Query, status

from ..models.scrape import ExtractionRequest, ExtractionResult
from ..services.scraper_service import (
    ExtractionError,
    ExtractionTimeout,
    FetchFailed,
    InsufficientContent,
    InvalidUrl,
    extract,
)

router = APIRouter(prefix="/scrape", tags=["Scrape"])

_ERROR_STATUS = {
    InvalidUrl: status.HTTP_400_BAD_REQUEST,
    ExtractionTimeout: status.HTTP_408_REQUEST_TIMEOUT,
    FetchFailed: status.HTTP_502_BAD_GATEWAY,
    InsufficientContent: status.HTTP_422_UNPROCESSABLE_ENTITY,
}


def extraction_http_error(exc: ExtractionError) -> HTTPException:
    code = _ERROR_STATUS.get(type(exc), status.HTTP_500_INTERNAL_SERVER_ERROR)
    return HTTPException(status_code=code, detail=str(exc))


@router.get("", response_model=ExtractionResult)
async def scrape_get(url: str = Query(...)) -> ExtractionResult:
    try:
        return await extract(ExtractionRequest(url=url))
    except ExtractionError as exc:
        raise extraction_http_error(exc)


@router.post(
    "",
    response_model=ExtractionResult,
    summary="Scrape a company website",
    description=(
        "Fetches the page, drops navigation and script markup, and returns the title, "
        "meta description, headings, paragraphs and main content as one normalized "
        "block of text capped at 8000 characters."
    ),
)
async def scrape_post(request: ExtractionRequest) -> ExtractionResult:
    try:
        return await extract(request)
    except ExtractionError as exc:
        raise extraction_http_error(exc)
