import logging

from fastapi import APIRouter, HTTPException, status

from ..models.company import Company, CompanyProfileRequest, PackageRequest
from ..models.question import CompanyQuestionsResponse
from ..models.scrape import ExtractionRequest
from ..services import firebase_service
from ..services.pricing_service import calculate_price
from ..services.question_service import QuestionGenerationError, build_prompt, generate_questions
from ..services.scraper_service import ExtractionError, extract
from .questions import generation_http_error
from .scrape import extraction_http_error

router = APIRouter(prefix="/companies", tags=["Companies"])
logger = logging.getLogger(__name__)


@router.get("", response_model=list[Company])
async def list_companies() -> list[Company]:
    return await firebase_service.list_companies()


@router.get("/{company_id}", response_model=Company)
async def get_company(company_id: str) -> Company:
    return await firebase_service.get_company(company_id)


@router.put("/{company_id}/profile")
async def update_profile(company_id: str, request: CompanyProfileRequest) -> dict:
    return await firebase_service.update_company_profile(
        company_id,
        request.company_name,
        request.company_website,
        request.company_description,
    )


@router.put("/{company_id}/package")
async def configure_package(company_id: str, request: PackageRequest) -> dict:
    quote = calculate_price(request.number_of_questions, request.difficulty_level)
    return await firebase_service.save_package(
        company_id,
        request.number_of_questions,
        request.difficulty_level,
        quote.price,
        user_email=request.user_email,
    )


# ─────────────────────────────────────────────
# POST /companies/{company_id}/questions
# Scrape website → Gemini → Save to Firebase
# ─────────────────────────────────────────────

@router.post("/{company_id}/questions", response_model=CompanyQuestionsResponse)
async def generate_company_questions(company_id: str) -> CompanyQuestionsResponse:
    company = await firebase_service.get_company(company_id)

    if not company.company_website:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=f"Company '{company_id}' has no website configured.",
        )
    if company.number_of_questions <= 0 or not company.difficulty_level:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=f"Company '{company_id}' has no quiz package configured.",
        )

    # 1. Scrape
    try:
        extraction = await extract(ExtractionRequest(url=company.company_website))
    except ExtractionError as exc:
        logger.warning("Scrape failed for company %s: %s", company_id, exc)
        raise extraction_http_error(exc)

    # 2. Generate
    try:
        questions = await generate_questions(build_prompt(company, extraction.content))
    except QuestionGenerationError as exc:
        raise generation_http_error(exc)
    except Exception as exc:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Question generation failed: {exc}",
        )

    # 3. Save
    saved_ids = await firebase_service.save_questions(company.id, company.company_name, questions)

    return CompanyQuestionsResponse(
        company_id=company.id,
        source_url=extraction.source_url,
        word_count=extraction.word_count,
        questions=questions,
        saved_ids=saved_ids,
        message=f"Successfully generated and saved {len(questions)} questions!",
    )
