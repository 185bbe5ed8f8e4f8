from fastapi import APIRouter, HTTPException, status

from ..models.question import GenerateRequest, GenerateResponse
from ..services.question_service import MissingApiKey, QuestionGenerationError, generate_questions

router = APIRouter(prefix="/questions", tags=["Questions"])


def generation_http_error(exc: QuestionGenerationError) -> HTTPException:
    if isinstance(exc, MissingApiKey):
        return HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(exc))
    return HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(exc))


@router.post(
    "",
    response_model=GenerateResponse,
    summary="Generate quiz questions",
    description="Sends the prompt to Gemini and returns the well-formed multiple-choice questions.",
)
async def generate(request: GenerateRequest) -> GenerateResponse:
    try:
        questions = await generate_questions(request.prompt)
    except QuestionGenerationError as exc:
        raise generation_http_error(exc)
    except Exception as exc:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Question generation failed: {exc}",
        )

    return GenerateResponse(
        questions=questions,
        message=f"Successfully generated {len(questions)} questions",
    )
