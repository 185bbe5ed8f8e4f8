from fastapi import APIRouter, Query

from ..models.company import Difficulty, PriceQuote
from ..services.pricing_service import calculate_price

router = APIRouter(prefix="/pricing", tags=["Pricing"])


@router.get("", response_model=PriceQuote)
def quote(
    number_of_questions: int = Query(..., ge=1),
    difficulty_level: Difficulty = Query(...),
) -> PriceQuote:
    return calculate_price(number_of_questions, difficulty_level)
