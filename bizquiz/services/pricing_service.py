import random
from typing import Optional

from ..models.company import PriceQuote

PRICE_RANGES: dict[tuple[int, str], tuple[float, float]] = {
    (10, "easy"): (8, 15),
    (10, "medium"): (12, 22),
    (10, "hard"): (18, 30),
    (20, "easy"): (15, 28),
    (20, "medium"): (22, 40),
    (20, "hard"): (35, 55),
    (30, "easy"): (20, 38),
    (30, "medium"): (32, 58),
    (30, "hard"): (48, 75),
}
DEFAULT_PRICE_RANGE = (10, 50)


def price_range(number_of_questions: int, difficulty_level: str) -> tuple[float, float]:
    return PRICE_RANGES.get((number_of_questions, difficulty_level), DEFAULT_PRICE_RANGE)


def calculate_price(
    number_of_questions: int,
    difficulty_level: str,
    rng: Optional[random.Random] = None,
) -> PriceQuote:
    """Quote a random price inside the range for this package, rounded to cents."""
    low, high = price_range(number_of_questions, difficulty_level)
    draw = (rng or random).random()
    price = round(draw * (high - low) + low, 2)
    return PriceQuote(
        number_of_questions=number_of_questions,
        difficulty_level=difficulty_level,
        price=price,
        min_price=low,
        max_price=high,
    )
