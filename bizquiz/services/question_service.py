import json
import logging
import re
from typing import Any

from google import genai
from google.genai import types

from ..config import settings
from ..models.company import Company
from ..models.question import Question

logger = logging.getLogger(__name__)

QUESTION_TOPICS = [
    "Company background and mission",
    "Products/services offered",
    "Industry knowledge",
    "Technical concepts related to their field",
]


class QuestionGenerationError(Exception):
    pass


class MissingApiKey(QuestionGenerationError):
    pass


def build_prompt(company: Company, content: str) -> str:
    count = company.number_of_questions
    topics = "\n".join(f"{i}. {topic}" for i, topic in enumerate(QUESTION_TOPICS, start=1))
    return f"""
Based on the following company information and website content, you must generate {count} multiple-choice questions with difficulty level: {company.difficulty_level}.

Company: {company.company_name}
Description: {company.company_description}
Website: {company.company_website}
Website Content: {content}

Please generate questions that test knowledge about:
{topics}

Format each question as JSON with this structure:
{{
  "question": "Question text here",
  "options": ["Option A", "Option B", "Option C", "Option D"],
  "correctAnswer": 0,
  "explanation": "Why this answer is correct"
}}

Return only a valid JSON array of {count} questions. Make sure the JSON is properly formatted and parseable.
""".strip()


# ---------------------------------------------------------------------------
# Response parsing
# ---------------------------------------------------------------------------

def _load_json_array(text: str) -> Any:
    cleaned = re.sub(r"```json\n?|\n?```", "", text).strip()
    try:
        return json.loads(cleaned)
    except json.JSONDecodeError as exc:
        logger.warning("Gemini response was not clean JSON: %s", exc)

    match = re.search(r"\[.*\]", text, flags=re.DOTALL)
    if not match:
        raise QuestionGenerationError("AI response is not in valid JSON format")
    try:
        return json.loads(match.group(0))
    except json.JSONDecodeError as exc:
        raise QuestionGenerationError("Failed to parse AI response as JSON") from exc


def _is_valid_question(item: Any) -> bool:
    if not isinstance(item, dict):
        return False
    options = item.get("options")
    answer = item.get("correctAnswer")
    return (
        isinstance(item.get("question"), str)
        and isinstance(options, list)
        and len(options) == 4
        and all(isinstance(option, str) for option in options)
        and isinstance(answer, int)
        and not isinstance(answer, bool)
        and 0 <= answer < 4
        and isinstance(item.get("explanation"), str)
    )


def parse_questions(text: str) -> list[Question]:
    data = _load_json_array(text)
    if not isinstance(data, list):
        raise QuestionGenerationError("AI response is not an array of questions")

    questions = [Question.model_validate(item) for item in data if _is_valid_question(item)]
    if not questions:
        raise QuestionGenerationError("No valid questions generated")

    dropped = len(data) - len(questions)
    if dropped:
        logger.warning("Dropped %d malformed question(s) from Gemini response", dropped)
    return questions


# ---------------------------------------------------------------------------
# Gemini
# ---------------------------------------------------------------------------

async def _generate_text(prompt: str) -> str:
    if not settings.gemini_api_key:
        raise MissingApiKey("No Gemini API key configured (GEMINI_API_KEY or GOOGLE_API_KEY)")

    client = genai.Client(api_key=settings.gemini_api_key)
    response = await client.aio.models.generate_content(
        model=settings.gemini_model,
        contents=prompt,
        config=types.GenerateContentConfig(temperature=settings.gemini_temperature),
    )
    return (response.text or "").strip()


async def generate_questions(prompt: str) -> list[Question]:
    """Send a prompt to Gemini and return the well-formed questions it produced."""
    text = await _generate_text(prompt)
    questions = parse_questions(text)
    logger.info("Gemini generated %d valid question(s)", len(questions))
    return questions
