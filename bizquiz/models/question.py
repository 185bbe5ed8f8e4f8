from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class Question(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    question: str
    options: list[str] = Field(min_length=4, max_length=4)
    correct_answer: int = Field(alias="correctAnswer", ge=0, lt=4)
    explanation: str


class GenerateRequest(BaseModel):
    prompt: str = Field(..., min_length=1)


class GenerateResponse(BaseModel):
    questions: list[Question]
    message: str


class CompanyQuestionsResponse(BaseModel):
    company_id: str
    source_url: str
    word_count: int
    questions: list[Question]
    saved_ids: list[str] = Field(default_factory=list)
    message: Optional[str] = None
