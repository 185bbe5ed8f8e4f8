from typing import Literal, Optional

from pydantic import BaseModel, Field, field_validator

Difficulty = Literal["easy", "medium", "hard"]


class Company(BaseModel):
    id: str
    company_name: str = ""
    company_description: str = ""
    company_website: str = ""
    number_of_questions: int = 0
    difficulty_level: Optional[str] = None
    calculated_price: Optional[float] = None

    @classmethod
    def from_document(cls, doc_id: str, data: dict) -> "Company":
        return cls(
            id=doc_id,
            company_name=data.get("companyName") or "",
            company_description=data.get("companyDescription") or "",
            company_website=data.get("companyWebsite") or "",
            number_of_questions=data.get("numberOfQuestions") or 0,
            difficulty_level=data.get("difficultyLevel") or None,
            calculated_price=data.get("calculatedPrice"),
        )


class CompanyProfileRequest(BaseModel):
    company_name: str = Field(..., description="Display name of the company.")
    company_website: str = ""
    company_description: str = ""

    @field_validator("company_name", "company_website", "company_description")
    @classmethod
    def strip_whitespace(cls, value: str) -> str:
        return value.strip()

    @field_validator("company_name")
    @classmethod
    def require_name(cls, value: str) -> str:
        if not value:
            raise ValueError("Company name is required")
        return value


class PackageRequest(BaseModel):
    number_of_questions: Literal[10, 20, 30]
    difficulty_level: Difficulty
    user_email: Optional[str] = None


class PriceQuote(BaseModel):
    number_of_questions: int
    difficulty_level: str
    price: float = Field(ge=0.0)
    min_price: float
    max_price: float
