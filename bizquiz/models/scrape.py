from pydantic import BaseModel, Field


class ExtractionRequest(BaseModel):
    url: str = Field(..., description="Absolute http(s) URL of the page to scrape.")


class ExtractionResult(BaseModel):
    content: str = Field(description="Normalized page text, at most 8000 characters plus a '...' marker.")
    title: str
    source_url: str
    word_count: int = Field(description="Number of single-space separated tokens in content.")
