from typing import List, Optional
from urllib.parse import urlparse

from pydantic import BaseModel, Field, field_validator

LINKABLE_SCHEMES = ("http", "https")


class LessonRequest(BaseModel):
    word: str = Field(..., min_length=1)

    @field_validator("word", mode="before")
    @classmethod
    def strip_word(cls, v):
        return v.strip() if isinstance(v, str) else v


class GroundingSource(BaseModel):
    uri: Optional[str] = None
    title: Optional[str] = None

    @property
    def label(self) -> str:
        return self.title or self.uri or ""

    @property
    def is_linkable(self) -> bool:
        return bool(self.uri) and urlparse(self.uri).scheme.lower() in LINKABLE_SCHEMES


class LLMResponse(BaseModel):
    text: str
    sources: List[GroundingSource] = Field(default_factory=list)


class ParsedLesson(BaseModel):
    lesson: str
    prompts: List[str] = Field(default_factory=list)
    sources: List[GroundingSource] = Field(default_factory=list)


def displayable_sources(sources: List[GroundingSource]) -> List[GroundingSource]:
    """Sources are kept as received; only http(s) links are shown."""
    return [s for s in sources if s.is_linkable]
