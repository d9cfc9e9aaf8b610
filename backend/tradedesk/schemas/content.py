"""Content Schemas — blog categories, tags, posts and FAQ entries.

Invariants:
    - FAQ question 10–500 chars, answer 20–10000 chars, category 2–50 chars of
      letters, digits, spaces, dashes or underscores
    - FAQ order 0 means "append to the end of the page"
"""

from uuid import UUID

from pydantic import BaseModel, Field, field_validator

from tradedesk.core.domain_types import PostStatus

_CATEGORY_PATTERN = r"^[a-zA-Z0-9\s\-_]+$"


class BlogCategoryCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=191)
    slug: str | None = Field(None, max_length=191)
    image: str | None = None
    description: str | None = None


class BlogCategoryUpdate(BaseModel):
    name: str | None = Field(None, min_length=1, max_length=191)
    slug: str | None = Field(None, max_length=191)
    image: str | None = None
    description: str | None = None


class BlogTagCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=191)
    slug: str | None = Field(None, max_length=191)


class BlogTagUpdate(BaseModel):
    name: str | None = Field(None, min_length=1, max_length=191)
    slug: str | None = Field(None, max_length=191)


class PostCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=255)
    slug: str | None = Field(None, max_length=255)
    content: str = Field(..., min_length=1)
    description: str | None = None
    category_id: UUID | None = None
    author_id: UUID | None = None
    status: PostStatus = PostStatus.DRAFT
    image: str | None = None
    tag_ids: list[UUID] = Field(default_factory=list)


class PostUpdate(BaseModel):
    title: str | None = Field(None, min_length=1, max_length=255)
    slug: str | None = Field(None, max_length=255)
    content: str | None = Field(None, min_length=1)
    description: str | None = None
    category_id: UUID | None = None
    author_id: UUID | None = None
    status: PostStatus | None = None
    image: str | None = None
    tag_ids: list[UUID] | None = None


class FaqCreate(BaseModel):
    question: str = Field(..., min_length=10, max_length=500)
    answer: str = Field(..., min_length=20, max_length=10_000)
    category: str = Field(..., min_length=2, max_length=50, pattern=_CATEGORY_PATTERN)
    page_path: str = Field(..., min_length=1, max_length=191)
    image: str | None = None
    tags: list[str] = Field(default_factory=list, max_length=20)
    status: bool = True
    order: int = Field(0, ge=0)
    related_faq_ids: list[UUID] = Field(default_factory=list)

    @field_validator("question", "answer", "category", "page_path")
    @classmethod
    def strip(cls, v: str) -> str:
        return v.strip()


class FaqUpdate(BaseModel):
    question: str | None = Field(None, min_length=10, max_length=500)
    answer: str | None = Field(None, min_length=20, max_length=10_000)
    category: str | None = Field(None, min_length=2, max_length=50, pattern=_CATEGORY_PATTERN)
    page_path: str | None = Field(None, min_length=1, max_length=191)
    image: str | None = None
    tags: list[str] | None = Field(None, max_length=20)
    status: bool | None = None
    order: int | None = Field(None, ge=0)
    related_faq_ids: list[UUID] | None = None


class FaqReorderRequest(BaseModel):
    faq_id: UUID
    target_id: UUID | None = None
    target_page_path: str | None = Field(None, max_length=191)
