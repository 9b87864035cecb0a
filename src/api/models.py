"""
API request and response models.

Pydantic models for FastAPI endpoint validation and OpenAPI schema generation.
Only the request shape is checked here; name and email well-formedness is
decided by the domain validators.
"""

from pydantic import BaseModel

from src.domain.newsletter import NewsletterIssue


class NewsletterContent(BaseModel):
    """Both renditions of a newsletter issue body."""

    html: str
    text: str


class PublishNewsletterRequest(BaseModel):
    """Request model for publishing a newsletter issue."""

    title: str
    content: NewsletterContent

    def to_issue(self) -> NewsletterIssue:
        return NewsletterIssue(
            title=self.title,
            html_body=self.content.html,
            text_body=self.content.text,
        )


class HealthResponse(BaseModel):
    """Response model for the health check."""

    status: str


class ErrorResponse(BaseModel):
    """Standard error response model."""

    detail: str
