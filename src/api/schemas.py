from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

from src.core.schemas import ClassificationResult, ClassificationSchema


class ClassificationRequest(BaseModel):
    """
    DTO for incoming classification requests.

    Either `content` (already plain text) or `subject` (+ optional `message`,
    which may be HTML) must be provided.
    """

    model_config = ConfigDict(populate_by_name=True)

    content: Optional[str] = Field(None, description="Plain-text ticket content")
    subject: Optional[str] = Field(None, description="Ticket subject")
    message: Optional[str] = Field(None, description="Latest customer message, HTML allowed")
    classification_schema: ClassificationSchema = Field(..., alias="schema")

    @model_validator(mode="after")
    def require_content_or_subject(self) -> "ClassificationRequest":
        if not (self.content and self.content.strip()) and not (self.subject and self.subject.strip()):
            raise ValueError("Either 'content' or 'subject' is required.")
        return self


class ClassificationResponse(BaseModel):
    """
    DTO for the classification result.
    """

    result: ClassificationResult
    changes: List[str] = Field(default_factory=list, description="What a host would apply")
