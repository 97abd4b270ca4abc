"""Request body models for the JSON API."""

from pydantic import BaseModel, ConfigDict, Field


class _RequestModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class CreateSessionRequest(_RequestModel):
    """Optional body of POST /api/session/create."""

    session_id: str | None = Field(default=None, alias="sessionId")


class ConfirmUploadRequest(_RequestModel):
    """Body sent after a client finished a pre-signed upload."""

    session_id: str | None = Field(default=None, alias="sessionId")
    object_key: str | None = Field(default=None, alias="objectKey")
    image_url: str | None = Field(default=None, alias="imageUrl")


class PresignUploadRequest(_RequestModel):
    """Body requesting a pre-signed upload URL."""

    session_id: str | None = Field(default=None, alias="sessionId")
    filename: str | None = None
    content_type: str | None = Field(default=None, alias="contentType")


class SurveySubmitRequest(_RequestModel):
    """Body of POST /api/survey/submit."""

    session_id: str | None = Field(default=None, alias="sessionId")
    response: str | None = None
    additional_comments: str | None = Field(default=None, alias="additionalComments")
