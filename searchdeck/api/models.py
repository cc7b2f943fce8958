"""Request and response bodies for the HTTP API."""

from typing import Literal

from pydantic import BaseModel, Field

from searchdeck.models.results import (
    Attachment,
    ChatTurn,
    ImageProvider,
    SearchFocus,
)


class ChatTurnBody(BaseModel):
    role: Literal["user", "assistant"]
    content: str

    def to_domain(self) -> ChatTurn:
        return ChatTurn(role=self.role, content=self.content)


class AttachmentBody(BaseModel):
    name: str
    content: str
    mime_type: str = "text/plain"

    def to_domain(self) -> Attachment:
        return Attachment(name=self.name, content=self.content, mime_type=self.mime_type)


class SearchRequest(BaseModel):
    query: str = Field(..., min_length=1)
    focus: SearchFocus = SearchFocus.ALL
    model_id: str | None = None
    history: list[ChatTurnBody] = Field(default_factory=list)
    attachment: AttachmentBody | None = None


class ImageRequest(BaseModel):
    prompt: str = Field(..., min_length=1)
    provider: ImageProvider | None = None
    model_hint: str | None = None


class ImageResponse(BaseModel):
    provider: ImageProvider
    image_uri: str


class CredentialUpdate(BaseModel):
    """Replacement key list for one pool; ``provider`` is required for the image family."""

    keys: list[str]
    provider: ImageProvider | None = None


class CredentialValidationRequest(BaseModel):
    family: Literal["answer", "image", "media"]
    credential: str = Field(..., min_length=1)
    provider: ImageProvider | None = None


class CredentialValidationResponse(BaseModel):
    family: str
    provider: str | None
    fingerprint: str
    valid: bool
