import pydantic as p

from .base import BaseModel, WireModel


class SourceDocument(BaseModel):
    """A document as received from the caller, before encoding."""

    model_config = p.ConfigDict(frozen=True)

    name: str
    media_type: str
    data: bytes


class EncodedDocument(WireModel):
    """A document in transmissible form: base64 content plus its declared media type.

    Earlier relay clients named these fields ``mimeType`` and ``data``; both are
    still accepted on input.
    """

    name: str
    media_type: str = p.Field(validation_alias=p.AliasChoices("mediaType", "mimeType"))
    content: str = p.Field(validation_alias=p.AliasChoices("content", "data"))
