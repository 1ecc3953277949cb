"""Conversion of uploaded documents into transmissible payloads."""

from __future__ import annotations

import asyncio
import base64
import binascii
import logging
import mimetypes
import typing as t
from pathlib import Path

from anatomyguard.model import EncodedDocument, MediaType, SourceDocument

from .errors import DocumentTooLarge, EmptyDocument, UndecodableDocument, UnsupportedMediaType

logger = logging.getLogger(__name__)

DEFAULT_MAX_BYTES = 20 * 1024 * 1024

SUFFIX_MEDIA_TYPES: dict[str, str] = {
    ".pdf": MediaType.PDF.value,
    ".doc": MediaType.Word.value,
    ".docx": MediaType.WordOpenXML.value,
}


def normalize_media_type(media_type: str) -> str:
    """Drop parameters and case from a media type, ``"Application/PDF; x=y"`` -> ``"application/pdf"``."""
    return media_type.split(";", 1)[0].strip().lower()


class DocumentEncoder(object):
    """Encodes document bytes as base64 after checking them against an allow-list.

    The encoder is stateless; a single instance may be shared between
    concurrent evaluations.
    """

    def __init__(self, allowed_media_types: t.Iterable[str] | None = None, max_bytes: int | None = None):
        if allowed_media_types is None:
            allowed_media_types = [m.value for m in MediaType]
        self.allowed_media_types = frozenset(normalize_media_type(m) for m in allowed_media_types)
        self.max_bytes = max_bytes if max_bytes is not None else DEFAULT_MAX_BYTES

    def supports_media_type(self, media_type: str) -> bool:
        return normalize_media_type(media_type) in self.allowed_media_types

    def encode(self, data: bytes | t.BinaryIO, *, name: str, media_type: str) -> EncodedDocument:
        """Encode raw document bytes.

        Args:
            data: Document content, or a binary file object to read it from
            name: Display name, usually the file name
            media_type: Declared media type of the content

        Returns:
            EncodedDocument with base64 content

        Raises:
            UnsupportedMediaType: media type is not in the allow-list
            EmptyDocument: there are no bytes to encode
            DocumentTooLarge: the content exceeds ``max_bytes``
        """
        if not self.supports_media_type(media_type):
            raise UnsupportedMediaType(name, media_type, sorted(self.allowed_media_types))

        raw = data if isinstance(data, bytes) else data.read()
        if not raw:
            raise EmptyDocument(name)
        if len(raw) > self.max_bytes:
            raise DocumentTooLarge(name, len(raw), self.max_bytes)

        logger.debug(
            "encoded document",
            extra={
                "document": name,
                "media_type": media_type,
                "size": len(raw),
            },
        )
        return EncodedDocument(
            name=name,
            media_type=normalize_media_type(media_type),
            content=base64.b64encode(raw).decode("ascii"),
        )

    def encode_source(self, document: SourceDocument) -> EncodedDocument:
        return self.encode(document.data, name=document.name, media_type=document.media_type)

    def encode_path(self, path: Path, *, media_type: str | None = None) -> EncodedDocument:
        """Read and encode a document from disk, guessing its media type from the suffix."""
        if media_type is None:
            media_type = SUFFIX_MEDIA_TYPES.get(path.suffix.lower())
        if media_type is None:
            media_type, _ = mimetypes.guess_type(path.name)
        if media_type is None:
            raise UnsupportedMediaType(path.name, "unknown", sorted(self.allowed_media_types))
        return self.encode(path.read_bytes(), name=path.name, media_type=media_type)

    async def encode_pair(
        self, artifact: SourceDocument, feedback: SourceDocument
    ) -> tuple[EncodedDocument, EncodedDocument]:
        """Encode the artifact bundle and the feedback document concurrently.

        Both encodings must succeed; the first failure is raised.
        """
        encoded_artifact, encoded_feedback = await asyncio.gather(
            asyncio.to_thread(self.encode_source, artifact),
            asyncio.to_thread(self.encode_source, feedback),
        )
        return encoded_artifact, encoded_feedback

    def decode(self, document: EncodedDocument) -> bytes:
        try:
            return base64.b64decode(document.content, validate=True)
        except (binascii.Error, ValueError) as e:
            raise UndecodableDocument(document.name) from e

    def revalidate(self, document: EncodedDocument) -> EncodedDocument:
        """Check an already-encoded document received from an untrusted caller."""
        if not self.supports_media_type(document.media_type):
            raise UnsupportedMediaType(document.name, document.media_type, sorted(self.allowed_media_types))
        return self.encode(self.decode(document), name=document.name, media_type=document.media_type)
