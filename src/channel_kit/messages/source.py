"""Raw inbound payloads handed to connector receive operations."""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Final, overload
from urllib.parse import parse_qsl

from pydantic import TypeAdapter

BINARY_CONTENT_TYPE: Final[str] = "application/octet-stream"
JSON_CONTENT_TYPE: Final[str] = "application/json"
XML_CONTENT_TYPE: Final[str] = "application/xml"
TEXT_CONTENT_TYPE: Final[str] = "text/plain"
URL_POST_CONTENT_TYPE: Final[str] = "application/x-www-form-urlencoded"


class ContentTypeMismatchError(ValueError):
    """Raised when a payload is read with an accessor for another content type."""

    def __init__(self, content_type: str, expected: str) -> None:
        super().__init__(f"Cannot read content of type '{content_type}' as '{expected}'")
        self.content_type: str = content_type
        self.expected: str = expected


@dataclass(frozen=True, slots=True)
class MessageSource:
    """Raw payload received from a provider (webhook body, queue item, ...).

    Attributes:
        content_type: MIME type of the payload
        content: Raw bytes
        encoding: Text encoding of the payload; UTF-8 when None
    """

    content_type: str
    content: bytes
    encoding: str | None = None

    def __post_init__(self) -> None:
        if not self.content_type or not self.content_type.strip():
            msg = "Content type cannot be empty"
            raise ValueError(msg)

    def _decode(self) -> str:
        return self.content.decode(self.encoding or "utf-8")

    def _require(self, expected: str) -> None:
        if self.content_type != expected:
            raise ContentTypeMismatchError(self.content_type, expected)

    def as_text(self) -> str:
        """Decode a ``text/plain`` payload.

        Raises:
            ContentTypeMismatchError: If the payload is not plain text
        """
        self._require(TEXT_CONTENT_TYPE)
        return self._decode()

    @overload
    def as_json(self) -> object: ...

    @overload
    def as_json[T](self, model: type[T]) -> T: ...

    def as_json[T](self, model: type[T] | None = None) -> T | object:
        """Decode a JSON payload, optionally validating it into ``model``.

        Args:
            model: Optional type (pydantic model, dataclass, TypedDict, ...)

        Returns:
            The decoded JSON value, or an instance of ``model``

        Raises:
            ContentTypeMismatchError: If the payload is not JSON
            pydantic.ValidationError: If the payload does not fit ``model``
        """
        self._require(JSON_CONTENT_TYPE)
        if model is None:
            return json.loads(self._decode())
        return TypeAdapter(model).validate_json(self._decode())

    def as_url_post_data(self) -> dict[str, str]:
        """Parse an URL-encoded form payload into a name/value mapping.

        Raises:
            ContentTypeMismatchError: If the payload is not form data
        """
        self._require(URL_POST_CONTENT_TYPE)
        return dict(parse_qsl(self._decode(), keep_blank_values=True))

    @classmethod
    def text(cls, text: str, encoding: str = "utf-8") -> MessageSource:
        return cls(TEXT_CONTENT_TYPE, text.encode(encoding), encoding)

    @classmethod
    def json(cls, payload: str, encoding: str = "utf-8") -> MessageSource:
        return cls(JSON_CONTENT_TYPE, payload.encode(encoding), encoding)

    @classmethod
    def xml(cls, payload: str, encoding: str = "utf-8") -> MessageSource:
        return cls(XML_CONTENT_TYPE, payload.encode(encoding), encoding)

    @classmethod
    def url_post(cls, payload: str, encoding: str = "utf-8") -> MessageSource:
        return cls(URL_POST_CONTENT_TYPE, payload.encode(encoding), encoding)

    @classmethod
    def binary(cls, content: bytes) -> MessageSource:
        return cls(BINARY_CONTENT_TYPE, content)
