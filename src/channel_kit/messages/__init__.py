"""Message models and raw payloads."""

from channel_kit.messages.models import Endpoint, Message, MessageContent, MessageProperty
from channel_kit.messages.source import ContentTypeMismatchError, MessageSource

__all__ = [
    "ContentTypeMismatchError",
    "Endpoint",
    "Message",
    "MessageContent",
    "MessageProperty",
    "MessageSource",
]
