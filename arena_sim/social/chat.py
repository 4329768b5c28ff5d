"""Match-scoped chat. Pure pass-through: resolution never reads it."""

from __future__ import annotations

from dataclasses import dataclass
from itertools import count
from typing import Optional


@dataclass(frozen=True)
class ChatMessage:
    message_id: str
    sender_id: str
    sender_name: str
    text: str
    day: int
    recipient_id: Optional[str] = None
    recipient_name: Optional[str] = None

    @property
    def is_whisper(self) -> bool:
        return self.recipient_id is not None


class ChatLog:
    """Append-only message list."""

    def __init__(self) -> None:
        self.messages: list[ChatMessage] = []
        self._ids = count(1)

    def post(
        self,
        sender_id: str,
        sender_name: str,
        text: str,
        day: int,
        recipient_id: Optional[str] = None,
        recipient_name: Optional[str] = None,
    ) -> ChatMessage:
        message = ChatMessage(
            message_id=f"msg-{next(self._ids):05d}",
            sender_id=sender_id,
            sender_name=sender_name,
            text=text,
            day=day,
            recipient_id=recipient_id,
            recipient_name=recipient_name,
        )
        self.messages.append(message)
        return message

    def visible_to(self, entity_id: str) -> list[ChatMessage]:
        """Public messages plus whispers sent or received by ``entity_id``."""
        return [
            m for m in self.messages
            if not m.is_whisper or entity_id in (m.sender_id, m.recipient_id)
        ]
