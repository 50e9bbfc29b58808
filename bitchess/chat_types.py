"""Data types and errors for the chat / LLM subsystem."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _format_timestamp(moment: datetime) -> str:
    """RFC 3339 text in UTC with a ``Z`` suffix."""
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    else:
        moment = moment.astimezone(timezone.utc)
    return moment.replace(tzinfo=None).isoformat() + "Z"


class MessageType(str, enum.Enum):
    """Who wrote a message."""

    USER = "user"
    AI = "ai"
    SYSTEM = "system"

    def __str__(self) -> str:
        return self.value


@dataclass
class Message:
    """A single message in a conversation."""

    id: str
    msg_type: MessageType
    content: str
    game_state: Optional[Dict[str, Any]] = None
    timestamp: datetime = field(default_factory=_utc_now)

    def to_dict(self) -> Dict[str, Any]:
        """JSON-ready mapping with camelCase keys; absent game state is omitted."""
        data: Dict[str, Any] = {
            "id": self.id,
            "type": self.msg_type.value,
            "content": self.content,
        }
        if self.game_state is not None:
            data["gameState"] = self.game_state
        data["timestamp"] = _format_timestamp(self.timestamp)
        return data


@dataclass
class Conversation:
    """A conversation associated with a game."""

    game_id: str
    messages: List[Message] = field(default_factory=list)
    context: Dict[str, str] = field(default_factory=dict)
    created_at: datetime = field(default_factory=_utc_now)
    updated_at: datetime = field(default_factory=_utc_now)


@dataclass
class MoveContext:
    """Game-state context used to enrich LLM prompts."""

    last_move: str = ""
    move_count: int = 0
    current_player: str = ""
    game_status: str = ""
    position_fen: str = ""
    legal_moves: List[str] = field(default_factory=list)
    in_check: bool = False
    captured_piece: Optional[str] = None


@dataclass
class ChatInput:
    """A chat request as seen by the chat service."""

    game_id: str
    message: str
    move_data: Optional[MoveContext] = None
    provider: Optional[str] = None
    api_key: Optional[str] = None


@dataclass
class ChatOutput:
    """A chat reply produced by the chat service."""

    message: str
    message_id: str
    personality: str
    game_context: Optional[Dict[str, Any]] = None
    suggestions: Optional[List[str]] = None
    timestamp: datetime = field(default_factory=_utc_now)

    def to_dict(self) -> Dict[str, Any]:
        """JSON-ready mapping with camelCase keys; absent optional fields are omitted."""
        data: Dict[str, Any] = {
            "message": self.message,
            "messageId": self.message_id,
            "personality": self.personality,
        }
        if self.game_context is not None:
            data["gameContext"] = self.game_context
        if self.suggestions is not None:
            data["suggestions"] = list(self.suggestions)
        data["timestamp"] = _format_timestamp(self.timestamp)
        return data


class ChatError(Exception):
    """Base class for chat / LLM errors."""


class ChatDisabledError(ChatError):
    """LLM chat is switched off."""

    def __init__(self) -> None:
        super().__init__("LLM chat is not enabled")


class UnsupportedProviderError(ChatError):
    """The named provider is not known."""

    def __init__(self, provider: str) -> None:
        super().__init__(f"unsupported provider: {provider}")
        self.provider = provider


class MissingApiKeyError(ChatError):
    """No API key was configured for a provider."""

    def __init__(self, provider: str) -> None:
        super().__init__(f"no API key configured for provider: {provider}")
        self.provider = provider


class RequestFailedError(ChatError):
    """The HTTP request to the LLM could not be completed."""

    def __init__(self, detail: str) -> None:
        super().__init__(f"LLM request failed: {detail}")
        self.detail = detail


class ResponseParseError(ChatError):
    """The LLM response could not be understood."""

    def __init__(self, detail: str) -> None:
        super().__init__(f"failed to parse LLM response: {detail}")
        self.detail = detail


class ProviderError(ChatError):
    """The provider answered with an error status."""

    def __init__(self, detail: str) -> None:
        super().__init__(f"provider error: {detail}")
        self.detail = detail