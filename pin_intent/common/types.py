"""Data types describing intents, matches, requests and network state."""

from __future__ import annotations

import base64
import binascii
import json
from dataclasses import dataclass, field
from datetime import datetime
from enum import IntEnum
from typing import Any, Optional, Union


class IntentStatus(IntEnum):
    """Lifecycle status of an intent."""

    CREATED = 0
    VALIDATED = 1
    BROADCASTED = 2
    RECEIVED = 3
    PROCESSED = 4
    MATCHED = 5
    COMPLETED = 6
    FAILED = 7
    EXPIRED = 8

    def __str__(self) -> str:
        return _STATUS_NAMES.get(self, "unknown")


_STATUS_NAMES = {
    IntentStatus.CREATED: "created",
    IntentStatus.VALIDATED: "validated",
    IntentStatus.BROADCASTED: "broadcasted",
    IntentStatus.PROCESSED: "processed",
    IntentStatus.MATCHED: "matched",
    IntentStatus.COMPLETED: "completed",
    IntentStatus.FAILED: "failed",
    IntentStatus.EXPIRED: "expired",
}


class MatchType(IntEnum):
    """Kind of match found between two intents."""

    EXACT = 0
    PARTIAL = 1
    SEMANTIC = 2
    PATTERN = 3

    def __str__(self) -> str:
        return self.name.lower()


def _encode_bytes(data: bytes) -> str:
    return base64.b64encode(data).decode("ascii")


def _decode_bytes(text: Optional[str]) -> bytes:
    if not text:
        return b""
    try:
        return base64.b64decode(text, validate=True)
    except binascii.Error as exc:
        raise ValueError(f"invalid base64 data: {exc}") from exc


@dataclass
class Tag:
    """A data access requirement with its fee and tradability."""

    tag_name: str = ""
    tag_fee: str = ""
    is_tradable: bool = False

    def to_dict(self) -> dict[str, Any]:
        return {
            "tag_name": self.tag_name,
            "tag_fee": self.tag_fee,
            "is_tradable": self.is_tradable,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Tag":
        return cls(
            tag_name=data.get("tag_name", ""),
            tag_fee=data.get("tag_fee", ""),
            is_tradable=bool(data.get("is_tradable", False)),
        )


@dataclass
class IntentManifest:
    """Describes the task an intent asks for and its requirements."""

    task: str = ""
    requirements: dict[str, str] = field(default_factory=dict)
    context: str = ""

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"task": self.task}
        if self.requirements:
            data["requirements"] = dict(sorted(self.requirements.items()))
        if self.context:
            data["context"] = self.context
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "IntentManifest":
        return cls(
            task=data.get("task", ""),
            requirements=dict(data.get("requirements") or {}),
            context=data.get("context", ""),
        )


@dataclass
class Intent:
    """An intent as created, signed and broadcast across the network."""

    id: str = ""
    type: str = ""
    payload: bytes = b""
    timestamp: int = 0
    sender_id: str = ""
    signature: bytes = b""
    signature_algorithm: str = ""
    metadata: dict[str, str] = field(default_factory=dict)
    status: IntentStatus = IntentStatus.CREATED
    priority: int = 0
    ttl: int = 0
    processed_at: int = 0
    error: str = ""
    matched_intents: list[str] = field(default_factory=list)
    user_address: str = ""
    intent_manifest: Optional[IntentManifest] = None
    relevant_tags: list[Tag] = field(default_factory=list)
    max_duration: int = 0

    def to_dict(self) -> dict[str, Any]:
        """Return the intent as a JSON-ready mapping; empty optional fields are left out."""
        data: dict[str, Any] = {
            "id": self.id,
            "type": self.type,
            "payload": _encode_bytes(self.payload),
            "timestamp": self.timestamp,
            "sender_id": self.sender_id,
        }
        if self.signature:
            data["signature"] = _encode_bytes(self.signature)
        if self.signature_algorithm:
            data["signature_algorithm"] = self.signature_algorithm
        if self.metadata:
            data["metadata"] = dict(sorted(self.metadata.items()))
        data["status"] = int(self.status)
        data["priority"] = self.priority
        data["ttl"] = self.ttl
        if self.processed_at:
            data["processed_at"] = self.processed_at
        if self.error:
            data["error"] = self.error
        if self.matched_intents:
            data["matched_intents"] = list(self.matched_intents)
        if self.user_address:
            data["user_address"] = self.user_address
        if self.intent_manifest is not None:
            data["intent_manifest"] = self.intent_manifest.to_dict()
        if self.relevant_tags:
            data["relevant_tags"] = [tag.to_dict() for tag in self.relevant_tags]
        if self.max_duration:
            data["max_duration"] = self.max_duration
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Intent":
        """Build an intent from a mapping; missing fields take their defaults."""
        manifest = data.get("intent_manifest")
        return cls(
            id=data.get("id", ""),
            type=data.get("type", ""),
            payload=_decode_bytes(data.get("payload")),
            timestamp=int(data.get("timestamp", 0)),
            sender_id=data.get("sender_id", ""),
            signature=_decode_bytes(data.get("signature")),
            signature_algorithm=data.get("signature_algorithm", ""),
            metadata=dict(data.get("metadata") or {}),
            status=IntentStatus(int(data.get("status", 0))),
            priority=int(data.get("priority", 0)),
            ttl=int(data.get("ttl", 0)),
            processed_at=int(data.get("processed_at", 0)),
            error=data.get("error", ""),
            matched_intents=list(data.get("matched_intents") or []),
            user_address=data.get("user_address", ""),
            intent_manifest=(
                IntentManifest.from_dict(manifest) if manifest is not None else None
            ),
            relevant_tags=[Tag.from_dict(t) for t in data.get("relevant_tags") or []],
            max_duration=int(data.get("max_duration", 0)),
        )

    def to_json(self) -> str:
        """Serialise the intent to compact JSON."""
        return json.dumps(self.to_dict(), separators=(",", ":"))

    @classmethod
    def from_json(cls, data: Union[str, bytes]) -> "Intent":
        """Parse an intent from JSON text or bytes."""
        parsed = json.loads(data)
        if not isinstance(parsed, dict):
            raise ValueError("intent JSON must be an object")
        return cls.from_dict(parsed)


@dataclass
class MatchResult:
    """Outcome of comparing two intents."""

    is_match: bool = False
    confidence: float = 0.0
    match_type: MatchType = MatchType.EXACT
    details: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {
            "is_match": self.is_match,
            "confidence": self.confidence,
            "match_type": int(self.match_type),
            "details": dict(self.details),
        }


@dataclass
class CreateIntentRequest:
    """Request to create an intent."""

    type: str = ""
    payload: bytes = b""
    sender_id: str = ""
    metadata: dict[str, str] = field(default_factory=dict)
    priority: int = 0
    ttl: int = 0
    private_key: Any = field(default=None, repr=False)
    user_address: str = ""
    intent_manifest: Optional[IntentManifest] = None
    relevant_tags: list[Tag] = field(default_factory=list)
    max_duration: int = 0


@dataclass
class CreateIntentResponse:
    """Result of creating an intent."""

    intent: Optional[Intent] = None
    success: bool = False
    message: str = ""


@dataclass
class BroadcastIntentRequest:
    """Request to broadcast an intent on a topic."""

    intent: Optional[Intent] = None
    topic: str = ""


@dataclass
class BroadcastIntentResponse:
    """Result of broadcasting an intent."""

    success: bool = False
    intent_id: str = ""
    topic: str = ""
    message: str = ""


@dataclass
class QueryIntentsRequest:
    """Filter and paging parameters for an intent query."""

    type: str = ""
    start_time: int = 0
    end_time: int = 0
    limit: int = 0
    offset: int = 0


@dataclass
class QueryIntentsResponse:
    """Intents found by a query."""

    intents: list[Intent] = field(default_factory=list)
    total: int = 0


@dataclass
class SubscribeIntentsRequest:
    """Intent types and topics to subscribe to."""

    types: list[str] = field(default_factory=list)
    topics: list[str] = field(default_factory=list)


@dataclass
class IntentTracker:
    """Tracks an intent through its lifecycle."""

    intent: Intent
    created_at: datetime = field(default_factory=datetime.now)
    last_updated: datetime = field(default_factory=datetime.now)
    status: IntentStatus = IntentStatus.CREATED
    callbacks: list[Any] = field(default_factory=list)


@dataclass
class IntentSignatureData:
    """The fields of an intent covered by its signature."""

    id: str = ""
    type: str = ""
    payload: bytes = b""
    timestamp: int = 0
    sender_id: str = ""
    metadata: dict[str, str] = field(default_factory=dict)
    priority: int = 0
    ttl: int = 0

    @classmethod
    def from_intent(cls, intent: Intent) -> "IntentSignatureData":
        return cls(
            id=intent.id,
            type=intent.type,
            payload=intent.payload,
            timestamp=intent.timestamp,
            sender_id=intent.sender_id,
            metadata=dict(intent.metadata),
            priority=intent.priority,
            ttl=intent.ttl,
        )

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "id": self.id,
            "type": self.type,
            "payload": _encode_bytes(self.payload),
            "timestamp": self.timestamp,
            "sender_id": self.sender_id,
        }
        if self.metadata:
            data["metadata"] = dict(sorted(self.metadata.items()))
        data["priority"] = self.priority
        data["ttl"] = self.ttl
        return data


@dataclass
class NetworkStatusResponse:
    """Summary of the node's network state."""

    peer_count: int = 0
    connected_peers: list[str] = field(default_factory=list)
    network_health: str = ""
    topic_count: int = 0
    messages_sent: int = 0
    messages_received: int = 0
    metrics: dict[str, Any] = field(default_factory=dict)


@dataclass
class NetworkTopology:
    """Known peers and the connections between them."""

    nodes: list[str] = field(default_factory=list)
    edges: dict[str, list[str]] = field(default_factory=dict)
    stats: dict[str, Any] = field(default_factory=dict)


@dataclass
class NetworkEvent:
    """An event observed on the network."""

    type: str = ""
    peer_id: str = ""
    timestamp: int = 0
    data: dict[str, Any] = field(default_factory=dict)


@dataclass
class ProcessingStatus:
    """State of the intent processor."""

    active_intents: int = 0
    processed_count: int = 0
    failed_count: int = 0
    average_latency: int = 0
    handler_status: dict[str, Any] = field(default_factory=dict)
    pipeline_status: dict[str, Any] = field(default_factory=dict)