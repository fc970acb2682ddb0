from __future__ import annotations

from dataclasses import dataclass
from typing import Dict


@dataclass(frozen=True, slots=True)
class MessageEnvelope:
    """What a handler receives for one publish.

    ``payload`` is the publisher's object, not a copy. Snapshot payloads are
    lists of frozen records, so sharing them between handlers is safe.
    """

    topic: str
    payload: object
    source: str
    sequence: int
    timestamp: str
    trace_id: str = ""

    def describe(self) -> Dict[str, object]:
        """Log-friendly view without the payload body."""
        return {
            "topic": self.topic,
            "source": self.source,
            "sequence": self.sequence,
            "timestamp": self.timestamp,
            "trace_id": self.trace_id,
            "payload_type": type(self.payload).__name__,
        }
