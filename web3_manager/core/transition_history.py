"""In-memory record of the transitions applied to the state store."""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Deque, Dict, List, Mapping


__all__ = ["TransitionHistory", "TransitionEntry"]


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


@dataclass(slots=True)
class TransitionEntry:
    """Single applied action tagged with a timestamp."""

    timestamp: str
    action: str
    state: Mapping[str, Any]

    def to_payload(self) -> Dict[str, Any]:
        return {"timestamp": self.timestamp, "action": self.action, "state": dict(self.state)}


class TransitionHistory:
    """Keep a rolling window of recent transitions for later inspection."""

    def __init__(self, *, max_records: int = 200) -> None:
        if max_records < 0:
            raise ValueError("max_records must be non-negative")

        self._entries: Deque[TransitionEntry] = deque(maxlen=max_records)

    def record(self, action: str, state: Mapping[str, Any]) -> None:
        self._entries.append(
            TransitionEntry(timestamp=_now_iso(), action=action, state=dict(state))
        )

    def history(self) -> List[Dict[str, Any]]:
        return [entry.to_payload() for entry in self._entries]

    def clear(self) -> None:
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)
