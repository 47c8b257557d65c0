from __future__ import annotations

import time
import uuid
from dataclasses import dataclass, field
from typing import Any, Mapping, Optional

from .gamut import OklchColor


def now_ms() -> int:
    return int(time.time() * 1000)


def new_id() -> str:
    return uuid.uuid4().hex[:9]


def _flag(d: Mapping[str, Any], key: str) -> bool:
    val = d.get(key, False)
    if not isinstance(val, bool):
        raise ValueError(f"'{key}' must be true or false, got {val!r}")
    return val


@dataclass(frozen=True)
class ColorEntry:
    """A named colour record, in the JSON shape the persistence layer keeps.

    Records are immutable; the cleanup sweep replaces a record rather than
    editing it in place.
    """

    color: OklchColor
    name: str
    id: str = field(default_factory=new_id)
    votes: int = 1
    is_suspicious: bool = False
    suspicious_reason: Optional[str] = None
    timestamp: int = field(default_factory=now_ms)
    is_seed: bool = False

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {
            "id": self.id,
            "color": self.color.to_dict(),
            "name": self.name,
            "votes": self.votes,
            "isSuspicious": self.is_suspicious,
            "timestamp": self.timestamp,
            "isSeed": self.is_seed,
        }
        if self.suspicious_reason is not None:
            out["suspiciousReason"] = self.suspicious_reason
        return out

    @classmethod
    def from_dict(cls, d: Mapping[str, Any]) -> "ColorEntry":
        if not isinstance(d, Mapping):
            raise ValueError(f"record must be an object, got {type(d).__name__}")
        name = d.get("name")
        if not isinstance(name, str) or not name.strip():
            raise ValueError("record needs a non-empty 'name'")
        try:
            return cls(
                id=str(d["id"]) if d.get("id") is not None else new_id(),
                color=OklchColor.from_dict(d.get("color")),
                name=name,
                votes=int(d.get("votes", 1)),
                is_suspicious=_flag(d, "isSuspicious"),
                suspicious_reason=d.get("suspiciousReason"),
                timestamp=int(d.get("timestamp", now_ms())),
                is_seed=_flag(d, "isSeed"),
            )
        except (TypeError, ValueError) as e:
            raise ValueError(f"invalid record: {e}") from e


__all__ = ["ColorEntry", "new_id", "now_ms"]
