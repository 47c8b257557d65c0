"""Name moderation boundary.

The real moderator is a remote language model; here it is only an
interface.  Anything with a ``moderate(color, name, hue_name=...)`` method
returning a :class:`Verdict` can be plugged in.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import FrozenSet, Optional, Protocol, Tuple

from .gamut import OklchColor
from .models import ColorEntry, now_ms
from .store import EntryStore

log = logging.getLogger(__name__)

ACCEPTED_FEEDBACK = "命名十分貼切！"
REJECTED_FEEDBACK = "這名字沒辦法收錄喔"
OUTAGE_REASON = "API Error"
OUTAGE_FEEDBACK = "AI罷工中，先算你過！"


@dataclass(frozen=True)
class Verdict:
    accepted: bool
    reason: Optional[str] = None
    feedback: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "accepted": self.accepted,
            "reason": self.reason,
            "feedback": self.feedback,
        }


class Moderator(Protocol):
    def moderate(
        self, color: OklchColor, name: str, hue_name: Optional[str] = None
    ) -> Verdict: ...


@dataclass(frozen=True)
class StubModerator:
    """Accepts every name except those in ``blocked``."""

    blocked: FrozenSet[str] = field(default_factory=frozenset)
    reason: str = "名稱與顏色不符"

    def moderate(
        self, color: OklchColor, name: str, hue_name: Optional[str] = None
    ) -> Verdict:
        if name in self.blocked:
            return Verdict(False, self.reason)
        return Verdict(True)


def moderate_safely(
    moderator: Moderator, color: OklchColor, name: str, hue_name: Optional[str] = None
) -> Verdict:
    """Fail open: a moderator outage lets the name through."""
    try:
        return moderator.moderate(color, name, hue_name=hue_name)
    except Exception:
        log.exception("moderation failed for %r", name)
        return Verdict(True, OUTAGE_REASON, OUTAGE_FEEDBACK)


def submit_name(
    store: EntryStore,
    color: OklchColor,
    name: str,
    moderator: Moderator,
    hue_name: Optional[str] = None,
) -> Tuple[ColorEntry, Verdict]:
    name = name.strip()
    if not name:
        raise ValueError("name must not be empty")

    verdict = moderate_safely(moderator, color, name, hue_name)
    if verdict.feedback is None:
        default = ACCEPTED_FEEDBACK if verdict.accepted else REJECTED_FEEDBACK
        verdict = Verdict(verdict.accepted, verdict.reason, default)

    entry = ColorEntry(
        color=color,
        name=name,
        votes=1,
        is_suspicious=not verdict.accepted,
        suspicious_reason=verdict.reason,
        timestamp=now_ms(),
        is_seed=False,
    )
    store.append(entry)
    log.info("submitted %r at hue %s (accepted=%s)", name, color.h, verdict.accepted)
    return entry, verdict


__all__ = [
    "Moderator",
    "StubModerator",
    "Verdict",
    "moderate_safely",
    "submit_name",
]
