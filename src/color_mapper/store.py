"""In-process record store: keyed, appendable, subscribable.

Subscribers receive the full snapshot on subscribe and after every change,
mirroring a realtime-database ``onValue`` listener.
"""

from __future__ import annotations

import itertools
import json
import logging
import threading
from dataclasses import dataclass, replace
from typing import Callable, Dict, Iterable, List, Optional, Tuple

from .config import DEFAULT_CONFIG
from .models import ColorEntry, now_ms

log = logging.getLogger(__name__)

Snapshot = Tuple[ColorEntry, ...]
Listener = Callable[[Snapshot], None]

DAY_MS = 24 * 60 * 60 * 1000


@dataclass(frozen=True)
class PruneReport:
    deleted: int
    updated: int

    def to_dict(self) -> dict:
        return {"deletedCount": self.deleted, "updatedCount": self.updated}


class EntryStore:
    def __init__(self, entries: Iterable[ColorEntry] = ()) -> None:
        self._lock = threading.RLock()
        self._seq = itertools.count()
        self._entries: Dict[str, ColorEntry] = {}
        self._listeners: List[Listener] = []
        for e in entries:
            self._entries[self._next_key()] = e

    def _next_key(self) -> str:
        return f"k{next(self._seq):08d}"

    # ---- reads ----

    def snapshot(self) -> Snapshot:
        with self._lock:
            return tuple(self._entries.values())

    def get(self, key: str) -> Optional[ColorEntry]:
        with self._lock:
            return self._entries.get(key)

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def human_count(self) -> int:
        return sum(1 for e in self.snapshot() if not e.is_seed)

    # ---- writes ----

    def append(self, entry: ColorEntry) -> str:
        with self._lock:
            key = self._next_key()
            self._entries[key] = entry
        log.debug("stored %r as %s", entry.name, key)
        self._notify()
        return key

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        with self._lock:
            self._listeners.append(listener)
        listener(self.snapshot())

        def unsubscribe() -> None:
            with self._lock:
                if listener in self._listeners:
                    self._listeners.remove(listener)

        return unsubscribe

    def _notify(self) -> None:
        with self._lock:
            listeners = list(self._listeners)
        snap = self.snapshot()
        for listener in listeners:
            listener(snap)

    def prune(
        self,
        now: Optional[int] = None,
        max_age_days: float = DEFAULT_CONFIG.prune_max_age_days,
    ) -> PruneReport:
        """Cleanup sweep over records at least ``max_age_days`` old.

        Suspicious records are deleted; accepted ones lose their rejection
        reason.  Newer records are untouched.
        """
        cutoff = (now_ms() if now is None else now) - int(max_age_days * DAY_MS)
        deleted = updated = 0
        with self._lock:
            for key, e in list(self._entries.items()):
                if e.timestamp > cutoff:
                    continue
                if e.is_suspicious:
                    del self._entries[key]
                    deleted += 1
                elif e.suspicious_reason is not None:
                    self._entries[key] = replace(e, suspicious_reason=None)
                    updated += 1
        log.info("prune: deleted %d, updated %d (cutoff %d)", deleted, updated, cutoff)
        if deleted or updated:
            self._notify()
        return PruneReport(deleted, updated)

    # ---- backup / restore ----

    def export_json(self) -> str:
        accepted = [e.to_dict() for e in self.snapshot() if not e.is_suspicious]
        return json.dumps(accepted, ensure_ascii=False, indent=2)

    def import_json(self, text: str) -> int:
        """Replace seed data with imported records, de-duplicated by id.

        Returns the number of records stored afterwards.
        """
        try:
            raw = json.loads(text)
        except json.JSONDecodeError as e:
            raise ValueError(f"backup is not valid JSON: {e}") from e
        if not isinstance(raw, list):
            raise ValueError("backup must be a JSON array of records")
        imported = [ColorEntry.from_dict(d) for d in raw]

        with self._lock:
            by_id: Dict[str, ColorEntry] = {}
            for e in self._entries.values():
                if not e.is_seed:
                    by_id[e.id] = e
            for e in imported:
                by_id[e.id] = e
            self._entries = {self._next_key(): e for e in by_id.values()}
            total = len(self._entries)
        log.info("imported %d records, %d stored", len(imported), total)
        self._notify()
        return total


__all__ = ["DAY_MS", "EntryStore", "PruneReport"]
