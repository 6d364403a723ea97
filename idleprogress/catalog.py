"""Reward catalog: which drop candidates are unlocked at a given distance."""
from __future__ import annotations

import bisect
import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Iterable

from idleprogress.state import RESOURCE_SLOTS

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DropCandidate:
    """One reward the accrual engine can grant."""

    id: int
    unlock_threshold: float = 0.0
    name: str = ""
    price: int = 0

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> DropCandidate:
        id = data["item_num"] if "item_num" in data else data["id"]
        if "zoneMinKm" in data:
            threshold = data["zoneMinKm"]
        else:
            threshold = data.get("unlock_threshold", 0.0)
        return cls(
            id=int(id),
            unlock_threshold=float(threshold),
            name=str(data.get("name", "")),
            price=int(data.get("item_price", data.get("price", 0))),
        )


class RewardCatalog:
    """Candidates sorted by unlock threshold.

    ``unlocked_candidates`` returns a cached tuple per unlocked prefix, so
    repeated queries at the same progress level don't allocate.
    """

    def __init__(self, candidates: Iterable[DropCandidate] | None = None) -> None:
        self._candidates: list[DropCandidate] = []
        self._thresholds: list[float] = []
        self._prefix_cache: dict[int, tuple[DropCandidate, ...]] = {}
        self.is_loaded = False
        if candidates is not None:
            self.load(candidates)

    def load(self, candidates: Iterable[DropCandidate]) -> None:
        ordered = sorted(candidates, key=lambda c: c.unlock_threshold)
        self._candidates = ordered
        self._thresholds = [c.unlock_threshold for c in ordered]
        self._prefix_cache = {}
        self.is_loaded = True

    @classmethod
    def from_json(cls, source: str | Path) -> RewardCatalog:
        """Build a catalog from JSON text or a path to a JSON file.

        Accepts ``{"SupplyItem": [...]}`` or a bare list. Malformed input
        yields an empty (but loaded) catalog; malformed entries are skipped.
        """
        if isinstance(source, Path):
            text = source.read_text(encoding="utf-8")
        else:
            text = source

        try:
            data = json.loads(text) if text.strip() else []
        except json.JSONDecodeError as e:
            logger.warning("Reward catalog is not valid JSON: %s", e)
            data = []

        if isinstance(data, dict):
            data = data.get("SupplyItem") or data.get("candidates") or []
        if not isinstance(data, list):
            logger.warning("Reward catalog has unexpected shape %s", type(data).__name__)
            data = []

        candidates: list[DropCandidate] = []
        for raw in data:
            try:
                candidate = DropCandidate.from_dict(raw)
            except (KeyError, TypeError, ValueError) as e:
                logger.warning("Skipping malformed catalog entry %r: %s", raw, e)
                continue
            if not 0 <= candidate.id < RESOURCE_SLOTS:
                logger.warning("Skipping catalog entry %d: no such resource slot", candidate.id)
                continue
            candidates.append(candidate)
        return cls(candidates)

    def __len__(self) -> int:
        return len(self._candidates)

    @property
    def candidates(self) -> list[DropCandidate]:
        return list(self._candidates)

    def unlocked_candidates(self, distance_km: float) -> tuple[DropCandidate, ...]:
        """Candidates whose unlock threshold is <= *distance_km*, in threshold order."""
        count = bisect.bisect_right(self._thresholds, distance_km)
        cached = self._prefix_cache.get(count)
        if cached is None:
            cached = tuple(self._candidates[:count])
            self._prefix_cache[count] = cached
        return cached
