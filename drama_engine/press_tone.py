"""Editorial tone packs for generated media articles."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Dict, List, Optional, Tuple

import yaml

from .config import data_path
from .models import OutletTone
from .rng import RandomSource, random_item

logger = logging.getLogger(__name__)

_TONE_FILE = "outlet_tones.yaml"
_FALLBACK_SUBHEADLINE = "Here's what we know so far."


class ToneLibrary:
    """Loads subheadline pools per outlet tone."""

    def __init__(self, path: Path | None = None) -> None:
        self._path = path or data_path() / _TONE_FILE
        self._pools: Dict[str, Tuple[str, ...]] = {}
        self._load()

    def _load(self) -> None:
        if not self._path.exists():
            logger.warning("Tone pack file %s missing; using the neutral fallback", self._path)
            self._pools = {}
            return
        with self._path.open("r", encoding="utf-8") as handle:
            raw = yaml.safe_load(handle) or {}
        tones = raw.get("tones", {})
        self._pools = {
            str(tone): self._normalise((entry or {}).get("subheadlines"))
            for tone, entry in tones.items()
        }

    @staticmethod
    def _normalise(value) -> Tuple[str, ...]:
        if isinstance(value, list):
            return tuple(str(item) for item in value if item)
        if value:
            return (str(value),)
        return ()

    @property
    def available_tones(self) -> List[str]:
        return sorted(tone for tone, pool in self._pools.items() if pool)

    def subheadlines(self, tone: OutletTone | str) -> Tuple[str, ...]:
        key = tone.value if isinstance(tone, OutletTone) else str(tone)
        pool = self._pools.get(key) or self._pools.get(OutletTone.NEUTRAL.value)
        return pool or (_FALLBACK_SUBHEADLINE,)

    def subheadline(self, tone: OutletTone | str, rng: RandomSource) -> str:
        """Pick a subheadline for ``tone``; single-entry pools consume no draw."""

        pool = self.subheadlines(tone)
        if len(pool) == 1:
            return pool[0]
        return random_item(pool, rng)


_TONE_LIBRARY: Optional[ToneLibrary] = None


def get_tone_library() -> ToneLibrary:
    global _TONE_LIBRARY
    if _TONE_LIBRARY is None:
        _TONE_LIBRARY = ToneLibrary()
    return _TONE_LIBRARY


__all__ = ["ToneLibrary", "get_tone_library"]
