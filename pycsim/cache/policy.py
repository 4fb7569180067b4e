from __future__ import annotations
from enum import Enum
from typing import Union


class Policy(str, Enum):
    """Eviction policies selectable for a run."""

    LRU = "LRU"
    LFU = "LFU"

    def __str__(self) -> str:
        return self.value

    @classmethod
    def parse(cls, value: Union["Policy", str, int]) -> "Policy":
        """Accepts a Policy, its name (any case) or the numeric selector 0/1."""
        if isinstance(value, cls):
            return value
        # The numeric selector predates the names: 0 is LRU, 1 is LFU.
        legacy = {"0": cls.LRU, "1": cls.LFU}
        key = str(value).strip()
        if key in legacy and not isinstance(value, bool):
            return legacy[key]
        try:
            return cls(key.upper())
        except ValueError:
            raise ValueError(f"Unknown eviction policy: {value!r} (expected LRU, LFU, 0 or 1)") from None
