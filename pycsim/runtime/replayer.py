from __future__ import annotations
from dataclasses import dataclass
from typing import Callable, Iterable, List, Optional, Tuple

from ..cache.cache import CacheModel, CacheStats, Outcome
from ..trace.record import Operation, TraceRecord


@dataclass
class AccessResult:
    """What happened to one trace record."""
    clock: int
    record: TraceRecord
    tag: int
    set_index: int
    outcomes: Tuple[Outcome, ...]

    @property
    def annotation(self) -> str:
        return " ".join(o.annotation for o in self.outcomes)

    @property
    def evicted(self) -> bool:
        return any(o.is_eviction for o in self.outcomes)

    def verbose_line(self) -> str:
        return f"{self.record} {self.annotation}"

    def to_dict(self) -> dict:
        return {
            'clock': self.clock,
            'op': str(self.record.operation),
            'address': self.record.address,
            'size': self.record.size,
            'set': self.set_index,
            'tag': self.tag,
            'outcome': self.annotation,
            'hits': sum(1 for o in self.outcomes if o.is_hit),
            'misses': sum(1 for o in self.outcomes if o.is_miss),
            'evictions': sum(1 for o in self.outcomes if o.is_eviction),
        }


class TraceReplayer:
    """Feeds trace records to a CacheModel in order, advancing a logical clock.

    The clock moves by one per record before it is simulated. A modify uses
    `clock + 1` for its store half, so the clock is moved once more afterwards
    and no later record ever shares that value.
    """

    def __init__(self, model: CacheModel,
                 on_access: Optional[Callable[[AccessResult], None]] = None,
                 keep_results: bool = False):
        self.model = model
        self.on_access = on_access
        self.keep_results = keep_results
        self.clock = 0
        self.results: List[AccessResult] = []

    @property
    def stats(self) -> CacheStats:
        return self.model.stats

    def step(self, record: TraceRecord) -> AccessResult:
        self.clock += 1
        tag, set_index, _ = self.model.decoder.decode(record.address)
        outcomes = self.model.simulate_operation(record.operation, record.address, self.clock)
        result = AccessResult(self.clock, record, tag, set_index, outcomes)
        if record.operation is Operation.MODIFY:
            self.clock += 1

        if self.keep_results:
            self.results.append(result)
        if self.on_access:
            self.on_access(result)
        return result

    def replay(self, records: Iterable[TraceRecord]) -> CacheStats:
        """Replays every record until the trace is exhausted."""
        for record in records:
            self.step(record)
        return self.stats
