from __future__ import annotations
from dataclasses import dataclass, asdict
from enum import Enum
from typing import Dict, Iterator, List, Optional, Tuple

from ..config import SimConfig
from ..trace.record import Operation
from .address import AddressDecoder
from .policy import Policy


class Outcome(Enum):
    """Result of a single lookup in a cache set."""

    HIT = "hit"
    MISS = "miss"
    MISS_EVICT = "miss evict"

    @property
    def annotation(self) -> str:
        return self.value

    @property
    def is_hit(self) -> bool:
        return self is Outcome.HIT

    @property
    def is_miss(self) -> bool:
        return self is not Outcome.HIT

    @property
    def is_eviction(self) -> bool:
        return self is Outcome.MISS_EVICT


@dataclass
class CacheLine:
    """A single cache slot. Only bookkeeping, no data payload.

    `tag`, `last_used` and `frequency` are meaningless while `valid` is False.
    """
    valid: bool = False
    tag: int = 0
    last_used: int = 0
    frequency: int = 0

    def fill(self, tag: int, clock: int):
        """Installs `tag` as a brand-new line."""
        self.valid = True
        self.tag = tag
        self.last_used = clock
        self.frequency = 0


@dataclass
class CacheStats:
    hits: int = 0
    misses: int = 0
    evictions: int = 0

    def record(self, outcome: Outcome):
        if outcome.is_hit:
            self.hits += 1
            return
        self.misses += 1
        if outcome.is_eviction:
            self.evictions += 1

    @property
    def accesses(self) -> int:
        return self.hits + self.misses

    @property
    def hit_rate(self) -> float:
        return (self.hits / self.accesses) if self.accesses else 0.0

    def as_dict(self) -> Dict[str, int]:
        return asdict(self)


class CacheSet:
    """One associativity set: a fixed number of lines and the lookup/eviction logic."""

    def __init__(self, perset: int):
        if perset < 1:
            raise ValueError("A cache set needs at least one line.")
        self.lines = [CacheLine() for _ in range(perset)]

    def __len__(self) -> int:
        return len(self.lines)

    def __iter__(self) -> Iterator[CacheLine]:
        return iter(self.lines)

    def valid_count(self) -> int:
        return sum(1 for line in self.lines if line.valid)

    def tags(self) -> List[int]:
        """Tags of the valid lines, in line order."""
        return [line.tag for line in self.lines if line.valid]

    def find(self, tag: int) -> Optional[CacheLine]:
        for line in self.lines:
            if line.valid and line.tag == tag:
                return line
        return None

    def lookup_or_insert(self, tag: int, clock: int, policy: Policy) -> Outcome:
        """Looks `tag` up, installing it on a miss.

        A single forward scan does both jobs: it compares every valid line
        against `tag` and, alongside, tracks the LRU candidate (smallest
        `last_used`, lowest index on ties) and the LFU candidate (smallest
        `frequency`, ties going to whichever of the tied lines was used less
        recently). Cost is O(associativity) with one traversal, like a row of
        tag comparators sitting next to one priority circuit.
        """
        lru_victim: Optional[CacheLine] = None
        lfu_victim: Optional[CacheLine] = None

        for line in self.lines:
            if not line.valid:
                # Lines fill in order, so the first empty slot ends the scan.
                line.fill(tag, clock)
                return Outcome.MISS

            if line.tag == tag:
                line.last_used = clock
                line.frequency += 1
                return Outcome.HIT

            if lru_victim is None or line.last_used < lru_victim.last_used:
                lru_victim = line

            if lfu_victim is None or line.frequency < lfu_victim.frequency:
                lfu_victim = line
            elif line.frequency == lfu_victim.frequency and line.last_used < lfu_victim.last_used:
                lfu_victim = line

        # Set is full: evict. The frequency count restarts for the new tag.
        victim = lfu_victim if policy is Policy.LFU else lru_victim
        victim.fill(tag, clock)
        return Outcome.MISS_EVICT


class CacheModel:
    """The simulated cache: 2**sbits sets of `perset` lines plus running statistics."""

    def __init__(self, config: SimConfig):
        self.config = config
        self.policy = config.policy
        self.decoder = AddressDecoder(config.sbits, config.bbits)
        self.sets = [CacheSet(config.perset) for _ in range(self.decoder.num_sets)]
        self.stats = CacheStats()
        self.set_stats = [CacheStats() for _ in range(self.decoder.num_sets)]

    @property
    def num_sets(self) -> int:
        return len(self.sets)

    def access(self, set_index: int, tag: int, clock: int, policy: Optional[Policy] = None) -> Outcome:
        """Performs one lookup in a set and updates the counters."""
        outcome = self.sets[set_index].lookup_or_insert(tag, clock, policy or self.policy)
        self.stats.record(outcome)
        self.set_stats[set_index].record(outcome)
        return outcome

    def simulate_operation(self, op: Operation, address: int, clock: int) -> Tuple[Outcome, ...]:
        """Simulates one trace operation.

        Loads and stores are a single access. A modify is a load followed by a
        store to the same address; the store runs at `clock + 1` and always
        hits, so a modify can evict at most once.
        """
        if op is Operation.INSTRUCTION:
            raise ValueError("Instruction fetches are not simulated by the data cache.")

        tag, set_index, _ = self.decoder.decode(address)
        first = self.access(set_index, tag, clock)
        if op is not Operation.MODIFY:
            return (first,)
        second = self.access(set_index, tag, clock + 1)
        return first, second
