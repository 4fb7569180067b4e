from __future__ import annotations
from dataclasses import dataclass
from enum import Enum


class Operation(str, Enum):
    """Operation codes found in a valgrind memory trace."""

    LOAD = "L"
    STORE = "S"
    MODIFY = "M"
    INSTRUCTION = "I"

    def __str__(self) -> str:
        return self.value

    @property
    def sub_accesses(self) -> int:
        """Number of cache accesses the operation turns into."""
        if self is Operation.INSTRUCTION:
            return 0
        return 2 if self is Operation.MODIFY else 1


@dataclass(frozen=True)
class TraceRecord:
    operation: Operation
    address: int
    size: int

    def __str__(self) -> str:
        return f"{self.operation} {self.address:x},{self.size}"
