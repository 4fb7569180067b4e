from __future__ import annotations
from typing import Tuple

ADDRESS_BITS = 64


def mask(n: int) -> int:
    """Returns an integer with the low `n` bits set."""
    return (1 << n) - 1 if n > 0 else 0


def find_tag(address: int, sbits: int, bbits: int) -> int:
    """Extracts the tag bits, i.e. everything above the set and block bits."""
    tbits = ADDRESS_BITS - sbits - bbits
    return (address >> (sbits + bbits)) & mask(tbits)


def find_set(address: int, sbits: int, bbits: int) -> int:
    """Extracts the set index, which sits just left of the block offset."""
    return (address >> bbits) & mask(sbits)


def find_offset(address: int, bbits: int) -> int:
    return address & mask(bbits)


class AddressDecoder:
    """Splits a 64-bit address into (tag, set index, block offset)."""

    def __init__(self, sbits: int, bbits: int):
        if sbits < 0 or bbits < 0:
            raise ValueError("Set and block bit widths must be non-negative.")
        if sbits + bbits > ADDRESS_BITS:
            raise ValueError(
                f"sbits + bbits must not exceed {ADDRESS_BITS} (got {sbits} + {bbits})."
            )
        self.sbits = sbits
        self.bbits = bbits
        self.tbits = ADDRESS_BITS - sbits - bbits
        self.num_sets = 1 << sbits

    def tag(self, address: int) -> int:
        return find_tag(address & mask(ADDRESS_BITS), self.sbits, self.bbits)

    def set_index(self, address: int) -> int:
        return find_set(address & mask(ADDRESS_BITS), self.sbits, self.bbits)

    def decode(self, address: int) -> Tuple[int, int, int]:
        """Decomposes an address into tag, set index, and offset."""
        address &= mask(ADDRESS_BITS)
        return (
            find_tag(address, self.sbits, self.bbits),
            find_set(address, self.sbits, self.bbits),
            find_offset(address, self.bbits),
        )

    def reconstruct_address(self, tag: int, set_index: int) -> int:
        """Reconstructs the block start address from tag and set index."""
        return (tag << (self.sbits + self.bbits)) | (set_index << self.bbits)
