import pytest
from pycsim.cache.address import AddressDecoder, mask, find_tag, find_set, find_offset


def test_mask():
    assert mask(0) == 0
    assert mask(1) == 0b1
    assert mask(4) == 0xF
    assert mask(64) == 2**64 - 1


def test_address_decomposition():
    """Verify that addresses are correctly decomposed into tag, set, and offset."""
    # 4 set bits, 4 block bits
    # Address: 0x7ff0005c8 -> tag 0x7ff0005, set 0xc, offset 0x8
    address = 0x7ff0005c8
    assert find_tag(address, 4, 4) == 0x7ff0005
    assert find_set(address, 4, 4) == 0xC
    assert find_offset(address, 4) == 0x8

    decoder = AddressDecoder(sbits=4, bbits=4)
    assert decoder.decode(address) == (0x7ff0005, 0xC, 0x8)
    assert decoder.tag(address) == 0x7ff0005
    assert decoder.set_index(address) == 0xC


def test_zero_width_fields():
    """With no set or block bits the whole address is the tag and everything maps to set 0."""
    decoder = AddressDecoder(sbits=0, bbits=0)
    assert decoder.num_sets == 1
    assert decoder.decode(0x10) == (0x10, 0, 0)
    assert decoder.decode(0x0) == (0, 0, 0)


def test_full_width_leaves_no_tag_bits():
    decoder = AddressDecoder(sbits=32, bbits=32)
    assert decoder.tbits == 0
    assert decoder.tag(0xFFFF_FFFF_FFFF_FFFF) == 0
    assert decoder.set_index(0xFFFF_FFFF_FFFF_FFFF) == 0xFFFF_FFFF


def test_address_is_treated_as_64_bit():
    decoder = AddressDecoder(sbits=0, bbits=0)
    tag, set_index, _ = decoder.decode((1 << 64) | 0x5)
    assert tag == 0x5
    assert set_index == 0


def test_top_bit_set_address():
    decoder = AddressDecoder(sbits=8, bbits=8)
    tag, set_index, offset = decoder.decode(0x8000_0000_0000_1234)
    assert tag == 0x8000_0000_0000
    assert set_index == 0x12
    assert offset == 0x34


def test_reconstruct_address():
    decoder = AddressDecoder(sbits=3, bbits=6)
    address = 0b1111_101_101010
    tag, set_index, _ = decoder.decode(address)
    assert decoder.reconstruct_address(tag, set_index) == address & ~mask(6)


@pytest.mark.parametrize("sbits, bbits", [(60, 5), (-1, 4), (4, -1)])
def test_invalid_widths_are_rejected(sbits, bbits):
    with pytest.raises(ValueError):
        AddressDecoder(sbits, bbits)
