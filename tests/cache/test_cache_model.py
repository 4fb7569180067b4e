import pytest
from pycsim.cache.cache import CacheModel, CacheStats, Outcome
from pycsim.cache.policy import Policy
from pycsim.config import SimConfig
from pycsim.trace.record import Operation


def test_model_geometry():
    model = CacheModel(SimConfig(sbits=3, perset=2, bbits=4))
    assert model.num_sets == 8
    assert all(len(s) == 2 for s in model.sets)
    assert model.stats == CacheStats()
    assert model.policy is Policy.LRU


def test_access_updates_counters():
    model = CacheModel(SimConfig(sbits=1, perset=1, bbits=0))

    assert model.access(0, 0xA, 1) is Outcome.MISS
    assert model.access(0, 0xA, 2) is Outcome.HIT
    assert model.access(0, 0xB, 3) is Outcome.MISS_EVICT
    assert model.access(1, 0xB, 4) is Outcome.MISS

    assert model.stats.as_dict() == {'hits': 1, 'misses': 3, 'evictions': 1}
    assert model.set_stats[0].as_dict() == {'hits': 1, 'misses': 2, 'evictions': 1}
    assert model.set_stats[1].as_dict() == {'hits': 0, 'misses': 1, 'evictions': 0}


def test_access_policy_override():
    """The policy argument takes precedence over the configured one."""
    model = CacheModel(SimConfig(sbits=0, perset=2, bbits=0, policy="LRU"))
    for clock, tag in enumerate([1, 1, 1, 2], start=1):
        model.access(0, tag, clock)
    # LRU would evict tag 1, LFU evicts tag 2
    model.access(0, 3, 5, policy=Policy.LFU)
    assert sorted(model.sets[0].tags()) == [1, 3]


@pytest.mark.parametrize("op", [Operation.LOAD, Operation.STORE])
def test_load_and_store_are_single_accesses(op):
    model = CacheModel(SimConfig(sbits=4, perset=1, bbits=4))
    assert model.simulate_operation(op, 0x10, 1) == (Outcome.MISS,)
    assert model.simulate_operation(op, 0x18, 2) == (Outcome.HIT,)
    assert model.stats.accesses == 2


def test_modify_on_empty_set():
    """M 0x10,1 on an empty cache: the load misses, the store hits."""
    model = CacheModel(SimConfig(sbits=4, perset=1, bbits=4))
    outcomes = model.simulate_operation(Operation.MODIFY, 0x10, 1)

    assert outcomes == (Outcome.MISS, Outcome.HIT)
    assert model.stats.as_dict() == {'hits': 1, 'misses': 1, 'evictions': 0}


def test_modify_store_half_uses_next_clock():
    model = CacheModel(SimConfig(sbits=0, perset=1, bbits=0))
    model.simulate_operation(Operation.MODIFY, 0x10, 7)
    line = model.sets[0].find(0x10)
    assert line.last_used == 8
    assert line.frequency == 1


def test_modify_evicts_at_most_once():
    model = CacheModel(SimConfig(sbits=0, perset=1, bbits=0))
    model.simulate_operation(Operation.LOAD, 0x0, 1)
    outcomes = model.simulate_operation(Operation.MODIFY, 0x10, 2)

    assert outcomes == (Outcome.MISS_EVICT, Outcome.HIT)
    assert model.stats.as_dict() == {'hits': 1, 'misses': 2, 'evictions': 1}


def test_modify_hit_hit():
    model = CacheModel(SimConfig(sbits=0, perset=1, bbits=4))
    model.simulate_operation(Operation.LOAD, 0x20, 1)
    assert model.simulate_operation(Operation.MODIFY, 0x2c, 2) == (Outcome.HIT, Outcome.HIT)


def test_instruction_fetch_is_rejected():
    model = CacheModel(SimConfig())
    with pytest.raises(ValueError):
        model.simulate_operation(Operation.INSTRUCTION, 0x400000, 1)
    assert model.stats.accesses == 0


def test_direct_mapped_degenerate_scenario():
    """Single line cache: 0x0, 0x10, 0x0 keep displacing each other."""
    model = CacheModel(SimConfig(sbits=0, perset=1, bbits=0))
    outcomes = [model.simulate_operation(Operation.LOAD, address, clock)[0]
                for clock, address in enumerate([0x0, 0x10, 0x0], start=1)]

    assert outcomes == [Outcome.MISS, Outcome.MISS_EVICT, Outcome.MISS_EVICT]
    assert model.stats.as_dict() == {'hits': 0, 'misses': 3, 'evictions': 2}


def test_addresses_in_same_block_share_a_line():
    model = CacheModel(SimConfig(sbits=2, perset=1, bbits=4))
    model.simulate_operation(Operation.LOAD, 0x40, 1)
    assert model.simulate_operation(Operation.LOAD, 0x4f, 2) == (Outcome.HIT,)
    # 0x50 is the next block: different set, so no conflict
    assert model.simulate_operation(Operation.LOAD, 0x50, 3) == (Outcome.MISS,)


def test_outcome_annotations():
    assert Outcome.HIT.annotation == "hit"
    assert Outcome.MISS.annotation == "miss"
    assert Outcome.MISS_EVICT.annotation == "miss evict"
    assert Outcome.MISS_EVICT.is_miss and Outcome.MISS_EVICT.is_eviction
    assert not Outcome.MISS.is_eviction


def test_stats_hit_rate():
    stats = CacheStats(hits=3, misses=1, evictions=0)
    assert stats.accesses == 4
    assert stats.hit_rate == pytest.approx(0.75)
    assert CacheStats().hit_rate == 0.0
