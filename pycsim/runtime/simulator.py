from __future__ import annotations
from typing import Callable, List, Optional, Tuple

from ..cache.cache import CacheModel, CacheStats
from ..config import SimConfig
from ..trace.reader import read_trace
from ..utils.logging import get_logger
from .replayer import AccessResult, TraceReplayer

logger = get_logger(__name__)


def run(config: SimConfig,
        on_access: Optional[Callable[[AccessResult], None]] = None,
        keep_results: bool = False) -> Tuple[List[AccessResult], CacheStats, CacheModel]:
    """
    Replays the configured trace against a freshly built cache.

    This is the main entry point for a simulation. Raises OSError
    (FileNotFoundError for a missing file) when the trace cannot be opened;
    nothing is simulated in that case.
    """
    model = CacheModel(config)
    records = read_trace(config.trace)
    logger.info(
        "Replaying %s on %d sets x %d lines (%d-byte blocks, %s)",
        config.trace, model.num_sets, config.perset, config.block_size, config.policy,
    )

    replayer = TraceReplayer(model, on_access=on_access, keep_results=keep_results)
    stats = replayer.replay(records)

    logger.debug("Replay finished at clock %d", replayer.clock)
    return replayer.results, stats, model
