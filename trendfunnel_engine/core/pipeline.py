"""Cycle-scoped classification pipeline.

One ``CycleContext`` is built per data-refresh cycle from freshly computed
asset snapshots. Stages run strictly in order (global trend, then active
filter) and the context is never mutated afterwards; the entry detector
reads it as often as the signal timer fires.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone

from trendfunnel_engine.funnel.active_filter import ActiveTokens, filter_active_tokens
from trendfunnel_engine.funnel.entry_signals import find_trades
from trendfunnel_engine.funnel.global_trend import GlobalTrendResult, analyze_global_trend
from trendfunnel_engine.models.signal import TradeSignal
from trendfunnel_engine.models.snapshot import AssetSnapshot

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CycleContext:
    """Everything one data-refresh cycle produced."""

    assets: tuple[AssetSnapshot, ...]
    global_trend: GlobalTrendResult
    active: ActiveTokens
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @classmethod
    def empty(cls) -> "CycleContext":
        """Context used before the first cycle completes."""
        return cls(assets=(), global_trend=GlobalTrendResult(), active=ActiveTokens())

    @property
    def total_active(self) -> int:
        return self.active.total

    def find_signals(self, now: datetime | None = None) -> list[TradeSignal]:
        """Run the entry-signal detector over this cycle's active sets."""
        if self.total_active == 0:
            return []
        return find_trades(self.active, now=now)


def build_cycle(
    assets: list[AssetSnapshot], now: datetime | None = None
) -> CycleContext:
    """
    Run the global trend classifier and the active filter.

    Args:
        assets: Asset snapshots collected this cycle.
        now: Cycle timestamp (defaults to current UTC time).

    Returns:
        A new CycleContext.
    """
    global_trend = analyze_global_trend(assets)
    active = filter_active_tokens(global_trend.bullish, global_trend.bearish)

    context = CycleContext(
        assets=tuple(assets),
        global_trend=global_trend,
        active=active,
        created_at=now or datetime.now(timezone.utc),
    )
    logger.info(
        "✅ Cycle built: assets=%d, active=%d", len(context.assets), context.total_active
    )
    return context
