"""Cycle pipeline and the timer-driven bot.

Note: TrendFunnelBot is not exported here to avoid import chain issues.
Import directly: `from trendfunnel_engine.core.bot import TrendFunnelBot`
"""

from .pipeline import CycleContext, build_cycle

__all__ = ["CycleContext", "build_cycle"]
