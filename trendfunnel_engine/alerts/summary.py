"""Human-readable renderings of cycle results."""

import re

from trendfunnel_engine.core.pipeline import CycleContext
from trendfunnel_engine.funnel.numeric import parse_number
from trendfunnel_engine.models.signal import Direction, SignalStrength, TradeSignal

_MARKDOWN_SPECIAL = re.compile(r"([_*`\[])")


def escape_markdown(text: str) -> str:
    """Escape Telegram legacy-Markdown control characters."""
    return _MARKDOWN_SPECIAL.sub(r"\\\1", text)


def format_price(price: str) -> str:
    """Price to 4 decimal places."""
    return f"{parse_number(price):.4f}"


def format_signal_line(signal: TradeSignal) -> str:
    """One-line plain-text rendering, used for logs."""
    emoji = "📈" if signal.direction == Direction.LONG else "📉"
    strength_emoji = "🔥" if signal.strength == SignalStrength.STRONG else "⚡"
    return (
        f"{emoji} {strength_emoji} {signal.symbol}: {signal.direction.value} "
        f"{signal.timeframe.value}m | Price: ${format_price(signal.price)} | "
        f"Time: {signal.timestamp.strftime('%H:%M:%S')}"
    )


def build_signal_summary(context: CycleContext, signals: list[TradeSignal]) -> str:
    """
    Render trend counts, active counts and trade calls as Telegram Markdown.

    Args:
        context: Cycle whose classification sets are reported
        signals: Signals to list (may be empty)

    Returns:
        Message body
    """
    trend = context.global_trend
    active = context.active

    lines = [
        "*Global trend:*",
        f"🟢 Bullish: {len(trend.bullish)}",
        f"🔴 Bearish: {len(trend.bearish)}",
        f"⚪ Neutral: {len(trend.neutral)}",
        "",
        "*Active tokens:*",
        f"📈 Bullish: {len(active.active_bullish)}",
        f"📉 Bearish: {len(active.active_bearish)}",
        f"🎯 Total: {active.total}",
        "",
        "*Trade calls:*",
    ]

    if not signals:
        lines.append("📭 No signals")
        return "\n".join(lines)

    for index, signal in enumerate(signals):
        emoji = "📈" if signal.direction == Direction.LONG else "📉"
        lines.append(
            f"{emoji} *{escape_markdown(signal.symbol)}*: "
            f"{signal.direction.value} {signal.timeframe.value}m"
        )
        lines.append(f"   Price: ${format_price(signal.price)}")
        if index < len(signals) - 1:
            lines.append("")

    return "\n".join(lines)


def build_started_message() -> str:
    return "Bot started and monitoring the market."


def build_stopped_message(reason: str | None = None) -> str:
    lines = []
    if reason:
        lines.append(f"Reason: {escape_markdown(reason)}")
        lines.append("")
    lines.append("⚠️ *WARNING: the bot is not running!*")
    lines.append("Check the logs and restart.")
    return "\n".join(lines)
