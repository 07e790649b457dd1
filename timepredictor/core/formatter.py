"""
Display helpers for predicted processing times.
"""

import math
from decimal import Decimal, ROUND_HALF_UP, localcontext
from typing import Union

from timepredictor.models.schemas import PredictionInput


def _quantize(value: float, digits: int) -> Decimal:
    """Round the exact binary value of a finite float half up."""
    exact = Decimal(value)
    with localcontext() as ctx:
        # Enough precision for every integer digit of very large values
        ctx.prec = max(ctx.prec, exact.adjusted() + digits + 2)
        return exact.quantize(Decimal(1).scaleb(-digits), rounding=ROUND_HALF_UP)


def to_fixed(value: float, digits: int) -> str:
    """Render a float with a fixed number of decimals, rounding halves up."""
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "Infinity" if value > 0 else "-Infinity"
    return str(_quantize(value, digits))


def round_half_up(value: float) -> int:
    return int(_quantize(value, 0))


def round_estimate(seconds: float) -> Union[int, float]:
    """Keep one decimal below one second, whole seconds otherwise."""
    if not math.isfinite(seconds):
        return seconds
    if seconds < 1:
        return float(to_fixed(seconds, 1))
    return round_half_up(seconds)


def format_duration(seconds: float) -> str:
    """
    Format a number of seconds as a human readable duration.

    Examples: "0.4 sec", "59 sec", "1 min 30 sec", "1 hr", "1 hr 1 min 5 sec".
    """
    if not math.isfinite(seconds):
        return f"{to_fixed(seconds, 0)} sec"
    if seconds < 1:
        return f"{to_fixed(seconds, 1)} sec"

    total = round_half_up(seconds)
    if total < 60:
        return f"{total} sec"

    hours, remainder = divmod(total, 3600)
    minutes, secs = divmod(remainder, 60)

    parts = []
    if hours:
        parts.append(f"{hours} hr")
    if minutes:
        parts.append(f"{minutes} min")
    if secs:
        parts.append(f"{secs} sec")
    return " ".join(parts)


def format_rate(prediction_input: PredictionInput, seconds: float, stage: str) -> str:
    """
    Per-unit rate string for one stage of a prediction.

    Args:
        prediction_input: The query the estimate answers
        seconds: Estimated stage time in seconds
        stage: "transcription" or "summary"

    Returns:
        "X.Xs/min" for duration-based input, "X.XXs/1k chars" for
        character-based input, the formatted duration otherwise
    """
    duration = prediction_input.duration_seconds
    chars = prediction_input.character_count

    if duration and duration > 0:
        return f"{to_fixed(seconds / (duration / 60), 1)}s/min"
    if chars and chars > 0:
        return f"{to_fixed(seconds / (chars / 1000), 2)}s/1k chars"
    return format_duration(seconds)
