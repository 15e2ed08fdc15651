"""Display rounding helpers."""
import math


def round_half_up(value: float) -> int:
    """Round to the nearest integer with .5 going up (2.5 -> 3, -2.5 -> -2)."""
    return int(math.floor(value + 0.5))


def format_footage(value: float) -> str:
    """Format linear feet without a trailing '.0' (250.0 -> '250', 12.5 -> '12.5')."""
    text = f"{value:.2f}".rstrip("0").rstrip(".")
    return text or "0"
