from __future__ import annotations

from ..models.repricing_result import RepricingResult

"""SUMMARY line rendering.

Format:
SUMMARY rows={total} repriced={repriced} skipped={skipped} invalid={invalid}
spot_price={price} elapsed_sec={elapsed}
"""


def _format_seconds(seconds: float) -> str:
    # no scientific notation, no trailing ".0" for whole seconds
    if seconds == 0:
        return "0"
    if seconds == int(seconds):
        return str(int(seconds))
    if seconds < 0.01:
        return f"{seconds:.6f}".rstrip("0").rstrip(".") or "0"
    return str(round(seconds, 3))


def render_summary_line(result: RepricingResult) -> str:
    """Render the SUMMARY line for a repricing pass.

    Examples:
        >>> from datetime import datetime, timezone
        >>> t = datetime(2024, 1, 1, tzinfo=timezone.utc)
        >>> result = RepricingResult(
        ...     spot_price=6809180, start_time=t, end_time=t, elapsed_seconds=2.0
        ... )
        >>> render_summary_line(result)
        'SUMMARY rows=0 repriced=0 skipped=0 invalid=0 spot_price=6809180 elapsed_sec=2'
    """
    return (
        f"SUMMARY rows={result.total_rows} "
        f"repriced={len(result.changes)} "
        f"skipped={len(result.skipped)} "
        f"invalid={result.invalid_rows} "
        f"spot_price={result.spot_price} "
        f"elapsed_sec={_format_seconds(result.elapsed_seconds)}"
    )
