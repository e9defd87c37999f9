"""Telemetry downsampling for charting and mapping.

A flight log can hold tens of thousands of samples; charts and maps stay
responsive with a few thousand. The downsampler picks a subset of sample
indices and reduces every telemetry channel at exactly those indices, so
the reduced series stays index-aligned.

Strategies:

1. ``"minmax"`` (default):
   The interior samples (everything except the first and last) are split
   into ``(max_points - 2) // 2`` equally sized buckets. Each bucket keeps
   the sample holding its minimum and the sample holding its maximum of the
   primary channel (height, then altitude, then speed). Spikes survive the
   reduction instead of being flattened by a stride that happens to miss
   them. Output size is ``max_points`` or ``max_points - 1``.

2. ``"stride"``:
   ``max_points`` evenly spaced indices. Exactly ``max_points`` samples,
   cheaper, but blind to extremes.

Both strategies always keep the first and last samples.
"""

from typing import Any, Dict, List, Optional

import numpy as np

from .constants import DEFAULT_MAX_POINTS, DOWNSAMPLE_PRIMARY_CHANNELS
from .decorators import timed
from .exceptions import InvalidArgumentError
from .logger import logger
from .validation import validate_telemetry, is_track_aligned

__all__ = [
    "STRATEGIES",
    "downsample",
    "downsample_bundle",
    "select_indices",
    "reduce_telemetry",
    "pick_primary_channel",
]

STRATEGIES = ("minmax", "stride")


def _check_max_points(max_points, n_samples: int) -> None:
    """Reject point budgets that cannot honour the endpoint guarantee."""
    if isinstance(max_points, bool) or not isinstance(max_points, (int, np.integer)):
        raise InvalidArgumentError(
            "max_points must be an integer", argument="max_points", value=max_points
        )
    if max_points <= 0:
        raise InvalidArgumentError(
            "max_points must be positive", argument="max_points", value=max_points
        )
    if max_points == 1 and n_samples > 1:
        raise InvalidArgumentError(
            "max_points must be at least 2 to keep both endpoints",
            argument="max_points",
            value=max_points,
        )


def pick_primary_channel(
    telemetry: Dict[str, Any], channel: Optional[str] = None
) -> Optional[str]:
    """
    Choose the channel whose extremes the min/max strategy preserves.

    Args:
        telemetry: Telemetry dictionary
        channel: Explicit channel name, validated against the telemetry

    Returns:
        Channel name, or None when no candidate carries any value
    """
    if channel is not None:
        if channel not in telemetry or channel == "time":
            raise InvalidArgumentError(
                "Unknown telemetry channel", argument="channel", value=channel
            )
        return channel

    for candidate in DOWNSAMPLE_PRIMARY_CHANNELS:
        values = telemetry.get(candidate)
        if values and any(v is not None for v in values):
            return candidate
    return None


def _to_float_array(values) -> np.ndarray:
    """Convert a nullable numeric series to float64 with NaN for gaps."""
    return np.array(
        [np.nan if v is None else float(v) for v in values], dtype=np.float64
    )


def _stride_indices(n_samples: int, max_points: int) -> List[int]:
    indices = np.linspace(0, n_samples - 1, max_points).round().astype(np.int64)
    return np.unique(indices).tolist()


def _minmax_indices(
    n_samples: int, max_points: int, values: Optional[np.ndarray]
) -> List[int]:
    n_buckets = (max_points - 2) // 2
    indices = [0]

    if n_buckets > 0:
        # Interior samples are 1 .. n_samples - 2; every bucket holds >= 2
        edges = np.linspace(1, n_samples - 1, n_buckets + 1).astype(np.int64)
        for b in range(n_buckets):
            start, end = int(edges[b]), int(edges[b + 1])
            first, last = start, end - 1

            if values is not None:
                bucket = values[start:end]
                if not np.all(np.isnan(bucket)):
                    lo = start + int(np.nanargmin(bucket))
                    hi = start + int(np.nanargmax(bucket))
                    if lo != hi:
                        first, last = min(lo, hi), max(lo, hi)
                    elif lo != last:
                        first, last = lo, last
                    else:
                        first, last = start, lo

            indices.append(first)
            indices.append(last)

    indices.append(n_samples - 1)
    return indices


def select_indices(
    telemetry: Dict[str, Any],
    max_points: int = DEFAULT_MAX_POINTS,
    channel: Optional[str] = None,
    strategy: str = "minmax",
) -> Optional[List[int]]:
    """
    Compute the sorted sample indices a reduction keeps.

    Returns:
        Index list, or None when the series already fits in ``max_points``

    Raises:
        InvalidArgumentError: For a bad point budget, strategy or channel
        TelemetryShapeError: If the telemetry is not index-aligned
    """
    n_samples = validate_telemetry(telemetry)
    _check_max_points(max_points, n_samples)

    if strategy not in STRATEGIES:
        raise InvalidArgumentError(
            f"Unknown downsampling strategy, expected one of {STRATEGIES}",
            argument="strategy",
            value=strategy,
        )

    if n_samples <= max_points:
        return None

    if strategy == "stride":
        return _stride_indices(n_samples, max_points)

    primary = pick_primary_channel(telemetry, channel)
    values = _to_float_array(telemetry[primary]) if primary else None
    if primary is None:
        logger.debug("No primary channel with data; using bucket endpoints")
    return _minmax_indices(n_samples, max_points, values)


def reduce_telemetry(telemetry: Dict[str, Any], indices: List[int]) -> Dict[str, Any]:
    """Take ``indices`` from every channel; absent channels stay absent."""
    reduced = {}
    for key, values in telemetry.items():
        if values is None:
            reduced[key] = None
        else:
            reduced[key] = [values[i] for i in indices]
    return reduced


@timed
def downsample(
    telemetry: Dict[str, Any],
    max_points: int = DEFAULT_MAX_POINTS,
    channel: Optional[str] = None,
    strategy: str = "minmax",
) -> Dict[str, Any]:
    """
    Reduce a telemetry series to at most ``max_points`` samples.

    Args:
        telemetry: Telemetry dictionary with a ``time`` array
        max_points: Point budget (must be positive)
        channel: Channel whose extremes are preserved (default: auto)
        strategy: "minmax" or "stride"

    Returns:
        The input itself when it already fits, else a reduced copy
    """
    indices = select_indices(telemetry, max_points, channel, strategy)
    if indices is None:
        return telemetry

    logger.debug(
        f"Downsampled {len(telemetry['time']):,} samples to {len(indices):,} ({strategy})"
    )
    return reduce_telemetry(telemetry, indices)


@timed
def downsample_bundle(
    bundle: Dict[str, Any],
    max_points: int = DEFAULT_MAX_POINTS,
    channel: Optional[str] = None,
    strategy: str = "minmax",
) -> Dict[str, Any]:
    """
    Downsample a flight bundle's telemetry and, when aligned, its track.

    An independently sampled track is left untouched since its indices do
    not correspond to telemetry samples.
    """
    telemetry = bundle["telemetry"]
    indices = select_indices(telemetry, max_points, channel, strategy)
    if indices is None:
        return bundle

    track = bundle.get("track") or []
    reduced = dict(bundle)
    reduced["telemetry"] = reduce_telemetry(telemetry, indices)
    if is_track_aligned(track, telemetry):
        reduced["track"] = [track[i] for i in indices]
    return reduced
