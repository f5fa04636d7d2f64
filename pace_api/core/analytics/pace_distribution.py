"""Aggregate activity streams into a pace-band distribution.

Every activity is reduced to its own partial-totals vector (one value per
band); the vectors are summed in input order once fetching is done. Nothing
is shared between activities, so fetches may run on a thread pool and the
result is still identical to a sequential run.
"""

from __future__ import annotations

import logging
import threading
from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Literal, Optional, Sequence

import numpy as np

from ...config import PACE_INTERVAL_SECONDS
from ...streams.models import ActivityStream
from ...streams.providers import ActivityId, StreamFetchError, StreamProvider
from .pace_bands import DEFAULT_PACE_BANDS, PaceBand, classify_pace
from .segmenter import iter_segments
from .time_utils import format_distance, format_time

logger = logging.getLogger(__name__)

DistributionMode = Literal["time", "distance"]
DISTRIBUTION_MODES = ("time", "distance")
DEFAULT_INTERVAL_SECONDS = PACE_INTERVAL_SECONDS


class FailureReason(str, Enum):
    FETCH_FAILED = "fetch_failed"
    MISSING_STREAMS = "missing_streams"
    CANCELLED = "cancelled"


@dataclass
class ActivityFailure:
    activity_id: ActivityId
    reason: FailureReason
    message: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {
            "activity_id": self.activity_id,
            "reason": self.reason.value,
            "message": self.message,
        }


@dataclass
class ActivityContribution:
    """Outcome for one activity: a partial totals vector or a failure."""

    activity_id: ActivityId
    totals: Optional[np.ndarray] = None
    failure: Optional[ActivityFailure] = None
    segments: int = 0
    unclassified: int = 0


@dataclass
class PaceDistribution:
    bands: List[PaceBand]
    values: List[float]
    mode: str
    failures: List[ActivityFailure] = field(default_factory=list)
    cancelled: bool = False

    @property
    def total(self) -> float:
        return float(sum(self.values))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "bands": [band.to_dict() for band in self.bands],
            "values": list(self.values),
            "mode": self.mode,
            "failures": [f.to_dict() for f in self.failures],
            "cancelled": self.cancelled,
        }


def accumulate_stream(
    stream: ActivityStream,
    bands: Sequence[PaceBand],
    interval: float = DEFAULT_INTERVAL_SECONDS,
    mode: DistributionMode = "time",
    activity_id: ActivityId = "",
) -> ActivityContribution:
    """Segment and classify one stream into a fresh per-band totals vector.

    The caller guarantees time and distance are present.
    """
    totals = np.zeros(len(bands), dtype=np.float64)
    contribution = ActivityContribution(activity_id=activity_id, totals=totals)
    for segment in iter_segments(stream.time, stream.distance, interval, stream.velocity):
        contribution.segments += 1
        band_idx = classify_pace(segment.pace, bands)
        if band_idx is None:
            contribution.unclassified += 1
            logger.debug(
                "[pace-distribution][unclassified] segment=[%s-%s] pace=%s",
                segment.start_index, segment.end_index, segment.pace,
            )
            continue
        totals[band_idx] += segment.time_delta if mode == "time" else segment.distance_delta
    return contribution


def _process_activity(
    activity_id: ActivityId,
    access_token: Optional[str],
    provider: StreamProvider,
    bands: Sequence[PaceBand],
    interval: float,
    mode: DistributionMode,
    cancel_event: Optional[threading.Event],
) -> ActivityContribution:
    if cancel_event is not None and cancel_event.is_set():
        return ActivityContribution(
            activity_id=activity_id,
            failure=ActivityFailure(activity_id, FailureReason.CANCELLED, "cancelled before fetch"),
        )

    try:
        stream = provider.fetch(activity_id, access_token)
    except StreamFetchError as e:
        logger.warning("[pace-distribution][fetch-failed] activity_id=%s err=%s", activity_id, e.message)
        return ActivityContribution(
            activity_id=activity_id,
            failure=ActivityFailure(activity_id, FailureReason.FETCH_FAILED, e.message),
        )
    except Exception as e:
        logger.exception("[pace-distribution][fetch-error] activity_id=%s", activity_id)
        return ActivityContribution(
            activity_id=activity_id,
            failure=ActivityFailure(activity_id, FailureReason.FETCH_FAILED, str(e)),
        )

    if not stream.has_time_and_distance:
        logger.info("[pace-distribution][missing-streams] activity_id=%s", activity_id)
        return ActivityContribution(
            activity_id=activity_id,
            failure=ActivityFailure(
                activity_id, FailureReason.MISSING_STREAMS, "time and distance streams are required"
            ),
        )

    contribution = accumulate_stream(stream, bands, interval, mode, activity_id)
    logger.debug(
        "[pace-distribution][activity] activity_id=%s segments=%s unclassified=%s",
        activity_id, contribution.segments, contribution.unclassified,
    )
    return contribution


def compute_distribution(
    activity_ids: Sequence[ActivityId],
    access_token: Optional[str],
    interval: float = DEFAULT_INTERVAL_SECONDS,
    mode: DistributionMode = "time",
    bands: Optional[Sequence[PaceBand]] = None,
    *,
    provider: StreamProvider,
    max_workers: int = 1,
    cancel_event: Optional[threading.Event] = None,
) -> PaceDistribution:
    """Accumulate time or distance per pace band over a batch of activities.

    Args:
        activity_ids: activities to process, in order.
        access_token: credential handed to the provider.
        interval: minimum segment length in seconds.
        mode: ``"time"`` sums segment durations, ``"distance"`` segment distances.
        bands: ordered band list, first match wins; defaults to DEFAULT_PACE_BANDS.
        provider: stream source.
        max_workers: >1 fetches on a thread pool; totals are merged in input order.
        cancel_event: once set, no further fetches start; remaining activities
            are reported as cancelled and the partial distribution is returned.

    Returns:
        PaceDistribution with the per-band values and per-activity failures.
        Fetch failures never propagate.

    Raises:
        ValueError: for an unknown mode.
    """
    if mode not in DISTRIBUTION_MODES:
        raise ValueError(f"mode must be one of {DISTRIBUTION_MODES}, got {mode!r}")

    band_list = list(DEFAULT_PACE_BANDS if bands is None else bands)
    ids = list(activity_ids)

    def run(activity_id: ActivityId) -> ActivityContribution:
        return _process_activity(activity_id, access_token, provider, band_list, interval, mode, cancel_event)

    if max_workers <= 1 or len(ids) <= 1:
        contributions = [run(activity_id) for activity_id in ids]
    else:
        with ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="pace-fetch") as executor:
            futures: List[Future] = [executor.submit(run, activity_id) for activity_id in ids]
            contributions = [future.result() for future in futures]

    totals = np.zeros(len(band_list), dtype=np.float64)
    failures: List[ActivityFailure] = []
    for contribution in contributions:
        if contribution.failure is not None:
            failures.append(contribution.failure)
            continue
        totals += contribution.totals

    cancelled = any(f.reason is FailureReason.CANCELLED for f in failures)
    logger.info(
        "[pace-distribution][done] activities=%s failed=%s cancelled=%s mode=%s",
        len(ids), len(failures), cancelled, mode,
    )
    return PaceDistribution(
        bands=band_list,
        values=[float(v) for v in totals],
        mode=mode,
        failures=failures,
        cancelled=cancelled,
    )


def generate_distribution_payload(distribution: PaceDistribution) -> Dict[str, Any]:
    """Chart-ready view of a distribution: per-band share and formatted totals."""
    total = distribution.total
    is_time = distribution.mode == "time"
    band_payload: List[Dict[str, Any]] = []
    chart_labels: List[str] = []
    chart_values: List[float] = []
    chart_tooltips: List[str] = []

    for band, value in zip(distribution.bands, distribution.values):
        percentage = (value / total * 100.0) if total else 0.0
        formatted = (format_time(value) or "0s") if is_time else format_distance(value)
        band_payload.append(
            {
                "label": band.label,
                "range": band.range_display,
                "min": band.min,
                "max": band.to_dict()["max"],
                "value": value,
                "percentage": round(percentage, 2),
                "formatted": formatted,
            }
        )
        chart_labels.append(band.label)
        # minutes for time, kilometres for distance
        chart_values.append(round(value / 60.0 if is_time else value / 1000.0, 2))
        chart_tooltips.append(f"{band.label} • {band.range_display} • {round(percentage, 1)}% • {formatted}")

    return {
        "mode": distribution.mode,
        "total": total,
        "chart": {
            "type": "bar",
            "unit": "minutes" if is_time else "km",
            "categories": chart_labels,
            "values": chart_values,
            "tooltips": chart_tooltips,
        },
        "bands": band_payload,
    }
