"""
Module for collecting and logging metrics about a processed track.
"""

import logging
from typing import List, NamedTuple

from .config import TrackConfig
from .records import AnnotatedRecord, QualityFlag, RecordRelative

logger = logging.getLogger(__name__)


class TrackMetrics(NamedTuple):
    """Container for track metrics data."""

    records_total: int
    records_unique: int
    duplicates_dropped: int
    inside_count: int
    long_gaps: int
    speed_warnings: int
    total_distance_m: float


def collect_metrics(
    raw_count: int,
    annotated: List[AnnotatedRecord],
    relatives: List[RecordRelative],
) -> TrackMetrics:
    """
    Collect metrics from the annotated records and relative movements.

    Args:
        raw_count: Number of samples parsed before deduplication
        annotated: Absolute records with containment results
        relatives: Relative movement series

    Returns:
        TrackMetrics containing all collected metrics
    """
    return TrackMetrics(
        records_total=raw_count,
        records_unique=len(annotated),
        duplicates_dropped=raw_count - len(annotated),
        inside_count=sum(1 for a in annotated if a.inside),
        long_gaps=sum(1 for r in relatives if r.has_flag(QualityFlag.LONG)),
        speed_warnings=sum(1 for r in relatives if r.has_flag(QualityFlag.SPEED)),
        total_distance_m=sum(r.distance_to_last for r in relatives),
    )


def log_metrics(metrics: TrackMetrics, config: TrackConfig) -> None:
    """
    Log detailed metrics after writing the reports.

    Args:
        metrics: TrackMetrics containing collected metrics
        config: TrackConfig whose metrics flag enables the output
    """
    if not config.metrics:
        return

    logger.info("=== ROOMTRACK_METRICS ===")
    for key, value in metrics._asdict().items():
        if isinstance(value, float):
            logger.info(f"{key}={value:.4f}")
        else:
            logger.info(f"{key}={value}")
    logger.info("=== END_ROOMTRACK_METRICS ===")
