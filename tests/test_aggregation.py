#!/usr/bin/env python3
"""
Tests for the pairwise relative movement series.
"""

import math
from datetime import datetime, timedelta

import pytest

from roomtrack.aggregation import (
    calculate_relative_movements,
    iter_pairs,
    iter_relative_movements,
    quality_flags,
    relative_movement,
)
from roomtrack.config import TrackConfig
from roomtrack.geometry import haversine_distance
from roomtrack.records import QualityFlag, Record, RecordRelative

T0 = datetime(2024, 5, 1, 10, 0, 0)

# 0.0001 degrees of longitude at the equator is about 11.13 m
STEP = 0.0001


def at(seconds: float, lon: float = 0.0) -> Record:
    return Record(T0 + timedelta(seconds=seconds), 0.0, lon)


def test_iter_pairs():
    assert list(iter_pairs([1, 2, 3])) == [(1, 2), (2, 3)]
    assert list(iter_pairs([1])) == []
    assert list(iter_pairs([])) == []


def test_one_fewer_relative_than_records():
    records = [at(0), at(5, STEP), at(10, 2 * STEP), at(20, 2 * STEP)]
    relatives = calculate_relative_movements(records)
    assert len(relatives) == 3
    assert relatives[0].time_to_last == records[1].timestamp - records[0].timestamp
    assert [r.timestamp for r in relatives] == [r.timestamp for r in records[1:]]


def test_single_record_gives_no_relatives():
    assert calculate_relative_movements([at(0)]) == []


def test_distance_uses_haversine():
    relative = relative_movement(at(0), at(10, STEP), TrackConfig())
    assert relative.distance_to_last == haversine_distance(0.0, STEP, 0.0, 0.0)
    assert relative.speed == pytest.approx(1.113, abs=0.001)
    assert relative.flags == frozenset()


def test_long_gap_flag():
    relative = relative_movement(at(0), at(65, STEP), TrackConfig())
    assert relative.flags == frozenset({QualityFlag.LONG})


def test_gap_of_exactly_sixty_seconds_is_not_long():
    relative = relative_movement(at(0), at(60), TrackConfig())
    assert not relative.has_flag(QualityFlag.LONG)


def test_speed_flag_only():
    # 20 m in 5 s is 4 m/s
    twenty_meters = 20.0 / haversine_distance(0.0, 0.0, 0.0, 1.0)
    relative = relative_movement(at(0), at(5, twenty_meters), TrackConfig())
    assert relative.speed == pytest.approx(4.0)
    assert relative.has_flag(QualityFlag.SPEED)
    assert not relative.has_flag(QualityFlag.LONG)


def test_both_flags():
    # About 334 m in 100 s
    relative = relative_movement(at(0), at(100, 30 * STEP), TrackConfig())
    assert relative.flags == frozenset({QualityFlag.LONG, QualityFlag.SPEED})


def test_thresholds_from_config():
    config = TrackConfig(max_walking_speed=1.0, long_gap_seconds=5.0)
    relative = relative_movement(at(0), at(10, STEP), config)
    assert relative.flags == frozenset({QualityFlag.LONG, QualityFlag.SPEED})


def test_quality_flags_independent():
    config = TrackConfig()
    assert quality_flags(timedelta(seconds=61), 0.0, config) == {QualityFlag.LONG}
    assert quality_flags(timedelta(seconds=1), 2.6, config) == {QualityFlag.SPEED}
    assert quality_flags(timedelta(seconds=1), 2.5, config) == frozenset()


class TestOutOfOrderInput:
    def test_zero_elapsed_time_with_movement(self):
        relative = relative_movement(at(0), at(0, STEP), TrackConfig())
        assert relative.time_to_last == timedelta(0)
        assert relative.speed == math.inf
        assert relative.has_flag(QualityFlag.SPEED)

    def test_zero_elapsed_time_without_movement(self):
        relative = RecordRelative(T0, timedelta(0), 0.0)
        assert math.isnan(relative.speed)
        assert quality_flags(relative.time_to_last, relative.speed, TrackConfig()) == frozenset()

    def test_negative_elapsed_time_passes_through(self):
        relative = relative_movement(at(10), at(0, STEP), TrackConfig())
        assert relative.time_to_last == timedelta(seconds=-10)
        assert relative.speed < 0
        assert relative.flags == frozenset()


def test_streaming_from_generator():
    def records():
        for i in range(4):
            yield at(i * 10, i * STEP)

    relatives = iter_relative_movements(records())
    first = next(relatives)
    assert first.timestamp == T0 + timedelta(seconds=10)
    assert len(list(relatives)) == 2
