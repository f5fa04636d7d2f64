import pytest

from pace_api.core.analytics.segmenter import iter_segment_bounds, iter_segments, segment_pace


def test_regular_samples_yield_one_segment_per_interval():
    time = [0, 10, 20, 30]
    distance = [0, 50, 100, 150]

    segments = list(iter_segments(time, distance, interval=10))

    assert [(s.start_index, s.end_index) for s in segments] == [(0, 1), (1, 2), (2, 3)]
    for segment in segments:
        assert segment.time_delta == 10
        assert segment.distance_delta == 50
        assert segment.pace == pytest.approx(3.333, abs=1e-3)


def test_trailing_partial_segment_is_dropped():
    segments = list(iter_segments([0, 10, 15], [0, 40, 60], interval=10))

    assert len(segments) == 1
    assert (segments[0].start_index, segments[0].end_index) == (0, 1)


def test_segments_span_at_least_the_interval_with_irregular_sampling():
    time = [0, 7, 14, 21, 40, 45, 50, 75]
    distance = [t * 3.0 for t in time]

    segments = list(iter_segments(time, distance, interval=15))

    assert [(s.start_index, s.end_index) for s in segments] == [(0, 3), (3, 4), (4, 7)]
    assert all(s.time_delta >= 15 for s in segments)


def test_flat_time_terminates():
    time = [0, 0, 0, 0, 0]
    distance = [0, 0, 0, 0, 0]

    assert list(iter_segment_bounds(time, len(time), 30)) == []
    assert list(iter_segments(time, distance, interval=30)) == []


def test_flat_time_with_non_positive_interval_still_advances():
    time = [5, 5, 5]
    bounds = list(iter_segment_bounds(time, len(time), 0))
    assert bounds == [(0, 1), (1, 2)]


def test_uses_common_prefix_when_lengths_differ():
    time = [0, 10, 20, 30, 40]
    distance = [0, 30, 60]

    segments = list(iter_segments(time, distance, interval=10))

    assert [s.end_index for s in segments] == [1, 2]


def test_empty_and_single_sample_streams():
    assert list(iter_segments([], [], interval=10)) == []
    assert list(iter_segments([0], [0], interval=10)) == []


def test_segments_are_lazy():
    gen = iter_segments([0, 10, 20], [0, 50, 100], interval=10)
    first = next(gen)
    assert first.end_index == 1
    assert next(gen).end_index == 2
    with pytest.raises(StopIteration):
        next(gen)


def test_velocity_path_averages_left_closed_window():
    # velocity[0:2] -> mean 4.0 m/s; velocity[2] is not part of the window
    velocity = [3.0, 5.0, 100.0]
    pace = segment_pace(0, 2, time_delta=20, distance_delta=80, velocity=velocity)
    assert pace == pytest.approx(16.6667 / 4.0)


def test_velocity_must_cover_segment_end():
    # len(velocity) == end, so distance/time is used instead
    pace = segment_pace(0, 2, time_delta=20, distance_delta=100, velocity=[9.0, 9.0])
    assert pace == pytest.approx((20 / 60) / 0.1)


def test_zero_velocity_is_unclassifiable():
    segments = list(iter_segments([0, 10, 20], [0, 50, 100], interval=10, velocity=[0.0, 0.0, 0.0]))
    assert all(s.pace is None for s in segments)
    assert not segments[0].classifiable


def test_no_forward_distance_is_unclassifiable():
    segments = list(iter_segments([0, 30, 60], [100, 100, 100], interval=30))
    assert [s.pace for s in segments] == [None, None]


def test_empty_velocity_falls_back_to_distance_time():
    time = [0, 10, 20]
    distance = [0, 50, 100]
    with_empty = list(iter_segments(time, distance, interval=10, velocity=[]))
    without = list(iter_segments(time, distance, interval=10))
    assert with_empty == without
