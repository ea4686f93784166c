from datetime import datetime, timedelta, timezone

import numpy as np
import pytest

from timeseries.model import (
    Gap,
    InvalidTimeseriesError,
    Timeseries,
    ViewConfig,
    from_epoch_ms,
    is_missing,
    to_epoch_ms,
)

T0 = datetime(2024, 1, 3, tzinfo=timezone.utc)


def _times(n, step=60):
    return [T0 + timedelta(seconds=i * step) for i in range(n)]


def test_missing_means_none_or_nan_not_zero():
    assert is_missing(None)
    assert is_missing(float("nan"))
    assert not is_missing(0)
    assert not is_missing(0.0)
    assert not is_missing(-3.5)


def test_length_mismatch_is_rejected():
    with pytest.raises(InvalidTimeseriesError):
        Timeseries(_times(3), [1.0, 2.0])


def test_times_must_strictly_increase():
    times = _times(3)
    with pytest.raises(InvalidTimeseriesError):
        Timeseries([times[0], times[2], times[1]], [1, 2, 3])
    with pytest.raises(InvalidTimeseriesError):
        Timeseries([times[0], times[0]], [1, 2])


def test_naive_times_are_read_as_utc():
    series = Timeseries([datetime(2024, 1, 3, 12, 0)], [1.0])
    assert series.times[0] == datetime(2024, 1, 3, 12, 0, tzinfo=timezone.utc)


def test_nan_values_are_normalized_to_none():
    series = Timeseries(_times(3), [1.0, float("nan"), 0.0])
    assert series.values == [1.0, None, 0.0]
    assert series.is_missing(1)
    assert not series.is_missing(2)


def test_value_array_uses_nan_for_missing():
    values = Timeseries(_times(3), [1.0, None, 3.0]).value_array()
    assert values[0] == 1.0
    assert np.isnan(values[1])
    assert values[2] == 3.0


def test_defined_runs_split_on_missing_samples():
    series = Timeseries(_times(7), [1, 2, None, 4, 5, None, 7])
    assert series.defined_runs() == [(0, 2), (3, 5), (6, 7)]
    assert Timeseries(_times(2), [None, None]).defined_runs() == []


def test_gaps_are_derived_from_missing_runs():
    times = _times(6)
    series = Timeseries(times, [None, 1, None, None, 2, None])
    assert series.gaps() == [
        Gap(times[0], times[1]),
        Gap(times[1], times[4]),
        Gap(times[4], times[5]),
    ]


def test_explicit_gaps_take_precedence():
    times = _times(3)
    gap = Gap(times[1] - timedelta(seconds=10), times[1] + timedelta(seconds=10))
    series = Timeseries(times, [1, None, 3], gaps=[gap])
    assert series.gaps() == [gap]


def test_empty_series():
    series = Timeseries.empty(channel="H", observatory="BOU")
    assert len(series) == 0
    assert series.gaps() == []
    assert series.defined_runs() == []
    assert "BOU" in repr(series)


def test_epoch_conversion():
    assert to_epoch_ms(datetime(1970, 1, 1, 0, 0, 1)) == 1000.0
    assert from_epoch_ms(1000.0) == datetime(1970, 1, 1, 0, 0, 1, tzinfo=timezone.utc)


def test_view_config_update_returns_copy():
    config = ViewConfig()
    updated = config.update(channel="Z")
    assert updated.channel == "Z"
    assert config.channel == "H"
    assert updated.timemode == config.timemode


def test_single_missing_sample_gap_spans_its_neighbours():
    times = _times(3)
    gap, = Timeseries(times, [1, None, 3]).gaps()
    assert gap == Gap(times[0], times[2])
    assert gap.end > gap.start


def test_all_missing_gap_covers_the_series():
    times = _times(3)
    assert Timeseries(times, [None, None, None]).gaps() == [Gap(times[0], times[2])]
