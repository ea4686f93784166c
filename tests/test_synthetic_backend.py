from datetime import datetime, timedelta, timezone

import pytest

from timeseries.app import TimeseriesRequest
from timeseries.backends.synthetic_backend import CHANNEL_BASELINES, SyntheticTimeseriesFactory

START = datetime(2024, 3, 9, tzinfo=timezone.utc)


def _request(start=START, end=START + timedelta(hours=1), period=60, channel="H"):
    return TimeseriesRequest(
        request_id=1,
        channel=channel,
        observatory="BOU",
        starttime=start,
        endtime=end,
        sampling_period=period,
    )


def test_samples_are_aligned_to_the_period():
    series = SyntheticTimeseriesFactory().build(
        _request(start=START + timedelta(seconds=30), end=START + timedelta(minutes=10, seconds=30))
    )
    assert series.times[0] == START + timedelta(minutes=1)
    assert series.times[-1] == START + timedelta(minutes=10)
    assert all(t.second == 0 for t in series.times)


def test_output_is_deterministic():
    factory = SyntheticTimeseriesFactory()
    assert factory.build(_request()).values == factory.build(_request()).values


def test_values_stay_near_channel_baseline():
    series = SyntheticTimeseriesFactory(outage_length=timedelta(0)).build(_request(channel="Z"))
    assert all(abs(v - CHANNEL_BASELINES["Z"]) < 50 for v in series.values)


def test_outages_become_missing_samples():
    factory = SyntheticTimeseriesFactory(outage_every=timedelta(hours=6), outage_length=timedelta(minutes=20))
    series = factory.build(_request())
    # START is on an outage boundary
    assert series.values[:20] == [None] * 20
    assert series.values[20] is not None
    gap, = series.gaps()
    assert gap.start == START
    assert gap.end == START + timedelta(minutes=20)


def test_metadata_is_carried():
    series = SyntheticTimeseriesFactory().build(_request(channel="E"))
    assert series.channel == "E"
    assert series.observatory == "BOU"


@pytest.mark.parametrize(
    "request_kwargs",
    [
        {"end": START - timedelta(minutes=1)},
        {"period": 0},
        {"end": START + timedelta(days=31), "period": 1},
    ],
)
def test_invalid_requests_go_to_errback(request_kwargs):
    results, errors = [], []
    SyntheticTimeseriesFactory().get_timeseries(_request(**request_kwargs), results.append, errors.append)
    assert results == []
    assert isinstance(errors[0], ValueError)


def test_valid_request_goes_to_callback():
    results, errors = [], []
    SyntheticTimeseriesFactory().get_timeseries(_request(), results.append, errors.append)
    assert errors == []
    assert len(results[0]) == 61
