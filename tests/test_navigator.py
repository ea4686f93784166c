from datetime import datetime, timedelta, timezone

import pytest

from timeseries.model import ViewConfig
from timeseries.navigator import (
    CUSTOM,
    END_FIELD,
    INVALID_TIME_MESSAGE,
    ORDER_MESSAGE,
    PAST_DAY,
    PAST_HOUR,
    RANGE_MESSAGE,
    REALTIME,
    START_FIELD,
    TIME_FIELD,
    TimeRangeNavigator,
    round_up_to_nearest_n_minutes,
)

NOW = datetime(2024, 3, 10, 12, 0, 30, tzinfo=timezone.utc)


def utc(*args):
    return datetime(*args, tzinfo=timezone.utc)


def _custom(start, end):
    return ViewConfig(starttime=start, endtime=end, timemode=CUSTOM)


@pytest.fixture
def published():
    return []


@pytest.fixture
def make_navigator(published):
    def make(config=None):
        navigator = TimeRangeNavigator(config or ViewConfig(), clock=lambda: NOW)
        navigator.on_change(published.append)
        return navigator

    return make


# ------------------ Rounding ------------------ #

@pytest.mark.parametrize(
    "dt, n, expected",
    [
        (utc(2024, 3, 10, 10, 7, 30), 5, utc(2024, 3, 10, 10, 10)),
        (utc(2024, 3, 10, 10, 5, 0), 5, utc(2024, 3, 10, 10, 10)),
        (utc(2024, 3, 10, 10, 58, 0), 5, utc(2024, 3, 10, 11, 0)),
        (utc(2024, 3, 10, 23, 59, 59), 1, utc(2024, 3, 11, 0, 0)),
        (utc(2024, 3, 10, 10, 7, 0), 1, utc(2024, 3, 10, 10, 8)),
    ],
)
def test_round_up_to_nearest_n_minutes(dt, n, expected):
    assert round_up_to_nearest_n_minutes(dt, n) == expected


# ------------------ Presets ------------------ #

@pytest.mark.parametrize(
    "mode, span",
    [(REALTIME, timedelta(minutes=15)), (PAST_HOUR, timedelta(hours=1)), (PAST_DAY, timedelta(hours=24))],
)
def test_preset_publishes_window_ending_now(make_navigator, published, mode, span):
    navigator = make_navigator()
    navigator.select_mode(mode)

    config = published[-1]
    assert config.timemode == mode
    assert config.starttime == NOW - span
    assert config.endtime == NOW
    assert navigator.mode == mode
    assert not navigator.next_enabled


def test_custom_mode_only_enables_editing(make_navigator, published):
    navigator = make_navigator()
    navigator.select_mode(CUSTOM)
    assert published == []
    assert navigator.mode == CUSTOM


def test_unknown_mode_is_rejected(make_navigator):
    with pytest.raises(ValueError):
        make_navigator().select_mode("lastweek")


# ------------------ Manual edits ------------------ #

def _edit(navigator, start_text, end_text, source=END_FIELD):
    navigator.select_mode(CUSTOM)
    navigator.set_start_text(start_text)
    navigator.set_end_text(end_text)
    return navigator.commit(source)


def test_valid_edit_publishes_custom_window(make_navigator, published):
    navigator = make_navigator()
    assert _edit(navigator, "2024-03-01 00:00:00", "2024-03-02T06:00:00Z")

    config = published[-1]
    assert config.timemode == CUSTOM
    assert config.starttime == utc(2024, 3, 1)
    assert config.endtime == utc(2024, 3, 2, 6)
    assert navigator.errors == {}
    assert navigator.end_text == "2024-03-02 06:00:00"


def test_invalid_fields_get_their_own_message(make_navigator, published):
    navigator = make_navigator()
    before = navigator.config

    assert not _edit(navigator, "not a date", "")

    assert navigator.errors == {START_FIELD: INVALID_TIME_MESSAGE, END_FIELD: INVALID_TIME_MESSAGE}
    assert navigator.config is before
    assert published == []


def test_start_after_end_is_rejected(make_navigator, published):
    navigator = make_navigator()
    assert not _edit(navigator, "2024-03-02 00:00:00", "2024-03-01 00:00:00")
    assert navigator.errors == {TIME_FIELD: ORDER_MESSAGE}
    assert published == []


def test_order_message_is_held_back_while_editing_start(make_navigator, published):
    navigator = make_navigator()
    assert not _edit(navigator, "2024-03-02 00:00:00", "2024-03-01 00:00:00", source=START_FIELD)
    assert navigator.errors == {}
    assert published == []


def test_equal_start_and_end_is_accepted(make_navigator):
    navigator = make_navigator()
    assert _edit(navigator, "2024-03-01 00:00:00", "2024-03-01 00:00:00")


def test_range_limit_is_inclusive(make_navigator, published):
    navigator = make_navigator()
    # 31 days exactly
    assert _edit(navigator, "2024-01-01 00:00:00", "2024-02-01 00:00:00")

    assert not _edit(navigator, "2024-01-01 00:00:00", "2024-02-01 00:00:00.001")
    assert navigator.errors == {TIME_FIELD: RANGE_MESSAGE}
    assert len(published) == 1


def test_successful_edit_clears_previous_errors(make_navigator):
    navigator = make_navigator()
    _edit(navigator, "bad", "2024-03-01 00:00:00")
    assert START_FIELD in navigator.errors
    assert _edit(navigator, "2024-02-28 00:00:00", "2024-03-01 00:00:00")
    assert navigator.errors == {}


def test_commit_outside_custom_mode_does_nothing(make_navigator, published):
    navigator = make_navigator()
    navigator.select_mode(PAST_HOUR)
    published.clear()
    navigator.set_start_text("2024-03-01 00:00:00")
    assert not navigator.commit()
    assert published == []


# ------------------ Stepping ------------------ #

def test_step_previous_shifts_half_a_window(make_navigator, published):
    navigator = make_navigator(_custom(utc(2024, 3, 9, 10, 0), utc(2024, 3, 9, 12, 0)))
    navigator.step_previous()

    config = published[-1]
    assert config.timemode == CUSTOM
    assert config.starttime == utc(2024, 3, 9, 9, 1)
    assert config.endtime == utc(2024, 3, 9, 11, 1)


def test_step_next_shifts_forward(make_navigator, published):
    navigator = make_navigator(_custom(utc(2024, 3, 9, 10, 0), utc(2024, 3, 9, 12, 0)))
    assert navigator.next_enabled
    assert navigator.step_next()
    assert published[-1].starttime == utc(2024, 3, 9, 11, 1)
    assert published[-1].endtime == utc(2024, 3, 9, 13, 1)


def test_step_from_past_day_rounds_to_five_minutes(make_navigator, published):
    navigator = make_navigator()
    navigator.select_mode(PAST_DAY)
    navigator.step_previous()

    config = published[-1]
    assert config.timemode == CUSTOM
    assert config.starttime == utc(2024, 3, 9, 0, 5)
    assert config.endtime == utc(2024, 3, 10, 0, 5)
    assert navigator.mode == CUSTOM


def test_step_from_past_hour_rounds_to_one_minute(make_navigator, published):
    navigator = make_navigator()
    navigator.select_mode(PAST_HOUR)
    navigator.step_previous()

    config = published[-1]
    assert config.starttime == utc(2024, 3, 10, 10, 31)
    assert config.endtime == utc(2024, 3, 10, 11, 31)


def test_step_rejects_other_directions(make_navigator):
    navigator = make_navigator(_custom(utc(2024, 3, 9, 10, 0), utc(2024, 3, 9, 12, 0)))
    with pytest.raises(ValueError):
        navigator.step(2)


def test_next_disabled_when_window_reaches_now(make_navigator, published):
    navigator = make_navigator(_custom(utc(2024, 3, 10, 10, 0), NOW))
    assert not navigator.next_enabled
    assert not navigator.step_next()
    assert published == []

    navigator = make_navigator(_custom(utc(2024, 3, 10, 10, 0), NOW + timedelta(hours=1)))
    assert not navigator.next_enabled


# ------------------ Selection and listeners ------------------ #

def test_channel_and_observatory_changes_publish(make_navigator, published):
    navigator = make_navigator()
    navigator.set_channel("Z")
    navigator.set_channel("Z")
    navigator.set_observatory("BOU")

    assert [config.channel for config in published] == ["Z", "Z"]
    assert published[-1].observatory == "BOU"


def test_unsubscribe_stops_notifications():
    received = []
    navigator = TimeRangeNavigator(ViewConfig(), clock=lambda: NOW)
    unsubscribe = navigator.on_change(received.append)
    unsubscribe()
    unsubscribe()
    navigator.select_mode(REALTIME)
    assert received == []


def test_editing_start_keeps_other_field_messages(make_navigator, published):
    navigator = make_navigator()
    assert not _edit(navigator, "2024-03-01 00:00:00", "tomorrow")
    assert navigator.errors == {END_FIELD: INVALID_TIME_MESSAGE}

    navigator.set_end_text("2024-03-01 00:00:00")
    navigator.set_start_text("2024-03-02 00:00:00")
    assert not navigator.commit(START_FIELD)

    assert navigator.errors == {END_FIELD: INVALID_TIME_MESSAGE}
    assert published == []
