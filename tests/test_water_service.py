from datetime import date, timedelta

import pytest
from sqlalchemy import create_engine

from healthify.models.water import DailyWaterLog
from healthify.services import water_service
from healthify.services.progress_utils import (
    is_goal_met,
    progress_percentage,
    remaining_units,
    round_half_up,
)


@pytest.mark.parametrize(
    "count, goal, expected",
    [
        (0, 8, 0),
        (1, 8, 13),
        (4, 8, 50),
        (8, 8, 100),
        (30, 8, 100),
        (5, 0, 0),
        (0, 0, 0),
    ],
)
def test_progress_percentage_stays_within_bounds(count, goal, expected):
    value = progress_percentage(count, goal)

    assert value == expected
    assert 0 <= value <= 100


@pytest.mark.parametrize(
    "count, goal, expected",
    [(0, 8, False), (7, 8, False), (8, 8, True), (9, 8, True), (0, 0, True)],
)
def test_goal_met_iff_count_reaches_goal(count, goal, expected):
    assert is_goal_met(count, goal) is expected


def test_remaining_never_negative():
    assert remaining_units(3, 8) == 5
    assert remaining_units(12, 8) == 0


def test_round_half_up():
    assert round_half_up(2.5) == 3
    assert round_half_up(0.5) == 1
    assert round_half_up(6.25, 1) == 6.3
    assert round_half_up(5.0 / 3, 1) == 1.7


def test_get_or_create_is_idempotent(db_session, make_user):
    account = make_user()

    first = water_service.get_or_create_today_log(db_session, account.id, 6)
    second = water_service.get_or_create_today_log(db_session, account.id, 12)

    assert first.id == second.id
    assert second.goal == 6
    assert second.log_date == date.today().isoformat()


def test_get_or_create_falls_back_to_default_goal(db_session, make_user):
    account = make_user()

    log = water_service.get_or_create_today_log(db_session, account.id, None)

    assert log.goal == 8
    assert log.count == 0


def test_get_or_create_recovers_from_concurrent_insert(db_session, make_user, monkeypatch):
    account = make_user()
    winner = DailyWaterLog(user_id=account.id, log_date=date.today().isoformat(), count=2, goal=8)
    db_session.add(winner)
    db_session.commit()

    real_find = water_service._find_log
    calls = {"count": 0}

    def _miss_first(db, user_id, log_date):
        calls["count"] += 1
        if calls["count"] == 1:
            return None
        return real_find(db, user_id, log_date)

    monkeypatch.setattr(water_service, "_find_log", _miss_first)

    log = water_service.get_or_create_today_log(db_session, account.id, 8)

    assert log.id == winner.id
    assert log.count == 2
    assert db_session.query(DailyWaterLog).filter(DailyWaterLog.user_id == account.id).count() == 1


def test_set_today_count_rejects_negative(db_session, make_user):
    account = make_user()

    with pytest.raises(ValueError):
        water_service.set_today_count(db_session, account, -1)


def test_set_today_count_rejects_values_above_ceiling(db_session, make_user):
    account = make_user()

    with pytest.raises(ValueError):
        water_service.set_today_count(db_session, account, 1001)


def test_set_goal_rejects_out_of_range(db_session, make_user):
    account = make_user()

    with pytest.raises(ValueError):
        water_service.set_goal(db_session, account, 21)


def test_resolve_window_prefers_explicit_range():
    start, end = water_service.resolve_history_window("2024-01-01", "2024-01-31", days=7)

    assert start == date(2024, 1, 1)
    assert end == date(2024, 1, 31)


def test_resolve_window_needs_both_bounds():
    start, end = water_service.resolve_history_window("2024-01-01", None, days=7)

    assert end == date.today()
    assert start == date.today() - timedelta(days=6)


def test_build_history_average_ignores_days_without_data(db_session, make_user):
    account = make_user()
    for offset, count in ((0, 3), (1, 4), (4, 4)):
        db_session.add(
            DailyWaterLog(
                user_id=account.id,
                log_date=(date(2024, 6, 1) + timedelta(days=offset)).isoformat(),
                count=count,
                goal=8,
            )
        )
    db_session.commit()

    result = water_service.build_history(db_session, account, date(2024, 6, 1), date(2024, 6, 7))

    assert [entry["count"] for entry in result["history"]] == [3, 4, 0, 0, 4, 0, 0]
    assert result["summary"]["averagePerDay"] == 3.7
    assert result["summary"]["totalGlasses"] == 11
    assert result["summary"]["daysWithData"] == 3


def test_sync_failure_is_swallowed(caplog):
    broken = create_engine("sqlite:////nonexistent-dir/healthify/missing.db")

    water_service.sync_current_water(broken, 1, date.today().isoformat(), 3)

    assert "Background water sync failed" in caplog.text


def test_sync_writes_mirror(db_session, make_user):
    account = make_user()

    water_service.sync_current_water(db_session.get_bind(), account.id, "2024-07-01", 4)

    db_session.expire_all()
    assert account.current_water_date == "2024-07-01"
    assert account.current_water_count == 4
