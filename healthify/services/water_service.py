import logging
from datetime import date, datetime, timedelta

from sqlalchemy.engine import Connection, Engine
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from healthify.config import settings
from healthify.models.user import User
from healthify.models.water import DailyWaterLog
from healthify.services.progress_utils import (
    is_goal_met,
    progress_percentage,
    remaining_units,
    round_half_up,
)

logger = logging.getLogger(__name__)


def today_key() -> str:
    return date.today().isoformat()


def standing_goal(user: User | None) -> int:
    if user is None or not user.water_goal:
        return settings.DEFAULT_WATER_GOAL
    return user.water_goal


def _find_log(db: Session, user_id: int, log_date: str) -> DailyWaterLog | None:
    return (
        db.query(DailyWaterLog)
        .filter(DailyWaterLog.user_id == user_id, DailyWaterLog.log_date == log_date)
        .first()
    )


def get_or_create_today_log(db: Session, user_id: int, fallback_goal: int | None = None) -> DailyWaterLog:
    """Return today's log for the user, creating an empty one on first access.

    Two requests racing to create the same day hit the (user_id, log_date)
    unique constraint; the loser rolls back and reads the winner's row.
    """
    today = today_key()
    log = _find_log(db, user_id, today)
    if log:
        return log

    log = DailyWaterLog(
        user_id=user_id,
        log_date=today,
        count=0,
        goal=fallback_goal or settings.DEFAULT_WATER_GOAL,
    )
    db.add(log)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        logger.warning("Water log for user %s on %s created concurrently; re-reading", user_id, today)
        existing = _find_log(db, user_id, today)
        if existing is None:
            raise
        return existing
    db.refresh(log)
    logger.debug("Created water log id=%s for user %s on %s goal=%s", log.id, user_id, today, log.goal)
    return log


def build_progress(log: DailyWaterLog) -> dict:
    return {
        "date": log.log_date,
        "count": log.count,
        "goal": log.goal,
        "percentage": progress_percentage(log.count, log.goal),
        "remaining": remaining_units(log.count, log.goal),
        "completed": is_goal_met(log.count, log.goal),
    }


def _save_count(db: Session, log: DailyWaterLog, count: int) -> DailyWaterLog:
    log.count = count
    log.updated_at = datetime.utcnow()
    db.commit()
    db.refresh(log)
    return log


def record_drink(db: Session, user: User) -> DailyWaterLog:
    log = get_or_create_today_log(db, user.id, standing_goal(user))
    return _save_count(db, log, log.count + 1)


def undo_drink(db: Session, user: User) -> DailyWaterLog:
    log = get_or_create_today_log(db, user.id, standing_goal(user))
    return _save_count(db, log, max(log.count - 1, 0))


def set_today_count(db: Session, user: User, count: int) -> DailyWaterLog:
    if count < 0:
        raise ValueError("Count must be 0 or greater")
    if count > settings.WATER_COUNT_MAX:
        raise ValueError(f"Count must be {settings.WATER_COUNT_MAX} or less")
    log = get_or_create_today_log(db, user.id, standing_goal(user))
    return _save_count(db, log, count)


def set_goal(db: Session, user: User, goal: int) -> int:
    """Store the standing goal and retarget today's log if it already exists.

    Logs for other days keep the goal they were created with.
    """
    if goal < settings.WATER_GOAL_MIN or goal > settings.WATER_GOAL_MAX:
        raise ValueError(
            f"Goal must be between {settings.WATER_GOAL_MIN} and {settings.WATER_GOAL_MAX} glasses"
        )
    now = datetime.utcnow()
    user.water_goal = goal
    user.updated_at = now
    updated = (
        db.query(DailyWaterLog)
        .filter(DailyWaterLog.user_id == user.id, DailyWaterLog.log_date == today_key())
        .update({DailyWaterLog.goal: goal, DailyWaterLog.updated_at: now}, synchronize_session=False)
    )
    db.commit()
    db.refresh(user)
    logger.debug("User %s goal set to %s (today's log updated: %s)", user.id, goal, bool(updated))
    return user.water_goal


def resolve_history_window(
    start_date: str | None = None,
    end_date: str | None = None,
    days: int | None = None,
) -> tuple[date, date]:
    """Explicit start/end win; otherwise a window of ``days`` ending today."""
    if start_date and end_date:
        return date.fromisoformat(start_date), date.fromisoformat(end_date)
    window = days or settings.WATER_HISTORY_DEFAULT_DAYS
    end = date.today()
    return end - timedelta(days=window - 1), end


def build_history(db: Session, user: User, start: date, end: date) -> dict:
    logs = (
        db.query(DailyWaterLog)
        .filter(
            DailyWaterLog.user_id == user.id,
            DailyWaterLog.log_date >= start.isoformat(),
            DailyWaterLog.log_date <= end.isoformat(),
        )
        .order_by(DailyWaterLog.log_date.asc())
        .all()
    )
    log_map = {log.log_date: log for log in logs}
    default_goal = standing_goal(user)

    history = []
    cursor = start
    while cursor <= end:
        key = cursor.isoformat()
        log = log_map.get(key)
        if log:
            history.append(
                {
                    "date": key,
                    "count": log.count,
                    "goal": log.goal,
                    "percentage": progress_percentage(log.count, log.goal),
                    "completed": is_goal_met(log.count, log.goal),
                }
            )
        else:
            history.append(
                {"date": key, "count": 0, "goal": default_goal, "percentage": 0, "completed": False}
            )
        cursor += timedelta(days=1)

    total_days = len(history)
    days_with_data = len(logs)
    completed_days = sum(1 for entry in history if entry["completed"])
    total_glasses = sum(entry["count"] for entry in history)
    # Average over logged days only; days without a log are unknown, not zero.
    average_per_day = (
        round_half_up(sum(log.count for log in logs) / days_with_data, 1) if days_with_data else 0
    )
    completion_rate = int(round_half_up(completed_days / total_days * 100)) if total_days else 0

    logger.debug(
        "History for user %s %s..%s: %s days, %s logged", user.id, start, end, total_days, days_with_data
    )
    return {
        "history": history,
        "summary": {
            "startDate": start.isoformat(),
            "endDate": end.isoformat(),
            "totalDays": total_days,
            "daysWithData": days_with_data,
            "completedDays": completed_days,
            "completionRate": completion_rate,
            "totalGlasses": total_glasses,
            "averagePerDay": average_per_day,
        },
    }


def get_log_for_date(db: Session, user: User, log_date: str) -> dict:
    """Read-only lookup; a missing day is reported, never created."""
    log = _find_log(db, user.id, log_date)
    if not log:
        goal = standing_goal(user)
        return {
            "date": log_date,
            "count": 0,
            "goal": goal,
            "percentage": 0,
            "remaining": goal,
            "completed": False,
            "exists": False,
        }
    return {**build_progress(log), "exists": True}


def sync_current_water(bind: Engine | Connection, user_id: int, log_date: str, count: int) -> None:
    """Mirror today's count onto the user row.

    Runs after the response has been sent. The log table stays the source of
    truth, so a failure here is logged and dropped.
    """
    try:
        with Session(bind=bind) as session:
            user = session.get(User, user_id)
            if user is None:
                logger.warning("Skipping water mirror; user %s no longer exists", user_id)
                return
            user.current_water_date = log_date
            user.current_water_count = count
            session.commit()
        logger.debug("Mirrored water count %s (%s) onto user %s", count, log_date, user_id)
    except Exception:
        logger.exception("Background water sync failed for user %s", user_id)
