import logging

from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from healthify.config import settings
from healthify.database import get_db
from healthify.models.user import User
from healthify.models.water import DailyWaterLog
from healthify.schemas.water import (
    WaterCountUpdate,
    WaterDateResponse,
    WaterGoalResponse,
    WaterGoalUpdate,
    WaterHistoryResponse,
    WaterProgressResponse,
    validate_date_key,
)
from healthify.services import water_service
from healthify.services.auth_middleware import get_current_user
from healthify.utils.response import create_response, handle_exception

router = APIRouter(prefix="/water", tags=["Water"], dependencies=[Depends(get_current_user)])
logger = logging.getLogger(__name__)


def _load_user(db: Session, current_user: User) -> User:
    user = db.query(User).filter(User.id == current_user.id).first()
    if not user:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
    return user


def _parse_date_key(value: str) -> str:
    try:
        return validate_date_key(value)
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc))


def _progress_response(
    message: str,
    log: DailyWaterLog,
    db: Session,
    background_tasks: BackgroundTasks | None = None,
):
    if background_tasks is not None:
        background_tasks.add_task(
            water_service.sync_current_water,
            db.get_bind(),
            log.user_id,
            log.log_date,
            log.count,
        )
    payload = WaterProgressResponse(**water_service.build_progress(log)).model_dump()
    return create_response(message=message, data=payload, status_code=status.HTTP_200_OK)


@router.get("/goal")
def get_water_goal(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    user_id = current_user.id
    try:
        user = _load_user(db, current_user)
        goal = water_service.standing_goal(user)
        logger.info("User %s fetched water goal=%s", user.id, goal)
        return create_response(
            message="Water goal fetched",
            data=WaterGoalResponse(waterGoal=goal).model_dump(),
            status_code=status.HTTP_200_OK,
        )
    except HTTPException:
        raise
    except Exception as exc:
        db.rollback()
        logger.exception("Failed to fetch water goal for user %s", user_id)
        return handle_exception(exc)


@router.put("/goal")
def set_water_goal(
    body: WaterGoalUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    user_id = current_user.id
    try:
        user = _load_user(db, current_user)
        goal = water_service.set_goal(db, user, body.goal)
        logger.info("User %s set water goal=%s", user.id, goal)
        return create_response(
            message="Water goal updated",
            data=WaterGoalResponse(waterGoal=goal).model_dump(),
            status_code=status.HTTP_200_OK,
        )
    except HTTPException:
        raise
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc))
    except Exception as exc:
        db.rollback()
        logger.exception("Failed to set water goal for user %s", user_id)
        return handle_exception(exc)


@router.get("/today")
def today_water(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    user_id = current_user.id
    try:
        user = _load_user(db, current_user)
        log = water_service.get_or_create_today_log(db, user.id, water_service.standing_goal(user))
        logger.info("User %s has %s/%s glasses on %s", user.id, log.count, log.goal, log.log_date)
        return _progress_response("Today's water intake fetched", log, db)
    except HTTPException:
        raise
    except Exception as exc:
        db.rollback()
        logger.exception("Failed to fetch today's water for user %s", user_id)
        return handle_exception(exc)


@router.post("/drink")
def drink_water(
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    user_id = current_user.id
    try:
        user = _load_user(db, current_user)
        log = water_service.record_drink(db, user)
        logger.info("User %s recorded a glass; count=%s on %s", user.id, log.count, log.log_date)
        return _progress_response("Water intake recorded", log, db, background_tasks)
    except HTTPException:
        raise
    except Exception as exc:
        db.rollback()
        logger.exception("Failed to record water for user %s", user_id)
        return handle_exception(exc)


@router.delete("/drink")
def undo_drink_water(
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    user_id = current_user.id
    try:
        user = _load_user(db, current_user)
        log = water_service.undo_drink(db, user)
        logger.info("User %s removed a glass; count=%s on %s", user.id, log.count, log.log_date)
        return _progress_response("Water intake reduced", log, db, background_tasks)
    except HTTPException:
        raise
    except Exception as exc:
        db.rollback()
        logger.exception("Failed to reduce water for user %s", user_id)
        return handle_exception(exc)


@router.put("/today")
def set_today_water(
    body: WaterCountUpdate,
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    user_id = current_user.id
    try:
        user = _load_user(db, current_user)
        log = water_service.set_today_count(db, user, body.count)
        logger.info("User %s set water count=%s on %s", user.id, log.count, log.log_date)
        return _progress_response("Water intake updated", log, db, background_tasks)
    except HTTPException:
        raise
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc))
    except Exception as exc:
        db.rollback()
        logger.exception("Failed to set water count for user %s", user_id)
        return handle_exception(exc)


@router.get("/history")
def water_history(
    start_date: str | None = Query(None, alias="startDate"),
    end_date: str | None = Query(None, alias="endDate"),
    days: int | None = Query(None, ge=1, le=settings.WATER_HISTORY_MAX_DAYS),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    user_id = current_user.id
    try:
        if start_date and end_date:
            _parse_date_key(start_date)
            _parse_date_key(end_date)
        user = _load_user(db, current_user)
        start, end = water_service.resolve_history_window(start_date, end_date, days)
        if (end - start).days + 1 > settings.WATER_HISTORY_MAX_DAYS:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"Date range cannot exceed {settings.WATER_HISTORY_MAX_DAYS} days",
            )
        logger.info("Fetching water history for user %s covering %s to %s", user.id, start, end)
        history = water_service.build_history(db, user, start, end)
        return create_response(
            message="Water history fetched",
            data=WaterHistoryResponse(**history).model_dump(),
            status_code=status.HTTP_200_OK,
        )
    except HTTPException:
        raise
    except Exception as exc:
        db.rollback()
        logger.exception("Failed to build water history for user %s", user_id)
        return handle_exception(exc)


@router.get("/date/{log_date}")
def water_for_date(
    log_date: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    user_id = current_user.id
    try:
        log_date = _parse_date_key(log_date)
        user = _load_user(db, current_user)
        payload = water_service.get_log_for_date(db, user, log_date)
        logger.info("User %s fetched water for %s (exists=%s)", user.id, log_date, payload["exists"])
        return create_response(
            message="Water intake fetched",
            data=WaterDateResponse(**payload).model_dump(),
            status_code=status.HTTP_200_OK,
        )
    except HTTPException:
        raise
    except Exception as exc:
        db.rollback()
        logger.exception("Failed to fetch water for user %s on %s", user_id, log_date)
        return handle_exception(exc)
