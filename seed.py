import logging

from healthify.config import settings
from healthify.database import SessionLocal
from healthify.models.user import User
from healthify.services.auth_service import create_access_token

logger = logging.getLogger(__name__)


def run_seed():
    if not settings.SEED_DEFAULT_USER:
        logger.info("Default user seeding disabled by configuration.")
        return

    db = SessionLocal()
    try:
        # If database has no users create the demo account
        if db.query(User).count() == 0:
            demo_user = User(
                email=settings.DEFAULT_USER_EMAIL,
                name=settings.DEFAULT_USER_NAME,
                is_active=True,
                water_goal=settings.DEFAULT_WATER_GOAL,
            )
            db.add(demo_user)
            db.commit()
            db.refresh(demo_user)
            logger.info("Default user %s seeded (id=%s)", demo_user.email, demo_user.id)
            logger.info("Demo bearer token: %s", create_access_token(demo_user.id))
        else:
            logger.info("Users already present, skipping seeding.")
    except Exception:
        db.rollback()
        logger.exception("Seeding error")
    finally:
        db.close()
