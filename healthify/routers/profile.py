from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from healthify.database import get_db
from healthify.models.user import User
from healthify.schemas.user import ProfileResponse
from healthify.services.auth_middleware import get_current_user
from healthify.utils.response import create_response, handle_exception

router = APIRouter(prefix="/profile", tags=["Profile"])


@router.get("/me")
def get_profile(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    try:
        user = db.query(User).filter(User.id == current_user.id).first()
        if not user:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")

        profile_payload = ProfileResponse.from_user(user).model_dump()
        return create_response(
            message="Profile fetched successfully",
            data=profile_payload,
            status_code=status.HTTP_200_OK
        )
    except Exception as exc:
        return handle_exception(exc)
