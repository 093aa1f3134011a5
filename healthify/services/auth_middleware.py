from fastapi import Depends, HTTPException
from fastapi.security import HTTPAuthorizationCredentials
from jose import JWTError, jwt
from sqlalchemy.orm import Session

from healthify.config import settings
from healthify.database import get_db
from healthify.models.user import User


def _resolve_user_id(token: str) -> int:
    try:
        payload = jwt.decode(token, settings.JWT_SECRET, algorithms=[settings.ALGORITHM])
    except JWTError:
        raise HTTPException(status_code=401, detail="Invalid or expired token")

    subject = payload.get("sub")
    token_type = payload.get("type") or "access"
    if token_type != "access":
        raise HTTPException(status_code=401, detail="Invalid token type")
    try:
        return int(subject)
    except (TypeError, ValueError):
        raise HTTPException(status_code=401, detail="Invalid token payload")


def get_current_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(settings.bearer_scheme),
    db: Session = Depends(get_db)
):
    if credentials is None or credentials.scheme.lower() != "bearer":
        raise HTTPException(status_code=401, detail="Not authorized")

    user_id = _resolve_user_id(credentials.credentials)
    user = db.query(User).filter(User.id == user_id, User.is_active == True).first()  # noqa: E712
    if not user:
        raise HTTPException(status_code=404, detail="User not found")
    return user
