from typing import Optional
from uuid import UUID
from fastapi import Depends, Header, HTTPException
from sqlalchemy.orm import Session
from database import get_db
from models.user import User


def get_current_user(
    x_user_id: Optional[str] = Header(None, alias="X-User-Id"),
    db: Session = Depends(get_db)
) -> User:
    """Resolve the calling user; authentication itself happens upstream."""
    if not x_user_id:
        raise HTTPException(status_code=401, detail="Not authorized, no user")
    try:
        user_id = UUID(x_user_id)
    except ValueError:
        raise HTTPException(status_code=401, detail="Not authorized, invalid user")

    user = db.get(User, user_id)
    if not user:
        raise HTTPException(status_code=401, detail="Not authorized, user not found")
    return user
