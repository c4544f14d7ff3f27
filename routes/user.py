from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from config.db import get_db
from config.security import require_caller
from model.user import Users
from schema.user import UserOut
from src.social import Caller

router = APIRouter()


@router.get("/v1/me", response_model=UserOut)
def get_me(caller: Caller = Depends(require_caller), db: Session = Depends(get_db)):
    """
    Returns the currently authenticated user, creating the record on first sign-in.
    Requires a valid Bearer token from the identity provider.
    """
    return db.get(Users, caller.user_id)
