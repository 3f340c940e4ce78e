from fastapi import APIRouter, Depends
from compass.core.auth import get_current_user
from compass.models import User
from compass.schemas.user import MeResponse

router = APIRouter(tags=["auth"])


@router.get("/me", response_model=MeResponse)
def me(user: User = Depends(get_current_user)):
    return user
