from fastapi import APIRouter, Depends

from app.core.security import get_current_user
from app.models.user import User
from app.schemas.responses import ApiResponse
from app.schemas.user import UserOut

router = APIRouter(prefix="/me", tags=["me"])


@router.get("", response_model=ApiResponse[UserOut])
def get_me(current_user: User = Depends(get_current_user)):
    return ApiResponse(
        message="User retrieved successfully",
        data=UserOut(
            id=str(current_user.id),
            email=current_user.email,
            full_name=current_user.full_name,
            created_at=current_user.created_at,
            updated_at=current_user.updated_at,
        ),
    )
