"""Account router - the signed-in user's profile"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ...auth import get_current_profile
from ...database import get_db
from ...models import Profile
from .schemas import ProfileResponse, RegisterRequest
from .service import AccountService

router = APIRouter(prefix="/auth", tags=["Authentication"])


def get_account_service(db: Session = Depends(get_db)) -> AccountService:
    """Dependency injection for AccountService"""
    return AccountService(db)


@router.get("/me", response_model=ProfileResponse)
async def get_me(
    current_profile: Profile = Depends(get_current_profile),
    service: AccountService = Depends(get_account_service),
):
    return service.get_me(current_profile)


@router.post("/register", response_model=ProfileResponse)
async def register(
    data: RegisterRequest,
    current_profile: Profile = Depends(get_current_profile),
    service: AccountService = Depends(get_account_service),
):
    """Finish sign-up after the hosted auth account exists"""
    return service.register(data, current_profile)
