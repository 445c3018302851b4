"""Business settings router - FastAPI endpoints for the settings page"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ...auth import get_current_profile, require_admin
from ...database import get_db
from ...models import Profile
from .schemas import BusinessSettingsResponse, BusinessSettingsUpdate
from .service import SettingsService, to_response

router = APIRouter(prefix="/settings", tags=["Settings"])


def get_settings_service(db: Session = Depends(get_db)) -> SettingsService:
    """Dependency injection for SettingsService"""
    return SettingsService(db)


@router.get("", response_model=BusinessSettingsResponse)
async def get_settings(
    current_profile: Profile = Depends(get_current_profile),
    service: SettingsService = Depends(get_settings_service),
):
    """Get the shop settings (defaults when never saved)"""
    return to_response(service.get_settings(current_profile))


@router.patch("", response_model=BusinessSettingsResponse)
async def update_settings(
    data: BusinessSettingsUpdate,
    current_profile: Profile = Depends(require_admin),
    service: SettingsService = Depends(get_settings_service),
):
    """Update the shop settings"""
    return to_response(service.update_settings(data, current_profile))
