"""Account service - profile details and first-time registration"""

import logging
from typing import Optional

from fastapi import HTTPException
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ...models import Profile
from ..settings.service import SettingsService
from .schemas import ProfileResponse, RegisterRequest

logger = logging.getLogger(__name__)


def to_response(profile: Profile, shop_name: Optional[str] = None) -> ProfileResponse:
    return ProfileResponse(
        id=profile.id,
        email=profile.email,
        fullName=profile.full_name,
        role=profile.role,
        shopName=shop_name,
    )


class AccountService:
    def __init__(self, db: Session):
        self.db = db
        self.settings = SettingsService(db)

    def get_me(self, profile: Profile) -> ProfileResponse:
        return to_response(profile, self.settings.get_settings(profile).shop_name)

    def register(self, data: RegisterRequest, profile: Profile) -> ProfileResponse:
        """Idempotent: repeating it renames the owner but never duplicates the settings row"""
        profile.full_name = data.fullName
        try:
            self.db.commit()
            self.db.refresh(profile)
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"❌ Failed to register profile {profile.id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to complete registration") from e

        settings = self.settings.ensure_settings(profile, data.shopName)
        logger.info(f"✅ Registered {profile.email or profile.id} for shop '{settings.shop_name}'")
        return to_response(profile, settings.shop_name)
