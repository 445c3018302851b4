"""Business settings service - defaults, lookups and partial updates"""

import logging
from typing import Optional

from fastapi import HTTPException
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ...models import BusinessSettings, Profile
from .repository import SettingsRepository
from .schemas import BusinessSettingsResponse, BusinessSettingsUpdate

logger = logging.getLogger(__name__)

DEFAULT_SETTINGS = {
    "shop_name": "BarberPro",
    "open_time": "08:00",
    "close_time": "20:00",
    "appointment_duration": 90,
    "notifications_enabled": True,
    "google_calendar_sync": False,
    "n8n_webhook": None,
}


def to_response(settings: BusinessSettings) -> BusinessSettingsResponse:
    return BusinessSettingsResponse(
        shopName=settings.shop_name,
        openTime=settings.open_time[:5],
        closeTime=settings.close_time[:5],
        appointmentDuration=settings.appointment_duration,
        notifications=settings.notifications_enabled,
        googleCalendarSync=settings.google_calendar_sync,
        n8nWebhook=settings.n8n_webhook or "",
    )


class SettingsService:
    """Service layer for the per-account settings singleton"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = SettingsRepository()

    def get_settings(self, profile: Profile) -> BusinessSettings:
        """Stored settings, or unsaved defaults when the account never saved any"""
        settings = self.repo.get_by_user(self.db, profile.id)
        if settings is None:
            return BusinessSettings(user_id=profile.id, **DEFAULT_SETTINGS)
        return settings

    def ensure_settings(self, profile: Profile, shop_name: Optional[str] = None) -> BusinessSettings:
        settings = self.repo.get_by_user(self.db, profile.id)
        if settings is not None:
            return settings

        data = dict(DEFAULT_SETTINGS)
        if shop_name:
            data["shop_name"] = shop_name
        logger.info(f"🏪 Creating business settings for user {profile.id}")
        try:
            return self.repo.create_settings(self.db, profile.id, **data)
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"❌ Failed to create settings for user {profile.id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to save settings") from e

    def update_settings(self, data: BusinessSettingsUpdate, profile: Profile) -> BusinessSettings:
        settings = self.ensure_settings(profile)

        open_time = data.openTime or settings.open_time
        close_time = data.closeTime or settings.close_time
        if open_time >= close_time:
            raise HTTPException(status_code=400, detail="Opening time must be before closing time")

        updates = {
            "shop_name": data.shopName,
            "open_time": data.openTime,
            "close_time": data.closeTime,
            "appointment_duration": data.appointmentDuration,
            "notifications_enabled": data.notifications,
            "google_calendar_sync": data.googleCalendarSync,
        }

        try:
            settings = self.repo.update_settings(self.db, settings, **updates)
            # Webhook is the one nullable field: "" clears it
            if data.n8nWebhook is not None:
                settings.n8n_webhook = data.n8nWebhook or None
                self.db.commit()
                self.db.refresh(settings)
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"❌ Failed to update settings for user {profile.id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to save settings") from e

        logger.info(f"✅ Settings updated for user {profile.id}")
        return settings
