"""Business settings repository - Database operations for the settings singleton"""

from typing import Optional

from sqlalchemy.orm import Session

from ...models import BusinessSettings


class SettingsRepository:
    """Repository for business settings database operations"""

    @staticmethod
    def get_by_user(db: Session, user_id: str) -> Optional[BusinessSettings]:
        return db.query(BusinessSettings).filter(BusinessSettings.user_id == user_id).first()

    @staticmethod
    def create_settings(db: Session, user_id: str, **settings_data) -> BusinessSettings:
        settings = BusinessSettings(user_id=user_id, **settings_data)
        db.add(settings)
        db.commit()
        db.refresh(settings)
        return settings

    @staticmethod
    def update_settings(db: Session, settings: BusinessSettings, **updates) -> BusinessSettings:
        """Update settings with provided fields (None means untouched)"""
        for key, value in updates.items():
            if value is not None and hasattr(settings, key):
                setattr(settings, key, value)

        db.commit()
        db.refresh(settings)
        return settings
