"""
Settings repository - Data access for the single-row forecast settings table.
"""
from datetime import date
from sqlalchemy.orm import Session
from habit_forecast.models import Settings


class SettingsRepository:
    """Repository for Settings data access"""

    @staticmethod
    def get(db: Session) -> Settings:
        """Get the settings row, creating it with defaults on first access"""
        settings = db.query(Settings).first()
        if not settings:
            settings = Settings()
            db.add(settings)
            db.commit()
            db.refresh(settings)
        return settings

    @staticmethod
    def apply_update(db: Session, values: dict) -> Settings:
        """
        Overwrite settings fields with the given values.

        Args:
            db: Database session
            values: Field name -> new value (unknown names are ignored)

        Returns:
            Refreshed settings
        """
        settings = SettingsRepository.get(db)
        for key, value in values.items():
            if hasattr(settings, key):
                setattr(settings, key, value)
        db.commit()
        db.refresh(settings)
        return settings

    @staticmethod
    def mark_digest_sent(db: Session, digest_date: date) -> None:
        """Remember the effective date the risk digest last ran for"""
        settings = SettingsRepository.get(db)
        settings.last_digest_date = digest_date
        db.commit()
