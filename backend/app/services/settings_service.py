"""
Settings Service - the global settings singleton
"""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.models.app_setting import AppSetting
from app.schemas.settings import SettingsUpdate


class SettingsService:

    async def get_settings(self, db: AsyncSession) -> AppSetting:
        """Return the settings row, creating it with defaults on first read"""
        result = await db.execute(select(AppSetting).order_by(AppSetting.created_at).limit(1))
        app_setting = result.scalar_one_or_none()

        if app_setting is None:
            app_setting = AppSetting(
                app_name=settings.DEFAULT_APP_NAME,
                support_email=settings.DEFAULT_SUPPORT_EMAIL,
            )
            db.add(app_setting)
            await db.commit()
            await db.refresh(app_setting)

        return app_setting

    async def update_settings(self, db: AsyncSession, data: SettingsUpdate) -> AppSetting:
        app_setting = await self.get_settings(db)

        for field, value in data.model_dump(exclude_unset=True, exclude_none=True).items():
            setattr(app_setting, field, value)

        await db.commit()
        await db.refresh(app_setting)
        return app_setting


# Singleton instance
settings_service = SettingsService()
