from dataclasses import asdict

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from rentdesk.core.config import settings as env_settings
from rentdesk.domain.reminders import ReminderSettings
from rentdesk.models import UserSetting

REMINDER_KEYS = {
    "check_in_enabled": bool,
    "check_out_enabled": bool,
    "check_in_lead_hours": float,
    "check_out_lead_hours": float,
}


def default_reminder_settings() -> ReminderSettings:
    return ReminderSettings(
        check_in_enabled=env_settings.default_check_in_enabled,
        check_out_enabled=env_settings.default_check_out_enabled,
        check_in_lead_hours=env_settings.default_check_in_lead_hours,
        check_out_lead_hours=env_settings.default_check_out_lead_hours,
    )


def _parse(value: str, kind: type):
    if kind is bool:
        return value.lower() == "true"
    return kind(value)


class SettingsService:
    @staticmethod
    async def get_reminder_settings(db: AsyncSession, user_id: int) -> ReminderSettings:
        """
        Merges environment defaults with the user's stored preferences.
        Stored values take precedence.
        """
        effective = asdict(default_reminder_settings())

        result = await db.execute(
            select(UserSetting).where(
                UserSetting.user_id == user_id,
                UserSetting.key.in_(list(REMINDER_KEYS)),
            )
        )
        for row in result.scalars().all():
            if row.value is not None:
                effective[row.key] = _parse(row.value, REMINDER_KEYS[row.key])

        return ReminderSettings(**effective)

    @staticmethod
    async def save_reminder_settings(
        db: AsyncSession, user_id: int, new_settings: ReminderSettings
    ) -> None:
        """Upserts every reminder key; the caller commits."""
        for key in REMINDER_KEYS:
            value = getattr(new_settings, key)
            stored = str(value).lower() if isinstance(value, bool) else str(value)

            row = await db.get(UserSetting, (user_id, key))
            if row:
                row.value = stored
            else:
                db.add(UserSetting(user_id=user_id, key=key, value=stored))
        await db.flush()
