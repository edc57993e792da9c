"""
Per-user reminder settings merged over environment defaults
"""
import pytest

from rentdesk.domain.reminders import ReminderSettings
from rentdesk.services.settings_service import SettingsService, default_reminder_settings


def test_defaults_from_environment():
    defaults = default_reminder_settings()
    assert defaults.check_in_enabled is True
    assert defaults.check_out_enabled is True
    assert defaults.check_in_lead_hours == 24
    assert defaults.check_out_lead_hours == 24


@pytest.mark.asyncio
async def test_unsaved_user_gets_defaults(session, owner):
    assert await SettingsService.get_reminder_settings(session, owner.id) == default_reminder_settings()


@pytest.mark.asyncio
async def test_saved_settings_take_precedence(session, owner):
    saved = ReminderSettings(
        check_in_enabled=False,
        check_out_enabled=True,
        check_in_lead_hours=2.5,
        check_out_lead_hours=48,
    )
    await SettingsService.save_reminder_settings(session, owner.id, saved)
    await session.commit()

    assert await SettingsService.get_reminder_settings(session, owner.id) == saved


@pytest.mark.asyncio
async def test_save_overwrites(session, owner):
    await SettingsService.save_reminder_settings(session, owner.id, ReminderSettings(check_in_lead_hours=1))
    await SettingsService.save_reminder_settings(session, owner.id, ReminderSettings(check_in_lead_hours=3))
    await session.commit()

    current = await SettingsService.get_reminder_settings(session, owner.id)
    assert current.check_in_lead_hours == 3
