"""
Unit tests for the reminder lifecycle manager
"""
from dataclasses import replace
from datetime import date, datetime, timezone

import pytest

from rentdesk.domain.lifecycle import ReminderLifecycleManager, ReminderState
from rentdesk.domain.reminders import BookingSnapshot, ReminderKind, ReminderSettings

NOW = datetime(2024, 6, 1, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def manager():
    return ReminderLifecycleManager()


@pytest.fixture
def booking():
    return BookingSnapshot(
        id=42,
        property_id=1,
        property_name="Lakeside Cabin",
        customer_name="Jane Guest",
        check_in=date(2024, 6, 10),
        check_out=date(2024, 6, 15),
    )


@pytest.fixture
def settings():
    return ReminderSettings()


class TestBookingCreated:
    def test_plans_both_reminders(self, manager, booking, settings):
        plan = manager.on_booking_created(booking, settings, NOW)

        assert plan.retire is False
        assert [w.kind for w in plan.writes] == [ReminderKind.CHECK_IN, ReminderKind.CHECK_OUT]
        assert len(plan.future) == 2
        assert manager.state_of(42) == ReminderState.SCHEDULED

    def test_disabled_kinds_skipped(self, manager, booking):
        settings = ReminderSettings(check_in_enabled=False, check_out_enabled=False)
        plan = manager.on_booking_created(booking, settings, NOW)
        assert plan.writes == []

    def test_past_booking_reminders_already_due(self, manager, booking, settings):
        plan = manager.on_booking_created(booking, settings, datetime(2024, 7, 1, tzinfo=timezone.utc))
        assert len(plan.due_now) == 2
        assert plan.future == []

    def test_repeated_create_replaces_live_reminders(self, manager, booking, settings):
        manager.on_booking_created(booking, settings, NOW)
        plan = manager.on_booking_created(booking, settings, NOW)

        assert plan.retire is True
        assert len(plan.writes) == 2
        assert manager.state_of(42) == ReminderState.SCHEDULED


class TestBookingUpdated:
    def test_date_change_retires_and_recomputes(self, manager, booking, settings):
        manager.on_booking_created(booking, settings, NOW)

        moved = replace(booking, check_in=date(2024, 6, 20), check_out=date(2024, 6, 22))
        plan = manager.on_booking_updated(moved, settings, NOW, changed_fields={"check_in", "check_out"})

        assert plan.retire is True
        assert len(plan.writes) == 2
        check_in = next(w for w in plan.writes if w.kind == ReminderKind.CHECK_IN)
        assert check_in.scheduled_for == datetime(2024, 6, 19, 14, 0, tzinfo=timezone.utc)

    def test_unrelated_change_is_noop(self, manager, booking, settings):
        manager.on_booking_created(booking, settings, NOW)
        plan = manager.on_booking_updated(booking, settings, NOW, changed_fields={"notes", "is_paid"})
        assert plan.is_empty

    def test_unknown_changes_recompute(self, manager, booking, settings):
        plan = manager.on_booking_updated(booking, settings, NOW)
        assert plan.retire is True
        assert len(plan.writes) == 2

    def test_update_after_delete_is_noop(self, manager, booking, settings):
        manager.on_booking_created(booking, settings, NOW)
        manager.on_booking_deleted(booking.id)
        plan = manager.on_booking_updated(booking, settings, NOW)
        assert plan.is_empty


class TestBookingDeleted:
    def test_retires_reminders(self, manager, booking, settings):
        manager.on_booking_created(booking, settings, NOW)
        plan = manager.on_booking_deleted(booking.id)

        assert plan.retire is True
        assert plan.writes == []
        assert manager.state_of(booking.id) == ReminderState.RETIRED

    def test_second_delete_is_noop(self, manager, booking, settings):
        manager.on_booking_created(booking, settings, NOW)
        manager.on_booking_deleted(booking.id)
        assert manager.on_booking_deleted(booking.id).is_empty

    def test_delete_without_reminders_still_retires(self, manager):
        plan = manager.on_booking_deleted(99)
        assert plan.retire is True

    def test_forget_resets_state(self, manager, booking, settings):
        manager.on_booking_created(booking, settings, NOW)
        manager.on_booking_deleted(booking.id)
        manager.forget(booking.id)
        assert manager.state_of(booking.id) == ReminderState.NO_REMINDERS

    def test_retired_ids_kept_in_bounded_window(self, booking, settings):
        manager = ReminderLifecycleManager(retired_window=2)
        for booking_id in (1, 2, 3):
            manager.on_booking_created(replace(booking, id=booking_id), settings, NOW)
            manager.on_booking_deleted(booking_id)

        assert manager.tracked_count() == 2
        assert manager.state_of(3) == ReminderState.RETIRED
        assert manager.state_of(1) == ReminderState.NO_REMINDERS
        # Outside the window a repeated delete only retires, never writes
        plan = manager.on_booking_deleted(1)
        assert plan.retire is True
        assert plan.writes == []


class TestSettingsChanged:
    def test_noop_by_default(self, manager, booking, settings):
        manager.on_booking_created(booking, settings, NOW)
        new_settings = ReminderSettings(check_in_lead_hours=48)
        assert manager.on_settings_changed(new_settings, [booking], NOW) == []

    def test_reschedule_recomputes_with_new_settings(self, manager, booking, settings):
        manager.on_booking_created(booking, settings, NOW)
        new_settings = ReminderSettings(check_in_lead_hours=48, check_out_enabled=False)

        plans = manager.on_settings_changed(new_settings, [booking], NOW, reschedule=True)

        assert len(plans) == 1
        assert plans[0].retire is True
        assert [w.kind for w in plans[0].writes] == [ReminderKind.CHECK_IN]
        assert plans[0].writes[0].scheduled_for == datetime(2024, 6, 8, 14, 0, tzinfo=timezone.utc)

    def test_reschedule_skips_finished_stays(self, manager, booking, settings):
        manager.on_booking_created(booking, settings, NOW)
        later = datetime(2024, 7, 1, 9, 0, tzinfo=timezone.utc)

        plans = manager.on_settings_changed(
            ReminderSettings(check_in_lead_hours=48), [booking], later, reschedule=True
        )
        assert plans == []

    def test_reschedule_includes_stay_ending_today(self, manager, booking, settings):
        manager.on_booking_created(booking, settings, NOW)
        check_out_day = datetime(2024, 6, 15, 9, 0, tzinfo=timezone.utc)

        plans = manager.on_settings_changed(settings, [booking], check_out_day, reschedule=True)
        assert [p.booking_id for p in plans] == [42]
