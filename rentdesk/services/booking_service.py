import asyncio
import logging
from contextlib import asynccontextmanager
from datetime import datetime
from typing import List, Optional

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from rentdesk.core.config import settings
from rentdesk.core.errors import NotFoundError
from rentdesk.domain.availability import AvailabilityResult, Conflict, check_availability
from rentdesk.domain.interval import Interval
from rentdesk.domain.reminders import ReminderSettings
from rentdesk.models import Booking, Housekeeping, Invoice, Property
from rentdesk.schemas.booking import BookingCreate, BookingUpdate
from rentdesk.services.notification_service import (
    NotificationService,
    reminder_lifecycle,
    utc_now,
)
from rentdesk.services.settings_service import SettingsService

logger = logging.getLogger(__name__)


class BookingService:
    """
    Booking writes for a property owner.

    Check-then-write runs under a per-property lock so two overlapping
    submissions for the same property cannot both pass the availability
    check. The lock is process-local; deployments with several workers need
    an exclusion constraint in the database as well.
    """

    _property_locks: dict[int, asyncio.Lock] = {}
    _lock_users: dict[int, int] = {}

    @classmethod
    @asynccontextmanager
    async def property_lock(cls, property_id: int):
        """Hold the property's lock; it is dropped once nobody holds or awaits it."""
        lock = cls._property_locks.get(property_id)
        if lock is None:
            lock = cls._property_locks[property_id] = asyncio.Lock()
        cls._lock_users[property_id] = cls._lock_users.get(property_id, 0) + 1
        try:
            async with lock:
                yield
        finally:
            cls._lock_users[property_id] -= 1
            if not cls._lock_users[property_id]:
                del cls._lock_users[property_id]
                del cls._property_locks[property_id]

    @staticmethod
    async def get_owned_property(
        db: AsyncSession, owner_id: int, property_id: int
    ) -> Property:
        result = await db.execute(
            select(Property).where(Property.id == property_id, Property.owner_id == owner_id)
        )
        rental = result.scalar_one_or_none()
        if not rental:
            raise NotFoundError("Property", property_id)
        return rental

    @staticmethod
    async def get_bookings_for_property(db: AsyncSession, property_id: int) -> List[Booking]:
        result = await db.execute(
            select(Booking)
            .where(Booking.property_id == property_id)
            .order_by(Booking.check_in, Booking.id)
        )
        return list(result.scalars().all())

    @staticmethod
    async def get_bookings_for_owner(db: AsyncSession, owner_id: int) -> List[Booking]:
        result = await db.execute(
            select(Booking)
            .join(Property, Booking.property_id == Property.id)
            .where(Property.owner_id == owner_id)
            .order_by(Booking.check_in, Booking.id)
        )
        return list(result.scalars().all())

    @staticmethod
    async def get_booking(db: AsyncSession, owner_id: int, booking_id: int) -> Booking:
        result = await db.execute(
            select(Booking)
            .join(Property, Booking.property_id == Property.id)
            .where(Booking.id == booking_id, Property.owner_id == owner_id)
        )
        booking = result.scalar_one_or_none()
        if not booking:
            raise NotFoundError("Booking", booking_id)
        return booking

    @classmethod
    async def check_availability(
        cls,
        db: AsyncSession,
        property_id: int,
        candidate: Interval,
        exclude_booking_id: Optional[int] = None,
    ) -> AvailabilityResult:
        bookings = await cls.get_bookings_for_property(db, property_id)
        return check_availability(
            bookings,
            candidate,
            property_id=property_id,
            exclude_booking_id=exclude_booking_id,
        )

    @classmethod
    async def create_booking(
        cls,
        db: AsyncSession,
        owner_id: int,
        data: BookingCreate,
        now: Optional[datetime] = None,
    ) -> Booking | Conflict:
        """
        Create a booking, its housekeeping entry and its reminders.

        Returns the ``Conflict`` instead of a booking when the dates are taken.
        Raises ``InvalidInterval`` for check-out before check-in.
        """
        rental = await cls.get_owned_property(db, owner_id, data.property_id)
        candidate = Interval(data.check_in, data.check_out)

        async with cls.property_lock(rental.id):
            result = await cls.check_availability(db, rental.id, candidate)
            if isinstance(result, Conflict):
                logger.warning(
                    f"Cannot create booking for property {rental.id}: {candidate} "
                    f"overlaps booking #{result.with_booking.id}"
                )
                return result

            booking = Booking(**data.model_dump())
            booking.check_in_time = booking.check_in_time or settings.default_check_in_time
            booking.check_out_time = booking.check_out_time or settings.default_check_out_time
            try:
                db.add(booking)
                await db.flush()

                db.add(Housekeeping(property_id=rental.id, booking_id=booking.id, is_clean=False))

                reminder_settings = await SettingsService.get_reminder_settings(db, owner_id)
                plan = reminder_lifecycle.on_booking_created(
                    booking.snapshot(rental.name), reminder_settings, now or utc_now()
                )
                await NotificationService.apply_plan(db, owner_id, plan)

                await db.commit()
                await db.refresh(booking)
            except Exception as e:
                await db.rollback()
                if booking.id is not None:
                    reminder_lifecycle.forget(booking.id)
                logger.error(f"Error creating booking: {e}", exc_info=True)
                raise

        logger.info(
            f"Booking #{booking.id} created: {booking.customer_name} "
            f"({booking.check_in} - {booking.check_out})"
        )
        return booking

    @classmethod
    async def update_booking(
        cls,
        db: AsyncSession,
        owner_id: int,
        booking_id: int,
        data: BookingUpdate,
        now: Optional[datetime] = None,
    ) -> Booking | Conflict:
        """
        Apply a partial update. Dates are re-validated against the other
        bookings of the (possibly new) property, excluding this booking.
        Reminders are recomputed when a field they depend on changed.
        """
        booking = await cls.get_booking(db, owner_id, booking_id)
        update_data = data.model_dump(exclude_unset=True)

        changed = {
            key for key, value in update_data.items() if getattr(booking, key) != value
        }
        if not changed:
            return booking

        target_property_id = update_data.get("property_id", booking.property_id)
        rental = await cls.get_owned_property(db, owner_id, target_property_id)
        candidate = Interval(
            update_data.get("check_in", booking.check_in),
            update_data.get("check_out", booking.check_out),
        )

        total = update_data.get("total_amount", booking.total_amount)
        advance = update_data.get("advance_payment", booking.advance_payment)
        if total is not None and advance is not None and advance > total:
            raise ValueError("Advance payment cannot be greater than the total amount")

        async with cls.property_lock(rental.id):
            result = await cls.check_availability(
                db, rental.id, candidate, exclude_booking_id=booking.id
            )
            if isinstance(result, Conflict):
                logger.warning(
                    f"Cannot move booking #{booking.id} to {candidate}: "
                    f"overlaps booking #{result.with_booking.id}"
                )
                return result

            try:
                for key in changed:
                    setattr(booking, key, update_data[key])

                if "property_id" in changed:
                    housekeeping = await db.execute(
                        select(Housekeeping).where(Housekeeping.booking_id == booking.id)
                    )
                    for entry in housekeeping.scalars().all():
                        entry.property_id = rental.id

                reminder_settings = await SettingsService.get_reminder_settings(db, owner_id)
                plan = reminder_lifecycle.on_booking_updated(
                    booking.snapshot(rental.name),
                    reminder_settings,
                    now or utc_now(),
                    changed_fields=changed,
                )
                await NotificationService.apply_plan(db, owner_id, plan)

                await db.commit()
                await db.refresh(booking)
            except Exception as e:
                await db.rollback()
                reminder_lifecycle.forget(booking_id)
                logger.error(f"Error updating booking #{booking_id}: {e}", exc_info=True)
                raise

        logger.info(f"Booking #{booking.id} updated: {', '.join(sorted(changed))}")
        return booking

    @staticmethod
    async def purge_booking(db: AsyncSession, owner_id: int, booking: Booking) -> None:
        """Delete a booking and everything hanging off it. The caller commits."""
        await db.execute(delete(Housekeeping).where(Housekeeping.booking_id == booking.id))

        invoice = await db.execute(select(Invoice).where(Invoice.booking_id == booking.id))
        for row in invoice.scalars().all():
            await db.delete(row)

        plan = reminder_lifecycle.on_booking_deleted(booking.id)
        await NotificationService.apply_plan(db, owner_id, plan)

        await db.delete(booking)

    @classmethod
    async def delete_booking(cls, db: AsyncSession, owner_id: int, booking_id: int) -> None:
        """Remove a booking together with its housekeeping, invoice and reminders."""
        booking = await cls.get_booking(db, owner_id, booking_id)

        logger.info(
            f"Deleting booking #{booking_id}: {booking.customer_name} "
            f"({booking.check_in} - {booking.check_out})"
        )

        try:
            await cls.purge_booking(db, owner_id, booking)
            await db.commit()
        except Exception as e:
            await db.rollback()
            reminder_lifecycle.forget(booking_id)
            logger.error(f"Error deleting booking #{booking_id}: {e}", exc_info=True)
            raise

        logger.info(f"Booking #{booking_id} deleted")

    @classmethod
    async def change_reminder_settings(
        cls,
        db: AsyncSession,
        owner_id: int,
        new_settings: ReminderSettings,
        now: Optional[datetime] = None,
        reschedule: Optional[bool] = None,
    ) -> int:
        """
        Save the owner's reminder settings.

        Reminders of existing bookings are only recomputed when ``reschedule``
        (default: RESCHEDULE_REMINDERS_ON_SETTINGS_CHANGE) is set. Returns the
        number of bookings whose reminders were recomputed.
        """
        if reschedule is None:
            reschedule = settings.reschedule_reminders_on_settings_change

        try:
            await SettingsService.save_reminder_settings(db, owner_id, new_settings)

            snapshots = []
            if reschedule:
                names = {}
                for booking in await cls.get_bookings_for_owner(db, owner_id):
                    if booking.property_id not in names:
                        rental = await db.get(Property, booking.property_id)
                        names[booking.property_id] = rental.name
                    snapshots.append(booking.snapshot(names[booking.property_id]))

            plans = reminder_lifecycle.on_settings_changed(
                new_settings, snapshots, now or utc_now(), reschedule=reschedule
            )
            for plan in plans:
                await NotificationService.apply_plan(db, owner_id, plan)

            await db.commit()
        except Exception as e:
            await db.rollback()
            logger.error(f"Error saving reminder settings for user {owner_id}: {e}", exc_info=True)
            raise

        if plans:
            logger.info(f"Reminders of {len(plans)} bookings rescheduled for user {owner_id}")
        return len(plans)
