import logging
from typing import List

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from rentdesk.core.errors import NotFoundError
from rentdesk.models import Property, User
from rentdesk.schemas.property import PropertyCreate, PropertyUpdate
from rentdesk.services.booking_service import BookingService
from rentdesk.services.notification_service import reminder_lifecycle

logger = logging.getLogger(__name__)


class PropertyService:
    @staticmethod
    async def get_all_properties(db: AsyncSession, owner_id: int) -> List[Property]:
        result = await db.execute(
            select(Property).where(Property.owner_id == owner_id).order_by(Property.id)
        )
        return list(result.scalars().all())

    @staticmethod
    async def get_property(db: AsyncSession, owner_id: int, property_id: int) -> Property:
        return await BookingService.get_owned_property(db, owner_id, property_id)

    @staticmethod
    async def create_property(db: AsyncSession, owner_id: int, property_in: PropertyCreate) -> Property:
        db_property = Property(owner_id=owner_id, **property_in.model_dump())
        db.add(db_property)
        await db.commit()
        await db.refresh(db_property)
        return db_property

    @staticmethod
    async def update_property(
        db: AsyncSession, owner_id: int, property_id: int, property_in: PropertyUpdate
    ) -> Property:
        rental = await BookingService.get_owned_property(db, owner_id, property_id)
        for key, value in property_in.model_dump(exclude_unset=True).items():
            setattr(rental, key, value)
        await db.commit()
        await db.refresh(rental)
        return rental

    @staticmethod
    async def delete_property(db: AsyncSession, owner_id: int, property_id: int) -> int:
        """
        Delete a property with all its bookings and what hangs off them
        (housekeeping, invoices, reminders). Returns the number of bookings removed.
        """
        rental = await BookingService.get_owned_property(db, owner_id, property_id)

        async with BookingService.property_lock(rental.id):
            bookings = await BookingService.get_bookings_for_property(db, rental.id)
            try:
                for booking in bookings:
                    await BookingService.purge_booking(db, owner_id, booking)
                await db.flush()
                await db.delete(rental)
                await db.commit()
            except Exception as e:
                await db.rollback()
                for booking in bookings:
                    reminder_lifecycle.forget(booking.id)
                logger.error(f"Error deleting property #{property_id}: {e}", exc_info=True)
                raise

        logger.info(f"Property #{property_id} deleted with {len(bookings)} bookings")
        return len(bookings)

    @staticmethod
    async def user_exists(db: AsyncSession, user_id: int) -> bool:
        return await db.get(User, user_id) is not None
