import logging
from datetime import datetime, timezone
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from rentdesk.core.errors import NotFoundError
from rentdesk.models import Booking, Housekeeping, Property

logger = logging.getLogger(__name__)


class HousekeepingService:
    """Turnover cleaning state, one entry per booking."""

    @staticmethod
    async def list_for_owner(
        db: AsyncSession, owner_id: int
    ) -> List[tuple[Housekeeping, Property, Booking]]:
        result = await db.execute(
            select(Housekeeping, Property, Booking)
            .join(Property, Housekeeping.property_id == Property.id)
            .join(Booking, Housekeeping.booking_id == Booking.id)
            .where(Property.owner_id == owner_id)
            .order_by(Housekeeping.created_at.desc(), Housekeeping.id.desc())
        )
        return [tuple(row) for row in result.all()]

    @staticmethod
    async def update_status(
        db: AsyncSession,
        owner_id: int,
        housekeeping_id: int,
        *,
        is_clean: Optional[bool] = None,
        verified_by_owner: Optional[bool] = None,
        acting_user_id: Optional[int] = None,
    ) -> Housekeeping:
        result = await db.execute(
            select(Housekeeping)
            .join(Property, Housekeeping.property_id == Property.id)
            .where(Housekeeping.id == housekeeping_id, Property.owner_id == owner_id)
        )
        entry = result.scalar_one_or_none()
        if not entry:
            raise NotFoundError("Housekeeping", housekeeping_id)

        if is_clean is not None:
            entry.is_clean = is_clean
            entry.cleaned_by = (acting_user_id or owner_id) if is_clean else None
            entry.cleaned_at = datetime.now(timezone.utc).replace(tzinfo=None) if is_clean else None

        if verified_by_owner is not None:
            entry.verified_by_owner = verified_by_owner

        await db.commit()
        logger.info(
            f"Housekeeping #{entry.id}: clean={entry.is_clean} verified={entry.verified_by_owner}"
        )
        return entry
