"""
Naija Tax Calculator - Calculation History Service

Business logic for storing and managing a user's past calculations.
Records are scoped to an owner_id; a record owned by someone else is
reported as not found.
"""

import logging
import uuid
from typing import Any, Dict, List, Optional, Tuple

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import settings
from app.models.calculation import CalculationRecord
from app.services.tax_calculators import CalculationType, run_calculation
from app.utils.error_handling import CalculationNotFoundException, ValidationException


logger = logging.getLogger(__name__)


class CalculationService:
    """Service for calculation history operations."""

    def __init__(self, db: AsyncSession):
        self.db = db

    @staticmethod
    def compute(calculation_type: CalculationType, inputs: Dict[str, Any]) -> Dict[str, Any]:
        """Run the calculator for a stored input mapping."""
        try:
            return run_calculation(calculation_type, inputs)
        except (KeyError, ValueError, TypeError) as e:
            raise ValidationException(
                f"Invalid inputs for {CalculationType(calculation_type).value.upper()} calculation",
                field="inputs",
                details={"error": str(e)},
            )

    async def save_calculation(
        self,
        owner_id: uuid.UUID,
        calculation_type: CalculationType,
        inputs: Dict[str, Any],
        results: Dict[str, Any],
        title: Optional[str] = None,
        notes: Optional[str] = None,
        is_saved: bool = False,
    ) -> CalculationRecord:
        """Store an already computed calculation."""
        record = CalculationRecord(
            owner_id=owner_id,
            calculation_type=CalculationType(calculation_type),
            inputs=inputs,
            results=results,
            title=title,
            notes=notes,
            is_saved=is_saved,
        )

        self.db.add(record)
        await self.db.commit()
        await self.db.refresh(record)

        logger.info(
            "Saved %s calculation %s for owner %s",
            record.calculation_type.value, record.id, owner_id,
        )
        return record

    async def run_and_save(
        self,
        owner_id: uuid.UUID,
        calculation_type: CalculationType,
        inputs: Dict[str, Any],
        title: Optional[str] = None,
        notes: Optional[str] = None,
        is_saved: bool = False,
    ) -> CalculationRecord:
        """Compute a calculation from its inputs and store both."""
        results = self.compute(calculation_type, inputs)
        return await self.save_calculation(
            owner_id, calculation_type, inputs, results,
            title=title, notes=notes, is_saved=is_saved,
        )

    async def get_history(
        self,
        owner_id: uuid.UUID,
        calculation_type: Optional[CalculationType] = None,
        saved_only: bool = False,
        limit: Optional[int] = None,
        offset: int = 0,
    ) -> Tuple[List[CalculationRecord], int]:
        """
        Get an owner's calculations, newest first.

        Returns:
            Tuple of (page of records, total matching count)
        """
        if limit is None:
            limit = settings.history_page_size
        limit = max(1, min(limit, settings.history_max_page_size))

        filters = [CalculationRecord.owner_id == owner_id]
        if calculation_type:
            filters.append(CalculationRecord.calculation_type == CalculationType(calculation_type))
        if saved_only:
            filters.append(CalculationRecord.is_saved.is_(True))

        total = await self.db.scalar(
            select(func.count()).select_from(CalculationRecord).where(*filters)
        )

        query = (
            select(CalculationRecord)
            .where(*filters)
            .order_by(CalculationRecord.created_at.desc())
            .limit(limit)
            .offset(offset)
        )
        result = await self.db.execute(query)
        return list(result.scalars().all()), total or 0

    async def get_calculation(
        self,
        owner_id: uuid.UUID,
        calculation_id: uuid.UUID,
    ) -> CalculationRecord:
        """Get one calculation; raises CalculationNotFoundException."""
        result = await self.db.execute(
            select(CalculationRecord).where(
                CalculationRecord.id == calculation_id,
                CalculationRecord.owner_id == owner_id,
            )
        )
        record = result.scalar_one_or_none()
        if record is None:
            raise CalculationNotFoundException(calculation_id)
        return record

    async def delete_calculation(self, owner_id: uuid.UUID, calculation_id: uuid.UUID) -> None:
        record = await self.get_calculation(owner_id, calculation_id)
        await self.db.delete(record)
        await self.db.commit()
        logger.info("Deleted calculation %s for owner %s", calculation_id, owner_id)

    async def update_notes(
        self,
        owner_id: uuid.UUID,
        calculation_id: uuid.UUID,
        notes: Optional[str],
    ) -> CalculationRecord:
        """Replace the notes on a calculation (None clears them)."""
        record = await self.get_calculation(owner_id, calculation_id)
        record.notes = notes

        await self.db.commit()
        await self.db.refresh(record)
        return record

    async def toggle_saved(self, owner_id: uuid.UUID, calculation_id: uuid.UUID) -> CalculationRecord:
        """Flip the saved flag."""
        record = await self.get_calculation(owner_id, calculation_id)
        record.is_saved = not record.is_saved

        await self.db.commit()
        await self.db.refresh(record)
        return record

    async def recompute(self, owner_id: uuid.UUID, calculation_id: uuid.UUID) -> CalculationRecord:
        """Re-run a stored calculation with the current rate tables."""
        record = await self.get_calculation(owner_id, calculation_id)
        record.results = self.compute(record.calculation_type, record.inputs)

        await self.db.commit()
        await self.db.refresh(record)

        logger.info("Recomputed %s calculation %s", record.calculation_type.value, record.id)
        return record
