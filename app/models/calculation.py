"""
Naija Tax Calculator - Calculation History Model

One row per saved calculation: the inputs as submitted and the results as
computed at the time, so a record can be displayed or re-run later.
"""

import uuid
from typing import Any, Dict, Optional

from sqlalchemy import JSON, Boolean, String, Text, Uuid, Enum as SQLEnum
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column

from app.models.base import BaseModel
from app.services.tax_calculators import CalculationType


# JSONB on PostgreSQL, plain JSON elsewhere
JSONType = JSON().with_variant(JSONB(), "postgresql")


class CalculationRecord(BaseModel):
    """
    A stored tax calculation.

    owner_id is an opaque client identifier; there is no user table.
    """

    __tablename__ = "calculations"

    owner_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        nullable=False,
        index=True,
    )
    calculation_type: Mapped[CalculationType] = mapped_column(
        SQLEnum(CalculationType, name="calculation_type", values_callable=lambda e: [m.value for m in e]),
        nullable=False,
        index=True,
    )

    inputs: Mapped[Dict[str, Any]] = mapped_column(JSONType, nullable=False)
    results: Mapped[Dict[str, Any]] = mapped_column(JSONType, nullable=False)

    title: Mapped[Optional[str]] = mapped_column(String(200), nullable=True)
    notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    is_saved: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)

    def __repr__(self) -> str:
        return f"<CalculationRecord(id={self.id}, type={self.calculation_type.value})>"
