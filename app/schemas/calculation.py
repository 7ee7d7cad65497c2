"""
Naija Tax Calculator - Calculation History Schemas

Pydantic schemas for storing, listing and updating saved calculations.
Inputs are validated against the calculator request schema for their type
before they are stored.
"""

from datetime import datetime
from typing import Any, Dict, List, Optional, Type
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator

from app.schemas.tax import (
    CGTCalculateRequest,
    CITCalculateRequest,
    PITCalculateRequest,
    VATBusinessRequest,
    VATCalculateRequest,
    VATMultiItemRequest,
)
from app.services.tax_calculators import CalculationType


def input_schema_for(calculation_type: CalculationType, inputs: Dict[str, Any]) -> Type[BaseModel]:
    """Request schema matching a calculation type (VAT picks by input shape)."""
    if calculation_type == CalculationType.PIT:
        return PITCalculateRequest
    if calculation_type == CalculationType.CIT:
        return CITCalculateRequest
    if calculation_type == CalculationType.CGT:
        return CGTCalculateRequest
    if "items" in inputs:
        return VATMultiItemRequest
    if "output_vat" in inputs:
        return VATBusinessRequest
    return VATCalculateRequest


class CalculationCreate(BaseModel):
    """Request to run a calculation and store it in the history."""
    calculation_type: CalculationType
    inputs: Dict[str, Any]
    title: Optional[str] = Field(None, max_length=200)
    notes: Optional[str] = Field(None, max_length=2000)
    is_saved: bool = False

    @model_validator(mode="after")
    def normalize_inputs(self) -> "CalculationCreate":
        """Validate inputs for the calculation type and store them with defaults filled in."""
        schema = input_schema_for(self.calculation_type, self.inputs)
        try:
            validated = schema.model_validate(self.inputs)
        except ValidationError as exc:
            problems = "; ".join(
                f"{'.'.join(str(loc) for loc in error['loc'])}: {error['msg']}"
                for error in exc.errors()
            )
            raise ValueError(f"Invalid {self.calculation_type.value} inputs: {problems}")
        self.inputs = validated.model_dump(mode="json")
        return self


class CalculationNotesUpdate(BaseModel):
    notes: Optional[str] = Field(None, max_length=2000)


class CalculationResponse(BaseModel):
    """Stored calculation."""
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    owner_id: UUID
    calculation_type: CalculationType
    inputs: Dict[str, Any]
    results: Dict[str, Any]
    title: Optional[str] = None
    notes: Optional[str] = None
    is_saved: bool
    created_at: datetime
    updated_at: datetime


class CalculationListResponse(BaseModel):
    """Page of calculation history, newest first."""
    items: List[CalculationResponse]
    total: int
    limit: int
    offset: int
