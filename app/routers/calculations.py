"""
Naija Tax Calculator - Calculation History Router

Endpoints for saving, listing and managing a user's past calculations.
The owner is identified by an opaque UUID in the path.
"""

from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import settings
from app.database import get_async_session
from app.schemas.calculation import (
    CalculationCreate,
    CalculationListResponse,
    CalculationNotesUpdate,
    CalculationResponse,
)
from app.services.calculation_service import CalculationService
from app.services.tax_calculators import CalculationType


router = APIRouter()


@router.post(
    "/{owner_id}/calculations",
    response_model=CalculationResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Run and save a calculation",
)
async def create_calculation(
    owner_id: UUID,
    request: CalculationCreate,
    db: AsyncSession = Depends(get_async_session),
):
    """Compute the calculation from its inputs and store inputs and results."""
    service = CalculationService(db)
    return await service.run_and_save(
        owner_id=owner_id,
        calculation_type=request.calculation_type,
        inputs=request.inputs,
        title=request.title,
        notes=request.notes,
        is_saved=request.is_saved,
    )


@router.get(
    "/{owner_id}/calculations",
    response_model=CalculationListResponse,
    summary="List calculation history",
)
async def list_calculations(
    owner_id: UUID,
    calculation_type: Optional[CalculationType] = Query(None, description="Filter by type"),
    saved_only: bool = Query(False),
    limit: int = Query(settings.history_page_size, ge=1, le=settings.history_max_page_size),
    offset: int = Query(0, ge=0),
    db: AsyncSession = Depends(get_async_session),
):
    service = CalculationService(db)
    items, total = await service.get_history(
        owner_id,
        calculation_type=calculation_type,
        saved_only=saved_only,
        limit=limit,
        offset=offset,
    )
    return CalculationListResponse(
        items=[CalculationResponse.model_validate(item) for item in items],
        total=total,
        limit=limit,
        offset=offset,
    )


@router.get(
    "/{owner_id}/calculations/{calculation_id}",
    response_model=CalculationResponse,
    summary="Get a calculation",
)
async def get_calculation(
    owner_id: UUID,
    calculation_id: UUID,
    db: AsyncSession = Depends(get_async_session),
):
    return await CalculationService(db).get_calculation(owner_id, calculation_id)


@router.patch(
    "/{owner_id}/calculations/{calculation_id}/notes",
    response_model=CalculationResponse,
    summary="Update calculation notes",
)
async def update_calculation_notes(
    owner_id: UUID,
    calculation_id: UUID,
    request: CalculationNotesUpdate,
    db: AsyncSession = Depends(get_async_session),
):
    return await CalculationService(db).update_notes(owner_id, calculation_id, request.notes)


@router.patch(
    "/{owner_id}/calculations/{calculation_id}/saved",
    response_model=CalculationResponse,
    summary="Toggle the saved flag",
)
async def toggle_calculation_saved(
    owner_id: UUID,
    calculation_id: UUID,
    db: AsyncSession = Depends(get_async_session),
):
    return await CalculationService(db).toggle_saved(owner_id, calculation_id)


@router.post(
    "/{owner_id}/calculations/{calculation_id}/recompute",
    response_model=CalculationResponse,
    summary="Recompute with current rates",
)
async def recompute_calculation(
    owner_id: UUID,
    calculation_id: UUID,
    db: AsyncSession = Depends(get_async_session),
):
    """Re-run a stored calculation from its saved inputs."""
    return await CalculationService(db).recompute(owner_id, calculation_id)


@router.delete(
    "/{owner_id}/calculations/{calculation_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete a calculation",
)
async def delete_calculation(
    owner_id: UUID,
    calculation_id: UUID,
    db: AsyncSession = Depends(get_async_session),
):
    await CalculationService(db).delete_calculation(owner_id, calculation_id)
