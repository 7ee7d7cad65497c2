"""
Naija Tax Calculator - SQLAlchemy Models Package

This package contains all database models for the application.
"""

from app.models.base import BaseModel, TimestampMixin
from app.models.calculation import CalculationRecord


__all__ = [
    "BaseModel",
    "TimestampMixin",
    "CalculationRecord",
]
