"""
Naija Tax Calculator - Routers Package

FastAPI route handlers.

Routers:
- tax: Stateless PIT, CIT, CGT and VAT calculators plus reference data
- calculations: Per-user calculation history
"""

from app.routers import tax, calculations

__all__ = ["tax", "calculations"]
