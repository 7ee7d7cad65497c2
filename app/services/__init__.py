"""
Naija Tax Calculator - Services Package

Business logic services:
- tax_calculators: pure PIT, CIT, CGT and VAT engines
- calculation_service: calculation history persistence
"""
