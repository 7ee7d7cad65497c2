"""
Naija Tax Calculator - Schemas Package

Pydantic schemas for request/response validation.
"""
