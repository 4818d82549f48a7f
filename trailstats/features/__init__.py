"""
Feature modules for Trailstats.

Each feature is a self-contained module with:
- schemas.py - Pydantic schemas
- service.py - Business logic
- models.py / repository.py - Storage (optional)
"""
