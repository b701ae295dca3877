"""
Feature modules for hikeroute.

Each feature is a self-contained module with:
- models.py - SQLAlchemy models
- schemas.py - Pydantic schemas
- service.py - Orchestration (optional)
- repository.py - Data access (optional)
"""
