"""
Core Package - Company Scoring Platform
app/core/__init__.py

Core infrastructure: dependencies, exceptions, error translation, logging.
Only the exceptions are re-exported here; the scoring engine imports them,
and dependency providers import the engine.
"""

from app.core.exceptions import (
    ConfigValidationException,
    DuplicateEntityException,
    EntityNotFoundException,
    IntakeException,
    InvalidCompanyReportException,
    InvalidRunTransitionException,
    RadarSelectionFullException,
    RepositoryException,
)

__all__ = [
    "ConfigValidationException",
    "DuplicateEntityException",
    "EntityNotFoundException",
    "IntakeException",
    "InvalidCompanyReportException",
    "InvalidRunTransitionException",
    "RadarSelectionFullException",
    "RepositoryException",
]
