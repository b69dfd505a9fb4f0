"""
Custom Exceptions - Company Scoring Platform
app/core/exceptions.py

Custom exception classes for store, validation and run lifecycle operations.
"""

from typing import List, Optional


class RepositoryException(Exception):
    """Base exception for repository operations."""

    pass


class EntityNotFoundException(RepositoryException):
    """Entity not found in the store."""

    def __init__(self, entity_type: str, entity_id: str):
        self.entity_type = entity_type
        self.entity_id = entity_id
        super().__init__(f"{entity_type} with ID {entity_id} not found")


class DuplicateEntityException(RepositoryException):
    """Duplicate entity violation."""

    def __init__(self, message: str = "Entity already exists"):
        self.message = message
        super().__init__(message)


class ConfigValidationException(RepositoryException):
    """Scoring config rejected at create/update time."""

    def __init__(self, violations: List[str]):
        self.violations = violations
        super().__init__("Invalid scoring config: " + "; ".join(violations))


class InvalidCompanyReportException(RepositoryException):
    """Worker report does not fit the run's rubric."""

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class InvalidRunTransitionException(RepositoryException):
    """Run is in a state that does not accept the requested change."""

    def __init__(self, run_id: str, status: str, action: str):
        self.run_id = run_id
        self.status = status
        self.action = action
        super().__init__(f"Run {run_id} is {status}; cannot {action}")


class RadarSelectionFullException(RepositoryException):
    """Radar comparison already holds the maximum number of companies."""

    def __init__(self, limit: int, company_id: Optional[str] = None):
        self.limit = limit
        self.company_id = company_id
        super().__init__(f"Radar comparison is limited to {limit} companies")


class IntakeException(RepositoryException):
    """Uploaded company list could not be read."""

    def __init__(self, message: str = "Upload could not be parsed"):
        self.message = message
        super().__init__(message)
