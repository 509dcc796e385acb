"""Database models."""

from certengine.models.location import Location
from certengine.models.employee import Employee
from certengine.models.rating import Rating
from certengine.models.certification import CertificationAudit

__all__ = ["Location", "Employee", "Rating", "CertificationAudit"]
