"""All SQLAlchemy models — import here so Base.metadata sees them."""

from insighted.models.project import ProjectRecord

__all__ = ["ProjectRecord"]
