"""SQLAlchemy declarative base for all models."""

import sqlalchemy as sa
from sqlalchemy.orm import DeclarativeBase

# Constraint naming:
# - FKs: {table}_{column}_fkey
# - PKs: {table}_pkey
# - Unique indexes are handled explicitly in __table_args__
_naming_convention = {
    "fk": "%(table_name)s_%(column_0_name)s_fkey",
    "pk": "%(table_name)s_pkey",
}


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy models.

    - Table names: PascalCase (__tablename__ = "Project")
    - Column names: camelCase (mapped_column("schoolId", ...))
    """

    metadata = sa.MetaData(naming_convention=_naming_convention)
