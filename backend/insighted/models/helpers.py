"""Shared model helpers."""

from cuid2 import Cuid

_cuid_generator = Cuid()


def generate_cuid() -> str:
    """Generate a CUID2 ID for a newly created project."""
    return _cuid_generator.generate()
