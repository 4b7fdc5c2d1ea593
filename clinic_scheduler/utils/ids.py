"""Identifier generation for slots, appointments and requests."""

from cuid2 import cuid_wrapper

cuid = cuid_wrapper()


def generate_id() -> str:
    """Generate a new CUID-based identifier."""
    return cuid()
