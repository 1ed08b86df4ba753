"""Primary key generation."""

import uuid


def generate_id(prefix: str) -> str:
    """
    Generate a collision-resistant id prefixed by its entity type.

    Example: ``generate_id("client")`` -> ``"client_9b1d...e4"``
    """
    return f"{prefix}_{uuid.uuid4().hex}"
