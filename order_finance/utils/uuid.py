"""UUID generation utilities."""

import uuid


def generate_uuid() -> str:
    """Generate an id for an order document imported without one.

    Returns:
        String representation of UUID4
    """
    return str(uuid.uuid4())
