"""
Identifiers for newly formed rooms
"""

import random
import uuid


def generate_room_id() -> str:
    return uuid.uuid4().hex


def generate_numeric_room_id() -> str:
    """
    Shorter, human friendly ids. Collisions are unlikely but possible, only
    use this where the store rejects duplicate room ids.
    """
    return str(random.randint(0, 10 ** 12))
