"""Identifier generation for parsed entities."""
import uuid
from typing import Callable, Optional

IdGenerator = Callable[[], str]


def generate_id() -> str:
    """Generate a UUID4 string for use as a primary key"""
    return str(uuid.uuid4())


def create_short_id(full_id: Optional[str] = None) -> str:
    """First 8 characters of an ID, for log lines and display"""
    return (full_id or generate_id())[:8]
