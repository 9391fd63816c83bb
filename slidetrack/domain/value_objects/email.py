"""
Viewer email normalisation.
"""

from typing import Optional


def normalize_email(email: Optional[str]) -> str:
    """Lowercase and trim an email; the result is the viewer identity key."""
    return (email or "").strip().lower()
