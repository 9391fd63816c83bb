"""
Declarative base shared by all tracking models.
"""

from sqlalchemy.orm import declarative_base

Base = declarative_base()
