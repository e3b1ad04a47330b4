#app/models/base.py
"""
Общий declarative Base для ORM-моделей Task и User.

    from app.models.base import Base
"""

from sqlalchemy.orm import declarative_base

Base = declarative_base()
