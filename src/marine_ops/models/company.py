"""
Company and user models.

Companies form a shallow tree: a ``parent`` holding company groups its
``marine`` and ``scrap`` subsidiaries. Business records carry the id of
the company they belong to.
"""

from sqlalchemy import Column, Integer, String, DateTime, Boolean, ForeignKey
from .base import Base, TimestampMixin

COMPANY_TYPES = ("parent", "marine", "scrap")


class Company(TimestampMixin, Base):
    __tablename__ = "companies"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False, unique=True)
    type = Column(String(20), nullable=False)  # parent, marine, scrap
    parent_id = Column(Integer, ForeignKey("companies.id", ondelete="RESTRICT"), index=True)

    def __repr__(self):
        return f"<Company(id={self.id}, name='{self.name}', type='{self.type}')>"


class User(TimestampMixin, Base):
    """Dashboard login. ``role`` keys into the static permission table."""
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String(255), nullable=False, unique=True, index=True)
    full_name = Column(String(255), nullable=False)
    password_hash = Column(String(255), nullable=False)
    role = Column(String(50), nullable=False, default="storekeeper")
    phone = Column(String(50))
    is_active = Column(Boolean, nullable=False, default=True)
    last_login = Column(DateTime(timezone=True))

    def __repr__(self):
        return f"<User(id={self.id}, email='{self.email}', role='{self.role}')>"
