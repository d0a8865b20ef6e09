"""
Vessel models.

A vessel is bought (optionally paid for by one owner), may be rented out,
overhauled, or broken up for scrap; equipment stripped from it is sold
separately.
"""

from sqlalchemy import Column, Integer, String, Float, Date, Text, ForeignKey
from .base import Base, TimestampMixin

VESSEL_STATUSES = ("active", "scrapping", "scrapped", "under_overhaul", "sold")


class Vessel(TimestampMixin, Base):
    __tablename__ = "vessels"

    id = Column(Integer, primary_key=True, index=True)
    company_id = Column(Integer, ForeignKey("companies.id", ondelete="SET NULL"), index=True)
    name = Column(String(255), nullable=False, index=True)
    vessel_type = Column(String(100))

    # Purchase
    purchase_price = Column(Float)
    purchase_date = Column(Date)
    paid_by_owner_id = Column(Integer, ForeignKey("owners.id", ondelete="SET NULL"), index=True)

    status = Column(String(30), nullable=False, default="active")
    current_location = Column(String(255))
    tonnage = Column(Float)
    year_built = Column(Integer)
    classification_status = Column(String(100))
    notes = Column(Text)

    def __repr__(self):
        return f"<Vessel(id={self.id}, name='{self.name}', status='{self.status}')>"


class VesselScrapSale(TimestampMixin, Base):
    __tablename__ = "vessel_scrap_sales"

    id = Column(Integer, primary_key=True, index=True)
    vessel_id = Column(Integer, ForeignKey("vessels.id", ondelete="CASCADE"), nullable=False, index=True)
    sale_date = Column(Date, nullable=False)
    buyer_name = Column(String(255))
    quantity_tons = Column(Float, nullable=False, default=0.0)
    price_per_ton = Column(Float, nullable=False, default=0.0)
    total_amount = Column(Float, nullable=False, default=0.0)
    notes = Column(Text)


class VesselEquipmentSale(TimestampMixin, Base):
    __tablename__ = "vessel_equipment_sales"

    id = Column(Integer, primary_key=True, index=True)
    vessel_id = Column(Integer, ForeignKey("vessels.id", ondelete="CASCADE"), nullable=False, index=True)
    equipment_name = Column(String(255), nullable=False)
    sale_date = Column(Date, nullable=False)
    buyer_name = Column(String(255))
    sale_price = Column(Float, nullable=False, default=0.0)
    notes = Column(Text)


class VesselRental(TimestampMixin, Base):
    __tablename__ = "vessel_rentals"

    id = Column(Integer, primary_key=True, index=True)
    vessel_id = Column(Integer, ForeignKey("vessels.id", ondelete="CASCADE"), nullable=False, index=True)
    customer_name = Column(String(255), nullable=False)
    start_date = Column(Date, nullable=False)
    end_date = Column(Date)
    total_amount = Column(Float, nullable=False, default=0.0)
    status = Column(String(20), nullable=False, default="pending")  # pending, active, completed, cancelled
    payment_status = Column(String(20), nullable=False, default="unpaid")  # unpaid, partial, paid
    notes = Column(Text)
