"""
Scrap land models.

A land purchase is bought with an estimated scrap tonnage; every scrap
sale from it reduces ``remaining_tonnage``. Loose equipment found on the
land is tracked and sold separately.
"""

from sqlalchemy import Column, Integer, String, Float, Date, Text, ForeignKey
from .base import Base, TimestampMixin

LAND_STATUSES = ("active", "partially_cleared", "completed")
EQUIPMENT_STATUSES = ("available", "in_warehouse", "sold", "sold_as_is", "scrapped")


class LandPurchase(TimestampMixin, Base):
    __tablename__ = "land_purchases"

    id = Column(Integer, primary_key=True, index=True)
    company_id = Column(Integer, ForeignKey("companies.id", ondelete="SET NULL"), index=True)
    land_name = Column(String(255), nullable=False)
    location = Column(String(255))
    purchase_price = Column(Float)
    purchase_date = Column(Date)
    paid_by_owner_id = Column(Integer, ForeignKey("owners.id", ondelete="SET NULL"), index=True)

    # Tonnage, all in tons
    estimated_tonnage = Column(Float)
    remaining_tonnage = Column(Float)
    scrap_tonnage_sold = Column(Float, nullable=False, default=0.0)

    status = Column(String(30), nullable=False, default="active")
    notes = Column(Text)

    def __init__(self, **kwargs):
        # A freshly bought land has sold nothing yet
        kwargs.setdefault('remaining_tonnage', kwargs.get('estimated_tonnage'))
        kwargs.setdefault('scrap_tonnage_sold', 0.0)
        kwargs.setdefault('status', 'active')
        super().__init__(**kwargs)

    @property
    def extracted_tonnage(self) -> float:
        return (self.estimated_tonnage or 0.0) - (self.remaining_tonnage or 0.0)

    @property
    def extraction_percent(self) -> float:
        if not self.estimated_tonnage:
            return 0.0
        return round(self.extracted_tonnage / self.estimated_tonnage * 100, 1)

    def __repr__(self):
        return f"<LandPurchase(id={self.id}, name='{self.land_name}', remaining={self.remaining_tonnage})>"


class LandScrapSale(TimestampMixin, Base):
    __tablename__ = "land_scrap_sales"

    id = Column(Integer, primary_key=True, index=True)
    land_id = Column(Integer, ForeignKey("land_purchases.id", ondelete="CASCADE"), nullable=False, index=True)
    company_id = Column(Integer, ForeignKey("companies.id", ondelete="SET NULL"))
    sale_date = Column(Date, nullable=False)
    buyer_name = Column(String(255))
    quantity_tons = Column(Float, nullable=False, default=0.0)
    price_per_ton = Column(Float, nullable=False, default=0.0)
    total_amount = Column(Float, nullable=False, default=0.0)
    notes = Column(Text)


class LandEquipment(TimestampMixin, Base):
    __tablename__ = "land_equipment"

    id = Column(Integer, primary_key=True, index=True)
    land_id = Column(Integer, ForeignKey("land_purchases.id", ondelete="CASCADE"), nullable=False, index=True)
    equipment_name = Column(String(255), nullable=False)
    quantity = Column(Integer, nullable=False, default=1)
    estimated_value = Column(Float)
    sale_price = Column(Float)
    status = Column(String(20), nullable=False, default="available")
    notes = Column(Text)

    @property
    def value(self) -> float:
        return self.sale_price or self.estimated_value or 0.0
