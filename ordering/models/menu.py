"""
Ordering Service — Menu catalog model

[CONFIG DATA] — menu items are read-mostly; created and deleted from the admin
surface, images bulk-assigned by scripts/update_menu_images.py.
"""
import uuid
from datetime import datetime
from decimal import Decimal

from sqlalchemy import DateTime, Float, Numeric, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from ordering.db.database import Base
from ordering.models.order import utcnow


class MenuItem(Base):
    __tablename__ = "menu_items"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    name: Mapped[str] = mapped_column(String(255), index=True, nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    price: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    category: Mapped[str] = mapped_column(String(100), index=True, nullable=False)
    image: Mapped[str] = mapped_column(String(255), nullable=False)
    rating: Mapped[float] = mapped_column(Float, nullable=False, default=4.5)
    prep_time: Mapped[str] = mapped_column(String(64), nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False
    )
