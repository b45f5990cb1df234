"""SQLAlchemy ORM model for Properties.

Properties are owned by the property directory; the compliance side only
reads a property's jurisdiction code and classification.
"""

from __future__ import annotations

import uuid
from typing import List, Optional

from sqlalchemy import String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from propcomply.db.base import Base
from propcomply.domain.mixins import SoftDeleteMixin, TenantMixin, TimestampMixin


class Property(Base, TenantMixin, TimestampMixin, SoftDeleteMixin):
    __tablename__ = "properties"

    id: Mapped[str] = mapped_column(
        String(36), primary_key=True, default=lambda: str(uuid.uuid4())
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    address_line1: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    address_city: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    postal_code: Mapped[Optional[str]] = mapped_column(String(20), nullable=True)

    # Catalog key, e.g. "UK", "GR", "US", "SA"
    jurisdiction_code: Mapped[str] = mapped_column(String(8), nullable=False, index=True)
    # "standard" | "multi_occupancy"
    classification: Mapped[str] = mapped_column(
        String(30), default="standard", nullable=False
    )
    notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    certificates: Mapped[List["ComplianceCertificate"]] = relationship(
        back_populates="parent_property", lazy="noload"
    )
