"""SQLAlchemy ORM model for recorded compliance certificates."""

from __future__ import annotations

import uuid
from datetime import date
from typing import Optional

from sqlalchemy import Date, ForeignKey, Index, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from propcomply.db.base import Base
from propcomply.domain.mixins import SoftDeleteMixin, TenantMixin, TimestampMixin


class ComplianceCertificate(Base, TenantMixin, TimestampMixin, SoftDeleteMixin):
    """One certificate submission.

    At most one non-deleted row exists per (property_id, requirement_id).
    Superseded and removed rows are soft-deleted and kept as history.
    """

    __tablename__ = "compliance_certificates"
    __table_args__ = (
        Index("ix_certificates_property_requirement", "property_id", "requirement_id"),
    )

    id: Mapped[str] = mapped_column(
        String(36), primary_key=True, default=lambda: str(uuid.uuid4())
    )
    property_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("properties.id", ondelete="CASCADE"), nullable=False, index=True
    )
    requirement_id: Mapped[str] = mapped_column(String(100), nullable=False)
    # Jurisdiction the requirement resolved against when recorded
    jurisdiction_code: Mapped[Optional[str]] = mapped_column(String(8), nullable=True)

    issue_date: Mapped[date] = mapped_column(Date, nullable=False)
    expiry_date: Mapped[Optional[date]] = mapped_column(Date, index=True, nullable=True)
    certificate_number: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    contractor: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    superseded_by_id: Mapped[Optional[str]] = mapped_column(String(36), nullable=True)

    parent_property: Mapped["Property"] = relationship(back_populates="certificates", lazy="noload")
