"""Domain package — all ORM models are imported here so Alembic autogenerate detects them.

Folder intent:
  property.py     — Properties (jurisdiction code + classification drive the rules)
  certificate.py  — Recorded compliance certificates (soft-deleted when superseded)
  audit.py        — Immutable audit trail (never updated or deleted)
  mixins.py       — Shared TimestampMixin, SoftDeleteMixin, TenantMixin
"""

from propcomply.domain.audit import AuditTrail
from propcomply.domain.certificate import ComplianceCertificate
from propcomply.domain.property import Property

__all__ = [
    "AuditTrail",
    "ComplianceCertificate",
    "Property",
]
