"""Application exceptions. Safe to import from the compliance core (no FastAPI)."""

from datetime import date


class AppException(Exception):
    """Base application exception."""

    def __init__(self, message: str, status_code: int = 500, code: str = "INTERNAL_ERROR"):
        self.message = message
        self.status_code = status_code
        self.code = code
        super().__init__(message)

class NotFoundError(AppException):
    def __init__(self, entity: str, entity_id: str | None = None):
        msg = f"{entity} not found" if not entity_id else f"{entity} '{entity_id}' not found"
        super().__init__(msg, status_code=404, code="NOT_FOUND")

class ValidationError(AppException):
    def __init__(self, message: str, code: str = "VALIDATION_ERROR"):
        super().__init__(message, status_code=422, code=code)

class InvalidDateRangeError(ValidationError):
    """Raised when a certificate's expiry date precedes its issue date."""

    def __init__(self, issue_date: date, expiry_date: date):
        self.issue_date = issue_date
        self.expiry_date = expiry_date
        super().__init__(
            f"Expiry date {expiry_date.isoformat()} is before issue date {issue_date.isoformat()}",
            code="INVALID_DATE_RANGE",
        )

class OrphanCertificateError(ValidationError):
    """Raised when a certificate's requirement does not apply to its property."""

    def __init__(self, requirement_id: str, jurisdiction_code: str, classification: str):
        self.requirement_id = requirement_id
        self.jurisdiction_code = jurisdiction_code
        self.classification = classification
        super().__init__(
            f"Requirement '{requirement_id}' does not apply to "
            f"{jurisdiction_code} {classification} properties",
            code="ORPHAN_CERTIFICATE",
        )
