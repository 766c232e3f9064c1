# rentalcore/errors.py
from flask import jsonify


class RentalError(Exception):
    """Base class for failures surfaced to callers of the tenancy services."""

    status_code = 500
    code = "rental_error"

    def __init__(self, message=None):
        self.message = message or self.code
        super().__init__(self.message)

    def to_dict(self):
        return {"success": False, "error": self.code, "message": self.message}


class ValidationError(RentalError):
    status_code = 400
    code = "validation_error"


class Forbidden(RentalError):
    status_code = 403
    code = "forbidden"


class NotFound(RentalError):
    status_code = 404
    code = "not_found"


class Conflict(RentalError):
    status_code = 409
    code = "conflict"


class ApplicationNotPending(Conflict):
    code = "application_not_pending"

    def __init__(self, application_id, status):
        super().__init__(f"Application {application_id} has already been {status}")
        self.application_id = application_id
        self.status = status


class UnitUnavailable(Conflict):
    """The unit cannot be granted; `reason` is the availability reason variant."""

    code = "unit_unavailable"

    def __init__(self, reason, message=None):
        super().__init__(message or reason.describe())
        self.reason = reason

    def to_dict(self):
        payload = super().to_dict()
        payload["reason"] = self.reason.to_dict()
        return payload


class DuplicateApplication(Conflict):
    code = "duplicate_application"


class TenancyNotActive(Conflict):
    code = "tenancy_not_active"


class ConstraintViolation(Conflict):
    """A write was rejected by a unique index or a CHECK constraint."""

    code = "constraint_violation"


class TransactionFailure(RentalError):
    """The storage layer aborted the unit of work; nothing was committed."""

    status_code = 503
    code = "transaction_failure"


def register_error_handlers(app):
    @app.errorhandler(RentalError)
    def rental_error(e):
        if e.status_code >= 500:
            app.logger.error("%s: %s", e.code, e.message)
        return jsonify(e.to_dict()), e.status_code

    @app.errorhandler(400)
    def bad_request(e):
        msg = getattr(e, "description", "Bad Request")
        return jsonify(success=False, error="bad_request", message=msg), 400

    @app.errorhandler(401)
    def unauthorized(e): return jsonify(success=False, error="unauthorized"), 401

    @app.errorhandler(403)
    def forbidden(e): return jsonify(success=False, error="forbidden"), 403

    @app.errorhandler(404)
    def not_found(e): return jsonify(success=False, error="not_found"), 404

    @app.errorhandler(500)
    def server_error(e):
        app.logger.exception("Unhandled exception: %s", e)
        return jsonify(success=False, error="server_error"), 500
