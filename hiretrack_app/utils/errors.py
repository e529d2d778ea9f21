"""
Service-layer exceptions and their HTTP mapping.
"""
import logging
from flask import jsonify
from hiretrack_app.models import db, CommissionDetailsError

logger = logging.getLogger(__name__)


class ServiceError(Exception):
    """Base class for errors raised by the service layer."""
    status_code = 500
    message = 'Request failed'

    def __init__(self, message=None):
        super().__init__(message or self.message)
        self.message = message or self.message

    def to_response(self):
        return jsonify({'error': self.message}), self.status_code


class ValidationError(ServiceError):
    status_code = 400
    message = 'Validation failed'

    def __init__(self, errors, message=None):
        super().__init__(message)
        self.errors = errors

    def to_response(self):
        return jsonify({'error': self.message, 'errors': self.errors}), self.status_code


class PermissionDeniedError(ServiceError):
    status_code = 403
    message = 'Access denied'


class NotFoundError(ServiceError):
    status_code = 404
    message = 'Not found'


class ConflictError(ServiceError):
    status_code = 409
    message = 'Already exists'


class StorageError(ServiceError):
    status_code = 502
    message = 'File storage request failed'


def register_error_handlers(bp):
    """Map service exceptions raised inside a blueprint to JSON responses."""

    @bp.errorhandler(ServiceError)
    def handle_service_error(error):
        db.session.rollback()
        if error.status_code >= 500:
            logger.error(f"{type(error).__name__}: {error.message}")
        return error.to_response()

    @bp.errorhandler(CommissionDetailsError)
    def handle_commission_details_error(error):
        db.session.rollback()
        logger.error(f"Unreadable commission details: {error}")
        return jsonify({'error': 'Commission details could not be read'}), 422


def database_error(action):
    """Roll back and answer 500 after a failed commit."""
    db.session.rollback()
    logger.exception(f"Failed to {action}")
    return jsonify({'error': f'Failed to {action}'}), 500
