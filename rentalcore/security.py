# rentalcore/security.py
from functools import wraps

from flask_jwt_extended import get_jwt, get_jwt_identity, verify_jwt_in_request

from .errors import Forbidden


def current_user_id():
    verify_jwt_in_request()
    identity = get_jwt_identity()
    try:
        return int(identity)
    except (TypeError, ValueError):
        raise Forbidden("Token identity is not a user id")


def require_property_owner(prop):
    """Only the owner of a property may decide its applications."""
    if prop.owner_id != current_user_id():
        raise Forbidden("Only the property owner can perform this action")


def require_owner_or_applicant(application):
    user_id = current_user_id()
    if user_id not in (application.applicant_id, application.rental_property.owner_id):
        raise Forbidden("You do not have access to this application")


def roles_required(*allowed):
    """Usage: @roles_required("owner")"""
    def deco(fn):
        @wraps(fn)
        def wrapper(*args, **kwargs):
            verify_jwt_in_request()
            if get_jwt().get("role") not in allowed:
                raise Forbidden("Your role cannot perform this action")
            return fn(*args, **kwargs)
        return wrapper
    return deco
