from .applications import bp as applications_bp
from .properties import bp as properties_bp
from .tenants import bp as tenants_bp

__all__ = ["applications_bp", "properties_bp", "tenants_bp"]
