"""Views module - exports all blueprints."""
from skyfront.views.admin import admin_blueprint
from skyfront.views.auth import auth_blueprint
from skyfront.views.customer import customer_blueprint
from skyfront.views.health import health_blueprint
from skyfront.views.management import management_blueprint

__all__ = [
    "admin_blueprint",
    "auth_blueprint",
    "customer_blueprint",
    "health_blueprint",
    "management_blueprint",
]
