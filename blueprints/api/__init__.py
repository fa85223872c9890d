"""
Reservation API routes package.
Split into smaller modules by entity for maintainability.
"""

from flask import Blueprint

# Create the API blueprint
api_bp = Blueprint('api', __name__)

# Import and register routes from submodules
from blueprints.api import health
from blueprints.api import reservations
from blueprints.api import seats
from blueprints.api import availability
from blueprints.api import selections

# Register all route functions on the blueprint
health.register_routes(api_bp)
reservations.register_routes(api_bp)
seats.register_routes(api_bp)
availability.register_routes(api_bp)
selections.register_routes(api_bp)
