from flask import Blueprint

# Create the versioned blueprint
v1_bp = Blueprint("v1", __name__)

# Import route modules so they register with v1_bp
from . import health
from . import auth
from . import users
from . import tenants
from . import audit

# Feature blueprints nest under v1_bp with their own prefixes
from .cms import cms_bp
from .menus import menus_bp
from .blogs import blogs_bp
from .ecommerce import ecommerce_bp
from .calendar import calendar_bp
from .media import media_bp
from .super_admin import super_admin_bp

v1_bp.register_blueprint(cms_bp, url_prefix="/cms")
v1_bp.register_blueprint(menus_bp, url_prefix="/menus")
v1_bp.register_blueprint(blogs_bp, url_prefix="/blogs")
v1_bp.register_blueprint(ecommerce_bp, url_prefix="/ecommerce")
v1_bp.register_blueprint(calendar_bp, url_prefix="/calendar")
v1_bp.register_blueprint(media_bp, url_prefix="/media")
v1_bp.register_blueprint(super_admin_bp, url_prefix="/super-admin")
