import logging
import os

from flask import Flask, send_file, current_app
from flask_swagger_ui import get_swaggerui_blueprint

from .config import config_by_name
from .extensions import db, migrate, jwt
from .api.v1 import v1_bp
from .cli import register_cli
from .middleware.tenant_middleware import tenant_middleware
from .errors import error_response, register_error_handlers


def _check_production_config(app):
    if not app.config.get("SQLALCHEMY_DATABASE_URI"):
        raise RuntimeError("DATABASE_URI must be set in production")
    if app.config.get("SECRET_KEY") in (None, "", "dev-secret"):
        raise RuntimeError("SECRET_KEY must be set to a non-default value in production")


def register_jwt_loaders(app):
    from .models.user import User

    @jwt.user_lookup_loader
    def load_user(_jwt_header, jwt_data):
        user = db.session.get(User, jwt_data["sub"])
        if user is None or not user.is_active:
            return None
        return user

    @jwt.unauthorized_loader
    def missing_token(reason):
        return error_response("NotAuthenticated", "Not authenticated", 401)

    @jwt.invalid_token_loader
    def invalid_token(reason):
        return error_response("NotAuthenticated", "Invalid token", 401)

    @jwt.expired_token_loader
    def expired_token(_jwt_header, _jwt_data):
        return error_response("NotAuthenticated", "Token has expired", 401)

    @jwt.user_lookup_error_loader
    def unknown_user(_jwt_header, _jwt_data):
        return error_response("NotAuthenticated", "User not found or inactive", 401)


def create_app(config_name: str = None) -> Flask:
    config_name = config_name or os.getenv("FLASK_CONFIG", "development")

    app = Flask(__name__)
    app.config.from_object(config_by_name[config_name])

    logging.basicConfig(
        level=app.config.get("LOG_LEVEL", "INFO"),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if config_name == "production":
        _check_production_config(app)

    # -------------------------------------------------
    # Extensions
    # -------------------------------------------------
    db.init_app(app)
    migrate.init_app(app, db)
    jwt.init_app(app)
    register_jwt_loaders(app)

    # Models must be imported for metadata and migrations
    from . import models  # noqa: F401

    # -------------------------------------------------
    # Middleware
    # -------------------------------------------------
    tenant_middleware(app)

    # -------------------------------------------------
    # API Blueprints
    # -------------------------------------------------
    app.register_blueprint(v1_bp, url_prefix="/api/v1")
    register_error_handlers(app)
    register_cli(app)

    # -------------------------------------------------
    # Serve OpenAPI YAML (PUBLIC, NO TENANT)
    # -------------------------------------------------
    @app.route("/openapi/siteforge.yaml", methods=["GET"], endpoint="openapi_siteforge")
    def serve_openapi():
        spec_path = os.path.join(
            current_app.root_path,
            "api",
            "v1",
            "siteforge_openapi.yaml",
        )

        if not os.path.exists(spec_path):
            raise FileNotFoundError("siteforge_openapi.yaml not found")

        return send_file(
            spec_path,
            mimetype="application/yaml",
            as_attachment=False,
        )

    # -------------------------------------------------
    # Swagger UI
    # -------------------------------------------------
    SWAGGER_URL = "/swagger"
    API_URL = "/openapi/siteforge.yaml"

    swaggerui_blueprint = get_swaggerui_blueprint(
        SWAGGER_URL,
        API_URL,
        config={
            "app_name": "SiteForge API",
            "deepLinking": True,
            "persistAuthorization": True,
        },
    )

    app.register_blueprint(swaggerui_blueprint, url_prefix=SWAGGER_URL)

    return app
