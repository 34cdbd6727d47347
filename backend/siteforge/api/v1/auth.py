from flask import request, jsonify, g
from flask_jwt_extended import (
    current_user,
    jwt_required,
    set_access_cookies,
    unset_jwt_cookies,
)
from siteforge.application.auth.login import login as login_user, refresh as refresh_token, register as register_user
from siteforge.errors import ValidationError
from siteforge.normalizers.user import normalize_user
from . import v1_bp


@v1_bp.route("/auth/login", methods=["POST"])
def login():
    data = request.get_json(silent=True)
    if not data:
        raise ValidationError("Invalid request body")

    # Without a tenant header the tokens carry only the platform role
    result = login_user(
        email=data.get("email"),
        password=data.get("password"),
        tenant=g.current_tenant,
    )

    response = jsonify({
        "access_token": result["access_token"],
        "refresh_token": result["refresh_token"],
        "user": normalize_user(result["user"]),
    })
    set_access_cookies(response, result["access_token"])
    return response, 200


@v1_bp.route("/auth/register", methods=["POST"])
def register():
    data = request.get_json(silent=True) or {}

    user = register_user(
        email=data.get("email"),
        password=data.get("password"),
        first_name=data.get("first_name"),
        last_name=data.get("last_name"),
        phone_number=data.get("phone_number"),
    )

    return jsonify(normalize_user(user)), 201


@v1_bp.route("/auth/refresh", methods=["POST"])
@jwt_required(refresh=True)
def refresh():
    return jsonify({"access_token": refresh_token(current_user)}), 200


@v1_bp.route("/auth/me", methods=["GET"])
@jwt_required()
def me():
    return jsonify(normalize_user(current_user)), 200


@v1_bp.route("/auth/logout", methods=["POST"])
def logout():
    response = jsonify({"success": True, "message": "Logged out"})
    unset_jwt_cookies(response)
    return response, 200
