from flask import g, jsonify, request
from flask_jwt_extended import current_user, jwt_required

from siteforge.application.auth.tokens import issue_tokens
from siteforge.application.tenants import tenants as tenant_service
from siteforge.constants import SUPER_ADMIN
from siteforge.errors import Forbidden
from siteforge.normalizers.tenant import normalize_tenant
from siteforge.normalizers.user import normalize_user
from . import v1_bp


@v1_bp.route("/tenants", methods=["GET"])
@jwt_required()
def list_tenants():
    return jsonify([normalize_tenant(t) for t in tenant_service.list_tenants(current_user)]), 200


@v1_bp.route("/tenants/current", methods=["GET"])
@jwt_required()
def current_tenant():
    tenant = g.current_tenant
    if tenant is None:
        return jsonify(None), 200
    return jsonify(normalize_tenant(tenant)), 200


@v1_bp.route("/tenants/<tenant_id>", methods=["GET"])
@jwt_required()
def get_tenant(tenant_id):
    tenant = tenant_service.get_tenant(tenant_id=tenant_id)
    if current_user.role_name != SUPER_ADMIN and current_user.membership_for(tenant.id) is None:
        raise Forbidden("Unauthorized: You are not a member of this tenant")
    return jsonify(normalize_tenant(tenant)), 200


@v1_bp.route("/tenants/by-slug/<slug>", methods=["GET"])
def get_tenant_by_slug(slug):
    # Public lookup used by storefronts to resolve their tenant
    tenant = tenant_service.get_tenant(slug=slug)
    return jsonify({"id": tenant.id, "name": tenant.name, "slug": tenant.slug, "features": tenant.features}), 200


@v1_bp.route("/tenants", methods=["POST"])
@jwt_required()
def create_tenant():
    data = request.get_json(silent=True) or {}
    tenant = tenant_service.create_tenant(user=current_user, data=data)
    return jsonify(normalize_tenant(tenant)), 201


@v1_bp.route("/tenants/register", methods=["POST"])
def register_with_tenant():
    data = request.get_json(silent=True) or {}
    user, tenant = tenant_service.register_user_with_tenant(data=data)

    tokens = issue_tokens(user, user.membership_for(tenant.id))
    return jsonify({
        "success": True,
        "message": "Registration successful",
        "user": normalize_user(user),
        "tenant": normalize_tenant(tenant),
        **tokens,
    }), 201
