from flask import Blueprint, request, jsonify
from flask_jwt_extended import jwt_required, current_user

from siteforge.application.super_admin import dashboard as dashboard_service
from siteforge.application.super_admin import maintenance, metrics
from siteforge.application.super_admin import tenants as tenant_admin
from siteforge.application.super_admin import users as user_admin
from siteforge.normalizers.pagination import normalize_page_envelope
from siteforge.normalizers.tenant import normalize_tenant, normalize_tenant_with_counts
from siteforge.normalizers.user import normalize_membership, normalize_user
from siteforge.utils.decorators import super_admin_required

super_admin_bp = Blueprint("super_admin", __name__)


def _body():
    return request.get_json(silent=True) or {}


@super_admin_bp.route("/dashboard", methods=["GET"])
@jwt_required()
@super_admin_required
def dashboard():
    data = dashboard_service.dashboard()
    recent = data["recentActivity"]
    return jsonify({
        "stats": data["stats"],
        "recentActivity": {
            "tenants": [normalize_tenant(t) for t in recent["tenants"]],
            "users": [normalize_user(u, include_memberships=False) for u in recent["users"]],
        },
    })


@super_admin_bp.route("/system-status", methods=["GET"])
@jwt_required()
@super_admin_required
def system_status():
    return jsonify(dashboard_service.system_status())


@super_admin_bp.route("/modules", methods=["GET"])
@jwt_required()
@super_admin_required
def global_modules():
    return jsonify(dashboard_service.global_modules())


@super_admin_bp.route("/analytics", methods=["GET"])
@jwt_required()
@super_admin_required
def global_analytics():
    return jsonify(metrics.global_analytics(request.args.get("time_range")))


@super_admin_bp.route("/maintenance", methods=["POST"])
@jwt_required()
@super_admin_required
def perform_system_maintenance():
    return jsonify(maintenance.perform_system_maintenance(_body().get("action")))


# ------------------------
# Tenants
# ------------------------

@super_admin_bp.route("/tenants", methods=["GET"])
@jwt_required()
@super_admin_required
def all_tenants():
    envelope = tenant_admin.all_tenants(
        search=request.args.get("search"),
        status=request.args.get("status"),
        plan_id=request.args.get("plan_id"),
        page=request.args.get("page", 1, type=int),
        page_size=request.args.get("page_size", 20, type=int),
    )
    return jsonify(normalize_page_envelope(envelope, normalize_tenant_with_counts))


@super_admin_bp.route("/tenants/health", methods=["GET"])
@jwt_required()
@super_admin_required
def tenant_health_metrics():
    return jsonify(metrics.tenant_health_metrics(request.args.get("tenant_id")))


@super_admin_bp.route("/tenants/<tenant_id>", methods=["GET"])
@jwt_required()
@super_admin_required
def tenant_by_id(tenant_id):
    return jsonify(normalize_tenant(tenant_admin.tenant_by_id(tenant_id)))


@super_admin_bp.route("/tenants/<tenant_id>/metrics", methods=["GET"])
@jwt_required()
@super_admin_required
def tenant_detailed_metrics(tenant_id):
    return jsonify(metrics.tenant_detailed_metrics(tenant_id))


@super_admin_bp.route("/tenants", methods=["POST"])
@jwt_required()
@super_admin_required
def create_tenant():
    result = tenant_admin.create_tenant(_body())
    return jsonify({
        **result,
        "tenant": normalize_tenant(result["tenant"]),
        "adminUser": normalize_user(result["adminUser"]),
    }), 201


@super_admin_bp.route("/tenants/<tenant_id>", methods=["PUT"])
@jwt_required()
@super_admin_required
def update_tenant(tenant_id):
    result = tenant_admin.update_tenant(tenant_id, _body())
    return jsonify({**result, "tenant": normalize_tenant(result["tenant"])})


@super_admin_bp.route("/tenants/<tenant_id>", methods=["DELETE"])
@jwt_required()
@super_admin_required
def delete_tenant(tenant_id):
    return jsonify(tenant_admin.delete_tenant(tenant_id))


@super_admin_bp.route("/tenants/<tenant_id>/impersonate", methods=["POST"])
@jwt_required()
@super_admin_required
def impersonate_tenant(tenant_id):
    result = tenant_admin.impersonate_tenant(tenant_id=tenant_id, admin=current_user)
    return jsonify({
        **result,
        "user": normalize_user(result["user"], include_memberships=False),
        "tenant": normalize_tenant(result["tenant"]),
    })


@super_admin_bp.route("/tenants/<tenant_id>/admin", methods=["POST"])
@jwt_required()
@super_admin_required
def assign_tenant_admin(tenant_id):
    result = user_admin.assign_tenant_admin(tenant_id=tenant_id, user_id=_body().get("user_id"))
    return jsonify({
        **result,
        "user": normalize_user(result["user"]),
        "tenant": normalize_tenant(result["tenant"]),
    })


@super_admin_bp.route("/tenants/<tenant_id>/users", methods=["POST"])
@jwt_required()
@super_admin_required
def assign_user_to_tenant(tenant_id):
    data = _body()
    result = user_admin.assign_user_to_tenant(
        tenant_id=tenant_id,
        user_id=data.get("user_id"),
        role=data.get("role"),
    )
    return jsonify({**result, "membership": normalize_membership(result["membership"])})


@super_admin_bp.route("/tenants/<tenant_id>/users/<user_id>", methods=["DELETE"])
@jwt_required()
@super_admin_required
def remove_user_from_tenant(tenant_id, user_id):
    return jsonify(user_admin.remove_user_from_tenant(tenant_id=tenant_id, user_id=user_id))


# ------------------------
# Users
# ------------------------

@super_admin_bp.route("/users", methods=["GET"])
@jwt_required()
@super_admin_required
def all_users():
    is_active = request.args.get("is_active")
    envelope = user_admin.all_users(
        search=request.args.get("search"),
        role=request.args.get("role"),
        tenant_id=request.args.get("tenant_id"),
        is_active=None if is_active is None else is_active.lower() in ("1", "true", "yes"),
        page=request.args.get("page", 1, type=int),
        page_size=request.args.get("page_size", 20, type=int),
    )
    return jsonify(normalize_page_envelope(envelope, normalize_user))


@super_admin_bp.route("/users", methods=["POST"])
@jwt_required()
@super_admin_required
def create_user_and_assign_tenant():
    result = user_admin.create_user_and_assign_tenant(_body())
    return jsonify({
        **result,
        "user": normalize_user(result["user"]),
        "membership": normalize_membership(result["membership"]),
    }), 201
