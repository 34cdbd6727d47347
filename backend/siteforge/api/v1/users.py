from flask import g, jsonify, request
from flask_jwt_extended import current_user, jwt_required

from siteforge.application.users import permissions as permission_service
from siteforge.application.users import roles as role_service
from siteforge.application.users.users import get_user as fetch_user, list_users as fetch_users
from siteforge.constants import ADMIN_ROLES, MANAGER_ROLES
from siteforge.normalizers.user import (
    normalize_permission,
    normalize_role,
    normalize_user,
    normalize_user_permission,
)
from siteforge.utils.decorators import (
    permission_required,
    request_roles,
    roles_required,
    tenant_optional,
)
from . import v1_bp


# ------------------------
# Users
# ------------------------

@v1_bp.route("/users", methods=["GET"])
@jwt_required()
@tenant_optional
def list_users():
    tenant = g.current_tenant
    users = fetch_users(
        requester_roles=request_roles(),
        tenant_id=tenant.id if tenant else None,
    )
    return jsonify([normalize_user(user) for user in users]), 200


@v1_bp.route("/users/<user_id>", methods=["GET"])
@jwt_required()
@tenant_optional
def get_user(user_id):
    user = fetch_user(requester=current_user, requester_roles=request_roles(), user_id=user_id)
    return jsonify(normalize_user(user)), 200


@v1_bp.route("/users/<user_id>/permissions", methods=["GET"])
@jwt_required()
@tenant_optional
def user_specific_permissions(user_id):
    overrides = permission_service.user_specific_permissions(
        requester=current_user,
        requester_roles=request_roles(),
        user_id=user_id,
    )
    return jsonify([normalize_user_permission(o) for o in overrides]), 200


@v1_bp.route("/users/<user_id>/permissions", methods=["PUT"])
@jwt_required()
@tenant_optional
def set_user_permission(user_id):
    data = request.get_json(silent=True) or {}

    override = permission_service.set_user_permission(
        requester=current_user,
        requester_roles=request_roles(),
        user_id=user_id,
        permission_name=data.get("permission_name"),
        granted=data.get("granted"),
    )

    if override is None:
        return jsonify({"success": True, "message": "Permission override removed"}), 200
    return jsonify(normalize_user_permission(override)), 200


@v1_bp.route("/me/permissions", methods=["GET"])
@jwt_required()
def my_permissions():
    return jsonify({"permissions": permission_service.effective_permissions(current_user)}), 200


# ------------------------
# Roles
# ------------------------

@v1_bp.route("/roles", methods=["GET"])
@jwt_required()
@tenant_optional
@permission_required("role:read", *MANAGER_ROLES)
def list_roles():
    return jsonify([
        normalize_role(role, user_count, permission_count)
        for role, user_count, permission_count in role_service.list_roles()
    ]), 200


@v1_bp.route("/roles/<role_id>", methods=["GET"])
@jwt_required()
@tenant_optional
@permission_required("role:read", *MANAGER_ROLES)
def get_role(role_id):
    return jsonify(normalize_role(role_service.get_role(role_id))), 200


@v1_bp.route("/roles/<role_id>/permissions", methods=["GET"])
@jwt_required()
@tenant_optional
@permission_required("role:read", *MANAGER_ROLES)
def role_permissions(role_id):
    return jsonify([normalize_permission(p) for p in role_service.role_permissions_for(role_id)]), 200


@v1_bp.route("/roles", methods=["POST"])
@jwt_required()
@tenant_optional
@roles_required(*ADMIN_ROLES)
def create_role():
    data = request.get_json(silent=True) or {}
    role = role_service.create_role(name=data.get("name"), description=data.get("description"))
    return jsonify(normalize_role(role)), 201


@v1_bp.route("/roles/<role_id>/permissions/<permission_id>", methods=["POST"])
@jwt_required()
@tenant_optional
@roles_required(*ADMIN_ROLES)
def assign_permission_to_role(role_id, permission_id):
    role = role_service.assign_permission_to_role(role_id=role_id, permission_id=permission_id)
    return jsonify({
        "success": True,
        "message": "Permission assigned to role",
        "permissions": [normalize_permission(p) for p in role.permissions],
    }), 200


@v1_bp.route("/roles/<role_id>/permissions/<permission_id>", methods=["DELETE"])
@jwt_required()
@tenant_optional
@roles_required(*ADMIN_ROLES)
def remove_permission_from_role(role_id, permission_id):
    role = role_service.remove_permission_from_role(role_id=role_id, permission_id=permission_id)
    return jsonify({
        "success": True,
        "message": "Permission removed from role",
        "permissions": [normalize_permission(p) for p in role.permissions],
    }), 200


# ------------------------
# Permissions
# ------------------------

@v1_bp.route("/permissions", methods=["GET"])
@jwt_required()
@tenant_optional
@permission_required("permission:read", *MANAGER_ROLES)
def list_permissions():
    return jsonify([normalize_permission(p) for p in permission_service.list_permissions()]), 200


@v1_bp.route("/permissions", methods=["POST"])
@jwt_required()
@tenant_optional
@roles_required(*ADMIN_ROLES)
def create_permission():
    data = request.get_json(silent=True) or {}
    permission = permission_service.create_permission(
        name=data.get("name"),
        description=data.get("description"),
        role_id=data.get("role_id"),
    )
    return jsonify(normalize_permission(permission)), 201
