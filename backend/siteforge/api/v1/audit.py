from flask import g, jsonify, request
from flask_jwt_extended import jwt_required

from siteforge.application.audit.list_audit_logs import list_audit_logs as fetch_audit_logs
from siteforge.constants import ADMIN_ROLES
from siteforge.normalizers.audit import normalize_audit_log
from siteforge.normalizers.pagination import normalize_pagination
from siteforge.utils.decorators import tenant_required, roles_required
from . import v1_bp


@v1_bp.route("/audit-logs", methods=["GET"])
@jwt_required()
@tenant_required
@roles_required(*ADMIN_ROLES)
def list_audit_logs():
    logs, meta = fetch_audit_logs(
        g.current_tenant.id,
        action=request.args.get("action"),
        entity_type=request.args.get("entity_type"),
        entity_id=request.args.get("entity_id"),
        cursor=request.args.get("cursor"),
        limit=request.args.get("limit", 20, type=int),
    )

    return jsonify(normalize_pagination(logs, normalize_audit_log, cursor=meta)), 200
