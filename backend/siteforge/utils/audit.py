from typing import Optional

from flask import g, has_request_context
from flask_jwt_extended import current_user

from siteforge.extensions import db
from siteforge.models.audit_log import AuditLog


def _current_actor_id():
    try:
        return current_user.id if current_user else None
    except RuntimeError:
        # No verified JWT in this request
        return None


def log_action(
    *,
    action: str,
    entity_type: str,
    entity_id: Optional[str],
    payload: dict | None = None,
    tenant_id: Optional[str] = None,
    actor_id: Optional[str] = None,
):
    """
    Stage an audit row in the current session.

    The row is committed together with the surrounding transaction, so a
    rolled-back write leaves no audit trace.
    """
    if tenant_id is None and has_request_context():
        tenant = getattr(g, "current_tenant", None)
        tenant_id = tenant.id if tenant else None

    if tenant_id is None:
        return  # Platform-level actions have no tenant audit trail

    if actor_id is None and has_request_context():
        actor_id = _current_actor_id()

    log = AuditLog()
    log.actor_id = actor_id
    log.tenant_id = tenant_id
    log.action = action
    log.entity_type = entity_type
    log.entity_id = str(entity_id) if entity_id is not None else "*"
    log.payload = payload or {}

    db.session.add(log)
