from siteforge.models.audit_log import AuditLog
from siteforge.utils.pagination import paginate_cursor


def list_audit_logs(tenant_id, *, action=None, entity_type=None, entity_id=None, cursor=None, limit=20):
    """Newest-first audit trail for a tenant, cursor paginated."""
    query = AuditLog.query.filter(AuditLog.tenant_id == tenant_id)

    if action:
        query = query.filter(AuditLog.action == action)

    if entity_type:
        query = query.filter(AuditLog.entity_type == entity_type)

    if entity_id:
        query = query.filter(AuditLog.entity_id == entity_id)

    return paginate_cursor(query, model=AuditLog, limit=limit, cursor=cursor)
