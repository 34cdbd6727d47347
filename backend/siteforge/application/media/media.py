import logging

from siteforge.errors import Forbidden, NotFound, StorageError, ValidationError
from siteforge.utils.audit import log_action
from siteforge.utils.media import build_key, get_storage, key_belongs_to_tenant
from siteforge.utils.transaction import transactional

logger = logging.getLogger(__name__)

MISSING_OBJECT = "Object does not exist or cannot be accessed"
DELETE_FAILED = "Failed to delete file"


def upload(*, tenant, actor_id, file, folder=None):
    """Store an uploaded file under the tenant's prefix; returns ``{key, url}``."""
    if file is None or not file.filename:
        raise ValidationError("No file provided")

    key = build_key(tenant.slug, file.filename, folder)
    storage = get_storage()
    storage.put_bytes(key, file.read(), content_type=file.mimetype)

    with transactional():
        log_action(
            action="media.upload",
            entity_type="media",
            entity_id=None,
            payload={"key": key},
            tenant_id=tenant.id,
            actor_id=actor_id,
        )

    logger.info("Uploaded %s", key)
    return {"key": key, "url": storage.url_for(key)}


def _check_key(tenant, key):
    if not isinstance(key, str) or not key:
        raise ValidationError("Invalid key")
    if not key_belongs_to_tenant(key, tenant.slug):
        raise Forbidden("Forbidden: Key does not belong to this tenant")


def delete_object(*, tenant, actor_id, key):
    _check_key(tenant, key)
    storage = get_storage()

    if not storage.exists(key):
        raise NotFound(MISSING_OBJECT)

    storage.delete(key)

    with transactional():
        log_action(
            action="media.delete",
            entity_type="media",
            entity_id=None,
            payload={"key": key},
            tenant_id=tenant.id,
            actor_id=actor_id,
        )

    return {"success": True, "message": "File deleted successfully", "key": key}


def delete_objects(*, tenant, actor_id, keys):
    """
    Delete several keys, reporting per key instead of failing the batch.
    Keys outside the tenant prefix are rejected up front.
    """
    for key in keys:
        _check_key(tenant, key)

    storage = get_storage()
    results, errors = [], []

    for key in keys:
        if not storage.exists(key):
            errors.append({"key": key, "error": MISSING_OBJECT})
            continue
        try:
            storage.delete(key)
        except StorageError:
            logger.exception("Failed to delete %s", key)
            errors.append({"key": key, "error": DELETE_FAILED})
            continue
        results.append({"key": key, "success": True})

    if results:
        with transactional():
            log_action(
                action="media.bulk_delete",
                entity_type="media",
                entity_id=None,
                payload={"keys": [r["key"] for r in results]},
                tenant_id=tenant.id,
                actor_id=actor_id,
            )

    return {
        "success": not errors,
        "results": results,
        "errors": errors,
        "totalDeleted": len(results),
        "totalErrors": len(errors),
    }


def delete_media(*, tenant, actor_id, body):
    """Dispatch a delete request body: ``{"key": ...}`` or ``{"keys": [...]}``."""
    body = body or {}

    if "keys" in body:
        keys = body.get("keys")
        if not isinstance(keys, list) or not keys:
            raise ValidationError("No keys provided")
        return delete_objects(tenant=tenant, actor_id=actor_id, keys=keys)

    key = body.get("key")
    if key is None or key == "":
        raise ValidationError("No key provided")
    return delete_object(tenant=tenant, actor_id=actor_id, key=key)
