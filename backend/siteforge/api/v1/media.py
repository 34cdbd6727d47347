from flask import Blueprint, g, request, jsonify
from flask_jwt_extended import jwt_required, current_user

from siteforge.application.media.media import delete_media, upload
from siteforge.constants import CONTENT_ROLES
from siteforge.utils.decorators import tenant_required, roles_required

media_bp = Blueprint("media", __name__)


@media_bp.route("/upload", methods=["POST"])
@jwt_required()
@tenant_required
@roles_required(*CONTENT_ROLES)
def upload_media():
    result = upload(
        tenant=g.current_tenant,
        actor_id=current_user.id,
        file=request.files.get("file"),
        folder=request.form.get("folder"),
    )
    return jsonify(result), 201


@media_bp.route("", methods=["DELETE"])
@jwt_required()
@tenant_required
@roles_required(*CONTENT_ROLES)
def delete_media_objects():
    result = delete_media(
        tenant=g.current_tenant,
        actor_id=current_user.id,
        body=request.get_json(silent=True),
    )
    return jsonify(result), 200
