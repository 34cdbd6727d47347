# siteforge/api/v1/cms.py
from flask import Blueprint, g, request, jsonify
from flask_jwt_extended import jwt_required, current_user

from siteforge.application.cms import components as component_service
from siteforge.application.cms import sections as section_service
from siteforge.application.cms.create_page import create_page as create_cms_page
from siteforge.application.cms.delete_page import delete_page as delete_cms_page
from siteforge.application.cms.page_sections import (
    associate_section_to_page,
    dissociate_section_from_page,
)
from siteforge.application.cms.publish_page import publish_page as publish_cms_page
from siteforge.application.cms.queries import (
    get_all_cms_pages,
    get_default_page,
    get_page,
    get_page_by_slug,
    get_pages_using_section_id,
    list_versions as list_page_versions,
)
from siteforge.application.cms.render_page import render_page as render_cms_page, resolve_sections
from siteforge.application.cms.rollback_page import rollback_page as rollback_cms_page
from siteforge.application.cms.unpublish_page import unpublish_page as unpublish_cms_page
from siteforge.application.cms.update_page import update_page as update_cms_page
from siteforge.constants import CONTENT_ROLES
from siteforge.models.tenant import FEATURE_CMS
from siteforge.normalizers.page import normalize_page, normalize_page_link, normalize_version
from siteforge.normalizers.section import normalize_cms_component, normalize_cms_section
from siteforge.utils.decorators import tenant_required, roles_required, feature_enabled
from siteforge.utils.optimistic_lock import enforce_optimistic_lock

cms_bp = Blueprint("cms", __name__)


# ------------------------
# Public rendering
# ------------------------

@cms_bp.route("/render/<path:slug>", methods=["GET"])
@feature_enabled(FEATURE_CMS)
def render_page(slug):
    page, resolved = render_cms_page(tenant_id=g.current_tenant.id, slug=slug)
    return jsonify(normalize_page(page, resolved=resolved))


@cms_bp.route("/render", methods=["GET"])
@feature_enabled(FEATURE_CMS)
def render_default_page():
    page = get_default_page(tenant_id=g.current_tenant.id, locale=request.args.get("locale"))
    if page is None:
        return jsonify(None)
    return jsonify(normalize_page(page, resolved=resolve_sections(page)))


# ------------------------
# Pages
# ------------------------

@cms_bp.route("/pages", methods=["GET"])
@jwt_required()
@tenant_required
@feature_enabled(FEATURE_CMS)
def list_pages():
    pages = get_all_cms_pages(tenant_id=g.current_tenant.id)
    return jsonify([normalize_page(p, admin=True) for p in pages])


@cms_bp.route("/pages/<page_id>", methods=["GET"])
@jwt_required()
@tenant_required
@feature_enabled(FEATURE_CMS)
def get_page_by_id(page_id):
    page = get_page(tenant_id=g.current_tenant.id, page_id=page_id)
    return jsonify(normalize_page(page, admin=True))


@cms_bp.route("/pages/<page_id>/preview", methods=["GET"])
@jwt_required()
@tenant_required
@feature_enabled(FEATURE_CMS)
def preview_page(page_id):
    page = get_page(tenant_id=g.current_tenant.id, page_id=page_id)
    resolved = resolve_sections(page, include_hidden=True)
    return jsonify(normalize_page(page, admin=True, resolved=resolved))


@cms_bp.route("/pages/by-slug/<path:slug>", methods=["GET"])
@jwt_required()
@tenant_required
@feature_enabled(FEATURE_CMS)
def page_by_slug(slug):
    page = get_page_by_slug(tenant_id=g.current_tenant.id, slug=slug)
    if page is None:
        return jsonify(None)
    return jsonify(normalize_page(page, admin=True, resolved=resolve_sections(page, include_hidden=True)))


@cms_bp.route("/pages/default", methods=["GET"])
@jwt_required()
@tenant_required
@feature_enabled(FEATURE_CMS)
def default_page():
    page = get_default_page(tenant_id=g.current_tenant.id, locale=request.args.get("locale"))
    return jsonify(normalize_page(page, admin=True) if page else None)


@cms_bp.route("/pages/using-section/<section_id>", methods=["GET"])
@jwt_required()
@tenant_required
@feature_enabled(FEATURE_CMS)
def pages_using_section(section_id):
    pages = get_pages_using_section_id(tenant_id=g.current_tenant.id, section_id=section_id)
    return jsonify([normalize_page_link(p) for p in pages])


@cms_bp.route("/pages", methods=["POST"])
@jwt_required()
@tenant_required
@roles_required(*CONTENT_ROLES)
@feature_enabled(FEATURE_CMS)
def create_page():
    data = request.get_json(silent=True) or {}

    page = create_cms_page(
        tenant_id=g.current_tenant.id,
        actor_id=current_user.id,
        data=data,
    )

    return jsonify({
        "success": True,
        "message": "Page created successfully",
        "page": normalize_page(page, admin=True),
    }), 201


@cms_bp.route("/pages/<page_id>", methods=["PUT"])
@jwt_required()
@tenant_required
@roles_required(*CONTENT_ROLES)
@feature_enabled(FEATURE_CMS)
def update_page(page_id):
    tenant = g.current_tenant
    enforce_optimistic_lock(get_page(tenant_id=tenant.id, page_id=page_id))

    page = update_cms_page(
        tenant_id=tenant.id,
        page_id=page_id,
        actor_id=current_user.id,
        data=request.get_json(silent=True) or {},
    )

    return jsonify({
        "success": True,
        "message": "Page updated successfully",
        "page": normalize_page(page, admin=True),
    }), 200


@cms_bp.route("/pages/<page_id>", methods=["DELETE"])
@jwt_required()
@tenant_required
@roles_required(*CONTENT_ROLES)
@feature_enabled(FEATURE_CMS)
def delete_page(page_id):
    title = delete_cms_page(
        tenant_id=g.current_tenant.id,
        page_id=page_id,
        actor_id=current_user.id,
    )
    return jsonify({"success": True, "message": f'Page "{title}" deleted successfully'}), 200


@cms_bp.route("/pages/<page_id>/publish", methods=["POST"])
@jwt_required()
@tenant_required
@roles_required(*CONTENT_ROLES)
@feature_enabled(FEATURE_CMS)
def publish_page(page_id):
    result = publish_cms_page(
        tenant_id=g.current_tenant.id,
        page_id=page_id,
        actor_id=current_user.id,
    )
    return jsonify(result), 200


@cms_bp.route("/pages/<page_id>/unpublish", methods=["POST"])
@jwt_required()
@tenant_required
@roles_required(*CONTENT_ROLES)
@feature_enabled(FEATURE_CMS)
def unpublish_page(page_id):
    result = unpublish_cms_page(
        tenant_id=g.current_tenant.id,
        page_id=page_id,
        actor_id=current_user.id,
    )
    return jsonify(result), 200


@cms_bp.route("/pages/<page_id>/versions", methods=["GET"])
@jwt_required()
@tenant_required
@feature_enabled(FEATURE_CMS)
def list_versions(page_id):
    versions = list_page_versions(tenant_id=g.current_tenant.id, page_id=page_id)
    return jsonify([normalize_version(v) for v in versions])


@cms_bp.route("/pages/<page_id>/rollback/<int:version>", methods=["POST"])
@jwt_required()
@tenant_required
@roles_required(*CONTENT_ROLES)
@feature_enabled(FEATURE_CMS)
def rollback_page(page_id, version):
    result = rollback_cms_page(
        tenant_id=g.current_tenant.id,
        page_id=page_id,
        rollback_version=version,
        actor_id=current_user.id,
    )
    return jsonify(result), 200


@cms_bp.route("/pages/<page_id>/sections", methods=["POST"])
@jwt_required()
@tenant_required
@roles_required(*CONTENT_ROLES)
@feature_enabled(FEATURE_CMS)
def associate_section(page_id):
    data = request.get_json(silent=True) or {}

    page = associate_section_to_page(
        tenant_id=g.current_tenant.id,
        actor_id=current_user.id,
        page_id=page_id,
        section_id=data.get("section_id") or data.get("sectionId"),
        order=data.get("order"),
    )
    return jsonify(normalize_page(page, admin=True)), 200


@cms_bp.route("/pages/<page_id>/sections/<section_id>", methods=["DELETE"])
@jwt_required()
@tenant_required
@roles_required(*CONTENT_ROLES)
@feature_enabled(FEATURE_CMS)
def dissociate_section(page_id, section_id):
    page = dissociate_section_from_page(
        tenant_id=g.current_tenant.id,
        actor_id=current_user.id,
        page_id=page_id,
        section_id=section_id,
    )
    return jsonify(normalize_page(page, admin=True)), 200


# ------------------------
# CMS sections
# ------------------------

@cms_bp.route("/sections", methods=["GET"])
@jwt_required()
@tenant_required
@feature_enabled(FEATURE_CMS)
def list_sections():
    sections = section_service.get_all_cms_sections(tenant_id=g.current_tenant.id)
    return jsonify([normalize_cms_section(s) for s in sections])


@cms_bp.route("/sections/<path:section_id>/components", methods=["GET"])
@feature_enabled(FEATURE_CMS)
def section_components(section_id):
    # Read by the public site while rendering, so no JWT
    return jsonify(section_service.get_section_components(
        tenant_id=g.current_tenant.id,
        section_id=section_id,
    ))


@cms_bp.route("/sections/<path:section_id>/components", methods=["PUT"])
@jwt_required()
@tenant_required
@roles_required(*CONTENT_ROLES)
@feature_enabled(FEATURE_CMS)
def save_section_components(section_id):
    data = request.get_json(silent=True) or {}

    result = section_service.save_section_components(
        tenant_id=g.current_tenant.id,
        actor_id=current_user.id,
        section_id=section_id,
        components=data.get("components") or [],
    )
    return jsonify(result), 200


@cms_bp.route("/sections/<section_id>", methods=["GET"])
@jwt_required()
@tenant_required
@feature_enabled(FEATURE_CMS)
def get_section(section_id):
    section = section_service.get_cms_section(tenant_id=g.current_tenant.id, section_id=section_id)
    return jsonify(normalize_cms_section(section))


@cms_bp.route("/sections", methods=["POST"])
@jwt_required()
@tenant_required
@roles_required(*CONTENT_ROLES)
@feature_enabled(FEATURE_CMS)
def create_section():
    section = section_service.create_cms_section(
        tenant_id=g.current_tenant.id,
        actor_id=current_user.id,
        data=request.get_json(silent=True) or {},
    )
    return jsonify(normalize_cms_section(section)), 201


@cms_bp.route("/sections/<section_id>", methods=["PUT"])
@jwt_required()
@tenant_required
@roles_required(*CONTENT_ROLES)
@feature_enabled(FEATURE_CMS)
def update_section(section_id):
    section = section_service.update_cms_section(
        tenant_id=g.current_tenant.id,
        actor_id=current_user.id,
        section_id=section_id,
        data=request.get_json(silent=True) or {},
    )
    return jsonify(normalize_cms_section(section)), 200


@cms_bp.route("/sections/<section_id>", methods=["DELETE"])
@jwt_required()
@tenant_required
@roles_required(*CONTENT_ROLES)
@feature_enabled(FEATURE_CMS)
def delete_section(section_id):
    result = section_service.delete_cms_section(
        tenant_id=g.current_tenant.id,
        actor_id=current_user.id,
        section_id=section_id,
    )
    return jsonify(result), 200


# ------------------------
# CMS components
# ------------------------

@cms_bp.route("/components", methods=["GET"])
@jwt_required()
@tenant_required
@feature_enabled(FEATURE_CMS)
def list_components():
    tenant = g.current_tenant
    component_type = request.args.get("type")

    if component_type:
        components = component_service.get_cms_components_by_type(
            tenant_id=tenant.id, component_type=component_type
        )
    else:
        components = component_service.get_all_cms_components(tenant_id=tenant.id)

    return jsonify([normalize_cms_component(c) for c in components])


@cms_bp.route("/components/<component_id>", methods=["GET"])
@jwt_required()
@tenant_required
@feature_enabled(FEATURE_CMS)
def get_component(component_id):
    component = component_service.get_cms_component(tenant_id=g.current_tenant.id, component_id=component_id)
    return jsonify(normalize_cms_component(component))


@cms_bp.route("/components", methods=["POST"])
@jwt_required()
@tenant_required
@roles_required(*CONTENT_ROLES)
@feature_enabled(FEATURE_CMS)
def create_component():
    component = component_service.create_cms_component(
        tenant_id=g.current_tenant.id,
        actor_id=current_user.id,
        data=request.get_json(silent=True) or {},
    )
    return jsonify({
        "success": True,
        "message": "Component created successfully",
        "component": normalize_cms_component(component),
    }), 201


@cms_bp.route("/components/<component_id>", methods=["PUT"])
@jwt_required()
@tenant_required
@roles_required(*CONTENT_ROLES)
@feature_enabled(FEATURE_CMS)
def update_component(component_id):
    component = component_service.update_cms_component(
        tenant_id=g.current_tenant.id,
        actor_id=current_user.id,
        component_id=component_id,
        data=request.get_json(silent=True) or {},
    )
    return jsonify({
        "success": True,
        "message": "Component updated successfully",
        "component": normalize_cms_component(component),
    }), 200


@cms_bp.route("/components/<component_id>", methods=["DELETE"])
@jwt_required()
@tenant_required
@roles_required(*CONTENT_ROLES)
@feature_enabled(FEATURE_CMS)
def delete_component(component_id):
    result = component_service.delete_cms_component(
        tenant_id=g.current_tenant.id,
        actor_id=current_user.id,
        component_id=component_id,
    )
    return jsonify(result), 200
