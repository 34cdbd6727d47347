from flask import Blueprint, g, request, jsonify
from flask_jwt_extended import jwt_required, current_user

from siteforge.application.menus import items as item_service
from siteforge.application.menus import menus as menu_service
from siteforge.application.menus.styles import update_footer_style, update_header_style
from siteforge.constants import CONTENT_ROLES
from siteforge.normalizers.menu import (
    normalize_footer_style,
    normalize_header_style,
    normalize_menu,
    normalize_menu_item,
)
from siteforge.normalizers.page import normalize_page_link
from siteforge.utils.decorators import tenant_required, roles_required

menus_bp = Blueprint("menus", __name__)


def _menu_or_null(menu):
    return jsonify(normalize_menu(menu) if menu else None)


@menus_bp.route("", methods=["GET"])
@jwt_required()
@tenant_required
def list_menus():
    menus = menu_service.list_menus(tenant_id=g.current_tenant.id)
    return jsonify([normalize_menu(m) for m in menus])


@menus_bp.route("/<menu_id>", methods=["GET"])
@jwt_required()
@tenant_required
def get_menu(menu_id):
    return jsonify(normalize_menu(menu_service.get_menu(tenant_id=g.current_tenant.id, menu_id=menu_id)))


@menus_bp.route("/by-location/<location>", methods=["GET"])
def menu_by_location(location):
    # Public: the site header/footer fetch their menu by location
    if g.current_tenant is None:
        return jsonify(None)
    return _menu_or_null(menu_service.menu_by_location(tenant_id=g.current_tenant.id, location=location))


@menus_bp.route("/by-name/<name>", methods=["GET"])
def menu_by_name(name):
    if g.current_tenant is None:
        return jsonify(None)
    return _menu_or_null(menu_service.menu_by_name(tenant_id=g.current_tenant.id, name=name))


@menus_bp.route("/pages", methods=["GET"])
@jwt_required()
@tenant_required
def linkable_pages():
    pages = menu_service.linkable_pages(tenant_id=g.current_tenant.id)
    return jsonify([normalize_page_link(p) for p in pages])


@menus_bp.route("", methods=["POST"])
@jwt_required()
@tenant_required
@roles_required(*CONTENT_ROLES)
def create_menu():
    menu = menu_service.create_menu(
        tenant_id=g.current_tenant.id,
        actor_id=current_user.id,
        data=request.get_json(silent=True) or {},
    )
    return jsonify(normalize_menu(menu)), 201


@menus_bp.route("/<menu_id>", methods=["PUT"])
@jwt_required()
@tenant_required
@roles_required(*CONTENT_ROLES)
def update_menu(menu_id):
    menu = menu_service.update_menu(
        tenant_id=g.current_tenant.id,
        actor_id=current_user.id,
        menu_id=menu_id,
        data=request.get_json(silent=True) or {},
    )
    return jsonify(normalize_menu(menu)), 200


@menus_bp.route("/<menu_id>", methods=["DELETE"])
@jwt_required()
@tenant_required
@roles_required(*CONTENT_ROLES)
def delete_menu(menu_id):
    menu_service.delete_menu(tenant_id=g.current_tenant.id, actor_id=current_user.id, menu_id=menu_id)
    return jsonify({"success": True, "message": "Menu deleted successfully"}), 200


# ------------------------
# Menu items
# ------------------------

@menus_bp.route("/items", methods=["POST"])
@jwt_required()
@tenant_required
@roles_required(*CONTENT_ROLES)
def create_menu_item():
    item = item_service.create_menu_item(
        tenant_id=g.current_tenant.id,
        actor_id=current_user.id,
        data=request.get_json(silent=True) or {},
    )
    return jsonify(normalize_menu_item(item)), 201


@menus_bp.route("/items/<item_id>", methods=["PUT"])
@jwt_required()
@tenant_required
@roles_required(*CONTENT_ROLES)
def update_menu_item(item_id):
    item = item_service.update_menu_item(
        tenant_id=g.current_tenant.id,
        actor_id=current_user.id,
        item_id=item_id,
        data=request.get_json(silent=True) or {},
    )
    return jsonify(normalize_menu_item(item)), 200


@menus_bp.route("/items/<item_id>", methods=["DELETE"])
@jwt_required()
@tenant_required
@roles_required(*CONTENT_ROLES)
def delete_menu_item(item_id):
    item_service.delete_menu_item(tenant_id=g.current_tenant.id, actor_id=current_user.id, item_id=item_id)
    return jsonify({"success": True, "message": "Menu item deleted successfully"}), 200


@menus_bp.route("/items/<item_id>/order", methods=["PUT"])
@jwt_required()
@tenant_required
@roles_required(*CONTENT_ROLES)
def update_menu_item_order(item_id):
    data = request.get_json(silent=True) or {}
    item = item_service.update_menu_item_order(
        tenant_id=g.current_tenant.id,
        actor_id=current_user.id,
        item_id=item_id,
        order=data.get("order"),
    )
    return jsonify(normalize_menu_item(item, include_children=False)), 200


@menus_bp.route("/items/order", methods=["PUT"])
@jwt_required()
@tenant_required
@roles_required(*CONTENT_ROLES)
def update_menu_items_order():
    data = request.get_json(silent=True) or {}
    item_service.update_menu_items_order(
        tenant_id=g.current_tenant.id,
        actor_id=current_user.id,
        items=data.get("items"),
    )
    return jsonify({"success": True, "message": "Menu items reordered"}), 200


# ------------------------
# Header / footer styles
# ------------------------

@menus_bp.route("/<menu_id>/header-style", methods=["PUT"])
@jwt_required()
@tenant_required
@roles_required(*CONTENT_ROLES)
def header_style(menu_id):
    style = update_header_style(
        tenant_id=g.current_tenant.id,
        actor_id=current_user.id,
        menu_id=menu_id,
        data=request.get_json(silent=True) or {},
    )
    return jsonify(normalize_header_style(style)), 200


@menus_bp.route("/<menu_id>/footer-style", methods=["PUT"])
@jwt_required()
@tenant_required
@roles_required(*CONTENT_ROLES)
def footer_style(menu_id):
    style = update_footer_style(
        tenant_id=g.current_tenant.id,
        actor_id=current_user.id,
        menu_id=menu_id,
        data=request.get_json(silent=True) or {},
    )
    return jsonify(normalize_footer_style(style)), 200
