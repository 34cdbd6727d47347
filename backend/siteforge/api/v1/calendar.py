from flask import Blueprint, g, request, jsonify
from flask_jwt_extended import jwt_required, current_user

from siteforge.application.calendar import bookings, services
from siteforge.constants import BOOKING_ROLES
from siteforge.models.tenant import FEATURE_BOOKING
from siteforge.normalizers.calendar import normalize_booking, normalize_service
from siteforge.utils.decorators import tenant_required, roles_required, feature_enabled

calendar_bp = Blueprint("calendar", __name__)


# ------------------------
# Services
# ------------------------

@calendar_bp.route("/services", methods=["GET"])
@feature_enabled(FEATURE_BOOKING)
def list_services():
    active = request.args.get("active")
    found = services.list_services(
        tenant_id=g.current_tenant.id,
        active=None if active is None else active.lower() in ("1", "true", "yes"),
    )
    return jsonify([normalize_service(s) for s in found])


@calendar_bp.route("/services/<service_id>", methods=["GET"])
@feature_enabled(FEATURE_BOOKING)
def get_service(service_id):
    return jsonify(normalize_service(services.get_service(tenant_id=g.current_tenant.id, service_id=service_id)))


@calendar_bp.route("/services", methods=["POST"])
@jwt_required()
@tenant_required
@roles_required(*BOOKING_ROLES)
@feature_enabled(FEATURE_BOOKING)
def create_service():
    service = services.create_service(
        tenant_id=g.current_tenant.id,
        actor_id=current_user.id,
        data=request.get_json(silent=True) or {},
    )
    return jsonify(normalize_service(service)), 201


@calendar_bp.route("/services/<service_id>", methods=["PUT"])
@jwt_required()
@tenant_required
@roles_required(*BOOKING_ROLES)
@feature_enabled(FEATURE_BOOKING)
def update_service(service_id):
    service = services.update_service(
        tenant_id=g.current_tenant.id,
        actor_id=current_user.id,
        service_id=service_id,
        data=request.get_json(silent=True) or {},
    )
    return jsonify(normalize_service(service)), 200


@calendar_bp.route("/services/<service_id>/availability", methods=["GET"])
@feature_enabled(FEATURE_BOOKING)
def available_slots(service_id):
    slots = bookings.available_slots(
        tenant=g.current_tenant,
        service_id=service_id,
        date=request.args.get("date"),
        staff_user_id=request.args.get("staff_user_id"),
    )
    return jsonify({"slots": [slot.isoformat() for slot in slots]})


# ------------------------
# Bookings
# ------------------------

@calendar_bp.route("/bookings", methods=["GET"])
@jwt_required()
@tenant_required
@roles_required(*BOOKING_ROLES)
@feature_enabled(FEATURE_BOOKING)
def list_bookings():
    found = bookings.list_bookings(
        tenant_id=g.current_tenant.id,
        status=request.args.get("status"),
        date_from=request.args.get("date_from"),
        date_to=request.args.get("date_to"),
    )
    return jsonify([normalize_booking(b) for b in found])


@calendar_bp.route("/bookings/<booking_id>", methods=["GET"])
@jwt_required()
@tenant_required
@roles_required(*BOOKING_ROLES)
@feature_enabled(FEATURE_BOOKING)
def get_booking(booking_id):
    return jsonify(normalize_booking(bookings.get_booking(tenant_id=g.current_tenant.id, booking_id=booking_id)))


@calendar_bp.route("/bookings", methods=["POST"])
@jwt_required(optional=True)
@feature_enabled(FEATURE_BOOKING)
def create_booking():
    # Customers book anonymously from the public site
    booking = bookings.create_booking(
        tenant_id=g.current_tenant.id,
        actor_id=current_user.id if current_user else None,
        data=request.get_json(silent=True) or {},
    )
    return jsonify(normalize_booking(booking)), 201


@calendar_bp.route("/bookings/<booking_id>/status", methods=["PUT"])
@jwt_required()
@tenant_required
@roles_required(*BOOKING_ROLES)
@feature_enabled(FEATURE_BOOKING)
def update_booking_status(booking_id):
    data = request.get_json(silent=True) or {}
    booking = bookings.update_booking_status(
        tenant_id=g.current_tenant.id,
        actor_id=current_user.id,
        booking_id=booking_id,
        status=data.get("status"),
    )
    return jsonify(normalize_booking(booking)), 200


@calendar_bp.route("/bookings/<booking_id>/cancel", methods=["POST"])
@jwt_required()
@tenant_required
@roles_required(*BOOKING_ROLES)
@feature_enabled(FEATURE_BOOKING)
def cancel_booking(booking_id):
    booking = bookings.cancel_booking(
        tenant_id=g.current_tenant.id,
        actor_id=current_user.id,
        booking_id=booking_id,
    )
    return jsonify(normalize_booking(booking)), 200
