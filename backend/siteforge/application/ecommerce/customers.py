from decimal import Decimal

from sqlalchemy import func

from siteforge.errors import Conflict, NotFound, ValidationError
from siteforge.extensions import db
from siteforge.models.customer import Customer
from siteforge.models.order import Order
from siteforge.utils.audit import log_action
from siteforge.utils.transaction import transactional
from .money import quantize

# Orders that count towards revenue
REVENUE_STATUSES = ("PENDING", "PROCESSING", "COMPLETED")


def list_customers(*, tenant_id):
    return Customer.query.filter_by(tenant_id=tenant_id).order_by(Customer.created_at.desc()).all()


def get_customer(*, tenant_id, customer_id):
    customer = Customer.query.filter_by(tenant_id=tenant_id, id=customer_id).first()
    if not customer:
        raise NotFound("Customer not found")
    return customer


def customer_by_email(*, tenant_id, email):
    customer = Customer.query.filter_by(tenant_id=tenant_id, email=(email or "").strip().lower()).first()
    if not customer:
        raise NotFound("Customer not found")
    return customer


def create_customer(*, tenant_id, actor_id, data):
    email = (data.get("email") or "").strip().lower()
    if not email or "@" not in email:
        raise ValidationError("A valid email is required")

    if Customer.query.filter_by(tenant_id=tenant_id, email=email).first():
        raise Conflict(f"A customer with email {email} already exists")

    customer = Customer(
        tenant_id=tenant_id,
        email=email,
        first_name=data.get("first_name"),
        last_name=data.get("last_name"),
        phone=data.get("phone"),
        user_id=data.get("user_id"),
    )
    with transactional():
        db.session.add(customer)
        db.session.flush()
        log_action(action="customer.create", entity_type="customer", entity_id=customer.id,
                   payload={"email": email}, tenant_id=tenant_id, actor_id=actor_id)
    return customer


def customer_stats(*, tenant_id):
    total_customers = Customer.query.filter_by(tenant_id=tenant_id).count()

    revenue_orders = Order.query.filter(Order.tenant_id == tenant_id, Order.status.in_(REVENUE_STATUSES))
    customers_with_orders = (
        db.session.query(func.count(func.distinct(Order.customer_id)))
        .filter(Order.tenant_id == tenant_id, Order.customer_id.isnot(None))
        .scalar()
    ) or 0
    order_count = revenue_orders.count()
    total_revenue = sum((o.total for o in revenue_orders), Decimal("0"))

    return {
        "totalCustomers": total_customers,
        "customersWithOrders": customers_with_orders,
        "totalRevenue": quantize(total_revenue),
        "averageOrderValue": quantize(total_revenue / order_count) if order_count else Decimal("0.00"),
    }
