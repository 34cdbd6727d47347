from .audit_log import AuditLog
from .blog import Blog, Post
from .booking import Booking, Service
from .cms_component import CMSComponent
from .cms_section import CMSSection, SectionComponent
from .customer import Customer
from .discount import Discount
from .menu import FooterStyle, HeaderStyle, Menu, MenuItem
from .order import Order, OrderItem
from .page import Page
from .page_version import PageVersion
from .product import Product, ProductCategory
from .role import Permission, Role, UserPermission
from .section import PageSection
from .shop import Currency, Shop, Tax
from .tenant import Tenant
from .user import User, UserTenant

__all__ = [
    "AuditLog", "Blog", "Booking", "CMSComponent", "CMSSection", "Currency",
    "Customer", "Discount", "FooterStyle", "HeaderStyle", "Menu", "MenuItem",
    "Order", "OrderItem", "Page", "PageSection", "PageVersion", "Permission",
    "Product", "ProductCategory", "Role", "SectionComponent", "Service",
    "Shop", "Tax", "Tenant", "User", "UserPermission", "UserTenant",
]
