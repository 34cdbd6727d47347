from siteforge.extensions import db
from .base import BaseModel
from .tenant_mixin import TenantMixin


class Menu(BaseModel, TenantMixin):
    __tablename__ = "menus"

    name = db.Column(db.String(200), nullable=False)
    location = db.Column(db.String(100), nullable=True, index=True)  # header, footer, sidebar

    items = db.relationship(
        "MenuItem",
        back_populates="menu",
        order_by="MenuItem.order",
        cascade="all, delete-orphan",
        passive_deletes=True
    )
    header_style = db.relationship(
        "HeaderStyle", uselist=False, cascade="all, delete-orphan", passive_deletes=True
    )
    footer_style = db.relationship(
        "FooterStyle", uselist=False, cascade="all, delete-orphan", passive_deletes=True
    )

    __table_args__ = (
        db.UniqueConstraint("tenant_id", "name", name="uq_menu_name_per_tenant"),
    )


class MenuItem(BaseModel):
    __tablename__ = "menu_items"

    menu_id = db.Column(db.String(36), db.ForeignKey("menus.id", ondelete="CASCADE"), nullable=False, index=True)
    parent_id = db.Column(db.String(36), db.ForeignKey("menu_items.id", ondelete="CASCADE"), nullable=True, index=True)
    title = db.Column(db.String(200), nullable=False)
    url = db.Column(db.String(512), nullable=True)
    page_id = db.Column(db.String(36), db.ForeignKey("pages.id", ondelete="SET NULL"), nullable=True)
    target = db.Column(db.String(20), nullable=True)  # _self, _blank
    icon = db.Column(db.String(100), nullable=True)
    order = db.Column(db.Integer, nullable=False, default=0)

    menu = db.relationship("Menu", back_populates="items")
    page = db.relationship("Page")
    children = db.relationship(
        "MenuItem",
        backref=db.backref("parent", remote_side="MenuItem.id"),
        order_by="MenuItem.order",
        cascade="all",
        passive_deletes=True
    )


class HeaderStyle(BaseModel):
    __tablename__ = "header_styles"

    menu_id = db.Column(db.String(36), db.ForeignKey("menus.id", ondelete="CASCADE"), nullable=False, unique=True)
    transparency = db.Column(db.Integer, nullable=False, default=0)
    header_size = db.Column(db.String(10), nullable=False, default="md")
    menu_alignment = db.Column(db.String(10), nullable=False, default="right")
    menu_button_style = db.Column(db.String(10), nullable=False, default="default")
    mobile_menu_style = db.Column(db.String(20), nullable=False, default="dropdown")
    mobile_menu_position = db.Column(db.String(10), nullable=False, default="right")
    transparent_header = db.Column(db.Boolean, nullable=False, default=False)
    border_bottom = db.Column(db.Boolean, nullable=False, default=False)
    advanced_options = db.Column(db.JSON, nullable=True)


class FooterStyle(BaseModel):
    __tablename__ = "footer_styles"

    menu_id = db.Column(db.String(36), db.ForeignKey("menus.id", ondelete="CASCADE"), nullable=False, unique=True)
    transparency = db.Column(db.Integer, nullable=False, default=0)
    column_layout = db.Column(db.String(10), nullable=False, default="grid")
    social_alignment = db.Column(db.String(10), nullable=False, default="center")
    border_top = db.Column(db.Boolean, nullable=False, default=False)
    alignment = db.Column(db.String(10), nullable=False, default="left")
    padding = db.Column(db.String(10), nullable=False, default="medium")
    width = db.Column(db.String(10), nullable=False, default="container")
    advanced_options = db.Column(db.JSON, nullable=True)
