from siteforge.extensions import db
from .base import BaseModel

role_permissions = db.Table(
    "role_permissions",
    db.Column("role_id", db.String(36), db.ForeignKey("roles.id", ondelete="CASCADE"), primary_key=True),
    db.Column("permission_id", db.String(36), db.ForeignKey("permissions.id", ondelete="CASCADE"), primary_key=True),
)


class Role(BaseModel):
    __tablename__ = "roles"

    name = db.Column(db.String(100), unique=True, nullable=False, index=True)
    description = db.Column(db.String(255), nullable=True)

    permissions = db.relationship(
        "Permission",
        secondary=role_permissions,
        back_populates="roles",
        order_by="Permission.name"
    )
    users = db.relationship("User", back_populates="role")


class Permission(BaseModel):
    __tablename__ = "permissions"

    # "resource:action", e.g. "user:read"
    name = db.Column(db.String(100), unique=True, nullable=False, index=True)
    description = db.Column(db.String(255), nullable=True)

    roles = db.relationship("Role", secondary=role_permissions, back_populates="permissions")


class UserPermission(BaseModel):
    """Per-user override of a named permission (grant or revoke)."""

    __tablename__ = "user_permissions"

    user_id = db.Column(db.String(36), db.ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    permission_name = db.Column(db.String(100), nullable=False)
    granted = db.Column(db.Boolean, nullable=False, default=True)

    __table_args__ = (
        db.UniqueConstraint("user_id", "permission_name", name="uq_user_permission"),
    )
