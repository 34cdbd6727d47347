from werkzeug.security import generate_password_hash, check_password_hash
from siteforge.extensions import db
from .base import BaseModel, utcnow

TENANT_ROLES = ("TenantAdmin", "TenantManager", "TenantUser")


class User(BaseModel):
    __tablename__ = 'users'

    email = db.Column(db.String(255), unique=True, nullable=False, index=True)
    password_hash = db.Column(db.String(256), nullable=False)

    first_name = db.Column(db.String(100), nullable=True)
    last_name = db.Column(db.String(100), nullable=True)
    phone_number = db.Column(db.String(50), nullable=True)

    # Platform-level role (SuperAdmin, TenantAdmin, ContentEditor...)
    role_id = db.Column(db.String(36), db.ForeignKey("roles.id", ondelete="SET NULL"), nullable=True)
    role = db.relationship("Role", back_populates="users")

    is_active = db.Column(db.Boolean, default=True, nullable=False)
    email_verified_at = db.Column(db.DateTime, nullable=True)

    memberships = db.relationship(
        "UserTenant",
        back_populates="user",
        cascade="all, delete-orphan",
        passive_deletes=True
    )
    permission_overrides = db.relationship(
        "UserPermission",
        cascade="all, delete-orphan",
        passive_deletes=True
    )

    @property
    def role_name(self):
        return self.role.name if self.role else "TenantUser"

    @property
    def full_name(self):
        return " ".join(p for p in (self.first_name, self.last_name) if p)

    def set_password(self, password):
        self.password_hash = generate_password_hash(password)

    def check_password(self, password):
        return check_password_hash(self.password_hash, password)

    def membership_for(self, tenant_id):
        for membership in self.memberships:
            if membership.tenant_id == tenant_id:
                return membership
        return None


class UserTenant(BaseModel):
    __tablename__ = "user_tenants"

    user_id = db.Column(db.String(36), db.ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    tenant_id = db.Column(db.String(36), db.ForeignKey("tenants.id", ondelete="CASCADE"), nullable=False, index=True)
    role = db.Column(db.String(50), nullable=False, default="TenantUser")
    is_active = db.Column(db.Boolean, default=True, nullable=False)
    joined_at = db.Column(db.DateTime, default=utcnow, nullable=False)

    user = db.relationship("User", back_populates="memberships")
    tenant = db.relationship("Tenant", back_populates="memberships")

    __table_args__ = (
        db.UniqueConstraint("user_id", "tenant_id", name="uq_user_tenant"),
    )
