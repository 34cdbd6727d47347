from siteforge.extensions import db
from .base import BaseModel
from .tenant_mixin import TenantMixin

POST_STATUSES = ("DRAFT", "PUBLISHED", "ARCHIVED")


class Blog(BaseModel, TenantMixin):
    __tablename__ = "blogs"

    title = db.Column(db.String(200), nullable=False)
    slug = db.Column(db.String(200), nullable=False, index=True)
    description = db.Column(db.Text, nullable=True)
    is_active = db.Column(db.Boolean, nullable=False, default=True)

    posts = db.relationship(
        "Post",
        back_populates="blog",
        order_by="Post.created_at.desc()",
        cascade="all, delete-orphan",
        passive_deletes=True
    )

    __table_args__ = (
        db.UniqueConstraint("tenant_id", "slug", name="uq_blog_slug_per_tenant"),
    )


class Post(BaseModel, TenantMixin):
    __tablename__ = "posts"

    blog_id = db.Column(db.String(36), db.ForeignKey("blogs.id", ondelete="CASCADE"), nullable=False, index=True)
    title = db.Column(db.String(255), nullable=False)
    slug = db.Column(db.String(255), nullable=False, index=True)
    content = db.Column(db.Text, nullable=True)
    excerpt = db.Column(db.Text, nullable=True)
    featured_image = db.Column(db.String(512), nullable=True)
    status = db.Column(db.String(20), nullable=False, default="DRAFT", index=True)
    published_at = db.Column(db.DateTime, nullable=True)
    author_id = db.Column(db.String(36), db.ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    tags = db.Column(db.JSON, nullable=False, default=list)

    blog = db.relationship("Blog", back_populates="posts")
    author = db.relationship("User")

    __table_args__ = (
        db.UniqueConstraint("blog_id", "slug", name="uq_post_slug_per_blog"),
    )
