from flask import Blueprint, g, request, jsonify
from flask_jwt_extended import jwt_required, current_user

from siteforge.application.blogs import blogs as blog_service
from siteforge.constants import CONTENT_ROLES
from siteforge.errors import NotFound
from siteforge.models.tenant import FEATURE_BLOG
from siteforge.normalizers.blog import normalize_blog, normalize_post
from siteforge.utils.decorators import tenant_required, roles_required, feature_enabled

blogs_bp = Blueprint("blogs", __name__)


def _visible(post):
    if not current_user and post.status != "PUBLISHED":
        raise NotFound("Post not found")
    return post


@blogs_bp.route("", methods=["GET"])
@jwt_required()
@tenant_required
@feature_enabled(FEATURE_BLOG)
def list_blogs():
    blogs = blog_service.list_blogs(tenant_id=g.current_tenant.id)
    return jsonify([normalize_blog(b, post_count=len(b.posts)) for b in blogs])


@blogs_bp.route("/<blog_id>", methods=["GET"])
@jwt_required()
@tenant_required
@feature_enabled(FEATURE_BLOG)
def get_blog(blog_id):
    blog = blog_service.get_blog(tenant_id=g.current_tenant.id, blog_id=blog_id)
    return jsonify(normalize_blog(blog, post_count=len(blog.posts)))


@blogs_bp.route("", methods=["POST"])
@jwt_required()
@tenant_required
@roles_required(*CONTENT_ROLES)
@feature_enabled(FEATURE_BLOG)
def create_blog():
    blog = blog_service.create_blog(
        tenant_id=g.current_tenant.id,
        actor_id=current_user.id,
        data=request.get_json(silent=True) or {},
    )
    return jsonify(normalize_blog(blog)), 201


@blogs_bp.route("/<blog_id>", methods=["PUT"])
@jwt_required()
@tenant_required
@roles_required(*CONTENT_ROLES)
@feature_enabled(FEATURE_BLOG)
def update_blog(blog_id):
    blog = blog_service.update_blog(
        tenant_id=g.current_tenant.id,
        actor_id=current_user.id,
        blog_id=blog_id,
        data=request.get_json(silent=True) or {},
    )
    return jsonify(normalize_blog(blog)), 200


@blogs_bp.route("/<blog_id>", methods=["DELETE"])
@jwt_required()
@tenant_required
@roles_required(*CONTENT_ROLES)
@feature_enabled(FEATURE_BLOG)
def delete_blog(blog_id):
    blog_service.delete_blog(tenant_id=g.current_tenant.id, actor_id=current_user.id, blog_id=blog_id)
    return jsonify({"success": True, "message": "Blog deleted successfully"}), 200


# ------------------------
# Posts
# ------------------------

@blogs_bp.route("/posts", methods=["GET"])
@jwt_required(optional=True)
@feature_enabled(FEATURE_BLOG)
def list_posts():
    # Anonymous readers only ever see published posts
    status = request.args.get("status") if current_user else "PUBLISHED"
    posts = blog_service.list_posts(
        tenant_id=g.current_tenant.id,
        blog_id=request.args.get("blog_id"),
        status=status,
    )
    return jsonify([normalize_post(p) for p in posts])


@blogs_bp.route("/posts/<post_id>", methods=["GET"])
@jwt_required(optional=True)
@feature_enabled(FEATURE_BLOG)
def get_post(post_id):
    post = blog_service.get_post(tenant_id=g.current_tenant.id, post_id=post_id)
    return jsonify(normalize_post(_visible(post)))


@blogs_bp.route("/posts/by-slug/<slug>", methods=["GET"])
@jwt_required(optional=True)
@feature_enabled(FEATURE_BLOG)
def post_by_slug(slug):
    post = blog_service.post_by_slug(
        tenant_id=g.current_tenant.id,
        slug=slug,
        blog_id=request.args.get("blog_id"),
    )
    return jsonify(normalize_post(_visible(post)))


@blogs_bp.route("/posts", methods=["POST"])
@jwt_required()
@tenant_required
@roles_required(*CONTENT_ROLES)
@feature_enabled(FEATURE_BLOG)
def create_post():
    post = blog_service.create_post(
        tenant_id=g.current_tenant.id,
        actor_id=current_user.id,
        data=request.get_json(silent=True) or {},
    )
    return jsonify(normalize_post(post)), 201


@blogs_bp.route("/posts/<post_id>", methods=["PUT"])
@jwt_required()
@tenant_required
@roles_required(*CONTENT_ROLES)
@feature_enabled(FEATURE_BLOG)
def update_post(post_id):
    post = blog_service.update_post(
        tenant_id=g.current_tenant.id,
        actor_id=current_user.id,
        post_id=post_id,
        data=request.get_json(silent=True) or {},
    )
    return jsonify(normalize_post(post)), 200


@blogs_bp.route("/posts/<post_id>", methods=["DELETE"])
@jwt_required()
@tenant_required
@roles_required(*CONTENT_ROLES)
@feature_enabled(FEATURE_BLOG)
def delete_post(post_id):
    blog_service.delete_post(tenant_id=g.current_tenant.id, actor_id=current_user.id, post_id=post_id)
    return jsonify({"success": True, "message": "Post deleted successfully"}), 200
