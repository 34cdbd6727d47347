from siteforge.errors import Conflict, NotFound, ValidationError
from siteforge.extensions import db
from siteforge.models.blog import POST_STATUSES, Blog, Post
from siteforge.models.base import utcnow
from siteforge.utils.audit import log_action
from siteforge.utils.dates import parse_datetime
from siteforge.utils.slugs import slugify
from siteforge.utils.transaction import transactional

BLOG_FIELDS = ("title", "slug", "description", "is_active")
POST_FIELDS = ("title", "slug", "content", "excerpt", "featured_image", "status", "tags")


def list_blogs(*, tenant_id):
    return Blog.query.filter_by(tenant_id=tenant_id).order_by(Blog.title.asc()).all()


def get_blog(*, tenant_id, blog_id):
    blog = Blog.query.filter_by(tenant_id=tenant_id, id=blog_id).first()
    if not blog:
        raise NotFound("Blog not found")
    return blog


def create_blog(*, tenant_id, actor_id, data):
    title = (data.get("title") or "").strip()
    if not title:
        raise ValidationError("Blog title is required")

    slug = slugify(data.get("slug") or title)
    if Blog.query.filter_by(tenant_id=tenant_id, slug=slug).first():
        raise Conflict(f"A blog with slug {slug} already exists")

    blog = Blog(
        tenant_id=tenant_id,
        title=title,
        slug=slug,
        description=data.get("description"),
        is_active=data.get("is_active", True),
    )
    with transactional():
        db.session.add(blog)
        db.session.flush()
        log_action(
            action="blog.create",
            entity_type="blog",
            entity_id=blog.id,
            payload={"slug": slug},
            tenant_id=tenant_id,
            actor_id=actor_id,
        )
    return blog


def update_blog(*, tenant_id, actor_id, blog_id, data):
    blog = get_blog(tenant_id=tenant_id, blog_id=blog_id)

    if "title" in data and not (data["title"] or "").strip():
        raise ValidationError("Blog title is required")

    if data.get("slug"):
        data = dict(data, slug=slugify(data["slug"]))
        if data["slug"] != blog.slug and Blog.query.filter_by(tenant_id=tenant_id, slug=data["slug"]).first():
            raise Conflict(f"A blog with slug {data['slug']} already exists")

    with transactional():
        for field in BLOG_FIELDS:
            if field in data and data[field] is not None:
                setattr(blog, field, data[field])
        log_action(
            action="blog.update",
            entity_type="blog",
            entity_id=blog.id,
            payload={"fields": sorted(f for f in BLOG_FIELDS if f in data)},
            tenant_id=tenant_id,
            actor_id=actor_id,
        )
    return blog


def delete_blog(*, tenant_id, actor_id, blog_id):
    blog = get_blog(tenant_id=tenant_id, blog_id=blog_id)
    with transactional():
        log_action(
            action="blog.delete",
            entity_type="blog",
            entity_id=blog.id,
            payload={"slug": blog.slug, "posts": len(blog.posts)},
            tenant_id=tenant_id,
            actor_id=actor_id,
        )
        db.session.delete(blog)
    return True


def list_posts(*, tenant_id, blog_id=None, status=None):
    query = Post.query.filter_by(tenant_id=tenant_id)
    if blog_id:
        query = query.filter_by(blog_id=blog_id)
    if status:
        if status not in POST_STATUSES:
            raise ValidationError(f"Invalid status: {status}")
        query = query.filter_by(status=status)
    return query.order_by(Post.created_at.desc()).all()


def get_post(*, tenant_id, post_id):
    post = Post.query.filter_by(tenant_id=tenant_id, id=post_id).first()
    if not post:
        raise NotFound("Post not found")
    return post


def post_by_slug(*, tenant_id, slug, blog_id=None):
    query = Post.query.filter_by(tenant_id=tenant_id, slug=slug)
    if blog_id:
        query = query.filter_by(blog_id=blog_id)
    post = query.order_by(Post.created_at.asc()).first()
    if not post:
        raise NotFound("Post not found")
    return post


def _clean_post_fields(data):
    fields = {f: data[f] for f in POST_FIELDS if f in data}

    if "status" in fields and fields["status"] not in POST_STATUSES:
        raise ValidationError(f"Invalid status: {fields['status']}")
    if "tags" in fields:
        tags = fields["tags"] or []
        if not isinstance(tags, list) or not all(isinstance(t, str) for t in tags):
            raise ValidationError("tags must be a list of strings")
        fields["tags"] = tags
    if "published_at" in data:
        fields["published_at"] = parse_datetime(data["published_at"], "published_at")
    return fields


def _stamp_publication(post):
    if post.status == "PUBLISHED" and post.published_at is None:
        post.published_at = utcnow()


def create_post(*, tenant_id, actor_id, data):
    blog = get_blog(tenant_id=tenant_id, blog_id=data.get("blog_id"))

    title = (data.get("title") or "").strip()
    if not title:
        raise ValidationError("Post title is required")

    fields = _clean_post_fields(data)
    fields["title"] = title
    fields["slug"] = slugify(data.get("slug") or title)
    if not fields["slug"]:
        raise ValidationError("Post slug cannot be empty")

    if Post.query.filter_by(blog_id=blog.id, slug=fields["slug"]).first():
        raise Conflict(f"A post with slug {fields['slug']} already exists in this blog")

    post = Post(tenant_id=tenant_id, blog_id=blog.id, author_id=actor_id, status="DRAFT", tags=[])
    for field, value in fields.items():
        setattr(post, field, value)
    _stamp_publication(post)

    with transactional():
        db.session.add(post)
        db.session.flush()
        log_action(
            action="post.create",
            entity_type="post",
            entity_id=post.id,
            payload={"blog_id": blog.id, "slug": post.slug, "status": post.status},
            tenant_id=tenant_id,
            actor_id=actor_id,
        )
    return post


def update_post(*, tenant_id, actor_id, post_id, data):
    post = get_post(tenant_id=tenant_id, post_id=post_id)
    fields = _clean_post_fields(data)

    if "title" in fields and not (fields["title"] or "").strip():
        raise ValidationError("Post title is required")
    if "slug" in fields:
        fields["slug"] = slugify(fields["slug"] or post.title)
        if fields["slug"] != post.slug and Post.query.filter_by(blog_id=post.blog_id, slug=fields["slug"]).first():
            raise Conflict(f"A post with slug {fields['slug']} already exists in this blog")

    with transactional():
        for field, value in fields.items():
            setattr(post, field, value)
        _stamp_publication(post)
        log_action(
            action="post.update",
            entity_type="post",
            entity_id=post.id,
            payload={"fields": sorted(fields.keys())},
            tenant_id=tenant_id,
            actor_id=actor_id,
        )
    return post


def delete_post(*, tenant_id, actor_id, post_id):
    post = get_post(tenant_id=tenant_id, post_id=post_id)
    with transactional():
        log_action(
            action="post.delete",
            entity_type="post",
            entity_id=post.id,
            payload={"slug": post.slug},
            tenant_id=tenant_id,
            actor_id=actor_id,
        )
        db.session.delete(post)
    return True
