from siteforge.utils.dates import isoformat


def normalize_blog(blog, post_count=None):
    data = {
        "id": blog.id,
        "title": blog.title,
        "slug": blog.slug,
        "description": blog.description,
        "is_active": blog.is_active,
        "created_at": isoformat(blog.created_at),
        "updated_at": isoformat(blog.updated_at),
    }
    if post_count is not None:
        data["post_count"] = post_count
    return data


def normalize_post(post):
    return {
        "id": post.id,
        "blog_id": post.blog_id,
        "title": post.title,
        "slug": post.slug,
        "content": post.content,
        "excerpt": post.excerpt,
        "featured_image": post.featured_image,
        "status": post.status,
        "published_at": isoformat(post.published_at),
        "author_id": post.author_id,
        "tags": post.tags or [],
        "created_at": isoformat(post.created_at),
        "updated_at": isoformat(post.updated_at),
    }
