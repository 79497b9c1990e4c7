from flask import request

from hotelsite import db
from hotelsite.activity import ActivityActions, log_activity
from hotelsite.auth import Role, current_user_id, optional_role, role_required
from hotelsite.booking import missing_fields
from hotelsite.errors import NotFoundError, ValidationError
from hotelsite.models import BlogPost, utcnow
from hotelsite.routes import api, json_body, ok, parse_id

LANGUAGES = ('en', 'ar')


def validate_blocks(blocks, field='content'):
    """Blog bodies are ordered lists of text or image blocks."""
    if not isinstance(blocks, list):
        raise ValidationError(f'{field} must be a list of blocks')
    for index, block in enumerate(blocks):
        if not isinstance(block, dict) or not block.get('id'):
            raise ValidationError(f'{field}[{index}] must be an object with an id')
        kind = block.get('type')
        if kind == 'text':
            if not isinstance(block.get('data'), str):
                raise ValidationError(f'{field}[{index}] text block needs data')
        elif kind == 'image':
            if not block.get('src'):
                raise ValidationError(f'{field}[{index}] image block needs src')
            if block.get('caption') is not None and not isinstance(block['caption'], str):
                raise ValidationError(f'{field}[{index}] caption must be a string')
        else:
            raise ValidationError(f'{field}[{index}] has unknown block type')
    return blocks


def blog_to_dict(blog):
    return {
        'id': blog.id,
        'authorId': blog.author_id,
        'authorName': blog.author.name if blog.author else None,
        'languageCode': blog.language_code,
        'title': blog.title,
        'titleAr': blog.title_ar,
        'excerpt': blog.excerpt,
        'excerptAr': blog.excerpt_ar,
        'content': blog.content or [],
        'contentAr': blog.content_ar,
        'category': blog.category,
        'tags': blog.tags or [],
        'coverImage': blog.cover_image,
        'readTime': blog.read_time,
        'published': blog.published,
        'metaDescription': blog.meta_description,
        'metaKeywords': blog.meta_keywords,
        'createdAt': blog.created_at.isoformat() if blog.created_at else None,
        'updatedAt': blog.updated_at.isoformat() if blog.updated_at else None,
        'publishedAt': blog.published_at.isoformat() if blog.published_at else None,
    }


def _blog_values(data, partial=False):
    if not partial:
        missing = missing_fields(data, ('title', 'category', 'content'))
        if missing:
            raise ValidationError(f"Missing required fields: {', '.join(missing)}")

    values = {}
    for key, column in (
        ('title', 'title'),
        ('titleAr', 'title_ar'),
        ('excerpt', 'excerpt'),
        ('excerptAr', 'excerpt_ar'),
        ('category', 'category'),
        ('coverImage', 'cover_image'),
        ('readTime', 'read_time'),
        ('metaDescription', 'meta_description'),
        ('metaKeywords', 'meta_keywords'),
    ):
        if key in data:
            values[column] = data[key]

    for column in ('title', 'category'):
        if column in values and not values[column]:
            raise ValidationError(f'{column} cannot be empty')
    if 'excerpt' in values or not partial:
        values['excerpt'] = values.get('excerpt') or ''

    if 'content' in data:
        values['content'] = validate_blocks(data['content'])
    if data.get('contentAr') is not None:
        values['content_ar'] = validate_blocks(data['contentAr'], 'contentAr')

    if 'tags' in data:
        tags = data['tags'] or []
        if not isinstance(tags, list) or not all(isinstance(tag, str) for tag in tags):
            raise ValidationError('tags must be a list of strings')
        values['tags'] = tags

    if 'languageCode' in data:
        if data['languageCode'] not in LANGUAGES:
            raise ValidationError('languageCode must be en or ar')
        values['language_code'] = data['languageCode']

    if 'published' in data:
        values['published'] = bool(data['published'])
    return values


def _apply(blog, values):
    was_published = blog.published
    for column, value in values.items():
        setattr(blog, column, value)
    if blog.published and not was_published:
        blog.published_at = utcnow()
    elif not blog.published:
        blog.published_at = None


def _get_blog(blog_id):
    blog = db.session.get(BlogPost, blog_id)
    if not blog:
        raise NotFoundError('Blog not found')
    return blog


@api.route('/blogs', methods=['GET'])
def get_blogs():
    # los borradores solo son visibles para administradores
    show_drafts = optional_role() >= Role.ADMIN

    blog_id = request.args.get('id')
    if blog_id:
        blog = _get_blog(parse_id(blog_id))
        if not blog.published and not show_drafts:
            raise NotFoundError('Blog not found')
        return ok(blog_to_dict(blog))

    query = BlogPost.query
    if not show_drafts:
        query = query.filter(BlogPost.published.is_(True))
    category = request.args.get('category')
    if category and category != 'all':
        query = query.filter_by(category=category)
    language = request.args.get('language')
    if language:
        query = query.filter_by(language_code=language)

    blogs = query.order_by(BlogPost.created_at.desc(), BlogPost.id.desc()).all()
    return ok([blog_to_dict(blog) for blog in blogs])


@api.route('/blogs', methods=['POST'])
@role_required(Role.ADMIN)
def create_blog():
    values = _blog_values(json_body())
    blog = BlogPost(author_id=current_user_id(), published=False)
    _apply(blog, values)
    db.session.add(blog)
    db.session.commit()

    log_activity(current_user_id(), ActivityActions.BLOG_CREATED, {'blogId': blog.id, 'title': blog.title})
    return ok(blog_to_dict(blog), 'Blog created successfully', 201)


@api.route('/blogs', methods=['PUT'])
@role_required(Role.ADMIN)
def update_blog():
    data = json_body()
    if not data.get('id'):
        raise ValidationError('Blog ID is required')
    values = _blog_values(data, partial=True)
    blog = _get_blog(parse_id(data['id']))

    _apply(blog, values)
    db.session.commit()

    log_activity(current_user_id(), ActivityActions.BLOG_UPDATED, {'blogId': blog.id, 'title': blog.title})
    return ok(blog_to_dict(blog), 'Blog updated successfully')


@api.route('/blogs', methods=['DELETE'])
@role_required(Role.ADMIN)
def delete_blog():
    blog_id = request.args.get('id')
    if not blog_id:
        raise ValidationError('Blog ID is required')
    blog = _get_blog(parse_id(blog_id))

    details = {'blogId': blog.id, 'title': blog.title}
    db.session.delete(blog)
    db.session.commit()

    log_activity(current_user_id(), ActivityActions.BLOG_DELETED, details)
    return ok(message='Blog deleted successfully')
