import pytest

from hotelsite.errors import ValidationError
from hotelsite.models import BlogPost
from hotelsite.routes.blogs import validate_blocks

POST = {
    'title': 'Top 5 things to do in AlUla',
    'titleAr': 'أفضل خمسة أشياء في العلا',
    'category': 'travel',
    'tags': ['alula', 'desert'],
    'content': [
        {'id': 'b1', 'type': 'text', 'data': 'Start at Hegra.'},
        {'id': 'b2', 'type': 'image', 'src': 'https://storage.test/blog/hegra.jpg', 'caption': 'Hegra'},
    ],
}


def test_validate_blocks_accepts_text_and_images():
    assert validate_blocks(POST['content']) == POST['content']


@pytest.mark.parametrize('block', [
    {'id': 'b1', 'type': 'text'},
    {'id': 'b1', 'type': 'image'},
    {'id': 'b1', 'type': 'image', 'src': 'x.jpg', 'caption': 3},
    {'id': 'b1', 'type': 'video', 'src': 'x.mp4'},
    {'type': 'text', 'data': 'no id'},
])
def test_validate_blocks_rejects_malformed(block):
    with pytest.raises(ValidationError):
        validate_blocks([block])


def test_drafts_hidden_from_public(client, admin, auth_headers):
    headers = auth_headers(admin)
    created = client.post('/api/blogs', json=POST, headers=headers)
    assert created.status_code == 201
    blog = created.get_json()['data']
    assert blog['published'] is False
    assert blog['publishedAt'] is None

    assert client.get('/api/blogs').get_json()['data'] == []
    assert client.get(f"/api/blogs?id={blog['id']}").status_code == 404
    assert len(client.get('/api/blogs', headers=headers).get_json()['data']) == 1


def test_publishing_stamps_published_at(client, admin, auth_headers):
    headers = auth_headers(admin)
    blog_id = client.post('/api/blogs', json=POST, headers=headers).get_json()['data']['id']

    response = client.put('/api/blogs', json={'id': blog_id, 'published': True}, headers=headers)
    assert response.status_code == 200
    data = response.get_json()['data']
    assert data['publishedAt'] is not None
    assert data['title'] == POST['title']

    public = client.get('/api/blogs?category=travel').get_json()['data']
    assert [blog['id'] for blog in public] == [blog_id]
    assert client.get('/api/blogs?category=food').get_json()['data'] == []


def test_blog_writes_require_admin(client, user, auth_headers):
    assert client.post('/api/blogs', json=POST).status_code == 401
    assert client.post('/api/blogs', json=POST, headers=auth_headers(user)).status_code == 403
    assert BlogPost.query.count() == 0


def test_create_blog_missing_fields(client, admin, auth_headers):
    response = client.post('/api/blogs', json={'title': 'Draft'}, headers=auth_headers(admin))
    assert response.status_code == 400
    assert response.get_json()['error'] == 'Missing required fields: category, content'


def test_delete_blog(client, admin, auth_headers):
    headers = auth_headers(admin)
    blog_id = client.post('/api/blogs', json=POST, headers=headers).get_json()['data']['id']

    assert client.delete(f'/api/blogs?id={blog_id}', headers=headers).status_code == 200
    assert client.delete(f'/api/blogs?id={blog_id}', headers=headers).status_code == 404
