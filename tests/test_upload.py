import io

import boto3
import pytest
from botocore.stub import ANY, Stubber

from hotelsite import storage


@pytest.fixture
def uploads(monkeypatch):
    calls = []

    def fake_upload(body, key, content_type):
        calls.append((key, len(body), content_type))
        return f'https://storage.test/test-bucket/{key}'

    monkeypatch.setattr(storage, 'upload_file', fake_upload)
    return calls


def image_form(size=1024, content_type='image/png', filename='room.png', **extra):
    form = {'file': (io.BytesIO(b'\x89PNG' + b'0' * (size - 4)), filename, content_type)}
    form.update(extra)
    return form


def test_upload_image(client, admin, auth_headers, uploads):
    response = client.post(
        '/api/upload', data=image_form(type='hotels'), headers=auth_headers(admin),
        content_type='multipart/form-data',
    )
    assert response.status_code == 200
    data = response.get_json()['data']
    assert data['filename'].startswith('hotels/')
    assert data['filename'].endswith('.png')
    assert data['url'].endswith(data['filename'])
    assert data['size'] == 1024
    assert data['type'] == 'image/png'
    assert len(uploads) == 1


def test_upload_rejects_large_files(client, admin, auth_headers, uploads):
    response = client.post(
        '/api/upload', data=image_form(size=5 * 1024 * 1024 + 1), headers=auth_headers(admin),
        content_type='multipart/form-data',
    )
    assert response.status_code == 400
    assert uploads == []


def test_upload_rejects_non_images(client, admin, auth_headers, uploads):
    response = client.post(
        '/api/upload', data=image_form(content_type='application/pdf', filename='menu.pdf'),
        headers=auth_headers(admin), content_type='multipart/form-data',
    )
    assert response.status_code == 400
    assert response.get_json()['error'] == 'Invalid file type. Only images are allowed.'
    assert uploads == []


def test_upload_requires_file(client, admin, auth_headers, uploads):
    response = client.post('/api/upload', data={}, headers=auth_headers(admin), content_type='multipart/form-data')
    assert response.status_code == 400
    assert uploads == []


def test_upload_requires_admin(client, user, auth_headers, uploads):
    response = client.post(
        '/api/upload', data=image_form(), headers=auth_headers(user), content_type='multipart/form-data',
    )
    assert response.status_code == 403
    assert uploads == []


def test_build_key_falls_back_to_content_type():
    key = storage.build_key('blog', 'photo', 'image/webp')
    assert key.startswith('blog/')
    assert key.endswith('.webp')


def test_body_over_request_limit_is_rejected(client, admin, auth_headers, uploads):
    response = client.post(
        '/api/upload', data=image_form(size=17 * 1024 * 1024), headers=auth_headers(admin),
        content_type='multipart/form-data',
    )
    assert response.status_code == 400
    assert response.get_json() == {'success': False, 'error': 'File size exceeds 5MB limit'}
    assert uploads == []


@pytest.fixture
def stubbed_s3(monkeypatch):
    s3 = boto3.client(
        's3', region_name='us-east-1', aws_access_key_id='testing', aws_secret_access_key='testing',
    )
    monkeypatch.setattr(storage, '_client', lambda: s3)
    with Stubber(s3) as stubber:
        yield stubber
        stubber.assert_no_pending_responses()


def test_upload_file_puts_object(app, stubbed_s3):
    stubbed_s3.add_response('put_object', {}, {
        'Bucket': 'test-bucket',
        'Key': 'hotels/lobby.png',
        'Body': b'image-bytes',
        'ContentType': 'image/png',
    })

    url = storage.upload_file(b'image-bytes', 'hotels/lobby.png', 'image/png')
    assert url == 'https://storage.test/test-bucket/hotels/lobby.png'


def test_public_url_without_custom_host(app):
    app.config.update(S3_PUBLIC_URL=None, S3_REGION='me-south-1')
    assert storage.public_url('blog/cover.jpg') == 'https://test-bucket.s3.me-south-1.amazonaws.com/blog/cover.jpg'


def test_storage_failure_is_500(client, admin, auth_headers, stubbed_s3):
    stubbed_s3.add_client_error('put_object', service_error_code='AccessDenied', http_status_code=403)

    response = client.post(
        '/api/upload', data=image_form(type='rooms'), headers=auth_headers(admin),
        content_type='multipart/form-data',
    )
    assert response.status_code == 500
    assert response.get_json() == {'success': False, 'error': 'Failed to upload file'}


def test_upload_through_storage_client(client, admin, auth_headers, stubbed_s3):
    stubbed_s3.add_response('put_object', {}, {
        'Bucket': 'test-bucket',
        'Key': ANY,
        'Body': ANY,
        'ContentType': 'image/webp',
    })

    response = client.post(
        '/api/upload', data=image_form(content_type='image/webp', filename='pool.webp', type='hotels'),
        headers=auth_headers(admin), content_type='multipart/form-data',
    )
    assert response.status_code == 200
    data = response.get_json()['data']
    assert data['url'] == f"https://storage.test/test-bucket/{data['filename']}"
