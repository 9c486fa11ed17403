"""Tests for uploads, serving stored uploads and ZIP download."""

import io
import zipfile

import pytest

pytestmark = pytest.mark.integration


class TestUpload:

    def test_upload_and_serve(self, client, auth_headers):
        response = client.post('/api/upload', headers=auth_headers, content_type='multipart/form-data', data={
            'files': [(io.BytesIO(b'wireframe notes'), 'notes.txt', 'text/plain')],
        })
        assert response.status_code == 200
        body = response.get_json()
        assert body['message'] == 'Files uploaded successfully'
        stored = body['files'][0]
        assert stored['originalName'] == 'notes.txt'
        assert stored['size'] == len(b'wireframe notes')

        served = client.get(stored['url'])
        assert served.status_code == 200
        assert served.data == b'wireframe notes'
        assert 'X-Frame-Options' not in served.headers

    def test_rejects_disallowed_type(self, client, auth_headers):
        response = client.post('/api/upload', headers=auth_headers, content_type='multipart/form-data', data={
            'files': [(io.BytesIO(b'alert(1)'), 'evil.js', 'text/javascript')],
        })
        assert response.status_code == 400
        assert response.get_json()['error'].startswith('Invalid file type')

    def test_no_files(self, client, auth_headers):
        response = client.post('/api/upload', headers=auth_headers, data={})
        assert response.status_code == 400
        assert response.get_json()['error'] == 'No files uploaded'

    def test_requires_token(self, client):
        response = client.post('/api/upload', content_type='multipart/form-data', data={
            'files': [(io.BytesIO(b'x'), 'a.txt', 'text/plain')],
        })
        assert response.status_code == 401

    def test_missing_stored_file(self, client):
        assert client.get('/uploads/does-not-exist.png').status_code == 404


class TestDownload:

    def test_zip_contents(self, client, auth_headers):
        response = client.post('/api/download', headers=auth_headers, json={
            'jsx': 'function Counter() {}', 'css': '.counter{}', 'filename': 'Counter',
        })
        assert response.status_code == 200
        assert response.mimetype == 'application/zip'
        assert 'attachment' in response.headers['Content-Disposition']
        assert 'Counter.zip' in response.headers['Content-Disposition']

        with zipfile.ZipFile(io.BytesIO(response.data)) as archive:
            assert sorted(archive.namelist()) == ['Counter.css', 'Counter.jsx', 'README.md', 'package.json']
            assert archive.read('Counter.jsx') == b'function Counter() {}'

    def test_default_archive_name(self, client, auth_headers):
        response = client.post('/api/download', headers=auth_headers, json={'tsx': 'const A = () => null;'})
        assert 'component.zip' in response.headers['Content-Disposition']

    def test_no_code(self, client, auth_headers):
        response = client.post('/api/download', headers=auth_headers, json={'jsx': '', 'tsx': '', 'css': ''})
        assert response.status_code == 400
        assert response.get_json()['error'] == 'No code to download'

    def test_requires_token(self, client):
        assert client.post('/api/download', json={'jsx': 'x'}).status_code == 401
