"""Tests for the file service HTTP API."""

import pytest
from fastapi.testclient import TestClient

from fileservice.main import app


@pytest.fixture
def client(test_db, blob_store, offline_ranking):
    """Create FastAPI test client."""
    with TestClient(app) as test_client:
        yield test_client


def register(client, email):
    response = client.post('/auth/register', json={'email': email, 'password': 'password123'})
    assert response.status_code == 201
    return {'Authorization': f"Bearer {response.json()['api_key']}"}


def upload(client, headers, name='notes.txt', content=b'hello world', **data):
    response = client.post(
        '/files',
        files={'file': (name, content, 'text/plain')},
        data=data,
        headers=headers
    )
    assert response.status_code == 201, response.text
    return response.json()


@pytest.fixture
def alice(client):
    return register(client, 'alice@example.com')


@pytest.fixture
def bob(client):
    return register(client, 'bob@example.com')


class TestHealth:
    def test_root_endpoint(self, client):
        response = client.get('/')
        assert response.status_code == 200
        assert response.json()['status'] == 'running'
        assert 'X-Request-ID' in response.headers

    def test_health_and_ready(self, client):
        assert client.get('/health').json()['status'] == 'healthy'
        ready = client.get('/ready').json()
        assert ready['ready'] is True
        assert ready['ai_search'] is False


class TestAuthEndpoints:
    def test_duplicate_registration(self, client, alice):
        response = client.post('/auth/register', json={'email': 'ALICE@example.com', 'password': 'x'})
        assert response.status_code == 400
        assert response.json()['code'] == 'USER_ALREADY_EXISTS'

    def test_register_requires_email_and_password(self, client):
        assert client.post('/auth/register', json={'email': 'a@example.com', 'password': ''}).status_code == 422
        assert client.post('/auth/register', json={'password': 'secret'}).status_code == 422

    def test_login(self, client, alice):
        response = client.post('/auth/login', json={'email': 'alice@example.com', 'password': 'password123'})
        assert response.status_code == 200
        assert response.json()['api_key'].startswith('sbx_')

    def test_bad_login(self, client, alice):
        response = client.post('/auth/login', json={'email': 'alice@example.com', 'password': 'wrong'})
        assert response.status_code == 401
        assert response.json()['code'] == 'INVALID_CREDENTIALS'

    def test_missing_and_unknown_api_key(self, client):
        assert client.get('/files').status_code == 401
        response = client.get('/files', headers={'Authorization': 'Bearer sbx_unknown'})
        assert response.status_code == 401
        assert response.json()['code'] == 'INVALID_API_KEY'


class TestFileEndpoints:
    def test_upload_and_list(self, client, alice):
        created = upload(client, alice, description='Shopping list', tags='home, todo,home', is_public='true')

        assert created['file_name'] == 'notes.txt'
        assert created['file_size'] == len(b'hello world')
        assert created['tags'] == ['home', 'todo']
        assert created['is_public'] is True

        files = client.get('/files', headers=alice).json()['files']
        assert [f['file_id'] for f in files] == [created['file_id']]

    def test_empty_upload(self, client, alice):
        response = client.post('/files', files={'file': ('empty.txt', b'', 'text/plain')}, headers=alice)
        assert response.status_code == 400
        assert response.json()['code'] == 'INVALID_UPLOAD'

    def test_forbidden_vs_not_found(self, client, alice, bob):
        created = upload(client, alice)

        forbidden = client.get(f"/files/{created['file_id']}", headers=bob)
        assert forbidden.status_code == 403
        assert forbidden.json()['code'] == 'ACCESS_FORBIDDEN'

        missing = client.get('/files/no-such-file', headers=bob)
        assert missing.status_code == 404
        assert missing.json()['code'] == 'FILE_NOT_FOUND'

    def test_get_counts_view(self, client, alice):
        created = upload(client, alice)
        body = client.get(f"/files/{created['file_id']}", headers=alice).json()
        assert body['view_count'] == 1

    def test_download(self, client, alice):
        created = upload(client, alice, content=b'payload bytes')

        response = client.get(f"/files/{created['file_id']}/download", headers=alice)
        assert response.status_code == 200
        assert response.content == b'payload bytes'
        assert 'attachment' in response.headers['content-disposition']

        stats = client.get(f"/files/{created['file_id']}", headers=alice).json()
        assert stats['download_count'] == 1

    def test_upload_is_persisted(self, client, alice):
        response = client.post(
            '/files',
            files={'file': ('report.csv', b'a,b\n1,2\n', 'text/csv')},
            data={'tags': 'data'},
            headers=alice
        )
        assert response.status_code == 201
        file_id = response.json()['file_id']

        stored = client.get(f'/files/{file_id}', headers=alice).json()
        assert stored['file_name'] == 'report.csv'
        assert stored['tags'] == ['data']
        assert stored['content_type'] == 'text/csv'

    def test_download_non_ascii_name(self, client, alice):
        created = upload(client, alice, name='отчёт.txt', content=b'data')

        response = client.get(f"/files/{created['file_id']}/download", headers=alice)
        assert response.status_code == 200
        assert response.content == b'data'
        disposition = response.headers['content-disposition']
        assert 'filename="_____.txt"' in disposition
        assert "filename*=UTF-8''%D0%BE%D1%82%D1%87%D1%91%D1%82.txt" in disposition

    def test_view_and_download_persist_popularity_score(self, client, alice):
        created = upload(client, alice, content=b'payload')
        file_id = created['file_id']

        viewed = client.get(f'/files/{file_id}', headers=alice).json()
        assert viewed['view_count'] == 1
        assert viewed['last_accessed_date'] is not None

        client.get(f'/files/{file_id}/download', headers=alice)
        after_download = client.get(f'/files/{file_id}', headers=alice).json()
        assert after_download['download_count'] == 1
        assert after_download['view_count'] == 2
        # log10(2) * 40 + log10(3) * 20 + a fresh recency bonus of 40
        expected = 0.30103 * 40 + 0.47712 * 20 + 40
        assert after_download['popularity_score'] == pytest.approx(expected, abs=0.01)
        assert after_download['popularity_score'] > viewed['popularity_score']

    def test_share_grants_access(self, client, alice, bob):
        created = upload(client, alice)

        response = client.post(
            f"/files/{created['file_id']}/share",
            json={'emails': ['BOB@example.com']},
            headers=alice
        )
        assert response.status_code == 200
        assert response.json()['shared_with'] == ['bob@example.com']

        assert client.get(f"/files/{created['file_id']}", headers=bob).status_code == 200
        shared = client.get('/files/shared', headers=bob).json()['files']
        assert [f['file_id'] for f in shared] == [created['file_id']]

    def test_only_owner_can_share(self, client, alice, bob):
        created = upload(client, alice, is_public='true')
        response = client.post(f"/files/{created['file_id']}/share", json={'emails': ['x@example.com']}, headers=bob)
        assert response.status_code == 403

    def test_share_with_no_recipients(self, client, alice):
        created = upload(client, alice)
        response = client.post(f"/files/{created['file_id']}/share", json={'emails': []}, headers=alice)
        assert response.status_code == 400
        assert response.json()['code'] == 'INVALID_REQUEST'

    def test_update_metadata(self, client, alice):
        created = upload(client, alice)
        response = client.put(
            f"/files/{created['file_id']}",
            json={'description': 'updated', 'tags': ['a', 'b'], 'is_public': True},
            headers=alice
        )
        body = response.json()
        assert response.status_code == 200
        assert body['description'] == 'updated'
        assert body['tags'] == ['a', 'b']
        assert body['popularity_score'] == pytest.approx(created['popularity_score'])

    def test_archive_hides_file_from_listing(self, client, alice):
        created = upload(client, alice)
        assert client.post(f"/files/{created['file_id']}/archive", headers=alice).json()['is_archived'] is True
        assert client.get('/files', headers=alice).json()['files'] == []

    def test_delete(self, client, alice, bob):
        created = upload(client, alice)
        assert client.delete(f"/files/{created['file_id']}", headers=bob).status_code == 403
        assert client.delete(f"/files/{created['file_id']}", headers=alice).status_code == 204
        assert client.get(f"/files/{created['file_id']}", headers=alice).status_code == 404

    def test_signed_url_round_trip(self, client, alice):
        created = upload(client, alice, content=b'signed content')

        url = client.get(f"/files/{created['file_id']}/url", headers=alice).json()['url']
        path = url.replace('http://testserver', '')
        response = client.get(path)
        assert response.status_code == 200
        assert response.content == b'signed content'

        tampered = path.rsplit('signature=', 1)[0] + 'signature=' + '0' * 64
        assert client.get(tampered).status_code == 403

    def test_popular_and_recommendations(self, client, alice, bob):
        public = upload(client, bob, name='guide.txt', tags='howto', is_public='true')
        upload(client, alice, name='mine.txt', tags='howto')

        popular = client.get('/files/popular?limit=5', headers=alice).json()['files']
        assert [f['file_id'] for f in popular] == [public['file_id']]

        recommended = client.get('/files/recommendations', headers=alice).json()['files']
        assert [f['file_id'] for f in recommended] == [public['file_id']]


class TestSearchEndpoint:
    def test_paged_search_with_sort(self, client, alice):
        for name in ['b-report.txt', 'a-report.txt', 'c-report.txt', 'other.txt']:
            upload(client, alice, name=name)

        response = client.post(
            '/files/search',
            json={'query': 'REPORT', 'sort_by': 'FileName', 'sort_direction': 'asc', 'page': 1, 'page_size': 2},
            headers=alice
        )
        body = response.json()
        assert response.status_code == 200
        assert body['total_count'] == 3
        assert [f['file_name'] for f in body['files']] == ['a-report.txt', 'b-report.txt']
        assert body['used_ai_search'] is False

    def test_search_excludes_private_files_of_others(self, client, alice, bob):
        upload(client, bob, name='bob-report.txt')
        body = client.post('/files/search', json={'query': 'report'}, headers=alice).json()
        assert body['total_count'] == 0

    def test_ai_search_falls_back_without_collaborator(self, client, alice):
        upload(client, alice, name='report.txt')
        upload(client, alice, name='photo.txt')

        body = client.post(
            '/files/search',
            json={'query': 'report', 'use_ai_search': True, 'max_results': 5},
            headers=alice
        ).json()
        assert body['used_ai_search'] is True
        assert [f['file_name'] for f in body['files']] == ['report.txt']


    def test_search_matches_non_ascii_names(self, client, alice):
        upload(client, alice, name='Übersicht.pdf')
        upload(client, alice, name='other.txt')

        for query in ['Übersicht', 'übersicht', 'ÜBERSICHT']:
            body = client.post('/files/search', json={'query': query}, headers=alice).json()
            assert [f['file_name'] for f in body['files']] == ['Übersicht.pdf']


class TestSearchHelperEndpoints:
    def test_suggestions(self, client, alice):
        response = client.get('/search/suggestions', params={'query': 'rep'}, headers=alice)
        assert response.status_code == 200
        assert response.json()['suggestions'][0] == 'report'

        assert client.get('/search/suggestions', params={'query': 'r'}, headers=alice).json() == {'suggestions': []}
        assert client.get('/search/suggestions', params={'query': 'rep'}).status_code == 401

    def test_analyze_file_does_not_store(self, client, alice):
        response = client.post(
            '/search/analyze-file',
            files={'file': ('budget.xlsx', b'cells', 'application/vnd.ms-excel')},
            headers=alice
        )
        assert response.status_code == 200
        body = response.json()
        assert body['file_name'] == 'budget.xlsx'
        assert body['file_size'] == 5
        assert 'xlsx' in body['suggested_keywords']
        assert len(body['suggested_tags']) <= 5

        assert client.get('/files', headers=alice).json()['files'] == []

    def test_analyze_empty_file(self, client, alice):
        response = client.post('/search/analyze-file', files={'file': ('e.txt', b'', 'text/plain')}, headers=alice)
        assert response.status_code == 400
        assert response.json()['code'] == 'INVALID_UPLOAD'

    def test_trending_searches_are_anonymous(self, client, alice):
        upload(client, alice, name='a.txt', tags='Work,notes', is_public='true')
        upload(client, alice, name='b.txt', tags='work', is_public='true')
        upload(client, alice, name='c.txt', tags='hidden')

        trending = client.get('/search/trending-searches?limit=2').json()
        assert sorted(trending, key=lambda t: t['term']) == [
            {'term': 'text files', 'count': 2, 'category': 'File Types'},
            {'term': 'work', 'count': 2, 'category': 'General'},
        ]


class TestLeaderboardEndpoints:
    def test_leaderboards_are_anonymous_and_public_only(self, client, alice):
        public = upload(client, alice, name='open.txt', is_public='true', tags='shared')
        upload(client, alice, name='closed.txt')
        client.get(f"/files/{public['file_id']}/download", headers=alice)

        popular = client.get('/leaderboard/popular').json()
        assert [entry['file_id'] for entry in popular] == [public['file_id']]
        assert popular[0]['rank'] == 1

        assert client.get('/leaderboard/most-downloaded').json()[0]['download_count'] == 1
        assert len(client.get('/leaderboard/recent-popular?days=1').json()) == 1
        assert client.get('/leaderboard/trending?hours=24').json()[0]['file_id'] == public['file_id']
        assert client.get('/leaderboard/by-category').json()[0]['category'] == 'Text Files'

        stats = client.get('/leaderboard/stats').json()
        assert stats['total_public_files'] == 1
        assert stats['top_tags'] == [{'tag': 'shared', 'count': 1}]
