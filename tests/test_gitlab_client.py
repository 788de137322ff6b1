"""Tests for the GitLab client."""

import pytest
from unittest.mock import patch

from gitport.api.gitlab import GitLabClient
from gitport.api.exceptions import ResponseDecodeError, RestAPIError
from gitport.config.config import GitLabInstanceConfig
from gitport.models.group import group_path_from_name

API_URL = 'https://gitlab.example.com/api/v4'


@pytest.fixture
def client():
    config = GitLabInstanceConfig(
        url='https://gitlab.example.com', token='gl-token', group_name='Team A'
    )
    return GitLabClient(config)


class TestGitLabClient:
    """Test GitLab client functionality."""

    def test_initialization(self, client):
        """Test client initialization."""
        assert client.url == 'https://gitlab.example.com'
        assert client.rest.base_url == API_URL
        assert client.rest.session.headers['Private-Token'] == 'gl-token'

    @patch('requests.Session.request')
    def test_get_paginated(self, mock_request, client, make_response):
        """Test paginated requests."""
        mock_request.side_effect = [
            make_response(200, [{'id': 1}, {'id': 2}], headers={'X-Total-Pages': '2'}),
            make_response(200, [{'id': 3}], headers={'X-Total-Pages': '2'}),
        ]

        items = client.get_paginated('/groups', per_page=2)

        assert [item['id'] for item in items] == [1, 2, 3]
        assert mock_request.call_count == 2

    @patch('requests.Session.request')
    def test_get_paginated_not_a_list(self, mock_request, client, make_response):
        mock_request.return_value = make_response(200, {'message': 'odd'})

        with pytest.raises(ResponseDecodeError):
            client.get_paginated('/groups')

    @patch('requests.Session.request')
    def test_find_group_id(self, mock_request, client, make_response):
        """Only an exact case-insensitive name match counts."""
        mock_request.return_value = make_response(
            200,
            [{'id': 1, 'name': 'Team A Archive'}, {'id': 2, 'name': 'team a'}],
        )

        assert client.find_group_id('Team A') == 2
        _, kwargs = mock_request.call_args
        assert kwargs['params']['search'] == 'Team A'

    @patch('requests.Session.request')
    def test_find_group_id_absent(self, mock_request, client, make_response):
        mock_request.return_value = make_response(200, [])

        assert client.find_group_id('Team A') is None

    @patch('requests.Session.request')
    def test_create_group(self, mock_request, client, make_response):
        mock_request.return_value = make_response(201, {'id': 42, 'name': 'Team A'})

        assert client.create_group('Team A', 7) == 42

        args, kwargs = mock_request.call_args
        assert args == ('POST', f'{API_URL}/groups')
        assert kwargs['json'] == {'name': 'Team A', 'path': 'team-a', 'parent_id': 7}

    @pytest.mark.parametrize(
        'name, path',
        [
            ('Team A', 'team-a'),
            ('Team   A\tB', 'team-a-b'),
            ('  Ported Repos  ', 'ported-repos'),
        ],
    )
    def test_group_path_from_name(self, name, path):
        """Whitespace runs collapse to one hyphen and the path is lower-cased."""
        assert group_path_from_name(name) == path

    @patch('requests.Session.request')
    def test_create_group_collapses_whitespace(self, mock_request, client, make_response):
        mock_request.return_value = make_response(201, {'id': 42})

        client.create_group('Team   A\tB')

        _, kwargs = mock_request.call_args
        assert kwargs['json'] == {'name': 'Team   A\tB', 'path': 'team-a-b'}

    @patch('requests.Session.request')
    def test_create_top_level_group(self, mock_request, client, make_response):
        mock_request.return_value = make_response(201, {'id': 42})

        client.create_group('Team A')

        _, kwargs = mock_request.call_args
        assert 'parent_id' not in kwargs['json']

    @patch('requests.Session.request')
    def test_create_group_without_id(self, mock_request, client, make_response):
        mock_request.return_value = make_response(201, {'name': 'Team A'})

        with pytest.raises(ResponseDecodeError):
            client.create_group('Team A')

    @patch('requests.Session.request')
    def test_get_group_path(self, mock_request, client, make_response):
        mock_request.return_value = make_response(
            200, {'id': 42, 'full_path': 'parent/team-a'}
        )

        assert client.get_group_path(42) == 'parent/team-a'
        args, _ = mock_request.call_args
        assert args == ('GET', f'{API_URL}/namespaces/42')

    @patch('requests.Session.request')
    def test_is_project_in_group(self, mock_request, client, make_response):
        mock_request.return_value = make_response(
            200, [{'id': 1, 'name': 'API-client'}, {'id': 2, 'name': 'API'}]
        )

        assert client.is_project_in_group('api', 42) is True
        args, _ = mock_request.call_args
        assert args == ('GET', f'{API_URL}/groups/42/projects')

    @patch('requests.Session.request')
    def test_is_project_not_in_group(self, mock_request, client, make_response):
        mock_request.return_value = make_response(200, [{'id': 1, 'name': 'api-client'}])

        assert client.is_project_in_group('api', 42) is False

    @patch('requests.Session.request')
    def test_import_from_source(self, mock_request, client, make_response):
        mock_request.return_value = make_response(
            201,
            {
                'id': 9,
                'name': 'api',
                'full_path': 'team-a/api',
                'import_status': 'scheduled',
            },
        )

        project = client.import_from_source(
            'https://bitbucket.example.com', 'porter', 'bb-token', 'PROJ', 'api', 'team-a'
        )

        assert project.id == 9
        assert project.full_path == 'team-a/api'
        assert project.import_status == 'scheduled'

        args, kwargs = mock_request.call_args
        assert args == ('POST', f'{API_URL}/import/bitbucket_server')
        assert kwargs['json'] == {
            'bitbucket_server_url': 'https://bitbucket.example.com',
            'bitbucket_server_username': 'porter',
            'personal_access_token': 'bb-token',
            'bitbucket_server_project': 'PROJ',
            'bitbucket_server_repo': 'api',
            'target_namespace': 'team-a',
        }

    @patch('requests.Session.request')
    def test_import_forbidden(self, mock_request, client, make_response):
        mock_request.return_value = make_response(403, {'message': '403 Forbidden'})

        with pytest.raises(RestAPIError) as exc_info:
            client.import_from_source(
                'https://bitbucket.example.com', 'porter', 't', 'PROJ', 'api', 'team-a'
            )

        assert exc_info.value.status_code == 403

    @patch('requests.Session.request')
    def test_apply_baseline_settings(self, mock_request, client, make_response):
        mock_request.return_value = make_response(200, {'id': 9})

        client.apply_baseline_settings(9)

        args, kwargs = mock_request.call_args
        assert args == ('PUT', f'{API_URL}/projects/9')
        assert kwargs['json'] == {
            'squash_option': 'never',
            'only_allow_merge_if_all_discussions_are_resolved': True,
            'suggestion_commit_message': (
                'Apply %{suggestions_count} suggestion(s) to %{files_count} file(s)'
            ),
        }

    @patch('requests.Session.request')
    def test_set_description(self, mock_request, client, make_response):
        mock_request.return_value = make_response(200, {'id': 9})

        client.set_description(9, 'The API')

        _, kwargs = mock_request.call_args
        assert kwargs['json'] == {'description': 'The API'}

    @patch('requests.Session.request')
    def test_connection_failure(self, mock_request, client, make_response):
        """Test connection failure."""
        mock_request.return_value = make_response(401, {'message': 'Unauthorized'})

        assert client.test_connection() is False
