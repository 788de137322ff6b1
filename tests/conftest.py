"""Shared test fixtures."""

import json
from unittest.mock import Mock

import pytest

from gitport.config.config import Config


@pytest.fixture
def make_response():
    """Build a fake ``requests.Response``."""

    def _make(status_code=200, data=None, headers=None, url='https://example.com'):
        response = Mock()
        response.status_code = status_code
        response.headers = headers or {'Content-Type': 'application/json'}
        response.url = url
        if data is None:
            response.content = b''
            response.text = ''
            response.json.side_effect = ValueError('No JSON')
        elif isinstance(data, str):
            response.content = data.encode()
            response.text = data
            response.json.side_effect = ValueError('Not JSON')
        else:
            body = json.dumps(data)
            response.content = body.encode()
            response.text = body
            response.json.return_value = data
        return response

    return _make


@pytest.fixture
def config():
    """A complete configuration for a run."""
    return Config(
        source={
            'url': 'https://bitbucket.example.com',
            'username': 'porter',
            'token': 'bb-token',
            'project_key': 'PROJ',
        },
        target={
            'url': 'https://gitlab.example.com',
            'token': 'gl-token',
            'group_name': 'Team A',
        },
        migration={
            'readme_banner': ['# DEPRECATED', 'See $URL', ''],
            'description': 'Moved to $URL',
        },
    )
