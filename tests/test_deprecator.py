"""Tests for deprecating source repositories."""

import pytest
from unittest.mock import Mock

from gitport.api.exceptions import RestAPIError
from gitport.migration.deprecator import (
    RepositoryDeprecator,
    deprecated_readme,
    has_banner,
    join_lines,
    render_banner,
)
from gitport.migration.exceptions import RepositoryDeprecationError
from gitport.models.repository import DefaultBranch

BANNER = ['# DEPRECATED', 'See $URL', '']
NEW_URL = 'https://gitlab.example.com/team-a/api'


class TestBannerRendering:
    """Test the pure banner helpers."""

    def test_render_banner(self):
        assert render_banner(BANNER, 'https://x/y') == [
            '# DEPRECATED',
            'See https://x/y',
            '',
        ]

    def test_deprecated_readme(self):
        lines = deprecated_readme(BANNER, ['# API', 'Docs'], 'https://x/y')

        assert lines == ['# DEPRECATED', 'See https://x/y', '', '# API', 'Docs']
        assert join_lines(lines) == '# DEPRECATED\nSee https://x/y\n\n# API\nDocs\n'

    def test_deprecated_readme_without_original(self):
        assert deprecated_readme(BANNER, None, 'https://x/y') == [
            '# DEPRECATED',
            'See https://x/y',
            '',
        ]

    @pytest.mark.parametrize(
        'original, expected',
        [
            (['# DEPRECATED', 'See https://x/y'], True),
            (['# API'], False),
            ([], False),
            (None, False),
        ],
    )
    def test_has_banner(self, original, expected):
        assert has_banner(original, render_banner(BANNER, 'https://x/y')) is expected


@pytest.fixture
def source():
    source = Mock()
    source.find_file.return_value = 'README.md'
    source.read_file.return_value = ['# API', 'Docs']
    source.get_default_branch.return_value = DefaultBranch(
        id='refs/heads/main', display_id='main', latest_commit='abc123'
    )
    return source


@pytest.fixture
def deprecator(source):
    return RepositoryDeprecator(source, 'PROJ', BANNER, 'Moved to $URL')


class TestRepositoryDeprecator:
    """Test readme, description and branch updates."""

    def test_empty_banner_rejected(self, source):
        with pytest.raises(ValueError):
            RepositoryDeprecator(source, 'PROJ', [], 'Moved')

    def test_deprecate_repo(self, deprecator, source):
        deprecator.deprecate_repo('api', NEW_URL)

        source.write_file.assert_called_once_with(
            'PROJ',
            'api',
            'README.md',
            f'# DEPRECATED\nSee {NEW_URL}\n\n# API\nDocs\n',
            'Update README.md with deprecation banner',
            'main',
            'abc123',
        )
        source.set_description.assert_called_once_with(
            'PROJ', 'api', f'Moved to {NEW_URL}'
        )
        restriction = source.add_branch_restriction.call_args[0][2]
        assert restriction.type == 'read-only'
        assert restriction.matcher.id == '**/*'

    def test_new_readme_has_no_commit_id(self, deprecator, source):
        """A missing readme is created from the banner alone."""
        source.find_file.return_value = None

        assert deprecator.update_readme('api', NEW_URL) is True

        source.read_file.assert_not_called()
        args = source.write_file.call_args[0]
        assert args[2] == 'README.md'
        assert args[3] == f'# DEPRECATED\nSee {NEW_URL}\n\n'
        assert args[6] is None

    def test_existing_readme_name_is_kept(self, deprecator, source):
        source.find_file.return_value = 'readme.rst'

        deprecator.update_readme('api', NEW_URL)

        source.read_file.assert_called_once_with('PROJ', 'api', 'readme.rst')
        args = source.write_file.call_args[0]
        assert args[2] == 'readme.rst'
        assert args[4] == 'Update readme.rst with deprecation banner'

    def test_already_deprecated_readme_not_written(self, deprecator, source):
        """Deprecating twice leaves the readme alone the second time."""
        source.read_file.return_value = ['# DEPRECATED', f'See {NEW_URL}', '', '# API']

        assert deprecator.update_readme('api', NEW_URL) is False
        source.write_file.assert_not_called()
        source.get_default_branch.assert_not_called()

    def test_rerun_still_updates_description_and_branches(self, deprecator, source):
        source.read_file.return_value = ['# DEPRECATED', f'See {NEW_URL}', '']

        deprecator.deprecate_repo('api', NEW_URL)

        source.write_file.assert_not_called()
        source.set_description.assert_called_once()
        source.add_branch_restriction.assert_called_once()

    def test_readme_failure_stops_deprecation(self, deprecator, source):
        source.write_file.side_effect = RestAPIError('PUT failed', status_code=409)

        with pytest.raises(RepositoryDeprecationError) as exc_info:
            deprecator.deprecate_repo('api', NEW_URL)

        assert exc_info.value.step == 'Writing readme'
        source.set_description.assert_not_called()
        source.add_branch_restriction.assert_not_called()

    def test_branch_lock_failure(self, deprecator, source):
        source.add_branch_restriction.side_effect = RestAPIError('POST failed')

        with pytest.raises(RepositoryDeprecationError) as exc_info:
            deprecator.deprecate_repo('api', NEW_URL)

        assert exc_info.value.step == 'Locking branches'
        source.write_file.assert_called_once()
        source.set_description.assert_called_once()
