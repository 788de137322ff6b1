"""Tests for porting repositories to the target group."""

import pytest
from unittest.mock import Mock

from gitport.api.exceptions import RestAPIError
from gitport.migration.exceptions import RepositoryPortError
from gitport.migration.porter import RepositoryPorter
from gitport.models.group import Group
from gitport.models.project import ImportedProject


@pytest.fixture
def source():
    source = Mock()
    source.url = 'https://bitbucket.example.com'
    source.username = 'porter'
    source.token = 'bb-token'
    source.get_description.return_value = 'The API'
    return source


@pytest.fixture
def target():
    target = Mock()
    target.is_project_in_group.return_value = False
    target.get_group_path.return_value = 'parent/team-a'
    target.import_from_source.return_value = ImportedProject(
        id=9, name='api', full_path='parent/team-a/api', import_status='scheduled'
    )
    return target


@pytest.fixture
def porter(source, target):
    return RepositoryPorter(source, 'PROJ', target, Group(id=42, name='Team A'))


class TestRepositoryPorter:
    """Test repository import and configuration."""

    def test_port_repo(self, porter, source, target):
        project = porter.port_repo('api')

        assert project.id == 9
        target.is_project_in_group.assert_called_once_with('api', 42)
        target.import_from_source.assert_called_once_with(
            'https://bitbucket.example.com',
            'porter',
            'bb-token',
            'PROJ',
            'api',
            'parent/team-a',
        )
        target.apply_baseline_settings.assert_called_once_with(9)
        source.get_description.assert_called_once_with('PROJ', 'api')
        target.set_description.assert_called_once_with(9, 'The API')

    def test_already_ported_is_skipped(self, porter, source, target):
        """A repo already in the group causes no writes."""
        target.is_project_in_group.return_value = True

        assert porter.port_repo('api') is None

        target.import_from_source.assert_not_called()
        target.apply_baseline_settings.assert_not_called()
        target.set_description.assert_not_called()
        source.get_description.assert_not_called()

    def test_namespace_resolved_once(self, porter, target):
        porter.port_repo('api')
        porter.port_repo('web')

        target.get_group_path.assert_called_once_with(42)
        assert porter.group.full_path == 'parent/team-a'

    def test_empty_import_response(self, porter, target):
        target.import_from_source.return_value = None

        assert porter.port_repo('api') is None
        target.apply_baseline_settings.assert_not_called()

    def test_import_failure(self, porter, target):
        target.import_from_source.side_effect = RestAPIError(
            'POST failed', status_code=403
        )

        with pytest.raises(RepositoryPortError) as exc_info:
            porter.port_repo('api')

        assert exc_info.value.repo_name == 'api'
        assert exc_info.value.step == 'Import'
        target.apply_baseline_settings.assert_not_called()

    def test_settings_failure_keeps_import(self, porter, target):
        """A failure after the import does not undo it."""
        target.apply_baseline_settings.side_effect = RestAPIError('PUT failed')

        with pytest.raises(RepositoryPortError):
            porter.port_repo('api')

        target.import_from_source.assert_called_once()
        target.set_description.assert_not_called()

    def test_membership_check_failure(self, porter, target):
        target.is_project_in_group.side_effect = RestAPIError('GET failed')

        with pytest.raises(RepositoryPortError):
            porter.port_repo('api')

        target.import_from_source.assert_not_called()
