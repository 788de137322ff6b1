"""Resolution of the target group that receives imported projects."""

from typing import Optional

from loguru import logger

from ..api.exceptions import RestAPIError
from ..api.interfaces import TargetRepositoryClient
from ..models.group import Group
from .exceptions import GroupResolutionError


class GroupResolver:
    """Finds the target group by name, creating it when it does not exist.

    Names are compared case-insensitively. The two hosts normalize names
    differently, so names that differ only in special characters are not
    recognized as the same group.
    """

    def __init__(self, target_client: TargetRepositoryClient):
        self.target_client = target_client
        self.logger = logger.bind(component='GroupResolver')

    def find_group(self, name: str, parent_id: Optional[int] = None) -> Optional[Group]:
        """Look up the group without creating it."""
        try:
            group_id = self.target_client.find_group_id(name)
        except RestAPIError as e:
            raise GroupResolutionError(name, e) from e

        if group_id is None:
            return None
        return Group(id=group_id, name=name, parent_id=parent_id)

    def get_or_create_group_id(self, name: str, parent_id: Optional[int] = None) -> int:
        """Get the id of the named group, creating it under ``parent_id`` if absent.

        Raises:
            GroupResolutionError: On any transport or decode failure
        """
        return self.get_or_create_group(name, parent_id).id

    def get_or_create_group(self, name: str, parent_id: Optional[int] = None) -> Group:
        """Like :meth:`get_or_create_group_id` but returns the group model."""
        group = self.find_group(name, parent_id)
        if group is not None:
            self.logger.info(f'Found existing group {name}. Id = {group.id}')
            return group

        try:
            group_id = self.target_client.create_group(name, parent_id)
        except RestAPIError as e:
            raise GroupResolutionError(name, e) from e

        return Group(id=group_id, name=name, parent_id=parent_id)
