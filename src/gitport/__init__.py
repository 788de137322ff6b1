"""GitPort

Ports the repositories of a Bitbucket Server project into a GitLab group,
then marks the originals as deprecated: a banner is added to each readme, the
description points to the new location and every branch is made read-only.
"""

__version__ = '0.1.0'
__author__ = 'GitPort Team'
__email__ = 'team@example.com'
