"""
Docstore Security Module
========================

Edition permission checks for teams and projects.
"""

from .permissions import (
    Permissions,
    check_project_edition_permissions,
    check_team_edition_permissions,
    get_project_permissions,
    get_team_permissions,
)

__all__ = [
    "Permissions",
    "get_team_permissions",
    "get_project_permissions",
    "check_team_edition_permissions",
    "check_project_edition_permissions",
]
