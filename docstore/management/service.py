"""
Docstore - Management Service
=============================

The four management mutations exposed to callers. Each call runs in its
own transaction: permission checks first, then every write, then one
commit. Any error rolls the whole call back.

Usage:
    from docstore.management import ManagementService

    service = ManagementService()
    copy = service.duplicate_file(profile_id, file_id)
"""

from collections.abc import Iterable
from uuid import UUID

from sqlalchemy.orm import sessionmaker

from docstore.core.db import atomic, get_by_id
from docstore.core.models import File, Project
from docstore.core.schemas import FileResult, ProjectResult
from docstore.observability.logging_config import OperationLogger, get_logger
from docstore.security.permissions import (
    check_project_edition_permissions,
    check_team_edition_permissions,
)

from . import duplication, relocation
from .identity_index import IdentityIndex

logger = get_logger(__name__)


class ManagementService:
    """Duplicate and relocate files and projects on behalf of a profile."""

    def __init__(self, session_factory: sessionmaker | None = None):
        self.session_factory = session_factory

    def duplicate_file(self, profile_id: UUID, file_id: UUID) -> FileResult:
        """Copy a file into its own project, unshared, owned by ``profile_id``."""
        with OperationLogger(logger, "duplicate_file", profile_id=str(profile_id), file_id=str(file_id)):
            with atomic(self.session_factory) as session:
                file = get_by_id(session, File, file_id)
                check_project_edition_permissions(session, profile_id, file.project_id)

                index = IdentityIndex()
                index.seed(file.id)

                new_file = duplication.duplicate_file(
                    session, profile_id, file, index, reset_shared_flag=True
                )
                return FileResult.from_row(new_file)

    def duplicate_project(self, profile_id: UUID, project_id: UUID) -> ProjectResult:
        """Copy a project and all of its files into the same team."""
        with OperationLogger(logger, "duplicate_project", profile_id=str(profile_id), project_id=str(project_id)):
            with atomic(self.session_factory) as session:
                project = get_by_id(session, Project, project_id)
                check_team_edition_permissions(session, profile_id, project.team_id)

                new_project = duplication.duplicate_project(session, profile_id, project)
                return ProjectResult.model_validate(new_project)

    def move_files(self, profile_id: UUID, ids: Iterable[UUID], project_id: UUID) -> None:
        ids = set(ids)
        with OperationLogger(logger, "move_files", profile_id=str(profile_id), project_id=str(project_id),
                             file_count=len(ids)):
            with atomic(self.session_factory) as session:
                relocation.move_files(session, profile_id, ids, project_id)

    def move_project(self, profile_id: UUID, project_id: UUID, team_id: UUID) -> None:
        with OperationLogger(logger, "move_project", profile_id=str(profile_id), project_id=str(project_id),
                             team_id=str(team_id)):
            with atomic(self.session_factory) as session:
                relocation.move_project(session, profile_id, project_id, team_id)
