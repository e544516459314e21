"""
Docstore - File & Project Relocation
====================================

Moves files between projects and projects between teams, then deletes the
library relations the move made invalid: a file may only use libraries
living in its own team.
"""

from collections.abc import Iterable
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.orm import Session

from docstore.core.db import get_by_id
from docstore.core.models import File, FileLibraryRel, Project, Team
from docstore.observability.logging_config import get_logger
from docstore.resilience.errors import NotFoundError, raise_validation
from docstore.security.permissions import (
    check_project_edition_permissions,
    check_team_edition_permissions,
)

logger = get_logger(__name__)


def _library_files_outside_team(team_id: UUID):
    """Ids of files whose project belongs to a team other than ``team_id``."""
    return (
        select(File.id)
        .join(Project, File.project_id == Project.id)
        .where(Project.team_id != team_id)
    )


def delete_broken_relations_for_files(session: Session, file_ids: Iterable[UUID], team_id: UUID) -> int:
    """Delete library rels of ``file_ids`` pointing outside ``team_id``."""
    return (
        session.query(FileLibraryRel)
        .filter(
            FileLibraryRel.file_id.in_(list(file_ids)),
            FileLibraryRel.library_file_id.in_(_library_files_outside_team(team_id)),
        )
        .delete(synchronize_session="fetch")
    )


def delete_broken_relations_for_project(session: Session, project_id: UUID, team_id: UUID) -> int:
    """Delete library rels of every file in ``project_id`` pointing outside ``team_id``."""
    project_files = select(File.id).where(File.project_id == project_id)
    return (
        session.query(FileLibraryRel)
        .filter(
            FileLibraryRel.file_id.in_(project_files),
            FileLibraryRel.library_file_id.in_(_library_files_outside_team(team_id)),
        )
        .delete(synchronize_session="fetch")
    )


def move_files(session: Session, profile_id: UUID, ids: Iterable[UUID], project_id: UUID) -> None:
    """
    Move a set of files into ``project_id``.

    Edit permission is required on the destination and on every source
    project. Moving into a project the files already live in is rejected.
    """
    ids = set(ids)
    if not ids:
        raise_validation("empty-file-set", "At least one file id is required")

    rows = session.query(File.id, File.project_id).filter(File.id.in_(ids)).all()
    missing = ids - {row.id for row in rows}
    if missing:
        raise NotFoundError(hint="File not found", ids=sorted(str(i) for i in missing))

    source = {row.project_id for row in rows}
    project = get_by_id(session, Project, project_id)

    check_project_edition_permissions(session, profile_id, project_id)
    for source_id in source:
        check_project_edition_permissions(session, profile_id, source_id)

    if project_id in source:
        raise_validation("cant-move-to-same-project", "Unable to move a file to the same project")

    moved = (
        session.query(File)
        .filter(File.id.in_(ids))
        .update({File.project_id: project_id}, synchronize_session="fetch")
    )
    pruned = delete_broken_relations_for_files(session, ids, project.team_id)

    logger.debug(f"Moved {moved} files to project {project_id}, pruned {pruned} library rels")


def move_project(session: Session, profile_id: UUID, project_id: UUID, team_id: UUID) -> None:
    """Move a project to another team. Edit permission is required on both teams."""
    project = get_by_id(session, Project, project_id)
    src_team_id = project.team_id
    dst_team_id = get_by_id(session, Team, team_id).id

    check_team_edition_permissions(session, profile_id, src_team_id)
    check_team_edition_permissions(session, profile_id, dst_team_id)

    if src_team_id == dst_team_id:
        raise_validation("cant-move-to-same-team", "Unable to move a project to same team")

    session.query(Project).filter(Project.id == project_id).update(
        {Project.team_id: dst_team_id}, synchronize_session="fetch"
    )
    pruned = delete_broken_relations_for_project(session, project_id, dst_team_id)

    logger.debug(f"Moved project {project_id} from team {src_team_id} to {dst_team_id}, pruned {pruned} library rels")
