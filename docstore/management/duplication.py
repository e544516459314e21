"""
Docstore - File & Project Duplication
=====================================

Deep copies of a file (with its library relations and media objects) or of
a whole project, under fresh identities. All functions here run inside the
caller's transaction; they never commit.
"""

from uuid import UUID

from sqlalchemy.orm import Session

from docstore.core.db import get_by_id, row_to_dict
from docstore.core.models import (
    File,
    FileLibraryRel,
    FileMediaObject,
    FileProfileRel,
    Project,
    ProjectProfileRel,
)
from docstore.observability.logging_config import get_logger

from .identity_index import IdentityIndex
from .relinker import process_file_data

logger = get_logger(__name__)

OWNER_GRANT = {"is_owner": True, "is_admin": True, "can_edit": True}


def duplicate_file(
    session: Session,
    profile_id: UUID,
    file: File,
    index: IdentityIndex,
    project_id: UUID | None = None,
    reset_shared_flag: bool = False,
) -> File:
    """
    Duplicate one file and its dependent rows.

    ``file.id`` must already be seeded in ``index``. Non-local media objects
    get new ids minted into the same index so the content's media map can
    be re-keyed consistently.

    Args:
        session: Open session; the caller owns the transaction
        profile_id: Actor receiving the owner grant on the copy
        file: Source file row (left untouched)
        index: Identity index shared with sibling duplications
        project_id: Destination project (defaults to the source's)
        reset_shared_flag: Force ``is_shared`` to false on the copy

    Returns:
        The new File row (flushed, not committed)
    """
    flibs = session.query(FileLibraryRel).filter(FileLibraryRel.file_id == file.id).all()
    fmeds = session.query(FileMediaObject).filter(FileMediaObject.file_id == file.id).all()

    flibs = [row_to_dict(rel) for rel in flibs]
    for params in flibs:
        params["file_id"] = index.remap_if_present(params["file_id"])
        # Only sibling files seeded by a project duplication resolve here
        params["library_file_id"] = index.remap_if_present(params["library_file_id"])

    for media in fmeds:
        if not media.is_local:
            index.remap_or_generate(media.id)

    fmeds = [row_to_dict(media) for media in fmeds]
    for params in fmeds:
        params["id"] = index.remap_if_present(params["id"])
        params["file_id"] = index.remap_if_present(params["file_id"])

    params = row_to_dict(file)
    if project_id is not None:
        params["project_id"] = project_id
    if reset_shared_flag:
        params["is_shared"] = False
    params["id"] = index[file.id]
    params["data"] = process_file_data(file.data, index)

    new_file = File(**params)
    session.add(new_file)
    # Parent row first so the dependent rows satisfy their foreign keys
    session.flush()

    session.add(FileProfileRel(file_id=new_file.id, profile_id=profile_id, **OWNER_GRANT))
    session.add_all(FileLibraryRel(**rel) for rel in flibs)
    session.add_all(FileMediaObject(**media) for media in fmeds)
    session.flush()

    logger.debug(
        f"Duplicated file {file.id} -> {new_file.id} "
        f"({len(flibs)} library rels, {len(fmeds)} media objects)"
    )
    return new_file


def duplicate_project(session: Session, profile_id: UUID, project: Project) -> Project:
    """
    Duplicate a project and every file in it.

    All file ids are seeded into one index before any file is copied, so
    library relations and component references between sibling files
    resolve to the new siblings regardless of processing order.
    """
    file_ids = [
        row.id
        for row in session.query(File.id).filter(File.project_id == project.id).order_by(File.created_at, File.id)
    ]

    index = IdentityIndex()
    for file_id in file_ids:
        index.seed(file_id)

    params = row_to_dict(project)
    params["id"] = index.remap_or_generate(project.id)
    params["is_default"] = False

    new_project = Project(**params)
    session.add(new_project)
    session.flush()
    session.add(ProjectProfileRel(project_id=new_project.id, profile_id=profile_id, **OWNER_GRANT))

    for file_id in file_ids:
        file = get_by_id(session, File, file_id)
        duplicate_file(session, profile_id, file, index, project_id=new_project.id, reset_shared_flag=False)

    logger.debug(f"Duplicated project {project.id} -> {new_project.id} ({len(file_ids)} files)")
    return new_project
