"""
Docstore - Pydantic Schemas
===========================

Request parameters for the management mutations and the results they
return to callers.
"""

from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from docstore.core import blob

MAX_MOVE_FILES = 500


# =============================================================================
# REQUEST PARAMS
# =============================================================================

class DuplicateFileParams(BaseModel):
    profile_id: UUID
    file_id: UUID


class DuplicateProjectParams(BaseModel):
    profile_id: UUID
    project_id: UUID


class MoveFilesParams(BaseModel):
    profile_id: UUID
    ids: set[UUID] = Field(..., min_length=1, max_length=MAX_MOVE_FILES)
    project_id: UUID


class MoveProjectParams(BaseModel):
    profile_id: UUID
    team_id: UUID
    project_id: UUID


# =============================================================================
# RESULTS
# =============================================================================

class ProjectResult(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    team_id: UUID
    name: str
    is_default: bool


class FileResult(BaseModel):
    """Duplicated file with its content already decoded."""
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    project_id: UUID
    name: str
    is_shared: bool
    revn: int
    data: dict

    @classmethod
    def from_row(cls, file) -> "FileResult":
        return cls(
            id=file.id,
            project_id=file.project_id,
            name=file.name,
            is_shared=file.is_shared,
            revn=file.revn,
            data=blob.decode(file.data),
        )
