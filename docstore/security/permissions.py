"""Edition permissions for teams and projects."""

from dataclasses import dataclass
from uuid import UUID

from sqlalchemy.orm import Session

from docstore.core.models import Project, ProjectProfileRel, TeamProfileRel
from docstore.resilience.errors import AuthorizationError, NotFoundError


@dataclass(frozen=True)
class Permissions:
    is_owner: bool = False
    is_admin: bool = False
    can_edit: bool = False

    @classmethod
    def from_rel(cls, rel) -> "Permissions":
        if rel is None:
            return cls()
        return cls(bool(rel.is_owner), bool(rel.is_admin), bool(rel.can_edit))

    def __or__(self, other: "Permissions") -> "Permissions":
        return Permissions(
            self.is_owner or other.is_owner,
            self.is_admin or other.is_admin,
            self.can_edit or other.can_edit,
        )

    @property
    def can_write(self) -> bool:
        return self.is_owner or self.is_admin or self.can_edit


def get_team_permissions(session: Session, profile_id: UUID, team_id: UUID) -> Permissions:
    rel = session.get(TeamProfileRel, (team_id, profile_id))
    return Permissions.from_rel(rel)


def get_project_permissions(session: Session, profile_id: UUID, project_id: UUID) -> Permissions:
    """Project grants merged with the grants on the project's team."""
    project = session.get(Project, project_id)
    if project is None:
        raise NotFoundError(hint="Project not found", id=project_id)

    rel = session.get(ProjectProfileRel, (project_id, profile_id))
    return Permissions.from_rel(rel) | get_team_permissions(session, profile_id, project.team_id)


def check_team_edition_permissions(session: Session, profile_id: UUID, team_id: UUID) -> None:
    if not get_team_permissions(session, profile_id, team_id).can_write:
        raise AuthorizationError(hint="Not allowed to edit this team", team_id=team_id)


def check_project_edition_permissions(session: Session, profile_id: UUID, project_id: UUID) -> None:
    if not get_project_permissions(session, profile_id, project_id).can_write:
        raise AuthorizationError(hint="Not allowed to edit this project", project_id=project_id)
