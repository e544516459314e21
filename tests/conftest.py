"""Pytest configuration and fixtures for docstore tests."""
import os
import sys
from uuid import uuid4

import pytest

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from sqlalchemy.orm import sessionmaker

from docstore.core import blob
from docstore.core.db import create_test_engine
from docstore.core.migrations import CURRENT_VERSION
from docstore.core.models import (
    File,
    FileLibraryRel,
    FileMediaObject,
    Profile,
    Project,
    ProjectProfileRel,
    Team,
    TeamProfileRel,
)
from docstore.management import ManagementService


@pytest.fixture
def engine():
    """Fresh in-memory SQLite database per test."""
    engine = create_test_engine()
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(bind=engine, autocommit=False, autoflush=False)


@pytest.fixture
def session(session_factory):
    """Session for seeding and inspecting rows; commits are real."""
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def service(session_factory):
    return ManagementService(session_factory)


def make_data(media_ids=(), component_files=()):
    """Content tree with one page referencing components from the given library files."""
    page_id = uuid4()
    objects = {}
    for library_id in component_files:
        shape_id = uuid4()
        objects[shape_id] = {
            "id": shape_id,
            "type": "frame",
            "component_id": uuid4(),
            "component_file": library_id,
        }
    return {
        "version": CURRENT_VERSION,
        "pages": [page_id],
        "pages_index": {page_id: {"id": page_id, "name": "Page 1", "objects": objects}},
        "components": {},
        "media": {mid: {"id": mid, "name": f"image-{i}", "width": 10, "height": 10}
                  for i, mid in enumerate(media_ids)},
    }


def add_file(session, project, name="File", is_shared=False, data=None, id=None):
    file = File(
        id=id or uuid4(),
        project_id=project.id,
        name=name,
        is_shared=is_shared,
        revn=3,
        data=blob.encode(data if data is not None else make_data()),
    )
    session.add(file)
    session.flush()
    return file


def add_media(session, file, is_local):
    media = FileMediaObject(
        id=uuid4(),
        file_id=file.id,
        name="image.png",
        path=f"media/{uuid4().hex}.png",
        width=10,
        height=10,
        mtype="image/png",
        is_local=is_local,
    )
    session.add(media)
    session.flush()
    return media


def add_library_rel(session, file, library):
    rel = FileLibraryRel(file_id=file.id, library_file_id=library.id)
    session.add(rel)
    session.flush()
    return rel


@pytest.fixture
def profile(session):
    p = Profile(id=uuid4(), fullname="Test User", email="test@example.com")
    session.add(p)
    session.commit()
    return p


@pytest.fixture
def outsider(session):
    p = Profile(id=uuid4(), fullname="Outsider", email="outsider@example.com")
    session.add(p)
    session.commit()
    return p


def _make_team(session, profile, name):
    team = Team(id=uuid4(), name=name)
    session.add(team)
    session.flush()
    session.add(TeamProfileRel(team_id=team.id, profile_id=profile.id, is_owner=True, is_admin=True, can_edit=True))
    session.commit()
    return team


def _make_project(session, profile, team, name):
    project = Project(id=uuid4(), team_id=team.id, name=name)
    session.add(project)
    session.flush()
    session.add(ProjectProfileRel(project_id=project.id, profile_id=profile.id, is_owner=True, is_admin=True, can_edit=True))
    session.commit()
    return project


@pytest.fixture
def team1(session, profile):
    return _make_team(session, profile, "Team One")


@pytest.fixture
def team2(session, profile):
    return _make_team(session, profile, "Team Two")


@pytest.fixture
def project1(session, profile, team1):
    return _make_project(session, profile, team1, "Project One")


@pytest.fixture
def project2(session, profile, team1):
    return _make_project(session, profile, team1, "Project Two")


@pytest.fixture
def project3(session, profile, team2):
    return _make_project(session, profile, team2, "Project Three")


@pytest.fixture
def scenario(session, project1, project2):
    """
    F1 (project1, team1) uses F2 (project2, team1) as a library and owns
    one local and one shared media object.
    """
    f2 = add_file(session, project2, name="Library", is_shared=True)
    local_media = uuid4()
    shared_media = uuid4()
    f1 = add_file(
        session,
        project1,
        name="Design",
        is_shared=True,
        data=make_data(media_ids=[local_media, shared_media], component_files=[f2.id]),
    )
    for media_id, is_local in ((local_media, True), (shared_media, False)):
        session.add(FileMediaObject(
            id=media_id, file_id=f1.id, name="image.png", path=f"media/{media_id.hex}.png",
            width=10, height=10, mtype="image/png", is_local=is_local,
        ))
    add_library_rel(session, f1, f2)
    session.commit()
    return {
        "f1": f1,
        "f2": f2,
        "local_media": local_media,
        "shared_media": shared_media,
    }
