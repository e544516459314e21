"""
Docstore
========

Duplication and relocation engine for a multi-team document backend.

Modules:
    - core: Database models, schemas, content codec and migrations
    - management: File/project duplication and relocation
    - observability: Structured logging
    - resilience: Error taxonomy
    - security: Edition permission checks
"""

__version__ = "0.1.0"

from .core.db import atomic, get_engine, get_session_factory, init_db
from .core.models import (
    Base,
    File,
    FileLibraryRel,
    FileMediaObject,
    Profile,
    Project,
    Team,
)
from .management import ManagementService

__all__ = [
    # Core models
    "Base",
    "Profile",
    "Team",
    "Project",
    "File",
    "FileLibraryRel",
    "FileMediaObject",
    # Database utilities
    "atomic",
    "get_engine",
    "get_session_factory",
    "init_db",
    # Management
    "ManagementService",
]
