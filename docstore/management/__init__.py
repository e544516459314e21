"""
Docstore Management Module
==========================

Duplication and relocation of files and projects.
"""

from .duplication import duplicate_file, duplicate_project
from .identity_index import IdentityIndex
from .relinker import process_file_data, relink_components, relink_data, relink_media
from .relocation import move_files, move_project
from .service import ManagementService

__all__ = [
    "ManagementService",
    "IdentityIndex",
    "duplicate_file",
    "duplicate_project",
    "move_files",
    "move_project",
    "process_file_data",
    "relink_components",
    "relink_data",
    "relink_media",
]
