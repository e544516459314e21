"""Old -> new identifier map shared by one duplication request."""

from collections.abc import Callable
from uuid import UUID, uuid4


class IdentityIndex:
    """
    Transient mapping from source ids to freshly minted ids.

    One instance is owned by the top-level operation and passed down to
    every file it duplicates, so a source id always maps to the same new id
    for the whole request. Entries are never reassigned.

    Two remap policies are exposed on purpose:

    - ``remap_or_generate``: primary keys; a miss mints a new id.
    - ``remap_if_present``: embedded references; a miss keeps the id.

    ``index[old]`` is the strict variant for ids that must have been
    seeded beforehand.
    """

    def __init__(self, generator: Callable[[], UUID] = uuid4):
        self._generator = generator
        self._ids: dict[UUID, UUID] = {}

    def seed(self, old_id: UUID, new_id: UUID | None = None) -> UUID:
        """Register ``old_id`` ahead of use. Returns its new id."""
        current = self._ids.get(old_id)
        if current is not None:
            if new_id is not None and new_id != current:
                raise ValueError(f"Identifier {old_id} is already mapped to {current}")
            return current
        self._ids[old_id] = new_id or self._generator()
        return self._ids[old_id]

    def remap_or_generate(self, old_id: UUID) -> UUID:
        return self.seed(old_id)

    def remap_if_present(self, old_id: UUID) -> UUID:
        return self._ids.get(old_id, old_id)

    def __getitem__(self, old_id: UUID) -> UUID:
        return self._ids[old_id]

    def __contains__(self, old_id) -> bool:
        return old_id in self._ids

    def __len__(self) -> int:
        return len(self._ids)

    def __repr__(self):
        return f"<IdentityIndex(size={len(self._ids)})>"
