"""Tests for the identity index remap policies."""
import pytest
from uuid import uuid4

from docstore.management.identity_index import IdentityIndex


class TestRemapPolicies:

    def test_remap_or_generate_is_deterministic(self):
        index = IdentityIndex()
        old = uuid4()

        first = index.remap_or_generate(old)
        assert first != old
        assert index.remap_or_generate(old) == first
        assert len(index) == 1

    def test_remap_if_present_leaves_unknown_ids(self):
        index = IdentityIndex()
        unknown = uuid4()

        assert index.remap_if_present(unknown) == unknown
        assert unknown not in index

    def test_remap_if_present_uses_seeded_ids(self):
        index = IdentityIndex()
        old, new = uuid4(), uuid4()
        index.seed(old, new)

        assert index.remap_if_present(old) == new

    def test_strict_lookup_requires_seed(self):
        index = IdentityIndex()
        with pytest.raises(KeyError):
            index[uuid4()]

    def test_custom_generator(self):
        fixed = uuid4()
        index = IdentityIndex(generator=lambda: fixed)

        assert index.remap_or_generate(uuid4()) == fixed


class TestSeeding:

    def test_seed_never_reassigns(self):
        index = IdentityIndex()
        old = uuid4()
        new = index.seed(old)

        assert index.seed(old) == new
        assert index.seed(old, new) == new
        with pytest.raises(ValueError):
            index.seed(old, uuid4())
