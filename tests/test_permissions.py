"""Category 0: The read/write record stored per key."""

import pytest
from pydantic import ValidationError

from syft_acl import AccessType, Permissions


def test_defaults_are_empty():
    assert Permissions().is_empty()
    assert Permissions.from_json({}) == Permissions()


def test_with_access_returns_new_record():
    base = Permissions()
    updated = base.with_access(AccessType.WRITE, True)
    assert updated.write
    assert not base.write
    assert updated.get(AccessType.WRITE)
    assert not updated.get(AccessType.READ)


def test_records_are_immutable():
    with pytest.raises(ValidationError):
        Permissions().read = True


def test_merge():
    merged = Permissions(read=True).merge(Permissions(write=True))
    assert merged == Permissions(read=True, write=True)


def test_to_json_only_true_flags():
    assert Permissions(read=True).to_json() == {"read": True}
    assert Permissions().to_json() == {}
