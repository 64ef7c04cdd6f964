from unittest.mock import Mock

import pytest

from syft_acl import ACL, Role, User

TEST_USER_ID = "userId"


@pytest.fixture
def acl():
    return ACL()


@pytest.fixture
def lazy_user():
    return User(is_lazy=True)


@pytest.fixture
def saved_user():
    return User(id="test")


@pytest.fixture
def mock_lazy_user():
    """Lazy user double so tests can capture the registered save listener."""
    return Mock(spec=User, id=None, is_lazy=True)


@pytest.fixture
def role():
    return Role(name="Player", id="test")


@pytest.fixture
def unsaved_role():
    return Role(name="Player")
