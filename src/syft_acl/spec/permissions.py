from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict

PUBLIC_KEY = "*"
UNRESOLVED_KEY = "*unresolved"
UNRESOLVED_USER_JSON_KEY = "unresolvedUser"
ROLE_PREFIX = "role:"


class AccessType(str, Enum):
    READ = "read"
    WRITE = "write"


class Permissions(BaseModel):
    """Read/write flags for a single key of an ACL.

    Instances are immutable; every change produces a new record so that
    copied ACLs never share mutable state.
    """

    model_config = ConfigDict(frozen=True)

    read: bool = False
    write: bool = False

    def get(self, access_type: AccessType) -> bool:
        return self.read if access_type == AccessType.READ else self.write

    def with_access(self, access_type: AccessType, allowed: bool) -> "Permissions":
        return self.model_copy(update={access_type.value: allowed})

    def is_empty(self) -> bool:
        return not (self.read or self.write)

    def merge(self, other: "Permissions") -> "Permissions":
        return Permissions(read=self.read or other.read, write=self.write or other.write)

    def to_json(self) -> dict[str, bool]:
        # false flags are omitted on the wire
        return {k: v for k, v in self.model_dump().items() if v}

    @classmethod
    def from_json(cls, data: Any) -> "Permissions":
        return cls.model_validate(data)
