from syft_acl.config import ACLConfig
from syft_acl.engine.acl import ACL
from syft_acl.engine.codec import UserDecoder, UserEncoder
from syft_acl.engine.defaults import DefaultACLController
from syft_acl.engine.identity import (
    Decoder,
    Encoder,
    LazyIdentity,
    Role,
    RoleLike,
    User,
)
from syft_acl.spec.permissions import (
    PUBLIC_KEY,
    UNRESOLVED_KEY,
    UNRESOLVED_USER_JSON_KEY,
    AccessType,
    Permissions,
)

__all__ = [
    "ACL",
    "ACLConfig",
    "AccessType",
    "Permissions",
    "DefaultACLController",
    "User",
    "Role",
    "UserEncoder",
    "UserDecoder",
    "LazyIdentity",
    "RoleLike",
    "Encoder",
    "Decoder",
    "PUBLIC_KEY",
    "UNRESOLVED_KEY",
    "UNRESOLVED_USER_JSON_KEY",
]
