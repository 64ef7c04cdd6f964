import logging
import weakref

from syft_acl.config import ACLConfig
from syft_acl.engine.acl import ACL
from syft_acl.engine.identity import LazyIdentity

logger = logging.getLogger(__name__)


class DefaultACLController:
    """Holds the ACL applied to newly created objects.

    The stored ACL is always a shared copy: callers must copy it before
    modifying it for a single object.
    """

    def __init__(self):
        self.default_acl: ACL | None = None
        self.with_access_for_current_user = False
        self._acl_with_current_user: ACL | None = None
        self._last_current_user: weakref.ref | None = None

    @classmethod
    def from_config(cls, config: ACLConfig | None = None) -> "DefaultACLController":
        config = config or ACLConfig()
        controller = cls()
        if config.default_public_read or config.default_public_write:
            acl = ACL()
            acl.set_public_read_access(config.default_public_read)
            acl.set_public_write_access(config.default_public_write)
            controller.set(acl, config.default_access_for_current_user)
        return controller

    def set(self, acl: ACL | None, with_access_for_current_user: bool) -> None:
        self._acl_with_current_user = None
        self._last_current_user = None
        self.with_access_for_current_user = with_access_for_current_user
        if acl is None:
            self.default_acl = None
            return

        default_acl = acl.copy()
        default_acl.shared = True
        self.default_acl = default_acl
        logger.debug(
            f"Default ACL set (access for current user: {with_access_for_current_user})"
        )

    def get(self, current_user: LazyIdentity | None = None) -> ACL | None:
        if (
            not self.with_access_for_current_user
            or self.default_acl is None
            or current_user is None
        ):
            return self.default_acl

        last_user = self._last_current_user() if self._last_current_user else None
        if last_user is not current_user:
            acl = self.default_acl.copy()
            acl.shared = True
            acl.set_read_access(current_user, True)
            acl.set_write_access(current_user, True)
            self._acl_with_current_user = acl
            self._last_current_user = weakref.ref(current_user)
        return self._acl_with_current_user
