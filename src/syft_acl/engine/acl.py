import logging
import weakref
from typing import Any

from syft_acl.engine.identity import Decoder, Encoder, LazyIdentity, RoleLike
from syft_acl.spec.permissions import (
    PUBLIC_KEY,
    ROLE_PREFIX,
    UNRESOLVED_KEY,
    UNRESOLVED_USER_JSON_KEY,
    AccessType,
    Permissions,
)

logger = logging.getLogger(__name__)


class _UserResolutionListener:
    """Save listener that resolves an ACL's unresolved user.

    Holds the ACL weakly: a lazy user that is never saved must not keep
    discarded ACLs alive.
    """

    def __init__(self, acl: "ACL"):
        self._acl_ref = weakref.ref(acl)

    def __call__(self, user: LazyIdentity, error: Exception | None) -> None:
        try:
            acl = self._acl_ref()
            if acl is not None:
                acl._handle_user_saved(self, user, error)
        finally:
            user.unregister_save_listener(self)


class ACL:
    """Per-object read/write permissions keyed by user id, role or public.

    A lazy user (not saved yet) is stored under a placeholder key until its
    save completes, at which point the entry moves to the user's durable id.
    """

    def __init__(self, owner: LazyIdentity | None = None):
        self._permissions: dict[str, Permissions] = {}
        self._unresolved_user: LazyIdentity | None = None
        self._save_listener: _UserResolutionListener | None = None
        self.shared = False

        if owner is not None:
            self.set_read_access(owner, True)
            self.set_write_access(owner, True)

    @property
    def permissions_by_id(self) -> dict[str, Permissions]:
        return dict(self._permissions)

    @property
    def unresolved_user(self) -> LazyIdentity | None:
        return self._unresolved_user

    def has_unresolved_user(self) -> bool:
        return self._unresolved_user is not None

    # --- users and raw ids ---

    def set_read_access(self, user: str | LazyIdentity, allowed: bool) -> None:
        self._set_access(AccessType.READ, user, allowed)

    def set_write_access(self, user: str | LazyIdentity, allowed: bool) -> None:
        self._set_access(AccessType.WRITE, user, allowed)

    def get_read_access(self, user: str | LazyIdentity) -> bool:
        return self._get_access(AccessType.READ, user)

    def get_write_access(self, user: str | LazyIdentity) -> bool:
        return self._get_access(AccessType.WRITE, user)

    # --- public ---

    def set_public_read_access(self, allowed: bool) -> None:
        self._set_access_for_key(AccessType.READ, PUBLIC_KEY, allowed)

    def set_public_write_access(self, allowed: bool) -> None:
        self._set_access_for_key(AccessType.WRITE, PUBLIC_KEY, allowed)

    def get_public_read_access(self) -> bool:
        return self._get_access_for_key(AccessType.READ, PUBLIC_KEY)

    def get_public_write_access(self) -> bool:
        return self._get_access_for_key(AccessType.WRITE, PUBLIC_KEY)

    # --- roles ---

    def set_role_read_access(self, role: str | RoleLike, allowed: bool) -> None:
        self._set_access_for_key(AccessType.READ, _role_key(role), allowed)

    def set_role_write_access(self, role: str | RoleLike, allowed: bool) -> None:
        self._set_access_for_key(AccessType.WRITE, _role_key(role), allowed)

    def get_role_read_access(self, role: str | RoleLike) -> bool:
        return self._get_access_for_key(AccessType.READ, _role_key(role))

    def get_role_write_access(self, role: str | RoleLike) -> bool:
        return self._get_access_for_key(AccessType.WRITE, _role_key(role))

    # --- lazy users ---

    def resolve_user(self, user: LazyIdentity | None) -> None:
        """Move the placeholder entry to ``user``'s durable id.

        Does nothing unless ``user`` is the tracked unresolved user and has
        been assigned an id.
        """
        if user is None or user is not self._unresolved_user:
            return
        if user.id is None:
            return

        self._detach_save_listener()
        unresolved = self._permissions.pop(UNRESOLVED_KEY, None)
        if unresolved is not None:
            existing = self._permissions.get(user.id)
            self._permissions[user.id] = (
                existing.merge(unresolved) if existing else unresolved
            )
        self._unresolved_user = None
        logger.debug(f"Resolved unresolved user to {user.id}")

    def _handle_user_saved(
        self,
        listener: _UserResolutionListener,
        user: LazyIdentity,
        error: Exception | None,
    ) -> None:
        # the listener unregisters itself after this returns
        if self._save_listener is listener:
            self._save_listener = None
        if error is not None:
            logger.warning(f"Unresolved user was not saved, keeping placeholder: {error}")
            return
        self.resolve_user(user)

    def _track_unresolved_user(self, user: LazyIdentity) -> None:
        self._unresolved_user = user
        self._save_listener = _UserResolutionListener(self)
        user.register_save_listener(self._save_listener)
        logger.debug("Registered save listener for unresolved user")

    def _detach_save_listener(self) -> None:
        if self._save_listener is not None and self._unresolved_user is not None:
            self._unresolved_user.unregister_save_listener(self._save_listener)
        self._save_listener = None

    def _release_unresolved_user(self) -> None:
        self._detach_save_listener()
        self._unresolved_user = None
        logger.debug("Released unresolved user, no placeholder permissions left")

    def _set_unresolved_access(
        self, access_type: AccessType, user: LazyIdentity, allowed: bool
    ) -> None:
        if self._unresolved_user is None:
            if not allowed:
                return
            self._track_unresolved_user(user)
        # Only one unresolved user is tracked per ACL. Other lazy users write
        # into the same placeholder entry but are never resolved themselves.
        self._set_access_for_key(access_type, UNRESOLVED_KEY, allowed)
        if UNRESOLVED_KEY not in self._permissions:
            self._release_unresolved_user()

    # --- table ---

    def _set_access(
        self, access_type: AccessType, user: str | LazyIdentity | None, allowed: bool
    ) -> None:
        if user is None or isinstance(user, str):
            self._set_access_for_key(access_type, user, allowed)
        elif user.id is None and user.is_lazy:
            self._set_unresolved_access(access_type, user, allowed)
        else:
            self._set_access_for_key(access_type, _durable_id(user), allowed)

    def _get_access(
        self, access_type: AccessType, user: str | LazyIdentity | None
    ) -> bool:
        if user is None or isinstance(user, str):
            return self._get_access_for_key(access_type, user)
        if self._unresolved_user is not None and user is self._unresolved_user:
            return self._get_access_for_key(access_type, UNRESOLVED_KEY)
        if user.is_lazy:
            # a lazy user that was never granted anything
            return False
        return self._get_access_for_key(access_type, _durable_id(user))

    def _set_access_for_key(
        self, access_type: AccessType, key: str | None, allowed: bool
    ) -> None:
        _validate_key(key)
        current = self._permissions.get(key, Permissions())
        updated = current.with_access(access_type, allowed)
        if updated.is_empty():
            self._permissions.pop(key, None)
        else:
            self._permissions[key] = updated

    def _get_access_for_key(self, access_type: AccessType, key: str | None) -> bool:
        _validate_key(key)
        permissions = self._permissions.get(key)
        return permissions is not None and permissions.get(access_type)

    # --- copy and serialization ---

    def copy(self) -> "ACL":
        """Independent table, shared unresolved user with its own listener."""
        acl = ACL()
        acl._permissions = dict(self._permissions)
        acl.shared = self.shared
        if self._unresolved_user is not None:
            acl._track_unresolved_user(self._unresolved_user)
        return acl

    def to_json(self, encoder: Encoder) -> dict[str, Any]:
        data: dict[str, Any] = {
            key: permissions.to_json() for key, permissions in self._permissions.items()
        }
        if self._unresolved_user is not None:
            data[UNRESOLVED_USER_JSON_KEY] = encoder.encode(self._unresolved_user)
        return data

    @classmethod
    def from_json(cls, data: dict[str, Any], decoder: Decoder) -> "ACL":
        """Build an ACL from its JSON form.

        Records are copied as they are, except that all-false records are
        dropped: the table never stores a key without any access. A decoded
        unresolved user is not subscribed to save events, so the result never
        resolves on its own.
        """
        acl = cls()
        for key, value in data.items():
            if key == UNRESOLVED_USER_JSON_KEY:
                acl._unresolved_user = decoder.decode(value)
                continue
            permissions = Permissions.from_json(value)
            if not permissions.is_empty():
                acl._permissions[key] = permissions
        return acl

    def __repr__(self) -> str:
        return (
            f"ACL(permissions={self._permissions!r}, "
            f"unresolved_user={self._unresolved_user!r}, shared={self.shared})"
        )


def _validate_key(key: str | None) -> None:
    if not key:
        raise ValueError("ACL key must be a non-empty user id, role or '*'")


def _durable_id(user: LazyIdentity) -> str:
    if user.id is None:
        raise ValueError("Cannot set access for an unsaved user")
    return user.id


def _role_key(role: str | RoleLike | None) -> str:
    if isinstance(role, str):
        if not role:
            raise ValueError("Role name must not be empty")
        return ROLE_PREFIX + role
    if role is None or role.id is None:
        raise ValueError(
            "Roles must be saved to the server before they can be used in an ACL"
        )
    return ROLE_PREFIX + role.name
