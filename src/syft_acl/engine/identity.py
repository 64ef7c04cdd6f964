import logging
import uuid
from dataclasses import dataclass, field
from typing import Any, Callable, Optional, Protocol

logger = logging.getLogger(__name__)

SaveCallback = Callable[[Any, Optional[Exception]], None]


class LazyIdentity(Protocol):
    """A user-like object that may not have a durable id yet.

    Save listeners are called with ``(user, error)`` once the user has been
    saved (``error is None``) or the save failed.
    """

    id: str | None
    is_lazy: bool

    def register_save_listener(self, callback: SaveCallback) -> None: ...

    def unregister_save_listener(self, callback: SaveCallback) -> None: ...


class RoleLike(Protocol):
    id: str | None
    name: str


class Encoder(Protocol):
    def encode(self, identity: Any) -> Any: ...


class Decoder(Protocol):
    def decode(self, value: Any) -> Any: ...


@dataclass(eq=False)
class User:
    id: str | None = None  # durable object id, None until saved
    is_lazy: bool = False
    local_id: str = field(default_factory=lambda: uuid.uuid4().hex)
    _save_listeners: list[SaveCallback] = field(
        default_factory=list, repr=False, init=False
    )

    def register_save_listener(self, callback: SaveCallback) -> None:
        self._save_listeners.append(callback)

    def unregister_save_listener(self, callback: SaveCallback) -> None:
        if callback in self._save_listeners:
            self._save_listeners.remove(callback)

    def finish_save(
        self, object_id: str | None = None, error: Exception | None = None
    ) -> None:
        """Complete a save of this user and notify the save listeners.

        On success the user gets its durable id and stops being lazy. On
        failure nothing changes on the user; listeners still receive the error.
        """
        if error is None:
            if object_id is not None:
                self.id = object_id
            self.is_lazy = False
        else:
            logger.debug(f"Save of user {self.local_id} failed: {error}")

        # listeners unregister themselves while being called
        for callback in list(self._save_listeners):
            callback(self, error)


@dataclass
class Role:
    name: str
    id: str | None = None
