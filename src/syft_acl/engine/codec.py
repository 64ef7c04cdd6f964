from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from syft_acl.engine.identity import User

USER_TYPE = "User"


class EncodedUser(BaseModel):
    """Wire form of a user referenced from an ACL's ``unresolvedUser`` field."""

    model_config = ConfigDict(populate_by_name=True)

    type: Literal["User"] = Field(default=USER_TYPE, alias="__type")
    object_id: str | None = Field(default=None, alias="objectId")
    local_id: str = Field(alias="localId")
    is_lazy: bool = Field(default=False, alias="isLazy")


class UserEncoder:
    def encode(self, identity: User) -> dict[str, Any]:
        encoded = EncodedUser(
            object_id=identity.id,
            local_id=identity.local_id,
            is_lazy=identity.is_lazy,
        )
        return encoded.model_dump(by_alias=True)


class UserDecoder:
    """Decodes users, reusing instances that are already known locally.

    Returning the known instance keeps ``acl.unresolved_user is user`` true
    for users that are still alive in this process.
    """

    def __init__(self, known_users: dict[str, User] | None = None):
        self.known_users = known_users if known_users is not None else {}

    def decode(self, value: Any) -> User:
        try:
            encoded = EncodedUser.model_validate(value)
        except ValidationError as e:
            raise ValueError(f"Not an encoded user: {value!r}") from e

        known = self.known_users.get(encoded.local_id)
        if known is not None:
            return known

        user = User(
            id=encoded.object_id,
            is_lazy=encoded.is_lazy,
            local_id=encoded.local_id,
        )
        self.known_users[user.local_id] = user
        return user
