import pydantic_settings


class ACLConfig(pydantic_settings.BaseSettings):
    model_config = pydantic_settings.SettingsConfigDict(env_prefix="SYFT_ACL_")

    default_public_read: bool = False
    default_public_write: bool = False
    default_access_for_current_user: bool = True
