import typing as t

from pydantic_settings import BaseSettings as PydanticBaseSettings
from pydantic_settings import PydanticBaseSettingsSource

from anatomyguard.model import BaseModel


class _DictInitMixin(object):
    def __init__(self, cf: dict[str, t.Any] | None = None, **kwargs: t.Any):
        # specifically allow initialization with a dict
        if cf is not None:
            kwargs = {**cf, **kwargs}
        super().__init__(**kwargs)


# NOTE: BaseModel comes after PydanticBaseSettings in the MRO so that we get its
#       by_alias=True model_dump behavior
class BaseSettings(_DictInitMixin, PydanticBaseSettings, BaseModel):  # pyright: ignore [reportIncompatibleVariableOverride]
    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[PydanticBaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        # nested settings only ever come from their parent's sources
        return (init_settings,)


class BaseSecrets(_DictInitMixin, PydanticBaseSettings, BaseModel):  # pyright: ignore [reportIncompatibleVariableOverride]
    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[PydanticBaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        return (init_settings,)
