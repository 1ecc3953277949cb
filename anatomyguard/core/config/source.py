import functools
import typing as t
import urllib.parse
from pathlib import Path

import pydantic as p
import yaml
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource
from pydantic_settings import SettingsError

import anatomyguard.lib.util as util
from anatomyguard.model import DeploymentEnvironment

SKIP_KEYS = frozenset({"env", "root", "override"})


class CurrentState(t.TypedDict, total=False):
    root: t.Required[p.AnyUrl]
    env: t.Required[DeploymentEnvironment]


class SettingsCurrentState(CurrentState, total=False):
    override: t.Required[tuple[str, ...]]


def cascade_paths(state: CurrentState) -> list[Path]:
    """Directories searched for YAML files, in increasing order of precedence."""
    root = state["root"]
    assert root.scheme == "file" and root.path is not None, "root is not a legible location of YAML files"
    rootp = Path(urllib.parse.unquote(root.path))
    env = state["env"]
    paths = [rootp]
    if env is not DeploymentEnvironment.Local:
        # we don't have a special directory for local/ that's just root
        paths.append(rootp / "env.d" / env.value)
    return paths


def load_cascade(paths: t.Iterable[Path], filename: str) -> dict[str, t.Any] | None:
    """Deep-merge every ``filename`` found along ``paths``; None if there is none."""
    merged: dict[str, t.Any] | None = None
    for path in paths:
        fn = path / filename
        if not fn.exists():
            continue
        loaded = yaml.safe_load(fn.read_text(encoding="utf8"))
        if loaded is None:
            continue
        if merged is None or not isinstance(loaded, dict) or not isinstance(merged, dict):
            merged = loaded
        else:
            merged = util.deep_update(merged, loaded)
    return merged


class SettingsSource(PydanticBaseSettingsSource):
    def __call__(self) -> dict[str, t.Any]:
        data: dict[str, t.Any] = {}

        for field_name, field in self.settings_cls.model_fields.items():
            if field_name in SKIP_KEYS:
                continue
            try:
                field_value, field_key, value_is_complex = self.get_field_value(field, field_name)
                field_value = self.prepare_field_value(field_name, field, field_value, value_is_complex)
            except KeyError:
                continue
            except ValueError as e:
                raise SettingsError(f"error parsing value for field {field_name!r} from source {self!r}") from e
            except Exception as e:
                raise SettingsError(f"error getting value for field {field_name!r} from source {self!r}") from e

            data[field_key] = field_value
        return data

    def prepare_field_value(
        self, field_name: str, field: p.fields.FieldInfo, value: t.Any, value_is_complex: bool
    ) -> t.Any:
        return value


class YAMLCascadingSettingsSource(SettingsSource):
    """Reads ``<field>.yaml`` from the config root, then from ``env.d/<env>/``.

    Files later in the cascade are deep-merged over earlier ones, so an
    environment file only has to name the keys it changes.
    """

    @functools.cached_property
    def load_paths(self) -> list[Path]:
        return cascade_paths(t.cast(CurrentState, self.current_state))

    def get_field_value(self, field: p.fields.FieldInfo, field_name: str) -> tuple[t.Any, str, bool]:
        value = load_cascade(self.load_paths, f"{field_name}.yaml")
        if value is None:
            raise KeyError(field_name)
        return value, field_name, isinstance(value, dict)


class OverrideSettingsSource(SettingsSource):
    """Applies ``dotted.key=value`` overrides on top of another source.

    Values are parsed as YAML, so ``-o llm.temperature=0`` yields a number.
    """

    def __init__(self, settings_cls: type[BaseSettings], base: SettingsSource):
        super().__init__(settings_cls)
        self.base = base

    def __call__(self) -> dict[str, t.Any]:
        self.base._set_current_state(self.current_state)  # pyright: ignore [reportPrivateUsage]
        return util.deep_update(self.base(), {k: v for k, v in self.parsed_options.items() if k not in SKIP_KEYS})

    @functools.cached_property
    def parsed_options(self) -> dict[str, t.Any]:
        current_state = t.cast(SettingsCurrentState, self.current_state)
        od: dict[str, t.Any] = {}
        for o in current_state.get("override", ()):
            if "=" not in o:
                raise SettingsError(f"override {o!r} is not of the form key=value")
            k, v = [s.strip() for s in o.split("=", 1)]

            target = od
            path = k.split(".")
            for key in path[:-1]:
                if key not in target:
                    target[key] = {}
                target = target[key]
            target[path[-1]] = yaml.safe_load(v)
        return od

    def get_field_value(self, field: p.fields.FieldInfo, field_name: str) -> tuple[t.Any, str, bool]:
        raise KeyError(field_name)


class YAMLSecretsSource(SettingsSource):
    """Reads ``secrets.yaml`` from the secrets root, then from ``env.d/<env>/``."""

    filename: t.ClassVar[str] = "secrets.yaml"

    @functools.cached_property
    def secrets(self) -> dict[str, t.Any]:
        loaded = load_cascade(cascade_paths(t.cast(CurrentState, self.current_state)), self.filename)
        if loaded is None:
            return {}
        if not isinstance(loaded, dict):
            raise SettingsError(f"{self.filename} must contain a mapping")
        return loaded

    def get_field_value(self, field: p.fields.FieldInfo, field_name: str) -> tuple[t.Any, str, bool]:
        if field_name not in self.secrets:
            raise KeyError(field_name)
        value = self.secrets[field_name]
        return value, field_name, isinstance(value, dict)
