import os
from enum import StrEnum
from typing import Any

from pydantic import BaseModel, field_validator


class OutputMode(StrEnum):
    SPLICE = "splice"
    SIDECAR = "sidecar"


class GeneratorConfig(BaseModel):
    import_path: str = "ormx"
    tag_key: str = "db"
    transient_field: str = "setNew"
    mode: OutputMode = OutputMode.SPLICE
    source_suffix: str = ".go"
    sidecar_suffix: str = "_ormx.go"

    @field_validator("import_path", "tag_key", "transient_field")
    @classmethod
    def _not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("must not be empty")
        return value

    @property
    def package_qualifier(self) -> str:
        """Package name used to qualify ormx identifiers in generated code."""
        return self.import_path.rstrip("/").rsplit("/", 1)[-1]


_ENV_VARS = {
    "import_path": "ORMXGEN_IMPORT_PATH",
    "tag_key": "ORMXGEN_TAG_KEY",
    "transient_field": "ORMXGEN_TRANSIENT_FIELD",
    "mode": "ORMXGEN_MODE",
}


def load_config(**overrides: Any) -> GeneratorConfig:
    """Build a config from ``ORMXGEN_*`` environment variables and explicit overrides.

    Overrides set to ``None`` are ignored so CLI options that were not given fall
    back to the environment, then to the defaults.
    """
    values: dict[str, Any] = {}
    for name, env_var in _ENV_VARS.items():
        env_value = os.getenv(env_var)
        if env_value:
            values[name] = env_value
    values.update({k: v for k, v in overrides.items() if v is not None})
    return GeneratorConfig.model_validate(values)
