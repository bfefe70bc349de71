from dynaconf import Dynaconf


import os
from typing import Optional


ENVVAR_PREFIX = 'PASSPERSIST'


class AppConfig:
    """Settings from an optional YAML/TOML file, overridable by PASSPERSIST_* environment variables."""

    def __init__(self, config_path: Optional[str] = None) -> None:
        if config_path is not None and not os.path.exists(config_path):
            raise FileNotFoundError(f"Config file {config_path} not found")
        self.config_path = config_path
        self.settings = Dynaconf(
            settings_files=[config_path] if config_path else [],
            envvar_prefix=ENVVAR_PREFIX,
            environments=False,
        )

    def get(self, key: str, default: object = None) -> object:
        return self.settings.get(key, default)

    def reload(self) -> None:
        self.settings.reload()
