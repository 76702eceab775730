"""
Load journal configuration from YAML.

A config file either holds the journal settings at the top level or under a
`journal:` key, so the journal section can live inside a larger node config:

    ```yaml
    journal:
      logs_dir: ${PRIVLOG_DATA:-/var/lib/node/private}
      max_entries: 1000
      retention_seconds: 1728000
    ```
"""
import os
import re
from pathlib import Path
from typing import Any, Union

import yaml
from pydantic import ValidationError

from privlog.core.journal import JournalConfig
from privlog.utility.exceptions import ConfigError

# ${VAR_NAME} or ${VAR_NAME:-default}
ENV_VAR_PATTERN = re.compile(r"\$\{([^:}]+)(?::-([^}]*))?\}")


def expand_env_vars(data: Any) -> Any:
    """
    Recursively expand environment variables in configuration data.

    Raises:
        ConfigError: If a variable is not set and has no default
    """
    if isinstance(data, str):

        def replace_env_var(match):
            var_name = match.group(1)
            default_value = match.group(2)

            env_value = os.getenv(var_name)
            if env_value is not None:
                return env_value
            if default_value is not None:
                return default_value
            raise ConfigError(
                f"Environment variable '{var_name}' is not set and no default"
            )

        return ENV_VAR_PATTERN.sub(replace_env_var, data)

    if isinstance(data, dict):
        return {key: expand_env_vars(value) for key, value in data.items()}

    if isinstance(data, list):
        return [expand_env_vars(item) for item in data]

    return data


def load_config(path: Union[str, Path]) -> JournalConfig:
    """
    Read a JournalConfig from a YAML file.

    Raises:
        ConfigError: If the file is missing, isn't valid YAML, references an
            unset environment variable, or holds invalid settings
    """
    path = Path(path)
    try:
        with open(path, "r", encoding="utf-8") as f:
            raw_config = yaml.safe_load(f) or {}
    except FileNotFoundError as e:
        raise ConfigError(f"Config file not found: {path}") from e
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e

    if not isinstance(raw_config, dict):
        raise ConfigError(f"Config file {path} must contain a mapping")

    journal_data = raw_config.get("journal", raw_config)
    if journal_data is None:
        journal_data = {}
    if not isinstance(journal_data, dict):
        raise ConfigError(f"'journal' section in {path} must be a mapping")

    try:
        return JournalConfig(**expand_env_vars(journal_data))
    except ValidationError as e:
        raise ConfigError(f"Invalid journal configuration in {path}: {e}") from e
