"""Client configuration.

Configuration is read from environment variables and, optionally, a YAML
file. Environment variables take precedence over the file:

    VAULTSENS_BASE_URL, VAULTSENS_API_KEY, VAULTSENS_API_SECRET,
    VAULTSENS_TIMEOUT, VAULTSENS_RETRIES, VAULTSENS_RETRY_DELAY

Example ``~/.vaultsens/config.yaml``::

    base_url: https://api.vaultsens.com
    api_key: vs_key
    api_secret: vs_secret
    timeout: 30
    retry:
      retries: 2
      retry_delay: 0.4
      retry_on: [429, 500, 502, 503, 504]
"""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional, Union

import yaml

from .transport.retry_policy import RetryPolicy, default_retry_policy

DEFAULT_TIMEOUT = 30.0

ENV_PREFIX = "VAULTSENS_"


@dataclass
class ClientConfig:
    """Connection settings owned by a single client instance."""
    base_url: str
    api_key: Optional[str] = None
    api_secret: Optional[str] = None
    timeout: float = DEFAULT_TIMEOUT
    retry: RetryPolicy = field(default_factory=default_retry_policy)

    def __post_init__(self):
        self.base_url = self.base_url.rstrip("/")
        validate_timeout(self.timeout)

    @property
    def has_credentials(self) -> bool:
        return bool(self.api_key) and bool(self.api_secret)


def validate_timeout(timeout: float) -> None:
    if timeout <= 0:
        raise ValueError(f"timeout must be > 0, got {timeout}")


def default_config_path() -> Path:
    return Path.home() / ".vaultsens" / "config.yaml"


def load_config(path: Optional[Union[str, Path]] = None) -> ClientConfig:
    """Load client configuration from the environment and a YAML file.

    Args:
        path: YAML config file. Defaults to ~/.vaultsens/config.yaml,
            which is skipped silently when absent.

    Returns:
        ClientConfig with environment values overriding file values.

    Raises:
        FileNotFoundError: If an explicit path does not exist.
        ValueError: If the file is malformed or no base URL is configured.
    """
    if path is not None:
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {path}")
        data = _read_yaml(path)
    else:
        default_path = default_config_path()
        data = _read_yaml(default_path) if default_path.exists() else {}

    return parse_config_data(data, env=os.environ, source=str(path or "<env>"))


def parse_config_data(
    data: dict[str, Any],
    env: Optional[dict[str, str]] = None,
    source: str = "<inline>",
) -> ClientConfig:
    """Build a ClientConfig from a mapping plus environment overrides."""
    env = env or {}
    retry_data = data.get("retry") or {}
    if not isinstance(retry_data, dict):
        raise ValueError(f"'retry' must be a mapping in {source}")

    base_url = env.get(f"{ENV_PREFIX}BASE_URL") or data.get("base_url")
    if not base_url:
        raise ValueError(
            f"Missing base URL in {source}.\n"
            f"Set {ENV_PREFIX}BASE_URL or 'base_url' in the config file."
        )

    policy = default_retry_policy()
    retries = _env_or(env, "RETRIES", retry_data.get("retries"), int)
    retry_delay = _env_or(env, "RETRY_DELAY", retry_data.get("retry_delay"), float)
    retry_on = retry_data.get("retry_on")
    if retries is not None or retry_delay is not None or retry_on is not None:
        policy = policy.replace(
            retries=policy.retries if retries is None else retries,
            retry_delay=retry_delay,
            retry_on=retry_on,
        )

    timeout = _env_or(env, "TIMEOUT", data.get("timeout"), float)

    return ClientConfig(
        base_url=str(base_url),
        api_key=_as_str(env.get(f"{ENV_PREFIX}API_KEY") or data.get("api_key")),
        api_secret=_as_str(env.get(f"{ENV_PREFIX}API_SECRET") or data.get("api_secret")),
        timeout=DEFAULT_TIMEOUT if timeout is None else timeout,
        retry=policy,
    )


def _read_yaml(path: Path) -> dict[str, Any]:
    with open(path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f)

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValueError(f"Config must be a YAML mapping, got {type(data).__name__}")
    return data


def _as_str(value: Any) -> Optional[str]:
    return None if value is None else str(value)


def _env_or(env: dict[str, str], name: str, fallback: Any, cast) -> Any:
    raw = env.get(f"{ENV_PREFIX}{name}")
    value = raw if raw not in (None, "") else fallback
    if value is None:
        return None
    try:
        return cast(value)
    except (TypeError, ValueError):
        raise ValueError(f"Invalid value for {name.lower()}: {value!r}") from None
