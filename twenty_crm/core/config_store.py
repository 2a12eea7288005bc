"""Configuration for the code generator."""

import json
import logging
import os
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from dotenv import load_dotenv

from .models import ConfigError

logger = logging.getLogger(__name__)

API_URL_ENV = "TWENTY_API_URL"
API_TOKEN_ENV = "TWENTY_API_TOKEN"

DEFAULT_OPTIONS = {
    "overwrite": False,
    "generate_services": True,
    "generate_collections": True,
}

_MODULE_PATH = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*(\.[A-Za-z_][A-Za-z0-9_]*)*$")


@dataclass
class CodegenConfig:
    """
    Settings for one code generation run.

    Attributes:
        namespace: Dotted package path of the generated code, e.g. "myapp.crm"
        output_dir: Directory the package is written to
        api_url: Twenty REST API root, e.g. "https://example.twenty.com/rest/"
        api_token: Twenty API key
        entities: Singular names of the entities to generate
        options: overwrite, generate_services and generate_collections flags
    """
    namespace: str
    output_dir: str
    api_url: str
    api_token: str
    entities: list[str] = field(default_factory=list)
    options: dict[str, Any] = field(default_factory=dict)

    def validate(self) -> None:
        """
        Check that all settings are present and well-formed.

        Raises:
            ConfigError: Describing the first problem found
        """
        for name in ("namespace", "output_dir", "api_url"):
            if not getattr(self, name):
                raise ConfigError(f"Missing required config: {name}")

        if not self.api_token:
            raise ConfigError(
                "Missing required config: api_token. "
                f"Set the {API_TOKEN_ENV} environment variable or provide it in the config file."
            )

        if not _MODULE_PATH.match(self.namespace):
            raise ConfigError(
                f"Invalid namespace '{self.namespace}': expected a dotted Python module path"
            )

    def option(self, key: str, default: Any = None) -> Any:
        return self.options.get(key, default)

    def has_option(self, key: str) -> bool:
        """True if the option is set to a truthy value."""
        return bool(self.options.get(key))

    @property
    def absolute_output_dir(self) -> Path:
        """Output directory, relative paths taken from the working directory."""
        return Path(self.output_dir).expanduser().resolve()

    def ensure_output_directory(self) -> Path:
        """
        Create the output directory if needed.

        Returns:
            The absolute output directory

        Raises:
            ConfigError: If the directory cannot be created or written
        """
        path = self.absolute_output_dir
        try:
            path.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise ConfigError(f"Failed to create output directory {path}: {e}") from e

        if not os.access(path, os.W_OK):
            raise ConfigError(f"Output directory is not writable: {path}")

        return path


def load_codegen_config(path: str | Path) -> CodegenConfig:
    """
    Load a CodegenConfig from a JSON file.

    A ``.env`` file next to the config file is loaded first, so
    TWENTY_API_URL and TWENTY_API_TOKEN can be kept out of the config
    file; they are used when ``api_url`` or ``api_token`` is missing.
    A relative ``output_dir`` is taken relative to the config file.

    Args:
        path: Path to the JSON config file

    Returns:
        The loaded configuration

    Raises:
        ConfigError: If the file does not exist, is not valid JSON, or
            lacks a required value
    """
    path = Path(path)

    if not path.exists():
        raise ConfigError(f"Config file not found: {path}")

    env_file = path.parent / ".env"
    if env_file.exists():
        load_dotenv(dotenv_path=env_file)
        logger.debug(f"Loaded environment from {env_file}")

    try:
        with open(path, "r") as f:
            data = json.load(f)
        logger.debug(f"Loaded JSON from {path}")
    except json.JSONDecodeError as e:
        raise ConfigError(f"Invalid JSON in {path}: {e}") from e
    except OSError as e:
        raise ConfigError(f"Failed to load JSON from {path}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigError(f"Config file must contain a JSON object: {path}")

    api_token = data.get("api_token") or os.environ.get(API_TOKEN_ENV)
    if not api_token:
        raise ConfigError(
            "Missing required config: api_token. "
            f"Please set {API_TOKEN_ENV} environment variable or provide it in config file."
        )

    for key in ("namespace", "output_dir"):
        if not data.get(key):
            raise ConfigError(f"Missing required config: {key}")

    api_url = data.get("api_url") or os.environ.get(API_URL_ENV)
    if not api_url:
        raise ConfigError(
            f"Missing required config: api_url. Set {API_URL_ENV} or provide it in config file."
        )

    output_dir = Path(data["output_dir"]).expanduser()
    if not output_dir.is_absolute():
        output_dir = path.parent.resolve() / output_dir

    entities = data.get("entities") or []
    if isinstance(entities, str):
        entities = _split_entities(entities)

    return CodegenConfig(
        namespace=data["namespace"],
        output_dir=str(output_dir),
        api_url=api_url,
        api_token=api_token,
        entities=list(entities),
        options={**DEFAULT_OPTIONS, **(data.get("options") or {})},
    )


def codegen_config_from_options(
    namespace: str | None,
    output: str | None,
    api_url: str | None,
    api_token: str | None,
    entities: str | list[str] | None = None,
    overwrite: bool = False,
    no_services: bool = False,
    no_collections: bool = False,
) -> CodegenConfig:
    """
    Build a CodegenConfig from command-line options.

    Args:
        namespace: Target package path
        output: Output directory
        api_url: API root URL
        api_token: API key
        entities: List of names or a comma-separated string
        overwrite: Replace existing files
        no_services: Skip service modules
        no_collections: Skip collection modules

    Raises:
        ConfigError: If a required option is missing
    """
    required = {
        "--namespace": namespace,
        "--output": output,
        "--api-url": api_url,
        "--api-token": api_token,
    }
    for flag, value in required.items():
        if not value:
            raise ConfigError(f"Missing required option: {flag}")

    if isinstance(entities, str):
        entities = _split_entities(entities)

    return CodegenConfig(
        namespace=namespace,
        output_dir=output,
        api_url=api_url,
        api_token=api_token,
        entities=list(entities or []),
        options={
            "overwrite": overwrite,
            "generate_services": not no_services,
            "generate_collections": not no_collections,
        },
    )


def _split_entities(value: str) -> list[str]:
    return [name.strip() for name in value.split(",") if name.strip()]
