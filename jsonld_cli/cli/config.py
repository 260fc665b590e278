"""Configuration file loading and validation.

This module loads option defaults from JSON and YAML files and merges CLI
arguments over them (CLI taking precedence).

Top-level keys apply to every command:
- indent: Indentation width for structured output
- newline: Whether to end output with a newline
- base: Base IRI passed to the engine
- encoding: Text encoding for stdin and local files

A section named after a command overrides those and may set the command's
own options, for example::

    indent: 4
    frame:
      frame: ./frames/person.jsonld
      embed: false
"""

import json
from pathlib import Path
from typing import Any

try:
    import yaml
except ImportError:
    yaml = None  # type: ignore

COMMON_KEYS = ("indent", "newline", "base", "encoding")

COMMAND_KEYS: dict[str, tuple[str, ...]] = {
    "format": ("format", "nquads", "json"),
    "compact": ("context", "strict", "compact_arrays", "graph", "expansion"),
    "expand": ("keep_free_floating_nodes",),
    "flatten": ("context",),
    "frame": ("frame", "embed", "explicit", "omit_default"),
    "normalize": ("format", "nquads"),
}


class ConfigError(Exception):
    """Configuration file error.

    Raised when configuration files cannot be loaded, parsed, or validated.
    This includes file not found errors, syntax errors in JSON/YAML, and
    unknown keys or sections.
    """
    pass


def load_config(path: Path) -> dict[str, Any]:
    """Load configuration from JSON or YAML file.

    Format is determined by file extension (.json, .yaml, .yml) or
    auto-detected (JSON first, then YAML) if the extension is anything else.

    Args:
        path: Path to configuration file

    Returns:
        Configuration dictionary

    Raises:
        ConfigError: If file cannot be loaded, parsed, or is not a mapping

    Example:
        >>> from pathlib import Path
        >>> from jsonld_cli.cli.config import load_config
        >>>
        >>> config = load_config(Path("jsonld.yaml"))
        >>> print(config["indent"])  # 4
    """
    if not path.exists():
        raise ConfigError(f"Configuration file not found: {path}")

    try:
        content = path.read_text()

        if path.suffix == ".json":
            config = json.loads(content)

        elif path.suffix in (".yaml", ".yml"):
            if yaml is None:
                raise ConfigError(
                    f"YAML support not available. Install pyyaml to use YAML config files."
                )
            config = yaml.safe_load(content)

        else:
            try:
                config = json.loads(content)
            except json.JSONDecodeError:
                if yaml is None:
                    raise ConfigError(
                        f"Could not parse {path} as JSON and YAML support not available. "
                        f"Install pyyaml or use .json extension."
                    )
                config = yaml.safe_load(content)

    except ConfigError:
        raise
    except json.JSONDecodeError as e:
        raise ConfigError(f"Invalid JSON in {path}: {e}")
    except Exception as e:
        if yaml is not None and isinstance(e, yaml.YAMLError):
            raise ConfigError(f"Invalid YAML in {path}: {e}")
        raise ConfigError(f"Failed to load config from {path}: {e}")

    if config is None:
        return {}
    if not isinstance(config, dict):
        raise ConfigError(f"Configuration in {path} must be a mapping, got {type(config).__name__}")
    return config


def validate_config(config: dict[str, Any]) -> list[str]:
    """Validate configuration structure.

    Checks that:
    - Every top-level key is a common option or a command section
    - Every command section is a mapping
    - Every key inside a section is valid for that command

    Returns:
        List of validation error messages (empty list if valid)

    Example:
        >>> from jsonld_cli.cli.config import validate_config
        >>>
        >>> validate_config({"indent": 4, "expand": {"embed": True}})
        ["Unknown option 'embed' in section 'expand'"]
    """
    errors = []

    for key, value in config.items():
        if key in COMMON_KEYS:
            continue
        if key not in COMMAND_KEYS:
            errors.append(f"Unknown option '{key}'")
            continue
        if value is None:
            continue
        if not isinstance(value, dict):
            errors.append(f"Section '{key}' must be a mapping")
            continue
        allowed = COMMON_KEYS + COMMAND_KEYS[key]
        for option in value:
            if option not in allowed:
                errors.append(f"Unknown option '{option}' in section '{key}'")

    return errors


def command_config(config: dict[str, Any], command: str) -> dict[str, Any]:
    """Return the options a command takes from a config file.

    Common top-level keys come first; the command's own section overrides them.
    Keys without a value (``embed:`` in YAML) count as not set.
    """
    merged = {key: config[key] for key in COMMON_KEYS if config.get(key) is not None}
    section = config.get(command) or {}
    merged.update({key: value for key, value in section.items() if value is not None})
    return merged


def load_command_config(path: Path | None, command: str) -> dict[str, Any]:
    """Load, validate and select the config entries for one command.

    Returns an empty dict when no path is given.

    Raises:
        ConfigError: If loading fails or validation reports errors
    """
    if path is None:
        return {}

    config = load_config(path)
    errors = validate_config(config)
    if errors:
        raise ConfigError(f"Invalid configuration in {path}: {'; '.join(errors)}")
    return command_config(config, command)


def merge_config(
    file_config: dict[str, Any],
    **overrides: Any
) -> dict[str, Any]:
    """Merge CLI arguments into configuration loaded from a file.

    CLI arguments take precedence over config file values. Only non-None
    override values are applied, allowing config file values to be used
    when CLI arguments are not specified.

    Example:
        >>> from jsonld_cli.cli.config import merge_config
        >>>
        >>> file_config = {"indent": 4, "base": "http://example.org/"}
        >>> merged = merge_config(file_config, indent=2, base=None)
        >>> print(merged)  # {"indent": 2, "base": "http://example.org/"}
    """
    merged = file_config.copy()

    for key, value in overrides.items():
        if value is not None:
            merged[key] = value
    return merged
