"""
YAML configuration loading for Accio.

Configuration is looked up in a fixed list of locations (or taken from an
explicit path), parsed with PyYAML, overlaid with ``ACCIO_*`` environment
variables and finally validated into a FinderConfig.
"""

import os
import yaml
from pathlib import Path
from typing import Dict, Any, Iterator, Optional, List, Union
import logging
from dataclasses import dataclass, field

from pydantic import ValidationError

from ..errors import ConfigurationError
from ..models.config import FinderConfig, validate_config_dict


logger = logging.getLogger(__name__)

_TRUE_VALUES = {'1', 'true', 'yes', 'y', 'on'}
_FALSE_VALUES = {'0', 'false', 'no', 'n', 'off'}

_SECTION_COMMENTS = {
    'search': "Traversal strategy (parallel: true/false, or null to be asked)",
    'progress': "Directory-count spinner shown while searching",
    'logging': "Log level and format for stderr output",
}


@dataclass
class ConfigParseResult:
    """
    Outcome of loading a configuration.

    Attributes:
        config: The validated configuration
        warnings: Non-fatal problems worth telling the user about
        config_path: File the configuration came from, None for defaults
        is_default: True when no configuration file was found
    """
    config: FinderConfig
    warnings: List[str] = field(default_factory=list)
    config_path: Optional[Path] = None
    is_default: bool = False


class ConfigParser:
    """
    Loads, validates and writes Accio configuration files.

    With ``strict_mode`` enabled any warning produced while loading is
    raised as a ConfigurationError instead of being returned.
    """

    DEFAULT_CONFIG_NAMES = [
        '.accio.yaml',
        '.accio.yml',
        'accio.yaml',
        'accio.yml'
    ]

    ENV_PARALLEL = 'ACCIO_PARALLEL'
    ENV_MAX_WORKERS = 'ACCIO_MAX_WORKERS'
    ENV_LOG_LEVEL = 'ACCIO_LOG_LEVEL'

    def __init__(self, strict_mode: bool = False):
        self.strict_mode = strict_mode
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")

    def load_config(self, config_path: Optional[Union[str, Path]] = None) -> ConfigParseResult:
        """
        Load configuration from a file, or from the first default location found.

        Args:
            config_path: Explicit configuration file; searched for when None

        Returns:
            ConfigParseResult with the validated configuration

        Raises:
            ConfigurationError: If the file is missing, unreadable or invalid
        """
        if config_path:
            config_path = Path(config_path)
            if not config_path.exists():
                raise ConfigurationError(f"Configuration file not found: {config_path}")
            raw = self._load_yaml_file(config_path)
        else:
            config_path, raw = self._find_and_load_config()

        is_default = raw is None
        data = self._apply_env_overrides(raw or {})
        config = FinderConfig.from_dict(self._validate_config_data(data))

        warnings = config.validate_configuration()
        if is_default:
            warnings.append("No configuration file found, using default settings")
        elif config_path.suffix not in ('.yaml', '.yml'):
            warnings.append(f"Configuration file {config_path.name} does not have a .yaml or .yml extension")

        if self.strict_mode and warnings:
            raise ConfigurationError(f"Configuration warnings in strict mode: {'; '.join(warnings)}")

        self.logger.info(f"Configuration loaded from {config_path or 'defaults'}")
        return ConfigParseResult(config, warnings, config_path, is_default)

    def _search_locations(self) -> Iterator[Path]:
        for directory in (Path.cwd(), Path.home(), Path.home() / '.config' / 'accio'):
            for name in self.DEFAULT_CONFIG_NAMES:
                yield directory / name

    def _find_and_load_config(self) -> tuple[Optional[Path], Optional[Dict[str, Any]]]:
        """
        Load the first readable configuration file from the default locations.

        Candidates that fail to parse are logged and skipped.

        Returns:
            Tuple of (config_path, config_data), or (None, None) when nothing is found
        """
        for candidate in self._search_locations():
            if not candidate.is_file():
                continue
            try:
                data = self._load_yaml_file(candidate)
            except ConfigurationError as e:
                self.logger.warning(f"Skipping {candidate}: {e}")
                continue
            self.logger.info(f"Found configuration file: {candidate}")
            return candidate, data

        self.logger.info("No configuration file found, using defaults")
        return None, None

    def _load_yaml_file(self, file_path: Path) -> Dict[str, Any]:
        """
        Read a YAML mapping from disk. Empty files give an empty mapping.

        Raises:
            ConfigurationError: If the file cannot be read, is not valid YAML,
                or does not hold a mapping
        """
        try:
            with open(file_path, 'r', encoding='utf-8') as f:
                data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Invalid YAML syntax in {file_path}: {e}") from e
        except OSError as e:
            raise ConfigurationError(f"Cannot read configuration file {file_path}: {e}") from e

        if data is None:
            self.logger.warning(f"Configuration file is empty: {file_path}")
            return {}
        if not isinstance(data, dict):
            raise ConfigurationError(f"Configuration file must contain a YAML object, got {type(data).__name__}")
        return data

    def _apply_env_overrides(self, config_data: Dict[str, Any]) -> Dict[str, Any]:
        """
        Overlay ACCIO_* environment variables on loaded configuration data.

        Raises:
            ConfigurationError: If an environment value cannot be parsed
        """
        overrides: Dict[str, Dict[str, Any]] = {}

        parallel = os.getenv(self.ENV_PARALLEL, '').strip().lower()
        if parallel in _TRUE_VALUES:
            overrides.setdefault('search', {})['parallel'] = True
        elif parallel in _FALSE_VALUES:
            overrides.setdefault('search', {})['parallel'] = False
        elif parallel:
            raise ConfigurationError(f"Invalid boolean in {self.ENV_PARALLEL}: {parallel!r}")

        max_workers = os.getenv(self.ENV_MAX_WORKERS, '').strip()
        if max_workers:
            try:
                overrides.setdefault('search', {})['max_workers'] = int(max_workers)
            except ValueError as e:
                raise ConfigurationError(f"Invalid integer in {self.ENV_MAX_WORKERS}: {max_workers!r}") from e

        log_level = os.getenv(self.ENV_LOG_LEVEL, '').strip()
        if log_level:
            overrides.setdefault('logging', {})['level'] = log_level

        merged = dict(config_data)
        for section, values in overrides.items():
            current = merged.get(section)
            if current is not None and not isinstance(current, dict):
                # Left as is so validation reports the malformed section.
                continue
            merged[section] = {**(current or {}), **values}
            self.logger.debug(f"Environment overrides for '{section}': {values}")
        return merged

    def _validate_config_data(self, config_data: Dict[str, Any]) -> Dict[str, Any]:
        """Check raw data against the configuration models without keeping the result."""
        try:
            validated = validate_config_dict(config_data)
            FinderConfig.from_dict(validated)
        except (ValueError, ValidationError) as e:
            raise ConfigurationError(f"Configuration validation failed: {e}") from e
        return validated

    def save_config(self, config: FinderConfig, output_path: Union[str, Path]) -> None:
        """
        Write a configuration as commented YAML, creating parent directories.

        Raises:
            ConfigurationError: If the file cannot be written
        """
        self._write_text(Path(output_path), self._render_yaml(config.to_dict()), "write configuration file")
        self.logger.info(f"Configuration saved to {output_path}")

    @staticmethod
    def _write_text(path: Path, content: str, action: str) -> None:
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            with open(path, 'w', encoding='utf-8') as f:
                f.write(content)
        except OSError as e:
            raise ConfigurationError(f"Cannot {action} {path}: {e}") from e

    @staticmethod
    def _render_yaml(config_dict: Dict[str, Any]) -> str:
        lines = [
            "# Accio Configuration",
            "# Traversal strategy, progress display and logging for `accio search`",
            "",
        ]
        for section, comment in _SECTION_COMMENTS.items():
            if section not in config_dict:
                continue
            lines.append(f"# {comment}")
            lines.append(yaml.safe_dump({section: config_dict[section]}, sort_keys=False).rstrip())
            lines.append("")
        return "\n".join(lines)

    def validate_config_file(self, config_path: Union[str, Path]) -> List[str]:
        """
        Validate a configuration file as written, ignoring environment overrides.

        Returns:
            List of validation errors (empty if valid)
        """
        config_path = Path(config_path)
        if not config_path.exists():
            return [f"Configuration file not found: {config_path}"]

        try:
            self._validate_config_data(self._load_yaml_file(config_path))
        except ConfigurationError as e:
            return [str(e)]
        return []

    def get_config_template(self) -> str:
        """Get a commented template listing every option at its default."""
        return self._render_yaml(FinderConfig().to_dict())


def load_config(config_path: Optional[Union[str, Path]] = None, strict_mode: bool = False) -> ConfigParseResult:
    """
    Convenience function to load configuration.

    Raises:
        ConfigurationError: If configuration is invalid
    """
    return ConfigParser(strict_mode=strict_mode).load_config(config_path)


def validate_config_file(config_path: Union[str, Path]) -> List[str]:
    """Convenience function to validate a configuration file."""
    return ConfigParser().validate_config_file(config_path)


def create_config_template(output_path: Union[str, Path]) -> None:
    """
    Write the template configuration to ``output_path``.

    Raises:
        ConfigurationError: If the template cannot be written
    """
    parser = ConfigParser()
    parser._write_text(Path(output_path), parser.get_config_template(), "create template file")
