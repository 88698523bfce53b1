"""
Configuration loader for typeref.

Loads configuration from .typeref.config.json/.yaml, falls back to the
source.include list of a jsdoc configuration file, and finally to defaults.
"""

import os
import json
import yaml
import logging
import dataclasses
from pathlib import Path
from typing import Dict, Any, List, Optional, Union
from dataclasses import dataclass, field, asdict

from .config import get_config
from .exceptions import ConfigurationError

logger = logging.getLogger(__name__)


@dataclass
class RewriterConfig:
    """Settings for one documentation-generation run."""

    # Absolute source roots, in priority order, used to derive implicit module ids
    source_roots: List[str] = field(default_factory=list)

    # Tie-break order for extension inference; also the files the runner picks up
    extensions: List[str] = field(default_factory=lambda: [
        '.js', '.mjs', '.cjs', '.jsx', '.ts', '.tsx'
    ])

    # Directory names skipped when discovering sources
    exclude: List[str] = field(default_factory=lambda: [
        '.git', 'node_modules', 'dist', 'build', 'coverage', '.cache'
    ])

    encoding: str = 'utf-8'

    def __post_init__(self):
        if isinstance(self.source_roots, str):
            self.source_roots = [self.source_roots]
        self.source_roots = [os.path.normpath(os.path.abspath(root)) for root in self.source_roots]

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any], base_dir: Optional[Path] = None) -> 'RewriterConfig':
        """Create from dictionary, filtering unknown keys.

        Relative source roots are resolved against base_dir (default: cwd).
        """
        valid_keys = {f.name for f in dataclasses.fields(cls)}
        filtered_data = {k: v for k, v in data.items() if k in valid_keys}
        roots = filtered_data.get('source_roots')
        if isinstance(roots, str):
            roots = [roots]
        if roots is not None:
            if not isinstance(roots, list):
                raise ConfigurationError(f"source_roots must be a list, got {type(roots).__name__}")
            base = Path(base_dir) if base_dir is not None else Path.cwd()
            filtered_data['source_roots'] = [str(base / root) for root in roots]
        return cls(**filtered_data)


class ConfigLoader:
    """Loads typeref configuration with smart defaults."""

    CONFIG_FILES = [
        '.typeref.config.json',
        '.typeref.config.yaml',
        '.typeref.config.yml',
    ]

    JSDOC_CONFIG_FILES = [
        'jsdoc.json',
        '.jsdoc.json',
        'conf.json',
    ]

    @classmethod
    def load(cls, project_path: Union[str, Path], config_file: Optional[Union[str, Path]] = None) -> RewriterConfig:
        """
        Load configuration for a project directory.

        Priority:
        1. Explicit config_file argument
        2. .typeref.config.{json,yaml,yml}
        3. source.include of a jsdoc config file
        4. TYPEREF_SOURCE_ROOTS, then <project>/src, then the project itself

        Args:
            project_path: Path to project root
            config_file: Optional explicit configuration file

        Returns:
            RewriterConfig with loaded or detected settings
        """
        project_path = Path(os.path.abspath(project_path))

        if config_file is not None:
            config_path = Path(config_file)
            if not config_path.exists():
                raise ConfigurationError(f"Config file not found: {config_path}", str(config_path))
            return cls._load_from_file(config_path)

        for name in cls.CONFIG_FILES:
            config_path = project_path / name
            if config_path.exists():
                logger.info(f"Loading config from: {name}")
                return cls._load_from_file(config_path)

        for name in cls.JSDOC_CONFIG_FILES:
            config_path = project_path / name
            if config_path.exists():
                logger.info(f"Loading source roots from jsdoc config: {name}")
                return cls._load_from_jsdoc(config_path)

        logger.info("No config file found, using default source roots")
        return cls._defaults(project_path)

    @classmethod
    def _read(cls, config_path: Path) -> Dict[str, Any]:
        try:
            with open(config_path, 'r', encoding='utf-8') as f:
                if config_path.suffix in ['.yaml', '.yml']:
                    data = yaml.safe_load(f) or {}
                else:
                    data = json.load(f)
        except (json.JSONDecodeError, yaml.YAMLError) as e:
            logger.error(f"Failed to parse config file {config_path}: {e}")
            raise ConfigurationError(f"Failed to parse config file: {e}", str(config_path)) from e
        except OSError as e:
            logger.error(f"Failed to load config file {config_path}: {e}")
            raise ConfigurationError(f"Failed to load config file: {e}", str(config_path)) from e

        if not isinstance(data, dict):
            raise ConfigurationError("Config file must contain a mapping", str(config_path))
        return data

    @classmethod
    def _load_from_file(cls, config_path: Path) -> RewriterConfig:
        """Load config from JSON or YAML file."""
        data = cls._read(config_path)
        base_dir = Path(os.path.abspath(config_path)).parent
        config = RewriterConfig.from_dict(data, base_dir=base_dir)
        if not config.source_roots:
            config.source_roots = cls._defaults(base_dir).source_roots
        logger.info(f"Loaded config with source roots: {config.source_roots}")
        return config

    @classmethod
    def _load_from_jsdoc(cls, config_path: Path) -> RewriterConfig:
        """Take source roots from a jsdoc configuration's source.include."""
        data = cls._read(config_path)
        base_dir = Path(os.path.abspath(config_path)).parent
        include = (data.get('source') or {}).get('include') or []
        if isinstance(include, str):
            include = [include]
        if not include:
            return cls._defaults(base_dir)
        return RewriterConfig.from_dict({'source_roots': include}, base_dir=base_dir)

    @classmethod
    def _defaults(cls, project_path: Path) -> RewriterConfig:
        env_roots = get_config()['SOURCE_ROOTS']
        if env_roots:
            return RewriterConfig.from_dict({'source_roots': env_roots}, base_dir=project_path)
        src_dir = project_path / 'src'
        if src_dir.is_dir():
            return RewriterConfig(source_roots=[str(src_dir)])
        return RewriterConfig(source_roots=[str(project_path)])


def load_config(project_path: Union[str, Path]) -> RewriterConfig:
    """Shorthand for ConfigLoader.load()"""
    return ConfigLoader.load(project_path)
