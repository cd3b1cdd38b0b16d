"""Configuration loading and defaults."""

from __future__ import annotations

import os
import tomllib
from dataclasses import dataclass, field
from pathlib import Path

from barrelroll.models import GenerationMode, GenerationOptions

LOG_LEVEL_ENV = "BARRELROLL_LOG_LEVEL"


@dataclass
class GenerationConfig:
    recursive: bool = False
    mode: str = GenerationMode.CREATE_OR_UPDATE.value
    max_concurrent: int = 20
    preserve_definitions: bool = True

    def to_options(self) -> GenerationOptions:
        return GenerationOptions(
            recursive=self.recursive,
            mode=GenerationMode(self.mode),
            max_concurrent=max(1, self.max_concurrent),
            preserve_definitions=self.preserve_definitions,
        )


@dataclass
class CacheConfig:
    enabled: bool = False
    max_entries: int = 1000


@dataclass
class LoggingConfig:
    level: str = "INFO"
    file: str = ""

    def resolve_level(self) -> str:
        """Get level from env var, falling back to the configured one."""
        return (os.environ.get(LOG_LEVEL_ENV) or self.level).upper()


@dataclass
class BarrelrollConfig:
    generation: GenerationConfig = field(default_factory=GenerationConfig)
    cache: CacheConfig = field(default_factory=CacheConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    @classmethod
    def load(cls, path: Path | None = None) -> BarrelrollConfig:
        """Load config from barrelroll.toml, falling back to defaults."""
        if path is None:
            path = Path("barrelroll.toml")
        if not path.exists():
            return cls()

        with open(path, "rb") as f:
            raw = tomllib.load(f)

        config = cls()

        if "generation" in raw:
            g = raw["generation"]
            mode = g.get("mode", config.generation.mode)
            GenerationMode(mode)  # raises ValueError on unknown modes
            config.generation = GenerationConfig(
                recursive=g.get("recursive", config.generation.recursive),
                mode=mode,
                max_concurrent=g.get("max_concurrent", config.generation.max_concurrent),
                preserve_definitions=g.get(
                    "preserve_definitions", config.generation.preserve_definitions
                ),
            )

        if "cache" in raw:
            c = raw["cache"]
            config.cache = CacheConfig(
                enabled=c.get("enabled", config.cache.enabled),
                max_entries=c.get("max_entries", config.cache.max_entries),
            )

        if "logging" in raw:
            lg = raw["logging"]
            config.logging = LoggingConfig(
                level=lg.get("level", config.logging.level),
                file=lg.get("file", config.logging.file),
            )

        return config


DEFAULT_CONFIG_TEMPLATE = """\
[generation]
recursive = false
mode = "create_or_update"  # or "update_existing"
max_concurrent = 20
preserve_definitions = true

[cache]
enabled = false
max_entries = 1000

[logging]
# BARRELROLL_LOG_LEVEL env var overrides level
level = "INFO"
file = ""
"""
