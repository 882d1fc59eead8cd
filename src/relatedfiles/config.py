"""Configuration management for related-files."""

import os
from enum import Enum
from pathlib import Path
from typing import Optional

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, Field, field_validator


load_dotenv()


DEFAULT_IGNORED_DIRS = [
    ".git",
    "node_modules",
    "__pycache__",
    ".venv",
    "venv",
    "dist",
    "build",
    "target",
    ".gradle",
    ".idea",
    ".pytest_cache",
]

# Standard library and framework prefixes that are never worth copying.
DEFAULT_EXCLUDED_PACKAGES = [
    "java.",
    "javax.",
    "jakarta.",
    "jdk.",
    "sun.",
    "com.sun.",
    "kotlin.",
    "kotlinx.",
    "scala.",
    "groovy.",
    "org.springframework.",
    "org.apache.commons.",
    "org.slf4j.",
    "lombok.",
]

ENV_PREFIX = "RELATED_FILES_"


class RelatednessLevel(str, Enum):
    """Coarse knob bundling expansion depth and dependent/implementer expansion."""

    STRICT = "strict"
    MEDIUM = "medium"
    BROAD = "broad"


# Depth used when the policy leaves max_depth unset.
LEVEL_DEFAULT_DEPTH = {
    RelatednessLevel.STRICT: 0,
    RelatednessLevel.MEDIUM: 1,
    RelatednessLevel.BROAD: 3,
}


def _parse_int(value: Optional[str], fallback: Optional[int]) -> Optional[int]:
    try:
        return int(value) if value is not None else fallback
    except ValueError:
        return fallback


def _parse_bool(value: Optional[str], fallback: bool) -> bool:
    if value is None:
        return fallback
    lowered = value.strip().lower()
    if lowered in ("1", "true", "yes", "on"):
        return True
    if lowered in ("0", "false", "no", "off"):
        return False
    return fallback


def _split_list(value: Optional[str]) -> list[str]:
    if not value:
        return []
    return [entry.strip() for entry in value.split(",") if entry.strip()]


class TraversalPolicy(BaseModel):
    """Rules for which related files a traversal pulls in."""

    max_depth: Optional[int] = Field(default=None, ge=0, le=10)
    package_segments: int = Field(default=2, ge=1)
    include_implementations: bool = Field(default=True)
    include_javadoc: bool = Field(default=True)
    smart_pruning: bool = Field(default=True)
    include_dependencies: bool = Field(default=False)
    include_decompiled: bool = Field(default=False)
    max_decompiled_files: int = Field(default=10, ge=0)
    excluded_packages: list[str] = Field(
        default_factory=lambda: DEFAULT_EXCLUDED_PACKAGES.copy()
    )
    only_direct_references: bool = Field(default=True)
    relatedness_level: RelatednessLevel = Field(default=RelatednessLevel.MEDIUM)

    @field_validator("excluded_packages")
    @classmethod
    def _dedupe_excluded(cls, value: list[str]) -> list[str]:
        # Ordered set: keep first occurrence, drop blanks.
        seen: set[str] = set()
        result = []
        for entry in value:
            entry = entry.strip()
            if entry and entry not in seen:
                seen.add(entry)
                result.append(entry)
        return result

    @property
    def effective_max_depth(self) -> int:
        if self.max_depth is not None:
            return self.max_depth
        return LEVEL_DEFAULT_DEPTH[self.relatedness_level]

    @classmethod
    def from_env(cls) -> "TraversalPolicy":
        """Load a policy from ``RELATED_FILES_*`` environment variables."""
        defaults = cls()

        def env(name: str) -> Optional[str]:
            return os.getenv(ENV_PREFIX + name)

        excluded = DEFAULT_EXCLUDED_PACKAGES.copy()
        excluded.extend(_split_list(env("EXCLUDED_PACKAGES")))

        level = defaults.relatedness_level
        level_env = env("LEVEL")
        if level_env:
            try:
                level = RelatednessLevel(level_env.strip().lower())
            except ValueError:
                pass

        return cls(
            max_depth=_parse_int(env("MAX_DEPTH"), defaults.max_depth),
            package_segments=_parse_int(env("PACKAGE_SEGMENTS"), defaults.package_segments),
            include_implementations=_parse_bool(
                env("INCLUDE_IMPLEMENTATIONS"), defaults.include_implementations
            ),
            include_javadoc=_parse_bool(env("INCLUDE_JAVADOC"), defaults.include_javadoc),
            smart_pruning=_parse_bool(env("SMART_PRUNING"), defaults.smart_pruning),
            include_dependencies=_parse_bool(
                env("INCLUDE_DEPENDENCIES"), defaults.include_dependencies
            ),
            include_decompiled=_parse_bool(
                env("INCLUDE_DECOMPILED"), defaults.include_decompiled
            ),
            max_decompiled_files=_parse_int(
                env("MAX_DECOMPILED_FILES"), defaults.max_decompiled_files
            ),
            excluded_packages=excluded,
            only_direct_references=_parse_bool(
                env("ONLY_DIRECT_REFERENCES"), defaults.only_direct_references
            ),
            relatedness_level=level,
        )

    @classmethod
    def from_yaml(cls, path: Path, base: Optional["TraversalPolicy"] = None) -> "TraversalPolicy":
        """Load a policy from a YAML mapping, layered over *base* (or defaults)."""
        raw = yaml.safe_load(Path(path).read_text(encoding="utf-8")) or {}
        if not isinstance(raw, dict):
            raise ValueError(f"Policy file must contain a mapping: {path}")
        merged = (base or cls()).model_dump()
        merged.update(raw)
        return cls.model_validate(merged)

    def to_yaml(self) -> str:
        return yaml.safe_dump(self.model_dump(mode="json"), default_flow_style=False, sort_keys=False)


class Config(BaseModel):
    """Application configuration."""

    # Scanner Settings
    max_file_size: int = Field(default=1_000_000)  # 1MB
    ignored_dirs: list[str] = Field(default_factory=lambda: DEFAULT_IGNORED_DIRS.copy())

    # Decompiler Settings
    javap_path: Optional[str] = Field(default=None)
    classpath: list[str] = Field(default_factory=list)

    policy: TraversalPolicy = Field(default_factory=TraversalPolicy)

    @classmethod
    def from_env(cls) -> "Config":
        """Load configuration from environment variables."""
        ignored_dirs = DEFAULT_IGNORED_DIRS.copy()
        ignored_dirs.extend(_split_list(os.getenv(ENV_PREFIX + "IGNORED_DIRS")))

        classpath_env = os.getenv(ENV_PREFIX + "CLASSPATH")
        classpath = classpath_env.split(os.pathsep) if classpath_env else []

        return cls(
            max_file_size=_parse_int(os.getenv(ENV_PREFIX + "MAX_FILE_SIZE"), 1_000_000),
            ignored_dirs=ignored_dirs,
            javap_path=os.getenv(ENV_PREFIX + "JAVAP"),
            classpath=[entry for entry in classpath if entry],
            policy=TraversalPolicy.from_env(),
        )
