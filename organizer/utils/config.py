from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from functools import lru_cache
from pathlib import Path
from typing import Any
import hashlib

import yaml

CONFIG_DIR = Path(__file__).resolve().parents[1] / "config"

PATTERNS_FILE = "patterns.yaml"
DOMAINS_FILE = "domains.yaml"


def compute_reference_hash(config_dir: Path = CONFIG_DIR) -> str:
    """Compute hash of all YAML config files.

    Returns a SHA-256 hash of all YAML config files in the config directory.
    This is recorded on exported snapshots so a reader can tell which
    pattern table classified the bookmarks.

    Returns:
        Hexadecimal hash string
    """
    config_files = sorted(config_dir.glob("*.yaml"))
    hasher = hashlib.sha256()
    for f in config_files:
        hasher.update(f.read_bytes())
    return hasher.hexdigest()


class CategoryType(str, Enum):
    TECHNOLOGY = "technology"
    REPOSITORY = "repository"
    DOCUMENTATION = "documentation"
    PACKAGE = "package"
    GENERAL = "general"


@dataclass(frozen=True)
class PatternEntry:
    tech: str
    patterns: tuple[str, ...]


@dataclass(frozen=True)
class DomainEntry:
    domain: str
    type: CategoryType
    tech: str


def _load_yaml(path: Path) -> dict[str, Any]:
    if not path.exists():
        return {}
    with path.open("r", encoding="utf-8") as handle:
        data = yaml.safe_load(handle) or {}
    if not isinstance(data, dict):
        raise ValueError(f"Config file must be a mapping: {path}")
    return data


def _normalize_pattern(pattern: Any) -> str:
    return str(pattern).strip().lower()


def _build_pattern_table(entries: Any, source: Path) -> tuple[PatternEntry, ...]:
    if not isinstance(entries, list):
        raise ValueError(f"'patterns' must be a list in {source}")

    table: list[PatternEntry] = []
    seen: set[str] = set()
    for entry in entries:
        if not isinstance(entry, dict) or "tech" not in entry:
            raise ValueError(f"Pattern entry needs a 'tech' key in {source}: {entry!r}")
        tech = _normalize_pattern(entry["tech"])
        if tech in seen:
            raise ValueError(f"Duplicate technology '{tech}' in {source}")
        seen.add(tech)

        patterns = tuple(
            cleaned
            for cleaned in (_normalize_pattern(p) for p in entry.get("patterns") or [])
            if cleaned
        )
        table.append(PatternEntry(tech=tech, patterns=patterns))

    return tuple(table)


def _build_domain_table(entries: Any, source: Path) -> tuple[DomainEntry, ...]:
    if not isinstance(entries, list):
        raise ValueError(f"'domains' must be a list in {source}")

    known_types = {category_type.value for category_type in CategoryType}
    table: list[DomainEntry] = []
    for entry in entries:
        if not isinstance(entry, dict) or "domain" not in entry:
            raise ValueError(f"Domain entry needs a 'domain' key in {source}: {entry!r}")
        category_type = entry.get("type") or CategoryType.GENERAL.value
        if category_type not in known_types:
            raise ValueError(
                f"Unknown category type '{category_type}' for '{entry['domain']}'"
            )
        table.append(
            DomainEntry(
                domain=_normalize_pattern(entry["domain"]),
                type=CategoryType(category_type),
                tech=_normalize_pattern(entry.get("tech") or "general"),
            )
        )

    return tuple(table)


@dataclass(frozen=True)
class Config:
    patterns: tuple[PatternEntry, ...]
    domains: tuple[DomainEntry, ...]
    reference_hash: str

    def tech_tags(self) -> set[str]:
        tags = {entry.tech for entry in self.patterns}
        tags.update(entry.tech for entry in self.domains)
        tags.add("general")
        return tags


def get_config_for(config_dir: Path) -> Config:
    patterns_path = config_dir / PATTERNS_FILE
    domains_path = config_dir / DOMAINS_FILE

    patterns_config = _load_yaml(patterns_path)
    domains_config = _load_yaml(domains_path)

    return Config(
        patterns=_build_pattern_table(
            patterns_config.get("patterns") or [], patterns_path
        ),
        domains=_build_domain_table(domains_config.get("domains") or [], domains_path),
        reference_hash=compute_reference_hash(config_dir),
    )


@lru_cache(maxsize=1)
def get_config() -> Config:
    return get_config_for(CONFIG_DIR)


def get_minimal_config() -> Config:
    return Config(patterns=tuple(), domains=tuple(), reference_hash="")
