"""Keyword catalog: weighted keywords, negative keywords and source boosts.

The catalog ships as package data (``data/catalog.yaml``). It is loaded once,
validated, and handed out as read-only mappings so that user customisation can
only ever go through a :class:`~paper_topics.topics.overlay.UserKeywordOverlay`.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from types import MappingProxyType
from typing import Any, Mapping

import yaml

from paper_topics.topics.categories import TopicCategory, UnknownCategoryError

logger = logging.getLogger(__name__)

_DEFAULT_CATALOG = Path(__file__).resolve().parent / "data" / "catalog.yaml"

MIN_WEIGHT = 1
MAX_WEIGHT = 10
MAX_SCORE = 100


class CatalogError(ValueError):
    """Raised when static keyword data is malformed."""


def clamp_weight(weight: float) -> int:
    """Clamp a keyword weight to the supported 1-10 range."""
    return int(max(MIN_WEIGHT, min(MAX_WEIGHT, round(weight))))


def clamp_score(score: float) -> float:
    """Clamp a category score to 0-100."""
    return max(0.0, min(float(MAX_SCORE), score))


def normalize_term(term: str) -> str:
    return term.strip().lower()


@dataclass(frozen=True)
class KeywordEntry:
    term: str
    weight: int
    exact: bool = False

    @classmethod
    def create(cls, term: str, weight: float = 8, exact: bool = False) -> KeywordEntry:
        """Build an entry with a normalised term and a clamped weight."""
        return cls(term=normalize_term(term), weight=clamp_weight(weight), exact=bool(exact))

    def to_dict(self) -> dict[str, Any]:
        return {"term": self.term, "weight": self.weight, "exact": self.exact}


@dataclass(frozen=True)
class NegativeKeyword:
    term: str
    penalty: int


class KeywordCatalog:
    """Read-only view over validated catalog data."""

    def __init__(
        self,
        keywords: Mapping[TopicCategory, tuple[KeywordEntry, ...]],
        negatives: Mapping[TopicCategory, tuple[NegativeKeyword, ...]],
        boosts: Mapping[str, Mapping[TopicCategory, float]],
        version: int | str = 0,
    ):
        self._keywords = MappingProxyType(
            {c: tuple(keywords.get(c, ())) for c in TopicCategory}
        )
        self._negatives = MappingProxyType(
            {c: tuple(negatives.get(c, ())) for c in TopicCategory}
        )
        self._boosts = MappingProxyType(
            {src: MappingProxyType(dict(table)) for src, table in boosts.items()}
        )
        self._terms = {
            c: frozenset(k.term.lower() for k in entries)
            for c, entries in self._keywords.items()
        }
        self.version = version

    def keywords(self, category: TopicCategory) -> tuple[KeywordEntry, ...]:
        return self._keywords[category]

    def negatives(self, category: TopicCategory) -> tuple[NegativeKeyword, ...]:
        return self._negatives[category]

    @property
    def boosts(self) -> Mapping[str, Mapping[TopicCategory, float]]:
        return self._boosts

    def boost(self, source_category: str, category: TopicCategory) -> float | None:
        """Return the multiplier for (source category, topic), or None."""
        table = self._boosts.get(source_category)
        if table is None:
            return None
        return table.get(category)

    def has_term(self, category: TopicCategory, term: str) -> bool:
        return normalize_term(term) in self._terms[category]

    def __len__(self) -> int:
        return sum(len(entries) for entries in self._keywords.values())


def _parse_category(key: Any, where: str, errors: list[str]) -> TopicCategory | None:
    try:
        return TopicCategory.parse(key)
    except UnknownCategoryError:
        errors.append(f"{where}: unknown category {key!r}")
        return None


def validate_catalog(data: dict[str, Any]) -> list[str]:
    """Check raw catalog data and return a list of problems (empty if valid)."""
    errors: list[str] = []

    for key, entries in (data.get("keywords") or {}).items():
        category = _parse_category(key, "keywords", errors)
        seen: set[str] = set()
        for i, entry in enumerate(entries or []):
            where = f"keywords.{key}[{i}]"
            term = normalize_term(str(entry.get("term", "")))
            weight = entry.get("weight")
            if not term:
                errors.append(f"{where}: empty term")
            elif term in seen:
                errors.append(f"{where}: duplicate term {term!r}")
            seen.add(term)
            if not isinstance(weight, int) or isinstance(weight, bool) \
                    or not MIN_WEIGHT <= weight <= MAX_WEIGHT:
                errors.append(f"{where}: weight {weight!r} outside {MIN_WEIGHT}-{MAX_WEIGHT}")
        if category is TopicCategory.OTHER and entries:
            errors.append("keywords.other: the fallback category must have no keywords")

    for key, entries in (data.get("negative_keywords") or {}).items():
        _parse_category(key, "negative_keywords", errors)
        for i, entry in enumerate(entries or []):
            where = f"negative_keywords.{key}[{i}]"
            penalty = entry.get("penalty")
            if not normalize_term(str(entry.get("term", ""))):
                errors.append(f"{where}: empty term")
            if not isinstance(penalty, (int, float)) or penalty < 0:
                errors.append(f"{where}: penalty {penalty!r} must be >= 0")

    for source, table in (data.get("source_boosts") or {}).items():
        for key, factor in (table or {}).items():
            _parse_category(key, f"source_boosts.{source}", errors)
            if not isinstance(factor, (int, float)) or factor <= 0:
                errors.append(f"source_boosts.{source}.{key}: factor {factor!r} must be > 0")

    return errors


def build_catalog(data: dict[str, Any]) -> KeywordCatalog:
    """Validate raw catalog data and build a KeywordCatalog.

    Raises:
        CatalogError: If the data fails validation.
    """
    errors = validate_catalog(data)
    if errors:
        raise CatalogError("Invalid keyword catalog:\n  " + "\n  ".join(errors))

    keywords = {
        TopicCategory.parse(key): tuple(
            KeywordEntry(
                term=normalize_term(e["term"]),
                weight=e["weight"],
                exact=bool(e.get("exact", False)),
            )
            for e in entries or []
        )
        for key, entries in (data.get("keywords") or {}).items()
    }
    negatives = {
        TopicCategory.parse(key): tuple(
            NegativeKeyword(term=normalize_term(e["term"]), penalty=e["penalty"])
            for e in entries or []
        )
        for key, entries in (data.get("negative_keywords") or {}).items()
    }
    boosts = {
        str(source): {TopicCategory.parse(k): float(v) for k, v in (table or {}).items()}
        for source, table in (data.get("source_boosts") or {}).items()
    }
    return KeywordCatalog(keywords, negatives, boosts, version=data.get("version", 0))


def load_catalog(path: Path | str | None = None) -> KeywordCatalog:
    """Load and validate a catalog YAML file (defaults to the packaged one)."""
    catalog_path = Path(path) if path else _DEFAULT_CATALOG
    with open(catalog_path) as f:
        raw = yaml.safe_load(f) or {}
    catalog = build_catalog(raw)
    logger.debug(
        "Loaded keyword catalog v%s from %s (%d keywords)",
        catalog.version, catalog_path, len(catalog),
    )
    return catalog


@lru_cache(maxsize=1)
def default_catalog() -> KeywordCatalog:
    """The packaged catalog, loaded once per process."""
    return load_catalog()
