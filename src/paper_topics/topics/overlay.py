"""Per-user keyword customisations layered over the static catalog.

An overlay records, per category, the keywords a user added and the catalog
keywords they disabled. Scoring never reads user state from anywhere else:
callers pass the overlay explicitly, and persistence goes through
:class:`OverlayStore`.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Iterator

from paper_topics.topics.catalog import (
    KeywordCatalog,
    KeywordEntry,
    clamp_weight,
    default_catalog,
    normalize_term,
)
from paper_topics.topics.categories import TopicCategory, UnknownCategoryError

logger = logging.getLogger(__name__)

DEFAULT_USER_WEIGHT = 8


@dataclass(frozen=True)
class CategoryStats:
    defaults: int
    added: int
    removed: int
    total: int


class UserKeywordOverlay:
    """Added and removed keywords for every topic category."""

    def __init__(self, catalog: KeywordCatalog | None = None):
        self._catalog = catalog if catalog is not None else default_catalog()
        self.added: dict[TopicCategory, list[KeywordEntry]] = {c: [] for c in TopicCategory}
        self.removed: dict[TopicCategory, list[str]] = {c: [] for c in TopicCategory}

    @property
    def catalog(self) -> KeywordCatalog:
        return self._catalog

    def _find_added(self, category: TopicCategory, term: str) -> int | None:
        for i, entry in enumerate(self.added[category]):
            if entry.term.lower() == term:
                return i
        return None

    def add_keyword(
        self,
        category: TopicCategory | str,
        term: str,
        weight: float = DEFAULT_USER_WEIGHT,
        exact: bool = False,
    ) -> None:
        """Add a user keyword, or re-enable a disabled catalog keyword."""
        category = TopicCategory.parse(category)
        term = normalize_term(term)
        if not term:
            return

        if self._find_added(category, term) is not None:
            return

        if term in self.removed[category]:
            self.removed[category].remove(term)
            logger.debug("Re-enabled catalog keyword %r in %s", term, category)
            return

        if self._catalog.has_term(category, term):
            return

        self.added[category].append(KeywordEntry.create(term, weight, exact))
        logger.debug("Added keyword %r to %s", term, category)

    def remove_keyword(self, category: TopicCategory | str, term: str) -> None:
        """Delete a user keyword, or disable a catalog keyword."""
        category = TopicCategory.parse(category)
        term = normalize_term(term)
        if not term:
            return

        index = self._find_added(category, term)
        if index is not None:
            del self.added[category][index]
            logger.debug("Deleted user keyword %r from %s", term, category)
            return

        if self._catalog.has_term(category, term) and term not in self.removed[category]:
            self.removed[category].append(term)
            logger.debug("Disabled catalog keyword %r in %s", term, category)

    def update_keyword_weight(self, category: TopicCategory | str, term: str, weight: float) -> None:
        """Change the weight of a user-added keyword. Catalog keywords are untouched."""
        category = TopicCategory.parse(category)
        index = self._find_added(category, normalize_term(term))
        if index is None:
            return
        entry = self.added[category][index]
        self.added[category][index] = KeywordEntry(entry.term, clamp_weight(weight), entry.exact)

    def reset_category(self, category: TopicCategory | str) -> None:
        category = TopicCategory.parse(category)
        self.added[category] = []
        self.removed[category] = []

    def reset_all(self) -> None:
        for category in TopicCategory:
            self.reset_category(category)

    def get_effective_keywords(self, category: TopicCategory | str) -> list[KeywordEntry]:
        """Catalog keywords minus disabled ones, followed by user additions."""
        category = TopicCategory.parse(category)
        removed = set(self.removed[category])
        defaults = [k for k in self._catalog.keywords(category) if k.term.lower() not in removed]
        return defaults + list(self.added[category])

    def is_user_added(self, category: TopicCategory | str, term: str) -> bool:
        return self._find_added(TopicCategory.parse(category), normalize_term(term)) is not None

    def is_disabled(self, category: TopicCategory | str, term: str) -> bool:
        return normalize_term(term) in self.removed[TopicCategory.parse(category)]

    def get_category_stats(self, category: TopicCategory | str) -> CategoryStats:
        category = TopicCategory.parse(category)
        defaults = len(self._catalog.keywords(category))
        added = len(self.added[category])
        removed = len(self.removed[category])
        return CategoryStats(defaults, added, removed, defaults + added - removed)

    def is_empty(self) -> bool:
        return not any(self.added.values()) and not any(self.removed.values())

    def to_dict(self) -> dict[str, Any]:
        """JSON-serialisable form: ``{"added": {...}, "removed": {...}}``."""
        return {
            "added": {c.value: [k.to_dict() for k in self.added[c]] for c in TopicCategory},
            "removed": {c.value: list(self.removed[c]) for c in TopicCategory},
        }

    @classmethod
    def from_dict(
        cls, data: dict[str, Any] | None, catalog: KeywordCatalog | None = None
    ) -> UserKeywordOverlay:
        """Rebuild an overlay from :meth:`to_dict` output.

        Unknown categories and malformed entries are skipped with a warning,
        and the rest is re-normalised so hand-edited files still satisfy the
        overlay invariants.
        """
        overlay = cls(catalog)
        if data is None:
            return overlay
        if not isinstance(data, dict):
            logger.warning("Ignoring stored keywords: expected an object, got %s", type(data).__name__)
            return overlay

        for category, entries in _stored_sections(data, "added"):
            for entry in entries:
                if not _is_stored_entry(entry):
                    logger.warning("Ignoring malformed keyword %r in %s", entry, category)
                    continue
                overlay.add_keyword(
                    category,
                    entry["term"],
                    entry.get("weight", DEFAULT_USER_WEIGHT),
                    exact=bool(entry.get("exact", False)),
                )

        for category, terms in _stored_sections(data, "removed"):
            for term in terms:
                if not isinstance(term, str):
                    logger.warning("Ignoring malformed removal %r in %s", term, category)
                    continue
                overlay.remove_keyword(category, term)

        return overlay


def _stored_sections(data: dict[str, Any], name: str) -> Iterator[tuple[TopicCategory, list]]:
    """Yield (category, items) for each well-formed category list in a stored section."""
    section = data.get(name)
    if section is None:
        return
    if not isinstance(section, dict):
        logger.warning("Ignoring stored %r: expected an object", name)
        return
    for key, items in section.items():
        try:
            category = TopicCategory.parse(key)
        except UnknownCategoryError:
            logger.warning("Ignoring stored %r for unknown category %r", name, key)
            continue
        if items is None:
            continue
        if not isinstance(items, list):
            logger.warning("Ignoring stored %r for %s: expected a list", name, category)
            continue
        yield category, items


def _is_stored_entry(entry: Any) -> bool:
    if not isinstance(entry, dict) or not isinstance(entry.get("term"), str):
        return False
    weight = entry.get("weight", DEFAULT_USER_WEIGHT)
    return isinstance(weight, (int, float)) and not isinstance(weight, bool)


class OverlayStore:
    """Stores one user's overlay as a JSON file."""

    def __init__(self, path: Path | str, catalog: KeywordCatalog | None = None):
        self.path = Path(path).expanduser()
        self._catalog = catalog

    def load(self) -> UserKeywordOverlay:
        """Read the overlay, falling back to an empty one if the file is missing or corrupt."""
        if not self.path.exists():
            return UserKeywordOverlay(self._catalog)
        try:
            with open(self.path) as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            logger.warning("Failed to load user keywords from %s: %s", self.path, e)
            return UserKeywordOverlay(self._catalog)
        return UserKeywordOverlay.from_dict(data, self._catalog)

    def save(self, overlay: UserKeywordOverlay) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.path, "w") as f:
            json.dump(overlay.to_dict(), f, indent=2)
        logger.debug("User keywords saved to %s", self.path)
