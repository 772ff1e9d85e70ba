"""
App catalog: analysed files persisted under one RecordStore namespace.

Holds the full list in memory and writes it back after every mutation,
mirroring the single-blob storage of the browser edition.
"""

from __future__ import annotations

import uuid
from datetime import UTC, datetime
from typing import Any

from pydantic import ValidationError

from paperlib.config import EXPORT_VERSION, LIBRARY_NAMESPACE
from paperlib.observability.logging import get_logger
from paperlib.storage import RecordStore
from paperlib.storage.models import Analysis, Energy

logger = get_logger(__name__)

EDITABLE_FIELDS = frozenset({"name", "description", "energy", "tags", "best_for"})


def _now() -> str:
    return datetime.now(UTC).isoformat()


class AppLibrary:
    """
    CRUD, search and import/export over catalog entries.

    Example:
        >>> library = AppLibrary(SQLiteRecordStore())
        >>> app_id = library.add(analysis)
        >>> library.filter("energetic")
    """

    def __init__(self, store: RecordStore, namespace: str = LIBRARY_NAMESPACE) -> None:
        self.store = store
        self.namespace = namespace
        self.apps: list[Analysis] = []
        self.load()

    def load(self) -> None:
        saved = self.store.load(self.namespace)
        if not saved:
            self.apps = []
            return
        try:
            self.apps = [Analysis.model_validate(record) for record in saved]
            logger.info("Loaded %d apps from library", len(self.apps))
        except (ValidationError, TypeError) as e:
            logger.error("Failed to load library: %s", e)
            self.apps = []

    def save(self) -> None:
        self.store.save(self.namespace, [app.to_record() for app in self.apps])
        logger.debug("Saved %d apps to library", len(self.apps))

    def add(self, analysis: Analysis) -> str:
        """
        Append an entry, assigning its id and timestamp.

        Side Effects:
            - Mutates ``analysis`` (id, timestamp)
            - Persists the library
        """
        analysis.id = uuid.uuid4().hex
        analysis.timestamp = _now()
        self.apps.append(analysis)
        self.save()
        return analysis.id

    def update(self, app_id: str, changes: dict[str, Any]) -> bool:
        """
        Apply user edits (name, description, energy, tags, best_for).

        Raises:
            ValueError: Unknown field or invalid value (e.g. energy)
        """
        unknown = set(changes) - EDITABLE_FIELDS
        if unknown:
            raise ValueError(f"Fields not editable: {', '.join(sorted(unknown))}")

        app = self.get(app_id)
        if app is None:
            return False

        try:
            updated = Analysis.model_validate({**app.model_dump(), **changes})
        except ValidationError as e:
            raise ValueError(str(e)) from e

        self.apps[self.apps.index(app)] = updated
        self.save()
        return True

    def delete(self, app_id: str) -> bool:
        app = self.get(app_id)
        if app is None:
            return False
        self.apps.remove(app)
        self.save()
        return True

    def get(self, app_id: str) -> Analysis | None:
        return next((app for app in self.apps if app.id == app_id), None)

    def all(self) -> list[Analysis]:
        return list(self.apps)

    def filter(self, energy: str) -> list[Analysis]:
        if energy == "all":
            return self.all()
        return [app for app in self.apps if app.energy.value == energy]

    def search(self, query: str) -> list[Analysis]:
        """Case-insensitive match on name, description, filename or any tag."""
        if not query:
            return self.all()

        lower = query.lower()
        return [
            app
            for app in self.apps
            if lower in app.name.lower()
            or lower in app.description.lower()
            or lower in app.filename.lower()
            or any(lower in tag.lower() for tag in app.tags)
        ]

    def stats(self) -> dict[str, int]:
        stats = {"total": len(self.apps)}
        for energy in Energy:
            stats[energy.value] = sum(1 for app in self.apps if app.energy is energy)
        return stats

    def clear(self) -> None:
        self.apps = []
        self.save()

    def export(self) -> dict[str, Any]:
        """Export bundle: version, timestamp, stats and the entries."""
        fields = {
            "id", "name", "filename", "description", "energy", "glyphs",
            "tags", "best_for", "content", "timestamp",
        }
        return {
            "version": EXPORT_VERSION,
            "timestamp": _now(),
            "stats": self.stats(),
            "apps": [
                app.model_dump(mode="json", by_alias=True, include=fields) for app in self.apps
            ],
        }

    def import_bundle(self, data: Any) -> bool:
        """
        Replace the library with a bundle's ``apps``.

        Returns False, leaving state untouched, when the bundle has no
        ``apps`` list or any entry fails validation.
        """
        if not isinstance(data, dict) or not isinstance(data.get("apps"), list):
            return False
        try:
            apps = [Analysis.model_validate(record) for record in data["apps"]]
        except (ValidationError, TypeError) as e:
            logger.error("Failed to import library: %s", e)
            return False

        self.apps = apps
        self.save()
        return True
