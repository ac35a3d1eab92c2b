# utils/bookmark_store.py
"""
Persisted set of bookmarked verses.

The store keeps the whole set in memory and writes it back as one JSON
document after every mutation. Where the document lives is decided by the
injected storage object, which only needs `load()` and `save(payload)`.
"""
import json
import logging
import os
import tempfile
import threading
from pathlib import Path
from typing import Dict, List, Optional

from pydantic import TypeAdapter, ValidationError
from sqlalchemy.exc import SQLAlchemyError

from database import get_db_session
from models import BookmarkSet
from schemas.bookmark_schemas import BookmarkedVerse

logger = logging.getLogger(__name__)

SCHEMA_VERSION = 1

_entries_adapter = TypeAdapter(List[BookmarkedVerse])

# Mutations of one named set are serialized across request threads. Keys are
# striped over a fixed pool so the number of locks stays bounded.
_KEY_LOCKS = [threading.Lock() for _ in range(64)]


def _lock_for(key):
    return _KEY_LOCKS[hash(key) % len(_KEY_LOCKS)]


def make_reference(book, chapter, verse_number):
    """Composite key of a bookmark: "{book} {chapter}:{verse}"."""
    return f"{book} {chapter}:{verse_number}"


# --- Storage backends ---

class MemoryBookmarkStorage:
    """Keeps payloads in a dict; share the dict to share the data."""

    def __init__(self, key, backing=None):
        self.key = key
        self.backing = backing if backing is not None else {}

    def load(self) -> Optional[str]:
        return self.backing.get(self.key)

    def save(self, payload: str) -> None:
        self.backing[self.key] = payload


class JsonFileBookmarkStorage:
    """One JSON file per named entry inside `directory`."""

    def __init__(self, key, directory):
        self.key = key
        self.directory = Path(directory)
        safe_name = ''.join(c if c.isalnum() or c in '-_.' else '_' for c in key)
        self.path = self.directory / f"{safe_name}.json"

    def load(self) -> Optional[str]:
        if not self.path.exists():
            return None
        return self.path.read_text(encoding='utf-8')

    def save(self, payload: str) -> None:
        self.directory.mkdir(parents=True, exist_ok=True)
        # Write to a temp file and rename so a crash never leaves half a document
        fd, tmp_path = tempfile.mkstemp(dir=self.directory, suffix='.tmp')
        try:
            with os.fdopen(fd, 'w', encoding='utf-8') as f:
                f.write(payload)
            os.replace(tmp_path, self.path)
        except OSError:
            if os.path.exists(tmp_path):
                os.remove(tmp_path)
            raise


class SqlBookmarkStorage:
    """One row in the bookmark_sets table per named entry."""

    def __init__(self, key, session_factory=None):
        self.key = key
        self.session_factory = session_factory

    def load(self) -> Optional[str]:
        with get_db_session(self.session_factory) as db:
            row = db.get(BookmarkSet, self.key)
            return row.payload if row else None

    def save(self, payload: str) -> None:
        with get_db_session(self.session_factory) as db:
            row = db.get(BookmarkSet, self.key)
            if row is None:
                db.add(BookmarkSet(key=self.key, payload=payload))
            else:
                row.payload = payload


# --- Store ---

def serialize_bookmarks(bookmarks: List[BookmarkedVerse]) -> str:
    return json.dumps({
        'version': SCHEMA_VERSION,
        'bookmarks': [b.model_dump() for b in bookmarks],
    }, ensure_ascii=False)


def deserialize_bookmarks(payload: str) -> List[BookmarkedVerse]:
    """Parse a stored document. Raises ValueError on anything unreadable."""
    try:
        data = json.loads(payload)
    except RecursionError:
        raise ValueError("Bookmark document is nested too deeply")

    if isinstance(data, list):
        # Unversioned layout: a bare array of bookmarks
        entries = data
    elif isinstance(data, dict) and isinstance(data.get('bookmarks'), list):
        version = data.get('version')
        if isinstance(version, bool) or version != SCHEMA_VERSION:
            raise ValueError(f"Unsupported bookmark schema version: {version}")
        entries = data['bookmarks']
    else:
        raise ValueError("Unrecognized bookmark document layout")

    try:
        bookmarks = _entries_adapter.validate_python(entries)
    except ValidationError as e:
        raise ValueError(f"Invalid bookmark entries: {e}")

    unique: Dict[str, BookmarkedVerse] = {}
    for bookmark in bookmarks:
        unique.setdefault(bookmark.reference, bookmark)
    return list(unique.values())


class BookmarkStore:
    """Bookmark set behind a storage object.

    Reads use the set loaded at construction. Each mutation reloads the
    stored set under the key's lock before changing and saving it, so
    concurrent writers to one key never drop each other's changes.
    """

    def __init__(self, storage):
        self.storage = storage
        self._lock = _lock_for(getattr(storage, 'key', None))
        self._bookmarks = self._load()

    def _load(self) -> List[BookmarkedVerse]:
        try:
            payload = self.storage.load()
        except (OSError, ValueError, SQLAlchemyError) as e:
            logger.error(f"Failed to read bookmarks: {str(e)}")
            return []
        if not payload:
            return []
        try:
            return deserialize_bookmarks(payload)
        except ValueError as e:
            logger.error(f"Failed to load bookmarks, starting empty: {str(e)}")
            return []

    def _persist(self):
        self.storage.save(serialize_bookmarks(self._bookmarks))

    def list(self) -> List[BookmarkedVerse]:
        return list(self._bookmarks)

    def is_bookmarked(self, reference) -> bool:
        return any(b.reference == reference for b in self._bookmarks)

    def toggle(self, verse: BookmarkedVerse) -> List[BookmarkedVerse]:
        with self._lock:
            self._bookmarks = self._load()
            if self.is_bookmarked(verse.reference):
                self._bookmarks = [b for b in self._bookmarks if b.reference != verse.reference]
            else:
                self._bookmarks = self._bookmarks + [verse]
            self._persist()
        return self.list()

    def remove(self, reference) -> List[BookmarkedVerse]:
        with self._lock:
            self._bookmarks = self._load()
            if self.is_bookmarked(reference):
                self._bookmarks = [b for b in self._bookmarks if b.reference != reference]
                self._persist()
        return self.list()


def make_storage_factory(backend, file_dir=None, session_factory=None, backing=None):
    """Return a callable that builds the storage for a named entry."""
    if backend == 'memory':
        backing = backing if backing is not None else {}
        return lambda key: MemoryBookmarkStorage(key, backing)
    if backend == 'file':
        if not file_dir:
            raise ValueError("BOOKMARK_FILE_DIR is required for the file backend")
        return lambda key: JsonFileBookmarkStorage(key, file_dir)
    if backend == 'sql':
        return lambda key: SqlBookmarkStorage(key, session_factory)
    raise ValueError(f"Unknown bookmark backend: {backend}")
