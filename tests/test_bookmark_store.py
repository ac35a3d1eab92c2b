"""
Tests for the bookmark store and its storage backends.
"""
import json
import threading
import time
from unittest.mock import Mock, patch

import pytest
from sqlalchemy import create_engine
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from database import Base
from schemas.bookmark_schemas import BookmarkedVerse
from utils.bookmark_store import (
    BookmarkStore,
    JsonFileBookmarkStorage,
    MemoryBookmarkStorage,
    SqlBookmarkStorage,
    deserialize_bookmarks,
    make_reference,
    make_storage_factory,
    serialize_bookmarks,
)


def verse(book='Genesis', chapter='1', number=1, text='In the beginning'):
    return BookmarkedVerse(
        book=book,
        chapter=chapter,
        reference=make_reference(book, chapter, number),
        text=f"{number} {text}",
    )


@pytest.fixture
def storage():
    return MemoryBookmarkStorage('saints-app-bookmarks:test')


@pytest.fixture
def session_factory():
    engine = create_engine(
        'sqlite://',
        connect_args={'check_same_thread': False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    return sessionmaker(bind=engine)


class TestBookmarkStore:

    def test_reference_format(self):
        assert make_reference('1 Corinthians', '13', 4) == '1 Corinthians 13:4'

    def test_toggle_adds_then_removes(self, storage):
        store = BookmarkStore(storage)

        assert [b.reference for b in store.toggle(verse())] == ['Genesis 1:1']
        assert store.is_bookmarked('Genesis 1:1')

        assert store.toggle(verse()) == []
        assert not store.is_bookmarked('Genesis 1:1')

    def test_toggle_is_an_involution(self, storage):
        store = BookmarkStore(storage)
        store.toggle(verse(number=1))
        store.toggle(verse(book='John', chapter='3', number=16, text='For God so loved the world'))
        before = {b.reference for b in store.list()}

        store.toggle(verse(book='Psalms', chapter='23', number=1, text='The Lord is my shepherd'))
        store.toggle(verse(book='Psalms', chapter='23', number=1, text='The Lord is my shepherd'))

        assert {b.reference for b in store.list()} == before

    def test_reference_is_the_only_dedup_key(self, storage):
        store = BookmarkStore(storage)
        store.toggle(verse(text='In the beginning'))
        # Same reference, different text: treated as the same bookmark
        assert store.toggle(verse(text='Different wording')) == []

    def test_remove_missing_reference_is_a_noop(self, storage):
        store = BookmarkStore(storage)
        store.toggle(verse())
        saved = storage.load()

        assert [b.reference for b in store.remove('Exodus 3:14')] == ['Genesis 1:1']
        assert storage.load() == saved

    def test_remove_existing_reference(self, storage):
        store = BookmarkStore(storage)
        store.toggle(verse(number=1))
        store.toggle(verse(number=2, text='and the earth'))

        remaining = store.remove('Genesis 1:1')

        assert [b.reference for b in remaining] == ['Genesis 1:2']
        assert [b.reference for b in BookmarkStore(storage).list()] == ['Genesis 1:2']

    def test_every_mutation_overwrites_the_whole_set(self, storage):
        store = BookmarkStore(storage)

        with patch.object(storage, 'save', wraps=storage.save) as save:
            store.toggle(verse(number=1))
            store.toggle(verse(number=2))

        last_payload = json.loads(save.call_args_list[-1].args[0])
        assert last_payload['version'] == 1
        assert [b['reference'] for b in last_payload['bookmarks']] == ['Genesis 1:1', 'Genesis 1:2']
        assert save.call_count == 2

    def test_mutation_sees_changes_saved_by_another_store(self, storage):
        first = BookmarkStore(storage)
        second = BookmarkStore(storage)

        first.toggle(verse(number=1))
        result = second.toggle(verse(number=2))

        assert [b.reference for b in result] == ['Genesis 1:1', 'Genesis 1:2']

    def test_concurrent_toggles_keep_both_bookmarks(self):
        backing = {}

        class SlowStorage(MemoryBookmarkStorage):
            def load(self):
                time.sleep(0.05)
                return super().load()

        def toggle(number):
            BookmarkStore(SlowStorage('saints-app-bookmarks:shared', backing)).toggle(verse(number=number))

        threads = [threading.Thread(target=toggle, args=(n,)) for n in (1, 2)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        stored = BookmarkStore(MemoryBookmarkStorage('saints-app-bookmarks:shared', backing)).list()
        assert {b.reference for b in stored} == {'Genesis 1:1', 'Genesis 1:2'}

    def test_set_survives_reload(self, storage):
        store = BookmarkStore(storage)
        store.toggle(verse(number=1))
        store.toggle(verse(book='John', chapter='1', number=1, text='In the beginning was the Word'))

        reloaded = BookmarkStore(storage)

        assert {(b.reference, b.text) for b in reloaded.list()} == {
            ('Genesis 1:1', '1 In the beginning'),
            ('John 1:1', '1 In the beginning was the Word'),
        }

    def test_list_returns_a_snapshot(self, storage):
        store = BookmarkStore(storage)
        store.toggle(verse())
        snapshot = store.list()
        snapshot.clear()
        assert len(store.list()) == 1


class TestLoadFailures:

    def test_absent_data_gives_empty_set(self, storage):
        assert BookmarkStore(storage).list() == []

    def test_corrupt_data_gives_empty_set(self, storage, caplog):
        storage.save('{not json')

        store = BookmarkStore(storage)

        assert store.list() == []
        assert 'Failed to load bookmarks' in caplog.text

    def test_invalid_entries_give_empty_set(self, storage):
        storage.save(json.dumps([{'book': 'Genesis'}]))
        assert BookmarkStore(storage).list() == []

    def test_unknown_version_gives_empty_set(self, storage):
        storage.save(json.dumps({'version': 99, 'bookmarks': []}))
        assert BookmarkStore(storage).list() == []

    def test_boolean_version_is_rejected(self, storage):
        storage.save(json.dumps({'version': True, 'bookmarks': [
            {'book': 'Genesis', 'chapter': '1', 'reference': 'Genesis 1:1', 'text': '1 In the beginning'},
        ]}))
        assert BookmarkStore(storage).list() == []

    def test_deeply_nested_data_gives_empty_set(self, storage):
        storage.save('[' * 100000 + ']' * 100000)
        assert BookmarkStore(storage).list() == []

    def test_storage_read_error_gives_empty_set(self):
        storage = Mock()
        storage.load.side_effect = OSError('disk unavailable')
        assert BookmarkStore(storage).list() == []

    def test_store_recovers_after_corrupt_load(self, storage):
        storage.save('garbage')
        store = BookmarkStore(storage)
        store.toggle(verse())
        assert [b.reference for b in BookmarkStore(storage).list()] == ['Genesis 1:1']


class TestSerialization:

    def test_round_trip_ignores_order(self):
        bookmarks = [verse(number=3), verse(number=1), verse(number=2)]
        restored = deserialize_bookmarks(serialize_bookmarks(bookmarks))
        assert {(b.reference, b.text) for b in restored} == {(b.reference, b.text) for b in bookmarks}

    def test_unversioned_array_is_accepted(self):
        legacy = json.dumps([
            {'book': 'Genesis', 'chapter': '1', 'reference': 'Genesis 1:1', 'text': '1 In the beginning'},
        ])
        assert [b.reference for b in deserialize_bookmarks(legacy)] == ['Genesis 1:1']

    def test_duplicate_references_collapse_on_load(self):
        payload = serialize_bookmarks([verse(text='first'), verse(text='second')])
        restored = deserialize_bookmarks(payload)
        assert len(restored) == 1
        assert restored[0].text == '1 first'


class TestBackends:

    def test_file_backend_round_trip(self, tmp_path):
        storage = JsonFileBookmarkStorage('saints-app-bookmarks:device-1', tmp_path / 'bookmarks')
        assert storage.load() is None

        BookmarkStore(storage).toggle(verse())

        assert storage.path.exists()
        assert list(storage.directory.glob('*.tmp')) == []
        assert [b.reference for b in BookmarkStore(storage).list()] == ['Genesis 1:1']

    def test_file_backend_corrupt_file(self, tmp_path):
        storage = JsonFileBookmarkStorage('k', tmp_path)
        storage.path.write_text('[{"book": ', encoding='utf-8')
        assert BookmarkStore(storage).list() == []

    def test_sql_backend_round_trip(self, session_factory):
        storage = SqlBookmarkStorage('saints-app-bookmarks:device-1', session_factory)
        assert storage.load() is None

        store = BookmarkStore(storage)
        store.toggle(verse(number=1))
        store.toggle(verse(number=2))
        store.toggle(verse(number=1))

        assert [b.reference for b in BookmarkStore(storage).list()] == ['Genesis 1:2']

    def test_sql_backend_keys_are_isolated(self, session_factory):
        BookmarkStore(SqlBookmarkStorage('a', session_factory)).toggle(verse())
        assert BookmarkStore(SqlBookmarkStorage('b', session_factory)).list() == []

    def test_sql_backend_read_error_gives_empty_set(self):
        broken = Mock(side_effect=OperationalError('SELECT', {}, Exception('no such table')))
        storage = SqlBookmarkStorage('k', broken)
        assert BookmarkStore(storage).list() == []

    def test_memory_factory_shares_backing(self):
        factory = make_storage_factory('memory', backing={})
        BookmarkStore(factory('k')).toggle(verse())
        assert len(BookmarkStore(factory('k')).list()) == 1

    def test_unknown_backend(self):
        with pytest.raises(ValueError):
            make_storage_factory('redis')
