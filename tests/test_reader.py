import pytest

from termvector_core.index.termvector import DocumentTermVector
from termvector_core.reader import IndexReader, RefCounted, SearcherManager


class StubReader(IndexReader):
    def __init__(self, generation):
        self.generation = generation
        self.closed = False

    def term_vector(self, doc_id):
        return DocumentTermVector(doc_id)

    def stored_fields(self, doc_id, selector=None):
        return {}

    def document_frequency(self, field, term):
        return None

    @property
    def max_doc(self):
        return 0

    def close(self):
        self.closed = True


@pytest.fixture
def manager():
    opened = []

    def opener():
        reader = StubReader(len(opened))
        opened.append(reader)
        return reader

    manager = SearcherManager(opener)
    manager.opened = opened
    return manager


class TestRefCounted:
    def test_closes_at_zero(self):
        reader = StubReader(0)
        closed = []
        holder = RefCounted(reader, on_close=closed.append)
        holder.incref()
        holder.decref()
        assert not reader.closed

        holder.decref()
        assert reader.closed
        assert closed == [reader]

    def test_no_incref_after_close(self):
        holder = RefCounted(StubReader(0))
        holder.decref()
        with pytest.raises(RuntimeError):
            holder.incref()

    def test_no_decref_below_zero(self):
        holder = RefCounted(StubReader(0))
        holder.decref()
        with pytest.raises(RuntimeError):
            holder.decref()


class TestSearcherManager:
    def test_acquire_releases(self, manager):
        with manager.acquire() as reader:
            assert manager.current.refcount == 2
            assert reader is manager.opened[0]
        assert manager.current.refcount == 1

    def test_acquire_releases_on_error(self, manager):
        with pytest.raises(ValueError):
            with manager.acquire():
                raise ValueError("boom")
        assert manager.current.refcount == 1

    def test_reopen_keeps_in_flight_reader(self, manager):
        holder = manager.get_searcher()
        manager.reopen()

        old = manager.opened[0]
        assert manager.generation == 1
        assert manager.current.get() is manager.opened[1]
        assert not old.closed
        assert holder.refcount == 1

        holder.decref()
        assert old.closed

    def test_reopen_closes_idle_reader(self, manager):
        manager.reopen()
        assert manager.opened[0].closed
        assert not manager.opened[1].closed

    def test_close(self, manager):
        manager.close()
        assert manager.opened[0].closed
