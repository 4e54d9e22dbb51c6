import pytest

from termvector_core import (
    ClientInputError,
    DocList,
    IndexAccessError,
    RequestParams,
    ResponseBuilder,
    TermVectorComponent,
    TermVectorConfig,
)
from termvector_core.assembler import UNIQUE_KEY


def run(component, params, results=None):
    rb = ResponseBuilder(RequestParams(params), results)
    component.process(rb)
    return rb


def refcount(core):
    return core.searcher_manager.current.refcount


class TestProcess:
    def test_disabled_does_nothing(self, component):
        rb = run(component, {"tv.tf": "true"}, DocList([0, 1]))
        assert rb.response == {}

    def test_explicitly_disabled(self, component):
        rb = run(component, {"tv": "false", "tv.docIds": "0"})
        assert rb.response == {}

    def test_results_list(self, component):
        rb = run(component, {"tv": "true", "tv.tf": "true"}, DocList([2, 0]))
        envelope = rb.response["termVectors"]
        assert envelope.keys() == ["doc-2", "doc-0"]
        assert envelope.get("doc-2")[UNIQUE_KEY] == "doc2"
        assert envelope.get("doc-0")["body"]["fox"] == {"freq": 3}

    def test_explicit_ids_win_over_results(self, component):
        rb = run(component, {"tv": "true", "tv.docIds": "1"}, DocList([2, 0]))
        assert rb.response["termVectors"].keys() == ["doc-1"]

    def test_no_documents(self, component):
        rb = run(component, {"tv": "true"})
        envelope = rb.response["termVectors"]
        assert len(envelope) == 0
        assert envelope.unique_key_field_name == "id"

    def test_field_list(self, component):
        rb = run(component, {"tv": "true", "tv.fl": "title", "tv.docIds": "0"})
        assert list(rb.response["termVectors"].get("doc-0")) == [UNIQUE_KEY, "title"]

    def test_all(self, component):
        rb = run(component, {"tv": "true", "tv.all": "true", "tv.docIds": "2"})
        entry = rb.response["termVectors"].get("doc-2")
        assert entry["title"]["fox"] == {
            "freq": 1,
            "offsets": [{"start": 6, "end": 9}],
            "positions": [1],
            "idf": 2,
            "tf-idf": 0.5,
        }

    def test_response_key(self, core):
        component = TermVectorComponent(TermVectorConfig(response_key="tv"))
        component.attach(core)
        rb = run(component, {"tv": "true", "tv.docIds": "0"})
        assert list(rb.response) == ["tv"]

    def test_enabled_by_default(self, core):
        component = TermVectorComponent(TermVectorConfig(enabled_by_default=True))
        component.attach(core)
        rb = run(component, {}, DocList([1]))
        assert rb.response["termVectors"].keys() == ["doc-1"]

    def test_unattached(self):
        with pytest.raises(RuntimeError):
            run(TermVectorComponent(), {"tv": "true"})


class TestReaderRelease:
    def test_released_on_success(self, core, component):
        before = refcount(core)
        run(component, {"tv": "true", "tv.all": "true"}, DocList([0, 1, 2]))
        assert refcount(core) == before

    def test_bad_doc_id_rejected_before_acquire(self, core, component):
        before = refcount(core)
        with pytest.raises(ClientInputError) as exc_info:
            run(component, {"tv": "true", "tv.docIds": "3,abc"})
        assert exc_info.value.status == 400
        assert refcount(core) == before

    def test_released_on_index_failure(self, core, component):
        before = refcount(core)
        with pytest.raises(IndexAccessError):
            run(component, {"tv": "true", "tv.docIds": "0,99"})
        assert refcount(core) == before

    def test_no_partial_response_on_failure(self, component):
        rb = ResponseBuilder(RequestParams({"tv": "true", "tv.docIds": "0,99"}))
        with pytest.raises(IndexAccessError):
            component.process(rb)
        assert rb.response == {}


class TestNewCommits:
    def test_sees_committed_documents(self, core, component):
        core.add_document({"id": "doc3", "title": "new arrival"})
        with pytest.raises(IndexAccessError):
            run(component, {"tv": "true", "tv.docIds": "3"})

        core.commit()
        rb = run(component, {"tv": "true", "tv.docIds": "3"})
        assert rb.response["termVectors"].get("doc-3")[UNIQUE_KEY] == "doc3"


def test_field_without_tokens_is_absent(make_core):
    core = make_core([{"id": "p", "title": "!!!", "body": "quiet"}])
    component = TermVectorComponent()
    component.attach(core)
    rb = run(component, {"tv": "true", "tv.tf": "true", "tv.docIds": "0"})
    assert rb.response["termVectors"].get("doc-0") == {
        UNIQUE_KEY: "p",
        "body": {"quiet": {"freq": 1}},
    }


def test_doc_list():
    results = DocList([4, 1, 4])
    assert results.doc_ids == (4, 1, 4)
    assert list(results) == [4, 1, 4]
    assert len(results) == 3
