import pytest

from termvector_core import (
    RequestParams,
    ResponseBuilder,
    ShardCluster,
    ShardDoc,
    ShardPurpose,
    ShardRequestError,
    ShardRouter,
    ShardConfig,
    Stage,
    TermVectorComponent,
)
from termvector_core.assembler import UNIQUE_KEY
from termvector_core.distributed import group_by_shard, merge_shard_envelopes
from termvector_core.request import ShardResponse

KEYS = [f"key{i}" for i in range(10)]


def distributed_rb(params, result_ids):
    rb = ResponseBuilder(RequestParams(params), distributed=True)
    rb.result_ids = result_ids
    return rb


@pytest.fixture
def shard_results():
    return {
        "a": ShardDoc(id="a", shard="A", doc_id=0, position_in_response=0),
        "b": ShardDoc(id="b", shard="A", doc_id=5, position_in_response=1),
        "c": ShardDoc(id="c", shard="B", doc_id=2, position_in_response=2),
    }


@pytest.fixture
def cluster(make_core):
    cores = [make_core([], name="shard1"), make_core([], name="shard2")]
    cluster = ShardCluster(cores)
    for i, key in enumerate(KEYS):
        cluster.add_document({"id": key, "title": f"fox number{i}"})
    cluster.commit()
    return cluster


class TestDistributedProcess:
    def test_one_request_per_shard(self, shard_results):
        rb = distributed_rb({"q": "fox", "tv": "true", "tv.tf": "true"}, shard_results)
        rb.stage = Stage.GET_FIELDS
        component = TermVectorComponent()

        assert component.distributed_process(rb) == Stage.DONE
        outgoing = rb.take_outgoing()

        assert len(outgoing) == 2
        (owner, first), (_, second) = outgoing
        assert owner is component
        assert first.purpose == ShardPurpose.GET_TERM_VECTORS
        assert first.shards == ["A"]
        assert second.shards == ["B"]
        assert first.params.get("tv.docIds") == "0,5"
        assert second.params.get("tv.docIds") == "2"
        assert "q" not in first.params
        assert first.params.get("tv.tf") == "true"
        assert rb.params.get("q") == "fox"

    def test_other_stages_do_nothing(self, shard_results):
        rb = distributed_rb({"tv": "true"}, shard_results)
        component = TermVectorComponent()
        for stage in (Stage.PARSE_QUERY, Stage.EXECUTE_QUERY):
            rb.stage = stage
            assert component.distributed_process(rb) == Stage.DONE
        assert rb.outgoing == []

    def test_disabled(self, shard_results):
        rb = distributed_rb({"tv.tf": "true"}, shard_results)
        rb.stage = Stage.GET_FIELDS
        TermVectorComponent().distributed_process(rb)
        assert rb.outgoing == []

    def test_no_results(self):
        rb = distributed_rb({"tv": "true"}, {})
        rb.stage = Stage.GET_FIELDS
        TermVectorComponent().distributed_process(rb)
        assert rb.outgoing == []

    def test_group_by_shard(self, shard_results):
        groups = group_by_shard(shard_results.values())
        assert list(groups) == ["A", "B"]
        assert [d.id for d in groups["A"]] == ["a", "b"]


class TestMerge:
    def test_failed_response(self):
        responses = [ShardResponse("A", exception=RuntimeError("down"))]
        with pytest.raises(ShardRequestError) as exc_info:
            merge_shard_envelopes(responses, "termVectors")
        assert exc_info.value.shard == "A"

    def test_concatenates_in_response_order(self):
        responses = [
            ShardResponse("A", {"termVectors": [("doc-0", {UNIQUE_KEY: "a"}),
                                                ("uniqueKeyFieldName", "id")]}),
            ShardResponse("B", {"termVectors": [("doc-0", {UNIQUE_KEY: "c"}),
                                                ("uniqueKeyFieldName", "id")]}),
        ]
        merged = merge_shard_envelopes(responses, "termVectors")
        assert [entry[UNIQUE_KEY] for _, entry in merged] == ["a", "c"]
        assert merged.keys() == ["doc-0", "doc-0"]
        assert merged.unique_key_field_name == "id"


class TestShardCluster:
    def test_documents_spread_over_shards(self, cluster):
        total = sum(core.lookup_doc_id(key) is not None
                    for core in cluster.cores.values() for key in KEYS)
        assert total == len(KEYS)

    def test_end_to_end(self, cluster):
        rb = distributed_rb(
            {"q": "fox", "tv": "true", "tv.tf": "true", "tv.idf": "true"},
            cluster.resolve_results(KEYS),
        )
        cluster.run(TermVectorComponent(), rb)

        envelope = rb.response["termVectors"]
        assert rb.stage == Stage.DONE
        assert len(envelope) == len(KEYS)
        assert sorted(entry[UNIQUE_KEY] for _, entry in envelope) == sorted(KEYS)
        assert envelope.unique_key_field_name == "id"

        for _, entry in envelope:
            shard = cluster.router.route(entry[UNIQUE_KEY])
            with cluster.cores[shard].searcher_manager.acquire() as reader:
                expected_df = reader.document_frequency("title", "fox")
            assert entry["title"]["fox"] == {"freq": 1, "idf": expected_df}

    def test_entries_grouped_by_shard(self, cluster):
        result_ids = cluster.resolve_results(KEYS)
        rb = distributed_rb({"tv": "true"}, result_ids)
        cluster.run(TermVectorComponent(), rb)

        expected = [d.id for docs in group_by_shard(result_ids.values()).values() for d in docs]
        assert [entry[UNIQUE_KEY] for _, entry in rb.response["termVectors"]] == expected

    def test_parallel_dispatch(self, make_core):
        cores = [make_core([], name=f"p{i}") for i in range(3)]
        cluster = ShardCluster(cores, config=ShardConfig(parallel=True, max_workers=3))
        for key in KEYS:
            cluster.add_document({"id": key, "title": "parallel"})
        cluster.commit()

        rb = distributed_rb({"tv": "true"}, cluster.resolve_results(KEYS))
        cluster.run(TermVectorComponent(), rb)
        assert len(rb.response["termVectors"]) == len(KEYS)

    def test_no_results_adds_nothing(self, cluster):
        rb = distributed_rb({"tv": "true"}, {})
        cluster.run(TermVectorComponent(), rb)
        assert "termVectors" not in rb.response

    def test_failed_shard(self, cluster):
        result_ids = {"x": ShardDoc(id="x", shard="shard1", doc_id=999)}
        rb = distributed_rb({"tv": "true"}, result_ids)
        with pytest.raises(ShardRequestError) as exc_info:
            cluster.run(TermVectorComponent(), rb)
        assert exc_info.value.shard == "shard1"
        assert cluster.cores["shard1"].searcher_manager.current.refcount == 1

    def test_resolve_unknown_key(self, cluster):
        with pytest.raises(KeyError):
            cluster.resolve_results(["nope"])

    def test_duplicate_shard_names(self, make_core):
        with pytest.raises(ValueError):
            ShardCluster([make_core([], name="x"), make_core([], name="x")])


class TestShardRouter:
    def test_deterministic(self):
        router = ShardRouter(["A", "B", "C"])
        assert [router.route(k) for k in KEYS] == [router.route(k) for k in KEYS]
        assert all(router.route(k) in ("A", "B", "C") for k in KEYS)

    def test_requires_shards(self):
        with pytest.raises(ValueError):
            ShardRouter([])


class TestMergeShardResponses:
    def test_attached_component_names_unique_key(self, core):
        component = TermVectorComponent()
        component.attach(core)
        responses = [ShardResponse("A", {"termVectors": [("doc-0", {UNIQUE_KEY: "a"})]})]
        merged = component.merge_shard_responses(responses)
        assert merged.unique_key_field_name == "id"
        assert merged.to_pairs()[-1] == ("uniqueKeyFieldName", "id")

    def test_unattached_component_uses_partials(self):
        responses = [
            ShardResponse("A", {"termVectors": [("uniqueKeyFieldName", "key")]}),
            ShardResponse("B", {}),
        ]
        merged = TermVectorComponent().merge_shard_responses(responses)
        assert len(merged) == 0
        assert merged.unique_key_field_name == "key"
