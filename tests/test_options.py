import pytest

from termvector_core.config import TermVectorConfig
from termvector_core.errors import ClientInputError
from termvector_core.options import TermVectorOptions, parse_doc_ids
from termvector_core.params import RequestParams


def options(params, config=None):
    return TermVectorOptions.from_params(RequestParams(params), config)


class TestEnabled:
    def test_off_by_default(self):
        assert TermVectorOptions.is_enabled(RequestParams()) is False

    def test_request_turns_on(self):
        assert TermVectorOptions.is_enabled(RequestParams({"tv": "true"})) is True

    def test_config_default(self):
        config = TermVectorConfig(enabled_by_default=True)
        assert TermVectorOptions.is_enabled(RequestParams(), config) is True
        assert TermVectorOptions.is_enabled(RequestParams({"tv": "false"}), config) is False


class TestFromParams:
    def test_all_off(self):
        opts = options({"tv": "true"})
        assert not opts.include_frequency
        assert not opts.include_positions
        assert not opts.include_offsets
        assert not opts.include_document_frequency
        assert not opts.include_ratio
        assert opts.field_filter == frozenset()
        assert opts.explicit_document_ids is None

    def test_individual_flags(self):
        opts = options({"tv.tf": "true", "tv.idf": "true"})
        assert opts.include_frequency
        assert opts.include_document_frequency
        assert not opts.include_ratio
        assert opts.needs_document_frequency

    def test_ratio_needs_document_frequency(self):
        opts = options({"tv.tf_idf": "true"})
        assert not opts.include_document_frequency
        assert opts.needs_document_frequency

    def test_all_overrides_flags(self):
        opts = options({"tv.all": "true", "tv.tf": "false"})
        assert opts.include_frequency
        assert opts.include_positions
        assert opts.include_offsets
        assert opts.include_document_frequency
        assert opts.include_ratio

    def test_fields_from_tv_fl(self):
        opts = options({"tv.fl": "title, body", "fl": "notes"})
        assert opts.field_filter == frozenset({"title", "body"})
        assert opts.accepts_field("title")
        assert not opts.accepts_field("notes")

    def test_fields_fall_back_to_fl(self):
        opts = options({"fl": ["title", "body"]})
        assert opts.field_filter == frozenset({"title", "body"})

    def test_fields_fall_back_to_config(self):
        opts = options({}, TermVectorConfig(default_fields=["body"]))
        assert opts.field_filter == frozenset({"body"})

    def test_star_means_every_field(self):
        opts = options({"tv.fl": "title,*"})
        assert opts.field_filter == frozenset()
        assert opts.accepts_field("anything")

    def test_malformed_flag(self):
        with pytest.raises(ClientInputError):
            options({"tv.positions": "sometimes"})

    def test_explicit_doc_ids(self):
        opts = options({"tv.docIds": ["3, 7", "11"]})
        assert opts.explicit_document_ids == (3, 7, 11)

    def test_options_are_frozen(self):
        opts = options({})
        with pytest.raises(AttributeError):
            opts.include_frequency = True


class TestParseDocIds:
    def test_absent(self):
        assert parse_doc_ids(None) is None
        assert parse_doc_ids([]) is None

    def test_commas_and_whitespace(self):
        assert parse_doc_ids(["1 2,3", " 4 "]) == (1, 2, 3, 4)

    def test_keeps_duplicates_and_order(self):
        assert parse_doc_ids(["5,1,5"]) == (5, 1, 5)

    def test_rejects_non_integer(self):
        with pytest.raises(ClientInputError, match="abc"):
            parse_doc_ids(["3,abc"])

    def test_rejects_too_many(self):
        with pytest.raises(ClientInputError, match="Too many"):
            parse_doc_ids(["1,2,3"], max_doc_ids=2)
        assert parse_doc_ids(["1,2"], max_doc_ids=2) == (1, 2)

    def test_config_limit(self):
        with pytest.raises(ClientInputError):
            options({"tv.docIds": "1,2,3"}, TermVectorConfig(max_doc_ids=2))
