"""Shared fixtures: a small schema, committed cores and an attached component."""

import pytest

from termvector_core import (
    FieldMapping,
    IndexConfig,
    IndexCore,
    IndexSchema,
    TermVectorComponent,
)

SAMPLE_DOCS = [
    {
        "id": "doc0",
        "title": "The quick brown fox",
        "body": "fox fox fox jumps",
        "summary": "quick summary",
    },
    {
        "id": "doc1",
        "title": "Lazy dog",
        "body": "the fox sleeps",
        "notes": "fox notes",
    },
    {
        "id": "doc2",
        "title": "Quick fox",
        "body": "dog days",
    },
]


@pytest.fixture
def schema():
    return IndexSchema(
        [
            FieldMapping("id", type="string", stored=True),
            FieldMapping(
                "title",
                stored=True,
                term_vectors=True,
                term_positions=True,
                term_offsets=True,
            ),
            FieldMapping("body", term_vectors=True),
            FieldMapping("notes"),
            FieldMapping("summary", indexed=False, term_vectors=True),
            FieldMapping(
                "tags",
                multi_valued=True,
                term_vectors=True,
                term_positions=True,
                term_offsets=True,
            ),
        ],
        unique_key="id",
    )


@pytest.fixture
def make_core(schema):
    """Factory for committed cores, closed after the test."""
    cores = []

    def _make(docs=None, **config):
        core = IndexCore(schema, IndexConfig(**config))
        core.add_documents(SAMPLE_DOCS if docs is None else docs)
        core.commit()
        cores.append(core)
        return core

    yield _make
    for core in cores:
        core.close()


@pytest.fixture
def core(make_core):
    return make_core()


@pytest.fixture
def component(core):
    component = TermVectorComponent()
    component.attach(core)
    return component
