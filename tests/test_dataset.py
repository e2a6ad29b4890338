"""
Tests for the Dataset quad store.

Covers insertion/removal, value deduplication, pattern queries with the
default-graph sentinel, graph projection, merging and the flat dump.
"""

import io

import polars as pl
import pytest

from rdf_quadstore import (
    BlankNode,
    Dataset,
    DatasetConfig,
    Graph,
    Literal,
    Quad,
    Resource,
    Triple,
    UnsupportedFormatError,
)

EX = "http://example.org/"


def ex(name: str) -> Resource:
    return Resource(EX + name)


@pytest.fixture
def dataset():
    """Dataset with one default-graph statement and two named graphs."""
    ds = Dataset("https://example.org/dataset")
    ds.add_triple(ex("alice"), ex("name"), Literal("Alice"))
    ds.add_quad(ex("bob"), ex("name"), Literal("Bob"), ex("g1"))
    ds.add_quad(ex("bob"), ex("age"), Literal("42", datatype=ex("int")), ex("g1"))
    ds.add_quad(ex("carol"), ex("name"), Literal("Carol", language="en"), ex("g2"))
    return ds


class TestConstruction:

    def test_empty(self):
        ds = Dataset("https://example.org/dataset")
        assert len(ds) == 0
        assert ds.quads() == []
        assert ds.get_named_graphs() == []

    def test_term_is_base_iri(self):
        ds = Dataset("https://example.org/dataset")
        assert ds.base_iri == "https://example.org/dataset"
        assert ds.term == Resource("https://example.org/dataset")

    def test_base_iri_from_config(self):
        ds = Dataset(config=DatasetConfig(base_iri="https://example.org/configured"))
        assert ds.base_iri == "https://example.org/configured"

    def test_repr(self, dataset):
        assert "quads=4" in repr(dataset)


class TestAddRemove:
    """Insertion and removal with value semantics."""

    def test_add_increments_length(self):
        ds = Dataset()
        assert ds.add(Quad(ex("a"), ex("b"), ex("c"), ex("g")))
        assert len(ds) == 1

    def test_add_is_idempotent(self):
        ds = Dataset()
        ds.add(Quad(ex("a"), ex("b"), ex("c"), ex("g")))
        assert not ds.add(Quad(ex("a"), ex("b"), ex("c"), ex("g")))
        assert len(ds) == 1

    def test_same_triple_in_two_graphs_is_two_quads(self):
        ds = Dataset()
        ds.add_triple(ex("a"), ex("b"), ex("c"))
        ds.add_quad(ex("a"), ex("b"), ex("c"), ex("g"))
        assert len(ds) == 2

    def test_remove_restores_length(self, dataset):
        before = len(dataset)
        quad = Quad(ex("x"), ex("y"), Literal("z"), ex("g3"))
        dataset.add(quad)
        assert len(dataset) == before + 1
        assert dataset.remove(quad)
        assert len(dataset) == before

    def test_remove_by_separately_built_value(self, dataset):
        assert dataset.remove(Quad(ex("bob"), ex("name"), Literal("Bob"), ex("g1")))
        assert dataset.one(ex("bob"), ex("name"), None, ex("g1")) is None

    def test_remove_absent_is_noop(self, dataset):
        before = dataset.quads()
        assert not dataset.remove(Quad(ex("nobody"), ex("name"), Literal("?")))
        assert dataset.quads() == before

    def test_remove_only_matches_its_graph(self, dataset):
        assert not dataset.remove(Quad(ex("bob"), ex("name"), Literal("Bob")))
        assert len(dataset) == 4

    def test_clear(self, dataset):
        dataset.clear()
        assert len(dataset) == 0

    def test_contains(self, dataset):
        assert Quad(ex("alice"), ex("name"), Literal("Alice")) in dataset
        assert Quad(ex("alice"), ex("name"), Literal("Alice"), ex("g1")) not in dataset


class TestPatternQueries:
    """one() and all() with wildcards and the default-graph sentinel."""

    def test_one_finds_named_graph_quad(self, dataset):
        quad = dataset.one(ex("bob"), ex("name"), None, ex("g1"))
        assert quad == Quad(ex("bob"), ex("name"), Literal("Bob"), ex("g1"))

    def test_one_returns_none_without_match(self, dataset):
        assert dataset.one(ex("bob"), ex("name"), None, ex("g2")) is None

    def test_default_graph_sentinel_excludes_named_graphs(self, dataset):
        results = dataset.all()
        assert results == [Quad(ex("alice"), ex("name"), Literal("Alice"))]
        assert dataset.one(ex("bob")) is None

    def test_named_graph_query_excludes_default_graph(self, dataset):
        assert dataset.all(ex("alice"), g=ex("g1")) == []

    def test_all_returns_every_match_in_order(self, dataset):
        results = dataset.all(ex("bob"), g=ex("g1"))
        assert [q.predicate for q in results] == [ex("name"), ex("age")]

    def test_object_match_uses_literal_equality(self, dataset):
        assert dataset.one(o=Literal("Carol", language="en"), g=ex("g2")) is not None
        assert dataset.one(o=Literal("Carol"), g=ex("g2")) is None

    def test_result_is_a_snapshot(self, dataset):
        results = dataset.all(g=ex("g1"))
        dataset.add_quad(ex("dave"), ex("name"), Literal("Dave"), ex("g1"))
        assert len(results) == 2
        assert len(dataset.all(g=ex("g1"))) == 3

    def test_named_quad_is_not_found_in_default_graph(self):
        ds = Dataset()
        quad = Quad(ex("a"), ex("b"), ex("c"), ex("g1"))
        ds.add(quad)
        assert ds.one(ex("a"), ex("b"), ex("c"), ex("g1")) == quad
        assert ds.one(ex("a"), ex("b"), ex("c"), None) is None

    def test_default_quad_is_not_found_in_named_graph(self):
        ds = Dataset()
        ds.add_triple(ex("a"), ex("b"), ex("c"))
        assert ds.one(ex("a"), ex("b"), ex("c")) is not None
        assert ds.one(ex("a"), ex("b"), ex("c"), ex("g1")) is None

    def test_iteration_is_a_snapshot(self, dataset):
        for quad in dataset:
            dataset.remove(quad)
        assert len(dataset) == 0


class TestGraphs:
    """Graph projection and named graph enumeration."""

    def test_graph_sizes(self):
        ds = Dataset()
        ds.add_quad(ex("a"), ex("b"), ex("c"), ex("g1"))
        ds.add_quad(ex("d"), ex("e"), ex("f"), ex("g1"))
        ds.add_triple(ex("a"), ex("b"), ex("c"))
        assert len(ds.get_graph(ex("g1"))) == 2
        assert len(ds.get_default_graph()) == 1
        assert len(ds.get_named_graphs()) == 1

    def test_named_graphs_in_first_seen_order(self, dataset):
        assert dataset.get_named_graphs() == [ex("g1"), ex("g2")]

    def test_named_graphs_by_variant(self):
        ds = Dataset()
        ds.add_quad(ex("a"), ex("b"), ex("c"), Resource("b1"))
        ds.add_quad(ex("a"), ex("b"), ex("c"), BlankNode("b1"))
        assert ds.get_named_graphs() == [Resource("b1"), BlankNode("b1")]

    def test_default_graph_is_not_named(self):
        ds = Dataset()
        ds.add_triple(ex("a"), ex("b"), ex("c"))
        assert ds.get_named_graphs() == []

    def test_get_graph(self, dataset):
        graph = dataset.get_graph(ex("g1"))
        assert isinstance(graph, Graph)
        assert graph.triples() == [
            Triple(ex("bob"), ex("name"), Literal("Bob")),
            Triple(ex("bob"), ex("age"), Literal("42", datatype=ex("int"))),
        ]

    def test_get_default_graph(self, dataset):
        graph = dataset.get_default_graph()
        assert graph.triples() == [Triple(ex("alice"), ex("name"), Literal("Alice"))]
        assert graph.base_iri == dataset.base_iri

    def test_get_unknown_graph_is_empty(self, dataset):
        assert len(dataset.get_graph(ex("missing"))) == 0

    def test_graph_is_a_copy(self, dataset):
        graph = dataset.get_graph(ex("g1"))
        graph.add_triple(ex("x"), ex("y"), ex("z"))
        assert len(dataset.all(g=ex("g1"))) == 2

    def test_graph_queries(self, dataset):
        graph = dataset.get_graph(ex("g1"))
        assert graph.one(predicate=ex("age")).object == Literal("42", datatype=ex("int"))
        assert len(graph.all(subject=ex("bob"))) == 2
        assert graph.one(subject=ex("alice")) is None


class TestMerge:

    def test_merge_counts_shared_quads_once(self):
        first = Dataset()
        second = Dataset()
        shared = Quad(ex("a"), ex("b"), ex("c"), ex("g"))
        first.add(shared)
        first.add_triple(ex("only"), ex("in"), ex("first"))
        second.add(Quad(ex("a"), ex("b"), ex("c"), ex("g")))
        second.add_quad(ex("only"), ex("in"), ex("second"), ex("g"))

        result = first.merge(second)

        assert result is first
        assert len(first) == 3
        assert len(second) == 2

    def test_merge_into_empty(self, dataset):
        target = Dataset()
        target.merge(dataset)
        assert target.quads() == dataset.quads()

    def test_merge_with_self_is_noop(self, dataset):
        dataset.merge(dataset)
        assert len(dataset) == 4


class TestFlatDump:

    def test_single_named_quad(self):
        ds = Dataset()
        ds.add(Quad(Resource("a"), Resource("b"), Resource("c"), Resource("g")))
        assert str(ds) == "<a> <b> <c> <g> .\n"

    def test_default_graph_quad_has_no_graph(self):
        ds = Dataset()
        ds.add_triple(Resource("a"), Resource("b"), Literal("c", language="en"))
        assert str(ds) == '<a> <b> "c"@en .\n'

    def test_empty_dump(self):
        assert str(Dataset()) == ""

    def test_dump_is_default_serialization(self, dataset):
        assert dataset.serialize() == str(dataset)


class TestDataFrame:

    def test_columns_and_rows(self, dataset):
        df = dataset.to_dataframe()
        assert isinstance(df, pl.DataFrame)
        assert df.columns == ["subject", "predicate", "object", "graph"]
        assert df.height == 4

    def test_default_graph_is_null(self, dataset):
        df = dataset.to_dataframe()
        assert df["graph"].null_count() == 1
        assert df["graph"][1] == f"<{EX}g1>"

    def test_canonical_encodings(self, dataset):
        df = dataset.to_dataframe()
        assert df["object"][3] == '"Carol"@en'

    def test_empty(self):
        assert Dataset().to_dataframe().height == 0


class TestFormatDispatch:

    def test_parse_unknown_format(self):
        with pytest.raises(UnsupportedFormatError):
            Dataset().parse("", "text/html")

    def test_serialize_unknown_format(self, dataset):
        with pytest.raises(UnsupportedFormatError):
            dataset.serialize(format="application/rdf+xml")

    def test_turtle_cannot_be_serialized(self, dataset):
        with pytest.raises(UnsupportedFormatError):
            dataset.serialize(format="text/turtle")

    def test_serialize_to_stream(self, dataset):
        buffer = io.StringIO()
        assert dataset.serialize(buffer, format="application/trig") is None
        assert buffer.getvalue() == dataset.serialize(format="trig")

    def test_serialize_to_path(self, dataset, tmp_path):
        path = tmp_path / "out.nq"
        dataset.serialize(path, format="application/n-quads")
        assert path.read_text(encoding="utf-8") == str(dataset)

    def test_parse_nquads(self):
        ds = Dataset()
        report = ds.parse(
            "<http://example.org/a> <http://example.org/b> <http://example.org/c> <http://example.org/g> .\n"
            '<http://example.org/a> <http://example.org/b> "x" .\n',
            "application/n-quads",
        )
        assert report.format == "nquads"
        assert report.added == 2
        assert ds.get_named_graphs() == [ex("g")]
        assert ds.one(ex("a")) == Quad(ex("a"), ex("b"), Literal("x"))

    def test_nquads_dump_round_trip(self, dataset):
        copy = Dataset()
        copy.parse(str(dataset), "nquads")
        assert copy.quads() == dataset.quads()

    def test_parse_counts_duplicates(self, dataset):
        report = dataset.parse(str(dataset), "nquads")
        assert report.parsed == 4
        assert report.added == 0
        assert len(dataset) == 4
