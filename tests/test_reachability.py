"""Tests for breadth-first reachability and path rendering."""

from conftest import HTTP_REQUEST, MANUAL_TRIGGER, SET, SLACK, WEBHOOK

from flowaudit.scanning.catalog import classify_nodes
from flowaudit.scanning.reachability import (
    breadth_first,
    format_path,
    reconstruct_path,
    successors,
    trace_data_flows,
    trigger_names,
)


def _dfs_reachable(graph, source):
    seen = {source}
    stack = [source]
    while stack:
        for target in successors(graph, stack.pop()):
            if target not in seen:
                seen.add(target)
                stack.append(target)
    return seen


def _branching_graph(builder):
    """Start -> A -> C -> E, Start -> B -> C, B -> D -> B (cycle), D -> Ghost."""
    return (
        builder.node("Start", MANUAL_TRIGGER)
        .node("A", SET).node("B", SET).node("C", SET).node("D", SET).node("E", SLACK)
        .node("Island", SET)
        .connect("Start", "A").connect("Start", "B")
        .connect("A", "C").connect("B", "C").connect("C", "E")
        .connect("B", "D").connect("D", "B").connect("D", "Ghost")
        .build()
    )


class TestBreadthFirst:

    def test_matches_depth_first_reachability(self, builder):
        graph = _branching_graph(builder)
        assert breadth_first(graph, ["Start"]).visited == _dfs_reachable(graph, "Start")

    def test_discovery_order(self, builder):
        traversal = breadth_first(_branching_graph(builder), ["Start"])
        assert traversal.order == ["Start", "A", "B", "C", "D", "E"]
        assert traversal.reached() == ["A", "B", "C", "D", "E"]

    def test_first_discovery_wins(self, builder):
        traversal = breadth_first(_branching_graph(builder), ["Start"])
        assert traversal.predecessors["C"] == "A"
        assert traversal.predecessors["D"] == "B"

    def test_unknown_sources_ignored(self, builder):
        traversal = breadth_first(_branching_graph(builder), ["Nope", "Island"])
        assert traversal.sources == ["Island"]
        assert traversal.reached() == []

    def test_multi_source(self, builder):
        traversal = breadth_first(_branching_graph(builder), ["Island", "D"])
        assert traversal.order[:2] == ["Island", "D"]
        assert "E" in traversal.visited

    def test_traverses_auxiliary_connections(self, builder):
        graph = (
            builder.node("Start", MANUAL_TRIGGER).node("Tool", SET)
            .connect("Start", "Tool", connection_type="ai_tool")
            .build()
        )
        assert breadth_first(graph, ["Start"]).reached() == ["Tool"]


class TestPaths:

    def test_reconstruct_shortest_path(self, builder):
        traversal = breadth_first(_branching_graph(builder), ["Start"])
        assert reconstruct_path(traversal.predecessors, "E") == ["Start", "A", "C", "E"]

    def test_reconstruct_source(self):
        assert reconstruct_path({}, "Start") == ["Start"]

    def test_short_path_not_collapsed(self):
        assert format_path(["A", "B", "C", "D", "E"]) == "A → B → C → D → E"

    def test_long_path_collapsed(self):
        assert format_path(list("ABCDEFG")) == "A → B → ... → G"

    def test_custom_collapse_length(self):
        assert format_path(list("ABCD"), collapse_length=3) == "A → B → ... → D"


class TestTraceDataFlows:

    def test_paths_from_trigger_to_services(self, builder, catalog):
        graph = _branching_graph(builder)
        caps = classify_nodes(graph, catalog)
        assert trigger_names(graph, caps) == ["Start"]
        assert trace_data_flows(graph, caps) == ["Start → A → C → E"]

    def test_path_count_is_capped(self, builder, catalog):
        builder.node("Hook", WEBHOOK)
        for i in range(12):
            builder.node(f"Call {i}", HTTP_REQUEST).connect("Hook", f"Call {i}")
        graph = builder.build()
        caps = classify_nodes(graph, catalog)
        paths = trace_data_flows(graph, caps)
        assert len(paths) == 10
        assert paths[0] == "Hook → Call 0"
        assert trace_data_flows(graph, caps, max_paths=3) == paths[:3]

    def test_no_triggers(self, builder, catalog):
        graph = builder.node("A", SET).node("B", SLACK).connect("A", "B").build()
        assert trace_data_flows(graph, classify_nodes(graph, catalog)) == []

    def test_zero_cap(self, builder, catalog):
        graph = builder.node("Hook", WEBHOOK).node("S", SLACK).connect("Hook", "S").build()
        assert trace_data_flows(graph, classify_nodes(graph, catalog), max_paths=0) == []
