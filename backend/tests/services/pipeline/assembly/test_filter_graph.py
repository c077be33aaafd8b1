"""
Tests for the typed filter graph builder
"""

import pytest

from slidecast.services.pipeline.assembly.filter_graph import (
    FilterGraph,
    FilterGraphError,
    FilterNode,
    escape_option_value,
    format_number,
)


class TestFormatNumber:
    @pytest.mark.parametrize("value, expected", [
        (8.0, "8"),
        (7.5, "7.5"),
        (0.25, "0.25"),
        (12.3456, "12.346"),
        (0.0, "0"),
    ])
    def test_format(self, value, expected):
        assert format_number(value) == expected


class TestEscaping:
    def test_plain_values_untouched(self):
        assert escape_option_value("PTS-STARTPTS") == "PTS-STARTPTS"
        assert escape_option_value(1920) == "1920"

    def test_colon_escaped_at_both_levels(self):
        # ':' -> '\:' for the option list, then the backslash is escaped for the graph
        assert escape_option_value("a:b") == "a\\\\:b"

    def test_graph_delimiters_escaped(self):
        assert escape_option_value("x[0];y,z") == "x\\[0\\]\\;y\\,z"

    def test_quote_escaped(self):
        assert escape_option_value("it's") == "it\\\\\\'s"

    def test_control_characters_rejected(self):
        with pytest.raises(FilterGraphError):
            escape_option_value("line\nbreak")

    def test_booleans_rejected(self):
        with pytest.raises(FilterGraphError):
            escape_option_value(True)


class TestFilterNode:
    def test_serialize_positional_and_keyword(self):
        node = FilterNode("fade", kwargs={"t": "in", "st": 0, "d": 0.5})
        assert node.serialize() == "fade=t=in:st=0:d=0.5"

    def test_serialize_positional(self):
        assert FilterNode("scale", (1920, 1080)).serialize() == "scale=1920:1080"

    def test_serialize_bare(self):
        assert FilterNode("apad").serialize() == "apad"

    @pytest.mark.parametrize("name", ["Scale", "drop;table", "", "1fade"])
    def test_invalid_name(self, name):
        with pytest.raises(FilterGraphError):
            FilterNode(name)

    def test_invalid_option_name(self):
        with pytest.raises(FilterGraphError):
            FilterNode("fade", kwargs={"t=in:x": 1})


class TestFilterGraph:
    def _two_slide_graph(self):
        graph = FilterGraph()
        graph.add(["0:v"], [FilterNode("setsar", (1,))], ["v0"])
        graph.add(["1:v"], [FilterNode("setsar", (1,))], ["v1"])
        graph.add(["v0", "v1"], [FilterNode("concat", kwargs={"n": 2, "v": 1, "a": 0})], ["vout"])
        graph.outputs.append("vout")
        return graph

    def test_serialize(self):
        assert self._two_slide_graph().serialize() == (
            "[0:v]setsar=1[v0];[1:v]setsar=1[v1];[v0][v1]concat=n=2:v=1:a=0[vout]"
        )

    def test_multiple_filters_in_chain(self):
        graph = FilterGraph()
        graph.add(["0:a"], [FilterNode("aresample", (44100,)), FilterNode("apad")], ["aout"])
        graph.outputs.append("aout")

        assert graph.serialize() == "[0:a]aresample=44100,apad[aout]"

    def test_empty_graph(self):
        with pytest.raises(FilterGraphError, match="no chains"):
            FilterGraph().validate()

    def test_chain_without_filters(self):
        graph = FilterGraph()
        graph.add(["0:v"], [], ["v0"])
        graph.outputs.append("v0")

        with pytest.raises(FilterGraphError, match="no filters"):
            graph.validate()

    def test_consumed_before_produced(self):
        graph = FilterGraph()
        graph.add(["v1"], [FilterNode("null")], ["out"])
        graph.add(["0:v"], [FilterNode("null")], ["v1"])
        graph.outputs.append("out")

        with pytest.raises(FilterGraphError, match="before it is produced"):
            graph.validate()

    def test_pad_consumed_twice(self):
        graph = self._two_slide_graph()
        graph.add(["v0"], [FilterNode("null")], ["extra"])
        graph.outputs.append("extra")

        with pytest.raises(FilterGraphError, match="consumed more than once"):
            graph.validate()

    def test_pad_produced_twice(self):
        graph = FilterGraph()
        graph.add(["0:v"], [FilterNode("null")], ["v0"])
        graph.add(["1:v"], [FilterNode("null")], ["v0"])
        graph.outputs.append("v0")

        with pytest.raises(FilterGraphError, match="produced more than once"):
            graph.validate()

    def test_input_stream_read_twice(self):
        graph = FilterGraph()
        graph.add(["0:v"], [FilterNode("null")], ["a"])
        graph.add(["0:v"], [FilterNode("null")], ["b"])
        graph.outputs.extend(["a", "b"])

        with pytest.raises(FilterGraphError, match="read more than once"):
            graph.validate()

    def test_dangling_pad(self):
        graph = self._two_slide_graph()
        graph.add(["2:v"], [FilterNode("null")], ["unused"])

        with pytest.raises(FilterGraphError, match="never used"):
            graph.validate()

    def test_missing_output(self):
        graph = self._two_slide_graph()
        graph.outputs.append("aout")

        with pytest.raises(FilterGraphError, match="never produced"):
            graph.validate()

    def test_output_consumed_inside(self):
        graph = self._two_slide_graph()
        graph.outputs.append("v0")

        with pytest.raises(FilterGraphError, match="consumed inside"):
            graph.validate()

    @pytest.mark.parametrize("label", ["v 0", "a]b", "x;y", ""])
    def test_bad_labels(self, label):
        graph = FilterGraph()
        graph.add(["0:v"], [FilterNode("null")], [label])
        graph.outputs.append(label)

        with pytest.raises(FilterGraphError, match="Invalid pad label"):
            graph.validate()

    def test_writing_to_stream_label(self):
        graph = FilterGraph()
        graph.add(["0:v"], [FilterNode("null")], ["1:v"])

        with pytest.raises(FilterGraphError, match="input stream label"):
            graph.validate()
