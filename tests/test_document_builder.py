"""
Document assembly: test_document_builder.py

grouped strategy (default):
  - plain names nest into mappings
  - indexed columns become lists, in index order regardless of column order
  - gaps are filled with None ('signal.0,signal.2' → length 3)
  - names after an index build mappings inside the list
  - nested indices build lists of lists
  - an index addressing the root becomes a string key
  - short rows leave trailing paths unset, long rows ignore extra fields
  - array base path wins over a plain column at the same place
  - duplicate plain paths: last column wins

pointer strategy:
  - same shape as grouped for well-formed headers
  - lists padded with None
  - last write wins, including over a list

build_document:
  - unknown strategy raises ConfigError
  - every call returns a fresh document
"""

from __future__ import annotations

import pytest

from csvreplay.configs.exceptions import ConfigError
from csvreplay.transformers.document_builder import build_document, set_by_pointer
from csvreplay.transformers.paths import compile_headers


def build(headers: list[str], row: list[str], strategy: str = "grouped") -> dict:
    return build_document(compile_headers(headers), row, strategy)


# ============================================================================
# grouped
# ============================================================================

class TestGroupedPlain:
    def test_flat(self):
        assert build(["a", "b"], ["1", "x"]) == {"a": 1.0, "b": "x"}

    def test_nested(self):
        doc = build(["position.latitude", "position.longitude"], ["46.07", "11.12"])
        assert doc == {"position": {"latitude": 46.07, "longitude": 11.12}}

    def test_deep_nesting(self):
        assert build(["a.b.c.d"], ["v"]) == {"a": {"b": {"c": {"d": "v"}}}}

    def test_empty_value_is_string(self):
        assert build(["a"], [""]) == {"a": ""}

    def test_duplicate_path_last_wins(self):
        assert build(["a", "a"], ["1", "2"]) == {"a": 2.0}

    def test_plain_scalar_replaced_by_deeper_path(self):
        assert build(["a", "a.b"], ["1", "2"]) == {"a": {"b": 2.0}}


class TestGroupedArrays:
    def test_contiguous(self):
        doc = build(["signal[0]", "signal[1]", "signal[2]"], ["101", "102", "103"])
        assert doc == {"signal": [101.0, 102.0, 103.0]}

    def test_gap_filled_with_none(self):
        doc = build(["signal.0", "signal.2"], ["101", "103"])
        assert doc == {"signal": [101.0, None, 103.0]}
        assert len(doc["signal"]) == 3

    def test_out_of_order_columns(self):
        doc = build(["s[2]", "s[0]", "s[1]"], ["c", "a", "b"])
        assert doc == {"s": ["a", "b", "c"]}

    def test_array_under_nested_base(self):
        doc = build(["car.wheels.0", "car.wheels.1"], ["1", "2"])
        assert doc == {"car": {"wheels": [1.0, 2.0]}}

    def test_mapping_elements(self):
        doc = build(
            ["wheels[0].psi", "wheels[1].psi", "wheels[1].temp"],
            ["30", "31", "hot"],
        )
        assert doc == {"wheels": [{"psi": 30.0}, {"psi": 31.0, "temp": "hot"}]}

    def test_mapping_element_gap(self):
        doc = build(["w[1].psi"], ["31"])
        assert doc == {"w": [None, {"psi": 31.0}]}

    def test_nested_indices(self):
        doc = build(["m[0][0]", "m[0][1]", "m[1][1]"], ["1", "2", "4"])
        assert doc == {"m": [[1.0, 2.0], [None, 4.0]]}

    def test_index_inside_element_mapping(self):
        doc = build(["t[0].v[1]"], ["x"])
        assert doc == {"t": [{"v": [None, "x"]}]}

    def test_same_slot_last_wins(self):
        assert build(["s.0", "s[0]"], ["a", "b"]) == {"s": ["b"]}

    def test_array_wins_over_plain_column(self):
        # Arrays are attached after all plain paths.
        assert build(["s.0", "s"], ["a", "plain"]) == {"s": ["a"]}

    def test_root_index_becomes_key(self):
        assert build(["0", "1.x"], ["a", "b"]) == {"0": "a", "1": {"x": "b"}}

    def test_mixed_with_plain(self):
        doc = build(["id", "signal.0", "signal.2", "name"], ["7", "101", "103", "x"])
        assert doc == {"id": 7.0, "signal": [101.0, None, 103.0], "name": "x"}


class TestGroupedRowLength:
    def test_short_row(self):
        doc = build(["a", "b", "c"], ["1"])
        assert doc == {"a": 1.0}

    def test_short_row_truncates_array(self):
        doc = build(["s.0", "s.1", "s.2"], ["1", "2"])
        assert doc == {"s": [1.0, 2.0]}

    def test_long_row(self):
        assert build(["a"], ["1", "2", "3"]) == {"a": 1.0}


# ============================================================================
# pointer
# ============================================================================

class TestPointerStrategy:
    def test_nested(self):
        doc = build(["a.b", "a.c"], ["1", "x"], strategy="pointer")
        assert doc == {"a": {"b": 1.0, "c": "x"}}

    def test_gap_padding(self):
        doc = build(["signal.0", "signal.2"], ["101", "103"], strategy="pointer")
        assert doc == {"signal": [101.0, None, 103.0]}

    def test_out_of_order(self):
        doc = build(["s[2]", "s[0]"], ["c", "a"], strategy="pointer")
        assert doc == {"s": ["a", None, "c"]}

    def test_name_after_index(self):
        doc = build(["w[1].psi"], ["31"], strategy="pointer")
        assert doc == {"w": [None, {"psi": 31.0}]}

    def test_last_write_wins_over_array(self):
        doc = build(["s.0", "s"], ["a", "plain"], strategy="pointer")
        assert doc == {"s": "plain"}

    def test_plain_replaced_by_array(self):
        doc = build(["s", "s.1"], ["plain", "b"], strategy="pointer")
        assert doc == {"s": [None, "b"]}

    def test_index_on_mapping_uses_key(self):
        doc = build(["a.x", "a.0"], ["1", "2"], strategy="pointer")
        assert doc == {"a": {"x": 1.0, "0": 2.0}}

    def test_root_index_becomes_key(self):
        assert build(["3"], ["v"], strategy="pointer") == {"3": "v"}


class TestSetByPointer:
    def test_creates_nested_lists(self):
        doc: dict = {}
        set_by_pointer(doc, ("m", 1, 0), "x")
        assert doc == {"m": [None, ["x"]]}

    def test_name_on_list_replaces_it(self):
        doc: dict = {"a": [1.0]}
        set_by_pointer(doc, ("a", "b"), 2.0)
        assert doc == {"a": {"b": 2.0}}


# ============================================================================
# build_document
# ============================================================================

class TestBuildDocument:
    def test_unknown_strategy(self):
        with pytest.raises(ConfigError):
            build(["a"], ["1"], strategy="merge")

    def test_fresh_document_each_call(self):
        headers = compile_headers(["a.b"])
        first = build_document(headers, ["1"])
        second = build_document(headers, ["1"])
        assert first == second
        assert first is not second
        assert first["a"] is not second["a"]
