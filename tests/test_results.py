"""
Tests for result and tree builders and the reporter.
"""

import json

import pytest

from shapeguard import (
    DiagnosticContext,
    ValidationError,
    combine_results,
    make_error,
    make_result,
    make_tree_node,
    report_validation_result,
)


class TestBuilders:
    def test_error_fields(self):
        error = make_error("user.age", "number", "x", "bad age")
        assert error == ValidationError("user.age", "number", "x", "bad age")

    def test_result_round_trip(self):
        error = make_error("a", "string", 1, "Expected a (1) to be \"string\"")
        result = make_result(False, [error])
        assert result.errors[0] == make_error(
            "a", "string", 1, "Expected a (1) to be \"string\""
        )
        assert result.tree is None

    def test_result_defaults(self):
        result = make_result(True)
        assert result.valid
        assert result.errors == ()
        assert result.messages == []

    def test_error_does_not_alias_value(self):
        value = {"tags": ["a"]}
        error = make_error("x", "object", value, "msg")
        value["tags"].append("b")
        assert error.actual_value == {"tags": ["a"]}

    def test_result_does_not_alias_errors(self):
        errors = [make_error("a", "string", 1, "m")]
        result = make_result(False, errors)
        errors.append(make_error("b", "string", 2, "n"))
        assert len(result.errors) == 1

    def test_records_are_frozen(self):
        error = make_error("a", "string", 1, "m")
        with pytest.raises(AttributeError):
            error.path = "b"

    def test_tree_does_not_alias_children(self):
        children = {"a": make_tree_node("root.a", True, "string", "x")}
        node = make_tree_node("root", True, "object", {"a": "x"}, children)
        children["b"] = make_tree_node("root.b", False, "number", "y")
        assert list(node.children) == ["a"]

    def test_uncopyable_values_are_kept(self):
        import threading

        lock = threading.Lock()
        error = make_error("x", "object", lock, "msg")
        assert error.actual_value is lock

    def test_failing_deepcopy_is_kept(self):
        class Stubborn:
            def __deepcopy__(self, memo):
                raise RuntimeError("no")

        value = Stubborn()
        assert make_error("x", "object", value, "msg").actual_value is value
        assert make_tree_node("x", False, "object", value).value is value

    def test_snapshot_can_be_skipped(self):
        value = {"tags": ["a"]}
        error = make_error("x", "object", value, "msg", snapshot=False)
        node = make_tree_node("x", False, "object", value, snapshot=False)
        assert error.actual_value is value
        assert node.value is value


class TestTree:
    def test_leaf_payload(self):
        node = make_tree_node("user.age", False, "number", "x")
        assert node.key == "age"
        assert node.to_dict() == {
            "user.age": {"valid": False, "value": "x", "expectedType": "number"}
        }

    def test_unencodable_value_is_rendered_as_text(self):
        node = make_tree_node("r.a", False, "string", b"\xff")
        entry = json.loads(node.to_json(root_key="r"))["r"]
        assert entry["valid"] is False
        assert isinstance(entry["value"], str)

    def test_object_payload(self):
        children = {
            "name": make_tree_node("user.name", True, "string", "A"),
            "age": make_tree_node("user.age", False, "number", "x"),
        }
        node = make_tree_node("user", False, "object", {"name": "A", "age": "x"}, children)
        assert json.loads(node.to_json()) == {
            "user": {
                "valid": False,
                "value": {
                    "name": {"valid": True, "value": "A", "expectedType": "string"},
                    "age": {"valid": False, "value": "x", "expectedType": "number"},
                },
            }
        }

    def test_combine_results(self):
        ok = make_result(True, (), make_tree_node("root.a", True, "string", "x"))
        bad_error = make_error("root.b", "number", "y", "bad b")
        bad_tree = make_tree_node("root.b", False, "number", "y")
        bad = make_result(False, [bad_error], bad_tree)

        combined = combine_results([ok, bad], "root")
        assert not combined.valid
        assert combined.errors == (bad_error,)
        assert list(combined.tree.children) == ["a", "b"]


class TestReporter:
    @pytest.fixture
    def failing(self):
        errors = [
            make_error("r.a", "string", 1, "first"),
            make_error("r.b", "number", "x", "second"),
        ]
        tree = make_tree_node(
            "r",
            False,
            "object",
            {"a": 1, "b": "x"},
            {
                "a": make_tree_node("r.a", False, "string", 1),
                "b": make_tree_node("r.b", False, "number", "x"),
            },
        )
        return make_result(False, errors, tree)

    def test_single(self, failing, sink):
        report_validation_result(failing, DiagnosticContext("r", sink, "single"))
        assert sink.messages == ["first"]

    def test_multi(self, failing, sink):
        report_validation_result(failing, DiagnosticContext("r", sink, "multi"))
        assert sink.messages == ["first; second"]

    def test_json(self, failing, sink):
        report_validation_result(failing, DiagnosticContext("r", sink, "json"))
        assert len(sink.messages) == 1
        assert list(json.loads(sink.messages[0])) == ["r"]

    def test_json_without_tree_falls_back_to_multi(self, sink):
        result = make_result(False, [make_error("r", "string", 1, "only")])
        report_validation_result(result, DiagnosticContext("r", sink, "json"))
        assert sink.messages == ["only"]

    def test_noop_when_valid_or_no_context(self, failing, sink):
        report_validation_result(make_result(True), DiagnosticContext("r", sink))
        report_validation_result(failing, None)
        assert sink.messages == []
