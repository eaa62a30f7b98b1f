import pytest

from starlark_docs_codegen.errors import TagParseError
from starlark_docs_codegen.pipeline.analyzer import (
    extract_bool_comment_tag,
    extract_comment_tags,
    filter_comment_tags,
)

LINES = [
    "Cmd represents a process on the host machine.",
    "",
    "+genclient",
    "+k8s:deepcopy-gen:interfaces=k8s.io/apimachinery/pkg/runtime.Object",
    "  +tilt:starlark-gen=true",
]


class TestExtractCommentTags:
    def test_collects_key_values(self):
        tags = extract_comment_tags("+", LINES)
        assert tags["genclient"] == [""]
        assert tags["k8s:deepcopy-gen:interfaces"] == ["k8s.io/apimachinery/pkg/runtime.Object"]
        assert tags["tilt:starlark-gen"] == ["true"]

    def test_ignores_documentation(self):
        tags = extract_comment_tags("+", ["Just some text", "a + b = c"])
        assert tags == {}

    def test_repeated_tag_keeps_order(self):
        tags = extract_comment_tags("+", ["+k=1", "+k=2"])
        assert tags["k"] == ["1", "2"]


class TestExtractBoolCommentTag:
    def test_true(self):
        assert extract_bool_comment_tag("+", "tilt:starlark-gen", False, LINES) is True

    def test_false(self):
        assert extract_bool_comment_tag("+", "tilt:starlark-gen", True, ["+tilt:starlark-gen=false"]) is False

    def test_absent_uses_default(self):
        assert extract_bool_comment_tag("+", "tilt:starlark-gen", False, ["docs"]) is False
        assert extract_bool_comment_tag("+", "tilt:starlark-gen", True, ["docs"]) is True

    def test_first_value_wins(self):
        lines = ["+tilt:starlark-gen=true", "+tilt:starlark-gen=false"]
        assert extract_bool_comment_tag("+", "tilt:starlark-gen", False, lines) is True

    @pytest.mark.parametrize("line", ["+tilt:starlark-gen=yes", "+tilt:starlark-gen", "+tilt:starlark-gen=True"])
    def test_malformed_value_raises(self, line):
        with pytest.raises(TagParseError, match="tilt:starlark-gen"):
            extract_bool_comment_tag("+", "tilt:starlark-gen", False, [line])


def test_filter_comment_tags_drops_tag_lines():
    """Tag lines never reach documentation, whatever their indentation"""
    assert filter_comment_tags(LINES) == ["Cmd represents a process on the host machine.", ""]


def test_filter_comment_tags_custom_marker():
    assert filter_comment_tags(["@gen", "docs", "+kept"], marker="@") == ["docs", "+kept"]
