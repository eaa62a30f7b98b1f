import ast
import os

import pytest

from starlark_docs_codegen.errors import (
    DiscoveryError,
    MissingSpecError,
    OutputError,
    TagParseError,
    UnsupportedShapeError,
)
from starlark_docs_codegen.pipeline import CodeGeneratorConfig, PipelineGenerator

EXPECTED_MEMBERS = [
    "Probe",
    "Handler",
    "ExecAction",
    "RestartOnSpec",
    "DisableSource",
    "ConfigMapDisableSource",
    "UIComponentLocation",
    "UIInputSpec",
    "UITextInputSpec",
    "UIBoolInputSpec",
]


@pytest.fixture
def tilt_stubs(tilt_package):
    generator = PipelineGenerator(tilt_package)
    return generator, generator.generate()


class TestTiltPackage:
    def test_targets(self, tilt_stubs):
        generator, _ = tilt_stubs
        assert [t.name for t in generator.targets] == ["Cmd", "UIButton"]

    def test_member_order(self, tilt_stubs):
        generator, _ = tilt_stubs
        assert [t.name for t in generator.members] == EXPECTED_MEMBERS

    def test_output_is_valid_python(self, tilt_stubs):
        _, code = tilt_stubs
        tree = ast.parse(code)
        classes = [n.name for n in tree.body if isinstance(n, ast.ClassDef)]
        functions = [n.name for n in tree.body if isinstance(n, ast.FunctionDef)]
        assert classes == EXPECTED_MEMBERS
        assert functions == [
            "cmd",
            "ui_button",
            "probe",
            "handler",
            "exec_action",
            "restart_on_spec",
            "disable_source",
            "config_map_disable_source",
            "ui_component_location",
            "ui_input_spec",
            "ui_text_input_spec",
            "ui_bool_input_spec",
        ]

    def test_classes_precede_every_reference(self, tilt_stubs):
        """No declaration names a class that is declared further down"""
        _, code = tilt_stubs
        tree = ast.parse(code)
        declared = set()
        for node in tree.body:
            if isinstance(node, ast.ClassDef):
                declared.add(node.name)
            elif isinstance(node, ast.FunctionDef):
                names = {n.id for n in ast.walk(node) if isinstance(n, ast.Name)}
                referenced = names & set(EXPECTED_MEMBERS)
                assert referenced <= declared, f"{node.name} references {referenced - declared}"

    def test_cmd_function(self, tilt_stubs):
        _, code = tilt_stubs
        assert (
            "def cmd(\n"
            "  name: str,\n"
            "  labels: Dict[str, str] = None,\n"
            "  annotations: Dict[str, str] = None,\n"
            "  args: List[str] = None,\n"
            '  dir: str = "",\n'
            "  env: List[str] = None,\n"
            "  readiness_probe: Optional[Probe] = None,\n"
            "  restart_on: Optional[RestartOnSpec] = None,\n"
            "  disable_source: Optional[DisableSource] = None,\n"
            "):\n"
        ) in code
        assert "    disable_source: Documentation missing\n" in code

    def test_ui_button_function(self, tilt_stubs):
        _, code = tilt_stubs
        assert (
            "  location: UIComponentLocation = None,\n"
            '  text: str = "",\n'
            '  icon_name: str = "",\n'
            "  icon_svg: Optional[str] = None,\n"
            "  requires_confirmation: bool = False,\n"
            "  inputs: List[UIInputSpec] = None,\n"
            "  spec_labels: Dict[str, str] = None,\n"
            "  spec_anotations: Dict[str, str] = None,\n"
            "):\n"
        ) in code

    def test_member_function(self, tilt_stubs):
        _, code = tilt_stubs
        assert (
            "def ui_component_location(\n"
            '  component_id: str = "",\n'
            '  component_type: str = "",\n'
            ") -> UIComponentLocation:\n"
        ) in code
        assert "    component_id: ComponentID is the identifier of the parent component to associate this component with.\n\n" in code
        assert "      For example, this is a resource name if the ComponentType is Resource.\n" in code

    def test_time_fields_never_emitted(self, tilt_stubs):
        _, code = tilt_stubs
        for name in ("last_modified", "confirm_by", "started_at", "last_clicked_at"):
            assert name not in code

    def test_tag_lines_never_emitted(self, tilt_stubs):
        _, code = tilt_stubs
        assert "+optional" not in code
        assert "+genclient" not in code
        assert "+tilt:starlark-gen" not in code

    def test_status_and_untagged_types_are_ignored(self, tilt_stubs):
        _, code = tilt_stubs
        for name in ("CmdStatus", "Session", "Detached", "TestOnly", "CmdList"):
            assert name not in code

    def test_idempotent(self, tilt_package, tilt_stubs):
        _, code = tilt_stubs
        assert PipelineGenerator(tilt_package).generate() == code


class TestImportedTypes:
    @pytest.fixture
    def stubs(self, packages_dir):
        generator = PipelineGenerator(packages_dir / "external" / "api")
        return generator, generator.generate()

    def test_imported_structs_become_members(self, stubs):
        generator, _ = stubs
        assert [t.name for t in generator.members] == ["LabelSelector", "LabelSelectorRequirement"]

    def test_top_level_function(self, stubs):
        _, code = stubs
        assert (
            "def kubernetes_discovery(\n"
            "  name: str,\n"
            "  labels: Dict[str, str] = None,\n"
            "  annotations: Dict[str, str] = None,\n"
            "  extra_selectors: List[LabelSelector] = None,\n"
            '  from_: str = "",\n'
            "  pod_selector: Optional[LabelSelector] = None,\n"
            "):\n"
        ) in code
        assert "    from_: Where to start watching from.\n" in code

    def test_imported_member_stubs(self, stubs):
        _, code = stubs
        assert 'class LabelSelector:\n  """\n  A label selector is a label query over a set of resources.\n  """\n  pass\n' in code
        assert (
            "def label_selector(\n"
            "  match_labels: Dict[str, str] = None,\n"
            "  match_expressions: List[LabelSelectorRequirement] = None,\n"
            ") -> LabelSelector:\n"
        ) in code
        assert '  operator: str = "",\n' in code

    def test_output_is_valid_python(self, stubs):
        _, code = stubs
        tree = ast.parse(code)
        classes = [n.name for n in tree.body if isinstance(n, ast.ClassDef)]
        assert classes == ["LabelSelector", "LabelSelectorRequirement"]


def test_keyword_field_names(tmp_path):
    (tmp_path / "types.go").write_text(
        "package a\n\n// +tilt:starlark-gen=true\ntype Link struct {\n\tSpec LinkSpec\n}\n\n"
        "type LinkSpec struct {\n\t// Source end.\n\tFrom string\n\tTo string\n\tHops []Hop\n}\n\n"
        "type Hop struct {\n\tIs bool\n}\n"
    )
    out = tmp_path / "out"
    out.mkdir()

    path = PipelineGenerator(tmp_path).write(out)

    code = path.read_text()
    ast.parse(code)
    assert '  from_: str = "",\n  to: str = "",\n' in code
    assert "    from_: Source end.\n" in code
    assert "  is_: bool = False,\n" in code
    assert "    is_: Documentation missing\n" in code
    assert "  from:" not in code


def test_custom_tag_name(packages_dir, tmp_path):
    (tmp_path / "types.go").write_text(
        "package a\n\n// Foo.\n// +docs:gen=true\ntype Foo struct {\n\tSpec FooSpec\n}\n\ntype FooSpec struct {\n\tX string\n}\n"
    )
    config = CodeGeneratorConfig(tag_name="docs:gen")
    code = PipelineGenerator(tmp_path, config).generate()
    assert "def foo(" in code


def test_custom_time_types(tmp_path):
    (tmp_path / "types.go").write_text(
        "package a\n\n// +tilt:starlark-gen=true\ntype Foo struct {\n\tSpec FooSpec\n}\n\n"
        "type Stamp struct {\n\tSeconds int32\n}\n\ntype FooSpec struct {\n\tAt Stamp\n\tName string\n}\n"
    )
    config = CodeGeneratorConfig(time_types=[f"{tmp_path.name}.Stamp"])
    generator = PipelineGenerator(tmp_path, config)
    code = generator.generate()
    assert generator.members == []
    assert "  at: " not in code


class TestFatalErrors:
    def test_missing_spec(self, packages_dir):
        with pytest.raises(MissingSpecError, match="type has no spec: Widget"):
            PipelineGenerator(packages_dir / "missing_spec").generate()

    def test_unsupported_shape(self, packages_dir):
        with pytest.raises(UnsupportedShapeError, match=r"generating type Router: Unrecognized type of member Routes: map\[string\]Route"):
            PipelineGenerator(packages_dir / "unsupported_shape").generate()

    def test_bad_tag(self, packages_dir):
        with pytest.raises(TagParseError, match=r"parsing tags in .*Thing: tag value for .tilt:starlark-gen. is not boolean"):
            PipelineGenerator(packages_dir / "bad_tag").generate()

    def test_discovery(self, packages_dir):
        with pytest.raises(DiscoveryError):
            PipelineGenerator(packages_dir / "syntax_error").generate()

    @pytest.mark.parametrize("package", ["missing_spec", "unsupported_shape", "bad_tag", "syntax_error"])
    def test_nothing_written_on_failure(self, packages_dir, tmp_path, package):
        """A failed run leaves the destination exactly as it was"""
        existing = tmp_path / "__init__.py"
        existing.write_text("# previous docs\n")

        with pytest.raises(Exception):
            PipelineGenerator(packages_dir / package).write(tmp_path)

        assert existing.read_text() == "# previous docs\n"
        assert os.listdir(tmp_path) == ["__init__.py"]

    def test_nothing_created_on_failure(self, packages_dir, tmp_path):
        with pytest.raises(UnsupportedShapeError):
            PipelineGenerator(packages_dir / "unsupported_shape").write(tmp_path)
        assert os.listdir(tmp_path) == []


class TestWrite:
    def test_writes_init_file(self, packages_dir, tmp_path):
        path = PipelineGenerator(packages_dir / "minimal").write(tmp_path)
        assert path == tmp_path / "__init__.py"
        assert path.read_text().startswith("from typing import Dict, List, Optional\n")

    def test_overwrites_previous_output(self, packages_dir, tmp_path):
        generator = PipelineGenerator(packages_dir / "minimal")
        first = generator.write(tmp_path).read_text()
        second = generator.write(tmp_path).read_text()
        assert first == second

    def test_stdout(self, packages_dir, capsys):
        assert PipelineGenerator(packages_dir / "minimal").write("-") is None
        assert "def foo(" in capsys.readouterr().out

    def test_missing_output_directory(self, packages_dir, tmp_path):
        with pytest.raises(OutputError, match="output directory does not exist"):
            PipelineGenerator(packages_dir / "minimal").write(tmp_path / "missing")
