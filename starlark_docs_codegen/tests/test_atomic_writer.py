import os
import stat

import pytest

from starlark_docs_codegen.errors import OutputError
from starlark_docs_codegen.pipeline.config import OutputConfig
from starlark_docs_codegen.pipeline.writer import AtomicWriter, resolve_output_path, write_output


class TestAtomicWriter:
    def test_writes_content(self, tmp_path):
        path = tmp_path / "__init__.py"
        AtomicWriter().write(path, "x = 1\n")
        assert path.read_text() == "x = 1\n"

    def test_fixed_permissions(self, tmp_path):
        path = tmp_path / "__init__.py"
        AtomicWriter(file_mode=0o444).write(path, "x = 1\n")
        assert stat.S_IMODE(os.stat(path).st_mode) == 0o444

    def test_replaces_read_only_file(self, tmp_path):
        path = tmp_path / "__init__.py"
        writer = AtomicWriter(file_mode=0o444)
        writer.write(path, "x = 1\n")
        writer.write(path, "x = 2\n")
        assert path.read_text() == "x = 2\n"

    def test_invalid_python_is_rejected(self, tmp_path):
        path = tmp_path / "__init__.py"
        path.write_text("# old\n")
        with pytest.raises(OutputError, match="not valid Python"):
            AtomicWriter().write(path, "def broken(:\n")
        assert path.read_text() == "# old\n"
        assert os.listdir(tmp_path) == ["__init__.py"]

    def test_validation_can_be_skipped(self, tmp_path):
        path = tmp_path / "__init__.py"
        AtomicWriter().write(path, "def broken(:\n", validate=False)
        assert path.read_text() == "def broken(:\n"

    def test_custom_validator(self, tmp_path):
        def reject(content):
            raise OutputError("rejected")

        with pytest.raises(OutputError, match="rejected"):
            AtomicWriter(validate_python=reject).write(tmp_path / "__init__.py", "x = 1\n")
        assert os.listdir(tmp_path) == []

    def test_missing_directory(self, tmp_path):
        with pytest.raises(OutputError, match="output directory does not exist"):
            AtomicWriter().write(tmp_path / "missing" / "__init__.py", "x = 1\n")

    def test_temp_file_removed_when_replace_fails(self, tmp_path):
        # A directory in the way makes the final rename fail
        (tmp_path / "__init__.py").mkdir()
        with pytest.raises(OutputError, match="writing"):
            AtomicWriter().write(tmp_path / "__init__.py", "x = 1\n")
        assert os.listdir(tmp_path) == ["__init__.py"]


class TestResolveOutputPath:
    def test_stdout_sentinel(self):
        assert resolve_output_path("-", OutputConfig()) is None

    def test_directory(self, tmp_path):
        assert resolve_output_path(tmp_path, OutputConfig()) == tmp_path / "__init__.py"

    def test_custom_filename(self, tmp_path):
        assert resolve_output_path(tmp_path, OutputConfig(filename="api.py")) == tmp_path / "api.py"

    def test_custom_sentinel(self, tmp_path):
        config = OutputConfig(stdout_sentinel="stdout")
        assert resolve_output_path("stdout", config) is None
        assert resolve_output_path("-", config).name == "__init__.py"


def test_write_output_to_stdout(capsys):
    assert write_output("x = 1\n", "-", OutputConfig()) is None
    assert capsys.readouterr().out == "x = 1\n"


def test_write_output_checks_stdout_content(capsys):
    with pytest.raises(OutputError, match="not valid Python"):
        write_output("def f(from: str):\n    pass\n", "-", OutputConfig())
    assert capsys.readouterr().out == ""


def test_write_output_to_stdout_without_validation(capsys):
    write_output("def broken(:\n", "-", OutputConfig(validate_before_write=False))
    assert capsys.readouterr().out == "def broken(:\n"
