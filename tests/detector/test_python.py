"""Tests for the Python ecosystem detector.

All tests use in-memory fixtures written to tmp_path; no real repos are cloned.
"""

from pathlib import Path

from selfdeploy.detector.python import detect_python
from selfdeploy.detector.python.pyproject import detect_build_tool, detect_version, load_pyproject
from selfdeploy.detector.python.sources import framework_from_entry_points, framework_from_sources


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _write(path: Path, content: str = "") -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")


def _pyproject(tmp_path: Path, content: str) -> Path:
    _write(tmp_path / "pyproject.toml", content)
    return tmp_path


def _requirements(tmp_path: Path, content: str) -> Path:
    _write(tmp_path / "requirements.txt", content)
    return tmp_path


POETRY_PYPROJECT = """\
[tool.poetry]
name = "shop"
version = "0.1.0"

[tool.poetry.dependencies]
python = "^3.11"
django = "^5.0"
"""

PEP621_PYPROJECT = """\
[project]
name = "svc"
requires-python = ">=3.10"
dependencies = ["httpx"]
"""


# ---------------------------------------------------------------------------
# pyproject.toml
# ---------------------------------------------------------------------------

class TestPyproject:
    def test_poetry_build_tool(self, tmp_path):
        _pyproject(tmp_path, POETRY_PYPROJECT)
        data = load_pyproject(tmp_path)
        assert detect_build_tool(tmp_path, data) == ("poetry", "pyproject.toml [tool.poetry]")

    def test_uv_lock(self, tmp_path):
        _pyproject(tmp_path, PEP621_PYPROJECT)
        _write(tmp_path / "uv.lock")
        assert detect_build_tool(tmp_path, load_pyproject(tmp_path))[0] == "uv"

    def test_plain_pyproject_has_no_tool(self, tmp_path):
        _pyproject(tmp_path, PEP621_PYPROJECT)
        assert detect_build_tool(tmp_path, load_pyproject(tmp_path)) is None

    def test_malformed_pyproject_text_fallback(self, tmp_path):
        _pyproject(tmp_path, "[tool.poetry\nname = ")
        data = load_pyproject(tmp_path)
        assert data == {}
        assert detect_build_tool(tmp_path, data)[0] == "poetry"

    def test_python_version_pin_wins(self, tmp_path):
        _pyproject(tmp_path, PEP621_PYPROJECT)
        _write(tmp_path / ".python-version", "3.12.1\n")
        assert detect_version(tmp_path, load_pyproject(tmp_path)) == ("python-3.12.1", ".python-version")

    def test_requires_python(self, tmp_path):
        _pyproject(tmp_path, PEP621_PYPROJECT)
        assert detect_version(tmp_path, load_pyproject(tmp_path)) == (
            "python-3.10",
            "pyproject.toml requires-python",
        )

    def test_poetry_python_dependency(self, tmp_path):
        _pyproject(tmp_path, POETRY_PYPROJECT)
        assert detect_version(tmp_path, load_pyproject(tmp_path))[0] == "python-3.11"

    def test_non_numeric_pin_falls_through(self, tmp_path):
        _pyproject(tmp_path, PEP621_PYPROJECT)
        _write(tmp_path / ".python-version", "pypy3.10\n")
        assert detect_version(tmp_path, load_pyproject(tmp_path))[0] == "python-3.10"

    def test_scalar_tool_value_ignored(self, tmp_path):
        _pyproject(tmp_path, "tool = 1\n")
        data = load_pyproject(tmp_path)
        assert detect_build_tool(tmp_path, data) is None
        assert detect_version(tmp_path, data) is None

    def test_scalar_project_value_ignored(self, tmp_path):
        _pyproject(tmp_path, 'project = "demo"\n')
        assert detect_version(tmp_path, load_pyproject(tmp_path)) is None

    def test_scalar_poetry_value_has_no_dependencies(self, tmp_path):
        _pyproject(tmp_path, '[tool]\npoetry = "yes"\n')
        data = load_pyproject(tmp_path)
        assert detect_build_tool(tmp_path, data) == ("poetry", "pyproject.toml [tool.poetry]")
        assert detect_version(tmp_path, data) is None

    def test_scalar_tables_do_not_abort_detection(self, tmp_path):
        _pyproject(tmp_path, 'project = "demo"\ntool = 1\n')
        _write(tmp_path / "requirements.txt", "flask==3.0\n")
        result = detect_python(tmp_path, tmp_path)
        assert result is not None
        assert result.verdict.framework == "flask"
        assert result.verdict.build_tool == "pip"


# ---------------------------------------------------------------------------
# Sources and entry points
# ---------------------------------------------------------------------------

class TestSources:
    def test_framework_from_code(self, tmp_path):
        _write(tmp_path / "app" / "main.py", "from fastapi import FastAPI\napp = FastAPI()\n")
        framework, path = framework_from_sources(tmp_path)
        assert framework == "fastapi"
        assert path == tmp_path / "app" / "main.py"

    def test_scan_bounded_by_file_count(self, tmp_path):
        _write(tmp_path / "a.py", "x = 1\n")
        _write(tmp_path / "b.py", "import flask\n")
        assert framework_from_sources(tmp_path, max_files=1) is None

    def test_entry_point_tags(self):
        assert framework_from_entry_points(True, True) == "asgi-wsgi-generic"
        assert framework_from_entry_points(True, False) == "asgi-generic"
        assert framework_from_entry_points(False, True) == "wsgi-generic"
        assert framework_from_entry_points(False, False) is None


# ---------------------------------------------------------------------------
# Detector
# ---------------------------------------------------------------------------

class TestDetectPython:
    def test_no_descriptor_returns_none(self, tmp_path):
        _write(tmp_path / "main.py", "print('hi')\n")
        assert detect_python(tmp_path, tmp_path) is None

    def test_requirements_with_flask(self, tmp_path):
        result = detect_python(_requirements(tmp_path, "Flask==3.0.0\ngunicorn\n"), tmp_path)
        verdict = result.verdict
        assert verdict.language == "python"
        assert verdict.framework == "flask"
        assert verdict.build_tool == "pip"
        assert verdict.test_tool == "pytest"
        assert verdict.artifact_type == "wheel"
        assert verdict.score == 75
        assert [c.value for c in result.build_commands] == ["pip install -r requirements.txt"]
        assert [c.value for c in result.test_commands] == ["pytest"]

    def test_poetry_django(self, tmp_path):
        result = detect_python(_pyproject(tmp_path, POETRY_PYPROJECT), tmp_path)
        assert result.verdict.framework == "django"
        assert result.verdict.build_tool == "poetry"
        assert result.verdict.score == 80
        assert [c.value for c in result.build_commands] == ["poetry build"]
        assert [(c.value, c.score) for c in result.runtime_versions] == [("python-3.11", 80)]

    def test_pipfile_overrides_pyproject_tool(self, tmp_path):
        _pyproject(tmp_path, POETRY_PYPROJECT)
        _write(tmp_path / "Pipfile", "[packages]\n")
        result = detect_python(tmp_path, tmp_path)
        assert result.verdict.build_tool == "pipenv"
        assert [c.value for c in result.build_commands] == ["pipenv install --deploy"]

    def test_uv_project(self, tmp_path):
        _pyproject(tmp_path, PEP621_PYPROJECT)
        _write(tmp_path / "uv.lock")
        result = detect_python(tmp_path, tmp_path)
        assert result.verdict.build_tool == "uv"
        assert result.verdict.framework == "none"
        assert result.verdict.score == 65
        assert [c.value for c in result.build_commands] == ["uv build"]

    def test_manage_py_forces_django(self, tmp_path):
        _requirements(tmp_path, "flask\n")
        _write(tmp_path / "manage.py", "import os\n")
        result = detect_python(tmp_path, tmp_path)
        assert result.verdict.framework == "django"
        assert "Python: manage.py present -> Django" in result.notes
        assert [c.value for c in result.test_commands] == ["python manage.py test"]

    def test_framework_from_source_code(self, tmp_path):
        _requirements(tmp_path, "requests\n")
        _write(tmp_path / "svc" / "api.py", "from fastapi import APIRouter\n")
        result = detect_python(tmp_path, tmp_path)
        assert result.verdict.framework == "fastapi"
        assert "Python: code mentions fastapi" in result.notes

    def test_wsgi_entry_point(self, tmp_path):
        _write(tmp_path / "setup.py", "from setuptools import setup\nsetup(name='x')\n")
        _write(tmp_path / "site" / "wsgi.py", "application = None\n")
        result = detect_python(tmp_path, tmp_path)
        assert result.verdict.framework == "wsgi-generic"
        assert [c.value for c in result.build_commands] == ["pip install ."]

    def test_no_framework(self, tmp_path):
        result = detect_python(_requirements(tmp_path, "requests\n"), tmp_path)
        assert result.verdict.framework == "none"
        assert result.verdict.score == 60
        assert "Python: requirements.txt present" in result.notes
