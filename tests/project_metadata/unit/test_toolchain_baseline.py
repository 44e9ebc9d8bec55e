"""Tests for repository toolchain baseline configuration."""

from __future__ import annotations

import tomllib
from pathlib import Path


def _project_root() -> Path:
    return Path(__file__).resolve().parents[3]


def _pyproject() -> dict:
    pyproject_path = _project_root() / "pyproject.toml"
    return tomllib.loads(pyproject_path.read_text(encoding="utf-8"))


def test_project_uses_python_311_baseline_in_pyproject() -> None:
    pyproject = _pyproject()

    assert pyproject["project"]["requires-python"] == ">=3.11"
    assert pyproject["tool"]["ruff"]["target-version"] == "py311"
    assert pyproject["tool"]["mypy"]["python_version"] == "3.11"


def test_project_uses_uv_style_metadata_without_poetry() -> None:
    pyproject = _pyproject()
    dev_dependencies = pyproject["dependency-groups"]["dev"]

    assert "black" not in dev_dependencies
    assert "black" not in pyproject["tool"]
    assert "poetry" not in pyproject["tool"]
    assert pyproject["build-system"]["build-backend"] != "poetry.core.masonry.api"


def test_console_script_points_at_cli_main() -> None:
    pyproject = _pyproject()

    assert pyproject["project"]["scripts"]["dynamic-grpc-invoker"] == "dynamic_grpc_invoker.cli:main"


def test_message_codec_does_not_depend_on_invocation_layer() -> None:
    package_dir = _project_root() / "src" / "dynamic_grpc_invoker"
    forbidden_import_fragments = ("dynamic_grpc_invoker.invocation", "import grpc")

    for module_path in sorted((package_dir / "generic_messages").glob("*.py")):
        text = module_path.read_text(encoding="utf-8")
        for fragment in forbidden_import_fragments:
            assert fragment not in text, f"Forbidden codec dependency in {module_path}: {fragment}"


def test_protobuf_floor_provides_field_repeated_attribute() -> None:
    pyproject = _pyproject()

    assert "protobuf>=6.31" in pyproject["project"]["dependencies"]


def test_source_does_not_read_removed_field_label_attribute() -> None:
    package_dir = _project_root() / "src" / "dynamic_grpc_invoker"

    for module_path in sorted(package_dir.rglob("*.py")):
        text = module_path.read_text(encoding="utf-8")
        assert ".label" not in text, f"Removed FieldDescriptor.label used in {module_path}"
