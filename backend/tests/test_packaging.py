"""Tests for the project metadata in pyproject.toml."""

import tomllib
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[2]


def _project() -> dict:
    with (PROJECT_ROOT / "pyproject.toml").open("rb") as f:
        return tomllib.load(f)["project"]


def test_readme_points_at_an_existing_file() -> None:
    readme = _project().get("readme")
    if readme is None:
        return
    path = readme if isinstance(readme, str) else readme.get("file")
    assert path is not None
    assert (PROJECT_ROOT / path).is_file()


def test_readme_is_a_project_readme() -> None:
    readme = _project().get("readme")
    if readme is None:
        return
    path = readme if isinstance(readme, str) else readme["file"]
    assert Path(path).name.upper().startswith("README")


def test_worker_script_targets_worker_main() -> None:
    assert _project()["scripts"]["lexicast-worker"] == "lexicast.worker:main"
