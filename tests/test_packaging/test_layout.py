"""Tests that the distribution config picks up every subpackage."""

from pathlib import Path

import pytest

tomllib = pytest.importorskip("tomllib")
setuptools = pytest.importorskip("setuptools")

ROOT = Path(__file__).resolve().parents[2]


@pytest.fixture
def find_config() -> dict:
    with open(ROOT / "pyproject.toml", "rb") as f:
        return tomllib.load(f)["tool"]["setuptools"]["packages"]["find"]


def _source_dirs() -> set[str]:
    """Dotted names of every directory under src/ holding a module."""
    src = ROOT / "src"
    return {
        ".".join(path.parent.relative_to(src).parts)
        for path in src.rglob("*.py")
        if "__pycache__" not in path.parts
    }


class TestPackageDiscovery:
    def test_namespace_discovery_enabled(self, find_config):
        assert find_config.get("namespaces") is True

    def test_every_subpackage_is_shipped(self, find_config):
        found = set(
            setuptools.find_namespace_packages(
                where=str(ROOT / find_config["where"][0]),
                include=find_config["include"],
            )
        )
        expected = _source_dirs()
        assert "p2d_regime.classifier" in expected
        assert expected <= found
