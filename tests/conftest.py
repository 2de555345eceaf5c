import pytest
from click.testing import CliRunner

from graphql_annotations.builder import TypeGraphBuilder
from graphql_annotations.registry import Registry, default_registry


@pytest.fixture
def builder() -> TypeGraphBuilder:
    return TypeGraphBuilder()


@pytest.fixture
def registry() -> Registry:
    """A private copy of the default registry that tests may extend."""
    return default_registry.copy()


@pytest.fixture(scope="module")
def runner() -> CliRunner:
    return CliRunner()
