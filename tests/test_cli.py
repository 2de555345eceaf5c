from pathlib import Path

import pytest
from click.testing import CliRunner
from graphql import build_schema, is_object_type

from graphql_annotations import __version__
from graphql_annotations.cli import cli

QUERY = "domain:Query"
MUTATION = "domain:Mutation"
BOT = "domain:Bot"


@pytest.fixture(scope="module")
def tmp_outputs(tmp_path_factory: pytest.TempPathFactory) -> Path:
    return tmp_path_factory.mktemp("cli_outputs")


def test_version(runner: CliRunner) -> None:
    result = runner.invoke(cli, ["--version"])
    assert result.exit_code == 0, result.output
    assert __version__ in result.output


def test_schema_to_stdout(runner: CliRunner) -> None:
    result = runner.invoke(cli, ["schema", "-q", QUERY])
    assert result.exit_code == 0, result.output
    assert "type Query {" in result.output
    assert "users(before: String, after: String, first: Int, last: Int): UserConnection" in result.output


def test_schema_parses_back(runner: CliRunner, tmp_outputs: Path) -> None:
    out = tmp_outputs / "schema.graphql"
    result = runner.invoke(cli, ["schema", "-q", QUERY, "-m", MUTATION, "-t", BOT, "-o", str(out)])
    assert result.exit_code == 0, result.output
    assert out.exists()

    schema = build_schema(out.read_text())
    assert schema.query_type is not None and schema.query_type.name == "Query"
    assert schema.mutation_type is not None and list(schema.mutation_type.fields) == ["createUser"]
    for name in ["User", "Bot", "UserConnection", "UserEdge", "PageInfo", "CreateUserPayload"]:
        assert is_object_type(schema.type_map[name]), name
    assert list(schema.type_map["CreateUserInput"].fields) == ["name", "role", "clientMutationId"]  # type: ignore[attr-defined]


def test_schema_with_settings(runner: CliRunner, tmp_path: Path) -> None:
    config = tmp_path / "settings.yaml"
    config.write_text("fieldCase: MACROCASE\n")
    out = tmp_path / "schema.graphql"

    result = runner.invoke(cli, ["schema", "-q", QUERY, "-c", str(config), "-o", str(out)])
    assert result.exit_code == 0, result.output
    schema = build_schema(out.read_text())
    assert schema.query_type is not None
    assert list(schema.query_type.fields) == ["USERS", "USER", "NAMED"]
    assert "pageInfo" in schema.type_map["UserConnection"].fields  # type: ignore[attr-defined]


def test_types(runner: CliRunner) -> None:
    result = runner.invoke(cli, ["types", "-q", QUERY, "-t", BOT])
    assert result.exit_code == 0, result.output
    assert "UserConnection" in result.output
    assert "Bot" in result.output


def test_invalid_settings(runner: CliRunner, tmp_path: Path) -> None:
    config = tmp_path / "settings.yaml"
    config.write_text("unknownSetting: true\n")
    result = runner.invoke(cli, ["schema", "-q", QUERY, "-c", str(config)])
    assert result.exit_code == 1


@pytest.mark.parametrize("reference", ["domain", "domain:Missing", "missing_module:Query", "domain:sample_users"])
def test_bad_class_reference(runner: CliRunner, reference: str) -> None:
    result = runner.invoke(cli, ["schema", "-q", reference])
    assert result.exit_code == 2


def test_configuration_error(runner: CliRunner) -> None:
    result = runner.invoke(cli, ["schema", "-q", "domain:Named"])
    assert result.exit_code == 1
