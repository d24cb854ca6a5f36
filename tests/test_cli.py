"""Tests for the command line interface."""

from click.testing import CliRunner

from flou.__main__ import EXAMPLE, cli
from flou.pipeline import compile_source


def test_example_is_valid() -> None:
    """Test the printed example compiles."""
    result = CliRunner().invoke(cli, ["example"])

    assert result.exit_code == 0
    assert result.output == EXAMPLE
    assert len(compile_source(result.output).connections) == 4


def test_render_from_stdin() -> None:
    result = CliRunner().invoke(cli, ["render", "-"], input="grid { a(text: \"Hi\"); }")

    assert result.exit_code == 0
    assert "<svg" in result.output
    assert "Hi</text>" in result.output


def test_render_to_file() -> None:
    """Test rendering with custom sizes into a file."""
    runner = CliRunner()
    with runner.isolated_filesystem():
        with open("diagram.flou", "w") as f:
            f.write("grid { a, b; }")

        result = runner.invoke(
            cli, ["render", "diagram.flou", "out.svg", "--node", "100", "40", "--gap", "10", "10"]
        )
        assert result.exit_code == 0

        with open("out.svg") as f:
            assert 'width="230" height="60"' in f.read()


def test_render_reports_errors() -> None:
    """Test logic errors are printed in full and exit with status 1."""
    source = "grid { a(connect: {n:n@n; e:w#nowhere}); }"
    result = CliRunner().invoke(cli, ["render", "-"], input=source)

    assert result.exit_code == 1
    assert "Could not resolve destination" in result.output
    assert "No destination found in direction: North" in result.output
    assert 'No destination with label: "nowhere"' in result.output


def test_render_reports_syntax_errors() -> None:
    result = CliRunner().invoke(cli, ["render", "-"], input="grid { a }")

    assert result.exit_code == 1
    assert "line 1" in result.output


def test_bad_size_option() -> None:
    result = CliRunner().invoke(cli, ["render", "-", "--node", "wide", "40"], input="grid { a; }")
    assert result.exit_code == 2


def test_info() -> None:
    """Test diagram summary."""
    source = """
    grid {
        a(shape: circle, connect: e:w@e), a, b;
    }
    """
    result = CliRunner().invoke(cli, ["info", "-"], input=source)

    assert result.exit_code == 0
    assert "Grid: 3×1" in result.output
    assert "Nodes: 3" in result.output
    assert "Identifiers: 2" in result.output
    assert "Connections: 1" in result.output
    assert "circle: 1" in result.output
    assert "rect: 2" in result.output


def test_verbose_logs_stages() -> None:
    result = CliRunner().invoke(cli, ["-v", "info", "-"], input="grid { a; }")

    assert result.exit_code == 0
    assert "resolved 0 connections" in result.output
