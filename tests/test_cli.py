"""Tests for the command line interface."""

from click.testing import CliRunner

from cortexlab.__main__ import cli


def test_simulate_prices_from_args():
    runner = CliRunner()
    with runner.isolated_filesystem():
        result = runner.invoke(
            cli,
            ["simulate-prices", "100", "102", "101", "103", "105", "104", "106",
             "--days", "10", "--simulations", "200", "--seed", "3"],
        )
    assert result.exit_code == 0, result.output
    assert "p50" in result.output
    assert "Median move at horizon" in result.output


def test_simulate_prices_from_file():
    runner = CliRunner()
    with runner.isolated_filesystem():
        with open("prices.txt", "w") as f:
            f.write("100\n101.5\n\n99.8\n102.2\n")
        result = runner.invoke(
            cli,
            ["simulate-prices", "--file", "prices.txt", "--current-price", "105",
             "--days", "5", "--simulations", "100", "--seed", "1", "--every", "1"],
        )
    assert result.exit_code == 0, result.output
    assert "start=105.0000" in result.output


def test_simulate_prices_without_any_price():
    runner = CliRunner()
    with runner.isolated_filesystem():
        result = runner.invoke(cli, ["simulate-prices", "--days", "5"])
    assert result.exit_code != 0


def test_simulate_prices_rejects_non_numeric_file_line():
    runner = CliRunner()
    with runner.isolated_filesystem():
        with open("prices.txt", "w") as f:
            f.write("100\n101.5\nn/a\n102.2\n")
        result = runner.invoke(cli, ["simulate-prices", "--file", "prices.txt", "--days", "5"])
    assert result.exit_code == 2
    assert not isinstance(result.exception, ValueError)
    assert "line 3" in result.output
