from click.testing import CliRunner


def test_version_attribute() -> None:
    import passport_decrypt

    assert isinstance(passport_decrypt.__version__, str)
    assert passport_decrypt.__version__


def test_cli_reports_version() -> None:
    from passport_decrypt import __version__
    from passport_decrypt.cli import cli

    runner = CliRunner()
    result = runner.invoke(cli, ["--version"])

    assert result.exit_code == 0
    assert "Passport Decrypt" in result.output
    assert __version__ in result.output

    command_result = runner.invoke(cli, ["version"])

    assert command_result.exit_code == 0
    assert "Passport Decrypt" in command_result.output
    assert __version__ in command_result.output
