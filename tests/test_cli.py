"""Tests for the command line entry point that need no database."""

import logging

import pytest

from ror_importer import __main__ as cli
from ror_importer import config
from ror_importer.config import CliArgs

from tests.helpers import ENV_VARS


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setattr(config, "load_dotenv", lambda *args, **kwargs: False)


@pytest.fixture(autouse=True)
def restore_logging():
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    for handler in root.handlers:
        if handler not in handlers:
            handler.close()
    root.handlers[:] = handlers
    root.setLevel(level)


def _exit_code(argv):
    with pytest.raises(SystemExit) as excinfo:
        cli.main(argv)
    return excinfo.value.code


def test_parse_cli_defaults():
    assert cli.parse_cli([]) == CliArgs()


def test_parse_cli_flags():
    args = cli.parse_cli(
        [
            "-f", "/data/ror",
            "-s", "v1.58 2024-12-11.json",
            "-v", "v1.58",
            "-d", "2024-12-11",
            "-r", "-c", "-x", "-k", "-t",
            "--batch-size", "500",
            "--max-records", "20",
        ]
    )

    assert args == CliArgs(
        data_folder="/data/ror",
        source_file="v1.58 2024-12-11.json",
        data_version="v1.58",
        data_date="2024-12-11",
        batch_size=500,
        max_records=20,
        import_ror=True,
        create_tables=True,
        summarise=True,
        keep_tables=True,
        test_run=True,
    )


def test_long_options():
    args = cli.parse_cli(["--import", "--create-tables", "--summary", "--keep-tables"])

    assert args.import_ror and args.create_tables and args.summarise and args.keep_tables


def test_missing_data_folder_exits_with_config_code(tmp_path):
    code = _exit_code(["-f", str(tmp_path / "absent"), "-s", "v1.58 2024-12-11.json"])

    assert code == cli.EXIT_CONFIG


def test_missing_source_file_exits_with_source_code(tmp_path):
    code = _exit_code(["-f", str(tmp_path), "-s", "v1.58 2024-12-11.json"])

    assert code == cli.EXIT_SOURCE


def test_undecodable_source_exits_with_decode_code(tmp_path, write_source):
    write_source('[{"id": "https://ror.org/0rec00000"}, {"id": 7}]')

    code = _exit_code(["-f", str(tmp_path), "-s", "v1.58 2024-12-11.json"])

    assert code == cli.EXIT_DECODE


def test_run_log_file_is_written(tmp_path, write_source):
    write_source("not json")

    _exit_code(["-f", str(tmp_path), "-s", "v1.58 2024-12-11.json"])

    (log_file,) = tmp_path.glob("ror *.log")
    assert log_file.name.endswith("from v1.58 2024-12-11.log")
    assert "PROGRAM START" in log_file.read_text(encoding="utf-8")


@pytest.mark.parametrize("option", [["--batch-size", "0"], ["--max-records", "-2"]])
def test_invalid_run_limits_exit_with_config_code(option, tmp_path, write_source):
    write_source("[]")

    code = _exit_code(["-f", str(tmp_path), "-s", "v1.58 2024-12-11.json", *option])

    assert code == cli.EXIT_CONFIG
