"""Tests for logging configuration."""

import logging
from datetime import date

from ledgerbook.cli.main import cli
from ledgerbook.logging_config import LOG_LEVEL_ENV_VAR, configure_logging


def test_configure_logging_defaults_to_warning(monkeypatch):
    monkeypatch.delenv(LOG_LEVEL_ENV_VAR, raising=False)
    logger = configure_logging()
    assert logger.level == logging.WARNING
    assert len(logger.handlers) == 1


def test_configure_logging_reads_environment(monkeypatch):
    monkeypatch.setenv(LOG_LEVEL_ENV_VAR, "debug")
    assert configure_logging().level == logging.DEBUG


def test_repeated_configuration_keeps_one_handler():
    configure_logging("INFO")
    logger = configure_logging("INFO")
    assert len(logger.handlers) == 1


def test_verbose_flag_logs_postings(cli_runner, temp_db, cash_account, vendor_account):
    """Test that -v shows engine activity on stderr."""
    transfer_id = temp_db.create_transfer(
        debit_account_id=vendor_account.id,
        credit_account_id=cash_account.id,
        amount=1000,
        pending_on=date(2026, 3, 1),
    )

    result = cli_runner.invoke(
        cli, ["--db-path", temp_db.database_path, "-v", "transfer", "post", str(transfer_id)]
    )

    assert result.exit_code == 0
    assert f"Posted transfer {transfer_id} for 1000" in result.output
