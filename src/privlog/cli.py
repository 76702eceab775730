#!/usr/bin/env python3
"""
privlog CLI - inspect persisted private transaction logs.

Reads the snapshot a journal flushed on shutdown. The CLI never writes the
log file, so it is safe to run next to a live node.
"""

import json
import sys
from typing import List, Optional

import click

from privlog.core.models import TransactionLog, parse_hash, to_hex
from privlog.core.serializer import FileLogsSerializer
from privlog.utility.config import load_config
from privlog.utility.exceptions import ConfigError, JournalReadError


def _resolve_logs_dir(logs_dir: Optional[str], config_path: Optional[str]) -> str:
    """Pick the logs directory from the option or the config file."""
    if logs_dir:
        return logs_dir

    if config_path:
        try:
            config = load_config(config_path)
        except ConfigError as e:
            click.echo(f"Configuration error: {e}")
            sys.exit(1)
        if config.logs_dir:
            return config.logs_dir

    click.echo("Error: no logs directory given (use --logs-dir or --config)")
    sys.exit(1)


def _read_logs(logs_dir: str) -> List[TransactionLog]:
    try:
        return FileLogsSerializer(logs_dir).read_logs()
    except JournalReadError as e:
        click.echo(f"Error: {e}")
        sys.exit(1)


logs_dir_option = click.option(
    "--logs-dir",
    "-d",
    default=None,
    help="Directory containing private_tx.log",
)
config_option = click.option(
    "--config",
    "-c",
    "config_path",
    default=None,
    type=click.Path(),
    help="YAML config file to read logs_dir from",
)


@click.group()
@click.version_option(package_name="privlog")
def privlog():
    """
    privlog - private transaction journal

    Inspect the lifecycle logs a node persisted for its private transactions.
    """
    pass


@privlog.command()
@click.argument("tx_hash", required=False)
@logs_dir_option
@config_option
def show(tx_hash: Optional[str], logs_dir: Optional[str], config_path: Optional[str]):
    """Print stored logs as JSON.

    TX_HASH: Only print the log for this transaction hash
    """
    logs = _read_logs(_resolve_logs_dir(logs_dir, config_path))

    if tx_hash is None:
        click.echo(json.dumps([log.model_dump(mode="json") for log in logs], indent=2))
        return

    try:
        wanted = parse_hash(tx_hash)
    except ValueError:
        click.echo(f"Error: invalid transaction hash: {tx_hash}")
        sys.exit(1)

    # Later entries win, matching how the journal loads duplicates
    match = None
    for log in logs:
        if log.tx_hash == wanted:
            match = log
    if match is None:
        click.echo(f"Private transaction {to_hex(wanted)} not found")
        sys.exit(1)

    click.echo(json.dumps(match.model_dump(mode="json"), indent=2))


@privlog.command()
@logs_dir_option
@config_option
def status(logs_dir: Optional[str], config_path: Optional[str]):
    """Print one status line per stored private transaction."""
    logs = _read_logs(_resolve_logs_dir(logs_dir, config_path))

    for log in sorted(logs, key=lambda log: log.creation_timestamp):
        validated = sum(1 for validator in log.validators if validator.validated)
        click.echo(
            f"{to_hex(log.tx_hash)}  {log.status.value:<10}  "
            f"{validated}/{len(log.validators)}"
        )
    click.echo(f"{len(logs)} private transactions")


if __name__ == "__main__":
    privlog()
