"""CLI error handling helpers.

Every command reports failures the same way: one ``Error:`` line on stderr
and exit status 1.
"""

import logging

import click

from ledgerbook.domain.errors import DomainError

logger = logging.getLogger(__name__)


def echo_error(ctx: click.Context, message: str) -> None:
    """Print an error line and exit with failure."""
    click.echo(f"Error: {message}", err=True)
    ctx.exit(1)


def handle_domain_error(ctx: click.Context, error: DomainError | ValueError) -> None:
    """Render a domain error and exit with failure."""
    logger.debug("%s in %s", type(error).__name__, ctx.command_path)
    echo_error(ctx, str(error))
