"""Organization management commands."""

import click
from ledgerbook.domain.organization import OrganizationService


@click.group()
def organization_group():
    """Manage organizations."""
    pass


@organization_group.command("create")
@click.argument("name", metavar="ORGANIZATION_NAME")
@click.pass_context
def create_organization(ctx, name: str):
    """Create a new organization.

    Examples:
        ledgerbook org create "Household"
    """
    service = OrganizationService(ctx.obj["db"])

    try:
        organization_id = service.create_organization(name)
        click.echo(f"Created organization '{name}' (ID: {organization_id})")
    except ValueError as e:
        click.echo(f"Error: {e}", err=True)
        ctx.exit(1)


@organization_group.command("list")
@click.pass_context
def list_organizations(ctx):
    """List all organizations."""
    service = OrganizationService(ctx.obj["db"])

    organizations = service.list_organizations()
    if not organizations:
        click.echo("No organizations found.")
        return

    click.echo("\nOrganizations:")
    click.echo("-" * 40)
    for org in organizations:
        click.echo(f"ID: {org.id:3d} | {org.name}")


def register_commands(cli):
    """Register organization commands with main CLI."""
    cli.add_command(organization_group, name="org")
