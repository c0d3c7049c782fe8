"""Settings management commands."""

import click

from slipcheck.cli.error_handling import handle_domain_error
from slipcheck.domain.errors import DomainError, InfrastructureError
from slipcheck.domain.settings import KNOWN_SETTINGS, SettingsService


@click.group()
def settings_group():
    """Manage donation settings."""
    pass


@settings_group.command("list")
@click.pass_context
def list_settings(ctx):
    """List settings, including known settings that are not set."""
    db = ctx.obj["db"]
    service = SettingsService(db)

    stored = {s.key: s for s in service.list_settings()}
    keys = sorted(set(KNOWN_SETTINGS) | set(stored))

    click.echo("\nSettings:")
    click.echo("-" * 60)
    for key in keys:
        setting = stored.get(key)
        value = setting.value if setting is not None and setting.value is not None else "(unset)"
        click.echo(f"{key:28s} | {value}")


@settings_group.command("get")
@click.argument("key")
@click.pass_context
def get_setting(ctx, key: str):
    """Show one setting."""
    db = ctx.obj["db"]
    service = SettingsService(db)

    setting = service.get_setting(key)
    if setting is None:
        click.echo(f"Error: Setting '{key}' not found", err=True)
        ctx.exit(1)

    click.echo(f"{setting.key} = {setting.value if setting.value is not None else '(unset)'}")
    if setting.updated_by:
        click.echo(f"  Updated by {setting.updated_by} at {setting.updated_at:%Y-%m-%d %H:%M}")


@settings_group.command("set")
@click.argument("key")
@click.argument("value")
@click.option("--by", "updated_by", help="Who made the change (recorded with the setting)")
@click.pass_context
def set_setting(ctx, key: str, value: str, updated_by: str | None):
    """Set a setting.

    Examples:
        slipcheck settings set receiver_account_id 081-222-3333
        slipcheck settings set minimum_donation_amount 20
        slipcheck settings set donation_enabled false
    """
    db = ctx.obj["db"]
    service = SettingsService(db)

    if key not in KNOWN_SETTINGS:
        click.echo(f"Warning: '{key}' is not a setting slipcheck reads", err=True)

    try:
        service.set_setting(key, value, updated_by=updated_by)
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Set {key} = {value}")


@settings_group.command("policy")
@click.pass_context
def show_policy(ctx):
    """Show the policy slips are checked against."""
    db = ctx.obj["db"]
    service = SettingsService(db)

    try:
        policy = service.get_donation_policy()
    except InfrastructureError as e:
        handle_domain_error(ctx, e)

    click.echo(f"Receiver account: {policy.receiver_account_id or '(any)'}")
    click.echo(f"Minimum amount:   {policy.minimum_amount:,.2f} THB")
    click.echo(f"Donations:        {'enabled' if service.is_donation_enabled() else 'disabled'}")


def register_commands(cli):
    """Register settings commands with main CLI."""
    cli.add_command(settings_group, name="settings")
