"""PromptPay payload command."""

import click

from slipcheck.cli.error_handling import handle_domain_error
from slipcheck.domain.errors import InfrastructureError
from slipcheck.domain.settings import SettingsService
from slipcheck.utils.amount_parser import parse_amount
from slipcheck.utils.promptpay import generate_payload


@click.command("promptpay")
@click.option("--target", help="PromptPay phone number or ID (defaults to receiver_account_id)")
@click.option("--amount", help="Fix the amount in the QR code")
@click.pass_context
def promptpay(ctx, target: str | None, amount: str | None):
    """Print the PromptPay QR payload for donations."""
    if target is None:
        try:
            policy = SettingsService(ctx.obj["db"]).get_donation_policy()
        except InfrastructureError as e:
            handle_domain_error(ctx, e)
        target = policy.receiver_account_id
    if not target:
        click.echo("Error: No target given and receiver_account_id is not set", err=True)
        ctx.exit(1)

    try:
        value = parse_amount(amount) if amount else None
        payload = generate_payload(target, value)
    except ValueError as e:
        handle_domain_error(ctx, e)
    click.echo(payload)


def register_commands(cli):
    """Register promptpay command with main CLI."""
    cli.add_command(promptpay)
