"""Client-side donation and usage gate commands."""

import click

from slipcheck.client.adapter import DonationClient
from slipcheck.client.usage_gate import UsageGate
from slipcheck.utils.amount_parser import parse_amount


@click.command("donate")
@click.argument("slip_file", type=click.Path(exists=True, dir_okay=False))
@click.option(
    "--server",
    default="http://127.0.0.1:8000",
    show_default=True,
    envvar="SLIPCHECK_SERVER_URL",
    help="slipcheck server URL",
)
@click.option("--amount", help="Amount transferred")
@click.option("--display-name", help="Name to show for the donation")
@click.option("--message", help="Message for the admin")
@click.option("--token", envvar="SLIPCHECK_TOKEN", help="Bearer token of the signed-in user")
@click.option("--gate-path", type=click.Path(dir_okay=False), help="Usage gate state file")
@click.pass_context
def donate(
    ctx,
    slip_file: str,
    server: str,
    amount: str | None,
    display_name: str | None,
    message: str | None,
    token: str | None,
    gate_path: str | None,
):
    """Upload SLIP_FILE to a slipcheck server and unlock the usage gate if accepted."""
    claimed = None
    if amount:
        try:
            claimed = parse_amount(amount)
        except ValueError as e:
            click.echo(f"Error: {e}", err=True)
            ctx.exit(1)

    client = DonationClient(server, token=token, gate=UsageGate(gate_path))
    result = client.submit(slip_file, amount=claimed, display_name=display_name, message=message)

    if not result.accepted:
        click.echo(f"Not accepted: {result.reason}", err=True)
        ctx.exit(1)
    click.echo("Thank you for the support! Unlocked.")


@click.group("gate")
def gate_group():
    """Inspect or reset the local usage gate."""
    pass


@gate_group.command("status")
@click.option("--gate-path", type=click.Path(dir_okay=False), help="Usage gate state file")
def gate_status(gate_path: str | None):
    """Show the click counter and lock state."""
    gate = UsageGate(gate_path)
    state = "locked" if gate.is_locked else "unlocked"
    click.echo(f"{state} ({gate.click_count}/{gate.limit} uses)")


@gate_group.command("use")
@click.option("--gate-path", type=click.Path(dir_okay=False), help="Usage gate state file")
@click.pass_context
def gate_use(ctx, gate_path: str | None):
    """Count one use; exits 1 once the gate is locked."""
    gate = UsageGate(gate_path)
    if not gate.record_use():
        click.echo("Locked: donate to unlock more decisions.", err=True)
        ctx.exit(1)
    click.echo(f"OK ({gate.click_count}/{gate.limit} uses)")


@gate_group.command("reset")
@click.option("--gate-path", type=click.Path(dir_okay=False), help="Usage gate state file")
def gate_reset(gate_path: str | None):
    """Clear the counter and lock."""
    UsageGate(gate_path).unlock()
    click.echo("Usage gate reset.")


def register_commands(cli):
    """Register donate and gate commands with main CLI."""
    cli.add_command(donate)
    cli.add_command(gate_group, name="gate")
