"""Verify a slip image from the command line."""

import mimetypes
from pathlib import Path

import click

from slipcheck.cli.error_handling import handle_domain_error
from slipcheck.domain.entities import SlipSubmission
from slipcheck.domain.errors import InfrastructureError, SlipRejectedError, ValidationError
from slipcheck.domain.verification import SlipVerificationService
from slipcheck.gateway.slip2go import Slip2GoClient
from slipcheck.utils.amount_parser import parse_amount


@click.command("verify")
@click.argument("slip_file", type=click.Path(exists=True, dir_okay=False))
@click.option("--amount", default="0", help="Amount the donor claims to have sent")
@click.option("--display-name", help="Name to show for the donation")
@click.option("--message", help="Message left by the donor")
@click.pass_context
def verify_slip(ctx, slip_file: str, amount: str, display_name: str | None, message: str | None):
    """Verify SLIP_FILE with Slip2Go and record the donation if it passes.

    Examples:
        slipcheck verify slip.jpg --amount 50
        slipcheck verify slip.png --display-name "Khun A" --message "Keep it up"
    """
    db = ctx.obj["db"]
    config = ctx.obj["config"]

    try:
        claimed = parse_amount(amount)
    except ValueError as e:
        handle_domain_error(ctx, e)

    gateway = Slip2GoClient(
        api_key=config.slip2go_api_key,
        api_url=config.slip2go_api_url,
        receiver_names=config.receiver_names,
    )
    service = SlipVerificationService(db, gateway)

    path = Path(slip_file)
    submission = SlipSubmission(
        image_bytes=path.read_bytes(),
        mime_type=mimetypes.guess_type(path.name)[0] or "image/jpeg",
        claimed_amount=claimed,
        display_name=display_name,
        message=message,
    )

    try:
        outcome = service.verify(submission)
    except SlipRejectedError as e:
        code = f", vendor code {e.code}" if e.code else ""
        click.echo(f"Rejected ({e.error}{code}): {e.message}", err=True)
        ctx.exit(1)
    except (ValidationError, InfrastructureError) as e:
        handle_domain_error(ctx, e)

    d = outcome.donation
    click.echo(f"Accepted: {d.amount:,.2f} THB from {d.display_name} (transaction {d.trans_ref})")


def register_commands(cli):
    """Register verify command with main CLI."""
    cli.add_command(verify_slip)
