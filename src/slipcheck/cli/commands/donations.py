"""Donation ledger commands."""

import json

import click

from slipcheck.cli.date_filters import period_options, resolve_cli_date_range
from slipcheck.cli.error_handling import handle_domain_error
from slipcheck.domain.donation import DonationService
from slipcheck.domain.errors import DomainError


def _period_flags(this_week: bool, this_month: bool, last_month: bool, this_year: bool) -> dict[str, bool]:
    return {
        "this-week": this_week,
        "this-month": this_month,
        "last-month": last_month,
        "this-year": this_year,
    }


@click.group()
def donations_group():
    """Inspect recorded donations."""
    pass


@donations_group.command("list")
@period_options
@click.option("--limit", type=int, help="Show at most this many donations")
@click.pass_context
def list_donations(
    ctx,
    start_date: str | None,
    end_date: str | None,
    this_week: bool,
    this_month: bool,
    last_month: bool,
    this_year: bool,
    limit: int | None,
):
    """List donations, newest first."""
    db = ctx.obj["db"]
    service = DonationService(db)

    start, end = resolve_cli_date_range(
        ctx,
        start_date=start_date,
        end_date=end_date,
        period_flags=_period_flags(this_week, this_month, last_month, this_year),
    )

    try:
        donations = service.list_donations(start_date=start, end_date=end, limit=limit)
    except DomainError as e:
        handle_domain_error(ctx, e)

    if not donations:
        click.echo("No donations found.")
        return

    click.echo(f"\nFound {len(donations)} donation(s):")
    click.echo("-" * 90)
    for d in donations:
        name = d.display_name or d.sender_name or ""
        click.echo(
            f"{d.created_at:%Y-%m-%d %H:%M} | {d.trans_ref:24s} | {d.amount:>10,.2f} | {name}"
        )


@donations_group.command("show")
@click.argument("trans_ref")
@click.option("--raw", is_flag=True, help="Also print the vendor slip data")
@click.pass_context
def show_donation(ctx, trans_ref: str, raw: bool):
    """Show one donation by transaction reference."""
    db = ctx.obj["db"]
    service = DonationService(db)

    try:
        d = service.get_donation(trans_ref)
    except DomainError as e:
        handle_domain_error(ctx, e)

    click.echo(f"Transaction: {d.trans_ref}")
    click.echo(f"  Amount: {d.amount:,.2f} THB")
    click.echo(f"  Sender: {d.sender_name or '-'}")
    click.echo(f"  Display name: {d.display_name or '-'}")
    if d.message:
        click.echo(f"  Message: {d.message}")
    if d.user_id:
        click.echo(f"  User: {d.user_id}")
    if d.receiver_account:
        click.echo(f"  Receiver: {d.receiver_account}")
    if d.transacted_at:
        click.echo(f"  Transferred at: {d.transacted_at:%Y-%m-%d %H:%M}")
    click.echo(f"  Recorded at: {d.created_at:%Y-%m-%d %H:%M}")
    if raw:
        click.echo(json.dumps(d.raw_payload, indent=2, ensure_ascii=False, default=str))


@donations_group.command("total")
@period_options
@click.pass_context
def total_donations(
    ctx,
    start_date: str | None,
    end_date: str | None,
    this_week: bool,
    this_month: bool,
    last_month: bool,
    this_year: bool,
):
    """Show the number and sum of donations."""
    db = ctx.obj["db"]
    service = DonationService(db)

    start, end = resolve_cli_date_range(
        ctx,
        start_date=start_date,
        end_date=end_date,
        period_flags=_period_flags(this_week, this_month, last_month, this_year),
    )
    count, total = service.total_donations(start_date=start, end_date=end)
    click.echo(f"{count} donation(s), {total:,.2f} THB")


def register_commands(cli):
    """Register donation commands with main CLI."""
    cli.add_command(donations_group, name="donations")
