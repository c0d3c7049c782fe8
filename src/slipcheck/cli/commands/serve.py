"""Run the HTTP server."""

import click

from slipcheck.web.app import create_app


@click.command("serve")
@click.option("--host", default="127.0.0.1", show_default=True, help="Interface to bind")
@click.option("--port", default=8000, show_default=True, type=int, help="Port to listen on")
@click.option("--debug", is_flag=True, help="Run Flask in debug mode")
@click.pass_context
def serve(ctx, host: str, port: int, debug: bool):
    """Serve POST /verify-slip and GET /donation-settings."""
    config = ctx.obj["config"]
    if not config.slip2go_api_key:
        click.echo("Warning: SLIP2GO_API_KEY is not set; every verification will fail", err=True)

    db = ctx.obj["db"]
    app = create_app(config=config, database_factory=db.fork)
    click.echo(f"Serving on http://{host}:{port}")
    app.run(host=host, port=port, debug=debug)


def register_commands(cli):
    """Register serve command with main CLI."""
    cli.add_command(serve)
