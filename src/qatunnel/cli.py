"""Command-line interface for qatunnel."""

import sys
from typing import NoReturn

import click
from pydantic import ValidationError

from . import __version__
from .api import request_tunnel
from .config import DEFAULT_LOCAL_HOST, TunnelSettings
from .exceptions import (
    ClientNotFoundError,
    ConfigError,
    NetworkError,
    ProtocolError,
    TunnelProcessError,
    WorkspaceError,
)
from .keys import save_tunnel_key
from .launcher import TunnelProcess, announce_urls, build_ssh_command
from .locator import find_ssh_client
from .logging import get_logger, setup_logging
from .models import TunnelRequest
from .utils import mask_sensitive_data, print_error, print_info, print_success
from .workspace import prepare_workspace

logger = get_logger(__name__)


def _fail(ctx: click.Context, message: str) -> NoReturn:
    print_error(message)
    ctx.exit(1)


@click.command(
    name="qatunnel",
    epilog="This command allows you to create a tunnel to run automated tests "
    "on your local websites.",
)
@click.argument("token", required=False)
@click.argument("projects", nargs=-1)
@click.option(
    "--host",
    "local_host",
    default=DEFAULT_LOCAL_HOST,
    show_default=True,
    help="Web server host",
)
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging on stderr")
@click.version_option(__version__, prog_name="qatunnel")
@click.pass_context
def main(ctx: click.Context, token: str | None, projects: tuple[str, ...], local_host: str, verbose: bool):
    """Creates a tunnel to QAdept.com.

    PROJECTS are the names of projects for which you need a tunnel
    (separate with a space). By default a tunnel is created for all your
    projects.
    """
    setup_logging(level="DEBUG" if verbose else "WARNING", stream=sys.stderr)

    if not token or not token.strip():
        print_error("Access token is required.")
        click.echo(ctx.get_help())
        ctx.exit(1)

    try:
        settings = TunnelSettings.from_env()
        request = TunnelRequest(token=token, project_names=projects, local_host=local_host)
    except ConfigError as e:
        _fail(ctx, str(e))
    except ValidationError as e:
        _fail(ctx, f"Invalid arguments: {e.errors()[0]['msg']}")

    logger.debug(
        "Arguments resolved",
        token=mask_sensitive_data(request.token),
        projects=list(request.project_names),
        local_host=request.local_host,
    )

    try:
        workspace = prepare_workspace(settings)
        descriptor = request_tunnel(request, settings)
        key_path = save_tunnel_key(descriptor.private_key, workspace, settings.max_key_attempts)
        client = find_ssh_client(workspace, settings, notify=print_info)
    except WorkspaceError as e:
        _fail(ctx, str(e))
    except (NetworkError, ProtocolError, ClientNotFoundError) as e:
        print_error(str(e))
        return

    command = build_ssh_command(client, descriptor, key_path, request.local_host)

    announce_urls(descriptor.public_urls, echo=click.echo, highlight=print_success)

    try:
        with TunnelProcess(command) as tunnel:
            tunnel.run()
    except TunnelProcessError as e:
        logger.info("SSH client failed", returncode=e.returncode)
        if e.stdout or e.stderr:
            click.echo(e.stdout)
            click.echo(e.stderr)
        else:
            print_error(str(e))

    click.echo("Tunnel was closed.")
