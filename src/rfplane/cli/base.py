from typing import Any

import click

from rfplane.system import RadioSystem, list_available_radios
from rfplane.types import CommsError, FrontendError, PropertyTreeError
from rfplane.util import DEFAULT_LOGLEVEL, shutdown_client_log, start_client_log


def print_tree(cmd, prefix="", parent_ctx=None):
    """Print command tree starting from given command."""
    ctx = click.Context(cmd, info_name=cmd.name, parent=parent_ctx)

    # Only print root name if no parent
    if not parent_ctx:
        click.echo(cmd.name)

    for sub in sorted(cmd.list_commands(ctx)):
        sub_cmd = cmd.get_command(ctx, sub)
        click.echo(f"{prefix}└── {sub}")
        if isinstance(sub_cmd, click.Group):
            print_tree(sub_cmd, prefix + "    ", ctx)


def tree_option(f):
    """Add --tree option to command."""

    def callback(ctx, param, value):
        if not value or ctx.resilient_parsing:
            return
        print_tree(ctx.command)
        ctx.exit()

    return click.option(
        "--tree",
        is_flag=True,
        help="Show command tree from this point",
        expose_value=False,
        is_eager=True,
        callback=callback,
    )(f)


def radio_options(f):
    """Add the radio selection and logging options to a command."""
    f = click.option(
        "--log-level",
        "-ll",
        default=DEFAULT_LOGLEVEL,
        help="Logging level (TRACE, DEBUG, INFO, WARNING, ERROR) (default: INFO)",
    )(f)
    f = click.option(
        "--log-to-stdout/--no-log-to-stdout",
        "-lts/",
        default=False,
        help="Enable/disable console logging (default: disabled)",
    )(f)
    f = click.option(
        "--radio",
        "-n",
        "radio_name",
        default="mock",
        help='Name of the radio configuration to use (default: "mock")',
    )(f)
    return f


def parse_value(text: str) -> Any:
    """Interpret a command line value as a number where possible."""
    try:
        return int(text)
    except ValueError:
        pass
    try:
        return float(text)
    except ValueError:
        return text


def _open_radio(radio_name: str, log_to_stdout: bool, log_level: str) -> RadioSystem:
    start_client_log(
        log_to_file=False,
        log_to_stdout=log_to_stdout,
        clear_prev=False,
        log_level=log_level.upper(),
    )
    try:
        return RadioSystem(radio_name)
    except ValueError as e:
        raise click.ClickException(str(e))


def _run(radio: RadioSystem, action, connect: bool = True):
    try:
        if connect:
            radio.connect()
        return action()
    except (FrontendError, CommsError, PropertyTreeError) as e:
        raise click.ClickException(f"{type(e).__name__}: {e}")
    finally:
        radio.packdown()
        shutdown_client_log()


@click.group()
@tree_option
def cli():
    """rfplane - RF front-end control plane.

    Tune and inspect the daughterboard front-ends of a radio through its
    property tree:

    - List front-end parameters without touching hardware

    - Read and write parameters through the remote hardware service

    - Apply power-on defaults to every slot
    """
    pass


@cli.command(name="ls")
@click.argument("path", default="/")
@radio_options
def ls(path: str, radio_name: str, log_to_stdout: bool, log_level: str):
    """List property tree paths below PATH.

    Only the tree layout is shown, no remote call is made.
    """
    radio = _open_radio(radio_name, log_to_stdout, log_level)
    leaves = _run(radio, lambda: radio.tree.walk(path), connect=False)
    if not leaves:
        raise click.ClickException(f"No properties below {path}")
    for leaf in leaves:
        click.echo(leaf)


@cli.command()
@click.argument("path")
@radio_options
def get(path: str, radio_name: str, log_to_stdout: bool, log_level: str):
    """Read the property at PATH.

    Hardware-backed parameters are queried from the remote service.
    """
    radio = _open_radio(radio_name, log_to_stdout, log_level)
    value = _run(radio, lambda: radio.tree.get(path))
    click.echo(f"{path} = {value!r}")


@cli.command(name="set")
@click.argument("path")
@click.argument("value")
@radio_options
def set_(path: str, value: str, radio_name: str, log_to_stdout: bool, log_level: str):
    """Write VALUE to the property at PATH, print the realized value."""
    radio = _open_radio(radio_name, log_to_stdout, log_level)
    realized = _run(radio, lambda: radio.tree.set(path, parse_value(value)))
    click.echo(f"{path} = {realized!r}")


@cli.command()
@radio_options
def init(radio_name: str, log_to_stdout: bool, log_level: str):
    """Apply power-on defaults to every slot of the radio."""
    radio = _open_radio(radio_name, log_to_stdout, log_level)
    _run(radio, radio.init_defaults)
    for slot in radio.slots:
        click.echo(f"Initialized slot {slot}")


@cli.command()
def radios():
    """List available radio configurations."""
    available = list_available_radios()

    click.echo("\nAvailable radio configurations:")
    click.echo("------------------------------")

    if not available:
        click.echo("No radio configurations found")
        click.echo("")
        return

    for name, src in sorted(available.items()):
        click.echo(f"  - {name} ({src})")
    click.echo("")
