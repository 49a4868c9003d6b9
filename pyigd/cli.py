from __future__ import annotations

import sys
from typing import List

import click

from pyigd.log import Log
from pyigd.models import IGD, Protocol
from pyigd.network.ssdp import discover
from pyigd.settings import Settings
from pyigd.static import WAIT_TIME
from pyigd.exceptions import UPnPError

PROTOCOL = click.Choice([protocol.value for protocol in Protocol], case_sensitive=False)

@click.group()
@click.option("--timeout", type=float, default=WAIT_TIME, show_default=True,
              help="Seconds to listen for IGDs per search")
@click.option("--intranet", default=None, help="Local address to map ports to")
@click.option("--debug", is_flag=True, help="Trace discovery and SOAP requests")
@click.pass_context
def cli(ctx: click.Context, timeout: float, intranet: str, debug: bool):
    """Discover UPnP internet gateways and manage their port mappings."""

    log = Log(debug=debug)
    if debug:
        log.enable(sys.stderr)
    try:
        ctx.obj = Settings(timeout=timeout, debug=debug, log=log, intranet=intranet)
    except ValueError as e:
        raise click.BadParameter(str(e)) from e


def _discover(settings: Settings) -> List[IGD]:
    devices = discover(settings=settings)
    if not devices:
        click.echo("No UPnP IGD found", err=True)
        sys.exit(1)
    return devices


@cli.command("discover")
@click.pass_obj
def discover_command(settings: Settings):
    """List the IGDs on the local network and their services."""

    for device in _discover(settings):
        click.echo(f"{device.friendly_identifier} [{device.uuid}] via {device.local_ip_address}")
        for service in device.services:
            click.echo(f"  * [{service.id}] {service.urn} {service.url}")


@cli.command("add")
@click.argument("protocol", type=PROTOCOL)
@click.argument("external_port", type=click.IntRange(1, 65535))
@click.argument("internal_port", type=click.IntRange(1, 65535))
@click.option("--description", default="pyigd", show_default=True)
@click.option("--lease", type=click.IntRange(min=0), default=0, show_default=True,
              help="Lease duration in seconds, 0 for unlimited")
@click.pass_obj
def add_command(settings: Settings, protocol: str, external_port: int, internal_port: int, description: str, lease: int):
    """Forward EXTERNAL_PORT on every IGD to INTERNAL_PORT on this machine."""

    failed = False
    for device in _discover(settings):
        try:
            device.add_port_mapping(protocol, external_port, internal_port, description, lease)
        except UPnPError as e:
            click.echo(f"{device.friendly_identifier}: {e}", err=True)
            failed = True
        else:
            click.echo(f"{device.friendly_identifier}: {protocol.upper()} {external_port} -> {device.local_ip_address}:{internal_port}")
    if failed:
        sys.exit(1)


@cli.command("delete")
@click.argument("protocol", type=PROTOCOL)
@click.argument("external_port", type=click.IntRange(1, 65535))
@click.pass_obj
def delete_command(settings: Settings, protocol: str, external_port: int):
    """Remove the mapping of EXTERNAL_PORT from every IGD."""

    failed = False
    for device in _discover(settings):
        try:
            device.delete_port_mapping(protocol, external_port)
        except UPnPError as e:
            click.echo(f"{device.friendly_identifier}: {e}", err=True)
            failed = True
        else:
            click.echo(f"{device.friendly_identifier}: removed {protocol.upper()} {external_port}")
    if failed:
        sys.exit(1)


@cli.command("external-ip")
@click.pass_obj
def external_ip_command(settings: Settings):
    """Print the external address of every IGD."""

    failed = False
    for device in _discover(settings):
        try:
            ip = device.get_external_ip_address()
        except UPnPError as e:
            click.echo(f"{device.friendly_identifier}: {e}", err=True)
            failed = True
            continue
        click.echo(f"{device.friendly_identifier}: {ip if ip is not None else 'unknown'}")
    if failed:
        sys.exit(1)


def main():
    cli()


if __name__ == "__main__":
    main()
