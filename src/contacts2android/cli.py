"""CLI for contacts2android."""

import json
import logging
from typing import IO, Any

import click

from contacts2android import __version__
from contacts2android.accessor import ContactAccessor
from contacts2android.android.adb import AdbAccountManager, AdbClient, AdbContentResolver
from contacts2android.config import Settings, get_settings
from contacts2android.exceptions import ContactsBridgeError
from contacts2android.models import FindOptions


def _echo_json(data: Any) -> None:
    click.echo(json.dumps(data, indent=2, ensure_ascii=False))


def _get_settings(ctx: click.Context) -> Settings:
    settings: Settings | None = ctx.obj.get("settings")
    if settings is None:
        click.echo(f"Error loading settings: {ctx.obj.get('settings_error')}", err=True)
        ctx.exit(1)
    return settings


def _get_accessor(ctx: click.Context) -> ContactAccessor:
    settings = _get_settings(ctx)
    client = AdbClient.from_settings(settings)
    return ContactAccessor(AdbContentResolver(client), AdbAccountManager(client), settings)


@click.group()
@click.version_option(version=__version__)
@click.pass_context
def main(ctx: click.Context) -> None:
    """Read and write Android contacts as W3C contact JSON over adb."""
    ctx.ensure_object(dict)

    # Load settings
    try:
        settings = get_settings()
        ctx.obj["settings"] = settings
    except Exception as e:
        ctx.obj["settings_error"] = str(e)
        return

    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s - %(levelname)s - %(message)s",
    )


@main.command()
@click.argument("fields", nargs=-1)
@click.option("--filter", "filter_text", default="", help="Substring to match (empty matches everything)")
@click.option("--single", is_flag=True, help="Return at most one contact")
@click.option("--desired-field", "desired_fields", multiple=True, help="Field to populate (repeatable)")
@click.option("--account-type", default=None, help="Only search this account type")
@click.option("--account-name", default=None, help="Only search this account name")
@click.pass_context
def search(
    ctx: click.Context,
    fields: tuple[str, ...],
    filter_text: str,
    single: bool,
    desired_fields: tuple[str, ...],
    account_type: str | None,
    account_name: str | None,
) -> None:
    """Search contacts on the device.

    FIELDS are the contact fields to match; defaults to every searchable field.
    """
    accessor = _get_accessor(ctx)
    options = FindOptions(
        filter=filter_text,
        multiple=not single,
        desired_fields=list(desired_fields) or None,
        account_type=account_type,
        account_name=account_name,
    )

    try:
        contacts = accessor.search(list(fields) or ["*"], options)
    except ContactsBridgeError as e:
        click.echo(f"Error: {e}", err=True)
        ctx.exit(1)

    _echo_json(contacts)


@main.command()
@click.argument("raw_id")
@click.option("--desired-field", "desired_fields", multiple=True, help="Field to populate (repeatable)")
@click.pass_context
def get(ctx: click.Context, raw_id: str, desired_fields: tuple[str, ...]) -> None:
    """Show one raw contact by id."""
    accessor = _get_accessor(ctx)

    try:
        contact = accessor.get_contact_by_id(raw_id, list(desired_fields) or None)
    except ContactsBridgeError as e:
        click.echo(f"Error: {e}", err=True)
        ctx.exit(1)

    if contact is None:
        click.echo(f"Contact {raw_id} not found", err=True)
        ctx.exit(1)
    _echo_json(contact)


@main.command()
@click.argument("contact_file", type=click.File("r"))
@click.option("--account-type", default=None, help="Account type to save under")
@click.option("--account-name", default=None, help="Account name to save under")
@click.option("--sync-adapter", is_flag=True, help="Write as a sync adapter")
@click.option("--reset-fields", is_flag=True, help="Replace every array field instead of merging")
@click.pass_context
def save(
    ctx: click.Context,
    contact_file: IO[str],
    account_type: str | None,
    account_name: str | None,
    sync_adapter: bool,
    reset_fields: bool,
) -> None:
    """Create or update a contact from a JSON file ('-' for stdin).

    A contact with a rawId updates that raw contact; without one a new
    contact is created.
    """
    try:
        contact = json.load(contact_file)
    except json.JSONDecodeError as e:
        click.echo(f"Error: invalid contact JSON: {e}", err=True)
        ctx.exit(1)

    if not isinstance(contact, dict):
        click.echo("Error: contact JSON must be an object", err=True)
        ctx.exit(1)

    accessor = _get_accessor(ctx)
    contact_id = accessor.save(
        contact,
        account_type=account_type,
        account_name=account_name,
        caller_is_sync_adapter=sync_adapter,
        reset_fields=reset_fields,
    )

    if contact_id is None:
        click.echo("Error: contact could not be saved", err=True)
        ctx.exit(1)
    click.echo(contact_id)


@main.command()
@click.argument("raw_id")
@click.option("--sync-adapter", is_flag=True, help="Delete as a sync adapter")
@click.pass_context
def remove(ctx: click.Context, raw_id: str, sync_adapter: bool) -> None:
    """Delete a raw contact by id."""
    accessor = _get_accessor(ctx)

    if not accessor.remove(raw_id, caller_is_sync_adapter=sync_adapter):
        click.echo(f"Contact {raw_id} was not removed", err=True)
        ctx.exit(1)
    click.echo(f"Removed contact {raw_id}")


@main.command()
@click.pass_context
def accounts(ctx: click.Context) -> None:
    """List the accounts registered on the device."""
    accessor = _get_accessor(ctx)

    try:
        device_accounts = accessor.account_manager.get_accounts()
    except ContactsBridgeError as e:
        click.echo(f"Error: {e}", err=True)
        ctx.exit(1)

    _echo_json([account.model_dump() for account in device_accounts])


if __name__ == "__main__":
    main()
