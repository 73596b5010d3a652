"""Typer CLI root application."""

import typer

from area_profile.core.config import get_settings
from area_profile.core.logging import setup_logging

app = typer.Typer(name="area-profile", help="Statistical profiles for drawn areas and parcels")


@app.callback()
def _main_callback() -> None:
    """Initialize logging for all CLI commands."""
    settings = get_settings()
    setup_logging(settings.log_level, log_dir=settings.log_dir)


def _register_subcommands() -> None:
    """Register all CLI commands and subcommand groups."""
    from area_profile.cli.db_cmd import db_app
    from area_profile.cli.import_cmd import import_app
    from area_profile.cli.profile_cmd import aggregate, parcel, profile, resolve

    app.command("resolve")(resolve)
    app.command("aggregate")(aggregate)
    app.command("profile")(profile)
    app.command("parcel")(parcel)
    app.add_typer(import_app, name="import", help="Data import commands")
    app.add_typer(db_app, name="db", help="Database migration commands")


_register_subcommands()
