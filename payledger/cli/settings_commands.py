"""Settings CLI commands for payledger.

Manages settings.yaml - registry file, error log, output dir, tax rules.
"""

import click
import yaml

from payledger.sdk import (
    Settings,
    SettingsError,
    get_settings_path,
    load_settings,
    save_settings,
    set_setting,
)


@click.group()
def settings():
    """Manage settings (settings.yaml).

    Available settings:
    - employees_file: registry file loaded at start-up
    - error_log: file errors are appended to
    - output_dir: where <month>_output.txt files are written
    - currency: symbol shown on amounts
    - tax.allowance / tax.rate / tax.months_in_year
    """
    pass


@settings.command("show")
def settings_show():
    """Show the settings file location and effective values."""
    settings_path = get_settings_path()

    click.echo(f"Settings file: {settings_path}")
    click.echo(f"File exists: {settings_path.exists()}")
    click.echo()

    try:
        current = load_settings()
    except SettingsError as e:
        raise click.ClickException(str(e))

    if not settings_path.exists():
        click.echo("No settings configured (using defaults).")
        click.echo()

    click.echo("Effective settings:")
    data = current.model_dump(mode="json")
    click.echo(yaml.dump(data, default_flow_style=False, sort_keys=False, allow_unicode=True).rstrip())


@settings.command("init")
@click.option("--force", is_flag=True, help="Overwrite an existing settings file")
def settings_init(force):
    """Write a settings.yaml with default values."""
    settings_path = get_settings_path()
    if settings_path.exists() and not force:
        raise click.ClickException(
            f"Settings already exist at {settings_path}. Use --force to overwrite."
        )
    path = save_settings(Settings())
    click.echo(f"Wrote default settings to {path}")


@settings.command("set")
@click.argument("key")
@click.argument("value")
def settings_set(key, value):
    """Set a value by dot-notation KEY.

    Examples:
        payledger settings set employees_file ~/payroll/employees.txt
        payledger settings set tax.rate 0.20
    """
    try:
        path = set_setting(key, value)
    except SettingsError as e:
        raise click.ClickException(str(e))
    click.echo(f"Set {key}: {value}")
    click.echo(f"Saved to: {path}")
