"""Command-line interface for the SharePoint inventory."""

import logging
import sys
import click
from dataclasses import asdict
from typing import Any, Dict, Optional

from .core.client import Office365Client
from .core.inventory import SiteInventory
from .core.models import RunConfiguration
from .config.config_manager import ConfigManager

SECRET_FIELDS = ('client_secret', 'password')


def setup_logging(level: str, log_file: Optional[str] = None):
    """Set up logging configuration."""
    # Convert string level to logging constant
    numeric_level = getattr(logging, level.upper(), None)
    if not isinstance(numeric_level, int):
        raise ValueError(f'Invalid log level: {level}')

    formatter = logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )

    root_logger = logging.getLogger()
    root_logger.setLevel(numeric_level)

    # Clear existing handlers
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    if log_file:
        try:
            file_handler = logging.FileHandler(log_file)
            file_handler.setFormatter(formatter)
            root_logger.addHandler(file_handler)
        except OSError as e:
            click.echo(f"Warning: Could not set up file logging: {e}", err=True)


def _load_config(ctx) -> ConfigManager:
    """Load the config file and apply its logging section."""
    config_manager = ConfigManager(ctx.obj.get('config_path'))
    config_manager.load_config()

    logging_config = config_manager.get_logging_config()
    setup_logging(ctx.obj.get('log_level') or logging_config.get('level') or 'WARNING',
                  ctx.obj.get('log_file') or logging_config.get('file'))
    return config_manager


def _client_for(config: RunConfiguration) -> Office365Client:
    return Office365Client(
        client_id=config.client_id,
        client_secret=config.client_secret,
        username=config.username,
        password=config.password,
    )


@click.group()
@click.option('--config', '-c', 'config_path',
              help='Path to configuration file')
@click.option('--log-level', default=None,
              type=click.Choice(['DEBUG', 'INFO', 'WARNING', 'ERROR'], case_sensitive=False),
              help='Diagnostic logging level')
@click.option('--log-file',
              help='Diagnostic log file path')
@click.pass_context
def cli(ctx, config_path: Optional[str], log_level: Optional[str], log_file: Optional[str]):
    """SharePoint Inventory - list the files stored across a SharePoint Online tenant."""
    ctx.ensure_object(dict)
    ctx.obj['config_path'] = config_path
    ctx.obj['log_level'] = log_level
    ctx.obj['log_file'] = log_file


@cli.command()
@click.option('--tenant', '-t', 'tenant_name',
              help='Tenant name, e.g. contoso for contoso.sharepoint.com')
@click.option('--client-id', help='Azure AD application id')
@click.option('--client-secret', envvar='SP_INVENTORY_CLIENT_SECRET',
              help='Azure AD application secret')
@click.option('--username', help='User principal name for user authentication')
@click.option('--password', envvar='SP_INVENTORY_PASSWORD',
              help='Password for user authentication')
@click.option('--console/--no-console', 'console_output', default=None,
              help='Print the site and file tables')
@click.option('--persist/--no-persist', 'persist_to_disk', default=None,
              help='Save sites and files to CSV')
@click.option('--include-personal/--no-include-personal', 'include_personal_sites', default=None,
              help='Include OneDrive personal sites')
@click.option('--register-consent/--no-register-consent', default=None,
              help='Request tenant admin consent for the management app first')
@click.option('--filter', 'site_filter',
              help="Server-side site filter, e.g. \"Url -like 'sites/projects'\"")
@click.option('--log-dir', 'log_directory',
              help='Directory for the execution log and CSV exports')
@click.option('--execution-log', help='Execution log file name')
@click.option('--failures-file', help='Failures CSV file name')
@click.option('--files-file', help='Files found CSV file name')
@click.option('--sites-file', help='Sites CSV file name')
@click.pass_context
def scan(ctx, **overrides: Any):
    """Inventory the files in every matching site's document library."""
    try:
        config_manager = _load_config(ctx)
        config = config_manager.build_run_configuration(overrides)
    except (FileNotFoundError, ValueError) as e:
        click.echo(f"❌ Configuration error: {e}", err=True)
        sys.exit(1)

    result = SiteInventory(config, _client_for(config)).run()

    if result.completed:
        summary = result.summary
        click.echo(f"\n📊 Summary:")
        click.echo(f"  Sites scanned: {summary['sites']}")
        click.echo(f"  Files found: {summary['files']:,}")
        click.echo(f"  Failures: {summary['failures']}")


@cli.command()
@click.pass_context
def validate_config(ctx):
    """Validate configuration file."""
    try:
        config_manager = _load_config(ctx)
        config = config_manager.build_run_configuration()
    except (FileNotFoundError, ValueError) as e:
        click.echo(f"❌ Configuration validation failed: {e}", err=True)
        sys.exit(1)

    if config_manager.loaded_from:
        click.echo(f"✅ Configuration loaded from {config_manager.loaded_from}")
    else:
        click.echo("✅ No configuration file found, using defaults")

    click.echo(f"\n📊 Configuration Summary:")
    for key, value in _masked(config).items():
        click.echo(f"   {key}: {value}")

    if not config.tenant_name:
        click.echo("\n⚠️  Tenant name is not set; pass --tenant to scan")


@cli.command()
@click.option('--tenant', '-t', 'tenant_name', help='Tenant name')
@click.option('--client-id', help='Application id to consent to (defaults to PnP Management Shell)')
@click.pass_context
def consent(ctx, tenant_name: Optional[str], client_id: Optional[str]):
    """Open the one-time admin consent page for the management app."""
    try:
        config_manager = _load_config(ctx)
        config = config_manager.build_run_configuration({'tenant_name': tenant_name,
                                                         'client_id': client_id})
    except (FileNotFoundError, ValueError) as e:
        click.echo(f"❌ Configuration error: {e}", err=True)
        sys.exit(1)

    url = _client_for(config).register_management_consent(config.tenant_name)
    click.echo(f"Consent page: {url}")


def _masked(config: RunConfiguration) -> Dict[str, Any]:
    values = asdict(config)
    for key in SECRET_FIELDS:
        if values.get(key):
            values[key] = '********'
    return values


def main():
    """Main CLI entry point."""
    cli()


if __name__ == '__main__':
    main()
