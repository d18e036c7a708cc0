"""Config command group for gitscribe.

Inspects, changes and resets the saved configuration.
"""

from __future__ import annotations

import os

import click
from rich.console import Console

from gitscribe.cli import RichCommand, RichGroup, format_error, format_success
from gitscribe.cli.formatting import syntax_highlight_yaml
from gitscribe.errors import ConfigError

console = Console()


@click.group(cls=RichGroup, invoke_without_command=True)
@click.pass_context
def config(ctx: click.Context) -> None:
    """Inspect, change or reset the saved configuration.

    When called without a subcommand, shows the current configuration.

    ## Available Commands

    **show** - Print the configuration file
    **path** - Print where the configuration file lives
    **get** - Print one setting
    **set** - Change settings (KEY=VALUE...)
    **reset** - Reset settings, or everything with --all
    **status** - Show keychain and API key status
    """
    if ctx.invoked_subcommand is None:
        ctx.invoke(show)


@config.command(cls=RichCommand)
def show() -> None:
    """Print the saved configuration (API key masked)."""
    from gitscribe.config import ConfigStore

    store = ConfigStore()
    saved = store.load()
    if saved is None:
        console.print(f"[dim]○[/dim] No configuration at {store.path}")
        console.print("[dim]Run 'gitscribe setup' to create one[/dim]")
        return

    if saved.api_key:
        saved = saved.model_copy(update={"api_key": "*" * 20})

    console.print(f"[bold]{store.path}[/bold]")
    console.print()
    console.print(syntax_highlight_yaml(saved.to_yaml()))


@config.command(cls=RichCommand)
def path() -> None:
    """Print the configuration file path."""
    from gitscribe.config import get_config_path

    click.echo(str(get_config_path()))


@config.command(cls=RichCommand)
@click.option("--all", "reset_all", is_flag=True, help="Delete the whole configuration")
@click.option("--force", is_flag=True, help="Skip confirmation prompt")
@click.argument("keys", nargs=-1)
def reset(reset_all: bool, force: bool, keys: tuple[str, ...]) -> None:
    """Reset settings to their defaults.

    With --all the configuration file and the stored API key are deleted.
    Otherwise only the named settings are reset.

    Examples:

        # Start over
        gitscribe config reset --all
        gitscribe setup

        # Forget the model and the API key
        gitscribe config reset model api_key
    """
    from gitscribe.config import ConfigStore

    if reset_all == bool(keys):
        raise click.UsageError("Specify --all or the settings to reset")

    store = ConfigStore()
    if keys:
        try:
            store.reset_keys(list(keys))
        except ConfigError as e:
            console.print(format_error(str(e)))
            raise click.ClickException("Reset failed")
        console.print(format_success(f"Reset {', '.join(keys)}", str(store.path)))
        return

    if not force and not click.confirm(f"Delete {store.path}?", default=False):
        console.print("[yellow]Cancelled[/yellow]")
        return

    try:
        removed = store.reset()
    except ConfigError as e:
        console.print(format_error(str(e)))
        raise click.ClickException("Reset failed")

    if removed:
        console.print(format_success("Configuration removed", str(store.path)))
    else:
        console.print(f"[dim]○[/dim] No configuration at {store.path}")


@config.command("set", cls=RichCommand)
@click.argument("pairs", nargs=-1, required=True, metavar="KEY=VALUE...")
def set_(pairs: tuple[str, ...]) -> None:
    """Change one or more settings.

    Values are checked against the same rules as the setup wizard; nothing
    is written if any of them is invalid.

    Examples:

        gitscribe config set ai_provider=anthropic model=claude-3-5-haiku-latest
        gitscribe config set emoji=true generate_count=3
    """
    from gitscribe.config import ConfigStore, setting_name

    values: dict[str, str] = {}
    for pair in pairs:
        key, sep, value = pair.partition("=")
        if not sep or not key.strip():
            raise click.BadParameter(f"Invalid format: {pair}. Use KEY=VALUE", param_hint="PAIRS")
        values[key] = value

    store = ConfigStore()
    try:
        store.set_values(values)
    except ConfigError as e:
        console.print(format_error(str(e)))
        raise click.ClickException("Configuration not changed")

    for key, value in values.items():
        shown = _mask(value) if setting_name(key) == "api_key" else value
        console.print(f"[green]✓[/green] {key} set to: {shown}", highlight=False)


@config.command(cls=RichCommand)
@click.argument("key")
def get(key: str) -> None:
    """Print one setting (the API key is masked)."""
    from gitscribe.config import ConfigStore, setting_name

    try:
        value = ConfigStore().get_value(key)
    except ConfigError as e:
        console.print(format_error(str(e)))
        raise click.ClickException("Unknown setting")

    if value is None:
        shown = "(not set)"
    elif setting_name(key) == "api_key":
        shown = _mask(str(value))
    elif isinstance(value, bool):
        shown = str(value).lower()
    else:
        shown = str(value)
    console.print(f"{setting_name(key)}: {shown}", highlight=False)


@config.command(cls=RichCommand)
def status() -> None:
    """Show where the API key is stored and whether a keychain is available."""
    from gitscribe.config import ConfigStore
    from gitscribe.credentials import CredentialType, env_var_for

    store = ConfigStore()
    credentials = store.credentials
    saved = store.load()

    console.print()
    console.print("[bold]Secure Storage Status[/bold]")
    console.print()
    if credentials.keychain_available():
        console.print(f"[green]✓[/green] Keychain available ({credentials.backend_name()})")
        console.print("[dim]  API keys are stored in the system keychain[/dim]")
    else:
        console.print("[yellow]![/yellow] No system keychain found")
        console.print(f"[dim]  API keys are stored in {store.path}[/dim]")

    env_var = env_var_for(CredentialType.API_KEY)
    if os.environ.get(env_var):
        console.print(f"[green]✓[/green] API key set in ${env_var}")
    elif credentials.exists(CredentialType.API_KEY):
        console.print("[green]✓[/green] API key stored in the keychain")
    elif saved is not None and saved.api_key:
        console.print("[yellow]![/yellow] API key stored in the configuration file")
    else:
        console.print("[dim]○[/dim] No API key configured")
        console.print("[dim]  Run: gitscribe config set api_key=<your key>[/dim]")

    if saved is not None and saved.ai_provider:
        console.print(f"[dim]○[/dim] AI provider: {saved.ai_provider}", highlight=False)
    console.print()


def _mask(value: str) -> str:
    return "*" * 20 if value else ""
