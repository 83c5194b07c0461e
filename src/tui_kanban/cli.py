"""CLI entry point using Click."""

from __future__ import annotations

from pathlib import Path

import click


class _DefaultGroup(click.Group):
    """Insert 'run' when the first arg is not a registered subcommand."""

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.no_args_is_help = False  # bare `tui-kanban` routes to run

    def invoke(self, ctx):
        if not ctx._protected_args and not ctx.args:
            ctx._protected_args = ["run"]
        return super().invoke(ctx)

    def resolve_command(self, ctx, args):
        cmd_name = args[0] if args else None
        if cmd_name and cmd_name in self.commands:
            return super().resolve_command(ctx, args)
        return super().resolve_command(ctx, ["run"] + list(args))


@click.group(cls=_DefaultGroup)
@click.option(
    "--config",
    "config_path",
    default=None,
    type=click.Path(dir_okay=False, path_type=Path),
    help="Config file (default: ~/.config/tui-kanban/config.toml)",
)
@click.option(
    "--db",
    "db_path",
    default=None,
    type=click.Path(dir_okay=False),
    help="SQLite database file (default from config, else ~/.local/share/tui-kanban/kanban.db)",
)
@click.option("--no-color", is_flag=True, help="Disable color output")
@click.version_option(package_name="tui-kanban")
@click.pass_context
def main(ctx, config_path: Path | None, db_path: str | None, no_color: bool) -> None:
    """TUI Kanban - terminal kanban board."""
    from tui_kanban.config import default_config_path

    ctx.ensure_object(dict)
    ctx.obj["config_path"] = config_path or default_config_path()
    ctx.obj["db_path"] = db_path
    ctx.obj["no_color"] = no_color


@main.command()
@click.pass_context
def run(ctx) -> None:
    """Open the board stored in the database file."""
    from tui_kanban.app import KanbanApp
    from tui_kanban.config import load_config, resolve_db_path
    from tui_kanban.log import setup_logging
    from tui_kanban.models import KanbanError
    from tui_kanban.store import open_store
    from tui_kanban.theme import load_color_scheme

    config = load_config(ctx.obj["config_path"])
    setup_logging(config.log_level_value, config.log_file)

    try:
        store = open_store(resolve_db_path(ctx.obj["db_path"], config))
    except KanbanError as e:
        click.echo(f"Error: {e}", err=True)
        raise SystemExit(1)
    try:
        app = KanbanApp(
            store,
            colors=load_color_scheme(config.theme_file),
            no_color=ctx.obj["no_color"],
            location=str(store.db_path),
        )
        app.run()
    finally:
        store.close()


@main.command("init")
@click.pass_context
def init_cmd(ctx) -> None:
    """Write a default config file."""
    from tui_kanban.config import AppConfig, save_config

    config_path: Path = ctx.obj["config_path"]
    if config_path.exists():
        click.echo(f"Already exists: {config_path}", err=True)
        raise SystemExit(1)

    config = AppConfig()
    if ctx.obj["db_path"]:
        config.db_path = Path(ctx.obj["db_path"]).expanduser()
    save_config(config_path, config)
    click.echo(f"Created {config_path}")


@main.command("init-theme")
@click.pass_context
def init_theme_cmd(ctx) -> None:
    """Copy the default theme next to the config file for customization."""
    from tui_kanban.config import load_config, save_config
    from tui_kanban.theme import init_theme

    config_path: Path = ctx.obj["config_path"]
    dest = config_path.parent / "theme.yaml"
    try:
        init_theme(dest)
    except FileExistsError as e:
        click.echo(f"Already exists: {e}", err=True)
        raise SystemExit(1)

    config = load_config(config_path)
    config.theme_file = dest
    save_config(config_path, config)
    click.echo(f"Created {dest}")
