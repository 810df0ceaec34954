"""didi CLI - Digital Diary."""

import getpass
import logging
import shutil
import sys
from typing import NoReturn

import click

from .adapters.sqlite_store import DiaryError, SQLiteEntryStore
from .config import Config, load_config
from .display import DisplayOptions, accent, count_phrase, format_entries, format_entries_json
from .workflows import add_entry, create_store, open_store, read_content, unique_ids


def _abort(e: Exception) -> NoReturn:
    click.echo(f"Error: {e}", err=True)
    sys.exit(1)


def _username() -> str:
    try:
        return getpass.getuser()
    except (OSError, KeyError):
        return "back"


def _open(config: Config, quiet: bool = False) -> SQLiteEntryStore:
    """Open the configured diary, exiting with an error if that fails."""
    try:
        store = open_store(config)
    except DiaryError as e:
        _abort(e)

    if not quiet:
        user = accent(_username(), config.color)
        location = accent(str(store.path), config.color)
        click.echo(f"Welcome {user} at '{location}'!\n")
    return store


def display_options(f):
    """Shared flags for commands that print entries."""
    options = [
        click.option("--nocontent", "-n", is_flag=True, help="Don't show content"),
        click.option("--id", "-i", "show_id", is_flag=True, help="Show id of entry"),
        click.option("--hash", "-h", "show_hash", is_flag=True, help="Show hash of entry"),
        click.option("--keywords", "-k", "show_keywords", is_flag=True, help="Show keywords of entry"),
        click.option("--nodate", "-d", is_flag=True, help="Don't show date"),
        click.option("--hidden", "-a", "show_hidden", is_flag=True, help="Show hidden entries"),
        click.option("--json", "as_json", is_flag=True, help="Output as JSON"),
    ]
    for option in reversed(options):
        f = option(f)
    return f


def _show_entries(entries, config: Config, as_json: bool, **flags) -> None:
    """Shared entry display logic."""
    options = DisplayOptions(
        show_date=not flags["nodate"],
        show_id=flags["show_id"],
        show_hash=flags["show_hash"],
        show_keywords=flags["show_keywords"],
        show_content=not flags["nocontent"],
        show_hidden=flags["show_hidden"],
    )

    if as_json:
        click.echo(format_entries_json(entries, options))
        return

    width = shutil.get_terminal_size().columns
    click.echo(format_entries(entries, options, width=width, color=config.color))


@click.group(invoke_without_command=True)
@click.version_option()
@click.option("--debug", is_flag=True, help="Enable debug logging")
@click.option("--no-color", is_flag=True, help="Disable colored output")
@click.pass_context
def main(ctx, debug: bool, no_color: bool):
    """A small CLI diary used to document your life."""
    if debug:
        logging.basicConfig(
            format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            level=logging.DEBUG,
        )

    config = load_config()
    if no_color:
        config.color = False
    ctx.obj = config

    if ctx.invoked_subcommand is None:
        click.echo("No subcommand given. Use flag --help for more information.")


@main.command()
@click.pass_obj
def create(config: Config):
    """Creates the database."""
    try:
        store = create_store(config)
    except DiaryError as e:
        _abort(e)

    store.close()
    click.echo(f"Created database at '{accent(str(store.path), config.color)}'!")


@main.command()
@click.pass_obj
def add(config: Config):
    """Adds an entry."""
    with _open(config) as store:
        title = click.prompt(accent("Title", config.color), default="", show_default=False)

        click.echo(accent("Content: ", config.color), nl=False)
        content = read_content(iter(sys.stdin.readline, ""))

        raw_keywords = click.prompt(accent("Keywords", config.color), default="", show_default=False)

        try:
            add_entry(store, title, content, raw_keywords)
        except DiaryError as e:
            _abort(e)

    click.echo(f"Added {accent(title.strip(), config.color)}!")


@main.command("list")
@display_options
@click.pass_obj
def list_cmd(config: Config, as_json: bool, **flags):
    """Lists all entries."""
    with _open(config, quiet=as_json) as store:
        try:
            entries = store.list_all()
        except DiaryError as e:
            _abort(e)

    _show_entries(entries, config, as_json, **flags)


@main.command()
@click.argument("terms", nargs=-1, required=True)
@display_options
@click.pass_obj
def search(config: Config, terms: tuple[str, ...], as_json: bool, **flags):
    """Searches for entries by title and keywords."""
    with _open(config, quiet=as_json) as store:
        try:
            entries = store.search([t.lower() for t in terms])
        except DiaryError as e:
            _abort(e)

    _show_entries(entries, config, as_json, **flags)


def _set_hidden(config: Config, ids: tuple[int, ...], hidden: bool) -> None:
    with _open(config) as store:
        try:
            changed = store.set_hidden(unique_ids(ids), hidden)
        except DiaryError as e:
            _abort(e)

    click.echo(f"Changed {count_phrase(changed, config.color)}.")


entry_ids = click.argument("ids", nargs=-1, required=True, type=click.IntRange(min=1))


@main.command()
@entry_ids
@click.pass_obj
def hide(config: Config, ids: tuple[int, ...]):
    """Hide one or more entries."""
    _set_hidden(config, ids, True)


@main.command()
@entry_ids
@click.pass_obj
def unhide(config: Config, ids: tuple[int, ...]):
    """Unhide one or more entries."""
    _set_hidden(config, ids, False)


if __name__ == "__main__":
    main()
