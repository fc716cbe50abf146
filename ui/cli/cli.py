"""CLI entrypoint for the contact book."""

from __future__ import annotations

from pathlib import Path

import typer

from book.schemas import ContactField
from ui.cli import commands

app = typer.Typer(help="Single-user contact book")
config_app = typer.Typer(help="Configuration commands")


@app.callback()
def main_callback(
    ctx: typer.Context,
    root: Path = typer.Option(
        None, "--root", envvar="CONTACT_BOOK_ROOT", help="Directory holding config/ and data/"
    ),
    config: Path = typer.Option(None, "--config", help="Alternative YAML config file"),
) -> None:
    """Contact book commands."""
    ctx.obj = {"root": root, "config_path": config}


@app.command("add")
def add_cmd(
    ctx: typer.Context,
    name: str = typer.Argument(..., help="Contact name"),
    phone: str = typer.Argument(..., help="Ten digit phone number"),
    category: str = typer.Argument(..., help="Contact category"),
) -> None:
    """Add a contact."""
    commands.add(name=name, phone=phone, category=category, **ctx.obj)


@app.command("list")
def list_cmd(ctx: typer.Context) -> None:
    """Display all contacts, newest first."""
    commands.list_contacts(**ctx.obj)


@app.command("search")
def search_cmd(ctx: typer.Context, term: str = typer.Argument(..., help="Substring to look for")) -> None:
    """Search name, phone and category."""
    commands.search(term=term, **ctx.obj)


@app.command("category")
def category_cmd(ctx: typer.Context, category: str = typer.Argument(...)) -> None:
    """List contacts in one category."""
    commands.search_category(category=category, **ctx.obj)


@app.command("delete")
def delete_cmd(ctx: typer.Context, name: str = typer.Argument(...)) -> None:
    """Delete the first contact with this name."""
    commands.delete(name=name, **ctx.obj)


@app.command("update")
def update_cmd(
    ctx: typer.Context,
    name: str = typer.Argument(..., help="Name of the contact to change"),
    field: ContactField = typer.Option(..., "--field", case_sensitive=False),
    value: str = typer.Option(..., "--value"),
) -> None:
    """Change one field of a contact."""
    commands.update(name=name, field=field, value=value, **ctx.obj)


@app.command("sort")
def sort_cmd(
    ctx: typer.Context,
    ignore_case: bool = typer.Option(False, "--ignore-case", help="Sort case-insensitively"),
) -> None:
    """Display contacts sorted by name."""
    commands.sort_contacts(case_sensitive=False if ignore_case else None, **ctx.obj)


@app.command("graph")
def graph_cmd(ctx: typer.Context) -> None:
    """Show the relationship chain."""
    commands.graph(**ctx.obj)


@app.command("menu")
def menu_cmd(ctx: typer.Context) -> None:
    """Interactive menu session with undo/redo."""
    commands.menu(**ctx.obj)


@config_app.command("show")
def config_show_cmd(ctx: typer.Context) -> None:
    """Show effective configuration."""
    commands.config_show(**ctx.obj)


app.add_typer(config_app, name="config")


def main() -> None:
    """Console script entrypoint."""
    app()


if __name__ == "__main__":
    main()
