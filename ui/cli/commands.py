"""Typer command handlers."""

from __future__ import annotations

import json
from pathlib import Path

import typer

from book.contact_book import ContactBook
from book.schemas import ContactField, ContactSnapshot, OperationResult
from core.orchestrator import Orchestrator, RuntimeBundle

MENU = """
===== Contact Manager Menu =====
1. Add Contact
2. Display Contacts
3. Undo
4. Redo
5. Search Contact
6. Search by Category
7. Delete Contact
8. Update Contact
9. Sort Contacts
0. Exit"""

FIELD_CHOICES = {1: ContactField.NAME, 2: ContactField.PHONE, 3: ContactField.CATEGORY}


def _runtime(root: Path | None = None, config_path: Path | None = None) -> RuntimeBundle:
    bundle = Orchestrator(root=root, config_path=config_path).build(load=False)
    Orchestrator.configure_logging(bundle.config)
    bundle.load_report = bundle.book.load()
    for warning in bundle.load_report.warnings:
        typer.echo(f"Warning: {warning}", err=True)
    for line_no, reason in bundle.load_report.rejected:
        typer.echo(f"Warning: skipped line {line_no}: {reason}", err=True)
    return bundle


def _report(result: OperationResult, exit_on_failure: bool = True) -> None:
    for warning in result.warnings:
        typer.echo(f"Warning: {warning}", err=True)
    if not result.success:
        typer.echo(f"Error: {result.reason}", err=True)
        if exit_on_failure:
            raise typer.Exit(code=1)
        return
    if result.record is not None:
        typer.echo(f"{result.reason} {result.record.describe()}")
    else:
        typer.echo(result.reason)


def _print_contacts(contacts: list[ContactSnapshot], empty_message: str) -> None:
    if not contacts:
        typer.echo(empty_message)
        return
    for contact in contacts:
        typer.echo(contact.describe())


def add(name: str, phone: str, category: str, root: Path | None = None, config_path: Path | None = None) -> None:
    """Add one contact."""
    bundle = _runtime(root, config_path)
    _report(bundle.book.add(name, phone, category))


def list_contacts(root: Path | None = None, config_path: Path | None = None) -> None:
    """Print every contact, newest first."""
    bundle = _runtime(root, config_path)
    _print_contacts(bundle.book.list_contacts(), "No contacts to display.")


def search(term: str, root: Path | None = None, config_path: Path | None = None) -> None:
    """Print contacts whose name, phone or category contains ``term``."""
    bundle = _runtime(root, config_path)
    _print_contacts(bundle.book.search(term), "No matching contacts.")


def search_category(category: str, root: Path | None = None, config_path: Path | None = None) -> None:
    """Print contacts in exactly ``category``."""
    bundle = _runtime(root, config_path)
    _print_contacts(bundle.book.search_by_category(category), "No matching contacts.")


def delete(name: str, root: Path | None = None, config_path: Path | None = None) -> None:
    bundle = _runtime(root, config_path)
    _report(bundle.book.delete(name))


def update(
    name: str,
    field: ContactField,
    value: str,
    root: Path | None = None,
    config_path: Path | None = None,
) -> None:
    bundle = _runtime(root, config_path)
    _report(bundle.book.update(name, field, value))


def sort_contacts(
    case_sensitive: bool | None = None, root: Path | None = None, config_path: Path | None = None
) -> None:
    """Print contacts ordered by name."""
    bundle = _runtime(root, config_path)
    _print_contacts(
        bundle.book.sorted_contacts(case_sensitive=case_sensitive), "No contacts to sort."
    )


def graph(root: Path | None = None, config_path: Path | None = None) -> None:
    """Print the relationship chain as JSON."""
    bundle = _runtime(root, config_path)
    nodes = [
        {
            "name": node.name,
            "category": node.category,
            "neighbors": bundle.book.graph.neighbors(node.name),
        }
        for node in bundle.book.graph.nodes()
    ]
    typer.echo(json.dumps(nodes, indent=2))


def config_show(root: Path | None = None, config_path: Path | None = None) -> None:
    """Show effective runtime config."""
    bundle = _runtime(root, config_path)
    typer.echo(json.dumps(bundle.config, indent=2, default=str))


def menu(root: Path | None = None, config_path: Path | None = None) -> None:
    """Run the interactive numbered menu; history lives for the session."""
    bundle = _runtime(root, config_path)
    book = bundle.book
    while True:
        typer.echo(MENU)
        choice = typer.prompt("Enter your choice", type=int)
        if choice == 0:
            typer.echo("Exiting program.")
            break
        _menu_action(book, choice)


def _menu_action(book: ContactBook, choice: int) -> None:
    if choice == 1:
        name = typer.prompt("Enter contact name", default="", show_default=False)
        phone = typer.prompt("Enter contact phone", default="", show_default=False)
        category = typer.prompt("Enter contact category", default="", show_default=False)
        _report(book.add(name, phone, category), exit_on_failure=False)
    elif choice == 2:
        typer.echo("\n===== All Contacts =====")
        _print_contacts(book.list_contacts(), "No contacts to display.")
    elif choice == 3:
        _report(book.undo(), exit_on_failure=False)
    elif choice == 4:
        _report(book.redo(), exit_on_failure=False)
    elif choice == 5:
        term = typer.prompt("Enter search term", default="", show_default=False)
        _print_contacts(book.search(term), "No matching contacts.")
    elif choice == 6:
        category = typer.prompt("Enter category to search")
        _print_contacts(book.search_by_category(category), "No matching contacts.")
    elif choice == 7:
        _print_contacts(book.list_contacts(), "No contacts to delete.")
        name = typer.prompt("Enter the name of the contact to delete")
        _report(book.delete(name), exit_on_failure=False)
    elif choice == 8:
        _menu_update(book)
    elif choice == 9:
        typer.echo("Sorted Contacts:")
        _print_contacts(book.sorted_contacts(), "No contacts to sort.")
    else:
        typer.echo("Error: Invalid choice. Please enter a valid option.", err=True)


def _menu_update(book: ContactBook) -> None:
    name = typer.prompt("Enter the name of the contact to update")
    current = book.get(name)
    if current is None:
        typer.echo("Error: Contact not found. Update failed.", err=True)
        return
    typer.echo("Current Contact Details:")
    typer.echo(current.describe())
    typer.echo("Select what to update:\n1. Update Name\n2. Update Phone Number\n3. Update Category")
    field_choice = typer.prompt("Enter your choice", type=int)
    contact_field = FIELD_CHOICES.get(field_choice)
    if contact_field is None:
        typer.echo("Error: Invalid choice. Contact not updated.", err=True)
        return
    value = typer.prompt(f"Enter the new {contact_field.value}", default="", show_default=False)
    _report(book.update(name, contact_field, value), exit_on_failure=False)
