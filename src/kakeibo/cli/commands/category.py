"""Category management commands."""

import click
from kakeibo.cli.error_handling import CLI_ERRORS, handle_domain_error
from kakeibo.domain.category import CategoryService
from kakeibo.domain.entities import CATEGORY_TYPES


@click.group()
def category_group():
    """Manage categories."""
    pass


@category_group.command("create")
@click.argument("name")
@click.option("--type", "category_type", type=click.Choice(CATEGORY_TYPES), default="expense", help="Category type (default: expense)")
@click.option("--parent", help="Parent category name")
@click.pass_context
def create_category(ctx, name: str, category_type: str, parent: str | None):
    """Create a new category."""
    service = CategoryService(ctx.obj["db"])

    try:
        category_id = service.create_category(name=name, category_type=category_type, parent_path=parent)
        path = f"{parent} > {name}" if parent else name
        click.echo(f"Created category '{path}' (ID: {category_id})")
    except CLI_ERRORS as e:
        handle_domain_error(ctx, e)


@category_group.command("list")
@click.pass_context
def list_categories(ctx):
    """List categories as a tree."""
    service = CategoryService(ctx.obj["db"])
    tree = service.get_category_tree()

    if not tree:
        click.echo("No categories found.")
        return

    for node in tree:
        click.echo(f"{node['name']} [{node['category_type']}] (ID: {node['id']})")
        for child in node["children"]:
            click.echo(f"  - {child['name']} (ID: {child['id']})")


def register_commands(cli):
    """Register category commands with main CLI."""
    cli.add_command(category_group, name="category")
