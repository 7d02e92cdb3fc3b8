"""
Vector store nodes CLI.

Provides commands for:
- Printing the node definition
- Listing the collections of a database
- Checking that an Atlas Vector Search index exists
"""

from __future__ import annotations

import json
import logging
import sys

import click

from node_sdk import NodeExecutionContext, NodeInfo, NodeOperationError
from vectorstore_nodes.mongodb_atlas import (
    MONGO_CLIENTS,
    MONGODB_ATLAS_CONFIG,
    create_mongodb_atlas_node,
    get_collections,
    get_database,
)
from vectorstore_nodes.mongodb_atlas.node import search_index_exists
from vectorstore_nodes.mongodb_atlas.parameters import MONGODB_CREDENTIALS
from vectorstore_nodes.observability import setup_logging

logger = logging.getLogger("vectorstore_nodes")

CLI_NODE_ID = "vectorstore-cli"


def _cli_context(connection_string: str, database: str) -> NodeExecutionContext:
    return NodeExecutionContext(
        node=NodeInfo(id=CLI_NODE_ID, name="CLI", type=MONGODB_ATLAS_CONFIG.meta.name),
        parameters={},
        credentials={
            MONGODB_CREDENTIALS: {
                "connectionString": connection_string,
                "database": database,
            }
        },
    )


def _close_cli_client() -> None:
    client = MONGO_CLIENTS.get(CLI_NODE_ID)
    MONGO_CLIENTS.clear(CLI_NODE_ID)
    if client is not None:
        client.close()


connection_options = [
    click.option(
        "--connection-string",
        envvar="MONGODB_CONNECTION_STRING",
        required=True,
        help="MongoDB Atlas connection string",
    ),
    click.option(
        "--database", "-d",
        envvar="MONGODB_DATABASE",
        required=True,
        help="Database name",
    ),
]


def with_connection_options(func):
    for option in reversed(connection_options):
        func = option(func)
    return func


@click.group()
@click.option("-v", "--verbose", is_flag=True, help="Enable verbose output")
@click.option("-q", "--quiet", is_flag=True, help="Suppress output")
@click.pass_context
def cli(ctx: click.Context, verbose: bool, quiet: bool):
    """Vector store nodes - MongoDB Atlas Vector Store tooling."""
    ctx.ensure_object(dict)
    setup_logging()

    if verbose:
        logging.getLogger().setLevel(logging.DEBUG)
    elif quiet:
        logging.getLogger().setLevel(logging.ERROR)

    ctx.obj["verbose"] = verbose
    ctx.obj["quiet"] = quiet


@cli.command("describe")
def describe():
    """Print the node definition as JSON."""
    node = create_mongodb_atlas_node()
    click.echo(json.dumps(node.get_definition(), indent=2, default=str))


@cli.command("collections")
@with_connection_options
def collections(connection_string: str, database: str):
    """List the collections of a database."""
    context = _cli_context(connection_string, database)
    try:
        result = get_collections(context)
    except NodeOperationError as e:
        click.echo(f"{e.message}", err=True)
        if e.description:
            click.echo(e.description, err=True)
        sys.exit(1)
    finally:
        _close_cli_client()

    names = [entry["name"] for entry in result["results"]]
    if not names:
        click.echo(f"No collections in database '{database}'")
        return
    click.echo(f"Collections in '{database}':")
    for name in names:
        click.echo(f"  {name}")


@cli.command("check-index")
@with_connection_options
@click.option("--collection", "-c", required=True, help="Collection name")
@click.option("--index", "-i", "index_name", required=True, help="Vector search index name")
def check_index(connection_string: str, database: str, collection: str, index_name: str):
    """Check that a vector search index exists on a collection."""
    context = _cli_context(connection_string, database)
    try:
        db = get_database(context)
        exists = search_index_exists(db[collection], index_name)
    except NodeOperationError as e:
        click.echo(f"{e.message}", err=True)
        sys.exit(1)
    except Exception as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)
    finally:
        _close_cli_client()

    if not exists:
        click.echo(f"Index {index_name} not found on {database}.{collection}", err=True)
        sys.exit(1)
    click.echo(f"Index {index_name} found on {database}.{collection}")


def main():
    """Main entry point."""
    cli(obj={})


if __name__ == "__main__":
    main()
