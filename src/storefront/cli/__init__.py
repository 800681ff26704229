"""CLI commands for the storefront cache.

Provides command-line maintenance using Typer:
- storefront-cache stats: Count cached entries per kind
- storefront-cache sweep: Delete expired entries now
- storefront-cache invalidate: Drop every cached entry of a store
- storefront-cache clear: Drop every cached entry

Usage:
    storefront-cache --help
    storefront-cache stats --database-url sqlite+aiosqlite:///./cache.db
    storefront-cache invalidate store-123
"""

import typer

from storefront.cli.maintenance import clear, invalidate, stats, sweep

# Main CLI application
app = typer.Typer(
    name="storefront-cache",
    help="Storefront cache maintenance",
    no_args_is_help=True,
)

# Add commands
app.command()(stats)
app.command()(sweep)
app.command()(invalidate)
app.command()(clear)


@app.callback()
def callback() -> None:
    """Storefront cache maintenance."""
    pass


def main() -> None:
    """Entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
