# cli/main.py
import click
from core.config import configure_logging
from .commands.book import resolve, search
from .commands.user import user, books, add
from .utils import bootstrap

@click.group()
@click.option('--log-level', default=None, help='Override LOG_LEVEL')
def cli(log_level):
    """openshelf book cache CLI"""
    configure_logging(log_level)

@cli.command()
def init():
    """Create tables, seed statuses and refresh languages"""
    ctx = bootstrap()
    snapshot = ctx.snapshot
    click.echo(click.style("Database ready", fg='green'))
    click.echo(f"  statuses:  {len(snapshot.statuses)}")
    click.echo(f"  languages: {len(snapshot.languages)}")
    click.echo(f"  subjects:  {len(snapshot.subjects)}")
    click.echo(f"  works:     {len(snapshot.work_olids)}")
    click.echo(f"  editions:  {len(snapshot.edition_olids)}")
    click.echo(f"  authors:   {len(snapshot.author_olids)}")

cli.add_command(resolve)
cli.add_command(search)
cli.add_command(user)
cli.add_command(books)
cli.add_command(add)

def main():
    """Entry point for the CLI"""
    cli()

if __name__ == '__main__':
    main()
