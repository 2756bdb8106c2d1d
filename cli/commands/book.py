import click
from core.errors import OpenShelfError
from ..utils import bootstrap, print_record

@click.command()
@click.argument('kind', type=click.Choice(['edition', 'work', 'author']))
@click.argument('olid')
@click.option('--mode', default='all', type=click.Choice(['cached', 'uncached', 'all']),
              help='cached: local only, uncached: Open Library only, all: local then remote')
def resolve(kind: str, olid: str, mode: str):
    """Resolve an edition, work or author by OLID

    Example:
        openshelf resolve edition OL7353617M
        openshelf resolve work OL45804W --mode cached
    """
    ctx = bootstrap()
    try:
        record = ctx.resolver.resolve(kind, olid, mode)
    except OpenShelfError as e:
        raise click.ClickException(str(e))

    if record is None:
        click.echo(click.style(f"{kind} {olid} is not cached", fg='yellow'))
        return

    source = 'cache' if record.get('is_cached') else 'Open Library'
    click.echo(click.style(f"\n{record.get('title') or record.get('name')} ({source})", fg='green'))
    print_record(record, skip=('is_cached', 'editions'))

@click.command()
@click.argument('title')
@click.option('--page', default=1, type=int, help='Result page')
def search(title: str, page: int):
    """Search Open Library by title"""
    ctx = bootstrap()
    try:
        result = ctx.client.fetch('search', title, page)
    except OpenShelfError as e:
        raise click.ClickException(str(e))

    click.echo(click.style(f"\n{result['num_found']} results (page {page})", fg='blue'))
    for doc in result['docs']:
        authors = ', '.join(doc['author_names']) or 'Unknown author'
        year = doc['first_publish_year'] or '?'
        click.echo(
            click.style(f"{doc['work_olid']:<12}", fg='cyan') +
            f" {doc['title']} - {authors} ({year}), {doc['edition_count']} editions"
        )
