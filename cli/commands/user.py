import click
from core.errors import OpenShelfError, ValidationError
from ..utils import bootstrap, print_books

@click.group()
def user():
    """User account commands"""
    pass

@user.command()
@click.option('--username', prompt=True, help='Login name (at least 4 characters)')
@click.option('--email', prompt=True, help='Email address')
@click.option('--password', prompt=True, hide_input=True, confirmation_prompt=True,
              help='Password (at least 8 characters)')
def create(username: str, email: str, password: str):
    """Create a user account"""
    ctx = bootstrap()
    try:
        created = ctx.auth.register(username, password, email)
    except ValidationError as e:
        for error in e.errors:
            click.echo(click.style(f"{error['field']}: {error['message']}", fg='red'), err=True)
        raise SystemExit(1)
    click.echo(click.style(f"Created user {created['id']} ({created['username']})", fg='green'))

@click.command()
@click.argument('user_id', type=int)
@click.option('--reviewed', is_flag=True, help='Only show reviewed books')
def books(user_id: int, reviewed: bool):
    """List the books in a user's collection"""
    ctx = bootstrap()
    try:
        listing = ctx.library.get_reviews(user_id) if reviewed else ctx.library.get_books(user_id)
    except OpenShelfError as e:
        raise click.ClickException(str(e))

    if listing is None:
        click.echo(click.style(f"User {user_id} has no books", fg='yellow'))
        return
    print_books(listing)

@click.command()
@click.argument('user_id', type=int)
@click.argument('edition_olid')
@click.option('--status', 'status_id', default=1, type=int, help='1 want to read, 2 reading, 3 finished')
def add(user_id: int, edition_olid: str, status_id: int):
    """Add an edition to a user's collection"""
    ctx = bootstrap()
    try:
        result = ctx.library.add_book(user_id, edition_olid, status_id)
    except OpenShelfError as e:
        raise click.ClickException(str(e))
    if result.inserted:
        click.echo(click.style(f"Added {edition_olid}", fg='green'))
    else:
        click.echo(click.style(f"{edition_olid} is already in the collection", fg='yellow'))
