import click
from flask.cli import with_appcontext
from app.extensions import db
from app.models import Profile, ROLE_CHOICES, ROLE_TRAINEE
from app.services import identity
from app.services.errors import AccessError

@click.group()
def accounts():
    """Account management."""

@accounts.command("create")
@click.option("--email", required=True)
@click.option("--password", required=True)
@click.option("--full-name", required=True)
@click.option("--role", type=click.Choice(ROLE_CHOICES), default=ROLE_TRAINEE)
@with_appcontext
def accounts_create(email, password, full_name, role):
    try:
        user = identity.sign_up(email, password, full_name, role)
    except AccessError as exc:
        raise click.ClickException(exc.message)
    click.echo(f"Account created id={user.id} email={user.email} role={role}")

@accounts.command("list")
@click.option("--role", type=click.Choice(ROLE_CHOICES), default=None)
@with_appcontext
def accounts_list(role):
    query = db.session.query(Profile)
    if role:
        query = query.filter_by(role=role)
    for p in query.order_by(Profile.id).all():
        click.echo(f"{p.id}\t{p.email}\t{p.role}\t{p.full_name}")

def register_cli(app):
    app.cli.add_command(accounts)
