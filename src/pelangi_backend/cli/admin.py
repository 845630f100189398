import click
from sqlalchemy.exc import IntegrityError

from pelangi_backend.database import get_db, get_engine
from pelangi_backend.interface.tokens import hash_password
from pelangi_backend.model import Base
from pelangi_backend.model.auth import User
from pelangi_backend.permissions.roles import Role
from pelangi_backend.server import init_admin_user

@click.command()
def init_db():
    """Create all tables and the bootstrap administrator."""

    Base.metadata.create_all(bind=get_engine())

    with next(get_db()) as db:
        init_admin_user(db)

    click.echo("Database initialized")

@click.command()
@click.option("--email", "-e", "email", prompt=True)
@click.option("--name", "-n", "full_name", prompt=True)
@click.option("--role", "-r", "role", type=click.Choice([r.value for r in Role], case_sensitive=False), default=Role.GURU.value, show_default=True)
@click.option("--password", "-p", "password", prompt=True, hide_input=True, confirmation_prompt=True)
def create_user(email, full_name, role, password):

    user = User(
        email=email,
        full_name=full_name,
        role=Role.from_string(role).value,
        status="ACTIVE",
        password=hash_password(password),
    )

    with next(get_db()) as db:
        try:
            db.add(user)
            db.commit()
            db.refresh(user)
        except IntegrityError:
            db.rollback()
            raise click.ClickException(f"A user with email {email} already exists")

        click.echo(f"Created {user.role} {user.email} ({user.id})")

@click.group()
def users():
    pass

users.add_command(create_user,"create")
