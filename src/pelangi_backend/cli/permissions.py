import json
import click

from pelangi_backend.database import get_db
from pelangi_backend.interface.permissions import CapabilityGet
from pelangi_backend.model.auth import User
from pelangi_backend.permissions.principal import Principal
from pelangi_backend.permissions.content import AccessibleContentAggregator
from pelangi_backend.permissions.resolver import PermissionResolver
from pelangi_backend.permissions.roles import Role, RoleNotApplicableError
from pelangi_backend.repositories.assignment import AssignmentRepository
from pelangi_backend.repositories.school import SchoolClassRepository

def _load_principal(db, user_id: str):

    user = db.query(User).filter(User.id == user_id).first()

    if user == None:
        raise click.ClickException(f"User {user_id} not found")

    try:
        role = Role.from_string(user.role)
    except ValueError:
        raise click.ClickException(f"User {user_id} has an unrecognized role: {user.role}")

    return Principal(user_id=user.id, role=role, full_name=user.full_name)

@click.command()
@click.argument("user_id")
def show_permissions(user_id):
    """Print the resolved capabilities of USER_ID as JSON."""

    with next(get_db()) as db:
        principal = _load_principal(db, user_id)

        try:
            descriptor = PermissionResolver(AssignmentRepository(db)).resolve(principal)
        except RoleNotApplicableError as e:
            raise click.ClickException(str(e))

        click.echo(json.dumps(CapabilityGet.from_descriptor(descriptor).model_dump(mode="json"), indent=2))

@click.command()
@click.argument("user_id")
def show_accessible(user_id):
    """Print the classes and subjects USER_ID may access as JSON."""

    with next(get_db()) as db:
        principal = _load_principal(db, user_id)

        aggregator = AccessibleContentAggregator(AssignmentRepository(db), SchoolClassRepository(db))

        try:
            content = aggregator.get_accessible_content(principal)
        except RoleNotApplicableError as e:
            raise click.ClickException(str(e))

        click.echo(json.dumps([entry.model_dump(mode="json") for entry in content], indent=2))
