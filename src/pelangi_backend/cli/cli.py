from dotenv import load_dotenv

# Environment must be loaded before settings are read on import
load_dotenv()

import click

from .admin import init_db, users
from .permissions import show_accessible, show_permissions

@click.group()
def cli():
    pass

cli.add_command(init_db,"init-db")
cli.add_command(users,"users")
cli.add_command(show_permissions,"permissions")
cli.add_command(show_accessible,"accessible")

if __name__ == '__main__':
    cli()
