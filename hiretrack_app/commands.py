"""
Flask CLI commands.
"""
import click
from hiretrack_app.models import db
from hiretrack_app.utils.constants import ROLE_ADMINISTRATOR
from hiretrack_app.utils.errors import ServiceError, ValidationError


def register_commands(app):

    @app.cli.command('init-db')
    def init_db():
        """Initialize the database."""
        db.create_all()
        click.echo('Database initialized.')

    @app.cli.command('create-admin')
    @click.option('--email', prompt='Email')
    @click.option('--password', prompt='Password', hide_input=True, confirmation_prompt=True)
    @click.option('--first-name', prompt='First name')
    @click.option('--last-name', prompt='Last name')
    def create_admin(email, password, first_name, last_name):
        """Create an administrator account."""
        from hiretrack_app.services.users import create_user

        data = {'email': email, 'password': password, 'first_name': first_name, 'last_name': last_name}
        try:
            user = create_user(data, role=ROLE_ADMINISTRATOR)
        except ValidationError as e:
            for field, message in e.errors.items():
                click.echo(f'{field}: {message}', err=True)
            raise SystemExit(1)
        except ServiceError as e:
            click.echo(e.message, err=True)
            raise SystemExit(1)
        click.echo(f'Administrator {user.username} ({user.email}) created.')

    @app.cli.command('set-logs-password')
    @click.option('--password', prompt='Log page password', hide_input=True, confirmation_prompt=True)
    def set_logs_password(password):
        """Set the shared password that unlocks the system log page."""
        from hiretrack_app.services.logs import set_log_password

        try:
            set_log_password(password)
        except ValidationError as e:
            click.echo(e.errors.get('password'), err=True)
            raise SystemExit(1)
        click.echo('Log page password updated.')
