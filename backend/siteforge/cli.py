import click
from flask.cli import with_appcontext

from siteforge.application.auth.login import stage_user
from siteforge.application.users.permissions import ensure_system_permissions
from siteforge.application.users.roles import ensure_system_roles, get_or_create_role
from siteforge.constants import SUPER_ADMIN
from siteforge.models.user import User
from siteforge.utils.transaction import transactional


@click.command("seed-roles")
@with_appcontext
def seed_roles():
    """Create the built-in roles and permissions."""
    created = ensure_system_roles()
    ensure_system_permissions()
    click.echo(f"Seeded {len(created)} roles")


@click.command("create-superadmin")
@click.option("--email", prompt=True)
@click.option("--password", prompt=True, hide_input=True, confirmation_prompt=True)
@click.option("--first-name", default="Super")
@click.option("--last-name", default="Admin")
@with_appcontext
def create_superadmin(email, password, first_name, last_name):
    """Create a SuperAdmin account, or promote an existing user."""
    ensure_system_roles()

    with transactional():
        user = User.query.filter_by(email=email.strip().lower()).first()
        if user is None:
            user = stage_user(
                email=email,
                password=password,
                first_name=first_name,
                last_name=last_name,
                role_name=SUPER_ADMIN,
            )
        else:
            user.role = get_or_create_role(SUPER_ADMIN)

    click.echo(f"SuperAdmin ready: {user.email}")


def register_cli(app):
    app.cli.add_command(seed_roles)
    app.cli.add_command(create_superadmin)
