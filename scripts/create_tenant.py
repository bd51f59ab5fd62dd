"""
Create a tenant (farm) together with its first admin user.

Tenants are never created through the API; run this once per farm:

    python scripts/create_tenant.py --nombre "Granja El Sol" --email admin@elsol.com
"""
import typer
from sqlalchemy import func

from farm_api.database import Database, init_db, transaction
from farm_api.core.security import get_password_hash
from farm_api.models.tenant import Tenant
from farm_api.models.user import User, UserRole

cli = typer.Typer()


def email_taken(db, email: str) -> bool:
    """True if any user already has this email, ignoring case."""
    return db.query(User).filter(func.lower(User.email) == email.strip().lower()).first() is not None


def create_tenant_with_admin(db, nombre: str, email: str, password: str,
                             admin_nombre: str, correo: str = None) -> User:
    """Insert the tenant and its admin in one transaction."""
    email = email.strip().lower()
    with transaction(db):
        tenant = Tenant(nombre=nombre, correo=correo or email, activo=True)
        db.add(tenant)
        db.flush()

        admin = User(
            tenant_id=tenant.id,
            nombre=admin_nombre,
            email=email,
            password_hash=get_password_hash(password),
            rol=UserRole.ADMIN,
            activo=True,
        )
        db.add(admin)
    return admin


@cli.command()
def main(
    nombre: str = typer.Option(
        ..., "--nombre", "-n",
        prompt="Nombre de la granja",
        help="Nombre del tenant."
    ),
    email: str = typer.Option(
        ..., "--email", "-e",
        prompt="Email del administrador",
        help="Email de login del administrador (único en el sistema)."
    ),
    password: str = typer.Option(
        ..., "--password", "-p",
        prompt="Contraseña del administrador",
        hide_input=True,
        confirmation_prompt=True,
        help="Contraseña del administrador (mínimo 6 caracteres)."
    ),
    admin_nombre: str = typer.Option(
        "Administrador", "--admin-nombre",
        help="Nombre del usuario administrador."
    ),
    create_tables: bool = typer.Option(
        False, "--create-tables",
        help="Crear las tablas antes de insertar (solo desarrollo)."
    ),
):
    """Create a new tenant and its admin account."""
    if len(password) < 6:
        typer.echo("Error: la contraseña debe tener al menos 6 caracteres.")
        raise typer.Abort()

    database = Database()
    if create_tables:
        init_db(database)

    db = database.session()
    try:
        if email_taken(db, email):
            typer.echo(f"Error: ya existe un usuario con el email {email}")
            raise typer.Exit(code=1)

        admin = create_tenant_with_admin(db, nombre, email, password, admin_nombre)
        typer.echo(f"Tenant creado: id={admin.tenant_id} ({nombre})")
        typer.echo(f"Administrador creado: {admin.email}")
    finally:
        db.close()
        database.dispose()


if __name__ == "__main__":
    cli()
