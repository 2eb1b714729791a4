"""Estate platform CLI tool (estatectl)."""

from typing import Optional

import typer

app = typer.Typer(name="estatectl", help="Estate marketplace management CLI")
db_app = typer.Typer(help="Database management commands")
roles_app = typer.Typer(help="Role management commands")
app.add_typer(db_app, name="db")
app.add_typer(roles_app, name="roles")


@db_app.command("init")
def db_init():
    """Create all tables that do not exist yet."""
    from estate_backend.db.session import init_db

    init_db()
    typer.echo("✅ Tables created (or already present)")


@db_app.command("seed")
def db_seed():
    """Seed system roles and the super-admin account."""
    from estate_backend.db.session import SessionLocal
    from estate_backend.db.seeds.seed_roles import seed_roles
    from estate_backend.db.seeds.seed_super_admin import seed_super_admin

    db = SessionLocal()
    try:
        created = seed_roles(db)
        admin = seed_super_admin(db)
    finally:
        db.close()
    typer.echo(f"✅ Seeded {created} system role(s)")
    if admin is None:
        typer.echo("⚠️  Super admin was not created", err=True)


@roles_app.command("list")
def roles_list(
    active: Optional[bool] = typer.Option(None, help="Filter by active flag"),
    search: Optional[str] = typer.Option(None, help="Match name or description"),
):
    """List roles with their level and user count."""
    from estate_backend.db.session import SessionLocal
    from estate_backend.services.role_service import role_service

    db = SessionLocal()
    try:
        result = role_service.list_roles(db, page=1, limit=100, is_active=active, search=search)
    finally:
        db.close()
    for role in result["roles"]:
        flags = []
        if role["is_system_role"]:
            flags.append("system")
        if not role["is_active"]:
            flags.append("inactive")
        suffix = f" [{', '.join(flags)}]" if flags else ""
        typer.echo(
            f"  [{role['id']}] {role['name']} (level {role['level']}, "
            f"{role['user_count']} users, {len(role['permissions'])} permissions){suffix}"
        )


@roles_app.command("presets")
def roles_presets():
    """Show available permission presets."""
    from estate_backend.core.permissions import ROLE_PRESETS

    for name, config in ROLE_PRESETS.items():
        typer.echo(f"  {name.upper()}")
        typer.echo(f"    Description: {config['description']}")
        typer.echo(f"    Level: {config['level']}/10")
        typer.echo(f"    Permissions: {len(config['permissions'])}")


@roles_app.command("create-preset")
def roles_create_preset(
    preset: str = typer.Argument(..., help="Preset name, see `roles presets`"),
    name: str = typer.Argument(..., help="Name of the new role"),
    description: Optional[str] = typer.Option(None, help="Override the preset description"),
):
    """Create a custom role from a permission preset."""
    from estate_backend.core.exceptions import PlatformError
    from estate_backend.db.session import SessionLocal
    from estate_backend.services.role_service import role_service

    db = SessionLocal()
    try:
        role = role_service.create_from_preset(db, preset, name, description)
    except PlatformError as e:
        typer.echo(f"❌ {e.message}", err=True)
        raise typer.Exit(code=1)
    finally:
        db.close()
    typer.echo(f"✅ Created role '{role.name}' (level {role.level}/10)")
    for permission in role.permissions:
        typer.echo(f"    • {permission}")


@roles_app.command("delete")
def roles_delete(
    role_id: int = typer.Argument(..., help="Role id"),
    yes: bool = typer.Option(False, "--yes", help="Skip confirmation"),
):
    """Delete a custom role AND every user account holding it."""
    from estate_backend.core.exceptions import PlatformError
    from estate_backend.db.session import SessionLocal
    from estate_backend.services.role_service import role_service

    db = SessionLocal()
    try:
        role = role_service.get(db, role_id)
        holders = role_service.count_users(db, role.name)
        if not yes:
            typer.confirm(
                f"⚠️  Deleting role '{role.name}' will permanently delete "
                f"{holders} user account(s). Continue?",
                abort=True,
            )
        deleted = role_service.delete(db, role_id)
    except PlatformError as e:
        typer.echo(f"❌ {e.message}", err=True)
        raise typer.Exit(code=1)
    finally:
        db.close()
    typer.echo(f"✅ Role deleted, {deleted} user account(s) removed")


@app.command("serve")
def serve(
    host: str = typer.Option("0.0.0.0", help="Host"),
    port: int = typer.Option(8000, help="Port"),
    reload: bool = typer.Option(True, help="Auto-reload"),
):
    """Start the FastAPI development server."""
    import uvicorn
    uvicorn.run("estate_backend.main:app", host=host, port=port, reload=reload)


if __name__ == "__main__":
    app()
