"""``cinevault`` command line: run the API and manage its database."""

import asyncio
import sys
from typing import NoReturn

import click

from cinevault import __version__
from cinevault.core.config import Settings, get_settings
from cinevault.core.logging import configure_logging, get_logger

MIN_USERNAME, MAX_USERNAME = 3, 50
MIN_PASSWORD = 6


def fail(message: str) -> NoReturn:
    click.secho(f"Error: {message}", fg="red", err=True)
    sys.exit(1)


@click.group()
@click.version_option(version=__version__, prog_name="cinevault")
def cli() -> None:
    """CineVault movie catalog service.

    Configuration comes from CINEVAULT_* environment variables or a .env file.
    """


@cli.command()
@click.option("--host", default=None, help="Bind address. Defaults to CINEVAULT_HOST.")
@click.option("--port", type=int, default=None, help="Bind port. Defaults to CINEVAULT_PORT.")
@click.option("--workers", type=int, default=None, help="Worker processes. Defaults to CINEVAULT_WORKERS.")
@click.option(
    "--reload/--no-reload",
    default=None,
    help="Restart on code changes. On by default in development.",
)
def serve(host: str | None, port: int | None, workers: int | None, reload: bool | None) -> None:
    """Run the HTTP API with uvicorn."""
    import uvicorn

    settings = get_settings()
    configure_logging(settings)

    if reload is None:
        reload = settings.is_development
    # uvicorn ignores workers when reloading.
    worker_count = 1 if reload else (workers or settings.workers)
    if worker_count > 1 and settings.database_url.startswith("sqlite"):
        fail("SQLite cannot be shared by multiple worker processes; use --workers 1")

    get_logger(__name__).info(
        "Launching server",
        host=host or settings.host,
        port=port or settings.port,
        workers=worker_count,
        reload=reload,
    )
    uvicorn.run(
        "cinevault.infrastructure.api.app:app",
        host=host or settings.host,
        port=port or settings.port,
        workers=worker_count,
        reload=reload,
        log_level=settings.log_level.lower(),
    )


@cli.command("init-db")
@click.option("--force", is_flag=True, help="Do not ask for confirmation.")
def init_db(force: bool) -> None:
    """Create any missing tables in the configured database."""
    from cinevault.infrastructure.persistence.database import close_database, init_database

    settings = get_settings()
    configure_logging(settings)

    if settings.is_production and not force:
        fail("refusing to touch a production database without --force")
    if not force:
        click.confirm(f"Create tables in {settings.database_url}?", abort=True)

    async def run() -> None:
        try:
            await init_database()
        finally:
            await close_database()

    asyncio.run(run())
    click.secho("Database ready.", fg="green")


@cli.command("create-user")
@click.option("--username", default=None, help="Login name. Prompted for when omitted.")
@click.option("--password", default=None, help="Password. Prompted for when omitted.")
def create_user(username: str | None, password: str | None) -> None:
    """Register a user account directly in the database."""
    from cinevault.domain.services import AuthService, UsernameTakenError
    from cinevault.infrastructure.auth import get_jwt_service
    from cinevault.infrastructure.persistence.database import (
        close_database,
        get_db_manager,
        init_database,
    )

    configure_logging(get_settings())

    username = username or click.prompt("Username")
    password = password or click.prompt("Password", hide_input=True, confirmation_prompt=True)

    if not MIN_USERNAME <= len(username) <= MAX_USERNAME:
        fail(f"username must be {MIN_USERNAME}-{MAX_USERNAME} characters")
    if len(password) < MIN_PASSWORD:
        fail(f"password must be at least {MIN_PASSWORD} characters")

    async def run() -> int:
        try:
            await init_database()
            async with get_db_manager().session() as session:
                user = await AuthService(session, get_jwt_service()).register(username, password)
                return user.id
        finally:
            await close_database()

    try:
        user_id = asyncio.run(run())
    except UsernameTakenError as e:
        fail(str(e))

    get_logger(__name__).info("User created from CLI", user_id=user_id)
    click.secho(f"Created user {username!r} (id {user_id}).", fg="green")


def _describe(settings: Settings) -> list[tuple[str, list[tuple[str, object]]]]:
    secrets = "placeholder, change before deploying" if settings.uses_default_secrets else "set"
    return [
        ("Application", [
            ("environment", settings.environment),
            ("debug", settings.debug),
            ("api prefix", settings.api_prefix),
        ]),
        ("Server", [
            ("bind", f"{settings.host}:{settings.port}"),
            ("workers", settings.workers),
        ]),
        ("Database", [
            ("url", settings.database_url),
            ("echo", settings.db_echo),
        ]),
        ("Tokens", [
            ("access lifetime", f"{settings.access_token_expire_minutes} min"),
            ("refresh lifetime", f"{settings.refresh_token_expire_days} days"),
            ("secrets", secrets),
        ]),
        ("Storage", [
            ("path", settings.storage_path),
            ("max file size", f"{settings.max_file_size} bytes"),
            ("upload timeout", f"{settings.upload_timeout_seconds} s"),
        ]),
        ("Logging", [
            ("level", settings.log_level),
            ("format", settings.log_format),
        ]),
    ]


@cli.command()
def info() -> None:
    """Print the effective configuration."""
    settings = get_settings()
    click.secho(f"CineVault {settings.app_version}", bold=True)
    for section, rows in _describe(settings):
        click.echo(f"\n{section}")
        for label, value in rows:
            click.echo(f"  {label:<18}{value}")


def main() -> None:
    cli()


if __name__ == "__main__":
    main()
