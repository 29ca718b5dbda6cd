import sys
from pathlib import Path
from typing import NoReturn, Optional

import typer

from whiskywine.config import load_config
from whiskywine.errors import WhiskyWineError
from whiskywine.logger import setup_logger
from whiskywine.runtime.installer import WhiskyWineInstaller
from whiskywine.runtime.version import write_version_plist


app = typer.Typer(
    name="whiskywine",
    help="Inspect the Wine runtime bundled inside the Whisky app",
    add_completion=False,
)

@app.callback()
def main(
    ctx: typer.Context,
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Enable verbose logging",
    ),
    resources: Optional[Path] = typer.Option(
        None,
        "--resources",
        "-r",
        help="App bundle Resources directory (defaults to $WHISKYWINE_RESOURCES)",
    ),
    xattr: Optional[Path] = typer.Option(
        None,
        "--xattr",
        help="xattr utility used to clear the quarantine flag (default: /usr/bin/xattr)",
    ),
):

    setup_logger(verbose=verbose)
    ctx.obj = {"resources": resources, "xattr": xattr}


def _installer(ctx: typer.Context) -> WhiskyWineInstaller:
    try:
        config = load_config(
            ctx.obj["resources"],
            xattr_executable=ctx.obj["xattr"],
        )
    except WhiskyWineError as exc:
        _fail(exc)
    return WhiskyWineInstaller(config)


def _fail(exc: WhiskyWineError) -> NoReturn:
    typer.secho(f"Error: {exc}", fg=typer.colors.RED, err=True)
    sys.exit(exc.exit_code)

@app.command()
def status(ctx: typer.Context):
    installer = _installer(ctx)

    version = installer.whisky_wine_version()
    installed = installer.is_whisky_wine_installed()

    typer.echo(f"Libraries: {installer.library_folder}")
    typer.echo(f"Installed: {'yes' if installed else 'no'}")
    typer.echo(f"Version:   {version if version else 'unknown'}")

@app.command()
def version(ctx: typer.Context):
    installer = _installer(ctx)

    current = installer.whisky_wine_version()
    if current is None:
        typer.secho(
            "No readable WhiskyWineVersion.plist found",
            fg=typer.colors.YELLOW,
            err=True,
        )
        sys.exit(1)

    typer.echo(str(current))

@app.command()
def install(
    ctx: typer.Context,
    source: Optional[str] = typer.Option(
        None,
        "--from",
        help="Ignored; Wine is bundled with the app",
    ),
):
    installer = _installer(ctx)

    typer.echo("Clearing quarantine attribute on bundled Wine")
    installer.install(source)

@app.command()
def uninstall(ctx: typer.Context):
    installer = _installer(ctx)
    installer.uninstall()

@app.command("check-update")
def check_update(ctx: typer.Context):
    installer = _installer(ctx)

    _, current = installer.should_update_whisky_wine()
    typer.echo(f"No update available (current: {current})")

@app.command(hidden=True)
def stamp(
    ctx: typer.Context,
    version_string: str = typer.Argument(..., metavar="VERSION"),
):
    installer = _installer(ctx)

    try:
        info = write_version_plist(installer.version_plist, version_string)
    except WhiskyWineError as exc:
        _fail(exc)

    typer.echo(f"Wrote {installer.version_plist} ({info.version})")

def run_cli() -> None:
    app()


if __name__ == "__main__":
    run_cli()
