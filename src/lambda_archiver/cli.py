"""Main CLI entry point for lambda-archiver."""

from __future__ import annotations

from pathlib import Path

import click

from .builder import ArchiveBuilder
from .config import DEFAULT_CONFIG_PATH, PackageConfig
from .errors import PackagingError, SizeLimitExceeded
from .files import collect_entries
from .permissions import PermissionPolicy
from .reporter import ClickReporter
from .sizing import (
    SIZE_LIMIT_MB,
    directory_size,
    ensure_within_size_limit,
    format_megabytes,
)


@click.group()
def cli():
    """Lambda Archiver: packages a built application into a deployable app.zip."""
    pass


@cli.command()
@click.argument("environment")
@click.option(
    "--config",
    type=click.Path(path_type=Path),
    default=Path(DEFAULT_CONFIG_PATH),
    help="Path to the archiver config YAML.",
)
@click.option(
    "--app-path",
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    default=Path(".vapor/build/app"),
    help="Root of the built application.",
)
@click.option(
    "--build-path",
    type=click.Path(file_okay=False, path_type=Path),
    default=Path(".vapor/build"),
    help="Directory that receives app.zip.",
)
@click.pass_context
def compress(ctx, environment: str, config: Path, app_path: Path, build_path: Path):
    """Compresses the built application for ENVIRONMENT into app.zip."""
    reporter = ClickReporter()

    try:
        pkg_cfg = PackageConfig.from_yaml(config)
        env_cfg = pkg_cfg.environment(environment)

        if env_cfg.uses_container_image:
            click.echo("Skipping compression (container image)")
            return

        builder = ArchiveBuilder(
            reporter=reporter,
            permissions=PermissionPolicy(pkg_cfg.permissions),
            settings=pkg_cfg.archive,
        )
        archive = builder.build(
            app_path,
            build_path,
            collect_entries(app_path, pkg_cfg.exclude),
        )
    except PackagingError as e:
        reporter.error(str(e))
        ctx.exit(1)

    click.secho(f"Archive written: {archive}", fg="green")


@cli.command()
@click.argument(
    "path", type=click.Path(exists=True, file_okay=False, path_type=Path)
)
@click.pass_context
def size(ctx, path: Path):
    """Reports the uncompressed size of PATH against the deployment limit."""
    try:
        size_in_bytes = directory_size(path)
    except PackagingError as e:
        click.secho(str(e), fg="red", err=True)
        ctx.exit(1)

    click.echo(f"{path}: {format_megabytes(size_in_bytes)}MB")

    try:
        ensure_within_size_limit(size_in_bytes)
    except SizeLimitExceeded as e:
        click.secho(str(e), fg="red")
        ctx.exit(1)

    click.secho(f"Within the {SIZE_LIMIT_MB}MB limit.", fg="green")


if __name__ == "__main__":
    cli()
