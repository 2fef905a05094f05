"""Command-line interface for bucketfs.

This module exposes the bucket-backed file system as shell commands.

Commands:
    - dirs: List immediate subdirectories
    - files: List file names under a directory
    - exists: Check whether a file (or, with --dir, a directory) exists
    - cat: Write a file's content to stdout
    - put: Upload a local file
    - rm: Delete a file
    - rmdir: Delete a directory and everything under it
    - url: Print the public URL of a path
    - stat: Show key, URL and last-modified time of a file

Connection options (--bucket, --region, --media-root, credentials) are given
before the command name and shared by all commands.
"""

from pathlib import Path
from typing import Annotated, NoReturn, Optional

import typer
from pydantic import ValidationError as ConfigError

from . import __version__
from .cli_params import (
    AccessKeyIdOption,
    AwsProfileOption,
    BucketOption,
    EndpointUrlOption,
    HttpsOption,
    MediaRootOption,
    PathArgument,
    RegionOption,
    SecretAccessKeyOption,
    SessionTokenOption,
)
from .core.exceptions import BucketFSError, ValidationError
from .filesystem import MIN_TIMESTAMP, S3FileSystem
from .schemas import S3StorageConfig

app = typer.Typer(
    name="bucketfs",
    help="Browse and manage an S3 bucket as a hierarchical file system.",
    no_args_is_help=True,
)


def version_callback(value: bool) -> None:
    """Display version information."""
    if value:
        typer.echo(f"bucketfs {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    ctx: typer.Context,
    bucket: BucketOption,
    region: RegionOption = "us-east-1",
    media_root: MediaRootOption = None,
    https: HttpsOption = True,
    access_key_id: AccessKeyIdOption = None,
    secret_access_key: SecretAccessKeyOption = None,
    session_token: SessionTokenOption = None,
    endpoint_url: EndpointUrlOption = None,
    aws_profile: AwsProfileOption = None,
    version: Annotated[
        Optional[bool],
        typer.Option(
            "--version",
            callback=version_callback,
            is_eager=True,
            help="Show version.",
        ),
    ] = None,
) -> None:
    """
    BucketFS: an S3 bucket seen as directories and files.
    """
    ctx.obj = {
        "bucket_name": bucket,
        "region": region,
        "media_root": media_root,
        "use_https": https,
        "access_key_id": access_key_id,
        "secret_access_key": secret_access_key,
        "session_token": session_token,
        "endpoint_url": endpoint_url,
        "aws_profile": aws_profile,
    }


def _filesystem(ctx: typer.Context) -> S3FileSystem:
    """Build the file system from the connection options."""
    return S3FileSystem(S3StorageConfig(**ctx.obj))


def _fail(error: Exception) -> NoReturn:
    typer.echo(f"Error: {error}", err=True)
    raise typer.Exit(1)


@app.command("dirs")
def dirs_cmd(ctx: typer.Context, path: PathArgument = "") -> None:
    """List the immediate subdirectories of PATH."""
    try:
        directories = _filesystem(ctx).get_directories(path)
    except (BucketFSError, ConfigError) as e:
        _fail(e)

    if directories:
        typer.echo(f"Found {len(directories)} directories:")
        for directory in directories:
            typer.echo(f"  {directory}")
    else:
        typer.echo("No directories found.")


@app.command("files")
def files_cmd(ctx: typer.Context, path: PathArgument = "") -> None:
    """List the names of all files under PATH, including nested ones."""
    try:
        files = _filesystem(ctx).get_files(path)
    except (BucketFSError, ConfigError) as e:
        _fail(e)

    if files:
        typer.echo(f"Found {len(files)} files:")
        for name in files:
            typer.echo(f"  {name}")
    else:
        typer.echo("No files found.")


@app.command("exists")
def exists_cmd(
    ctx: typer.Context,
    path: PathArgument,
    directory: Annotated[
        bool, typer.Option("--dir", help="Check for a directory instead of a file")
    ] = False,
) -> None:
    """Exit with status 0 if PATH exists, 1 otherwise."""
    try:
        fs = _filesystem(ctx)
        found = fs.directory_exists(path) if directory else fs.file_exists(path)
    except (BucketFSError, ConfigError) as e:
        _fail(e)

    kind = "Directory" if directory else "File"
    if found:
        typer.echo(f"{kind} exists: {path}")
    else:
        typer.echo(f"{kind} not found: {path}", err=True)
        raise typer.Exit(1)


@app.command("cat")
def cat_cmd(ctx: typer.Context, path: PathArgument) -> None:
    """Write the content of the file at PATH to stdout."""
    try:
        stream = _filesystem(ctx).open_file(path)
    except (BucketFSError, ConfigError) as e:
        _fail(e)

    typer.echo(stream.read(), nl=False)


@app.command("put")
def put_cmd(
    ctx: typer.Context,
    source: Annotated[
        Path,
        typer.Argument(
            exists=True, dir_okay=False, readable=True, help="Local file to upload"
        ),
    ],
    path: PathArgument,
    overwrite: Annotated[
        bool, typer.Option("--overwrite", help="Replace an existing file")
    ] = False,
) -> None:
    """Upload SOURCE to PATH."""
    try:
        fs = _filesystem(ctx)
        with source.open("rb") as data:
            fs.add_file(path, data, overwrite=overwrite)
    except (BucketFSError, ConfigError) as e:
        _fail(e)

    typer.echo(f"Uploaded {source} to {fs.get_url(path)}")


@app.command("rm")
def rm_cmd(ctx: typer.Context, path: PathArgument) -> None:
    """Delete the file at PATH."""
    try:
        _filesystem(ctx).delete_file(path)
    except (BucketFSError, ConfigError) as e:
        _fail(e)

    typer.echo(f"Deleted {path}")


@app.command("rmdir")
def rmdir_cmd(ctx: typer.Context, path: PathArgument) -> None:
    """Delete the directory PATH and every file below it."""
    try:
        fs = _filesystem(ctx)
        if fs.paths.is_root(path):
            raise ValidationError(f"Refusing to delete the media root: {path!r}")
        fs.delete_directory(path, recursive=True)
    except (BucketFSError, ConfigError) as e:
        _fail(e)

    typer.echo(f"Deleted directory {path}")


@app.command("url")
def url_cmd(ctx: typer.Context, path: PathArgument) -> None:
    """Print the public URL of PATH."""
    try:
        typer.echo(_filesystem(ctx).get_url(path))
    except (BucketFSError, ConfigError) as e:
        _fail(e)


@app.command("stat")
def stat_cmd(ctx: typer.Context, path: PathArgument) -> None:
    """Show the key, URL and last-modified time of the file at PATH."""
    try:
        fs = _filesystem(ctx)
        key = fs.get_relative_path(path)
        modified = fs.get_last_modified(key)
    except (BucketFSError, ConfigError) as e:
        _fail(e)

    typer.echo(f"Key: {key}")
    typer.echo(f"Path: {fs.paths.to_relative_path(key)}")
    typer.echo(f"URL: {fs.get_url(key)}")
    if modified == MIN_TIMESTAMP:
        typer.echo("Last modified: unknown")
    else:
        typer.echo(f"Last modified: {modified.isoformat()}")


if __name__ == "__main__":
    app()
