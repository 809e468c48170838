"""Command-line interface for s3mini.

Commands:
    - ls: List S3 prefixes and keys across one or more addresses
    - cp: Download a single object
    - version: Show the version
"""

from typing import Annotated, List, Optional

import typer

from . import __version__
from .cli_params import (
    aws_endpoint_url_option,
    aws_profile_option,
    aws_region_option,
    delimiter_option,
    human_readable_option,
    key_regex_option,
    max_parallel_option,
    recursive_option,
    search_depth_option,
    with_date_option,
)
from .core import settings
from .core.exceptions import S3MiniError
from .objectstorage import (
    ListingEntry,
    S3ClientConfig,
    S3ClientManager,
    S3Downloader,
    ls,
)

app = typer.Typer(
    name="s3mini",
    help="A CLI tool to make working with S3 fun!",
    no_args_is_help=True,
)


def version_callback(value: bool) -> None:
    """Display version information."""
    if value:
        typer.echo(f"s3mini {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: Annotated[
        Optional[bool],
        typer.Option("--version", callback=version_callback, help="Show version."),
    ] = None,
) -> None:
    """
    s3mini: fast, concurrent listing of S3 prefixes and keys.
    """
    pass


def _create_client(
    region_name: Optional[str],
    endpoint_url: Optional[str],
    aws_profile: Optional[str],
    max_parallel: int = 10,
):
    config = S3ClientConfig(
        region_name=region_name,
        endpoint_url=endpoint_url,
        aws_profile=aws_profile,
        max_pool_connections=max_parallel,
    )
    return S3ClientManager(config).client


def format_size(num_bytes: int) -> str:
    """Render a byte count with a binary unit."""
    if num_bytes >= 1024**4:
        return f"{num_bytes / (1024**4):.1f} TB"
    elif num_bytes >= 1024**3:
        return f"{num_bytes / (1024**3):.1f} GB"
    elif num_bytes >= 1024**2:
        return f"{num_bytes / (1024**2):.1f} MB"
    elif num_bytes >= 1024:
        return f"{num_bytes / 1024:.1f} KB"
    return f"{num_bytes} B"


def format_entry(
    entry: ListingEntry, human_readable: bool = False, with_date: bool = False
) -> str:
    """Render one listing entry as an output line."""
    if entry.is_prefix:
        return f"{'DIR':>10} {entry.full_uri}"

    size = format_size(entry.size) if human_readable else str(entry.size)
    date = ""
    if with_date and entry.last_modified is not None:
        date = " " + entry.last_modified.strftime("%Y-%m-%dT%H:%M:%S")
    return f"{size:>10}{date} {entry.full_uri}"


@app.command("ls")
def ls_cmd(
    s3_uris: Annotated[List[str], typer.Argument(help="S3 URIs to list")],
    recursive: Annotated[bool, recursive_option()] = False,
    human_readable: Annotated[bool, human_readable_option()] = False,
    with_date: Annotated[bool, with_date_option()] = False,
    key_regex: Annotated[Optional[str], key_regex_option()] = None,
    delimiter: Annotated[str, delimiter_option()] = settings.delimiter,
    search_depth: Annotated[int, search_depth_option()] = settings.search_depth,
    max_parallel: Annotated[int, max_parallel_option()] = settings.max_parallel,
    region_name: Annotated[Optional[str], aws_region_option()] = None,
    endpoint_url: Annotated[Optional[str], aws_endpoint_url_option()] = None,
    aws_profile: Annotated[Optional[str], aws_profile_option()] = None,
) -> None:
    """
    List S3 prefixes.

    Examples:
        s3mini ls s3://bucket/prefix/
        s3mini ls s3://logs- --search-depth 2 -r --key-regex '\\.gz$'
    """
    try:
        client = _create_client(region_name, endpoint_url, aws_profile, max_parallel)
        with ls(
            client,
            s3_uris,
            recursive=recursive,
            delimiter=delimiter,
            search_depth=search_depth,
            key_regex=key_regex,
            max_parallel=max_parallel,
        ) as entries:
            for entry in entries:
                typer.echo(format_entry(entry, human_readable, with_date))

    except S3MiniError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)


@app.command("cp")
def cp_cmd(
    s3_uri: Annotated[str, typer.Argument(help="S3 URI of the object to download")],
    destination: Annotated[
        str, typer.Argument(help="Directory to download the object into")
    ],
    region_name: Annotated[Optional[str], aws_region_option()] = None,
    endpoint_url: Annotated[Optional[str], aws_endpoint_url_option()] = None,
    aws_profile: Annotated[Optional[str], aws_profile_option()] = None,
) -> None:
    """
    Download files from S3.

    Examples:
        s3mini cp s3://bucket/reports/2024.csv ./downloads
    """
    try:
        client = _create_client(region_name, endpoint_url, aws_profile)
        path = S3Downloader(client).download(s3_uri, destination)
        typer.echo(f"Downloaded {path.name}")

    except S3MiniError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)


@app.command("version")
def version_cmd() -> None:
    """Show the version."""
    typer.echo(f"s3mini {__version__}")


if __name__ == "__main__":
    app()
