"""Shared CLI parameter definitions.

Each function returns a Typer option to use as ``Annotated`` metadata, so
option names and help text live in one place:

    @app.command()
    def my_command(
        region_name: Annotated[Optional[str], aws_region_option()] = None,
    ):
        pass

Parameter Categories:
    - Listing parameters: how addresses are expanded and filtered
    - Output parameters: how entries are rendered
    - AWS parameters: how the S3 client is built
"""

from typing import Annotated, Optional

import typer


def recursive_option() -> Annotated[bool, typer.Option]:
    """Recursive listing option."""
    return typer.Option("--recursive", "-r", help="Get all keys for this prefix")


def delimiter_option() -> Annotated[str, typer.Option]:
    """Delimiter option."""
    return typer.Option("--delimiter", help="Delimiter to use while listing")


def search_depth_option() -> Annotated[int, typer.Option]:
    """Search depth option."""
    return typer.Option(
        "--search-depth",
        min=0,
        help="Dictates how many prefix groups to walk down",
    )


def max_parallel_option() -> Annotated[int, typer.Option]:
    """Max parallel option."""
    return typer.Option(
        "--max-parallel",
        "-p",
        min=1,
        help="Maximum number of calls to make to S3 simultaneously",
    )


def key_regex_option() -> Annotated[Optional[str], typer.Option]:
    """Key regex option."""
    return typer.Option("--key-regex", help="Regex filter for keys")


def human_readable_option() -> Annotated[bool, typer.Option]:
    """Human-readable sizes option."""
    return typer.Option(
        "--human-readable", "-H", help="Output human-readable object sizes"
    )


def with_date_option() -> Annotated[bool, typer.Option]:
    """Last-modified date option."""
    return typer.Option("--with-date", "-d", help="Include the last modified date")


def aws_region_option() -> Annotated[Optional[str], typer.Option]:
    """AWS region option."""
    return typer.Option("--region", help="AWS region name")


def aws_endpoint_url_option() -> Annotated[Optional[str], typer.Option]:
    """AWS endpoint URL option."""
    return typer.Option("--endpoint-url", help="Custom S3 endpoint URL")


def aws_profile_option() -> Annotated[Optional[str], typer.Option]:
    """AWS profile option."""
    return typer.Option("--aws-profile", help="AWS CLI profile name")
