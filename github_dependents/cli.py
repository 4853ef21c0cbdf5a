"""github-dependents CLI: list the dependents of a GitHub repository.

Usage:
    github-dependents list OWNER REPOSITORY                 # First page, JSON lines
    github-dependents list OWNER REPOSITORY --pages 5       # Up to five pages
    github-dependents list OWNER REPOSITORY --format table
    github-dependents list OWNER REPOSITORY --package-id ID --output deps.jsonl
    github-dependents packages OWNER REPOSITORY             # Package IDs
"""

from __future__ import annotations

import json
import logging
import sys
from typing import TextIO

import click

from github_dependents.common.exceptions import (
    FetchException,
    InvalidPageBudgetException,
    ScraperAssumptionException,
)
from github_dependents.data_types import GITHUB_HOST, Dependent
from github_dependents.dependents import (
    dependents_url,
    list_packages,
)
from github_dependents.driver.callbacks import (
    combine_callbacks,
    count_data,
    save_to_jsonl_file,
)
from github_dependents.driver.sync_driver import SyncDriver, check_page_budget

logger = logging.getLogger(__name__)


def _configure_logging(verbose: bool) -> None:
    log_level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )
    # httpx logs every request at INFO; the driver already does.
    logging.getLogger("httpx").setLevel(logging.WARNING)


def _table_row(dependent: Dependent) -> str:
    return f"{dependent.full_name:<60} {dependent.stars:>8} {dependent.forks:>8}"


@click.group()
@click.version_option(package_name="github-dependents")
def cli() -> None:
    """List the repositories that depend on a GitHub repository."""


@cli.command("list")
@click.argument("owner")
@click.argument("repository")
@click.option(
    "--package-id",
    default=None,
    help="Scope the listing to one package (see the 'packages' command).",
)
@click.option(
    "--pages",
    type=int,
    default=1,
    show_default=True,
    help="Maximum number of pages to fetch (30 dependents per page).",
)
@click.option(
    "--format",
    "output_format",
    type=click.Choice(["jsonl", "json", "table"]),
    default="jsonl",
    show_default=True,
    help="Output format.",
)
@click.option(
    "--output",
    type=click.File("w"),
    default="-",
    help="Write records to this file instead of stdout.",
)
@click.option("--host", default=GITHUB_HOST, show_default=True, help="GitHub host.")
@click.option(
    "--timeout",
    type=float,
    default=30.0,
    show_default=True,
    help="Request timeout in seconds.",
)
@click.option("-v", "--verbose", is_flag=True, help="Verbose logging.")
def list_dependents(
    owner: str,
    repository: str,
    package_id: str | None,
    pages: int,
    output_format: str,
    output: TextIO,
    host: str,
    timeout: float,
    verbose: bool,
) -> None:
    """List the dependents of OWNER/REPOSITORY.

    \b
    Examples:
        github-dependents list dotnet roslyn
        github-dependents list dotnet roslyn --pages 2 --format table
    """
    _configure_logging(verbose)

    try:
        check_page_budget(pages)
    except InvalidPageBudgetException as e:
        raise click.BadParameter(str(e), param_hint="--pages") from e

    counter = [0]
    collected: list[dict] = []
    if output_format == "jsonl":
        on_data = combine_callbacks(save_to_jsonl_file(output), count_data(counter))
    elif output_format == "json":
        on_data = combine_callbacks(
            lambda d: collected.append(d.model_dump()), count_data(counter)
        )
    else:
        click.echo(f"{'REPOSITORY':<60} {'STARS':>8} {'FORKS':>8}", file=output)
        on_data = combine_callbacks(
            lambda d: click.echo(_table_row(d), file=output),
            count_data(counter),
        )

    driver = SyncDriver(timeout=timeout, on_data=on_data)
    url = dependents_url(owner, repository, package_id, host)
    try:
        driver.run(url, pages)
    except (ScraperAssumptionException, FetchException) as e:
        raise click.ClickException(str(e)) from e
    finally:
        # records from pages read before a failure are still written
        if output_format == "json":
            json.dump(collected, output, indent=2)
            output.write("\n")

    logger.info(f"Found {counter[0]} dependents of {owner}/{repository}")


@cli.command()
@click.argument("owner")
@click.argument("repository")
@click.option("--host", default=GITHUB_HOST, show_default=True, help="GitHub host.")
@click.option(
    "--timeout",
    type=float,
    default=30.0,
    show_default=True,
    help="Request timeout in seconds.",
)
@click.option("-v", "--verbose", is_flag=True, help="Verbose logging.")
def packages(
    owner: str, repository: str, host: str, timeout: float, verbose: bool
) -> None:
    """List the packages of OWNER/REPOSITORY and their package IDs."""
    _configure_logging(verbose)

    try:
        found = list_packages(owner, repository, timeout=timeout, host=host)
    except (ScraperAssumptionException, FetchException) as e:
        raise click.ClickException(str(e)) from e

    if not found:
        click.echo(f"{owner}/{repository} lists no separate packages.")
        return
    for package in found:
        click.echo(f"{package.package_id}\t{package.name}")


def main() -> None:
    cli()


if __name__ == "__main__":
    main()
