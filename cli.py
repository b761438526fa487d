#!/usr/bin/env python3
"""
Cascade page migration CLI

Assemble Cascade page payloads from source documents.
"""

import json
import sys
from typing import Optional

import click

from config import DEFAULT_CMS_PATH, DEFAULT_OUTPUT_FORMAT, OUTPUT_FORMATS
from logging_config import logger
from cascade_migration import (
    CascadeDestination,
    MigrationError,
    MigrationLogger,
    load_project_file,
    setup_page_object,
)


def build_auth(
    api_key: Optional[str], username: Optional[str], password: Optional[str]
) -> Optional[dict]:
    """Cascade REST credentials as request parameters"""
    if api_key:
        return {"apiKey": api_key}
    if username and password:
        return {"u": username, "p": password}
    return None


@click.group()
def main():
    """Cascade page migration - build Cascade pages from source documents"""
    pass


@main.command()
@click.argument("page_file", type=click.Path(exists=True, dir_okay=False))
@click.option(
    "--project",
    "project_file",
    required=True,
    type=click.Path(exists=True, dir_okay=False),
    help="Project JSON with field mappings and lookup tables",
)
@click.option("--cms-path", default=DEFAULT_CMS_PATH, help="Cascade Server URL")
@click.option("--api-key", envvar="CASCADE_API_KEY", help="API key for authentication")
@click.option("--username", envvar="CASCADE_USERNAME", help="Username for authentication")
@click.option("--password", envvar="CASCADE_PASSWORD", help="Password for authentication")
@click.option("--log-file", help="Append this page's migration log to a JSONL file")
@click.option(
    "--output", "output_file", type=click.Path(dir_okay=False), help="Write page JSON here"
)
@click.option(
    "--format",
    "output_format",
    type=click.Choice(OUTPUT_FORMATS),
    default=DEFAULT_OUTPUT_FORMAT,
    help="json prints the page payload, summary only the migration log",
)
def assemble(
    page_file: str,
    project_file: str,
    cms_path: str,
    api_key: Optional[str],
    username: Optional[str],
    password: Optional[str],
    log_file: Optional[str],
    output_file: Optional[str],
    output_format: str,
):
    """Assemble one page and print its Cascade payload"""
    try:
        project = load_project_file(project_file)
    except MigrationError as e:
        click.echo(f"❌ {e}", err=True)
        sys.exit(1)

    auth = build_auth(api_key, username, password)
    destination = CascadeDestination(project, cms_path if auth else None, auth)
    migration_log = MigrationLogger(file_path=page_file)
    if log_file:
        migration_log.set_global_log_file(log_file)

    try:
        page = setup_page_object(page_file, project, destination, migration_log)
    except MigrationError as e:
        logger.log_error(e, {"page_file": page_file})
        click.echo(f"❌ {e}", err=True)
        sys.exit(1)
    finally:
        migration_log.write_to_global_log()

    payload = {"asset": {"page": page.to_dict()}}

    if output_format == "json":
        if output_file:
            with open(output_file, "w", encoding="utf-8") as f:
                json.dump(payload, f, indent=2)
            click.echo(f"✅ Wrote {page.path} to {output_file}", err=True)
        else:
            click.echo(json.dumps(payload, indent=2))
        click.echo(migration_log.format_summary(), err=True)
    else:
        click.echo(migration_log.format_summary())


if __name__ == "__main__":
    main()
