"""
Content schema sync command.

Boots a content package against the configured database and reports which
content groups were created, updated and removed.

Usage:
    python -m sitecontent.commands.sync_content --package mysite.content:SiteContent
    python -m sitecontent.commands.sync_content --dry-run
    python -m sitecontent.commands.sync_content --yaml content.yml
"""

import argparse
import asyncio
import logging
import sys
from typing import List, Optional, Type

from sitecontent.config import settings
from sitecontent.core.clock import SystemClock
from sitecontent.core.content.package import ContentPackage, load_content_package_class
from sitecontent.core.content.repository import SqlAlchemyContentGroupRepository
from sitecontent.core.content.schema_sync import SchemaSyncPlan
from sitecontent.core.content.yaml_definition import YamlContentPackage
from sitecontent.core.errors import ContentError
from sitecontent.core.shared.database_service import database_service

logging.basicConfig(level=logging.INFO, format="%(levelname)s: %(message)s")
logger = logging.getLogger("sitecontent.commands.sync_content")


class _DryRun(Exception):
    """Raised inside the session scope to roll back a dry run."""


def resolve_package(package: Optional[str], yaml_path: Optional[str]) -> Type[ContentPackage]:
    if yaml_path:
        return type("CommandYamlContentPackage", (YamlContentPackage,), {"definition_path": yaml_path})

    reference = package or settings.content_package
    if not reference:
        raise ContentError("No content package given: use --package, --yaml or set CONTENT_PACKAGE")
    return load_content_package_class(reference)


def format_plan(plan: SchemaSyncPlan) -> List[str]:
    lines = []
    for label, groups in (
        ("create", plan.to_create),
        ("update", plan.to_update),
        ("remove", plan.to_remove),
    ):
        for group in groups:
            lines.append(f"  {label:<7} {group.key}")
    summary = plan.summary()
    lines.append(
        f"{summary['created']} created, {summary['updated']} updated, "
        f"{summary['removed']} removed, {summary['unchanged']} unchanged"
    )
    return lines


async def sync(package_cls: Type[ContentPackage], dry_run: bool = False) -> List[str]:
    """Boot the package and return the formatted plan; a dry run rolls back."""
    await database_service.init_db()

    lines: List[str] = []
    try:
        async with database_service.get_session() as session:
            package = package_cls(SqlAlchemyContentGroupRepository(session), SystemClock())
            context = await package.boot()
            # Format while the session is open; rollback expires the groups
            lines = format_plan(context.sync_plan)
            if dry_run:
                raise _DryRun()
    except _DryRun:
        logger.info("Dry run: changes rolled back")
    finally:
        await database_service.close()

    return lines


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Sync stored content groups with the declared content")
    parser.add_argument("--package", help="Content package class as 'module.path:ClassName'")
    parser.add_argument("--yaml", dest="yaml_path", help="YAML content declaration to sync instead of a class")
    parser.add_argument("--dry-run", action="store_true", help="Report changes without committing them")
    args = parser.parse_args(argv)

    try:
        package_cls = resolve_package(args.package, args.yaml_path)
        lines = asyncio.run(sync(package_cls, dry_run=args.dry_run))
    except (ContentError, NotImplementedError) as e:
        logger.error(str(e))
        return 1

    for line in lines:
        print(line)
    return 0


if __name__ == "__main__":
    sys.exit(main())
