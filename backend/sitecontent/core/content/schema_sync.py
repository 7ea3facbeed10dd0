"""
Content schema sync.

Reconciles persisted content groups with the declared ContentSchema. Runs on
every boot:

    - groups persisted under a module but no longer declared are removed
    - declared groups with no persisted counterpart are created with one empty
      entry per declared area
    - groups present on both sides keep their values; areas absent from the
      schema are dropped and newly declared areas are appended empty
    - groups whose namespace is no longer a declared module are removed

Matching is by group name within a module's namespace. An area that is dropped
and later redeclared comes back empty.

Usage:
    synchronizer = ContentSchemaSynchronizer(repository, clock)
    plan = await synchronizer.sync(schema)
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, Iterable, List

from ..clock import Clock
from ..database.models import ContentGroup, ContentMetadata, HtmlContentArea, ImageContentArea
from .definition import ContentGroupSchema, ContentSchema
from .repository import ContentGroupRepository

logger = logging.getLogger("sitecontent.content.sync")


@dataclass
class SchemaSyncPlan:
    """Result of reconciling persisted groups with the declared schema."""

    to_remove: List[ContentGroup] = field(default_factory=list)
    to_create: List[ContentGroup] = field(default_factory=list)
    to_update: List[ContentGroup] = field(default_factory=list)
    unchanged: List[ContentGroup] = field(default_factory=list)

    @property
    def to_save(self) -> List[ContentGroup]:
        return self.to_update + self.to_create

    @property
    def has_changes(self) -> bool:
        return bool(self.to_remove or self.to_create or self.to_update)

    def summary(self) -> Dict[str, int]:
        return {
            "created": len(self.to_create),
            "updated": len(self.to_update),
            "removed": len(self.to_remove),
            "unchanged": len(self.unchanged),
        }


def build_content_group(namespace: str, schema: ContentGroupSchema, clock: Clock) -> ContentGroup:
    """Create a group holding one empty entry per declared area."""
    group = ContentGroup.create(namespace, schema.name, clock)

    for name in schema.html_areas:
        group.add_html_area(HtmlContentArea(name))

    for name in schema.images:
        group.add_image_area(ImageContentArea(name))

    for name in schema.metadata:
        group.add_metadata(ContentMetadata(name))

    return group


def _sync_collection(collection: list, declared_names: Iterable[str], factory) -> bool:
    declared = list(declared_names)
    changed = False

    for entry in [e for e in collection if e.name not in declared]:
        collection.remove(entry)
        changed = True

    live_names = {entry.name for entry in collection}
    for name in declared:
        if name not in live_names:
            collection.append(factory(name))
            changed = True

    return changed


def sync_content_group(group: ContentGroup, schema: ContentGroupSchema) -> bool:
    """
    Bring a persisted group's areas in line with its schema, in place.

    Returns True if any area was added or removed. Values of areas that stay
    declared are never touched.
    """
    html_changed = _sync_collection(group.html_content_areas, schema.html_areas, HtmlContentArea)
    images_changed = _sync_collection(group.image_content_areas, schema.images, ImageContentArea)
    metadata_changed = _sync_collection(group.metadata_items, schema.metadata, ContentMetadata)
    return html_changed or images_changed or metadata_changed


def plan_schema_sync(
    schema: ContentSchema,
    persisted_groups: Iterable[ContentGroup],
    clock: Clock,
) -> SchemaSyncPlan:
    """
    Compute the groups to remove, create and update for ``schema``.

    Matched groups are mutated in place; nothing is persisted here.
    """
    namespaced: Dict[str, Dict[str, ContentGroup]] = {}
    for group in persisted_groups:
        namespaced.setdefault(group.namespace, {})[group.name] = group

    plan = SchemaSyncPlan()

    for module in schema:
        existing = namespaced.get(module.name, {})

        for name, group in existing.items():
            if name not in module.groups:
                plan.to_remove.append(group)

        for name, group_schema in module.groups.items():
            group = existing.get(name)
            if group is None:
                plan.to_create.append(build_content_group(module.name, group_schema, clock))
            elif sync_content_group(group, group_schema):
                group.touch(clock)
                plan.to_update.append(group)
            else:
                plan.unchanged.append(group)

    declared_modules = set(schema.module_names())
    for namespace, groups in namespaced.items():
        if namespace not in declared_modules:
            plan.to_remove.extend(groups.values())

    return plan


class ContentSchemaSynchronizer:
    """Applies a SchemaSyncPlan through a ContentGroupRepository."""

    def __init__(self, repository: ContentGroupRepository, clock: Clock):
        self.repository = repository
        self.clock = clock

    async def plan(self, schema: ContentSchema) -> SchemaSyncPlan:
        persisted = await self.repository.get_all()
        return plan_schema_sync(schema, persisted, self.clock)

    async def sync(self, schema: ContentSchema) -> SchemaSyncPlan:
        """
        Reconcile the repository with ``schema``.

        Removals are applied before saves. Repository errors propagate.
        """
        plan = await self.plan(schema)

        for group in plan.to_remove:
            logger.debug(f"Removing content group {group.key}")
        for group in plan.to_create:
            logger.debug(f"Creating content group {group.key}")
        for group in plan.to_update:
            logger.debug(f"Updating areas of content group {group.key}")

        try:
            if plan.to_remove:
                await self.repository.remove_all(plan.to_remove)
            if plan.to_save:
                await self.repository.save_all(plan.to_save)
        except Exception as e:
            logger.error(f"Content schema sync failed: {e}")
            raise

        logger.info(f"Content schema synced: {plan.summary()}")
        return plan
