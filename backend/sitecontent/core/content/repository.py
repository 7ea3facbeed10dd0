"""
Content group repositories.

ContentGroupRepository is the persistence contract used by schema sync, the
loader and the editing modules. Two implementations:

    - SqlAlchemyContentGroupRepository: backed by an AsyncSession; commits are
      owned by the session scope (DatabaseService.get_session)
    - InMemoryContentGroupRepository: list-backed, for tests and sites that
      keep content in memory
"""

from abc import ABC, abstractmethod
from typing import Dict, Iterable, List, Optional, Tuple

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from ..database.models import ContentGroup


class ContentGroupRepository(ABC):
    @abstractmethod
    async def get_all(self) -> List[ContentGroup]:
        """Return every persisted content group."""

    @abstractmethod
    async def find(self, namespace: str, name: str) -> Optional[ContentGroup]:
        """Return the group identified by (namespace, name), or None."""

    @abstractmethod
    async def save_all(self, groups: Iterable[ContentGroup]) -> None:
        """Insert or update the given groups."""

    @abstractmethod
    async def remove_all(self, groups: Iterable[ContentGroup]) -> None:
        """Delete the given groups and their areas."""

    async def get_all_in_namespace(self, namespace: str) -> List[ContentGroup]:
        return [group for group in await self.get_all() if group.namespace == namespace]

    async def save(self, group: ContentGroup) -> None:
        await self.save_all([group])


class SqlAlchemyContentGroupRepository(ContentGroupRepository):
    """Repository over an async SQLAlchemy session."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_all(self) -> List[ContentGroup]:
        result = await self.session.execute(
            select(ContentGroup).order_by(ContentGroup.namespace, ContentGroup.name)
        )
        return list(result.scalars().all())

    async def get_all_in_namespace(self, namespace: str) -> List[ContentGroup]:
        result = await self.session.execute(
            select(ContentGroup)
            .where(ContentGroup.namespace == namespace)
            .order_by(ContentGroup.name)
        )
        return list(result.scalars().all())

    async def find(self, namespace: str, name: str) -> Optional[ContentGroup]:
        result = await self.session.execute(
            select(ContentGroup).where(
                ContentGroup.namespace == namespace,
                ContentGroup.name == name,
            )
        )
        return result.scalar_one_or_none()

    async def save_all(self, groups: Iterable[ContentGroup]) -> None:
        self.session.add_all(list(groups))
        await self.session.flush()

    async def remove_all(self, groups: Iterable[ContentGroup]) -> None:
        for group in groups:
            await self.session.delete(group)
        await self.session.flush()


class InMemoryContentGroupRepository(ContentGroupRepository):
    """Repository holding groups in a dict keyed by (namespace, name)."""

    def __init__(self, groups: Iterable[ContentGroup] = ()):
        self._groups: Dict[Tuple[str, str], ContentGroup] = {}
        for group in groups:
            self._groups[(group.namespace, group.name)] = group

    def __len__(self) -> int:
        return len(self._groups)

    async def get_all(self) -> List[ContentGroup]:
        return list(self._groups.values())

    async def find(self, namespace: str, name: str) -> Optional[ContentGroup]:
        return self._groups.get((namespace, name))

    async def save_all(self, groups: Iterable[ContentGroup]) -> None:
        for group in groups:
            self._groups[(group.namespace, group.name)] = group

    async def remove_all(self, groups: Iterable[ContentGroup]) -> None:
        for group in groups:
            self._groups.pop((group.namespace, group.name), None)
