"""Base repository pattern for team-scoped data access."""

from dataclasses import dataclass, field
from typing import Any, ClassVar, Generic, Mapping, Optional, Sequence, TypeVar

from sqlalchemy import Select, and_, delete, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import aliased

from discussion_sync.api.exceptions import NotFoundOrUnauthorized
from discussion_sync.models.base import DiscussionSyncBase
from discussion_sync.models.user import User

ModelT = TypeVar("ModelT", bound=DiscussionSyncBase)

# Result key -> foreign key attribute on the record
USER_REFERENCES = {
    "owner_user": "owner",
    "created_by_user": "created_by",
    "updated_by_user": "updated_by",
}


@dataclass
class UserSummary:
    """The public projection of a user joined into results."""

    id: str
    name: str
    email: str
    avatar_url: Optional[str] = None


@dataclass
class EnrichedRecord(Generic[ModelT]):
    """A record with its left-joined related rows and user summaries."""

    record: ModelT
    related: dict[str, Any] = field(default_factory=dict)
    owner_user: Optional[UserSummary] = None
    created_by_user: Optional[UserSummary] = None
    updated_by_user: Optional[UserSummary] = None


class TeamScopedRepository(Generic[ModelT]):
    """Generic repository for records owned by a user within a team.

    Subclasses set ``model_class`` and may declare ``related_joins``, a
    mapping of result key to ``(target model, foreign key attribute)``. Every
    join is a LEFT OUTER JOIN so a dangling reference never hides a record.
    """

    model_class: type[ModelT]
    resource_name: ClassVar[str] = "Record"
    related_joins: ClassVar[dict[str, tuple[type, str]]] = {}

    def __init__(self, session: AsyncSession):
        self.session = session

    def _enriched_select(self) -> Select:
        model = self.model_class
        columns: list[Any] = [model]
        columns.extend(target for target, _ in self.related_joins.values())

        user_aliases = {}
        for key in USER_REFERENCES:
            users = aliased(User, name=f"{key}s")
            user_aliases[key] = users
            columns.extend([
                users.id.label(f"{key}_id"),
                users.name.label(f"{key}_name"),
                users.email.label(f"{key}_email"),
                users.avatar_url.label(f"{key}_avatar_url"),
            ])

        stmt = select(*columns).select_from(model)
        for target, fk_attr in self.related_joins.values():
            stmt = stmt.outerjoin(target, getattr(model, fk_attr) == target.id)
        for key, fk_attr in USER_REFERENCES.items():
            users = user_aliases[key]
            stmt = stmt.outerjoin(users, getattr(model, fk_attr) == users.id)
        return stmt

    @staticmethod
    def _user_summary(row_mapping: Mapping[str, Any], key: str) -> Optional[UserSummary]:
        if row_mapping[f"{key}_id"] is None:
            return None
        return UserSummary(
            id=row_mapping[f"{key}_id"],
            name=row_mapping[f"{key}_name"],
            email=row_mapping[f"{key}_email"],
            avatar_url=row_mapping[f"{key}_avatar_url"],
        )

    def _to_enriched(self, row: Any) -> EnrichedRecord[ModelT]:
        row_mapping = row._mapping
        related = {
            key: row[position]
            for position, key in enumerate(self.related_joins, start=1)
        }
        return EnrichedRecord(
            record=row[0],
            related=related,
            owner_user=self._user_summary(row_mapping, "owner_user"),
            created_by_user=self._user_summary(row_mapping, "created_by_user"),
            updated_by_user=self._user_summary(row_mapping, "updated_by_user"),
        )

    async def _fetch_enriched(self, stmt: Select) -> list[EnrichedRecord[ModelT]]:
        stmt = stmt.order_by(self.model_class.created_at.desc())
        result = await self.session.execute(stmt)
        return [self._to_enriched(row) for row in result.all()]

    async def list_all(self, team_id: str) -> list[EnrichedRecord[ModelT]]:
        """Get every record of a team, most recent first."""
        stmt = self._enriched_select().where(self.model_class.team_id == team_id)
        return await self._fetch_enriched(stmt)

    async def list_by_ids(
        self,
        team_id: str,
        ids: Sequence[str],
    ) -> list[EnrichedRecord[ModelT]]:
        """Get the records of a team whose id is in ``ids``, most recent first."""
        if not ids:
            return []
        stmt = self._enriched_select().where(
            and_(
                self.model_class.team_id == team_id,
                self.model_class.id.in_(list(ids)),
            )
        )
        return await self._fetch_enriched(stmt)

    async def count(self, team_id: Optional[str] = None) -> int:
        """Count records, optionally within one team."""
        stmt = select(func.count()).select_from(self.model_class)
        if team_id is not None:
            stmt = stmt.where(self.model_class.team_id == team_id)
        result = await self.session.execute(stmt)
        return result.scalar() or 0

    async def create(self, data: Mapping[str, Any]) -> ModelT:
        """Insert a record and return it with generated defaults populated."""
        entity = self.model_class(**data)
        self.session.add(entity)
        await self.session.flush()
        await self.session.refresh(entity)
        return entity

    async def create_many(self, rows: Sequence[Mapping[str, Any]]) -> list[ModelT]:
        """Insert several records in one flush."""
        entities = [self.model_class(**data) for data in rows]
        self.session.add_all(entities)
        await self.session.flush()
        return entities

    def _ownership_clause(self, record_id: str, team_id: str, owner_id: str):
        model = self.model_class
        return and_(
            model.id == record_id,
            model.team_id == team_id,
            model.owner == owner_id,
        )

    async def update(
        self,
        record_id: str,
        team_id: str,
        owner_id: str,
        updates: Mapping[str, Any],
    ) -> ModelT:
        """Merge ``updates`` into a record the caller owns.

        ``updated_by`` is always stamped with ``owner_id``. The ownership
        check and the write happen in one UPDATE statement.

        Raises:
            NotFoundOrUnauthorized: no record matched id, team and owner.
        """
        values = {**updates, "updated_by": owner_id}
        stmt = (
            update(self.model_class)
            .where(self._ownership_clause(record_id, team_id, owner_id))
            .values(**values)
        )
        result = await self.session.execute(stmt)
        if result.rowcount == 0:
            raise NotFoundOrUnauthorized(self.resource_name)

        return await self.session.get(
            self.model_class,
            values.get("id", record_id),
            populate_existing=True,
        )

    async def delete(self, record_id: str, team_id: str, owner_id: str) -> dict[str, bool]:
        """Hard-delete a record the caller owns.

        Raises:
            NotFoundOrUnauthorized: no record matched id, team and owner.
        """
        stmt = delete(self.model_class).where(
            self._ownership_clause(record_id, team_id, owner_id)
        )
        result = await self.session.execute(stmt)
        if result.rowcount == 0:
            raise NotFoundOrUnauthorized(self.resource_name)
        return {"success": True}
