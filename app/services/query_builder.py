"""Read-only aggregation pipelines over the relation store.

A pipeline is built from the same stages a document-store aggregation
would use (match, lookup, project, sort, paginate) and compiled into a
single SQL statement, plus one batched statement per one-to-many join.

    page = await (
        AggregationQuery(Video)
        .match(is_published=True)
        .match_text("title", "cats")
        .join(JoinSpec(Users, "owner_id", "id", alias="owner", fields=("id", "username")))
        .project("id", "title", "views")
        .sort_by("created_at", "desc")
        .paginate(db, page=1, page_size=10)
    )
"""

from dataclasses import dataclass, field
from math import ceil
from typing import Any, Dict, List, Optional, Sequence, Set, Tuple, Union

from loguru import logger
from sqlalchemy import and_, func, inspect, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import aliased

from app.core.config import get_pagination_settings
from app.core.errors import InvalidPage, InvalidSortField
from app.schemas.pagination import Page

SORT_DIRECTIONS = ("asc", "desc")
_HIDDEN = "__key__"


def _columns_of(model) -> Dict[str, Any]:
    return dict(inspect(model).columns.items())


def validate_page(page: int, page_size: int, max_page_size: Optional[int] = None) -> None:
    if page is None or page_size is None or page < 1 or page_size < 1:
        raise InvalidPage()
    if max_page_size is not None and page_size > max_page_size:
        raise InvalidPage(f"page_size cannot exceed {max_page_size}")


@dataclass
class JoinSpec:
    """Left-outer lookup of ``foreign`` rows whose ``foreign_key`` equals ``local_key``.

    ``mandatory`` one-to-one joins drop primary rows without a match;
    optional ones keep the row with an empty projection. ``many`` joins
    attach a (possibly empty) list and never drop rows; their ``foreign``
    may be a nested pipeline carrying its own joins, projection and sort.
    ``flatten`` hoists the projected fields of a one-to-one join into the
    primary row. ``match`` adds equality conditions on the foreign row to
    the join condition itself.
    """

    foreign: Union[type, "AggregationQuery"]
    local_key: str
    foreign_key: str
    alias: str
    fields: Tuple[str, ...] = ()
    many: bool = False
    mandatory: bool = True
    flatten: bool = False
    match: Dict[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        if isinstance(self.foreign, AggregationQuery) and not self.many:
            raise ValueError("Only one-to-many joins accept a nested pipeline")
        if self.many and self.flatten:
            raise ValueError("One-to-many joins cannot be flattened")
        if self.many and self.match:
            raise ValueError("One-to-many joins filter through their nested pipeline")
        if not self.many:
            columns = _columns_of(self.foreign)
            for name in (self.foreign_key,) + tuple(self.fields) + tuple(self.match):
                if name not in columns:
                    raise ValueError(f"{self.foreign.__name__} has no column {name}")


@dataclass
class _Lookup:
    spec: JoinSpec
    labels: List[Tuple[str, str]] = field(default_factory=list)

    @property
    def match_label(self) -> str:
        return f"{self.spec.alias}{_HIDDEN}"


class AggregationQuery:
    def __init__(self, model):
        self.model = model
        self._columns = _columns_of(model)
        self._filters: List[Any] = []
        self._joins: List[JoinSpec] = []
        self._fields: Optional[Tuple[str, ...]] = None
        self._sort: Optional[Tuple[str, str]] = None

    def _column(self, name: str):
        if name not in self._columns:
            raise ValueError(f"{self.model.__name__} has no column {name}")
        return getattr(self.model, name)

    # -- stages -------------------------------------------------------------

    def match(self, **criteria) -> "AggregationQuery":
        for name, value in criteria.items():
            self._filters.append(self._column(name) == value)
        return self

    def match_in(self, name: str, values: Sequence[Any]) -> "AggregationQuery":
        self._filters.append(self._column(name).in_(list(values)))
        return self

    def match_text(self, name: str, text: Optional[str]) -> "AggregationQuery":
        """Case-insensitive substring filter; blank text adds nothing."""
        if text is None or not text.strip():
            return self
        escaped = text.strip().replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
        self._filters.append(self._column(name).ilike(f"%{escaped}%", escape="\\"))
        return self

    def join(self, spec: JoinSpec) -> "AggregationQuery":
        self._column(spec.local_key)
        self._joins.append(spec)
        return self

    def project(self, *fields: str) -> "AggregationQuery":
        for name in fields:
            self._column(name)
        self._fields = tuple(fields)
        return self

    def sort_by(self, name: str, direction: str = "desc") -> "AggregationQuery":
        if name not in self._columns:
            raise InvalidSortField(name)
        direction = (direction or "desc").lower()
        if direction not in SORT_DIRECTIONS:
            raise InvalidSortField(name, f"Sort direction must be one of {', '.join(SORT_DIRECTIONS)}")
        self._sort = (name, direction)
        return self

    # -- compilation --------------------------------------------------------

    @property
    def projected_fields(self) -> Tuple[str, ...]:
        return self._fields if self._fields is not None else tuple(self._columns)

    def _hidden_fields(self, keep: Sequence[str]) -> Set[str]:
        needed = set(keep) | {spec.local_key for spec in self._joins if spec.many}
        return needed - set(self.projected_fields)

    def _compile(self, hidden: Set[str]):
        selected = [self._column(name).label(name) for name in self.projected_fields]
        selected.extend(self._column(name).label(_HIDDEN + name) for name in sorted(hidden))

        lookups: List[_Lookup] = []
        stmt_joins = []
        for spec in self._joins:
            if spec.many:
                continue
            target = aliased(spec.foreign, name=f"{spec.alias}_join")
            lookup = _Lookup(spec=spec)
            for name in spec.fields:
                label = f"{spec.alias}__{name}"
                selected.append(getattr(target, name).label(label))
                lookup.labels.append((name, label))
            selected.append(getattr(target, spec.foreign_key).label(lookup.match_label))
            lookups.append(lookup)
            stmt_joins.append((target, self._onclause(spec, target), spec.mandatory))

        stmt = select(*selected).select_from(self.model)
        for target, onclause, mandatory in stmt_joins:
            stmt = stmt.join(target, onclause) if mandatory else stmt.outerjoin(target, onclause)
        if self._filters:
            stmt = stmt.where(and_(*self._filters))
        return self._order(stmt), lookups

    def _onclause(self, spec: JoinSpec, target):
        conditions = [self._column(spec.local_key) == getattr(target, spec.foreign_key)]
        conditions.extend(getattr(target, name) == value for name, value in spec.match.items())
        return and_(*conditions)

    def _count_statement(self):
        stmt = select(*inspect(self.model).primary_key).select_from(self.model)
        for spec in self._joins:
            if spec.many or not spec.mandatory:
                continue
            target = aliased(spec.foreign, name=f"{spec.alias}_join")
            stmt = stmt.join(target, self._onclause(spec, target))
        if self._filters:
            stmt = stmt.where(and_(*self._filters))
        return select(func.count()).select_from(stmt.subquery())

    def _order(self, stmt):
        if self._sort is None:
            return stmt
        name, direction = self._sort
        column = self._column(name)
        order = [column.asc() if direction == "asc" else column.desc()]
        # primary key tie-breaker keeps page boundaries stable
        order.extend(pk.asc() for pk in inspect(self.model).primary_key)
        return stmt.order_by(*order)

    # -- execution ----------------------------------------------------------

    def _key(self, row: Dict[str, Any], name: str) -> Any:
        return row[name] if name in self.projected_fields else row[_HIDDEN + name]

    def _shape(self, mapping, lookups: List[_Lookup], hidden: Set[str]) -> Dict[str, Any]:
        shaped = {name: mapping[name] for name in self.projected_fields}
        for name in hidden:
            shaped[_HIDDEN + name] = mapping[_HIDDEN + name]
        for lookup in lookups:
            spec = lookup.spec
            if mapping[lookup.match_label] is None:
                if not spec.flatten:
                    shaped[spec.alias] = {}
                continue
            values = {name: mapping[label] for name, label in lookup.labels}
            if spec.flatten:
                shaped.update(values)
            else:
                shaped[spec.alias] = values
        return shaped

    async def _fetch(
        self,
        db: AsyncSession,
        keep: Sequence[str] = (),
        offset: Optional[int] = None,
        limit: Optional[int] = None,
    ) -> List[Dict[str, Any]]:
        hidden = self._hidden_fields(keep)
        stmt, lookups = self._compile(hidden)
        if offset is not None:
            stmt = stmt.offset(offset)
        if limit is not None:
            stmt = stmt.limit(limit)

        logger.debug(f"Aggregation on {self.model.__tablename__}: {stmt}")
        result = await db.execute(stmt)
        rows = [self._shape(row._mapping, lookups, hidden) for row in result.all()]

        for spec in self._joins:
            if spec.many:
                await self._attach_many(db, spec, rows)

        for row in rows:
            for name in hidden:
                if name not in keep:
                    del row[_HIDDEN + name]
        return rows

    async def _attach_many(self, db: AsyncSession, spec: JoinSpec, rows: List[Dict[str, Any]]) -> None:
        if isinstance(spec.foreign, AggregationQuery):
            nested = spec.foreign._copy()
        else:
            nested = AggregationQuery(spec.foreign)
            if spec.fields:
                nested.project(*spec.fields)

        wanted = {self._key(row, spec.local_key) for row in rows} - {None}
        grouped: Dict[Any, List[Dict[str, Any]]] = {}
        if wanted:
            nested._filters.append(nested._column(spec.foreign_key).in_(list(wanted)))
            for item in await nested._fetch(db, keep=(spec.foreign_key,)):
                key = nested._key(item, spec.foreign_key)
                item.pop(_HIDDEN + spec.foreign_key, None)
                grouped.setdefault(key, []).append(item)

        for row in rows:
            row[spec.alias] = grouped.get(self._key(row, spec.local_key), [])

    def _copy(self) -> "AggregationQuery":
        clone = AggregationQuery(self.model)
        clone._filters = list(self._filters)
        clone._joins = list(self._joins)
        clone._fields = self._fields
        clone._sort = self._sort
        return clone

    async def all(self, db: AsyncSession) -> List[Dict[str, Any]]:
        return await self._fetch(db)

    async def first(self, db: AsyncSession) -> Optional[Dict[str, Any]]:
        rows = await self._fetch(db, limit=1)
        return rows[0] if rows else None

    async def paginate(
        self,
        db: AsyncSession,
        page: int,
        page_size: int,
        max_page_size: Optional[int] = None,
    ) -> Page:
        if max_page_size is None:
            max_page_size = get_pagination_settings().max_page_size
        validate_page(page, page_size, max_page_size)

        total = (await db.execute(self._count_statement())).scalar_one()
        items = await self._fetch(db, offset=(page - 1) * page_size, limit=page_size)

        total_pages = ceil(total / page_size) if total else 0
        return Page(
            items=items,
            total=total,
            page=page,
            page_size=page_size,
            total_pages=total_pages,
            has_next_page=page < total_pages,
            has_prev_page=page > 1,
        )
