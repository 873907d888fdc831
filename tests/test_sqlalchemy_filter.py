"""Tests for the SQLAlchemy query-condition backend."""

from __future__ import annotations

from typing import Any, Optional

import pytest
from sqlalchemy import (
    Column,
    Integer,
    MetaData,
    String,
    Table,
    create_engine,
    insert,
    select,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, Session, aliased, mapped_column

from filter_def import (
    FieldNotFoundError,
    FilterInputError,
    InvalidFilterDefError,
    and_,
    contains,
    eq,
    gt,
    gte,
    in_array,
    in_memory_filter,
    is_not_null,
    is_null,
    lt,
    lte,
    neq,
    or_,
)
from filter_def.kinds import FilterOperator
from filter_def.sqlalchemy import (
    DEFAULT_SQLA_REGISTRY,
    SQLAlchemyOperator,
    build_default_sqla_registry,
    resolve_columns,
    sqlalchemy_filter,
)

metadata = MetaData()

users = Table(
    "users",
    metadata,
    Column("id", Integer, primary_key=True),
    Column("name", String),
    Column("email", String),
    Column("age", Integer),
    Column("nickname", String, nullable=True),
)


class Base(DeclarativeBase):
    pass


class UserRecord(Base):
    __tablename__ = "user_records"

    id: Mapped[int] = mapped_column(primary_key=True)
    name: Mapped[str] = mapped_column(String)
    age: Mapped[int] = mapped_column(Integer)
    nickname: Mapped[Optional[str]] = mapped_column(String, nullable=True)


ROWS: list[dict[str, Any]] = [
    {"id": 1, "name": "John", "email": "john@example.com", "age": 30, "nickname": "JJ"},
    {"id": 2, "name": "Jane", "email": "jane@example.org", "age": 25, "nickname": None},
    {"id": 3, "name": "Bob", "email": "bob_1@example.com", "age": 28, "nickname": None},
    {"id": 4, "name": "Alice", "email": "alice@test.io", "age": 35, "nickname": "Al"},
]


@pytest.fixture
def engine():
    engine = create_engine("sqlite://")
    metadata.create_all(engine)
    Base.metadata.create_all(engine)
    with engine.begin() as conn:
        conn.execute(insert(users), ROWS)
        conn.execute(
            insert(UserRecord.__table__),
            [
                {k: r[k] for k in ("id", "name", "age", "nickname")}
                for r in ROWS
            ],
        )
    yield engine
    engine.dispose()


def sql(expr: Any) -> str:
    return str(expr.compile(compile_kwargs={"literal_binds": True}))


def fetch_names(engine, user_filter, filter_input: Any) -> list[str]:
    stmt = user_filter.where(select(users.c.name).order_by(users.c.id), filter_input)
    with engine.connect() as conn:
        return list(conn.execute(stmt).scalars())


# -- Compiled conditions -----------------------------------------------------


class TestCompiledConditions:
    @pytest.fixture
    def user_filter(self):
        return sqlalchemy_filter(users).define(
            {
                "name": eq(),
                "notName": neq("name"),
                "olderThan": gt("age"),
                "minAge": gte("age"),
                "youngerThan": lt("age"),
                "maxAge": lte("age"),
                "ages": in_array("age"),
                "noNickname": is_null("nickname"),
                "hasNickname": is_not_null("nickname"),
                "search": contains("email"),
                "isearch": contains("name", case_insensitive=True),
            }
        )

    @pytest.mark.parametrize(
        ("filter_input", "expected"),
        [
            ({"name": "John"}, "users.name = 'John'"),
            ({"notName": "John"}, "users.name != 'John'"),
            ({"olderThan": 30}, "users.age > 30"),
            ({"minAge": 30}, "users.age >= 30"),
            ({"youngerThan": 30}, "users.age < 30"),
            ({"maxAge": 30}, "users.age <= 30"),
            ({"ages": [25, 30]}, "users.age IN (25, 30)"),
            ({"noNickname": True}, "users.nickname IS NULL"),
            ({"noNickname": False}, "users.nickname IS NOT NULL"),
            ({"hasNickname": True}, "users.nickname IS NOT NULL"),
            ({"hasNickname": False}, "users.nickname IS NULL"),
        ],
    )
    def test_primitive_conditions(self, user_filter, filter_input, expected) -> None:
        assert sql(user_filter(filter_input)) == expected

    def test_contains_is_like(self, user_filter) -> None:
        assert "users.email LIKE" in sql(user_filter({"search": "example"}))

    def test_case_insensitive_contains_lowers_both_sides(self, user_filter) -> None:
        compiled = sql(user_filter({"isearch": "JO"}))
        assert "lower(users.name) LIKE" in compiled
        assert "lower(" in compiled.split("LIKE", 1)[1]

    def test_top_level_filters_combine_with_and(self, user_filter) -> None:
        compiled = sql(user_filter({"olderThan": 20, "maxAge": 30}))
        assert compiled == "users.age > 20 AND users.age <= 30"

    def test_single_condition_is_not_wrapped(self, user_filter) -> None:
        assert " AND " not in sql(user_filter({"name": "John", "olderThan": None}))

    def test_in_array_rejects_scalars(self, user_filter) -> None:
        with pytest.raises(FilterInputError):
            user_filter({"ages": 30})


class TestNoConstraint:
    def test_empty_input_returns_none(self) -> None:
        user_filter = sqlalchemy_filter(users).define({"name": eq()})
        assert user_filter() is None
        assert user_filter(None) is None
        assert user_filter({}) is None
        assert user_filter({"name": None}) is None

    def test_differs_from_in_memory_identity(self) -> None:
        """In memory, no input accepts everything; in SQL it is no condition."""
        definition = {"olderThan": gt("age")}
        predicate = in_memory_filter().define(definition)({})
        condition = sqlalchemy_filter(users).define(definition)({})

        assert callable(predicate)
        assert predicate({"age": 1}) is True
        assert condition is None

    def test_where_leaves_statement_untouched(self) -> None:
        user_filter = sqlalchemy_filter(users).define({"name": eq()})
        stmt = select(users)
        assert user_filter.where(stmt, {}) is stmt
        assert user_filter.where(stmt) is stmt


# -- Boolean groups and custom filters ---------------------------------------


class TestGroupsAndCustom:
    def test_and_group(self) -> None:
        user_filter = sqlalchemy_filter(users).define(
            {"exactAge": and_(gte("age"), lte("age"))}
        )
        assert sql(user_filter({"exactAge": 30})) == (
            "users.age >= 30 AND users.age <= 30"
        )

    def test_or_group(self) -> None:
        user_filter = sqlalchemy_filter(users).define(
            {"notAge": or_(lt("age"), gt("age"))}
        )
        assert sql(user_filter({"notAge": 28})) == "users.age < 28 OR users.age > 28"

    def test_single_condition_group_is_unwrapped(self) -> None:
        user_filter = sqlalchemy_filter(users).define({"g": or_(eq("name"))})
        assert sql(user_filter({"g": "Bob"})) == "users.name = 'Bob'"

    def test_group_combined_with_other_filters(self) -> None:
        user_filter = sqlalchemy_filter(users).define(
            {"name": eq(), "notAge": or_(lt("age"), gt("age"))}
        )
        compiled = sql(user_filter({"name": "Bob", "notAge": 28}))
        assert compiled == "users.name = 'Bob' AND (users.age < 28 OR users.age > 28)"

    def test_custom_receives_descriptor(self) -> None:
        seen: list[Any] = []

        def name_starts_with(table: Table, prefix: str) -> Any:
            seen.append(table)
            return table.c.name.startswith(prefix, autoescape=True)

        user_filter = sqlalchemy_filter(users).define({"prefix": name_starts_with})
        assert "users.name LIKE" in sql(user_filter({"prefix": "Jo"}))
        assert seen == [users]

    def test_custom_may_impose_no_constraint(self) -> None:
        user_filter = sqlalchemy_filter(users).define(
            {"noop": lambda table, value: None, "name": eq()}
        )
        assert user_filter({"noop": True}) is None
        assert sql(user_filter({"noop": True, "name": "Bob"})) == "users.name = 'Bob'"


# -- Definition-time checks --------------------------------------------------


class TestDefinition:
    def test_unknown_column(self) -> None:
        with pytest.raises(InvalidFilterDefError) as exc_info:
            sqlalchemy_filter(users).define({"olderThan": gt("agee")})
        assert "did you mean: age" in str(exc_info.value)
        assert "'users'" in str(exc_info.value)

    def test_dotted_path_through_scalar_column(self) -> None:
        with pytest.raises(InvalidFilterDefError):
            sqlalchemy_filter(users).define({"x": eq("age.value")})

    def test_untyped_dotted_path_fails_at_compile(self) -> None:
        table = Table("raw", MetaData(), Column("payload"))
        with pytest.raises(FieldNotFoundError):
            sqlalchemy_filter(table).define({"x": eq("payload.value")})

    def test_group_condition_requires_field(self) -> None:
        with pytest.raises(InvalidFilterDefError):
            sqlalchemy_filter(users).define({"age": and_(gte(), lte("age"))})

    def test_rejects_non_table_descriptor(self) -> None:
        with pytest.raises(TypeError):
            sqlalchemy_filter(object())

    def test_filter_names_and_repr(self) -> None:
        user_filter = sqlalchemy_filter(users).define({"b": eq("name"), "age": eq()})
        assert user_filter.filter_names == ("b", "age")
        assert "users" in repr(user_filter)


# -- Descriptors -------------------------------------------------------------


class TestDescriptors:
    def test_resolve_table_columns(self) -> None:
        columns = resolve_columns(users)
        assert list(columns) == ["id", "name", "email", "age", "nickname"]

    def test_resolve_orm_columns(self) -> None:
        assert set(resolve_columns(UserRecord)) == {"id", "name", "age", "nickname"}

    def test_orm_model(self) -> None:
        user_filter = sqlalchemy_filter(UserRecord).define({"olderThan": gt("age")})
        assert sql(user_filter({"olderThan": 3})) == "user_records.age > 3"

    def test_aliased_entity(self) -> None:
        other = aliased(UserRecord, name="other")
        user_filter = sqlalchemy_filter(other).define({"name": eq()})
        assert sql(user_filter({"name": "Bob"})) == "other.name = 'Bob'"

    def test_subquery(self) -> None:
        sub = select(users.c.name, users.c.age).subquery("adults")
        user_filter = sqlalchemy_filter(sub).define({"age": gte()})
        assert sql(user_filter({"age": 18})) == "adults.age >= 18"


# -- Execution ---------------------------------------------------------------


class TestExecution:
    @pytest.fixture
    def user_filter(self):
        return sqlalchemy_filter(users).define(
            {
                "olderThan": gt("age"),
                "ages": in_array("age"),
                "noNickname": is_null("nickname"),
                "search": contains("email"),
                "exactAge": and_(gte("age"), lte("age")),
                "notAge": or_(lt("age"), gt("age")),
            }
        )

    def test_no_input_returns_every_row(self, engine, user_filter) -> None:
        assert fetch_names(engine, user_filter, None) == [
            "John",
            "Jane",
            "Bob",
            "Alice",
        ]

    @pytest.mark.parametrize(
        ("filter_input", "expected"),
        [
            ({"olderThan": 28}, ["John", "Alice"]),
            ({"ages": [25, 30]}, ["John", "Jane"]),
            ({"noNickname": True}, ["Jane", "Bob"]),
            ({"noNickname": False}, ["John", "Alice"]),
            ({"exactAge": 30}, ["John"]),
            ({"notAge": 28}, ["John", "Jane", "Alice"]),
            ({"olderThan": 26, "noNickname": True}, ["Bob"]),
        ],
    )
    def test_matches_in_memory_results(
        self, engine, user_filter, filter_input, expected
    ) -> None:
        assert fetch_names(engine, user_filter, filter_input) == expected

        memory = in_memory_filter().define(dict(user_filter.definition))
        where = memory(filter_input)
        assert [r["name"] for r in ROWS if where(r)] == expected

    def test_contains_escapes_wildcards(self, engine, user_filter) -> None:
        assert fetch_names(engine, user_filter, {"search": "_"}) == ["Bob"]
        assert fetch_names(engine, user_filter, {"search": "%"}) == []

    def test_orm_session(self, engine) -> None:
        record_filter = sqlalchemy_filter(UserRecord).define(
            {"minAge": gte("age"), "nick": is_not_null("nickname")}
        )
        stmt = record_filter.where(
            select(UserRecord).order_by(UserRecord.id), {"minAge": 30, "nick": True}
        )
        with Session(engine) as session:
            assert [u.name for u in session.scalars(stmt)] == ["John", "Alice"]

    def test_input_model(self, engine, user_filter) -> None:
        model = user_filter.input_model()
        assert model.__name__ == "usersFilterInput"
        assert model.model_fields["olderThan"].annotation == Optional[int]
        assert model.model_fields["ages"].annotation == Optional[list[int]]
        assert model.model_fields["search"].annotation == Optional[str]
        assert fetch_names(engine, user_filter, model(olderThan=30)) == ["Alice"]


# -- Operators / registry ----------------------------------------------------


class TestRegistry:
    def test_default_registry_covers_every_operator(self) -> None:
        assert DEFAULT_SQLA_REGISTRY.supported_operators == set(FilterOperator)

    def test_custom_registry(self) -> None:
        class CaseInsensitiveEqual(SQLAlchemyOperator):
            name = FilterOperator.EQ

            def apply(self, column: Any, value: Any) -> Any:
                return column.ilike(value)

        registry = DEFAULT_SQLA_REGISTRY.copy()
        registry.register(CaseInsensitiveEqual())
        user_filter = sqlalchemy_filter(users, registry=registry).define(
            {"name": eq()}
        )
        expected = "lower(users.name) LIKE lower('bob')"
        assert sql(user_filter({"name": "bob"})) == expected
        assert not isinstance(
            DEFAULT_SQLA_REGISTRY.get(FilterOperator.EQ), CaseInsensitiveEqual
        )

    def test_unsupported_operator(self) -> None:
        registry = build_default_sqla_registry()
        registry.unregister(FilterOperator.GT)
        with pytest.raises(ValueError, match="Unsupported operator for SQLAlchemy"):
            sqlalchemy_filter(users, registry=registry).define({"age": gt()})
