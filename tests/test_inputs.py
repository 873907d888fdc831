"""Tests for filter input typing and pydantic input models."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional

import pytest
from pydantic import ValidationError

from filter_def import (
    FilterInputError,
    and_,
    contains,
    eq,
    gte,
    in_array,
    in_memory_filter,
    input_type_for,
    input_values,
    is_not_null,
    is_null,
    lte,
)
from filter_def.inputs import custom_input_type


@dataclass
class User:
    name: str
    email: str
    age: int
    nickname: Optional[str] = None


def email_domain(user: User, domain: str) -> bool:
    return user.email.endswith("@" + domain)


def field_types(field: str) -> Any:
    return {"name": str, "email": str, "age": int}.get(field, Any)


# -- Input types per kind ----------------------------------------------------


class TestInputTypes:
    @pytest.mark.parametrize(
        ("filter_field", "expected"),
        [
            (eq("age"), int),
            (gte("age"), int),
            (contains("age"), str),
            (in_array("age"), list[int]),
            (is_null("age"), bool),
            (is_not_null("name"), bool),
            (and_(gte("age"), lte("age")), int),
        ],
    )
    def test_primitive_and_boolean(self, filter_field: Any, expected: Any) -> None:
        assert input_type_for("f", filter_field, field_types) == expected

    def test_name_as_field(self) -> None:
        assert input_type_for("name", eq(), field_types) is str

    def test_custom_uses_second_parameter(self) -> None:
        assert custom_input_type(email_domain) is str

    def test_custom_without_annotation(self) -> None:
        assert custom_input_type(lambda e, v: True) is Any
        assert custom_input_type(lambda e: True) is Any


# -- Input models ------------------------------------------------------------


class TestInputModel:
    @pytest.fixture
    def user_filter(self):
        return in_memory_filter(User).define(
            {
                "name": eq(),
                "ages": in_array("age"),
                "hasNickname": is_not_null("nickname"),
                "min-age": gte("age"),
                "domain": email_domain,
            }
        )

    def test_model_fields(self, user_filter) -> None:
        model = user_filter.input_model()
        assert model.__name__ == "UserFilterInput"
        fields = model.model_fields
        assert fields["name"].annotation == Optional[str]
        assert fields["ages"].annotation == Optional[list[int]]
        assert fields["hasNickname"].annotation == Optional[bool]
        assert fields["domain"].annotation == Optional[str]

    def test_every_field_defaults_to_none(self, user_filter) -> None:
        instance = user_filter.input_model()()
        assert all(v is None for v in input_values(instance).values())

    def test_non_identifier_names_use_aliases(self, user_filter) -> None:
        model = user_filter.input_model("Input")
        instance = model.model_validate({"min-age": 30})
        assert input_values(instance)["min-age"] == 30

    def test_model_validates_input(self, user_filter) -> None:
        model = user_filter.input_model()
        with pytest.raises(ValidationError):
            model(ages="not a list")

    def test_model_instance_drives_the_filter(self, user_filter) -> None:
        model = user_filter.input_model()
        where = user_filter(model(ages=[30], domain="x.io"))
        assert where(User("John", "john@x.io", 30)) is True
        assert where(User("Jim", "jim@y.io", 30)) is False
        assert where(User("Joe", "joe@x.io", 31)) is False


def test_input_values_rejects_other_types() -> None:
    with pytest.raises(FilterInputError, match="mapping or a pydantic model"):
        input_values(42)


def test_generated_attribute_names_do_not_collide() -> None:
    model = in_memory_filter().define(
        {"a-b": eq("x"), "filter_0": eq("y"), "model_config": eq("z")}
    ).input_model()
    aliases = {info.alias for info in model.model_fields.values()}
    assert aliases == {"a-b", "filter_0", "model_config"}

    instance = model.model_validate({"a-b": 1, "filter_0": 2, "model_config": 3})
    assert dict(input_values(instance)) == {"a-b": 1, "filter_0": 2, "model_config": 3}
