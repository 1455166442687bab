# Copyright 2026 Annospec Contributors
# SPDX-License-Identifier: Apache-2.0

"""Tests for reflecting SQLAlchemy declarative models."""

from __future__ import annotations

import enum
import sys
import types

import pytest
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

from annospec.reflection.fields import build_schemas
from annospec.reflection.loader import ModelSourceError
from annospec.reflection.orm import column_kind, import_declarative_base, reflect_class, reflect_sqlalchemy

# ###############
# Test Models
# ###############


class Base(DeclarativeBase):
    pass


class Role(enum.Enum):
    admin = "admin"
    member = "member"


class User(Base):
    __tablename__ = "users"
    id: Mapped[int] = mapped_column(sa.Integer, primary_key=True)
    email: Mapped[str] = mapped_column(sa.String(128), nullable=False)
    bio: Mapped[str | None] = mapped_column(sa.Text, nullable=True)
    role: Mapped[Role] = mapped_column(sa.Enum(Role), nullable=False)
    created_at: Mapped[str] = mapped_column(sa.DateTime(timezone=True))


class Address(Base):
    __tablename__ = "addresses"
    id: Mapped[int] = mapped_column(sa.BigInteger, primary_key=True)
    user_id: Mapped[int] = mapped_column(sa.ForeignKey("users.id"))
    ip: Mapped[str] = mapped_column(postgresql.INET)
    tags: Mapped[list[str]] = mapped_column(postgresql.ARRAY(sa.String))
    extra: Mapped[dict] = mapped_column(postgresql.JSONB)


# ###############
# Column Kinds
# ###############


class TestColumnKinds:
    @pytest.mark.parametrize(
        ("column_type", "kind"),
        [
            (sa.Integer(), "INTEGER"),
            (sa.BigInteger(), "BIGINT"),
            (sa.SmallInteger(), "SMALLINT"),
            (sa.String(10), "STRING"),
            (sa.Text(), "TEXT"),
            (sa.Boolean(), "BOOLEAN"),
            (sa.Date(), "DATEONLY"),
            (sa.DateTime(), "DATE"),
            (sa.Numeric(), "DECIMAL"),
            (sa.Float(), "FLOAT"),
            (sa.JSON(), "JSON"),
            (postgresql.JSONB(), "JSONB"),
            (postgresql.CIDR(), "CIDR"),
            (postgresql.INT4RANGE(), "RANGE"),
            (sa.LargeBinary(), "BLOB"),
        ],
    )
    def test_kind(self, column_type: sa.types.TypeEngine, kind: str) -> None:
        assert column_kind(column_type) == kind

    def test_unsupported_type(self) -> None:
        assert column_kind(sa.PickleType()) is None


# ###############
# Reflection
# ###############


class TestReflect:
    def test_declarative_base_is_ordered_by_class_name(self) -> None:
        assert [m.name for m in reflect_sqlalchemy(Base)] == ["Address", "User"]

    def test_iterable_keeps_given_order(self) -> None:
        assert [m.name for m in reflect_sqlalchemy([User, Address])] == ["User", "Address"]

    def test_user_fields(self) -> None:
        fields = {f.name: f for f in reflect_class(User).fields}
        assert fields["id"].primary_key is True
        assert fields["id"].nullable is False
        assert fields["email"].kind == "STRING"
        assert fields["email"].max_length == 128
        assert fields["email"].nullable is False
        assert fields["bio"].kind == "TEXT"
        assert fields["bio"].nullable is True
        assert fields["role"].kind == "ENUM"
        assert fields["role"].values == ["admin", "member"]
        assert fields["created_at"].kind == "DATE"

    def test_postgres_fields(self) -> None:
        fields = {f.name: f for f in reflect_class(Address).fields}
        assert fields["id"].kind == "BIGINT"
        assert fields["user_id"].kind == "INTEGER"
        assert fields["ip"].kind == "INET"
        assert fields["tags"].kind == "ARRAY"
        assert fields["tags"].subtype == "STRING"
        assert fields["extra"].kind == "JSONB"

    def test_reflected_models_build_schemas(self) -> None:
        registry = build_schemas(reflect_sqlalchemy(Base))
        user = registry["User"]
        assert user["properties"]["email"]["maxLength"] == 128
        assert user["properties"]["id"]["readOnly"] is True
        assert "id" in user["required"]
        assert "bio" not in user["required"]

    def test_unmapped_class(self) -> None:
        class Plain:
            pass

        with pytest.raises(ModelSourceError, match="not a mapped class"):
            reflect_class(Plain)


# ###############
# Import
# ###############


class TestImport:
    def test_imports_module_attribute(self, monkeypatch: pytest.MonkeyPatch) -> None:
        module = types.ModuleType("annospec_test_models")
        module.Base = Base  # type: ignore[attr-defined]
        monkeypatch.setitem(sys.modules, "annospec_test_models", module)
        assert import_declarative_base("annospec_test_models:Base") is Base

    def test_missing_attribute(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setitem(sys.modules, "annospec_test_models", types.ModuleType("annospec_test_models"))
        with pytest.raises(ModelSourceError, match="has no attribute 'Base'"):
            import_declarative_base("annospec_test_models:Base")

    def test_malformed_target(self) -> None:
        with pytest.raises(ModelSourceError, match="module:attribute"):
            import_declarative_base("no_colon")
