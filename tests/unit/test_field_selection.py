"""
Record Mapper - Field Selection Unit Tests

Tests select_fields():
- Declaration order, most-derived class first
- ClassVar, not_column() and type-level exclusions
- Primary key and JSON markers (field-level and @table-level)
- Stable results across calls
"""

from dataclasses import dataclass
from typing import ClassVar, Optional

from mapper import BaseEntity, json_column, not_columns, table
from mapper.fields import FieldInfo, select_fields
from sample_records import Account, Event, User


def names(fields):
    return [f.name for f in fields]


class TestFieldOrder:
    """Test ordering of selected fields."""

    def test_declaration_order(self):
        """Fields of a flat record come back in declaration order."""
        assert names(select_fields(Account)) == ["id", "name", "createdTime"]

    def test_subclass_fields_before_ancestor_fields(self):
        """A subclass's own fields precede inherited ones."""
        assert names(select_fields(User)) == [
            "name", "id", "created_time", "created_by", "updated_time", "updated_by",
        ]

    def test_three_level_hierarchy(self):
        """Each level's fields follow those of the level below it."""

        @dataclass
        class Middle(BaseEntity):
            tenant: Optional[str] = None

        @table("leaf")
        @dataclass
        class Leaf(Middle):
            label: Optional[str] = None

        assert names(select_fields(Leaf))[:3] == ["label", "tenant", "id"]

    def test_redeclared_field_listed_once(self):
        """A field redeclared in a subclass appears once, with the subclass's markers."""

        @dataclass
        class Parent:
            code: Optional[str] = None

        @table("child")
        @dataclass
        class Child(Parent):
            code: Optional[str] = json_column(default=None)

        fields = select_fields(Child)
        assert names(fields) == ["code"]
        assert fields[0].json is True

    def test_order_is_stable(self):
        """Repeated calls return equal sequences."""
        assert select_fields(User) == select_fields(User)


class TestExclusions:
    """Test fields that are not columns."""

    def test_classvar_and_not_column_are_dropped(self):
        """ClassVar and not_column() fields are not persistent."""
        assert names(select_fields(Event)) == ["eventId", "payload", "source"]

    def test_type_level_exclusion_list(self):
        """Names given to @table(exclude=...) are dropped."""

        @table("things", exclude=("scratch",))
        @dataclass
        class Thing:
            id: Optional[int] = None
            scratch: Optional[str] = None
            label: Optional[str] = None

        assert names(select_fields(Thing)) == ["id", "label"]

    def test_not_columns_decorator(self):
        """@not_columns adds to the exclusion list in either decorator order."""

        @not_columns("scratch")
        @table("things")
        @dataclass
        class Thing:
            id: Optional[int] = None
            scratch: Optional[str] = None

        @table("things")
        @not_columns("scratch")
        @dataclass
        class OtherThing:
            id: Optional[int] = None
            scratch: Optional[str] = None

        assert names(select_fields(Thing)) == ["id"]
        assert names(select_fields(OtherThing)) == ["id"]

    def test_excluding_inherited_field(self):
        """Type-level exclusions apply to ancestor fields too."""

        @table("slim_users", exclude=("created_by", "updated_by"))
        @dataclass
        class SlimUser(BaseEntity):
            name: Optional[str] = None

        assert names(select_fields(SlimUser)) == ["name", "id", "created_time", "updated_time"]


class TestMarkers:
    """Test primary key and JSON markers on FieldInfo."""

    def test_field_info_carries_column(self):
        """Each FieldInfo has its converted column name."""
        assert select_fields(Account)[2] == FieldInfo(name="createdTime", column="created_time")

    def test_primary_key_marker(self):
        """primary_key() sets FieldInfo.primary_key."""
        fields = select_fields(Event)
        assert [f.primary_key for f in fields] == [True, False, False]

    def test_json_marker(self):
        """json_column() sets FieldInfo.json."""
        fields = select_fields(Event)
        assert [f.json for f in fields] == [False, True, False]

    def test_table_level_markers(self):
        """@table(primary_key=..., json_fields=...) mark fields by name."""

        @table("docs", primary_key="docId", json_fields=("body",))
        @dataclass
        class Doc:
            docId: Optional[int] = None
            body: Optional[dict] = None
            flags: ClassVar[int] = 0

        doc_id, body = select_fields(Doc)
        assert doc_id.primary_key and not doc_id.json
        assert body.json and not body.primary_key

    def test_base_entity_id_is_primary_key(self):
        """BaseEntity marks id as the primary key."""
        fields = {f.name: f for f in select_fields(User)}
        assert fields["id"].primary_key is True
        assert fields["name"].primary_key is False
