# tests/test_definition.py
"""
Tests for Definition identity, source lookup and member inspection.
"""

from abc import ABC, abstractmethod
from typing import Generic, Protocol, TypeVar, runtime_checkable

import pytest

from interface_shims import Definition, Event, MemberKind
from interface_shims.definition import collect_members, looks_like_path, read_source
from tests.fixtures.game.can_heal import CanHeal
from tests.fixtures.game.potion import Potion


class Base:
    shared = 1

    def inherited(self):
        ...


class Child(Base):
    implements = [CanHeal]

    opened = Event()
    label: str
    limit = 5

    def run(self):
        ...

    @staticmethod
    def build():
        ...

    @classmethod
    def create(cls):
        ...

    @property
    def size(self):
        return 0


class Overrider(Base):
    shared = Event()


# @interface
class Marked:
    pass


class Unmarked:
    pass


T = TypeVar("T")


class HealsAbstractly(ABC):
    @abstractmethod
    def heal(self, amount):
        ...


@runtime_checkable
class HealsStructurally(Protocol):
    charges: int

    def heal(self, amount):
        ...


class Holds(Generic[T]):
    def take(self) -> T:
        ...


class Ledger:
    def implements(self, other):
        return False


class Exposes:
    @property
    def implements(self):
        return []


class TestMemberInspection:

    def test_kinds_are_classified(self):
        members = collect_members(Child)
        assert members.events == ("opened",)
        assert set(members.methods) == {"inherited", "run", "build", "create"}
        assert set(members.fields) == {"shared", "label", "limit", "size"}

    def test_base_members_come_first(self):
        members = collect_members(Child)
        assert members.methods.index("inherited") < members.methods.index("run")

    def test_implements_and_dunders_are_not_members(self):
        members = collect_members(Child)
        names = [name for _, name in members]
        assert "implements" not in names
        assert not any(n.startswith("__") for n in names)

    def test_object_members_are_ignored(self):
        assert len(collect_members(Unmarked)) == 0

    def test_subclass_redefinition_changes_kind(self):
        members = collect_members(Overrider)
        assert "shared" in members.events
        assert "shared" not in members.fields

    def test_iteration_yields_kind_name_pairs_in_kind_order(self):
        kinds = [kind for kind, _ in collect_members(Potion)]
        assert kinds == sorted(kinds, key=list(MemberKind).index)

    def test_member_set_of(self):
        members = collect_members(Potion)
        assert members.of(MemberKind.EVENT) == ("healed",)
        assert members.of(MemberKind.METHOD) == ("heal",)
        assert members.of(MemberKind.FIELD) == ("charges",)


class TestPathLikeNames:

    @pytest.mark.parametrize("name", ["items/potion.py", "res:potion", "a\\b", "potion.py"])
    def test_path_like(self, name):
        assert looks_like_path(name)

    @pytest.mark.parametrize("name", ["heal", "max_hp", "_private"])
    def test_plain_names(self, name):
        assert not looks_like_path(name)


class TestSource:

    def test_class_in_a_file_has_source(self):
        source = read_source(Potion)
        assert source is not None
        assert "class Potion" in source

    def test_leading_comments_are_included(self):
        assert read_source(CanHeal).startswith("# @interface")

    def test_runtime_built_class_has_no_source(self):
        built = type("BuiltAtRuntime", (), {})
        assert read_source(built) is None
        assert not Definition(built).has_source


class TestDefinition:

    def test_key_is_module_and_qualname(self):
        assert Definition(Potion).key == "tests.fixtures.game.potion:Potion"

    def test_identity_equality_only(self):
        a, b = Definition(Potion), Definition(Potion)
        assert a != b
        assert len({a, b}) == 2

    def test_declared_entries(self):
        assert Definition(Potion).declared == (CanHeal,)

    def test_declared_absent(self):
        assert Definition(Unmarked).declared == ()

    def test_declared_single_entry_is_wrapped(self):
        single = type("SingleDeclaration", (), {"implements": CanHeal})
        assert Definition(single).declared == (CanHeal,)

    def test_inherited_declaration_counts(self):
        sub = type("SubPotion", (Potion,), {})
        assert Definition(sub).declared == (CanHeal,)

    def test_members_are_memoized(self):
        definition = Definition(Potion)
        assert definition.members is definition.members

    def test_marker(self):
        assert Definition(Marked).has_marker
        assert Definition(CanHeal).has_marker
        assert not Definition(Unmarked).has_marker

    def test_location(self):
        path, line = Definition(Potion).location
        assert path.endswith("potion.py")
        assert line > 0

    def test_location_unknown_without_source(self):
        built = type("NowhereToBeFound", (), {})
        assert Definition(built).location == ("", 0)


class TestAbcAndProtocolMembers:

    def test_abc_bookkeeping_is_not_a_member(self):
        members = collect_members(HealsAbstractly)
        assert members.methods == ("heal",)
        assert members.fields == ()
        assert members.events == ()

    def test_protocol_bookkeeping_is_not_a_member(self):
        members = collect_members(HealsStructurally)
        assert members.methods == ("heal",)
        assert members.fields == ("charges",)

    def test_generic_base_contributes_nothing(self):
        members = collect_members(Holds)
        assert members.methods == ("take",)
        assert members.fields == ()

    def test_concrete_abc_subclass_keeps_own_members(self):
        concrete = type("ConcreteHealer", (HealsAbstractly,), {"heal": lambda self, a: a, "dose": 2})
        members = collect_members(concrete)
        assert members.methods == ("heal",)
        assert members.fields == ("dose",)


class TestImplementsAttributeThatIsNotADeclaration:

    def test_method_named_implements_declares_nothing(self):
        assert Definition(Ledger).declared == ()

    def test_method_named_implements_is_a_member(self):
        assert "implements" in collect_members(Ledger).methods

    def test_property_named_implements_declares_nothing(self):
        assert Definition(Exposes).declared == ()
        assert "implements" in collect_members(Exposes).fields
