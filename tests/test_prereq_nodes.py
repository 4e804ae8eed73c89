"""Tests for prereq tree structure: ownership, mutation, clone, equality."""

import gc

import pytest

from gurps_prereqs.models.constants import TL_GATE_DISABLED, Attribute
from gurps_prereqs.models.criteria import (
    IntegerCriteria,
    NumericCompareType,
    StringCompareType,
    StringCriteria,
)
from gurps_prereqs.prereq.nodes import (
    AdvantagePrereq,
    AttributePrereq,
    ContainedQuantityPrereq,
    ContainedWeightPrereq,
    PrereqList,
    SkillPrereq,
    SpellMatchMode,
    SpellPrereq,
    is_when_tl_enabled,
    set_when_tl_enabled,
)


def _skill(name: str = "Climbing", level: int = 12) -> SkillPrereq:
    return SkillPrereq(
        name_criteria=StringCriteria(StringCompareType.IS, name),
        level_criteria=IntegerCriteria(NumericCompareType.AT_LEAST, level),
    )


def _tree() -> PrereqList:
    """AND(skill, OR(attribute, spell))"""
    return PrereqList(
        prereqs=[
            _skill(),
            PrereqList(
                requires_all=False,
                prereqs=[
                    AttributePrereq(which=Attribute.ST, combined_with=Attribute.DX),
                    SpellPrereq(mode=SpellMatchMode.COLLEGE_COUNT),
                ],
            ),
        ],
    )


# ===========================================================================
# Tags and defaults
# ===========================================================================


class TestDefaults:
    def test_tags(self):
        assert PrereqList.tag == "prereq_list"
        assert AdvantagePrereq.tag == "advantage_prereq"
        assert SkillPrereq.tag == "skill_prereq"
        assert SpellPrereq.tag == "spell_prereq"
        assert AttributePrereq.tag == "attribute_prereq"
        assert ContainedWeightPrereq.tag == "contained_weight_prereq"
        assert ContainedQuantityPrereq.tag == "contained_quantity_prereq"

    def test_list_defaults(self):
        lst = PrereqList()
        assert lst.requires_all is True
        assert lst.is_empty
        assert lst.children == ()
        assert not lst.when_tl_enabled
        assert lst.when_tl.qualifier == TL_GATE_DISABLED

    def test_leaf_defaults(self):
        assert SkillPrereq().has is True
        assert SkillPrereq().specialization_criteria.is_anything
        assert AdvantagePrereq().notes_criteria.is_anything
        spell = SpellPrereq()
        assert spell.mode is SpellMatchMode.NAME
        assert spell.quantity_criteria.qualifier == 1
        assert AttributePrereq().combined_with is None

    def test_has_text(self):
        assert SkillPrereq().has_text == "Has"
        assert SkillPrereq(has=False).has_text == "Does not have"


# ===========================================================================
# Tech-level gate sentinel
# ===========================================================================


class TestWhenTL:
    def test_sentinel_is_disabled(self):
        assert not is_when_tl_enabled(IntegerCriteria(NumericCompareType.AT_LEAST, TL_GATE_DISABLED))

    def test_other_type_with_sentinel_value_is_enabled(self):
        assert is_when_tl_enabled(IntegerCriteria(NumericCompareType.IS, TL_GATE_DISABLED))

    def test_at_least_other_value_is_enabled(self):
        assert is_when_tl_enabled(IntegerCriteria(NumericCompareType.AT_LEAST, 0))

    def test_toggle(self):
        criteria = IntegerCriteria(NumericCompareType.AT_LEAST, TL_GATE_DISABLED)
        set_when_tl_enabled(criteria, True)
        assert criteria.qualifier == 0
        assert is_when_tl_enabled(criteria)
        set_when_tl_enabled(criteria, False)
        assert criteria.qualifier == TL_GATE_DISABLED

    def test_enable_keeps_existing_gate(self):
        criteria = IntegerCriteria(NumericCompareType.IS, 8)
        set_when_tl_enabled(criteria, True)
        assert criteria.qualifier == 8

    def test_list_property(self):
        lst = PrereqList()
        lst.when_tl_enabled = True
        assert lst.when_tl_enabled
        lst.when_tl_enabled = False
        assert not lst.when_tl_enabled


# ===========================================================================
# Ownership and mutation
# ===========================================================================


class TestOwnership:
    def test_constructor_adopts_children(self):
        tree = _tree()
        for child in tree.children:
            assert child.parent is tree

    def test_depth(self):
        tree = _tree()
        inner = tree.children[1]
        assert tree.depth == 0
        assert tree.children[0].depth == 1
        assert inner.children[0].depth == 2

    def test_add_appends(self):
        lst = PrereqList()
        a, b = _skill("A"), _skill("B")
        lst.add(a)
        lst.add(b)
        assert lst.children == (a, b)
        assert a.parent is lst

    def test_add_at_index(self):
        a, b = _skill("A"), _skill("B")
        lst = PrereqList(prereqs=[a])
        lst.add(b, 0)
        assert lst.index_of(b) == 0
        assert lst.index_of(a) == 1

    def test_add_owned_node_rejected(self):
        child = _skill()
        owner = PrereqList(prereqs=[child])
        other = PrereqList()
        with pytest.raises(ValueError, match="already belongs"):
            other.add(child)
        assert child.parent is owner
        assert other.is_empty

    def test_add_to_itself_rejected(self):
        lst = PrereqList()
        with pytest.raises(ValueError):
            lst.add(lst)

    def test_add_ancestor_rejected(self):
        inner = PrereqList()
        outer = PrereqList(prereqs=[inner])
        with pytest.raises(ValueError):
            inner.add(outer)
        assert outer.parent is None
        assert inner.is_empty

    def test_remove_clears_parent(self):
        child = _skill()
        lst = PrereqList(prereqs=[child])
        lst.remove(child)
        assert lst.is_empty
        assert child.parent is None

    def test_removed_node_can_move(self):
        child = _skill()
        first = PrereqList(prereqs=[child])
        second = PrereqList()
        first.remove(child)
        second.add(child)
        assert child.parent is second

    def test_remove_non_child_is_noop(self):
        lst = PrereqList(prereqs=[_skill()])
        stranger = _skill()
        lst.remove(stranger)
        assert len(lst.children) == 1
        assert stranger.parent is None

    def test_remove_uses_identity(self):
        a, b = _skill(), _skill()
        assert a == b
        lst = PrereqList(prereqs=[a, b])
        lst.remove(b)
        assert lst.children[0] is a

    def test_index_of_missing(self):
        assert PrereqList().index_of(_skill()) == -1

    def test_children_is_read_only_view(self):
        lst = PrereqList(prereqs=[_skill()])
        assert isinstance(lst.children, tuple)

    def test_parent_reference_does_not_own(self):
        child = _skill()
        PrereqList(prereqs=[child])
        gc.collect()
        assert child.parent is None


# ===========================================================================
# Clone and equality
# ===========================================================================


class TestClone:
    def test_clone_is_structurally_equal(self):
        tree = _tree()
        twin = tree.clone()
        assert twin is not tree
        assert twin == tree

    def test_clone_rewires_parents(self):
        tree = _tree()
        twin = tree.clone()
        assert twin.parent is None
        for child in twin.children:
            assert child.parent is twin
        inner = twin.children[1]
        for child in inner.children:
            assert child.parent is inner

    def test_clone_copies_criteria(self):
        tree = _tree()
        twin = tree.clone()
        twin.children[0].name_criteria.qualifier = "Swimming"
        assert tree.children[0].name_criteria.qualifier == "Climbing"
        assert twin.when_tl is not tree.when_tl

    def test_clone_into_parent(self):
        tree = _tree()
        target = PrereqList()
        twin = tree.children[0].clone(target)
        assert twin.parent is target
        assert target.children == (twin,)
        assert tree.children[0].parent is tree

    def test_clone_of_child_is_detached(self):
        tree = _tree()
        twin = tree.children[1].clone()
        assert twin.parent is None
        assert all(child.parent is twin for child in twin.children)

    def test_clone_keeps_gate(self):
        lst = PrereqList(when_tl=IntegerCriteria(NumericCompareType.IS, 8))
        assert lst.clone().when_tl == IntegerCriteria(NumericCompareType.IS, 8)


class TestEquality:
    def test_parent_ignored(self):
        a = _skill()
        PrereqList(prereqs=[a])
        assert a == _skill()

    def test_different_polarity(self):
        assert SkillPrereq(has=True) != SkillPrereq(has=False)

    def test_different_types(self):
        assert SkillPrereq() != AdvantagePrereq()

    def test_list_order_matters(self):
        a = PrereqList(prereqs=[_skill("A"), _skill("B")])
        b = PrereqList(prereqs=[_skill("B"), _skill("A")])
        assert a != b
