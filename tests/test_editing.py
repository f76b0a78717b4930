import sys
from pathlib import Path

import pytest

sys.path.append(str(Path(__file__).resolve().parents[1]))

from dinner_groups.engine.editing import move_participant, recompute_group, validate_group_composition
from dinner_groups.models import AvoidConstraint, Category, Group
from tests.utils import person


def _group(name, *members):
    return Group(list(members), name=name)


def test_move_participant_recomputes_both_groups():
    first = _group(
        "Group 1",
        person("a", Category.TRAILBLAZERS, "male"),
        person("b", Category.FREE_SPIRITS, "female"),
    )
    second = _group("Group 2", person("c", Category.PLANNERS, "male"))

    groups = move_participant([first, second], "b", 1)

    assert groups[0].member_ids() == ["a"]
    assert groups[1].member_ids() == ["c", "b"]
    assert groups[0].compatibility_score == 0
    # Free Spirits list Planners
    assert groups[1].compatibility_score == 20
    assert groups[1].gender_distribution.female == 1
    assert groups[1].category_distribution[Category.FREE_SPIRITS] == 1


def test_move_participant_errors():
    groups = [_group("Group 1", person("a")), _group("Group 2", person("b"))]
    with pytest.raises(IndexError):
        move_participant(groups, "a", 5)
    with pytest.raises(ValueError):
        move_participant(groups, "zz", 0)
    assert move_participant(groups, "a", 0)[0].member_ids() == ["a"]


def test_recompute_group_after_direct_edit():
    group = _group("Group 1", person("a", age=30), person("b", age=40))
    group.participants.append(person("c", age=50))
    assert group.average_age == 35
    recompute_group(group)
    assert group.average_age == 40
    assert group.size == 3


def test_validate_group_composition():
    group = _group(
        "Group 1",
        person("a", gender="male", age=25, budget="<500"),
        person("b", gender="male", age=40, budget="1500+"),
        person("c", gender="male"),
        person("d", gender="female"),
    )
    warnings = validate_group_composition(group, [AvoidConstraint("a", "d")])
    assert "Gender balance violated (3M/1F)" in warnings
    assert "Age spread is 15 years" in warnings
    assert "Mixed budget bands: 1500+, <500" in warnings
    assert "Avoid pair a/d shares this group" in warnings


def test_validate_group_size_warnings():
    assert validate_group_composition(_group("empty")) == ["Group is empty"]
    small = validate_group_composition(_group("small", person("a"), person("b")))
    assert small == ["Group has fewer than 4 participants"]

    big = _group("big", *[person(f"p{i}", gender="male" if i % 2 else "female") for i in range(10)])
    assert "Group has more than 9 participants" in validate_group_composition(big)

    fine = _group("fine", *[person(f"p{i}", gender="male" if i % 2 else "female") for i in range(6)])
    assert validate_group_composition(fine) == []
