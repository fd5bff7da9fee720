"""Pytest fixtures for genogram tests."""

import pytest

from genogram.models import DiagramState, Household, NodeRef, Person, Point, Relationship
from genogram.store import DiagramStore


def rel(rel_id, rel_type, source, target):
    """Relationship with endpoints given as ids; ids starting with 'rel-' are unions."""

    def ref(node_id):
        if node_id.startswith("rel-"):
            return NodeRef.relationship(node_id)
        return NodeRef.person(node_id)

    return Relationship(rel_id, rel_type, ref(source), ref(target))


@pytest.fixture
def union_relationships():
    """A marriage with two children hanging from it."""
    return [
        rel("rel-marriage", "marriage", "person-1", "person-2"),
        rel("rel-child-a", "child", "rel-marriage", "child-1"),
        rel("rel-child-b", "child", "rel-marriage", "child-2"),
    ]


@pytest.fixture
def square():
    return [Point(0, 0), Point(100, 0), Point(100, 100), Point(0, 100)]


@pytest.fixture
def family_state(union_relationships, square):
    """The union family with positions and one household around the parents."""
    return DiagramState(
        people=[
            Person("person-1", "Alex", x=20, y=20),
            Person("person-2", "Sam", x=80, y=20),
            Person("child-1", "Robin", x=20, y=200),
            Person("child-2", "Jo", x=80, y=200),
        ],
        relationships=list(union_relationships),
        households=[Household("household-1", points=list(square), label="Household 1")],
    )


@pytest.fixture
def store(family_state):
    return DiagramStore(family_state)
