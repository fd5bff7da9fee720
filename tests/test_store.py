"""Test entity store mutation commands."""

import pytest

from genogram.models import Household, NodeRef, Person, Point, TextBox
from genogram.store import DuplicateIdError, EntityNotFoundError


class TestPersonCommands:
    """Tests for person operations."""

    def test_initial_membership_is_computed(self, store):
        assert store.get_household("household-1").members == ["person-1", "person-2"]

    def test_move_person_refreshes_households(self, store):
        store.move_person("child-1", 50, 50)
        assert "child-1" in store.get_household("household-1").members

        store.move_person("person-1", 500, 500)
        assert "person-1" not in store.get_household("household-1").members

    def test_non_positional_update_keeps_members(self, store):
        store.update_person("person-1", name="Alexandra", is_deceased=True)

        person = store.get_person("person-1")
        assert person.name == "Alexandra"
        assert person.is_deceased
        assert store.get_household("household-1").members == ["person-1", "person-2"]

    def test_update_rejects_unknown_fields_and_id(self, store):
        with pytest.raises(TypeError):
            store.update_person("person-1", nickname="Al")
        with pytest.raises(ValueError):
            store.update_person("person-1", id="person-9")

    def test_unknown_person(self, store):
        with pytest.raises(EntityNotFoundError):
            store.get_person("missing")
        with pytest.raises(KeyError):
            store.move_person("missing", 0, 0)

    def test_ids_are_disjoint_across_people_and_relationships(self, store):
        with pytest.raises(DuplicateIdError):
            store.add_person(Person("rel-marriage"))
        with pytest.raises(DuplicateIdError):
            store.connect("person-1", "close", NodeRef.person("child-1"), NodeRef.person("child-2"))

    def test_add_person_inside_household(self, store):
        store.add_person(Person("baby", x=50, y=60))

        assert "baby" in store.get_household("household-1").members

    def test_delete_parent_cascades_union_and_children(self, store):
        removed = store.delete_person("person-1")

        assert removed == ["rel-child-a", "rel-child-b", "rel-marriage"]
        assert store.state.relationships == []
        assert store.get_household("household-1").members == ["person-2"]

    def test_delete_child_keeps_union(self, store):
        removed = store.delete_person("child-1")

        assert removed == ["rel-child-a"]
        assert store.state.relationship_ids() == {"rel-marriage", "rel-child-b"}


class TestRelationshipCommands:
    """Tests for relationship operations."""

    def test_add_child(self, store):
        store.add_person(Person("child-3", x=300, y=200))
        store.add_child("rel-child-c", "rel-marriage", "child-3")

        assert store.connected_node_ids("child-3") == {"person-1", "person-2"}

    def test_add_child_requires_union(self, store):
        store.connect(
            "rel-conflict", "conflict", NodeRef.person("child-1"), NodeRef.person("child-2")
        )

        with pytest.raises(ValueError):
            store.add_child("rel-child-x", "rel-conflict", "person-1")

    def test_update_relationship_preserves_children(self, store):
        store.update_relationship("rel-marriage", type="divorce", is_active=False)

        relationship = store.get_relationship("rel-marriage")
        assert relationship.type.value == "divorce"
        assert store.connected_node_ids("child-1") == {"person-1", "person-2"}

    def test_delete_union_cascades_by_default(self, store):
        removed = store.delete_relationship("rel-marriage")

        assert removed == ["rel-child-a", "rel-child-b", "rel-marriage"]
        assert store.state.relationships == []

    def test_delete_union_without_cascade_leaves_orphans(self, store):
        removed = store.delete_relationship("rel-marriage", cascade=False)

        assert removed == ["rel-marriage"]
        assert [r.id for r in store.orphaned_child_relationships()] == [
            "rel-child-a",
            "rel-child-b",
        ]
        graph = store.focus_graph()
        assert graph.number_of_edges() == 0
        assert store.connected_node_ids("child-1") == set()


class TestHouseholdCommands:
    """Tests for household geometry edits."""

    def test_add_household_computes_members(self, store):
        household = store.add_household(
            Household(
                "household-2",
                points=[Point(0, 150), Point(100, 150), Point(100, 250), Point(0, 250)],
                members=["stale"],
            )
        )

        assert household.members == ["child-1", "child-2"]

    def test_move_household(self, store):
        store.move_household("household-1", 0, 150)

        household = store.get_household("household-1")
        assert household.points[0] == Point(0, 150)
        assert household.members == ["child-1", "child-2"]

    def test_add_point_on_nearest_edge(self, store):
        store.add_household_point("household-1", Point(50, 400))

        household = store.get_household("household-1")
        assert household.points[3] == Point(50, 400)
        assert len(household.points) == 5
        assert household.members == ["person-1", "person-2", "child-1", "child-2"]

    def test_add_point_after_index(self, store):
        store.add_household_point("household-1", Point(150, 50), index=1)

        assert store.get_household("household-1").points[2] == Point(150, 50)

    def test_move_and_remove_point(self, store):
        store.move_household_point("household-1", 2, Point(100, 300))
        household = store.get_household("household-1")
        assert "child-2" in household.members

        store.add_household_point("household-1", Point(0, 50), index=3)
        store.remove_household_point("household-1", 4)
        assert len(household.points) == 4

    def test_cannot_go_below_three_points(self, store):
        store.remove_household_point("household-1", 0)

        with pytest.raises(ValueError):
            store.remove_household_point("household-1", 0)

    def test_members_cannot_be_set(self, store):
        with pytest.raises(ValueError):
            store.update_household("household-1", members=["person-1"])

    def test_update_points(self, store):
        store.update_household("household-1", points=[Point(0, 0), Point(10, 0)], label="Tiny")

        household = store.get_household("household-1")
        assert household.label == "Tiny"
        assert household.members == []

    def test_delete_household(self, store):
        store.delete_household("household-1")

        assert store.state.households == []


class TestFocus:
    def test_focus_view(self, store):
        store.add_person(Person("partner-1"))
        store.connect(
            "rel-child-marriage", "marriage", NodeRef.person("child-1"), NodeRef.person("partner-1")
        )

        view = store.focus("person-1")

        assert view.node_ids == {"person-1", "person-2", "child-1", "child-2"}
        assert view.relationship_ids == {"rel-marriage", "rel-child-a", "rel-child-b"}

    def test_focus_on_unknown_node(self, store):
        view = store.focus("missing")

        assert view.node_ids == {"missing"}
        assert view.relationship_ids == set()

    def test_dangling_person_reference_excluded(self, store):
        store.connect("rel-ghost", "close", NodeRef.person("person-1"), NodeRef.person("ghost"))

        assert "ghost" not in store.connected_node_ids("person-1")

    def test_network_view(self, store):
        store.update_person("child-1", network_member=True)

        view = store.network_view()

        assert view.node_ids == {"child-1"}
        assert view.relationship_ids == {"rel-child-a"}

    def test_network_view_without_members(self, store):
        view = store.network_view()

        assert view.node_ids == set()
        assert view.relationship_ids == set()


class TestStoreHistory:
    """Tests for undo and redo through the store."""

    def test_undo_restores_all_collections(self, store):
        store.checkpoint()
        store.add_text_box(TextBox("note-1", text="Court date"))
        store.move_person("person-1", 500, 500)
        store.delete_relationship("rel-marriage")
        store.checkpoint()

        assert store.undo()

        assert store.state.relationship_ids() == {"rel-marriage", "rel-child-a", "rel-child-b"}
        assert store.get_person("person-1").x == 20
        assert store.state.text_boxes == []
        assert store.get_household("household-1").members == ["person-1", "person-2"]

        assert store.redo()
        assert store.state.relationships == []
        assert store.get_text_box("note-1").text == "Court date"

    def test_undo_at_start_returns_false(self, store):
        assert not store.can_undo
        assert not store.undo()
        assert not store.redo()

    def test_undo_at_start_keeps_unsaved_edits(self, store):
        store.move_person("child-1", 5, 5)

        assert not store.undo()
        assert store.get_person("child-1").x == 5

    def test_unsaved_edits_are_dropped_by_undo(self, store):
        store.move_person("child-1", 1, 1)
        store.checkpoint()
        store.move_person("child-1", 2, 2)
        store.move_person("child-1", 3, 3)
        store.undo()
        assert store.get_person("child-1").x == 20
        assert store.redo()
        assert store.get_person("child-1").x == 1

    def test_load_resets_history(self, store, family_state):
        store.checkpoint()
        store.load(family_state)

        assert not store.can_undo
        assert store.history.index == 0


class TestTextBoxCommands:
    def test_crud(self, store):
        store.add_text_box(TextBox("note-1", text="hello"))
        store.update_text_box("note-1", text="updated", width=300)

        assert store.get_text_box("note-1").text == "updated"
        assert store.get_text_box("note-1").width == 300

        with pytest.raises(DuplicateIdError):
            store.add_text_box(TextBox("note-1"))

        store.delete_text_box("note-1")
        with pytest.raises(EntityNotFoundError):
            store.get_text_box("note-1")
