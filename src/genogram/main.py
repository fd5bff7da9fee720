"""
1) Load a diagram state ("diagram.json" beside the project, or a built-in sample).
2) Recompute household membership from person positions and boundaries.
3) Build the focus graph and report the focal neighbourhood of one person.
4) Validate the diagram for dangling references, orphans and degenerate households.
5) Walk an edit through undo and redo.
"""

import json
import logging
import sys
from pathlib import Path

from genogram.config import settings
from genogram.graph import find_immediate_family
from genogram.models import DiagramState, Household, NodeRef, Person, Point, Relationship
from genogram.store import DiagramStore
from genogram.validation import validate_state


def sample_state() -> DiagramState:
    """Two parents, their union, two children and one household drawn around the family."""
    return DiagramState(
        people=[
            Person("person-1", "Alex", x=100, y=100),
            Person("person-2", "Sam", x=200, y=100),
            Person("child-1", "Robin", x=120, y=220),
            Person("child-2", "Jo", x=180, y=220),
            Person("partner-1", "Casey", x=400, y=220),
        ],
        relationships=[
            Relationship(
                "rel-marriage", "marriage", NodeRef.person("person-1"), NodeRef.person("person-2")
            ),
            Relationship(
                "rel-child-a", "child", NodeRef.relationship("rel-marriage"), NodeRef.person("child-1")
            ),
            Relationship(
                "rel-child-b", "child", NodeRef.relationship("rel-marriage"), NodeRef.person("child-2")
            ),
            Relationship(
                "rel-dating", "dating", NodeRef.person("child-1"), NodeRef.person("partner-1")
            ),
        ],
        households=[
            Household(
                "household-1",
                points=[Point(50, 50), Point(250, 50), Point(250, 260), Point(50, 260)],
                label="Household 1",
            )
        ],
    )


def load_state(path: Path) -> DiagramState:
    with path.open(encoding="utf-8") as f:
        return DiagramState.from_dict(json.load(f))


def main():
    logging.basicConfig(level=settings.log_level, format="%(levelname)s %(name)s: %(message)s")

    # Paths
    project_root = Path(__file__).resolve().parents[2]
    state_path = Path(sys.argv[1]) if len(sys.argv) > 1 else project_root / "diagram.json"

    if state_path.exists():
        print(f"Loading diagram state: {state_path}")
        state = load_state(state_path)
    else:
        print("Using built-in sample diagram")
        state = sample_state()
    print(
        f"  Found {len(state.people)} people, {len(state.relationships)} relationships, "
        f"{len(state.households)} households and {len(state.text_boxes)} text boxes"
    )

    print("Recomputing household membership...")
    store = DiagramStore(state)
    for household in store.state.households:
        print(f"  {household.label or household.id}: {household.members}")

    print("Building focus graph...")
    G = store.focus_graph()
    print(f"  Graph has {G.number_of_nodes()} nodes and {G.number_of_edges()} edges")

    if store.state.people:
        focal = store.state.people[0]
        view = store.focus(focal.id)
        family = find_immediate_family(focal.id, store.state.relationships)
        print(f"  Focus on {focal.name or focal.id}:")
        print(f"    nodes: {sorted(view.node_ids)}")
        print(f"    relationships: {sorted(view.relationship_ids)}")
        print(f"    parents: {family.parent_ids}, children: {family.child_ids}")

    print("Validating diagram...")
    warnings = validate_state(store.state)
    if warnings:
        print(f"  Found {len(warnings)} validation warnings:")
        for w in warnings[:10]:  # Show first 10 warnings
            print(f"    - {w}")
        if len(warnings) > 10:
            print(f"    ... and {len(warnings) - 10} more")
    else:
        print("  No validation issues found")

    if store.state.people and store.state.households:
        person = store.state.people[0]
        household = store.state.households[0]
        print(f"Moving {person.name or person.id} far away, then undoing...")
        store.move_person(person.id, person.x + 10_000, person.y + 10_000)
        store.checkpoint()
        print(f"  After move: {store.get_household(household.id).members}")
        store.undo()
        print(f"  After undo: {store.get_household(household.id).members}")
        store.redo()
        print(f"  After redo: {store.get_household(household.id).members}")

    print("Done!")


if __name__ == "__main__":
    main()
