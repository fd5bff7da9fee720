"""Household membership derived from boundary geometry."""

import dataclasses
import logging
from collections.abc import Iterable, Sequence

from genogram.config import settings
from genogram.geometry import expand_polygon, point_in_polygon
from genogram.models import Household, Person

logger = logging.getLogger(__name__)


def recompute_membership(
    household: Household, people: Iterable[Person], buffer: float | None = None
) -> list[str]:
    """
    Return the ids of everyone whose position lies inside the household boundary.

    Only the straight-edge polygon through the boundary points is used; the rendered
    curve and smoothing never affect membership. A boundary with fewer than 3 points
    has no interior.

    Args:
        household: Household whose boundary is tested
        people: Candidate people, in the order their ids should be returned
        buffer: Outward margin applied to the boundary first. Defaults to
            `settings.membership_buffer`.

    Returns:
        Ids of the contained people
    """
    if household.is_degenerate:
        logger.debug("Household %s has fewer than 3 points; no members", household.id)
        return []

    if buffer is None:
        buffer = settings.membership_buffer
    polygon = expand_polygon(household.points, buffer) if buffer > 0 else household.points

    return [person.id for person in people if point_in_polygon(person.position, polygon)]


def calculate_household_members(
    households: Iterable[Household], people: Sequence[Person], buffer: float | None = None
) -> dict[str, list[str]]:
    """Map each household id to its current members."""
    return {h.id: recompute_membership(h, people, buffer) for h in households}


def update_households_with_members(
    households: Iterable[Household], people: Sequence[Person], buffer: float | None = None
) -> list[Household]:
    """Return copies of `households` with `members` refreshed from geometry."""
    return [
        dataclasses.replace(
            h, points=list(h.points), members=recompute_membership(h, people, buffer)
        )
        for h in households
    ]


def get_person_households(person_id: str, households: Iterable[Household]) -> list[str]:
    """Ids of the households whose cached members include `person_id`."""
    return [h.id for h in households if person_id in h.members]
