"""Closed relationship-type taxonomy and per-type capability flags."""

from dataclasses import dataclass
from enum import Enum


class RelationshipType(str, Enum):
    # Romantic
    MARRIAGE = "marriage"
    ENGAGEMENT = "engagement"
    COHABITATION = "cohabitation"
    PARTNER = "partner"
    DATING = "dating"
    LOVE_AFFAIR = "love-affair"
    SECRET_AFFAIR = "secret-affair"
    SINGLE_ENCOUNTER = "single-encounter"

    # Ended
    SEPARATION = "separation"
    DIVORCE = "divorce"
    NULLITY = "nullity"
    WIDOWED = "widowed"

    # Family
    SIBLING = "sibling"
    ADOPTION = "adoption"
    STEP_RELATIONSHIP = "step-relationship"
    CHILD = "child"

    # Emotional
    CLOSE = "close"
    DISTANT = "distant"
    CONFLICT = "conflict"
    CUTOFF = "cutoff"
    FUSED = "fused"
    INDIFFERENT = "indifferent"
    HOSTILE = "hostile"
    HATE = "hate"
    BEST_FRIENDS = "best-friends"
    LOVE = "love"

    # Complex dynamics
    TOXIC = "toxic"
    ON_OFF = "on-off"
    COMPLICATED = "complicated"
    DEPENDENCY = "dependency"
    CODEPENDENT = "codependent"
    MANIPULATIVE = "manipulative"
    SUPPORTIVE = "supportive"
    COMPETITIVE = "competitive"

    # Social services
    ABUSIVE = "abusive"
    PROTECTIVE = "protective"
    CAREGIVER = "caregiver"
    FINANCIAL_DEPENDENCY = "financial-dependency"
    SUPERVISED_CONTACT = "supervised-contact"

    @classmethod
    def parse(cls, value: "RelationshipType | str") -> "RelationshipType":
        """Return the member for `value`, raising ValueError for unknown types."""
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError:
            raise ValueError(f"Unknown relationship type: {value!r}") from None

    @property
    def capabilities(self) -> "RelationshipCapabilities":
        return capabilities(self)

    @property
    def is_union_capable(self) -> bool:
        return capabilities(self).union_capable

    @property
    def is_child(self) -> bool:
        return self is RelationshipType.CHILD


@dataclass(frozen=True)
class RelationshipCapabilities:
    group: str
    abbreviation: str
    description: str
    union_capable: bool = False
    directional: bool = False
    high_risk: bool = False
    professional_involvement: bool = False


T = RelationshipType

ROMANTIC = "romantic"
ENDED = "ended"
FAMILY = "family"
EMOTIONAL = "emotional"
COMPLEX = "complex"
SOCIAL_SERVICES = "social-services"

# One row per type: (group, abbreviation, description, union, directional, high-risk, professional)
_CAPABILITY_TABLE: dict[RelationshipType, tuple] = {
    T.MARRIAGE: (ROMANTIC, "M", "Legal marriage or committed partnership", True, False, False, False),
    T.ENGAGEMENT: (ROMANTIC, "E", "Engaged to be married", True, False, False, False),
    T.COHABITATION: (ROMANTIC, "C", "Living together unmarried", True, False, False, False),
    T.PARTNER: (ROMANTIC, "P", "Romantic partner", True, False, False, False),
    T.DATING: (ROMANTIC, "D", "Dating relationship", True, False, False, False),
    T.LOVE_AFFAIR: (ROMANTIC, "LA", "Romantic affair", True, False, False, False),
    T.SECRET_AFFAIR: (ROMANTIC, "SA", "Secret romantic relationship", True, False, False, False),
    T.SINGLE_ENCOUNTER: (
        ROMANTIC, "SE", "One-time romantic or intimate encounter", True, False, False, False
    ),
    T.SEPARATION: (ENDED, "S", "Separated but not divorced", True, False, False, False),
    T.DIVORCE: (ENDED, "D", "Legally divorced", True, False, False, False),
    T.NULLITY: (ENDED, "N", "Marriage annulled", True, False, False, False),
    T.WIDOWED: (ENDED, "W", "Spouse deceased", True, False, False, False),
    T.SIBLING: (FAMILY, "Sib", "Brother or sister relationship", False, False, False, False),
    T.ADOPTION: (FAMILY, "A", "Adopted child relationship", True, False, False, False),
    T.STEP_RELATIONSHIP: (FAMILY, "Step", "Step-family relationship", True, False, False, False),
    T.CHILD: (FAMILY, "Ch", "Parent-child relationship", False, False, False, False),
    T.CLOSE: (EMOTIONAL, "Close", "Very close emotional bond", True, False, False, False),
    T.DISTANT: (EMOTIONAL, "Dist", "Emotionally distant or estranged", False, False, False, False),
    T.CONFLICT: (EMOTIONAL, "Conf", "Frequent conflict or tension", False, False, False, False),
    T.CUTOFF: (EMOTIONAL, "CO", "No contact or communication", False, False, False, False),
    T.FUSED: (EMOTIONAL, "F", "Enmeshed or overly close", False, False, False, False),
    T.INDIFFERENT: (EMOTIONAL, "Ind", "Apathetic or neutral", False, False, False, False),
    T.HOSTILE: (EMOTIONAL, "Host", "Openly hostile or aggressive", False, False, False, False),
    T.HATE: (EMOTIONAL, "H", "Strong negative feelings", False, False, False, False),
    T.BEST_FRIENDS: (EMOTIONAL, "BF", "Very close friendship", True, False, False, False),
    T.LOVE: (EMOTIONAL, "Love", "Strong loving bond", True, False, False, False),
    T.TOXIC: (COMPLEX, "Tox", "Harmful or destructive relationship", True, False, True, False),
    T.ON_OFF: (COMPLEX, "O/O", "Unstable, breaks up and reunites", True, False, False, False),
    T.COMPLICATED: (COMPLEX, "Comp", "Complex, hard to define", True, False, False, False),
    T.DEPENDENCY: (COMPLEX, "Dep", "One person dependent on other", True, False, False, False),
    T.CODEPENDENT: (
        COMPLEX, "CoDep", "Mutually dependent in unhealthy way", True, False, False, False
    ),
    T.MANIPULATIVE: (
        COMPLEX, "Manip", "One person manipulates the other", False, True, True, False
    ),
    T.SUPPORTIVE: (COMPLEX, "Supp", "Healthy supportive relationship", True, False, False, False),
    T.COMPETITIVE: (
        COMPLEX, "Compet", "Competitive dynamic between parties", False, False, False, False
    ),
    T.ABUSIVE: (
        SOCIAL_SERVICES, "Abuse", "Physical, emotional, or other abuse", False, True, True, False
    ),
    T.PROTECTIVE: (
        SOCIAL_SERVICES, "Prot", "One person protects the other", False, True, False, True
    ),
    T.CAREGIVER: (SOCIAL_SERVICES, "Care", "Caregiving relationship", True, True, False, True),
    T.FINANCIAL_DEPENDENCY: (
        SOCIAL_SERVICES, "$", "Financial dependence", False, True, False, False
    ),
    T.SUPERVISED_CONTACT: (
        SOCIAL_SERVICES, "Sup", "Contact requires supervision", False, False, False, True
    ),
}

_CAPABILITIES: dict[RelationshipType, RelationshipCapabilities] = {
    rel_type: RelationshipCapabilities(
        group=group,
        abbreviation=abbr,
        description=desc,
        union_capable=union,
        directional=directional,
        high_risk=high_risk,
        professional_involvement=professional,
    )
    for rel_type, (group, abbr, desc, union, directional, high_risk, professional)
    in _CAPABILITY_TABLE.items()
}

_missing = set(RelationshipType) - set(_CAPABILITIES)
if _missing:
    raise RuntimeError(f"No capabilities defined for {sorted(t.value for t in _missing)}")


def capabilities(rel_type: RelationshipType | str) -> RelationshipCapabilities:
    """Look up the capability flags for a relationship type."""
    return _CAPABILITIES[RelationshipType.parse(rel_type)]


def types_in_group(group: str) -> list[RelationshipType]:
    """All types belonging to `group`, in declaration order."""
    return [t for t in RelationshipType if _CAPABILITIES[t].group == group]


def union_capable_types() -> frozenset[RelationshipType]:
    return frozenset(t for t, caps in _CAPABILITIES.items() if caps.union_capable)
