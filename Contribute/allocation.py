from typing import Any, Dict, Optional

LIQUIFI_SOURCE = "https://www.liquifi.finance/post/token-vesting-and-investor-lockup-trends"
BITBOND_SOURCE = "https://www.bitbond.com/resources/tokenomics-101"

BUCKET_DEFINITIONS = [
    {
        "key": "core_team",
        "label": "Core Team / Leadership",
        "description": "Founders and ongoing leadership responsible for strategic direction.",
        "typical": "15-25%",
        "source": LIQUIFI_SOURCE,
    },
    {
        "key": "contributors",
        "label": "Contributors / Airdrop",
        "description": "People who contributed work to the project (engineering, marketing, design, operations, etc.).",
        "typical": "5-15%",
        "source": LIQUIFI_SOURCE,
    },
    {
        "key": "network_rewards",
        "label": "Network Rewards",
        "description": "Tokens distributed over time to incentivize ecosystem activity (staking, usage, etc.).",
        "typical": "20-40%",
        "source": LIQUIFI_SOURCE,
    },
    {
        "key": "ecosystem_partners",
        "label": "Ecosystem Partners",
        "description": "Strategic partners, integrations, grants to external builders.",
        "typical": "10-20%",
        "source": LIQUIFI_SOURCE,
    },
    {
        "key": "treasury",
        "label": "Treasury / Reserve",
        "description": "Funds held for future development, operations, and unforeseen needs.",
        "typical": "15-30%",
        "source": LIQUIFI_SOURCE,
    },
]

BUCKET_KEYS = tuple(b["key"] for b in BUCKET_DEFINITIONS)

DEFAULT_BUCKET_VOTES = {
    "core_team": 20,
    "contributors": 10,
    "network_rewards": 30,
    "ecosystem_partners": 15,
    "treasury": 25,
}

# (min, max, default, typical, source)
LOCKUP_RANGES = {
    "lockup_cliff_months": (0, 24, 12, "6-12 months", LIQUIFI_SOURCE),
    "lockup_vesting_months": (12, 60, 36, "24-48 months", BITBOND_SOURCE),
    "lockup_tge_percent": (0, 25, 5, "0-10%", LIQUIFI_SOURCE),
}

REQUIRED_BUCKET_TOTAL = 100

DRAFT_FIELDS = (
    "cap_table_expertise",
    "cap_table_expertise_description",
    "bucket_deferred",
    "bucket_delegated_to",
    "bucket_votes",
    "bucket_rationale",
    "lockup_deferred",
    "lockup_delegated_to",
    "lockup_cliff_months",
    "lockup_vesting_months",
    "lockup_tge_percent",
    "lockup_rationale",
)


def bucket_total(votes: Optional[Dict[str, Any]]) -> int:
    if not votes:
        return 0
    return sum(int(votes.get(key) or 0) for key in BUCKET_KEYS)


def can_submit(votes: Optional[Dict[str, Any]], bucket_deferred: bool) -> bool:
    """Bucket percentages must total exactly 100 unless the section is deferred."""
    if bucket_deferred:
        return True
    return bucket_total(votes) == REQUIRED_BUCKET_TOTAL


def draft_with_defaults(contributor, pending: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    """
    The draft as the preferences form should show it: unwritten autosave
    values first, then saved values, then the form defaults.
    """
    pending = pending or {}

    def current(field):
        return pending[field] if field in pending else getattr(contributor, field)

    votes = dict(DEFAULT_BUCKET_VOTES)
    for source in (contributor.bucket_votes, pending.get("bucket_votes")):
        if source:
            votes.update({k: int(v) for k, v in source.items() if k in BUCKET_KEYS})

    draft = {
        "cap_table_expertise": current("cap_table_expertise") or "",
        "cap_table_expertise_description": current("cap_table_expertise_description") or "",
        "bucket_deferred": bool(current("bucket_deferred")),
        "bucket_delegated_to": current("bucket_delegated_to") or "",
        "bucket_votes": votes,
        "bucket_rationale": current("bucket_rationale") or "",
        "lockup_deferred": bool(current("lockup_deferred")),
        "lockup_delegated_to": current("lockup_delegated_to") or "",
        "lockup_rationale": current("lockup_rationale") or "",
    }
    for field, (_, _, default, _, _) in LOCKUP_RANGES.items():
        value = current(field)
        draft[field] = default if value is None else value
    draft["bucket_total"] = bucket_total(votes)
    return draft


def build_submission(values: Dict[str, Any]) -> Dict[str, Any]:
    """
    Final column values for a submitted preferences form. A deferred section
    keeps its delegate and drops its numbers; an answered section drops the
    delegate.
    """
    bucket_deferred = bool(values.get("bucket_deferred"))
    lockup_deferred = bool(values.get("lockup_deferred"))

    out = {
        "cap_table_expertise": values.get("cap_table_expertise") or "",
        "cap_table_expertise_description": values.get("cap_table_expertise_description") or "",
        "bucket_deferred": bucket_deferred,
        "bucket_delegated_to": (values.get("bucket_delegated_to") or None) if bucket_deferred else None,
        "bucket_votes": None if bucket_deferred else dict(values.get("bucket_votes") or {}),
        "bucket_rationale": values.get("bucket_rationale") or "",
        "lockup_deferred": lockup_deferred,
        "lockup_delegated_to": (values.get("lockup_delegated_to") or None) if lockup_deferred else None,
        "lockup_rationale": values.get("lockup_rationale") or "",
    }
    for field in LOCKUP_RANGES:
        out[field] = None if lockup_deferred else values.get(field)
    return out
