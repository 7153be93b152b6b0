"""Direction catalog and follow-up action links.

Recommendations only ever draw from this fixed set of directions. Each
direction links to the job finder and to its build-your-path page.
"""

from urllib.parse import quote

from career_pathway.schemas.career_assistant import DirectionActions

WAREHOUSE = "warehouse-logistics"
HOSPITALITY = "hospitality-front"
CLEANER = "cleaner"
SECURITY = "security-facilities"
CONSTRUCTION = "construction-trades"
DRIVING = "driving-transport"
MAINTENANCE = "maintenance-facilities"
OFFICE_ADMIN = "office-admin"
DIGITAL = "digital-ai-beginner"
CARE = "care-support"

DIRECTION_TITLES: dict[str, str] = {
    WAREHOUSE: "Warehouse & Logistics",
    HOSPITALITY: "Hospitality & Front of House",
    CLEANER: "Cleaning Services",
    SECURITY: "Security & Facilities",
    CONSTRUCTION: "Construction & Trades",
    DRIVING: "Driving & Transport",
    MAINTENANCE: "Maintenance & Facilities",
    OFFICE_ADMIN: "Office & Admin Support",
    DIGITAL: "Digital & AI-Adjacent Roles",
    CARE: "Care & Support",
}

# Keyed by the action-map id, which differs from the direction id for some
_ACTION_MAP: dict[str, DirectionActions] = {
    "warehouse_logistics": DirectionActions(
        job_finder_url="/jobs?query=warehouse%20operative",
        build_path_url="/build-your-path/warehouse-logistics",
    ),
    "security_facilities": DirectionActions(
        job_finder_url="/jobs?query=security%20sia",
        build_path_url="/build-your-path/security-facilities",
    ),
    "cleaning": DirectionActions(
        job_finder_url="/jobs?query=cleaner",
        build_path_url="/build-your-path/cleaning",
    ),
    "hospitality_front": DirectionActions(
        job_finder_url="/jobs?query=hospitality%20front%20of%20house",
        build_path_url="/build-your-path/hospitality-front",
    ),
    "care_support": DirectionActions(
        job_finder_url="/jobs?query=care%20support",
        build_path_url="/build-your-path/care-support",
    ),
    "driving_transport": DirectionActions(
        job_finder_url="/jobs?query=driver%20delivery",
        build_path_url="/build-your-path/driving-transport",
    ),
    "maintenance_facilities": DirectionActions(
        job_finder_url="/jobs?query=maintenance%20facilities",
        build_path_url="/build-your-path/maintenance-facilities",
    ),
    "office_admin_support": DirectionActions(
        job_finder_url="/jobs?query=admin%20assistant",
        build_path_url="/build-your-path/office-admin",
    ),
    "digital_ai_adjacent": DirectionActions(
        job_finder_url="/jobs?query=junior%20digital%20support",
        build_path_url="/build-your-path/digital-ai-adjacent",
    ),
    "construction_trades": DirectionActions(
        job_finder_url="/jobs?query=construction%20labour",
        build_path_url="/build-your-path/construction-trades",
    ),
}

_ACTION_ALIASES: dict[str, str] = {
    CLEANER: "cleaning",
    OFFICE_ADMIN: "office_admin_support",
    DIGITAL: "digital_ai_adjacent",
}


def direction_title(direction_id: str, qualifier: str | None = None) -> str:
    """Return the display title, optionally with a qualifier.

    Example: ``direction_title(OFFICE_ADMIN, "Advanced")`` ->
    "Office & Admin Support (Advanced)".
    """
    title = DIRECTION_TITLES.get(direction_id, direction_id.replace("-", " ").title())
    return f"{title} ({qualifier})" if qualifier else title


def actions_for(direction_id: str, title: str | None = None) -> DirectionActions:
    """Return the follow-up links for a direction.

    Unknown ids get links derived from the title (or the id) so every
    direction carries actions.
    """
    key = _ACTION_ALIASES.get(direction_id, direction_id.replace("-", "_"))
    mapped = _ACTION_MAP.get(key)
    if mapped is not None:
        return mapped

    query = quote(title if title else direction_id.replace("-", " "), safe="")
    return DirectionActions(
        job_finder_url=f"/jobs?query={query}",
        build_path_url=f"/build-your-path?tag={quote(direction_id, safe='')}",
    )
