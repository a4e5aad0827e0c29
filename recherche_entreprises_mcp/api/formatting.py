"""ABOUTME: Markdown report formatting for business search responses.

Turns a SearchResponse into the text returned to the model: a summary block,
one section per business, and a pagination hint. Pure functions, no I/O.
"""

from typing import List, Optional, Union

from .models import (
    BusinessResult,
    Complements,
    Dirigeant,
    DirigeantPersonnePhysique,
    Etablissement,
    SearchResponse,
)

# ============================================================================
# CONSTANTS
# ============================================================================

# Directors and related establishments shown per business
MAX_DIRECTORS_SHOWN = 3
MAX_ETABLISSEMENTS_SHOWN = 3

CATEGORY_LABELS = {
    "PME": "Small/Medium Enterprise (< 250 employees)",
    "ETI": "Intermediate Enterprise (250-5000 employees)",
    "GE": "Large Enterprise (> 5000 employees)",
}

# Checklist order of certification flags and their labels
CERTIFICATION_LABELS = (
    ("est_association", "Association"),
    ("est_bio", "Organic certified"),
    ("est_rge", "RGE certified"),
    ("est_qualiopi", "Qualiopi certified"),
    ("est_ess", "Social & Solidarity Economy"),
    ("est_service_public", "Public service"),
    ("est_patrimoine_vivant", "Living Heritage"),
)

NOT_AVAILABLE = "N/A"
NO_RESULTS_MESSAGE = "No businesses found matching the search criteria."
DATA_SOURCE_FOOTER = "*Data source: API Recherche d'Entreprises - French Government*"
RATE_LIMIT_FOOTER = "*Rate limit: 7 requests per second - search responsibly*"


# ============================================================================
# VALUE HELPERS
# ============================================================================

def format_number(value: Optional[Union[int, float]]) -> str:
    """Render a number with thousands separators (1234567 -> "1,234,567")."""
    if value is None:
        return NOT_AVAILABLE
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    return f"{value:,}"


def category_label(code: str) -> str:
    """Human description of a company size category, or the raw code if unknown."""
    return CATEGORY_LABELS.get(code, code)


def certification_labels(complements: Optional[Complements]) -> List[str]:
    if complements is None:
        return []
    return [label for flag, label in CERTIFICATION_LABELS if getattr(complements, flag)]


def format_director(dirigeant: Dirigeant) -> str:
    """One director line: natural persons by name, legal persons by company name."""
    if isinstance(dirigeant, DirigeantPersonnePhysique):
        return f"{dirigeant.prenoms} {dirigeant.nom} ({dirigeant.qualite})"
    return f"{dirigeant.denomination} ({dirigeant.qualite})"


def _company_status(code: Optional[str]) -> str:
    return "Active" if code == "A" else "Ceased"


def _establishment_status(code: Optional[str]) -> str:
    return "Active" if code == "A" else "Closed"


# ============================================================================
# SECTION FORMATTERS
# ============================================================================

def _format_basic_information(business: BusinessResult) -> List[str]:
    lines = [
        "**Basic Information:**",
        f"- SIREN: {business.siren}",
        f"- Legal name: {business.nom_raison_sociale or NOT_AVAILABLE}",
        f"- Sigle: {business.sigle or NOT_AVAILABLE}",
        f"- Administrative status: {_company_status(business.etat_administratif)}",
        f"- Creation date: {business.date_creation or NOT_AVAILABLE}",
        f"- Legal nature: {business.nature_juridique or NOT_AVAILABLE}",
        f"- Main activity: {business.activite_principale or NOT_AVAILABLE}",
        f"- Activity section: {business.section_activite_principale or NOT_AVAILABLE}",
    ]

    if business.categorie_entreprise:
        lines.append(f"- Company category: {category_label(business.categorie_entreprise)}")

    if business.tranche_effectif_salarie:
        lines.append(f"- Employee range: {business.tranche_effectif_salarie}")

    lines.append(f"- Number of establishments: {business.nombre_etablissements}")
    lines.append(f"- Open establishments: {business.nombre_etablissements_ouverts}")
    lines.append("")
    return lines


def _format_headquarters(siege: Etablissement) -> List[str]:
    lines = [
        "**Headquarters:**",
        f"- SIRET: {siege.siret}",
        f"- Address: {siege.adresse or NOT_AVAILABLE}",
    ]
    if siege.latitude and siege.longitude:
        lines.append(f"- Coordinates: {siege.latitude}, {siege.longitude}")
    lines.append(f"- Activity: {siege.activite_principale}")
    lines.append(f"- Status: {_establishment_status(siege.etat_administratif)}")
    lines.append("")
    return lines


def _format_finances(business: BusinessResult) -> List[str]:
    if not business.finances:
        return []

    lines = ["**Financial Data:**"]
    for year, data in business.finances.items():
        if data.ca is not None:
            lines.append(f"- {year} Revenue: €{format_number(data.ca)}")
        if data.resultat_net is not None:
            lines.append(f"- {year} Net Result: €{format_number(data.resultat_net)}")
    lines.append("")
    return lines


def _format_directors(dirigeants: List[Dirigeant]) -> List[str]:
    lines = ["**Directors:**"]
    lines.extend(f"- {format_director(d)}" for d in dirigeants[:MAX_DIRECTORS_SHOWN])
    if len(dirigeants) > MAX_DIRECTORS_SHOWN:
        lines.append(f"- ... and {len(dirigeants) - MAX_DIRECTORS_SHOWN} more")
    lines.append("")
    return lines


def _format_establishments(etablissements: List[Etablissement]) -> List[str]:
    lines = [f"**Related Establishments ({len(etablissements)} total):**"]
    for i, etab in enumerate(etablissements[:MAX_ETABLISSEMENTS_SHOWN], 1):
        lines.append(f"{i}. SIRET: {etab.siret}")
        lines.append(f"   Address: {etab.adresse}")
        lines.append(f"   Activity: {etab.activite_principale}")
        lines.append(f"   Status: {_establishment_status(etab.etat_administratif)}")
    if len(etablissements) > MAX_ETABLISSEMENTS_SHOWN:
        remaining = len(etablissements) - MAX_ETABLISSEMENTS_SHOWN
        lines.append(f"... and {remaining} more establishments")
    lines.append("")
    return lines


def format_business(business: BusinessResult, index: int) -> List[str]:
    """Format one business as a markdown section (list of lines)."""
    lines = [f"## {index}. {business.nom_complet}", ""]
    lines.extend(_format_basic_information(business))

    if business.siege:
        lines.extend(_format_headquarters(business.siege))

    lines.extend(_format_finances(business))

    labels = certification_labels(business.complements)
    if labels:
        lines.append(f"**Certifications & Labels:** {', '.join(labels)}")
        lines.append("")

    if business.dirigeants:
        lines.extend(_format_directors(business.dirigeants))

    if business.matching_etablissements:
        lines.extend(_format_establishments(business.matching_etablissements))

    lines.append("---")
    lines.append("")
    return lines


# ============================================================================
# REPORT
# ============================================================================

def format_search_response(response: SearchResponse, search_type: str) -> str:
    """Format a search response as a markdown report.

    Args:
        response: Parsed upstream response
        search_type: Label shown in the header (e.g. "text search", "geographic search")

    Returns:
        Markdown text: summary, per-business sections, pagination hint and footer.
        A response with no results yields the summary and a "no results" line only.
    """
    lines = [
        f"# French Business Search Results ({search_type})",
        "",
        "**Search Summary:**",
        f"- Total results: {format_number(response.total_results)}",
        f"- Page: {response.page} of {response.total_pages}",
        f"- Results per page: {response.per_page}",
        f"- Showing: {len(response.results)} businesses",
        "",
    ]

    if not response.results:
        lines.append(NO_RESULTS_MESSAGE)
        return "\n".join(lines) + "\n"

    for i, business in enumerate(response.results, 1):
        lines.extend(format_business(business, i))

    if response.total_pages > 1:
        lines.append(
            f"**Pagination:** Use \"page\" parameter to access additional results "
            f"(page {response.page} of {response.total_pages})"
        )
        lines.append("")

    lines.append(DATA_SOURCE_FOOTER)
    lines.append(RATE_LIMIT_FOOTER)
    return "\n".join(lines)
