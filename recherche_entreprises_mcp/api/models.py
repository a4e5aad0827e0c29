"""ABOUTME: Pydantic models for the API Recherche d'Entreprises.

Two families live here:
- Search parameter models (TextSearchParams, NearbySearchParams). They only
  enforce types, enums and the absence of unknown fields. Range and format
  constraints are advertised in the JSON schema but checked by the ordered
  rule tables in requests.py, so the first failing rule decides the error.
- Read-only result models mirroring the upstream JSON (SearchResponse,
  BusinessResult and friends). Unknown upstream fields are ignored and every
  field is optional, so minimal responses still parse. Numbers are accepted
  in string fields.
"""

from typing import Annotated, Any, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Discriminator, Field, Tag

# ============================================================================
# SHARED CONSTANTS
# ============================================================================

SECTION_PATTERN = r"^[A-U](,[A-U])*$"
DEPARTEMENT_SCHEMA_PATTERN = r"\b([013-8]\d?|2[aAbB1-9]?|9[0-59]?|97[12346])\b"

MIN_PER_PAGE = 1
MAX_PER_PAGE = 25
MIN_PAGE = 1
MIN_MATCHING_ETABLISSEMENTS = 1
MAX_MATCHING_ETABLISSEMENTS = 100
MAX_RADIUS_KM = 50

INCLUDE_FIELDS = ("complements", "dirigeants", "finances", "matching_etablissements", "siege", "score")

SECTION_DESCRIPTION = (
    "Activity section codes (A-U). Values: A (Agriculture), B (Mining), C (Manufacturing), "
    "D (Energy), E (Water/Waste), F (Construction), G (Trade), H (Transport), I (Hospitality), "
    "J (IT/Communication), K (Finance), L (Real Estate), M (Professional), N (Administrative), "
    "O (Public Admin), P (Education), Q (Health), R (Arts), S (Other Services), T (Households), "
    "U (Extraterritorial). Comma-separated list accepted."
)
MATCHING_DESCRIPTION = (
    "Number of related establishments to include in response (1-100). Default: 10."
)
MINIMAL_DESCRIPTION = (
    "Return minimal response excluding secondary fields. Set to true for faster responses "
    "when you only need basic business information."
)
INCLUDE_DESCRIPTION = (
    "Include specific secondary fields when minimal=true. Values: "
    + ", ".join(f"\"{field}\"" for field in INCLUDE_FIELDS) + ". "
    "Comma-separated for multiple fields. Example: \"siege,complements\""
)
PAGE_DESCRIPTION = "Page number to return (minimum 1). Default: 1"
PER_PAGE_DESCRIPTION = "Results per page (maximum 25). Default: 10."


def _flag(description: str) -> Any:
    return Field(default=None, description=description)


# ============================================================================
# SEARCH PARAMETER MODELS
# ============================================================================

class SearchParamsBase(BaseModel):
    """Fields shared by both search modes."""

    model_config = ConfigDict(extra="forbid", coerce_numbers_to_str=True)

    activite_principale: Optional[str] = Field(
        default=None,
        description="NAF/APE activity codes (INSEE classification). Single code like \"62.01Z\" "
                    "or comma-separated list like \"01.12Z,28.15Z\"."
    )
    section_activite_principale: Optional[str] = Field(
        default=None,
        description=SECTION_DESCRIPTION,
        json_schema_extra={"pattern": SECTION_PATTERN}
    )
    limite_matching_etablissements: Optional[int] = Field(
        default=None,
        description=MATCHING_DESCRIPTION,
        json_schema_extra={"minimum": MIN_MATCHING_ETABLISSEMENTS, "maximum": MAX_MATCHING_ETABLISSEMENTS}
    )
    minimal: Optional[bool] = Field(default=None, description=MINIMAL_DESCRIPTION)
    include: Optional[str] = Field(default=None, description=INCLUDE_DESCRIPTION)
    page: Optional[int] = Field(
        default=None,
        description=PAGE_DESCRIPTION,
        json_schema_extra={"minimum": MIN_PAGE}
    )
    per_page: Optional[int] = Field(
        default=None,
        description=PER_PAGE_DESCRIPTION,
        json_schema_extra={"minimum": MIN_PER_PAGE, "maximum": MAX_PER_PAGE}
    )


class TextSearchParams(SearchParamsBase):
    """Parameters of the /search endpoint."""

    q: Optional[str] = Field(
        default=None,
        description="Search terms for business name, address, directors, or elected officials."
    )

    # Classification
    categorie_entreprise: Optional[Literal["PME", "ETI", "GE"]] = Field(
        default=None,
        description="Company size category. PME: Small/Medium Enterprise (< 250 employees), "
                    "ETI: Intermediate Enterprise (250-5000 employees), GE: Large Enterprise (> 5000 employees)"
    )
    nature_juridique: Optional[str] = Field(
        default=None,
        description="Legal nature codes (INSEE classification), e.g. \"5710\" for SAS. Comma-separated list accepted."
    )
    tranche_effectif_salarie: Optional[str] = Field(
        default=None,
        description="Employee count range codes (INSEE), e.g. \"00\", \"01\", \"12\", \"53\", \"NN\". "
                    "Comma-separated list accepted."
    )

    # Geography
    code_postal: Optional[str] = Field(
        default=None,
        description="French postal codes (5 digits), e.g. \"75001\" or \"75001,75002\"."
    )
    code_commune: Optional[str] = Field(
        default=None,
        description="INSEE commune codes (5 characters). Comma-separated list accepted."
    )
    departement: Optional[str] = Field(
        default=None,
        description="French department codes, e.g. \"75\" (Paris), \"2A\" (Corse-du-Sud), "
                    "\"971\" (Guadeloupe). Comma-separated list accepted.",
        json_schema_extra={"pattern": DEPARTEMENT_SCHEMA_PATTERN}
    )
    region: Optional[str] = Field(
        default=None,
        description="French region codes (2 digits), e.g. \"11\" (Ile-de-France). Comma-separated list accepted."
    )
    epci: Optional[str] = Field(
        default=None,
        description="EPCI (intercommunal cooperation) SIREN numbers. Comma-separated list accepted."
    )
    code_collectivite_territoriale: Optional[str] = Field(
        default=None,
        description="Territorial collectivity codes, e.g. \"75C\" for the Paris commune."
    )

    etat_administratif: Optional[Literal["A", "C"]] = Field(
        default=None,
        description="Administrative status. \"A\" for active businesses, \"C\" for ceased businesses."
    )

    # Boolean filters
    est_association: Optional[bool] = _flag("Associations only.")
    est_bio: Optional[bool] = _flag("Businesses with at least one establishment certified organic by Agence Bio.")
    est_collectivite_territoriale: Optional[bool] = _flag("Territorial collectivities (municipalities, departments, regions).")
    est_entrepreneur_individuel: Optional[bool] = _flag("Individual entrepreneurs (sole proprietorships).")
    est_entrepreneur_spectacle: Optional[bool] = _flag("Businesses holding an entertainment industry license.")
    est_ess: Optional[bool] = _flag("Social and Solidarity Economy (ESS) businesses.")
    est_finess: Optional[bool] = _flag("Businesses with FINESS establishments (health and social sector).")
    est_organisme_formation: Optional[bool] = _flag("Businesses with training organization establishments.")
    est_patrimoine_vivant: Optional[bool] = _flag("Businesses with the Living Heritage Company (EPV) label.")
    est_qualiopi: Optional[bool] = _flag("Businesses with Qualiopi certification.")
    est_rge: Optional[bool] = _flag("Businesses recognized as Environmental Guarantors (RGE).")
    est_siae: Optional[bool] = _flag("Integration through Economic Activity structures (SIAE).")
    est_service_public: Optional[bool] = _flag("Public service structures.")
    est_l100_3: Optional[bool] = _flag("Administrations under article L. 100-3 of the CRPA.")
    est_societe_mission: Optional[bool] = _flag("Mission-driven companies (societes a mission).")
    est_uai: Optional[bool] = _flag("Businesses with UAI establishments (education sector).")
    est_achats_responsables: Optional[bool] = _flag("Businesses with the Responsible Supplier Relations and Purchases label.")
    est_alim_confiance: Optional[bool] = _flag("Businesses with Alim'Confiance food safety control results.")
    convention_collective_renseignee: Optional[bool] = _flag("Businesses with a collective agreement specified.")
    egapro_renseignee: Optional[bool] = _flag("Businesses with a gender equality index specified.")

    # Finances
    ca_min: Optional[int] = Field(
        default=None,
        description="Minimum annual revenue in euros.",
        json_schema_extra={"minimum": 0}
    )
    ca_max: Optional[int] = Field(
        default=None,
        description="Maximum annual revenue in euros.",
        json_schema_extra={"minimum": 0}
    )
    resultat_net_min: Optional[int] = Field(default=None, description="Minimum net result in euros. Can be negative.")
    resultat_net_max: Optional[int] = Field(default=None, description="Maximum net result in euros.")

    # Persons
    nom_personne: Optional[str] = Field(
        default=None,
        description="Last name of a director or elected official, e.g. \"Dupont\"."
    )
    prenoms_personne: Optional[str] = Field(
        default=None,
        description="First name(s) of a director or elected official."
    )
    date_naissance_personne_min: Optional[str] = Field(
        default=None,
        description="Minimum birth date in YYYY-MM-DD format.",
        json_schema_extra={"format": "date"}
    )
    date_naissance_personne_max: Optional[str] = Field(
        default=None,
        description="Maximum birth date in YYYY-MM-DD format.",
        json_schema_extra={"format": "date"}
    )
    type_personne: Optional[Literal["dirigeant", "elu"]] = Field(
        default=None,
        description="\"dirigeant\" for business directors, \"elu\" for elected officials."
    )

    # Identifiers
    id_convention_collective: Optional[str] = Field(default=None, description="Collective agreement identifier (IDCC).")
    id_finess: Optional[str] = Field(default=None, description="FINESS identifier.")
    id_rge: Optional[str] = Field(default=None, description="RGE identifier.")
    id_uai: Optional[str] = Field(default=None, description="UAI identifier.")


def _require_coordinates(schema: Dict[str, Any]) -> None:
    schema["required"] = ["lat", "long"]


class NearbySearchParams(SearchParamsBase):
    """Parameters of the /near_point endpoint."""

    model_config = ConfigDict(
        extra="forbid",
        coerce_numbers_to_str=True,
        json_schema_extra=_require_coordinates
    )

    # Presence is checked by the rule table so the error message stays stable
    lat: Optional[float] = Field(
        default=None,
        description="Latitude in decimal degrees (-90 to 90). Example: 48.8566 for Paris center.",
        json_schema_extra={"minimum": -90, "maximum": 90}
    )
    long: Optional[float] = Field(
        default=None,
        description="Longitude in decimal degrees (-180 to 180). Example: 2.3522 for Paris center.",
        json_schema_extra={"minimum": -180, "maximum": 180}
    )
    radius: Optional[float] = Field(
        default=None,
        description="Search radius in kilometers (maximum 50km). Default: 5km.",
        json_schema_extra={"exclusiveMinimum": 0, "maximum": MAX_RADIUS_KM}
    )


# ============================================================================
# RESULT MODELS
# ============================================================================

class UpstreamModel(BaseModel):
    """Read-only view over an upstream JSON object."""

    model_config = ConfigDict(extra="ignore", frozen=True, coerce_numbers_to_str=True)


class FinancialData(UpstreamModel):
    ca: Optional[Union[int, float]] = None
    resultat_net: Optional[Union[int, float]] = None


class DirigeantPersonnePhysique(UpstreamModel):
    """Natural-person director."""
    type_dirigeant: Literal["personne physique"]
    nom: Optional[str] = None
    prenoms: Optional[str] = None
    annee_de_naissance: Optional[str] = None
    date_de_naissance: Optional[str] = None
    qualite: Optional[str] = None
    nationalite: Optional[str] = None


class DirigeantPersonneMorale(UpstreamModel):
    """Legal-person director (a company sitting on the board)."""
    type_dirigeant: Literal["personne morale"]
    siren: Optional[str] = None
    denomination: Optional[str] = None
    qualite: Optional[str] = None


class DirigeantAutre(UpstreamModel):
    """Director with a missing or unrecognised type_dirigeant."""
    type_dirigeant: Optional[str] = None
    nom: Optional[str] = None
    prenoms: Optional[str] = None
    denomination: Optional[str] = None
    qualite: Optional[str] = None


DIRIGEANT_TYPES = ("personne physique", "personne morale")


def _dirigeant_tag(value: Any) -> str:
    if isinstance(value, dict):
        kind = value.get("type_dirigeant")
    else:
        kind = getattr(value, "type_dirigeant", None)
    return kind if kind in DIRIGEANT_TYPES else "autre"


Dirigeant = Annotated[
    Union[
        Annotated[DirigeantPersonnePhysique, Tag("personne physique")],
        Annotated[DirigeantPersonneMorale, Tag("personne morale")],
        Annotated[DirigeantAutre, Tag("autre")],
    ],
    Discriminator(_dirigeant_tag)
]


class Etablissement(UpstreamModel):
    siret: Optional[str] = None
    adresse: Optional[str] = None
    activite_principale: Optional[str] = None
    etat_administratif: Optional[str] = None
    est_siege: Optional[bool] = None
    latitude: Optional[str] = None
    longitude: Optional[str] = None
    code_postal: Optional[str] = None
    commune: Optional[str] = None
    libelle_commune: Optional[str] = None
    date_creation: Optional[str] = None
    date_fermeture: Optional[str] = None
    tranche_effectif_salarie: Optional[str] = None
    nom_commercial: Optional[str] = None
    liste_enseignes: Optional[List[str]] = None


class Complements(UpstreamModel):
    est_association: Optional[bool] = None
    est_bio: Optional[bool] = None
    est_rge: Optional[bool] = None
    est_qualiopi: Optional[bool] = None
    est_ess: Optional[bool] = None
    est_service_public: Optional[bool] = None
    est_patrimoine_vivant: Optional[bool] = None
    est_entrepreneur_individuel: Optional[bool] = None
    est_entrepreneur_spectacle: Optional[bool] = None
    est_finess: Optional[bool] = None
    est_organisme_formation: Optional[bool] = None
    est_siae: Optional[bool] = None
    est_societe_mission: Optional[bool] = None
    est_uai: Optional[bool] = None
    identifiant_association: Optional[str] = None


class BusinessResult(UpstreamModel):
    """One business entity (unite legale) as returned by a search."""

    siren: Optional[str] = None
    nom_complet: Optional[str] = None
    nom_raison_sociale: Optional[str] = None
    sigle: Optional[str] = None
    nombre_etablissements: Optional[int] = None
    nombre_etablissements_ouverts: Optional[int] = None
    siege: Optional[Etablissement] = None
    date_creation: Optional[str] = None
    date_fermeture: Optional[str] = None
    tranche_effectif_salarie: Optional[str] = None
    categorie_entreprise: Optional[str] = None
    etat_administratif: Optional[str] = None
    nature_juridique: Optional[str] = None
    activite_principale: Optional[str] = None
    section_activite_principale: Optional[str] = None
    matching_etablissements: Optional[List[Etablissement]] = None
    dirigeants: Optional[List[Dirigeant]] = None
    finances: Optional[Dict[str, FinancialData]] = None
    complements: Optional[Complements] = None


class SearchResponse(UpstreamModel):
    """Successful payload of /search and /near_point."""

    results: List[BusinessResult] = Field(default_factory=list)
    total_results: int = 0
    page: int = 1
    per_page: int = 0
    total_pages: int = 0
