"""ABOUTME: Pytest configuration and shared fixtures for business search tests.

Provides sample upstream payloads and a fake API Recherche d'Entreprises
served through httpx.MockTransport, so no test touches the network.
"""

import copy
from typing import Any, Dict, List, Optional

import httpx
import pytest

from recherche_entreprises_mcp.api.client import RechercheEntreprisesClient
from recherche_entreprises_mcp.common.rate_limit import RateLimiter

TEST_BASE_URL = "https://api.test"

SAMPLE_BUSINESS: Dict[str, Any] = {
    "siren": "356000000",
    "nom_complet": "LA POSTE",
    "nom_raison_sociale": "LA POSTE",
    "sigle": None,
    "nombre_etablissements": 17000,
    "nombre_etablissements_ouverts": 9000,
    "siege": {
        "siret": "35600000000048",
        "adresse": "9 RUE DU COLONEL PIERRE AVIA 75015 PARIS",
        "activite_principale": "53.10Z",
        "etat_administratif": "A",
        "est_siege": True,
        "latitude": "48.83",
        "longitude": "2.27",
    },
    "date_creation": "1991-01-01",
    "tranche_effectif_salarie": "53",
    "categorie_entreprise": "GE",
    "etat_administratif": "A",
    "nature_juridique": "5510",
    "activite_principale": "53.10Z",
    "section_activite_principale": "H",
    "dirigeants": [
        {"type_dirigeant": "personne physique", "nom": "WAHL", "prenoms": "Philippe", "qualite": "President"},
        {"type_dirigeant": "personne morale", "siren": "784824153", "denomination": "KPMG", "qualite": "Commissaire aux comptes"},
    ],
    "finances": {
        "2023": {"ca": 34000000000, "resultat_net": 514000000},
    },
    "complements": {
        "est_association": False,
        "est_bio": False,
        "est_ess": True,
        "est_service_public": True,
        "est_qualiopi": True,
    },
    "matching_etablissements": [
        {
            "siret": "35600000012345",
            "adresse": "1 PLACE DE LA POSTE 69001 LYON",
            "activite_principale": "53.10Z",
            "etat_administratif": "A",
        },
    ],
    "unknown_upstream_field": "ignored",
}


def make_payload(results: List[Dict[str, Any]], **overrides) -> Dict[str, Any]:
    """Build a /search response body around a list of results."""
    payload = {
        "results": results,
        "total_results": len(results),
        "page": 1,
        "per_page": 10,
        "total_pages": 1 if results else 0,
    }
    payload.update(overrides)
    return payload


class FakeUpstream:
    """Scriptable stand-in for the upstream API.

    Records every request and answers with the configured status, body and
    headers, or raises the configured exception.
    """

    def __init__(self):
        self.requests: List[httpx.Request] = []
        self.status_code = 200
        self.json_body: Optional[Any] = make_payload([copy.deepcopy(SAMPLE_BUSINESS)])
        self.text_body: Optional[str] = None
        self.headers: Dict[str, str] = {}
        self.exception: Optional[Exception] = None

    def respond(self, status_code: int = 200, json_body: Any = None, text_body: Optional[str] = None, headers=None):
        self.status_code = status_code
        self.json_body = json_body
        self.text_body = text_body
        self.headers = headers or {}

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.exception is not None:
            raise self.exception
        if self.text_body is not None:
            return httpx.Response(self.status_code, text=self.text_body, headers=self.headers)
        return httpx.Response(self.status_code, json=self.json_body, headers=self.headers)

    @property
    def last_request(self) -> httpx.Request:
        return self.requests[-1]


@pytest.fixture
def sample_business():
    """Fixture providing one upstream business record.

    Returns:
        Deep copy of SAMPLE_BUSINESS, safe to mutate
    """
    return copy.deepcopy(SAMPLE_BUSINESS)


@pytest.fixture
def upstream():
    """Fixture providing a FakeUpstream answering one sample business by default."""
    return FakeUpstream()


@pytest.fixture
def client(upstream):
    """Fixture providing a client wired to the fake upstream.

    The rate limiter is set high enough that tests never sleep.
    """
    return RechercheEntreprisesClient(
        base_url=TEST_BASE_URL,
        timeout=5.0,
        rate_limiter=RateLimiter(requests_per_second=1000.0),
        transport=httpx.MockTransport(upstream.handler)
    )


@pytest.fixture
def search_payload():
    """Fixture providing the make_payload builder for custom response bodies."""
    return make_payload
