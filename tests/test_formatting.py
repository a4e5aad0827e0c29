"""ABOUTME: Tests for the markdown search report formatter."""

import pytest

from recherche_entreprises_mcp.api.formatting import (
    DATA_SOURCE_FOOTER,
    NO_RESULTS_MESSAGE,
    category_label,
    format_director,
    format_number,
    format_search_response,
)
from recherche_entreprises_mcp.api.models import (
    DirigeantAutre,
    DirigeantPersonneMorale,
    DirigeantPersonnePhysique,
    SearchResponse,
)


def person(index):
    return {
        "type_dirigeant": "personne physique",
        "nom": f"NOM{index}",
        "prenoms": f"Prenom{index}",
        "qualite": "Gérant",
    }


def establishment(index):
    return {
        "siret": f"1234567890000{index}",
        "adresse": f"{index} RUE DE LA PAIX 75002 PARIS",
        "activite_principale": "62.01Z",
        "etat_administratif": "F" if index % 2 else "A",
    }


def render(results, search_type="text search", **overrides):
    payload = {
        "results": results,
        "total_results": len(results),
        "page": 1,
        "per_page": 10,
        "total_pages": 1,
    }
    payload.update(overrides)
    return format_search_response(SearchResponse.model_validate(payload), search_type)


class TestValueHelpers:
    """Tests for small rendering helpers."""

    def test_format_number(self):
        """Test thousands separators and missing values."""
        assert format_number(1234567) == "1,234,567"
        assert format_number(-514000.0) == "-514,000"
        assert format_number(None) == "N/A"

    @pytest.mark.parametrize("code,label", [
        ("PME", "Small/Medium Enterprise (< 250 employees)"),
        ("ETI", "Intermediate Enterprise (250-5000 employees)"),
        ("GE", "Large Enterprise (> 5000 employees)"),
        ("XYZ", "XYZ"),
    ])
    def test_category_label(self, code, label):
        """Test known categories and the raw fallback."""
        assert category_label(code) == label

    def test_format_director_variants(self):
        """Test natural and legal person rendering."""
        natural = DirigeantPersonnePhysique(**person(1))
        legal = DirigeantPersonneMorale(
            type_dirigeant="personne morale",
            denomination="KPMG",
            qualite="Commissaire aux comptes"
        )
        assert format_director(natural) == "Prenom1 NOM1 (Gérant)"
        assert format_director(legal) == "KPMG (Commissaire aux comptes)"

    def test_format_untyped_director(self):
        """Test a director without type_dirigeant renders like a legal person."""
        untyped = DirigeantAutre(denomination="SCI DES LILAS", qualite="Associé")
        assert format_director(untyped) == "SCI DES LILAS (Associé)"


class TestSearchReport:
    """Tests for format_search_response."""

    def test_zero_results(self):
        """Test that an empty response renders only the summary."""
        text = render([], total_pages=0)
        assert text.startswith("# French Business Search Results (text search)")
        assert "- Total results: 0" in text
        assert NO_RESULTS_MESSAGE in text
        assert "## 1." not in text
        assert DATA_SOURCE_FOOTER not in text

    def test_summary_block(self, sample_business):
        """Test the summary counts."""
        text = render([sample_business], total_results=1234, page=2, total_pages=124)
        assert "- Total results: 1,234" in text
        assert "- Page: 2 of 124" in text
        assert "- Results per page: 10" in text
        assert "- Showing: 1 businesses" in text

    def test_business_section(self, sample_business):
        """Test the sections of one business."""
        text = render([sample_business])
        assert "## 1. LA POSTE" in text
        assert "- SIREN: 356000000" in text
        assert "- Company category: Large Enterprise (> 5000 employees)" in text
        assert "- Address: 9 RUE DU COLONEL PIERRE AVIA 75015 PARIS" in text
        assert "- Coordinates: 48.83, 2.27" in text
        assert "- 2023 Revenue: €34,000,000,000" in text
        assert "- 2023 Net Result: €514,000,000" in text
        assert "- Philippe WAHL (President)" in text
        assert "- KPMG (Commissaire aux comptes)" in text
        assert text.rstrip().endswith("*Rate limit: 7 requests per second - search responsibly*")

    def test_certifications_in_checklist_order(self, sample_business):
        """Test that only set flags are listed, in fixed order."""
        text = render([sample_business])
        assert "**Certifications & Labels:** Qualiopi certified, Social & Solidarity Economy, Public service" in text

    def test_no_certifications(self, sample_business):
        """Test that the label line is omitted when no flag is set."""
        sample_business["complements"] = {"est_bio": False}
        assert "Certifications & Labels" not in render([sample_business])

    def test_pme_label(self, sample_business):
        """Test the PME description."""
        sample_business["categorie_entreprise"] = "PME"
        assert "Small/Medium Enterprise (< 250 employees)" in render([sample_business])

    def test_unknown_category_raw(self, sample_business):
        """Test that an unknown category code is shown unchanged."""
        sample_business["categorie_entreprise"] = "MICRO"
        assert "- Company category: MICRO" in render([sample_business])

    def test_director_truncation(self, sample_business):
        """Test five directors render as three plus a remainder line."""
        sample_business["dirigeants"] = [person(i) for i in range(1, 6)]
        text = render([sample_business])
        assert "- Prenom3 NOM3 (Gérant)" in text
        assert "Prenom4" not in text
        assert "- ... and 2 more" in text

    def test_establishment_truncation(self, sample_business):
        """Test related establishments are capped at three."""
        sample_business["matching_etablissements"] = [establishment(i) for i in range(1, 6)]
        text = render([sample_business])
        assert "**Related Establishments (5 total):**" in text
        assert "3. SIRET: 12345678900003" in text
        assert "4. SIRET" not in text
        assert "... and 2 more establishments" in text
        assert "   Status: Closed" in text

    def test_missing_optional_sections(self, sample_business):
        """Test a minimal business without siege, finances or directors."""
        for key in ("siege", "finances", "dirigeants", "complements", "matching_etablissements"):
            del sample_business[key]
        text = render([sample_business])
        assert "**Headquarters:**" not in text
        assert "**Financial Data:**" not in text
        assert "**Directors:**" not in text

    def test_pagination_hint(self, sample_business):
        """Test the hint appears only with several pages."""
        assert "**Pagination:**" in render([sample_business], total_pages=3)
        assert "**Pagination:**" not in render([sample_business], total_pages=1)

    def test_geographic_header(self, sample_business):
        """Test the search type label in the header."""
        text = render([sample_business], search_type="geographic search")
        assert text.startswith("# French Business Search Results (geographic search)")
