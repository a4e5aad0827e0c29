"""ABOUTME: Static tool descriptors for the business search MCP server.

Each descriptor pairs a tool name and its long-form description with the
pydantic model that defines its parameters. The JSON schema handed to MCP
clients is derived from that model, so the advertised schema and the
accepted arguments cannot drift apart.
"""

from dataclasses import dataclass
from typing import Any, Dict, Optional, Tuple, Type

from mcp.types import Tool

from .api.models import NearbySearchParams, SearchParamsBase, TextSearchParams

SEARCH_BUSINESSES = "search_businesses"
SEARCH_BUSINESSES_NEARBY = "search_businesses_nearby"

SEARCH_BUSINESSES_DESCRIPTION = """Search for French businesses, associations, and public services using text-based criteria. Filters cover business name, address, directors, elected officials, activity codes, certifications, and many other criteria.

**Key Features:**
- Search by business name, address, or person names
- Filter by business activity (NAF/APE codes)
- Geographic filtering (postal codes, departments, regions)
- Filter by business size, legal status, certifications
- Financial data filtering (revenue, net result)
- Support for associations, individual entrepreneurs, public services

At least one criterion is required: q, activite_principale, code_postal, departement, region, nom_personne, or a boolean filter set to true.

**Usage Examples:**
- Search by name: {"q": "la poste"}
- Search by activity: {"activite_principale": "62.01Z"}
- Search in Paris: {"code_postal": "75001,75002"}
- Search associations: {"est_association": true}
- Search bio-certified businesses: {"est_bio": true}"""

SEARCH_BUSINESSES_NEARBY_DESCRIPTION = """Search for French businesses near specific geographic coordinates. Finds businesses within a radius around a latitude/longitude point, with optional filtering by business activity.

**Key Features:**
- Search by precise geographic coordinates (latitude/longitude)
- Configurable search radius (up to 50km)
- Filter by business activity codes
- Same response format as text search

**Usage Examples:**
- Businesses near Paris center: {"lat": 48.8566, "long": 2.3522, "radius": 5}
- Restaurants near Lyon: {"lat": 45.764, "long": 4.8357, "section_activite_principale": "I", "radius": 2}
- Tech companies nearby: {"lat": 48.8566, "long": 2.3522, "activite_principale": "62.01Z,62.02A"}"""


def _simplify_property(prop: Dict[str, Any]) -> Dict[str, Any]:
    """Collapse pydantic's Optional[...] encoding into a plain JSON schema property."""
    prop = dict(prop)
    any_of = prop.pop("anyOf", None)
    if any_of is not None:
        branches = [branch for branch in any_of if branch.get("type") != "null"]
        if len(branches) == 1:
            prop = {**branches[0], **prop}
        else:
            prop["anyOf"] = branches
    prop.pop("title", None)
    if "default" in prop and prop["default"] is None:
        del prop["default"]
    return prop


def build_input_schema(params_model: Type[SearchParamsBase]) -> Dict[str, Any]:
    """Derive a client-facing JSON schema from a parameter model."""
    raw = params_model.model_json_schema()
    schema: Dict[str, Any] = {
        "type": "object",
        "properties": {
            name: _simplify_property(prop)
            for name, prop in raw.get("properties", {}).items()
        },
        "additionalProperties": False,
    }
    if raw.get("required"):
        schema["required"] = list(raw["required"])
    return schema


@dataclass(frozen=True)
class ToolDescriptor:
    """Name, description and parameter model of one exposed tool."""

    name: str
    description: str
    params_model: Type[SearchParamsBase]

    @property
    def input_schema(self) -> Dict[str, Any]:
        return build_input_schema(self.params_model)

    def to_mcp_tool(self) -> Tool:
        return Tool(name=self.name, description=self.description, inputSchema=self.input_schema)


SEARCH_BUSINESSES_TOOL = ToolDescriptor(
    name=SEARCH_BUSINESSES,
    description=SEARCH_BUSINESSES_DESCRIPTION,
    params_model=TextSearchParams,
)

SEARCH_BUSINESSES_NEARBY_TOOL = ToolDescriptor(
    name=SEARCH_BUSINESSES_NEARBY,
    description=SEARCH_BUSINESSES_NEARBY_DESCRIPTION,
    params_model=NearbySearchParams,
)

TOOLS: Tuple[ToolDescriptor, ...] = (SEARCH_BUSINESSES_TOOL, SEARCH_BUSINESSES_NEARBY_TOOL)


def get_tool(name: str) -> Optional[ToolDescriptor]:
    """Look up a descriptor by tool name."""
    for tool in TOOLS:
        if tool.name == name:
            return tool
    return None
