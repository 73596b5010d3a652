"""Parsed base unit records and property-name conventions."""

from dataclasses import dataclass, field

from shapely.geometry import MultiPolygon

from area_profile.lib.resolver.parents import DEFAULT_PARENT_CODE_LENGTH
from area_profile.models.base_unit import UNIT_CATEGORIES

# Property names tried in order for each field
CODE_PROPERTIES = ["unit_code", "deso", "deso_kod", "desokod", "code", "GEOID", "ID"]
NAME_PROPERTIES = ["name", "deso_name", "namn", "NAME"]
PARENT_CODE_PROPERTIES = ["parent_code", "kommun", "kommun_kod", "kommunkod"]
PARENT_NAME_PROPERTIES = ["parent_name", "kommunnamn", "kommun_namn"]
REGION_CODE_PROPERTIES = ["region_code", "lan", "lan_kod", "lanskod"]
REGION_NAME_PROPERTIES = ["region_name", "lansnamn", "lan_namn"]
CATEGORY_PROPERTIES = ["category", "kategori"]
POPULATION_PROPERTIES = ["population", "befolkning"]

# Position of the urban/rural category letter in a DeSO-style code (KKKKAZZZ)
CATEGORY_INDEX = 4


@dataclass
class BaseUnitData:
    """Parsed base unit ready for database storage or an in-memory store."""

    unit_code: str
    name: str
    parent_code: str | None
    geometry: MultiPolygon
    parent_name: str | None = None
    region_code: str | None = None
    region_name: str | None = None
    category: str | None = None
    population: int | None = None
    properties: dict = field(default_factory=dict)


def _first(props: dict, candidates: list[str]) -> str | None:
    for key in candidates:
        value = props.get(key)
        if value is not None and str(value).strip():
            return str(value).strip()
    return None


def _category(props: dict, unit_code: str) -> str | None:
    explicit = _first(props, CATEGORY_PROPERTIES)
    if explicit and explicit.upper() in UNIT_CATEGORIES:
        return explicit.upper()
    if len(unit_code) > CATEGORY_INDEX and unit_code[CATEGORY_INDEX].upper() in UNIT_CATEGORIES:
        return unit_code[CATEGORY_INDEX].upper()
    return None


def _population(props: dict) -> int | None:
    raw = _first(props, POPULATION_PROPERTIES)
    if raw is None:
        return None
    try:
        return int(float(raw))
    except ValueError:
        return None


def unit_from_properties(
    props: dict,
    geometry: MultiPolygon,
    parent_code_length: int = DEFAULT_PARENT_CODE_LENGTH,
) -> BaseUnitData | None:
    """Build a BaseUnitData from feature properties.

    The parent code defaults to the unit code's first
    ``parent_code_length`` characters.

    Returns:
        BaseUnitData, or None if the feature has no unit code.
    """
    unit_code = _first(props, CODE_PROPERTIES)
    if unit_code is None:
        return None

    return BaseUnitData(
        unit_code=unit_code,
        name=_first(props, NAME_PROPERTIES) or f"Unit {unit_code}",
        parent_code=_first(props, PARENT_CODE_PROPERTIES) or unit_code[:parent_code_length],
        geometry=geometry,
        parent_name=_first(props, PARENT_NAME_PROPERTIES),
        region_code=_first(props, REGION_CODE_PROPERTIES),
        region_name=_first(props, REGION_NAME_PROPERTIES),
        category=_category(props, unit_code),
        population=_population(props),
        properties=props,
    )
