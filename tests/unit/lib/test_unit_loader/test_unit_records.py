"""Unit tests for base unit property parsing."""

from shapely.geometry import MultiPolygon, Polygon

from area_profile.lib.unit_loader import unit_from_properties

GEOM = MultiPolygon([Polygon([(0, 0), (1, 0), (1, 1), (0, 1), (0, 0)])])


class TestUnitFromProperties:
    """Tests for unit_from_properties."""

    def test_deso_style_properties(self) -> None:
        props = {
            "deso": "0180C1010",
            "kommun": "0180",
            "kommunnamn": "Stockholm",
            "lan": "01",
            "lansnamn": "Stockholms län",
        }
        unit = unit_from_properties(props, GEOM)
        assert unit is not None
        assert unit.unit_code == "0180C1010"
        assert unit.parent_code == "0180"
        assert unit.parent_name == "Stockholm"
        assert unit.region_code == "01"
        assert unit.region_name == "Stockholms län"
        assert unit.category == "C"
        assert unit.name == "Unit 0180C1010"

    def test_parent_defaults_to_code_prefix(self) -> None:
        unit = unit_from_properties({"unit_code": "1480A0001"}, GEOM)
        assert unit is not None
        assert unit.parent_code == "1480"

    def test_custom_prefix_length(self) -> None:
        unit = unit_from_properties({"code": "06001400100"}, GEOM, parent_code_length=5)
        assert unit is not None
        assert unit.parent_code == "06001"

    def test_missing_code_returns_none(self) -> None:
        assert unit_from_properties({"name": "Nowhere"}, GEOM) is None

    def test_blank_code_returns_none(self) -> None:
        assert unit_from_properties({"deso": "  "}, GEOM) is None

    def test_explicit_category_wins(self) -> None:
        unit = unit_from_properties({"deso": "0180C1010", "kategori": "b"}, GEOM)
        assert unit is not None
        assert unit.category == "B"

    def test_unknown_category_is_none(self) -> None:
        """A code without a category letter leaves category unset."""
        unit = unit_from_properties({"code": "06001400100"}, GEOM)
        assert unit is not None
        assert unit.category is None

    def test_population_parsed(self) -> None:
        unit = unit_from_properties({"deso": "0180C1010", "befolkning": "1234.0"}, GEOM)
        assert unit is not None
        assert unit.population == 1234

    def test_bad_population_ignored(self) -> None:
        unit = unit_from_properties({"deso": "0180C1010", "population": "n/a"}, GEOM)
        assert unit is not None
        assert unit.population is None

    def test_numeric_code_stringified(self) -> None:
        unit = unit_from_properties({"ID": 42}, GEOM, parent_code_length=1)
        assert unit is not None
        assert unit.unit_code == "42"
        assert unit.parent_code == "4"
