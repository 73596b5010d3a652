"""Unit tests for the GeoJSON base unit reader."""

import json
from pathlib import Path

import pytest

from area_profile.lib.unit_loader import read_geojson


def _square(x: float, y: float, size: float = 0.1) -> list:
    return [[[x, y], [x + size, y], [x + size, y + size], [x, y + size], [x, y]]]


def _write(tmp_path: Path, data: dict, name: str = "units.geojson") -> Path:
    path = tmp_path / name
    path.write_text(json.dumps(data), encoding="utf-8")
    return path


def _feature(props: dict | None, geometry: dict | None) -> dict:
    return {"type": "Feature", "properties": props, "geometry": geometry}


class TestReadGeojson:
    """Tests for read_geojson."""

    def test_polygon_becomes_multipolygon(self, tmp_path: Path) -> None:
        path = _write(
            tmp_path,
            {
                "type": "FeatureCollection",
                "features": [_feature({"deso": "0180C1010"}, {"type": "Polygon", "coordinates": _square(18.0, 59.0)})],
            },
        )
        units = read_geojson(path)
        assert len(units) == 1
        assert units[0].unit_code == "0180C1010"
        assert units[0].parent_code == "0180"
        assert units[0].geometry.geom_type == "MultiPolygon"

    def test_multipolygon_passthrough(self, tmp_path: Path) -> None:
        geometry = {"type": "MultiPolygon", "coordinates": [_square(18.0, 59.0), _square(18.5, 59.0)]}
        path = _write(tmp_path, {"type": "FeatureCollection", "features": [_feature({"deso": "0180C1010"}, geometry)]})
        units = read_geojson(path)
        assert len(units[0].geometry.geoms) == 2

    def test_skips_features_without_code_or_geometry(self, tmp_path: Path) -> None:
        polygon = {"type": "Polygon", "coordinates": _square(18.0, 59.0)}
        path = _write(
            tmp_path,
            {
                "type": "FeatureCollection",
                "features": [
                    _feature({"deso": "0180C1010"}, polygon),
                    _feature({"name": "no code"}, polygon),
                    _feature({"deso": "0180C1020"}, None),
                    _feature({"deso": "0180C1030"}, {"type": "Point", "coordinates": [18.0, 59.0]}),
                ],
            },
        )
        units = read_geojson(path)
        assert [u.unit_code for u in units] == ["0180C1010"]

    def test_invalid_geometry_repaired(self, tmp_path: Path) -> None:
        """A self-intersecting bow-tie is repaired with buffer(0)."""
        bowtie = {"type": "Polygon", "coordinates": [[[0, 0], [1, 1], [1, 0], [0, 1], [0, 0]]]}
        path = _write(tmp_path, {"type": "FeatureCollection", "features": [_feature({"deso": "0180C1010"}, bowtie)]})
        units = read_geojson(path)
        assert len(units) == 1
        assert units[0].geometry.is_valid
        assert units[0].geometry.geom_type == "MultiPolygon"

    def test_not_feature_collection(self, tmp_path: Path) -> None:
        path = _write(tmp_path, {"type": "Polygon", "coordinates": _square(0, 0)})
        with pytest.raises(ValueError, match="Expected FeatureCollection"):
            read_geojson(path)

    def test_no_features(self, tmp_path: Path) -> None:
        path = _write(tmp_path, {"type": "FeatureCollection", "features": []})
        with pytest.raises(ValueError, match="no features"):
            read_geojson(path)
