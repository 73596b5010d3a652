"""Unit tests for the base unit import command."""

from pathlib import Path
from unittest.mock import AsyncMock, MagicMock, patch

from typer.testing import CliRunner

from area_profile.cli.app import app

runner = CliRunner()


def _session_factory() -> MagicMock:
    factory = MagicMock()
    factory.return_value = MagicMock(
        __aenter__=AsyncMock(return_value=AsyncMock()),
        __aexit__=AsyncMock(return_value=False),
    )
    return factory


def _unit(code: str) -> MagicMock:
    unit = MagicMock()
    unit.unit_code = code
    unit.parent_code = code[:4]
    return unit


class TestImportUnitsCommand:
    """Tests for `import units`."""

    def test_successful_import(self, tmp_path: Path) -> None:
        layer = tmp_path / "units.geojson"
        layer.write_text("{}", encoding="utf-8")
        units = [_unit("0180C1010"), _unit("0180C1020"), _unit("0181A0010")]

        with (
            patch("area_profile.core.database.init_engine_from_settings"),
            patch("area_profile.core.database.get_session_factory", return_value=_session_factory()),
            patch("area_profile.core.database.dispose_engine", new_callable=AsyncMock) as mock_dispose,
            patch(
                "area_profile.services.base_unit_service.import_base_units",
                new_callable=AsyncMock,
                return_value=units,
            ),
        ):
            result = runner.invoke(app, ["import", "units", str(layer)])

        assert result.exit_code == 0, result.output
        assert "Imported 3 base units" in result.output
        assert "Parents: 2" in result.output
        mock_dispose.assert_awaited_once()

    def test_invalid_layer(self, tmp_path: Path) -> None:
        layer = tmp_path / "units.csv"
        layer.write_text("a,b\n", encoding="utf-8")

        with (
            patch("area_profile.core.database.init_engine_from_settings"),
            patch("area_profile.core.database.get_session_factory", return_value=_session_factory()),
            patch("area_profile.core.database.dispose_engine", new_callable=AsyncMock),
            patch(
                "area_profile.services.base_unit_service.import_base_units",
                new_callable=AsyncMock,
                side_effect=ValueError("Unsupported unit file format: .csv"),
            ),
        ):
            result = runner.invoke(app, ["import", "units", str(layer)])

        assert result.exit_code == 1
        assert "Unsupported unit file format" in result.output

    def test_database_not_configured(self, tmp_path: Path) -> None:
        layer = tmp_path / "units.geojson"
        layer.write_text("{}", encoding="utf-8")

        with patch(
            "area_profile.core.database.init_engine_from_settings",
            side_effect=RuntimeError("DATABASE_URL is not configured"),
        ):
            result = runner.invoke(app, ["import", "units", str(layer)])

        assert result.exit_code == 1
        assert "DATABASE_URL is not configured" in result.output

    def test_file_not_found(self) -> None:
        result = runner.invoke(app, ["import", "units", "/nonexistent/units.geojson"])
        assert result.exit_code != 0
