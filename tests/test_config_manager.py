"""
Unit tests for ConfigManager and the statutory schedule persistence.
"""

import pytest
import json
import tempfile
from pathlib import Path

import sys
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from config.config_manager import (
    ConfigManager, AppConfig, OutputSettings, Paths, Holidays, PayrollPrefs
)
from config.statutory_tables import (
    PH_2026, TaxBracket, get_schedule, schedule_from_dict, schedule_to_dict
)


class TestOutputSettings:
    """Tests for OutputSettings dataclass."""

    def test_default_values(self):
        settings = OutputSettings()

        assert settings.output_dir == ""
        assert settings.register_filename_pattern == "Payroll_Register_{year}_{month}.xlsx"
        assert settings.generate_pdf is True
        assert settings.payslip_filename_pattern == "Payslip_{employee_id}_{year}_{month}.pdf"
        assert settings.sort_by == "name"
        assert settings.currency_code == "PHP"
        assert settings.company_name == ""


class TestAppConfig:
    """Tests for AppConfig defaults."""

    def test_default_statutory_schedule(self):
        config = AppConfig()
        assert config.statutory.version == "PH-2026"
        assert config.statutory == PH_2026

    def test_default_schedule_is_a_copy(self):
        config = AppConfig()
        config.statutory.pagibig.max_contribution = 999.0

        assert PH_2026.pagibig.max_contribution == 100.0
        assert AppConfig().statutory.pagibig.max_contribution == 100.0

    def test_default_payroll_prefs(self):
        prefs = PayrollPrefs()
        assert prefs.generated_by == "HR Department"
        assert prefs.require_finalized_attendance is True


class TestStatutorySchedulePersistence:
    """Tests for schedule dict conversion."""

    def test_round_trip_keeps_every_band_and_bracket(self):
        restored = schedule_from_dict(json.loads(json.dumps(schedule_to_dict(PH_2026))))

        assert restored == PH_2026
        assert len(restored.sss.bands) == 32
        assert len(restored.tax_brackets) == 6

    def test_missing_sections_fall_back_to_builtin(self):
        restored = schedule_from_dict({"version": "PH-2026", "philhealth": {"rate": 0.05}})

        assert restored.philhealth.rate == 0.05
        assert restored.philhealth.max_salary == 100000.0
        assert restored.sss == PH_2026.sss
        assert restored.tax_brackets == PH_2026.tax_brackets

    def test_custom_version(self):
        data = schedule_to_dict(PH_2026)
        data["version"] = "PH-2027"
        data["effective_year"] = 2027
        data["tax_brackets"] = [{"lower_bound": 0, "rate": 0.1, "base_tax": 0}]

        restored = schedule_from_dict(data)
        assert restored.version == "PH-2027"
        assert restored.tax_brackets == [TaxBracket(0.0, 0.1, 0.0)]

    def test_get_schedule_default(self):
        assert get_schedule() is PH_2026


class TestConfigManager:
    """Tests for ConfigManager class."""

    def test_load_nonexistent_creates_default(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            manager = ConfigManager(Path(tmpdir) / "nonexistent.json")
            config = manager.load()

            assert isinstance(config, AppConfig)
            assert config.output_settings.sort_by == "name"
            assert config.payroll.generated_by == "HR Department"

    def test_save_and_load_roundtrip(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            config_path = Path(tmpdir) / "config.json"

            manager = ConfigManager(config_path)
            manager._config = AppConfig(
                paths=Paths(roster_csv="staff.csv", payslip_store="store.json"),
                holidays=Holidays(custom_dates=["2026-01-01", "2026-04-09"]),
                payroll=PayrollPrefs(generated_by="Payroll Officer",
                                     require_finalized_attendance=False),
                output_settings=OutputSettings(
                    output_dir="out",
                    generate_pdf=False,
                    sort_by="department",
                    company_name="Acme Corp"
                )
            )
            manager._config.statutory.sss.default_contribution = 877.5
            manager.save()

            loaded = ConfigManager(config_path).load()

            assert loaded.paths.roster_csv == "staff.csv"
            assert loaded.paths.payslip_store == "store.json"
            assert loaded.holidays.custom_dates == ["2026-01-01", "2026-04-09"]
            assert loaded.payroll.generated_by == "Payroll Officer"
            assert loaded.payroll.require_finalized_attendance is False
            assert loaded.output_settings.output_dir == "out"
            assert loaded.output_settings.generate_pdf is False
            assert loaded.output_settings.sort_by == "department"
            assert loaded.output_settings.company_name == "Acme Corp"
            assert loaded.statutory.sss.default_contribution == 877.5

    def test_load_partial_config(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            config_path = Path(tmpdir) / "config.json"
            with open(config_path, 'w', encoding='utf-8') as f:
                json.dump({"output_settings": {"sort_by": "net_pay"}}, f)

            config = ConfigManager(config_path).load()

            assert config.output_settings.sort_by == "net_pay"
            assert config.output_settings.currency_code == "PHP"
            assert config.statutory == PH_2026

    def test_load_corrupt_file_uses_defaults(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            config_path = Path(tmpdir) / "config.json"
            config_path.write_text("{not json", encoding='utf-8')

            config = ConfigManager(config_path).load()

            assert config.output_settings.sort_by == "name"

    def test_update(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            config_path = Path(tmpdir) / "nested" / "config.json"
            manager = ConfigManager(config_path)
            manager.load()

            manager.update(paths=Paths(roster_csv="roster.csv"), unknown_key="ignored")

            assert config_path.exists()
            data = json.loads(config_path.read_text(encoding='utf-8'))
            assert data["paths"]["roster_csv"] == "roster.csv"
            assert "unknown_key" not in data
            assert data["statutory"]["version"] == "PH-2026"


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
