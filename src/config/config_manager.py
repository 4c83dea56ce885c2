"""
Configuration Manager Module

Handles loading, saving, and managing application configuration.
Provides bi-directional mapping between configuration dataclasses and JSON persistence.
"""

import copy
import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from config.statutory_tables import (
    StatutorySchedule, get_schedule, schedule_from_dict, schedule_to_dict
)
from infrastructure.logger import get_logger

logger = get_logger("ConfigManager")


def _default_schedule() -> StatutorySchedule:
    # Copy so edits to the config never touch the built-in tables
    return copy.deepcopy(get_schedule())


@dataclass
class Paths:
    """File paths configuration."""
    roster_csv: str = ""
    last_attendance_file: str = ""
    payslip_store: str = ""
    custom_font_path: str = ""  # Unicode TTF for PDF generation


@dataclass
class Holidays:
    """Holiday settings (YYYY-MM-DD strings)."""
    custom_dates: list = field(default_factory=list)


@dataclass
class PayrollPrefs:
    """Payroll run preferences."""
    generated_by: str = "HR Department"
    require_finalized_attendance: bool = True


@dataclass
class OutputSettings:
    """Output settings for generated payslips and registers."""
    output_dir: str = ""  # Default empty = project root
    register_filename_pattern: str = "Payroll_Register_{year}_{month}.xlsx"
    generate_pdf: bool = True
    payslip_filename_pattern: str = "Payslip_{employee_id}_{year}_{month}.pdf"
    sort_by: str = "name"  # "name", "department" or "net_pay"
    currency_code: str = "PHP"
    company_name: str = ""  # Printed on payslip PDFs


@dataclass
class AppConfig:
    """Main application configuration container."""
    paths: Paths = field(default_factory=Paths)
    holidays: Holidays = field(default_factory=Holidays)
    payroll: PayrollPrefs = field(default_factory=PayrollPrefs)
    output_settings: OutputSettings = field(default_factory=OutputSettings)
    statutory: StatutorySchedule = field(default_factory=_default_schedule)


class ConfigManager:
    """
    Manages application configuration with JSON persistence.

    Responsibilities:
    - Load configuration from JSON file
    - Save configuration to JSON file
    - Provide default configuration
    - Convert between dataclass and dict representations
    """

    DEFAULT_CONFIG_PATH = Path(__file__).parent.parent / "config.json"

    def __init__(self, config_path: Optional[Path] = None):
        self.config_path = config_path or self.DEFAULT_CONFIG_PATH
        self._config: AppConfig = AppConfig()

    @property
    def config(self) -> AppConfig:
        """Get current configuration."""
        return self._config

    def load(self) -> AppConfig:
        """Load configuration from JSON file."""
        if self.config_path.exists():
            try:
                with open(self.config_path, 'r', encoding='utf-8') as f:
                    data = json.load(f)
                self._config = self._dict_to_config(data)
            except (json.JSONDecodeError, KeyError, TypeError, ValueError) as e:
                logger.warning(f"Failed to load config, using defaults. Error: {e}")
                self._config = AppConfig()
        else:
            self._config = AppConfig()
        return self._config

    def save(self) -> None:
        """Save current configuration to JSON file."""
        data = self._config_to_dict(self._config)
        self.config_path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.config_path, 'w', encoding='utf-8') as f:
            json.dump(data, f, indent=2, ensure_ascii=False)

    def update(self, **kwargs) -> None:
        """Update specific configuration values."""
        for key, value in kwargs.items():
            if hasattr(self._config, key):
                setattr(self._config, key, value)
        self.save()

    def _config_to_dict(self, config: AppConfig) -> dict:
        """Convert AppConfig dataclass to dictionary."""
        return {
            "paths": {
                "roster_csv": config.paths.roster_csv,
                "last_attendance_file": config.paths.last_attendance_file,
                "payslip_store": config.paths.payslip_store,
                "custom_font_path": config.paths.custom_font_path
            },
            "holidays": {
                "custom_dates": config.holidays.custom_dates
            },
            "payroll": {
                "generated_by": config.payroll.generated_by,
                "require_finalized_attendance": config.payroll.require_finalized_attendance
            },
            "output_settings": {
                "output_dir": config.output_settings.output_dir,
                "register_filename_pattern": config.output_settings.register_filename_pattern,
                "generate_pdf": config.output_settings.generate_pdf,
                "payslip_filename_pattern": config.output_settings.payslip_filename_pattern,
                "sort_by": config.output_settings.sort_by,
                "currency_code": config.output_settings.currency_code,
                "company_name": config.output_settings.company_name
            },
            "statutory": schedule_to_dict(config.statutory)
        }

    def _dict_to_config(self, data: dict) -> AppConfig:
        """Convert dictionary to AppConfig dataclass."""
        paths_data = data.get("paths", {})
        holidays_data = data.get("holidays", {})
        payroll_data = data.get("payroll", {})
        output_settings_data = data.get("output_settings", {})

        paths = Paths(
            roster_csv=paths_data.get("roster_csv", ""),
            last_attendance_file=paths_data.get("last_attendance_file", ""),
            payslip_store=paths_data.get("payslip_store", ""),
            custom_font_path=paths_data.get("custom_font_path", "")
        )

        holidays = Holidays(
            custom_dates=holidays_data.get("custom_dates", [])
        )

        payroll = PayrollPrefs(
            generated_by=payroll_data.get("generated_by", "HR Department"),
            require_finalized_attendance=payroll_data.get("require_finalized_attendance", True)
        )

        output_settings = OutputSettings(
            output_dir=output_settings_data.get("output_dir", ""),
            register_filename_pattern=output_settings_data.get(
                "register_filename_pattern", "Payroll_Register_{year}_{month}.xlsx"
            ),
            generate_pdf=output_settings_data.get("generate_pdf", True),
            payslip_filename_pattern=output_settings_data.get(
                "payslip_filename_pattern", "Payslip_{employee_id}_{year}_{month}.pdf"
            ),
            sort_by=output_settings_data.get("sort_by", "name"),
            currency_code=output_settings_data.get("currency_code", "PHP"),
            company_name=output_settings_data.get("company_name", "")
        )

        # A saved schedule wins; otherwise use the built-in default
        statutory_data = data.get("statutory")
        statutory = schedule_from_dict(statutory_data) if statutory_data else _default_schedule()

        return AppConfig(
            paths=paths,
            holidays=holidays,
            payroll=payroll,
            output_settings=output_settings,
            statutory=statutory
        )
