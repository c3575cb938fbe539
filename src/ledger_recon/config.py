"""Configuration loader and validation for reconciliation settings."""

from pathlib import Path
from typing import Any, Optional
import logging

import yaml
from pydantic import BaseModel, Field, ValidationError

from .utils.exceptions import ConfigurationError

logger = logging.getLogger(__name__)


class PrimaryInputConfig(BaseModel):
    """Configuration for the primary XML transaction file."""

    encoding: Optional[str] = None
    root_tag: str = "records"
    record_tag: str = "record"


class CompanionInputConfig(BaseModel):
    """Configuration for the companion CSV file."""

    encoding: str = "utf-8"
    delimiter: str = ","
    reference_column: str = "Reference"


class InputConfig(BaseModel):
    """Configuration for input file parsing."""

    primary: PrimaryInputConfig = Field(default_factory=PrimaryInputConfig)
    companion: CompanionInputConfig = Field(default_factory=CompanionInputConfig)


class RuleConfig(BaseModel):
    """Toggle for a single reconciliation rule."""

    enabled: bool = True


class RulesConfig(BaseModel):
    """Reconciliation rules, evaluated in declaration order."""

    duplicate_reference: RuleConfig = Field(default_factory=RuleConfig)
    balance_consistency: RuleConfig = Field(default_factory=RuleConfig)
    companion_presence: RuleConfig = Field(default_factory=RuleConfig)


class ReconciliationConfig(BaseModel):
    """Configuration for the reconciliation engine."""

    strict_malformed: bool = False
    fail_on_failures: bool = False
    rules: RulesConfig = Field(default_factory=RulesConfig)


class ExcelOutputConfig(BaseModel):
    """Configuration for the optional Excel workbook."""

    enabled: bool = False
    filename: str = "failed_transactions.xlsx"
    summary_sheet: str = "Summary"
    failures_sheet: str = "Failed Transactions"


class OutputConfig(BaseModel):
    """Configuration for report output."""

    directory: str = "."
    json_filename: str = "failed_transactions_report.json"
    csv_filename: str = "failed_transactions.csv"
    excel: ExcelOutputConfig = Field(default_factory=ExcelOutputConfig)

    @property
    def csv_path(self) -> Path:
        return Path(self.directory) / self.csv_filename

    @property
    def json_path(self) -> Path:
        return Path(self.directory) / self.json_filename

    @property
    def excel_path(self) -> Path:
        return Path(self.directory) / self.excel.filename


class ServerConfig(BaseModel):
    """Configuration for the report server."""

    host: str = "127.0.0.1"
    port: int = 8080
    timeout_keep_alive: int = 5


class LoggingConfig(BaseModel):
    """Configuration for logging."""

    level: str = "INFO"
    format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    file: Optional[str] = None


class ReconConfig(BaseModel):
    """Main configuration model for reconciliation."""

    input: InputConfig = Field(default_factory=InputConfig)
    reconciliation: ReconciliationConfig = Field(default_factory=ReconciliationConfig)
    output: OutputConfig = Field(default_factory=OutputConfig)
    server: ServerConfig = Field(default_factory=ServerConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    config_file_path: Optional[str] = None


def get_default_config() -> dict[str, Any]:
    """Return the default configuration as a dictionary."""
    return {
        "input": {
            "primary": {
                "encoding": None,
                "root_tag": "records",
                "record_tag": "record",
            },
            "companion": {
                "encoding": "utf-8",
                "delimiter": ",",
                "reference_column": "Reference",
            },
        },
        "reconciliation": {
            "strict_malformed": False,
            "fail_on_failures": False,
            "rules": {
                "duplicate_reference": {"enabled": True},
                "balance_consistency": {"enabled": True},
                "companion_presence": {"enabled": True},
            },
        },
        "output": {
            "directory": ".",
            "json_filename": "failed_transactions_report.json",
            "csv_filename": "failed_transactions.csv",
            "excel": {
                "enabled": False,
                "filename": "failed_transactions.xlsx",
                "summary_sheet": "Summary",
                "failures_sheet": "Failed Transactions",
            },
        },
        "server": {
            "host": "127.0.0.1",
            "port": 8080,
            "timeout_keep_alive": 5,
        },
        "logging": {
            "level": "INFO",
            "format": "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            "file": None,
        },
    }


def load_config(config_path: Optional[Path] = None) -> ReconConfig:
    """
    Load configuration from a YAML file or use defaults.

    Args:
        config_path: Path to YAML configuration file (optional)

    Returns:
        ReconConfig object with loaded or default settings

    Raises:
        ConfigurationError: If the file cannot be read or fails validation
    """
    config_dict = get_default_config()

    if config_path and config_path.exists():
        logger.info(f"Loading configuration from: {config_path}")
        try:
            with open(config_path, "r") as f:
                user_config = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as e:
            raise ConfigurationError(f"Failed to read configuration {config_path}: {e}") from e

        if not isinstance(user_config, dict):
            raise ConfigurationError(
                f"Configuration {config_path} must be a mapping at the top level"
            )

        # Deep merge user config into defaults
        config_dict = _deep_merge(config_dict, user_config)
        config_dict["config_file_path"] = str(config_path)
    else:
        logger.info("Using default configuration")

    try:
        return ReconConfig(**config_dict)
    except ValidationError as e:
        raise ConfigurationError(f"Invalid configuration: {e}") from e


def _deep_merge(base: dict, override: dict) -> dict:
    """
    Deep merge two dictionaries.

    Args:
        base: Base dictionary
        override: Dictionary to merge on top

    Returns:
        Merged dictionary
    """
    result = base.copy()

    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = value

    return result


def generate_default_config(output_path: Path) -> None:
    """
    Generate a default configuration file.

    Args:
        output_path: Path to write the configuration file
    """
    config_dict = get_default_config()

    yaml_content = """# Ledger reconciliation configuration
# Generated configuration file - customize as needed

"""
    yaml_content += yaml.dump(config_dict, default_flow_style=False, sort_keys=False)

    output_path.parent.mkdir(parents=True, exist_ok=True)
    with open(output_path, "w") as f:
        f.write(yaml_content)

    logger.info(f"Generated configuration file: {output_path}")
