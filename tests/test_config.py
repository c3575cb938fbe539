"""Tests for configuration loading."""

from pathlib import Path

import pytest
import yaml

from ledger_recon.config import (
    ReconConfig,
    generate_default_config,
    get_default_config,
    load_config,
)
from ledger_recon.utils.exceptions import ConfigurationError


class TestLoadConfig:
    def test_defaults_without_file(self):
        config = load_config(None)

        assert config.input.companion.reference_column == "Reference"
        assert config.output.csv_path == Path("failed_transactions.csv")
        assert config.output.json_path == Path("failed_transactions_report.json")
        assert config.server.port == 8080
        assert config.config_file_path is None

    def test_defaults_match_model_defaults(self):
        assert ReconConfig(**get_default_config()) == ReconConfig()

    def test_user_file_is_deep_merged(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text(
            yaml.safe_dump(
                {
                    "reconciliation": {"rules": {"companion_presence": {"enabled": False}}},
                    "output": {"directory": "reports"},
                }
            )
        )

        config = load_config(path)

        assert config.reconciliation.rules.companion_presence.enabled is False
        assert config.reconciliation.rules.duplicate_reference.enabled is True
        assert config.output.csv_path == Path("reports") / "failed_transactions.csv"
        assert config.config_file_path == str(path)

    def test_invalid_yaml_raises(self, tmp_path):
        path = tmp_path / "broken.yaml"
        path.write_text("output: [unclosed")

        with pytest.raises(ConfigurationError):
            load_config(path)

    def test_invalid_values_raise(self, tmp_path):
        path = tmp_path / "bad.yaml"
        path.write_text(yaml.safe_dump({"server": {"port": "not-a-port"}}))

        with pytest.raises(ConfigurationError):
            load_config(path)

    def test_non_mapping_raises(self, tmp_path):
        path = tmp_path / "list.yaml"
        path.write_text("- a\n- b\n")

        with pytest.raises(ConfigurationError):
            load_config(path)


def test_generate_default_config_round_trips(tmp_path):
    output = tmp_path / "nested" / "config.yaml"
    generate_default_config(output)

    assert output.read_text().startswith("# Ledger reconciliation configuration")
    assert load_config(output).output.csv_filename == "failed_transactions.csv"
