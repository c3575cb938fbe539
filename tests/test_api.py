"""Tests for the report endpoint."""

import pytest
from fastapi.testclient import TestClient

from ledger_recon.api import NOT_FOUND_MESSAGE, create_app
from ledger_recon.models import FailureReason, FailureRecord
from ledger_recon.reports import ReportWriter


@pytest.fixture
def client(config):
    """Create test client serving the configured CSV report."""
    return TestClient(create_app(config))


class TestReportEndpoint:
    def test_missing_report_returns_404(self, client):
        response = client.get("/")

        assert response.status_code == 404
        assert response.text == NOT_FOUND_MESSAGE

    def test_serves_report_bytes_as_csv(self, client, config, make_txn):
        failure = FailureRecord.from_transaction(
            make_txn("T1", end="79"), FailureReason.BALANCE_MISMATCH
        )
        path = ReportWriter(config).write_csv([failure], config.output.csv_path)

        response = client.get("/")

        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/csv")
        assert response.content == path.read_bytes()

    def test_report_written_after_startup_is_served(self, client, config):
        assert client.get("/").status_code == 404

        ReportWriter(config).write_csv([], config.output.csv_path)

        assert client.get("/").status_code == 200

    def test_explicit_report_path(self, config, tmp_path):
        report = tmp_path / "elsewhere.csv"
        report.write_text('"Reference"\n', encoding="utf-8")
        client = TestClient(create_app(config, report_path=report))

        assert client.get("/").text == '"Reference"\n'

    def test_only_get_root_is_routed(self, client):
        assert client.get("/report").status_code == 404
        assert client.post("/").status_code == 405
