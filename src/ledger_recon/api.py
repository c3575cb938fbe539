"""Read-only HTTP endpoint serving the latest CSV failure report."""

from pathlib import Path
from typing import Optional
import logging

from fastapi import FastAPI
from fastapi.responses import PlainTextResponse, Response

from .config import ReconConfig

logger = logging.getLogger(__name__)

NOT_FOUND_MESSAGE = "Error: File not found"


def create_app(
    config: Optional[ReconConfig] = None, report_path: Optional[Path] = None
) -> FastAPI:
    """
    Build the report server.

    Args:
        config: Application configuration (defaults when omitted)
        report_path: CSV report to serve; defaults to the configured output

    Returns:
        FastAPI application with a single ``GET /`` route
    """
    config = config or ReconConfig()
    csv_path = report_path or config.output.csv_path

    app = FastAPI(title="Ledger Reconciliation Report", version="0.1.0")

    @app.get("/")
    def get_report():
        """Return the CSV report, or 404 if no report has been written yet."""
        try:
            content = csv_path.read_bytes()
        except FileNotFoundError:
            logger.info(f"Report not found: {csv_path}")
            return PlainTextResponse(NOT_FOUND_MESSAGE, status_code=404)

        return Response(content=content, media_type="text/csv")

    return app


def run_server(
    config: ReconConfig,
    host: Optional[str] = None,
    port: Optional[int] = None,
    report_path: Optional[Path] = None,
) -> None:
    """Serve the report with uvicorn until interrupted."""
    import uvicorn

    server_config = config.server
    host = host or server_config.host
    port = port or server_config.port

    logger.info(f"Serving {report_path or config.output.csv_path} on http://{host}:{port}/")
    uvicorn.run(
        create_app(config, report_path),
        host=host,
        port=port,
        timeout_keep_alive=server_config.timeout_keep_alive,
        log_level=config.logging.level.lower(),
    )
