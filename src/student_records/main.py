"""
Student Records Service Main Entry Point

Usage:
    python -m student_records
    # or
    uvicorn student_records.main:app --host 0.0.0.0 --port 3000
"""

import logging

import uvicorn
from fastapi import FastAPI

from .api import create_app
from .config import ServiceConfig, load_config
from .storage import StudentStorage

logger = logging.getLogger(__name__)


def setup_logging(level: str = "INFO") -> None:
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        handlers=[
            logging.StreamHandler(),
        ],
    )


def build_app(config: ServiceConfig) -> FastAPI:
    """Create the storage layer and API app for a config."""
    storage = StudentStorage(config.data_file)
    return create_app(storage=storage, static_dir=config.static_dir)


def create_standalone_app() -> FastAPI:
    """Create app for running with uvicorn directly."""
    return build_app(load_config())


def run_service(config: ServiceConfig | None = None) -> None:
    """Run the Student Records Service until interrupted."""
    config = config or load_config()
    setup_logging(config.log_level)

    logger.info("=" * 60)
    logger.info("Student Records Service Starting")
    logger.info("=" * 60)
    logger.info(f"Data File: {config.data_file}")
    logger.info(f"Static Dir: {config.static_dir}")
    logger.info(f"API Port: {config.port}")

    app = build_app(config)
    stats = app.state.storage.get_storage_stats()
    logger.info(f"Loaded {stats['student_count']} students ({stats['size_bytes']} bytes)")

    logger.info(f"Server running at {config.url}")
    logger.info("Use Ctrl+C to stop")

    uvicorn.run(app, host=config.host, port=config.port, log_level="warning")
    logger.info("Student Records Service stopped")


# For uvicorn direct usage: uvicorn student_records.main:app
app = create_standalone_app()


if __name__ == "__main__":
    run_service()
