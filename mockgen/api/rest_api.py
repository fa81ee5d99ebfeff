"""
FastAPI REST API for schema-aware mock data generation
Provides endpoints for schema analysis, preview and insertion.
"""

import logging
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from fastapi import FastAPI, HTTPException, status
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field
import uvicorn

from mockgen.core.data_generator import MockDataGenerator
from mockgen.core.suggestions import suggest_configuration
from mockgen.db_handler import SQLAlchemyHandler
from mockgen.utils.config_manager import GenerationConfig, MOCK_DATA_TEMPLATES
from mockgen.utils.exceptions import ConfigurationError, MockDataError, SchemaFetchError

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


# Pydantic Models
class AnalysisRequest(BaseModel):
    """Request model for schema analysis."""
    database_url: str


class MockDataRequest(BaseModel):
    """Request model for generating mock data."""
    database_url: str
    config: Dict[str, Any] = Field(default_factory=dict)
    template: Optional[str] = None
    seed: Optional[int] = None
    preview: bool = False


# FastAPI App
app = FastAPI(
    title="Mock Data Generator API",
    description="REST API for generating relationship-aware mock data",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc"
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def open_handler(database_url: str) -> SQLAlchemyHandler:
    return SQLAlchemyHandler(database_url, logger=logger)


def to_http_error(error: MockDataError) -> HTTPException:
    if isinstance(error, ConfigurationError):
        return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(error))
    if isinstance(error, SchemaFetchError):
        return HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(error))
    return HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(error))


@app.get("/health", tags=["System"])
def health_check():
    """Health check endpoint."""
    return {"status": "healthy", "timestamp": datetime.now(timezone.utc)}


@app.get("/templates", tags=["Configuration"])
def list_templates():
    """Predefined per-table generation configs."""
    return {"templates": MOCK_DATA_TEMPLATES}


@app.post("/mock-data/analysis", tags=["Mock Data"])
def analyze_database(request: AnalysisRequest):
    """Analyze the schema and suggest a generation config."""
    try:
        with open_handler(request.database_url) as handler:
            generator = MockDataGenerator(logger=logger)
            graph = generator.analyze_schema(handler)
    except MockDataError as e:
        logger.error(f"Schema analysis failed: {e}")
        raise to_http_error(e)

    return {
        "success": True,
        "analysis": graph.to_dict(),
        "generation_order": generator.relationship_preserver.get_generation_order(graph.dependencies),
        "suggestions": suggest_configuration(graph),
        "templates": sorted(MOCK_DATA_TEMPLATES)
    }


@app.post("/mock-data", tags=["Mock Data"])
def create_mock_data(request: MockDataRequest):
    """Generate mock data; insert it unless ``preview`` is set."""
    try:
        config = GenerationConfig.from_mapping(request.config, template=request.template, seed=request.seed)
        with open_handler(request.database_url) as handler:
            generator = MockDataGenerator(logger=logger)
            if request.preview:
                result = generator.generate_mock_data(handler, config)
                return {"success": True, **result.preview()}

            result = generator.execute_mock_data_generation(handler, config)
    except MockDataError as e:
        logger.error(f"Mock data request failed: {e}")
        raise to_http_error(e)

    if result.error:
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail={"message": result.message, "error": result.error}
        )
    return result.to_dict()


def main(host: str = "0.0.0.0", port: int = 8000):
    uvicorn.run(app, host=host, port=port)


if __name__ == "__main__":
    main()
