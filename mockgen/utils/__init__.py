# mockgen/utils/__init__.py
"""
Utils module exports
"""
from .config_manager import (
    ColumnOptions,
    TableGenerationConfig,
    GenerationConfig,
    ConfigManager,
    MOCK_DATA_TEMPLATES,
)
from .exceptions import *

__all__ = [
    'ColumnOptions',
    'TableGenerationConfig',
    'GenerationConfig',
    'ConfigManager',
    'MOCK_DATA_TEMPLATES',
    'MockDataError',
    'ConfigurationError',
    'SchemaFetchError',
    'SchemaParsingError',
    'GenerationError',
    'QueryBuildError',
    'ExecutionError'
]
