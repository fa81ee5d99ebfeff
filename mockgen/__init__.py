"""
Schema-aware mock data generation for relational databases
"""
from mockgen.core import (
    MockDataGenerator,
    analyze_schema,
    generate_table_data,
    generate_mock_data,
    execute_mock_data_generation,
)

__version__ = "1.0.0"

__all__ = [
    'MockDataGenerator',
    'analyze_schema',
    'generate_table_data',
    'generate_mock_data',
    'execute_mock_data_generation'
]
