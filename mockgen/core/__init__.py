"""
Core module exports for easier importing
"""
from .data_generator import (
    MockDataGenerator,
    GenerationResult,
    analyze_schema,
    generate_table_data,
    generate_mock_data,
    execute_mock_data_generation,
)
from .executor import TransactionalExecutor, ExecutionResult, ExecutionSummary
from .relationship_preserver import RelationshipPreserver, topological_sort
from .type_generators import TypeGenerators

__all__ = [
    'MockDataGenerator',
    'GenerationResult',
    'analyze_schema',
    'generate_table_data',
    'generate_mock_data',
    'execute_mock_data_generation',
    'TransactionalExecutor',
    'ExecutionResult',
    'ExecutionSummary',
    'RelationshipPreserver',
    'topological_sort',
    'TypeGenerators'
]
