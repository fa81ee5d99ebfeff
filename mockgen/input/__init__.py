"""
Input module exports
"""
from .schema_analyzer import ColumnMetadata, TableMetadata, SchemaGraph, SchemaAnalyzer
from .schema_parser import SchemaParser, DDLSchemaSource

__all__ = [
    'ColumnMetadata',
    'TableMetadata',
    'SchemaGraph',
    'SchemaAnalyzer',
    'SchemaParser',
    'DDLSchemaSource'
]
