# mockgen/utils/exceptions.py
"""
Custom Exceptions for the mock data generator
"""


class MockDataError(Exception):
    """Base exception for mock data generation"""
    pass


class ConfigurationError(MockDataError):
    """Configuration validation or loading errors"""
    pass


class SchemaFetchError(MockDataError):
    """Schema introspection failed before any table was processed"""
    pass


class SchemaParsingError(MockDataError):
    """DDL parsing errors"""
    pass


class GenerationError(MockDataError):
    """Data generation errors"""
    pass


class QueryBuildError(MockDataError):
    """INSERT statement rendering errors"""
    pass


class ExecutionError(MockDataError):
    """SQL transport errors"""
    pass
