"""
Generation Configuration Manager with Schema Validation
Supports YAML/JSON configs with Pydantic validation and predefined templates
"""
import json
import yaml
from datetime import date, datetime, time
from pathlib import Path
from typing import Dict, Optional, Union, Any
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator
import logging

from mockgen.utils.exceptions import ConfigurationError
from mockgen.utils.helpers import load_config_file

logger = logging.getLogger(__name__)

DEFAULT_RECORD_COUNT = 10
SUPPORTED_DIALECTS = ('postgresql', 'sqlite')
GENERATION_CONFIG_KEYS = {'tables', 'seed', 'locale', 'dialect', 'template'}


# Predefined per-table configurations for common schemas
MOCK_DATA_TEMPLATES: Dict[str, Dict[str, Dict[str, Any]]] = {
    'ecommerce': {
        'categories': {
            'count': 5,
            'options': {
                'name': {'pattern': 'Category-X'},
                'description': {'maxLength': 100}
            }
        },
        'products': {
            'count': 50,
            'options': {
                'price': {'min': 10, 'max': 1000, 'precision': 2},
                'stock_quantity': {'min': 0, 'max': 100}
            }
        },
        'customers': {'count': 100, 'options': {}},
        'orders': {
            'count': 200,
            'options': {
                'total_amount': {'min': 20, 'max': 500, 'precision': 2}
            }
        }
    },
    'blog': {
        'authors': {'count': 10, 'options': {}},
        'categories': {'count': 8, 'options': {}},
        'posts': {'count': 100, 'options': {}},
        'comments': {'count': 500, 'options': {}}
    },
    'user_management': {
        'roles': {'count': 5, 'options': {}},
        'users': {
            'count': 100,
            'options': {
                'age': {'min': 18, 'max': 65}
            }
        },
        'permissions': {'count': 20, 'options': {}}
    }
}


class ColumnOptions(BaseModel):
    """Per-column generator overrides; unset fields fall back to generator defaults"""
    model_config = ConfigDict(populate_by_name=True, extra='ignore')

    min: Optional[Union[int, float]] = None
    max: Optional[Union[int, float]] = None
    precision: Optional[int] = Field(default=None, ge=0)
    max_length: Optional[int] = Field(default=None, alias='maxLength', ge=1)
    pattern: Optional[str] = None
    start_date: Optional[datetime] = Field(default=None, alias='startDate')
    end_date: Optional[datetime] = Field(default=None, alias='endDate')

    @field_validator('start_date', 'end_date', mode='before')
    @classmethod
    def parse_date(cls, v):
        if v is None or isinstance(v, datetime):
            return v
        if isinstance(v, date):
            return datetime.combine(v, time.min)
        if isinstance(v, str):
            try:
                return datetime.fromisoformat(v.replace('Z', '+00:00'))
            except ValueError:
                raise ValueError(f"Invalid ISO date: {v}")
        return v

    @model_validator(mode='after')
    def check_ranges(self):
        if self.min is not None and self.max is not None and self.min > self.max:
            raise ValueError(f"min ({self.min}) must not exceed max ({self.max})")
        if self.start_date and self.end_date:
            # Compare naive against naive so mixed inputs stay comparable
            start = self.start_date.replace(tzinfo=None)
            end = self.end_date.replace(tzinfo=None)
            if start > end:
                raise ValueError("startDate must not be after endDate")
        return self


class TableGenerationConfig(BaseModel):
    count: int = Field(default=DEFAULT_RECORD_COUNT, ge=0)
    options: Dict[str, ColumnOptions] = Field(default_factory=dict)

    def options_for(self, column_name: str) -> ColumnOptions:
        return self.options.get(column_name) or ColumnOptions()


class GenerationConfig(BaseModel):
    tables: Dict[str, TableGenerationConfig] = Field(default_factory=dict)
    seed: Optional[int] = None
    locale: str = "en_US"
    dialect: Optional[str] = None
    template: Optional[str] = None

    @field_validator('dialect')
    @classmethod
    def validate_dialect(cls, v):
        if v is None:
            return v
        v = v.lower()
        if v not in SUPPORTED_DIALECTS:
            raise ValueError(f'Dialect must be one of {list(SUPPORTED_DIALECTS)}')
        return v

    @field_validator('template')
    @classmethod
    def validate_template(cls, v):
        if v is not None and v not in MOCK_DATA_TEMPLATES:
            raise ValueError(f'Template must be one of {list(MOCK_DATA_TEMPLATES)}')
        return v

    @model_validator(mode='after')
    def merge_template(self):
        """Template tables sit underneath explicitly configured tables"""
        if self.template:
            merged = {
                name: TableGenerationConfig.model_validate(table)
                for name, table in MOCK_DATA_TEMPLATES[self.template].items()
            }
            merged.update(self.tables)
            self.tables = merged
        return self

    @classmethod
    def from_mapping(cls, raw: Optional[Union[Dict[str, Any], 'GenerationConfig']] = None,
                     **overrides) -> 'GenerationConfig':
        """
        Build a config from either the full shape ({"tables": {...}, "seed": ..})
        or the loose per-table shape ({"users": {"count": 5}}).
        """
        if isinstance(raw, GenerationConfig):
            if not overrides:
                return raw
            raw = raw.model_dump(by_alias=True, exclude_none=True)

        data = dict(raw or {})
        # Top-level keys that aren't run settings are table entries; "tables" wins on a clash
        tables = {key: data.pop(key) for key in list(data) if key not in GENERATION_CONFIG_KEYS}
        explicit_tables = data.get('tables') or {}
        if not isinstance(explicit_tables, dict):
            raise ConfigurationError("Invalid generation config: 'tables' must be a mapping")
        tables.update(explicit_tables)
        data['tables'] = tables
        data.update({k: v for k, v in overrides.items() if v is not None})

        try:
            return cls.model_validate(data)
        except ValidationError as e:
            raise ConfigurationError(f"Invalid generation config: {e}") from e

    def table_config(self, table_name: str) -> TableGenerationConfig:
        return self.tables.get(table_name) or TableGenerationConfig()


class ConfigManager:
    """Configuration manager with validation and template support"""

    def __init__(self, config_path: Optional[Union[str, Path]] = None):
        self.config_path = Path(config_path) if config_path else None
        self.config: Optional[GenerationConfig] = None
        if self.config_path:
            self.load_config(self.config_path)

    def load_config(self, config_path: Union[str, Path]) -> GenerationConfig:
        """Load and validate configuration from file"""
        config_path = Path(config_path)

        try:
            config_data = load_config_file(config_path)
        except (FileNotFoundError, ValueError) as e:
            logger.error(f"Failed to load configuration: {e}")
            raise ConfigurationError(str(e)) from e

        self.config = GenerationConfig.from_mapping(config_data)
        self.config_path = config_path
        logger.info(f"Configuration loaded successfully from {config_path}")
        return self.config

    def save_config(self, config: GenerationConfig, output_path: Union[str, Path]):
        """Save configuration to file"""
        output_path = Path(output_path)
        config_dict = config.model_dump(mode='json', by_alias=True, exclude_none=True)
        # Template tables are already merged in; don't merge them twice on reload
        config_dict.pop('template', None)

        if output_path.suffix.lower() in ['.yaml', '.yml']:
            with open(output_path, 'w') as f:
                yaml.safe_dump(config_dict, f, default_flow_style=False, indent=2)
        elif output_path.suffix.lower() == '.json':
            with open(output_path, 'w') as f:
                json.dump(config_dict, f, indent=2)
        else:
            raise ConfigurationError(f"Unsupported output format: {output_path.suffix}")

        logger.info(f"Configuration saved to {output_path}")

    def validate_config(self, config_data: Dict) -> bool:
        """Validate configuration data against schema"""
        try:
            GenerationConfig.from_mapping(config_data)
            return True
        except ConfigurationError as e:
            logger.error(f"Configuration validation failed: {e}")
            return False

    def get_table_config(self, table_name: str) -> TableGenerationConfig:
        """Get configuration for a specific table"""
        if not self.config:
            raise ConfigurationError("No configuration loaded")
        return self.config.table_config(table_name)

    @staticmethod
    def list_templates():
        return sorted(MOCK_DATA_TEMPLATES)
