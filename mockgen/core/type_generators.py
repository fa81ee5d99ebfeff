import json
import random
import string
import uuid
import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Callable, List, Optional, Tuple

from faker import Faker

from mockgen.core.column_types import ColumnType, classify
from mockgen.utils.config_manager import ColumnOptions

logger = logging.getLogger(__name__)

DEFAULT_START_DATE = datetime(2020, 1, 1)
MAX_RANDOM_STRING_LENGTH = 50

INTEGER_DEFAULT_RANGES = {
    ColumnType.INTEGER: (1, 100000),
    ColumnType.BIGINT: (1, 1000000),
    ColumnType.SMALLINT: (1, 32767),
}

STRING_DEFAULT_MAX_LENGTH = {
    ColumnType.VARCHAR: 255,
    ColumnType.TEXT: 500,
    ColumnType.CHAR: 1,
}

JSON_THEMES = ['light', 'dark']
JSON_LANGUAGES = ['en', 'es', 'fr', 'de']
JSON_TAGS = ['important', 'urgent', 'review', 'draft', 'published', 'archived']

ALPHANUMERIC = string.ascii_letters + string.digits
TOKEN_CHARS = string.ascii_lowercase + string.digits


def name_contains(*fragments: str) -> Callable[[str], bool]:
    """Predicate: lower-cased column name contains any of the fragments"""
    return lambda name: any(fragment in name for fragment in fragments)


def name_contains_all(*fragments: str) -> Callable[[str], bool]:
    return lambda name: all(fragment in name for fragment in fragments)


# Integer columns named like these get a narrower range than the type default
INTEGER_NAME_RANGES: List[Tuple[Callable[[str], bool], Tuple[int, int]]] = [
    (name_contains('age'), (18, 97)),
    (name_contains('year'), (1995, 2025)),
    (name_contains('price', 'amount'), (1, 10000)),
    (name_contains('quantity', 'count'), (1, 100)),
]


class TypeGenerators:
    """
    Value generators keyed by column base type, with column-name heuristics
    layered on top for string and integer columns.

    All randomness comes from ``self.random`` and ``self.faker`` so a seeded
    instance produces the same values on every run.
    """

    def __init__(self, seed: Optional[int] = None, locale: str = "en_US",
                 rng: Optional[random.Random] = None, faker: Optional[Faker] = None):
        self.seed = seed
        self.random = rng or random.Random(seed)
        self.faker = faker or Faker(locale)
        if seed is not None:
            self.faker.seed_instance(seed)

        self.generators = {
            ColumnType.INTEGER: self.integer_value,
            ColumnType.BIGINT: self.integer_value,
            ColumnType.SMALLINT: self.integer_value,
            ColumnType.DECIMAL: self.decimal_value,
            ColumnType.BOOLEAN: lambda column, options, info: self.random.random() < 0.5,
            ColumnType.UUID: lambda column, options, info: self.uuid4(),
            ColumnType.DATE: self.date_value,
            ColumnType.TIME: lambda column, options, info: self.time_value(),
            ColumnType.TIMETZ: lambda column, options, info: self.time_value() + '+00:00',
            ColumnType.TIMESTAMP: self.timestamp_value,
            ColumnType.TIMESTAMPTZ: self.timestamp_value,
            ColumnType.JSON: self.json_value,
            ColumnType.VARCHAR: self.string_value,
            ColumnType.TEXT: self.string_value,
            ColumnType.CHAR: self.string_value,
        }

        # Evaluated in order; first matching predicate wins
        self.string_name_heuristics: List[Tuple[Callable[[str], bool], Callable[[], str]]] = [
            (name_contains('email'), self.faker.email),
            (name_contains('phone'), self.faker.phone_number),
            (name_contains_all('name', 'first'), self.faker.first_name),
            (name_contains_all('name', 'last'), self.faker.last_name),
            (name_contains('name'), self.faker.name),
            (name_contains('address'), self.faker.street_address),
            (name_contains('city'), self.faker.city),
            (name_contains('country'), self.faker.country),
            (name_contains('company'), self.faker.company),
            (name_contains('title', 'position'), self.faker.job),
            (name_contains('description'), self.faker.sentence),
            (name_contains('url', 'website'), self.faker.url),
        ]

    def generate(self, column, options: Optional[ColumnOptions] = None) -> Any:
        """Generate one value for ``column`` (anything with ``name`` and ``type``)"""
        options = options or ColumnOptions()
        info = classify(column.type)

        if info.is_array:
            return self.array_value(column, options, info)

        generator = self.generators.get(info.base)
        if generator is None:
            logger.debug(f"No generator for type '{column.type}' on column '{column.name}', using random string")
            return self.random_string(10)
        return generator(column, options, info)

    def has_generator(self, base: ColumnType) -> bool:
        return base in self.generators

    # Numeric types

    def integer_value(self, column, options: ColumnOptions, info) -> int:
        if options.min is None and options.max is None:
            column_name = column.name.lower()
            for predicate, bounds in INTEGER_NAME_RANGES:
                if predicate(column_name):
                    return self.random.randint(*bounds)

        default_min, default_max = INTEGER_DEFAULT_RANGES.get(info.base, INTEGER_DEFAULT_RANGES[ColumnType.INTEGER])
        low = int(options.min) if options.min is not None else default_min
        high = int(options.max) if options.max is not None else default_max
        return self.random.randint(low, high)

    def decimal_value(self, column, options: ColumnOptions, info) -> float:
        low = options.min if options.min is not None else 0
        high = options.max if options.max is not None else 10000
        precision = options.precision if options.precision is not None else 2
        return round(self.random.uniform(low, high), precision)

    # Date/Time types

    def random_datetime(self, options: ColumnOptions) -> datetime:
        start = options.start_date or DEFAULT_START_DATE
        end = options.end_date or datetime.now()
        start, end = start.replace(tzinfo=None), end.replace(tzinfo=None)
        if end < start:
            start, end = end, start
        return start + timedelta(seconds=(end - start).total_seconds() * self.random.random())

    def date_value(self, column, options: ColumnOptions, info) -> str:
        return self.random_datetime(options).date().isoformat()

    def time_value(self) -> str:
        return (f"{self.random.randint(0, 23):02d}:"
                f"{self.random.randint(0, 59):02d}:"
                f"{self.random.randint(0, 59):02d}")

    def timestamp_value(self, column, options: ColumnOptions, info) -> str:
        value = self.random_datetime(options).replace(microsecond=0)
        if info.base == ColumnType.TIMESTAMPTZ:
            value = value.replace(tzinfo=timezone.utc)
        return value.isoformat()

    # Structured types

    def uuid4(self) -> str:
        return str(uuid.UUID(int=self.random.getrandbits(128), version=4))

    def json_value(self, column, options: ColumnOptions, info) -> str:
        column_name = column.name.lower()
        if 'config' in column_name or 'settings' in column_name:
            payload = {
                'theme': self.random.choice(JSON_THEMES),
                'notifications': self.random.random() < 0.7,
                'language': self.random.choice(JSON_LANGUAGES)
            }
        elif 'metadata' in column_name:
            payload = {
                'created_by': 'system',
                'version': '1.0',
                'tags': self.random.sample(JSON_TAGS, self.random.randint(1, 3))
            }
        else:
            payload = {'data': self.random_string(20)}
        return json.dumps(payload)

    def array_value(self, column, options: ColumnOptions, info) -> List[Any]:
        size = self.random.randint(1, 5)
        generator = self.generators.get(info.base)
        if generator is None:
            return [self.token() for _ in range(size)]
        return [generator(column, options, info) for _ in range(size)]

    # String types

    def string_value(self, column, options: ColumnOptions, info) -> str:
        if options.pattern:
            return self.by_pattern(options.pattern)

        column_name = column.name.lower()
        for predicate, generator in self.string_name_heuristics:
            if predicate(column_name):
                value = generator()
                # A declared VARCHAR(n) still bounds semantic values
                if info.length:
                    value = value[:info.length]
                return value

        max_length = options.max_length or info.length or STRING_DEFAULT_MAX_LENGTH.get(info.base, MAX_RANDOM_STRING_LENGTH)
        return self.random_string(min(max_length, MAX_RANDOM_STRING_LENGTH))

    def by_pattern(self, pattern: str) -> str:
        """Each X becomes a digit, each A an uppercase letter; everything else is literal"""
        chars = []
        for char in pattern:
            if char == 'X':
                chars.append(self.random.choice(string.digits))
            elif char == 'A':
                chars.append(self.random.choice(string.ascii_uppercase))
            else:
                chars.append(char)
        return ''.join(chars)

    def random_string(self, length: int) -> str:
        return ''.join(self.random.choices(ALPHANUMERIC, k=length))

    def token(self) -> str:
        return 'val_' + ''.join(self.random.choices(TOKEN_CHARS, k=8))
