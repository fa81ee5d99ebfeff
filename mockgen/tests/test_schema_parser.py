# tests/test_schema_parser.py
"""
Tests for DDL parsing into the raw schema shape
"""
import pytest

from mockgen.core.data_generator import MockDataGenerator
from mockgen.input.schema_parser import DDLSchemaSource, SchemaParser, strip_identifier
from mockgen.utils.exceptions import SchemaParsingError

SHOP_DDL = """
-- storefront schema
CREATE TABLE IF NOT EXISTS public.customers (
    id SERIAL PRIMARY KEY,
    email VARCHAR(255) NOT NULL UNIQUE,
    full_name VARCHAR(100),
    created_at TIMESTAMP DEFAULT now()
);

CREATE TABLE orders (
    order_id UUID NOT NULL,
    customer_id INTEGER NOT NULL REFERENCES customers,
    total NUMERIC(10, 2) DEFAULT 0,
    status VARCHAR(20) DEFAULT 'new, unpaid',
    PRIMARY KEY (order_id)
);

CREATE TABLE "order_items" (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    order_id UUID NOT NULL,
    sku CHAR(8),
    CONSTRAINT fk_order FOREIGN KEY (order_id) REFERENCES orders (order_id) ON DELETE CASCADE
);

CREATE INDEX idx_orders_customer ON orders (customer_id);
"""


class TestSchemaParser:

    def setup_method(self):
        """Setup test fixtures"""
        self.parser = SchemaParser()
        self.schema = self.parser.parse_ddl_string(SHOP_DDL)
        self.tables = {table['name']: table for table in self.schema}

    def columns(self, table_name):
        return {col['name']: col for col in self.tables[table_name]['columns']}

    def test_tables_in_declaration_order(self):
        assert [table['name'] for table in self.schema] == ['customers', 'orders', 'order_items']

    def test_inline_primary_key_and_types(self):
        columns = self.columns('customers')
        assert list(columns) == ['id', 'email', 'full_name', 'created_at']
        assert columns['id']['type'] == 'SERIAL'
        assert columns['id']['constraint'] == 'PRIMARY KEY'
        assert columns['id']['nullable'] is False
        assert columns['email']['type'] == 'VARCHAR(255)'
        assert columns['email']['nullable'] is False
        assert columns['full_name']['nullable'] is True
        assert columns['created_at']['default'] == 'now()'

    def test_table_level_primary_key(self):
        columns = self.columns('orders')
        assert columns['order_id']['constraint'] == 'PRIMARY KEY'
        assert columns['total']['type'] == 'NUMERIC(10, 2)'
        assert columns['status']['default'] == "'new, unpaid'"

    def test_references_without_column_uses_parent_primary_key(self):
        customer_id = self.columns('orders')['customer_id']
        assert customer_id['constraint'] == 'FOREIGN KEY'
        assert customer_id['foreign_table'] == 'customers'
        assert customer_id['foreign_column'] == 'id'

    def test_table_level_foreign_key(self):
        columns = self.columns('order_items')
        assert columns['order_id']['constraint'] == 'FOREIGN KEY'
        assert columns['order_id']['foreign_table'] == 'orders'
        assert columns['order_id']['foreign_column'] == 'order_id'
        assert columns['id']['default'] == 'autoincrement'

    def test_parsed_schema_drives_generation(self):
        generator = MockDataGenerator(seed=21)
        result = generator.generate_mock_data(DDLSchemaSource(ddl=SHOP_DDL), {'customers': {'count': 3}})

        assert result.order == ['customers', 'orders', 'order_items']
        assert all('id' not in record for record in result.data['customers'])
        assert all('id' not in record for record in result.data['order_items'])
        order_ids = {record['order_id'] for record in result.data['orders']}
        assert all(item['order_id'] in order_ids for item in result.data['order_items'])

    def test_columns_named_like_constraint_keywords(self):
        schema = self.parser.parse_ddl_string(
            "CREATE TABLE settings (key VARCHAR(40) PRIMARY KEY, checked_at DATE, unique_code TEXT, "
            "UNIQUE (unique_code), CHECK (key <> ''))"
        )
        assert [col['name'] for col in schema[0]['columns']] == ['key', 'checked_at', 'unique_code']

    def test_ddl_file(self, tmp_path):
        path = tmp_path / 'schema.sql'
        path.write_text(SHOP_DDL)
        assert len(DDLSchemaSource(path=path).get_schema()) == 3

    def test_missing_file(self, tmp_path):
        with pytest.raises(SchemaParsingError):
            self.parser.parse_ddl_file(tmp_path / 'missing.sql')

    def test_source_needs_input(self):
        with pytest.raises(SchemaParsingError):
            DDLSchemaSource()

    @pytest.mark.parametrize("identifier,expected", [
        ('users', 'users'),
        ('"Users"', 'Users'),
        ('public.users', 'users'),
        ('`shop`.`items`', 'items'),
    ])
    def test_strip_identifier(self, identifier, expected):
        assert strip_identifier(identifier) == expected
