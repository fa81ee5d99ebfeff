# mockgen/api/cli.py
"""
Command Line Interface for the mock data generator
"""
import json
import logging
import sys
from typing import Optional

import click
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from mockgen.core.data_generator import MockDataGenerator
from mockgen.core.suggestions import suggest_configuration
from mockgen.db_handler import SQLAlchemyHandler
from mockgen.input.schema_parser import DDLSchemaSource
from mockgen.utils.config_manager import ConfigManager, GenerationConfig, MOCK_DATA_TEMPLATES
from mockgen.utils.exceptions import MockDataError
from mockgen.utils.helpers import truncate_value

console = Console()


def print_error(error):
    console.print(f"[red]Error: {escape(str(error))}[/red]")


def open_source(database_url: Optional[str], ddl: Optional[str]):
    if database_url:
        return SQLAlchemyHandler(database_url)
    if ddl:
        return DDLSchemaSource(path=ddl)
    raise click.UsageError("Provide --database-url or --ddl")


def build_config(config_path: Optional[str], template: Optional[str], seed: Optional[int],
                 dialect: Optional[str] = None) -> GenerationConfig:
    config = ConfigManager(config_path).config if config_path else None
    return GenerationConfig.from_mapping(config, template=template, seed=seed, dialect=dialect)


@click.group()
@click.option('--verbose', '-v', is_flag=True, help='Enable debug logging')
@click.pass_context
def cli(ctx, verbose):
    """Schema-aware mock data generator"""
    ctx.ensure_object(dict)
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )


@cli.command()
@click.option('--database-url', '-d', help='SQLAlchemy database URL')
@click.option('--ddl', type=click.Path(exists=True, dir_okay=False), help='DDL file instead of a live database')
def analyze(database_url, ddl):
    """Show tables, keys, dependencies and the generation order"""
    try:
        source = open_source(database_url, ddl)
        generator = MockDataGenerator()
        graph = generator.analyze_schema(source)
        order = generator.relationship_preserver.get_generation_order(graph.dependencies)
        suggestions = suggest_configuration(graph)
    except MockDataError as e:
        print_error(e)
        sys.exit(1)

    table = Table(title="Schema Analysis")
    table.add_column("Table", style="cyan")
    table.add_column("Primary Key")
    table.add_column("Depends On")
    table.add_column("Suggested Count", justify="right")

    for table_name in order:
        meta = graph.tables.get(table_name)
        if meta is None:
            continue
        table.add_row(
            table_name,
            meta.primary_key.name if meta.primary_key else "-",
            ", ".join(graph.dependencies[table_name]) or "-",
            str(suggestions[table_name]['recommended_count'])
        )

    console.print(table)
    console.print(f"Generation order: {' -> '.join(order) if order else '(no tables)'}")


@cli.command()
@click.option('--database-url', '-d', help='SQLAlchemy database URL')
@click.option('--ddl', type=click.Path(exists=True, dir_okay=False), help='DDL file instead of a live database')
@click.option('--config', '-c', type=click.Path(exists=True, dir_okay=False), help='Generation config (YAML/JSON)')
@click.option('--template', '-t', type=click.Choice(sorted(MOCK_DATA_TEMPLATES)), help='Predefined template')
@click.option('--seed', '-s', type=int, help='Random seed for reproducible data')
@click.option('--dialect', type=click.Choice(['postgresql', 'sqlite']), help='SQL dialect for array literals')
@click.option('--json', 'as_json', is_flag=True, help='Print the preview as JSON')
def preview(database_url, ddl, config, template, seed, dialect, as_json):
    """Generate data without inserting it and show a preview"""
    try:
        source = open_source(database_url, ddl)
        generation_config = build_config(config, template, seed, dialect)
        generator = MockDataGenerator()
        result = generator.generate_mock_data(source, generation_config)
    except MockDataError as e:
        print_error(e)
        sys.exit(1)

    preview_data = result.preview()
    if as_json:
        click.echo(json.dumps(preview_data, indent=2, default=str))
        return

    for table_name, records in preview_data['preview'].items():
        if not records:
            continue
        table = Table(title=f"{table_name} ({len(result.data[table_name])} records)")
        columns = list(records[0].keys())
        for column in columns:
            table.add_column(column)
        for record in records:
            table.add_row(*[escape(truncate_value(record.get(column), 30)) for column in columns])
        console.print(table)

    show_fk_pools(generator.relationship_preserver.get_fk_pools_status())

    summary = preview_data['summary']
    console.print(Panel(
        f"Tables: {summary['tables_processed']}\nRecords: {summary['total_records']}",
        title="Preview Summary"
    ))


@cli.command()
@click.option('--database-url', '-d', required=True, help='SQLAlchemy database URL')
@click.option('--config', '-c', type=click.Path(exists=True, dir_okay=False), help='Generation config (YAML/JSON)')
@click.option('--template', '-t', type=click.Choice(sorted(MOCK_DATA_TEMPLATES)), help='Predefined template')
@click.option('--seed', '-s', type=int, help='Random seed for reproducible data')
@click.option('--yes', '-y', is_flag=True, help='Do not ask for confirmation')
def generate(database_url, config, template, seed, yes):
    """Generate mock data and insert it into the database"""
    if not yes:
        click.confirm(f"Insert generated data into {database_url}?", abort=True)

    try:
        generation_config = build_config(config, template, seed)
    except MockDataError as e:
        print_error(e)
        sys.exit(1)

    with console.status("Generating mock data..."):
        try:
            with SQLAlchemyHandler(database_url) as handler:
                result = MockDataGenerator().execute_mock_data_generation(handler, generation_config)
        except MockDataError as e:
            print_error(e)
            sys.exit(1)

    show_execution_result(result)
    if not result.success:
        sys.exit(1)


@cli.command()
def templates():
    """List predefined generation templates"""
    table = Table(title="Templates")
    table.add_column("Template", style="cyan")
    table.add_column("Tables")
    for name in sorted(MOCK_DATA_TEMPLATES):
        tables = MOCK_DATA_TEMPLATES[name]
        table.add_row(name, ", ".join(f"{t} ({cfg['count']})" for t, cfg in tables.items()))
    console.print(table)


def show_execution_result(result):
    """Print per-table outcome and the overall message"""
    table = Table(title="Insert Results")
    table.add_column("Table", style="cyan")
    table.add_column("Status")
    table.add_column("Records", justify="right")
    table.add_column("Error")

    for entry in result.successful_tables:
        table.add_row(entry['table'], "[green]committed[/green]", str(entry['records']), "")
    for entry in result.failed_tables:
        table.add_row(entry['table'], "[red]rolled back[/red]", str(entry['records']),
                      escape(truncate_value(entry['error'], 60)))

    if result.successful_tables or result.failed_tables:
        console.print(table)

    color = "green" if result.success and not result.failed_tables else "yellow" if result.success else "red"
    console.print(f"[{color}]{result.message}[/{color}]")
    if result.error:
        print_error(result.error)


def show_fk_pools(status):
    """Print how many parent keys each foreign key pool holds"""
    if not status['pools']:
        return
    table = Table(title="Foreign Key Pools")
    table.add_column("Table", style="cyan")
    table.add_column("Available Keys", justify="right")
    for table_name, pool in status['pools'].items():
        table.add_row(table_name, str(pool['available_records']))
    console.print(table)


def main():
    cli(obj={})


if __name__ == '__main__':
    main()
