"""Central table definitions: name, schema and description of every table."""

from dataclasses import dataclass

from crud_template.config import get_settings


@dataclass(frozen=True)
class TableInfo:
    """Name, schema and functional description of one table."""

    name: str
    schema: str
    description: str


DEFAULT_SCHEMA = get_settings().db_schema

EXAMPLE_TABLE = TableInfo("example_table", DEFAULT_SCHEMA, "Example table.")
