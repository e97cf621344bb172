"""
Table definitions and header-derived schemas.

A TableDefinition is the static description of a logical table (which sheet,
which key columns, defaults, key generation, lookup strategy). A TableSchema
is what a store discovers from the sheet's header row at construction time.
All record (de)serialization is a pure function of the schema.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple

from app.core.exceptions import SchemaError
from app.services.id_policy import KeyGenerator, to_iso
from app.services.workbook import is_blank

CREATED_AT = "created_at"
UPDATED_AT = "updated_at"


@dataclass
class TableDefinition:
    """Static description of one logical table"""

    name: str
    sheet_name: str
    primary_key: str
    foreign_key: Optional[str] = None
    defaults: Dict[str, Any] = field(default_factory=dict)
    key_generator: Optional[KeyGenerator] = None
    key_attempts: int = 3
    use_column_search: bool = False

    @property
    def required_columns(self) -> List[str]:
        columns = [self.primary_key]
        if self.foreign_key:
            columns.append(self.foreign_key)
        return columns

    @property
    def required_fields(self) -> List[str]:
        """Fields a caller must supply on create"""
        fields = [] if self.key_generator else [self.primary_key]
        if self.foreign_key:
            fields.append(self.foreign_key)
        return fields


@dataclass(frozen=True)
class TableSchema:
    """Ordered header fields plus the positions of the key columns"""

    fields: Tuple[str, ...]
    primary_key: str
    primary_key_index: int
    foreign_key: Optional[str] = None
    foreign_key_index: Optional[int] = None

    @property
    def width(self) -> int:
        return len(self.fields)

    def row_to_record(self, row: Sequence[Any]) -> Dict[str, Any]:
        record = {}
        for index, name in enumerate(self.fields):
            if not name:
                continue
            value = row[index] if index < len(row) else None
            record[name] = "" if value is None else to_iso(value)
        return record

    def record_to_row(self, record: Mapping[str, Any]) -> List[Any]:
        """Project a record onto header order; unknown keys are dropped"""
        return [
            "" if not name or record.get(name) is None else record.get(name)
            for name in self.fields
        ]


def schema_from_header(definition: TableDefinition, header: Sequence[Any]) -> TableSchema:
    """
    Build a TableSchema from a header row.

    Raises:
        SchemaError: if the header is blank or lacks a required column
    """
    if not header or all(is_blank(cell) for cell in header):
        raise SchemaError(f"Sheet '{definition.sheet_name}' has an empty header row")

    fields = tuple("" if is_blank(cell) else str(cell).strip() for cell in header)

    missing = [column for column in definition.required_columns if column not in fields]
    if missing:
        raise SchemaError(
            f"Sheet '{definition.sheet_name}' is missing required column(s): {', '.join(missing)}"
        )

    return TableSchema(
        fields=fields,
        primary_key=definition.primary_key,
        primary_key_index=fields.index(definition.primary_key),
        foreign_key=definition.foreign_key,
        foreign_key_index=fields.index(definition.foreign_key) if definition.foreign_key else None,
    )
