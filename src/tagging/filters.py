"""Tag filter rows and the table model used to edit them."""

from dataclasses import dataclass, field, replace

COLUMNS = ("enabled", "key", "values")


@dataclass
class TagFilter:
    enabled: bool = True
    key: str | None = None
    values: list[str] = field(default_factory=list)

    def values_text(self) -> str:
        return ", ".join(self.values)

    def set_values_text(self, text: str) -> None:
        """Parse comma-separated values, trimming each entry."""
        self.values = [part.strip() for part in text.split(",")]

    def copy(self) -> "TagFilter":
        return replace(self, values=list(self.values))


class TagFilterTable:
    """List-backed model of tag filter rows."""

    def __init__(self, rows: list[TagFilter] | None = None):
        self._rows: list[TagFilter] = list(rows or [])

    def create_element(self) -> TagFilter:
        return TagFilter()

    def clone_element(self, row: TagFilter) -> TagFilter:
        return row.copy()

    def is_empty(self, row: TagFilter | None) -> bool:
        return row is None or not row.key or not row.values

    def can_delete_element(self, row: TagFilter) -> bool:
        return True

    def add(self, row: TagFilter | None = None) -> TagFilter:
        row = row if row is not None else self.create_element()
        self._rows.append(row)
        return row

    def remove(self, index: int) -> TagFilter:
        return self._rows.pop(index)

    def items(self) -> list[TagFilter]:
        return list(self._rows)

    def value_of(self, index: int, column: str) -> bool | str | None:
        self._check_column(column)
        row = self._rows[index]
        if column == "enabled":
            return row.enabled
        if column == "key":
            return row.key
        return row.values_text()

    def set_value(self, index: int, column: str, value: bool | str | list[str] | None) -> None:
        """Store an edited cell; `values` takes comma-separated text or a list."""
        self._check_column(column)
        row = self._rows[index]
        if column == "enabled":
            if value is not None and not isinstance(value, bool):
                raise TypeError(f"enabled must be a bool, not {type(value).__name__}")
            row.enabled = bool(value)
        elif column == "key":
            if value is not None and not isinstance(value, str):
                raise TypeError(f"key must be a string, not {type(value).__name__}")
            row.key = value
        elif isinstance(value, list):
            row.values = [str(v).strip() for v in value]
        elif value is None or isinstance(value, str):
            row.set_values_text(value or "")
        else:
            raise TypeError(f"values must be text or a list, not {type(value).__name__}")

    @staticmethod
    def _check_column(column: str) -> None:
        if column not in COLUMNS:
            raise KeyError(column)

    def to_tag_filters(self) -> list[dict]:
        """Enabled, non-empty rows in the tagging API TagFilters shape."""
        return [
            {"Key": row.key, "Values": list(row.values)}
            for row in self._rows
            if row.enabled and not self.is_empty(row)
        ]
