"""Include/exclude filtering shared by every extractor."""

from dataclasses import dataclass
from typing import Iterable, Tuple


def _contains(names: Iterable[str], name: str) -> bool:
    """Case-insensitive exact membership test."""
    folded = name.casefold()
    return any(n.casefold() == folded for n in names)


def should_include(name: str, include: Iterable[str] = (), exclude: Iterable[str] = ()) -> bool:
    """Decide whether a table or view is kept.

    A name found in the exclude list is always dropped, even when the
    include list names it too. An empty include list means no restriction.
    """
    include = tuple(include)
    exclude = tuple(exclude)

    if exclude and _contains(exclude, name):
        return False
    if include and not _contains(include, name):
        return False
    return True


def should_include_foreign_key(
    table: str,
    referenced_table: str,
    include: Iterable[str] = (),
    exclude: Iterable[str] = (),
) -> bool:
    """Decide whether a foreign key is kept.

    The key is dropped if either side is excluded. With an include list, it
    is kept when either the owning or the referenced table is listed.
    """
    include = tuple(include)
    exclude = tuple(exclude)

    if exclude and (_contains(exclude, table) or _contains(exclude, referenced_table)):
        return False
    if include and not (_contains(include, table) or _contains(include, referenced_table)):
        return False
    return True


def parse_table_list(value: str) -> Tuple[str, ...]:
    """Split comma-separated table names, dropping blanks."""
    if not value:
        return ()
    return tuple(part.strip() for part in value.split(",") if part.strip())


@dataclass(frozen=True)
class SchemaConfig:
    """What to extract: views on/off plus table include/exclude lists."""
    include_views: bool = False
    include_tables: Tuple[str, ...] = ()
    exclude_tables: Tuple[str, ...] = ()

    def allows(self, name: str) -> bool:
        return should_include(name, self.include_tables, self.exclude_tables)

    def allows_foreign_key(self, table: str, referenced_table: str) -> bool:
        return should_include_foreign_key(
            table, referenced_table, self.include_tables, self.exclude_tables
        )
