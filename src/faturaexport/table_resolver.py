"""
Finds the transactions table currently rendered on a statement page.
"""

import logging

from lxml import etree

from .config import DEFAULT_RESOLVER, ResolverConfig
from .locator import locate, locate_all

logger = logging.getLogger(__name__)

_SECTION_TAGS = ("thead", "tbody", "tfoot")


def table_rows(table: etree._Element) -> list[etree._Element]:
    """Return the rows of ``table`` in document order, ignoring nested tables."""
    rows = []
    for child in table:
        if not isinstance(child.tag, str):
            continue
        tag = child.tag.lower()
        if tag == "tr":
            rows.append(child)
        elif tag in _SECTION_TAGS:
            rows.extend(
                row for row in child if isinstance(row.tag, str) and row.tag.lower() == "tr"
            )
    return rows


def row_cells(row: etree._Element) -> list[etree._Element]:
    """Return the td/th cells of a table row."""
    return [
        cell
        for cell in row
        if isinstance(cell.tag, str) and cell.tag.lower() in ("td", "th")
    ]


def _is_table(element: etree._Element | None) -> bool:
    return element is not None and element.tag.lower() == "table"


def _has_rows(table: etree._Element | None) -> bool:
    return _is_table(table) and len(table_rows(table)) > 0


class TableResolver:
    """Applies ordered lookup strategies to find the statement table."""

    def __init__(self, config: ResolverConfig = DEFAULT_RESOLVER):
        self.config = config

    def resolve(self, document: etree._Element | None) -> etree._Element | None:
        """
        Find the transactions table.

        Args:
            document: Root element of the parsed page

        Returns:
            The first table with at least one row, or None when the page is
            not showing statement data
        """
        if document is None:
            return None

        strategies = [
            ("detail component region", self._from_detail_region),
            ("details table marker", self._from_table_marker),
            ("detail component child table", self._from_detail_children),
            ("global details table search", self._from_global_search),
        ]
        for name, strategy in strategies:
            table = strategy(document)
            if _has_rows(table):
                logger.debug(f"Found transactions table via {name}")
                return table

        self._log_all_tables(document)
        return None

    def is_ready(self, document: etree._Element | None) -> bool:
        """Check whether any statement component is present in the page."""
        if document is None:
            return False
        return any(
            locate(document, selector, max_depth=self.config.max_depth) is not None
            for selector in self.config.marker_selectors
        )

    def locate_title(self, document: etree._Element | None) -> etree._Element | None:
        """Find the statement title element that carries the period label."""
        return locate(
            document,
            self.config.title_class,
            partial=True,
            max_depth=self.config.max_depth,
        )

    def _detail_component(self, document: etree._Element) -> etree._Element | None:
        return locate(document, self.config.detail_component, max_depth=self.config.max_depth)

    def _first_table(self, element: etree._Element | None) -> etree._Element | None:
        if element is None:
            return None
        if _is_table(element):
            return element
        return locate(element, "table", max_depth=self.config.max_depth)

    def _from_detail_region(self, document: etree._Element) -> etree._Element | None:
        component = self._detail_component(document)
        if component is None:
            return None
        region = locate(
            component,
            self.config.details_region,
            partial=True,
            max_depth=self.config.max_depth,
        )
        return self._first_table(region)

    def _from_table_marker(self, document: etree._Element) -> etree._Element | None:
        # Top document only; the global search below enters shadow roots.
        name = self.config.details_table
        marker = locate(document, f'[class*="{name}"], [id*="{name}"]', max_depth=1)
        return self._first_table(marker)

    def _from_detail_children(self, document: etree._Element) -> etree._Element | None:
        component = self._detail_component(document)
        if component is None:
            return None
        table = locate(component, "div > table", max_depth=self.config.max_depth)
        if _has_rows(table):
            return table
        return locate(component, "table", max_depth=self.config.max_depth)

    def _from_global_search(self, document: etree._Element) -> etree._Element | None:
        marker = locate(
            document,
            self.config.details_table,
            partial=True,
            max_depth=self.config.max_depth,
        )
        return self._first_table(marker)

    def _log_all_tables(self, document: etree._Element) -> None:
        tables = locate_all(document, "table", max_depth=self.config.max_depth)
        if not tables:
            logger.debug("No tables found anywhere in the document")
            return
        logger.debug(f"Found {len(tables)} tables, none matched a statement strategy")
        for index, table in enumerate(tables):
            logger.debug(
                f"  table {index}: class='{table.get('class') or ''}' rows={len(table_rows(table))}",
            )
