"""
Static lookup tables used by the normalizers and the table resolver.
"""

from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from types import MappingProxyType


def _frozen(mapping: dict[str, int]) -> Mapping[str, int]:
    return MappingProxyType(dict(mapping))


@dataclass(frozen=True)
class LocaleConfig:
    """Source-locale conventions (Brazilian Portuguese statements)."""

    month_map: Mapping[str, int] = field(
        default_factory=lambda: _frozen(
            {
                "jan": 1,
                "fev": 2,
                "mar": 3,
                "abr": 4,
                "mai": 5,
                "jun": 6,
                "jul": 7,
                "ago": 8,
                "set": 9,
                "out": 10,
                "nov": 11,
                "dez": 12,
            },
        ),
    )
    credit_keywords: tuple[str, ...] = (
        "pagamento recebido",
        "pagamento",
        "estorno",
        "crédito",
        "credito",
        "devolução",
        "devolucao",
        "reembolso",
    )
    credit_class_markers: tuple[str, ...] = (
        "credit",
        "credito",
        "positive",
        "positivo",
    )
    green_colors: tuple[tuple[int, int, int], ...] = (
        (0, 128, 0),
        (0, 166, 80),
        (34, 139, 34),
    )
    header_marker: str = "data"
    header_max_length: int = 10

    def with_extra_keywords(self, keywords: list[str]) -> "LocaleConfig":
        """Return a copy with additional credit keywords appended."""
        extra = tuple(k.lower() for k in keywords if k and k.lower() not in self.credit_keywords)
        return replace(self, credit_keywords=self.credit_keywords + extra)


@dataclass(frozen=True)
class ResolverConfig:
    """Component and class names of the statement page."""

    detail_component: str = "mf-cartoesconsultafaturapfmf"
    details_region: str = "transactions-details"
    details_table: str = "details__table"
    marker_selectors: tuple[str, ...] = (
        "mf-fatura-main",
        "mf-fatura-lib",
        "mf-fatura-transactions-details",
        "mf-cartoesconsultafaturapfmf",
    )
    title_class: str = "header-invoice__tittle"
    max_depth: int = 10


DEFAULT_LOCALE = LocaleConfig()
DEFAULT_RESOLVER = ResolverConfig()
