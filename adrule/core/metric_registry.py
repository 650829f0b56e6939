"""ADRULE — Metric Registry.

Defines the Shopee ad-performance metrics a condition can compare against,
with their display label, unit and description. The compilers read labels
from here; the evaluator reads the metric keys.
"""

from enum import Enum
from types import MappingProxyType
from typing import List, Mapping


class MetricUnit(str, Enum):
    """Unit a metric is measured in."""

    CURRENCY = "currency"  # Rupiah
    PERCENTAGE = "percentage"
    UNITLESS = "unitless"


class Metric(str, Enum):
    BROAD_GMV = "broad_gmv"
    BROAD_ORDER = "broad_order"
    BROAD_ROI = "broad_roi"
    ACOS = "acos"
    CLICK = "click"
    COST = "cost"
    CPC = "cpc"
    CTR = "ctr"
    IMPRESSION = "impression"
    VIEW = "view"
    CPM = "cpm"
    SALDO = "saldo"


class MetricDefinition:
    """Describes a single metric."""

    def __init__(self, key: str, label: str, unit: MetricUnit, description: str = ""):
        self.key = key
        self.label = label
        self.unit = unit
        self.description = description

    def to_dict(self) -> dict:
        return {
            "value": self.key,
            "label": self.label,
            "unit": self.unit.value,
            "description": self.description,
        }

    def __repr__(self) -> str:
        return f"<Metric {self.key} ({self.label}, {self.unit.value})>"


# ─────────────────────────────────────────────
# SHOPEE ADS METRICS — Canonical Registry
# ─────────────────────────────────────────────

_METRICS = [
    MetricDefinition(
        Metric.BROAD_GMV.value, "GMV", MetricUnit.CURRENCY, "Gross Merchandise Value"
    ),
    MetricDefinition(
        Metric.BROAD_ORDER.value, "Pesanan", MetricUnit.UNITLESS, "Jumlah pesanan"
    ),
    MetricDefinition(
        Metric.BROAD_ROI.value, "ROAS", MetricUnit.UNITLESS, "Return on Ad Spend"
    ),
    MetricDefinition(
        Metric.ACOS.value, "ACOS", MetricUnit.PERCENTAGE, "Persentase Biaya Iklan"
    ),
    MetricDefinition(Metric.CLICK.value, "Klik", MetricUnit.UNITLESS, "Jumlah klik"),
    MetricDefinition(Metric.COST.value, "Spend", MetricUnit.CURRENCY, "Total ad spend"),
    MetricDefinition(Metric.CPC.value, "CPS", MetricUnit.CURRENCY, "Cost per sales"),
    MetricDefinition(
        Metric.CTR.value, "CTR", MetricUnit.PERCENTAGE, "Click Through Rate"
    ),
    MetricDefinition(
        Metric.IMPRESSION.value,
        "Impresi",
        MetricUnit.UNITLESS,
        "Jumlah impresi iklan",
    ),
    MetricDefinition(Metric.VIEW.value, "View", MetricUnit.UNITLESS, "Jumlah view"),
    MetricDefinition(
        Metric.CPM.value,
        "CPM",
        MetricUnit.CURRENCY,
        "Cost per 1000 impresi (spend / impresi * 1000)",
    ),
    MetricDefinition(
        Metric.SALDO.value,
        "Saldo",
        MetricUnit.CURRENCY,
        "Saldo iklan toko (ad balance)",
    ),
]

METRICS: Mapping[str, MetricDefinition] = MappingProxyType(
    {m.key: m for m in _METRICS}
)


# ─────────────────────────────────────────────
# HELPERS
# ─────────────────────────────────────────────


def get_metric(key: str) -> MetricDefinition | None:
    """Look up a metric by key."""
    return METRICS.get(key)


def metric_label(key: str) -> str:
    """Display label for ``key``; unknown keys pass through unchanged."""
    metric = METRICS.get(key)
    return metric.label if metric else key


def metrics_by_unit(unit: MetricUnit) -> List[MetricDefinition]:
    """Return all metrics measured in ``unit``."""
    return [m for m in METRICS.values() if m.unit == unit]
