"""Data models for cotton blend planning."""

from dataclasses import dataclass, field

DEFAULT_BALE_WEIGHT = 170.0
GRAND_TOTAL_LABEL = "Grand Total"


@dataclass
class Variety:
    """A raw-material grade in the cotton catalog.

    Parameters
    ----------
    variety_name : str
        Unique variety name, used as the blend key.
    group : str
        Free-text classification, e.g. ``"S-6"`` or ``"Imported"``.
    avg_bale_weight : float
        Average mass of one bale. Non-positive values fall back to
        ``DEFAULT_BALE_WEIGHT`` when used.
    id : str, optional
        Identifier assigned by the catalog store.
    """

    variety_name: str
    group: str
    avg_bale_weight: float = DEFAULT_BALE_WEIGHT
    id: str | None = None

    def __post_init__(self) -> None:
        """Reject varieties without a name."""
        if not self.variety_name:
            raise ValueError("variety_name must be a non-empty string")

    @property
    def effective_bale_weight(self) -> float:
        """Bale weight used for allocation, with the default applied."""
        if self.avg_bale_weight and self.avg_bale_weight > 0:
            return float(self.avg_bale_weight)
        return DEFAULT_BALE_WEIGHT


@dataclass
class BlendEntry:
    """One variety's share in a unit's blend."""

    variety_name: str
    percentage: float
    calculated_bales: float | None = None


@dataclass
class Plan:
    """Daily requirement of one production unit.

    Parameters
    ----------
    unit_name : str
        Unit label shown in reports.
    laydown_consumption : float
        Laydowns consumed per day.
    bales_per_laydown : float
        Bales consumed per laydown.
    blend : list[BlendEntry]
        Mass composition of the unit's mixing laydown.
    id : str, optional
        Identifier assigned by the planning store.
    """

    unit_name: str
    laydown_consumption: float
    bales_per_laydown: float
    blend: list[BlendEntry] = field(default_factory=list)
    id: str | None = None

    def __post_init__(self) -> None:
        """Validate that each variety appears at most once in the blend."""
        seen: set[str] = set()
        for entry in self.blend:
            if entry.variety_name in seen:
                raise ValueError(f"duplicate variety {entry.variety_name!r} in blend of {self.unit_name}")
            seen.add(entry.variety_name)

    @property
    def target_bales(self) -> float:
        """Bales the unit consumes per day."""
        return self.laydown_consumption * self.bales_per_laydown

    @property
    def percentages(self) -> dict[str, float]:
        """Blend as a ``variety_name -> percentage`` mapping."""
        return {entry.variety_name: entry.percentage for entry in self.blend}

    @property
    def total_percentage(self) -> float:
        """Raw sum of all blend percentages, zero and negative entries included."""
        return sum(entry.percentage for entry in self.blend)


@dataclass
class VarietySummary:
    """Cross-unit totals for one variety.

    ``percentage`` is the variety's share of the grand total weight;
    ``group_percentage`` is its share of its own group's bale count.
    """

    variety_name: str
    group: str
    total_bales: float
    total_weight: float
    percentage: float
    group_percentage: float


@dataclass
class GroupSummary:
    """Cross-unit totals for one cotton group."""

    group: str
    total_bales: float
    total_weight: float
    percentage: float


@dataclass
class GrandTotal:
    """Synthetic closing row of a summary report."""

    total_bales: float
    total_weight: float
    label: str = GRAND_TOTAL_LABEL
    percentage: float = 100.0


@dataclass
class BlendReport:
    """Variety-wise and group-wise summaries of one aggregation pass.

    Parameters
    ----------
    variety_items : list[VarietySummary]
        Variety rows in report order.
    group_items : list[GroupSummary]
        Group rows in report order.
    grand_total_bales : float
        Sum of calculated bales over all plans.
    grand_total_weight : float
        Sum of calculated weight over all plans.
    skipped_units : list[str]
        Units whose blend contributed nothing.
    """

    variety_items: list[VarietySummary]
    group_items: list[GroupSummary]
    grand_total_bales: float
    grand_total_weight: float
    skipped_units: list[str] = field(default_factory=list)

    @property
    def grand_total(self) -> GrandTotal:
        return GrandTotal(total_bales=self.grand_total_bales, total_weight=self.grand_total_weight)

    def variety_rows(self) -> list[VarietySummary | GrandTotal]:
        """Variety rows followed by the Grand Total row."""
        return [*self.variety_items, self.grand_total]

    def group_rows(self) -> list[GroupSummary | GrandTotal]:
        """Group rows followed by the Grand Total row."""
        return [*self.group_items, self.grand_total]


@dataclass
class UnitDetailLine:
    variety_name: str
    percentage: float
    calculated_bales: float
    calculated_weight: float
    weighted_percentage: float


@dataclass
class UnitDetail:
    """Allocation of a single unit, with percentages based on the unit's own weight."""

    unit_name: str
    target_bales: float
    items: list[UnitDetailLine]
    total_bales: float
    total_weight: float
