"""Define the closed set of process variables and the record type."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple, Union

DATE_COLUMN = "date"


class Variable(str, Enum):
    """Numeric process variables measured in the flotation plant.

    Each member's value is the column label used in the source dataset, so
    ``Variable("% Iron Concentrate")`` round-trips a column name and an
    unknown name raises ``ValueError`` instead of silently selecting nothing.
    """

    IRON_CONCENTRATE = "% Iron Concentrate"
    SILICA_CONCENTRATE = "% Silica Concentrate"
    ORE_PULP_PH = "Ore Pulp pH"
    ORE_PULP_DENSITY = "Ore Pulp Density"
    STARCH_FLOW = "Starch Flow"
    AMINA_FLOW = "Amina Flow"


VariableLike = Union[Variable, str]

CORRELATION_VARIABLES: Tuple[Variable, ...] = (
    Variable.IRON_CONCENTRATE,
    Variable.SILICA_CONCENTRATE,
    Variable.ORE_PULP_PH,
    Variable.ORE_PULP_DENSITY,
    Variable.STARCH_FLOW,
    Variable.AMINA_FLOW,
)
FORECAST_VARIABLES: Tuple[Variable, ...] = (
    Variable.IRON_CONCENTRATE,
    Variable.SILICA_CONCENTRATE,
)
ADVANCED_STAT_VARIABLES: Tuple[Variable, ...] = (
    Variable.IRON_CONCENTRATE,
    Variable.SILICA_CONCENTRATE,
    Variable.ORE_PULP_PH,
)
KPI_VARIABLES = ADVANCED_STAT_VARIABLES

REQUIRED_COLUMNS: Tuple[str, ...] = (DATE_COLUMN,) + tuple(
    v.value for v in CORRELATION_VARIABLES
)

SHORT_NAMES = {
    Variable.IRON_CONCENTRATE: "Iron Concentrate",
    Variable.SILICA_CONCENTRATE: "Silica Concentrate",
    Variable.ORE_PULP_PH: "pH Level",
    Variable.ORE_PULP_DENSITY: "Pulp Density",
    Variable.STARCH_FLOW: "Starch Flow",
    Variable.AMINA_FLOW: "Amina Flow",
}


def as_variable(variable: VariableLike) -> Variable:
    """Coerce a column label or ``Variable`` member to ``Variable``.

    Raises:
        ValueError: If ``variable`` does not name a known process variable.
    """
    return Variable(variable)


def column_name(variable: VariableLike) -> str:
    """Return the dataset column label for ``variable``."""
    return as_variable(variable).value


_FIELD_FOR_VARIABLE = {
    Variable.IRON_CONCENTRATE: "iron_concentrate",
    Variable.SILICA_CONCENTRATE: "silica_concentrate",
    Variable.ORE_PULP_PH: "ore_pulp_ph",
    Variable.ORE_PULP_DENSITY: "ore_pulp_density",
    Variable.STARCH_FLOW: "starch_flow",
    Variable.AMINA_FLOW: "amina_flow",
}


@dataclass(frozen=True)
class Record:
    """One timestamped measurement row.

    Attributes:
        date: Calendar date at day granularity as an ISO ``YYYY-MM-DD`` string.
        iron_concentrate: Iron grade of the concentrate in percent.
        silica_concentrate: Silica impurity of the concentrate in percent.
        ore_pulp_ph: Flotation pulp pH.
        ore_pulp_density: Pulp density in kg cm^-3.
        starch_flow: Starch (depressant) flow in m^3 h^-1.
        amina_flow: Amina (collector) flow in m^3 h^-1.

    ``None`` marks a missing measurement; it is never conflated with ``NaN``.
    """

    date: str
    iron_concentrate: Optional[float] = None
    silica_concentrate: Optional[float] = None
    ore_pulp_ph: Optional[float] = None
    ore_pulp_density: Optional[float] = None
    starch_flow: Optional[float] = None
    amina_flow: Optional[float] = None

    def value(self, variable: VariableLike) -> Optional[float]:
        """Return the measurement for ``variable`` or ``None`` when missing."""
        return getattr(self, _FIELD_FOR_VARIABLE[as_variable(variable)])

    def to_row(self) -> dict:
        """Return the record keyed by dataset column labels."""
        row = {DATE_COLUMN: self.date}
        for variable, field_name in _FIELD_FOR_VARIABLE.items():
            row[variable.value] = getattr(self, field_name)
        return row
