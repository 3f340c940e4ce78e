from typing import List, Optional, Dict, Any
from dataclasses import dataclass, asdict
import logging

from compass.models import ImplementationProgress, ProgressStatus

logger = logging.getLogger(__name__)

PRODUCTIVITY_GAIN_PER_COMPLETED_TOOL = 15
MAX_PRODUCTIVITY_GAIN = 100

# ROI calculator constants
WEEKS_PER_MONTH = 4.33
MONTHS_PER_YEAR = 12
TEAM_REPORTING_SHARE = 0.3  # share of the lead's reporting load carried by each teammate
TEAM_RATE_FACTOR = 0.6  # teammate hourly rate relative to the lead's


def summarize_progress(rows: List[ImplementationProgress]) -> Dict[str, int]:
    completed = sum(1 for row in rows if row.status == ProgressStatus.COMPLETED.value)
    started = sum(1 for row in rows if row.status != ProgressStatus.INTERESTED.value)
    minutes = sum(row.time_invested_minutes or 0 for row in rows)
    return {
        "tools_tracked": len(rows),
        "completed": completed,
        "started": started,
        "total_hours": round(minutes / 60),
        "productivity_gain": min(completed * PRODUCTIVITY_GAIN_PER_COMPLETED_TOOL, MAX_PRODUCTIVITY_GAIN),
    }


@dataclass
class ROIInputs:
    hourly_rate: float
    reporting_hours_per_week: float
    board_prep_hours_per_month: float
    time_savings_percentage: float
    team_size: int = 1
    monthly_tool_cost: float = 0.0
    implementation_hours: float = 0.0


@dataclass
class ROIResult:
    weekly_hours_saved: float
    monthly_board_hours_saved: float
    monthly_savings: float
    annual_savings: float
    annual_tool_cost: float
    implementation_cost: float
    net_annual_savings: float
    roi_percentage: Optional[float]
    payback_months: Optional[float]

    def as_dict(self) -> Dict[str, Any]:
        return asdict(self)


def calculate_roi(inputs: ROIInputs) -> ROIResult:
    """
    Savings from reclaimed reporting and board-prep time against tool and
    implementation cost. Division by zero yields None rather than inf.
    """
    pct = inputs.time_savings_percentage / 100
    rate = inputs.hourly_rate

    weekly_saved = inputs.reporting_hours_per_week * pct
    board_saved = inputs.board_prep_hours_per_month * pct

    team_weekly = weekly_saved * TEAM_REPORTING_SHARE * max(inputs.team_size - 1, 0) * rate * TEAM_RATE_FACTOR
    monthly_savings = (weekly_saved * rate + team_weekly) * WEEKS_PER_MONTH + board_saved * rate
    annual_savings = monthly_savings * MONTHS_PER_YEAR

    annual_tool_cost = inputs.monthly_tool_cost * MONTHS_PER_YEAR
    implementation_cost = inputs.implementation_hours * rate
    first_year_cost = annual_tool_cost + implementation_cost

    roi_percentage = None
    if first_year_cost > 0:
        roi_percentage = (annual_savings - first_year_cost) / first_year_cost * 100

    payback_months = None
    if monthly_savings > 0:
        payback_months = first_year_cost / monthly_savings

    return ROIResult(
        weekly_hours_saved=weekly_saved,
        monthly_board_hours_saved=board_saved,
        monthly_savings=monthly_savings,
        annual_savings=annual_savings,
        annual_tool_cost=annual_tool_cost,
        implementation_cost=implementation_cost,
        net_annual_savings=annual_savings - annual_tool_cost,
        roi_percentage=roi_percentage,
        payback_months=payback_months,
    )
