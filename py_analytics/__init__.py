from .models import MetricsResult, MonthlyStats, RiskAlerts, JournalReport
from .engine import MetricsEngine, calculate_metrics
from .filters import TimeRange, resolve_window
from .calendar import CalendarAnalyzer
from .journal import JournalAnalyzer, JournalView
