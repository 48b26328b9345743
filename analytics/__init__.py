from .config import AnalyticsConfig
from .prepare import records_frame, resolve_now, priority_rank
from .counts import count_by_type, count_by_subject, count_by_module, TypeCount, SubjectCount, ModuleCount
from .activity import weekly_activity, DayActivity
from .summary import summary_stats, attempt_outcomes, SummaryStats
from .filtering import filter_and_sort, SORT_KEYS
from .plots import plot_weekly_activity, plot_type_counts, plot_subject_counts

__all__ = [
    "AnalyticsConfig",
    "records_frame",
    "resolve_now",
    "priority_rank",
    "count_by_type",
    "count_by_subject",
    "count_by_module",
    "TypeCount",
    "SubjectCount",
    "ModuleCount",
    "weekly_activity",
    "DayActivity",
    "summary_stats",
    "attempt_outcomes",
    "SummaryStats",
    "filter_and_sort",
    "SORT_KEYS",
    "plot_weekly_activity",
    "plot_type_counts",
    "plot_subject_counts",
]
