from .aggregate import Statistic, Value
from .issues import Issue, IssueType, compute_issues
from .periods import Period, generate_buckets
from .statistics import Category, compute_statistics
from .totals import ExternalPolicy, FlowGroup, TotalType

__all__ = [
    "Category",
    "ExternalPolicy",
    "FlowGroup",
    "Issue",
    "IssueType",
    "Period",
    "Statistic",
    "TotalType",
    "Value",
    "compute_issues",
    "compute_statistics",
    "generate_buckets",
]
