from .analysis_service import AnalysisService, AnalysisStatistics, BatchItem, BatchReport
from .comparison import ComparedTender, ComparisonReport, compare_results

__all__ = [
    "AnalysisService",
    "AnalysisStatistics",
    "BatchItem",
    "BatchReport",
    "ComparedTender",
    "ComparisonReport",
    "compare_results",
]
