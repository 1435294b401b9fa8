from .scoring_engine import score_task
from .roi_calculator import estimate_monthly_time_saved, estimate_monthly_value, estimate_roi
from .ai_enhancement import enhance
from .export_service import export_to_csv, export_to_json

__all__ = [
    "score_task",
    "estimate_monthly_time_saved",
    "estimate_monthly_value",
    "estimate_roi",
    "enhance",
    "export_to_csv",
    "export_to_json",
]
