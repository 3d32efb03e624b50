"""
Analysis orchestration: the controller and its state stores.
"""
from modreview.analysis.controller import AnalysisController, ProviderOutcome
from modreview.analysis.store import (
    ModerationStore,
    JsonModerationStore,
    SqlModerationStore,
    get_store,
)

__all__ = [
    "AnalysisController",
    "ProviderOutcome",
    "ModerationStore",
    "JsonModerationStore",
    "SqlModerationStore",
    "get_store",
]
