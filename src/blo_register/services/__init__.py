"""
Business services: reconciliation, aggregation and the chat assistant.
"""

from .reconciliation import (
    LinkSuggestion,
    AutoLinkResult,
    StatusChange,
    ReconciliationEngine,
    score_member,
    suggest_links,
    auto_link,
)
from .aggregation import (
    COHORT_BANDS,
    PopulationStats,
    ElectorStats,
    ProspectiveVoter,
    CohortRow,
    DashboardStats,
    RegisterReport,
    population_stats,
    elector_stats,
    ep_ratio,
    gender_ratio,
    prospective_voters,
    unregistered_adults,
    marked_voters,
    age_cohorts,
    dashboard,
    register_report,
    group_voters,
)
from .assistant import DataAssistant, ChatMessage, FALLBACK_MESSAGE, GREETING, build_system_prompt

__all__ = [
    "LinkSuggestion",
    "AutoLinkResult",
    "StatusChange",
    "ReconciliationEngine",
    "score_member",
    "suggest_links",
    "auto_link",
    "COHORT_BANDS",
    "PopulationStats",
    "ElectorStats",
    "ProspectiveVoter",
    "CohortRow",
    "DashboardStats",
    "RegisterReport",
    "population_stats",
    "elector_stats",
    "ep_ratio",
    "gender_ratio",
    "prospective_voters",
    "unregistered_adults",
    "marked_voters",
    "age_cohorts",
    "dashboard",
    "register_report",
    "group_voters",
    "DataAssistant",
    "ChatMessage",
    "FALLBACK_MESSAGE",
    "GREETING",
    "build_system_prompt",
]
