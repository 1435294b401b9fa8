"""Centralized constants shared across the scoring engine, services and routes.

This module is the SINGLE SOURCE OF TRUTH for the intake form vocabulary
(departments, frequency labels, data input/output options) and for the
session defaults. Reused by:
  - Scoring Engine (default weights)
  - ROI Calculator (monthly occurrences)
  - Session Service (TTL, naming)
"""

from __future__ import annotations

# ── Departments ─────────────────────────────────────────────────────────
# Suggested values only. Department is an open string on the task.
DEPARTMENTS: list[str] = [
    "Sales",
    "Operations",
    "Customer Service",
    "HR",
    "Finance",
    "Marketing",
    "IT",
    "Other",
]

# ── Frequency labels (keyed by Frequency wire value) ────────────────────
FREQUENCY_LABELS: dict[str, str] = {
    "many_times_daily": "Many times per day (50+)",
    "daily_high": "Daily (10-50 times)",
    "weekly_multiple": "Several times per week",
    "weekly": "Once a week",
    "monthly_or_less": "Monthly or less",
}

# ── Data categories offered by the intake form ──────────────────────────
DATA_INPUT_OPTIONS: list[str] = [
    "Excel/Spreadsheets",
    "CRM (Salesforce, HubSpot)",
    "Email",
    "PDF Documents",
    "Web Forms",
    "Physical Paper",
    "Phone Calls/Verbal",
    "Database/API",
]

DATA_OUTPUT_OPTIONS: list[str] = [
    "Excel/Spreadsheets",
    "Email Response",
    "SMS/Notification",
    "PDF Report",
    "Database Update",
    "Verbal Response",
]

# ── Scoring defaults ────────────────────────────────────────────────────
# Not required to sum to 1.0. The engine divides by the max criterion
# value (5), never by the weight sum.
DEFAULT_WEIGHTS: dict[str, float] = {
    "frequency": 0.25,
    "repetitiveness": 0.25,
    "data_dependency": 0.20,
    "decision_variability": 0.20,
    "complexity": 0.10,
}

FULLY_AUTOMATABLE_THRESHOLD: int = 80
PARTIALLY_AUTOMATABLE_THRESHOLD: int = 40

# ── ROI ─────────────────────────────────────────────────────────────────
WORKING_DAYS_PER_MONTH: int = 22

# Approximate occurrences per month for each frequency bucket
MONTHLY_OCCURRENCES: dict[str, int] = {
    "many_times_daily": 50 * WORKING_DAYS_PER_MONTH,
    "daily_high": 30 * WORKING_DAYS_PER_MONTH,
    "weekly_multiple": 12,
    "weekly": 4,
    "monthly_or_less": 1,
}
DEFAULT_MONTHLY_OCCURRENCES: int = 4

# Used when no hourly rate is configured: value ≈ score × 15
LEGACY_SAVINGS_PER_SCORE_POINT: float = 15.0

# ── Sessions ────────────────────────────────────────────────────────────
# An empty session older than this is re-issued with a fresh token.
SESSION_TTL_DAYS: int = 7
DEFAULT_SESSION_NAME_PREFIX: str = "Assessment"
