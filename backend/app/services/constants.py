# backend/app/services/constants.py
"""
Centralized constants for the Portfolio Returns services.

This module provides a single source of truth for all business constants
used across the application. Centralizing these values:

1. Prevents inconsistencies from duplicate definitions
2. Makes it easy to tune parameters in one place
3. Documents the meaning and units of each constant

Usage:
    from app.services.constants import (
        CALENDAR_DAYS_PER_YEAR,
        XIRR_MAX_ITERATIONS,
        XIRR_TOLERANCE,
    )
"""

from decimal import Decimal


# =============================================================================
# FINANCIAL CALENDAR CONSTANTS
# =============================================================================

# Standard number of calendar days in a year
# Actual/365 day-count convention used for XIRR discounting
CALENDAR_DAYS_PER_YEAR: int = 365


# =============================================================================
# XIRR CALCULATION SETTINGS
# =============================================================================

# Maximum iterations for the Newton-Raphson solver
# The loop exits early on convergence; exhausting it means "undetermined"
XIRR_MAX_ITERATIONS: int = 100

# Convergence tolerance on the RATE (not on NPV)
# 0.0001 as a fraction = 0.01 percentage points
XIRR_TOLERANCE: float = 0.0001

# Initial guess for the iteration (10% annual return)
XIRR_INITIAL_GUESS: float = 0.1


# =============================================================================
# DECIMAL PRECISION CONSTANTS
# =============================================================================

# Solver output: 8 decimal places on the percentage
RATE_PRECISION: Decimal = Decimal("0.00000001")

# Return percentages in summaries: 4 decimal places (e.g., 12.3456%)
PERCENTAGE_PRECISION: Decimal = Decimal("0.0001")


# =============================================================================
# UTILITY CONSTANTS
# =============================================================================

# Type-safe zero for Decimal comparisons
ZERO: Decimal = Decimal("0")

HUNDRED: Decimal = Decimal("100")


# =============================================================================
# RATE LIMITING CONSTANTS
# =============================================================================
# Format follows slowapi/limits syntax: "100/minute", "10/hour", etc.

# Default rate limit applied to every route
RATE_LIMIT_DEFAULT: str = "100/minute"

# Health check endpoints (monitoring tools poll frequently)
RATE_LIMIT_HEALTH: str = "300/minute"

# Returns calculations are CPU-bound (up to 100 solver iterations per call)
RATE_LIMIT_RETURNS: str = "60/minute"


# =============================================================================
# RESOURCE LIMIT CONSTANTS
# =============================================================================

# Maximum number of holdings in a single request
MAX_HOLDINGS_PER_REQUEST: int = 500

# Maximum number of raw cash flows in a single request
# Each holding contributes two cash flows, so a full portfolio fits either endpoint
MAX_CASH_FLOWS_PER_REQUEST: int = 2 * MAX_HOLDINGS_PER_REQUEST
