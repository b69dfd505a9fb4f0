"""
scoring/ - Company Scoring Engine

Modules:
    utils.py               - Decimal rounding and scale ceilings
    config_validation.py   - Scoring config hard/soft rules
    criteria_editor.py     - Id-preserving criteria edit session
    aggregator.py          - Weighted total score + score level
    run_state.py           - Run lifecycle state machine + polling policy
    analytics.py           - Distribution, ranking, radar, scatter projections
"""
