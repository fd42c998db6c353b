"""Multi-scenario financial projection engine.

- inputs.py: ProjectionInputs, payload parsing and range validation
- scenarios.py: Conservative / Realistic / Optimistic parameter derivation
- engine.py: month-by-month simulator and scenario results
- insights.py: profitability and customer metrics, recommendations
- defaults.py: per-product starter values
"""
