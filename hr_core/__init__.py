"""Core (UI-agnostic) HR dashboard logic.

This package contains:
- the session-scoped tabular store and its bundled sample roster
- CSV import/export (schema-free and fixed-schema policies)
- heuristic column discovery
- dashboard compute functions (JSON-serializable payloads)
- chart helpers (Altair -> Vega-Lite spec dict)
"""
