"""
Reporting: export and terminal formatting.

It does NOT compute anything new: scores, ranks and categories come from
``water_radar.scoring``.

Modules:
  export     : canonical CSV/JSON text for a list of waters (re-importable).
  formatters : ASCII terminal tables for Typer CLI commands.
"""
