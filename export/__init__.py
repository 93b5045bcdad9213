"""Export-Modul: Terminal-Darstellung (Rich) für Raster, Liste und Verletzungen."""

from export.tui_renderer import grid_table, list_table, problem_tables, violations_table

__all__ = ["grid_table", "list_table", "problem_tables", "violations_table"]
