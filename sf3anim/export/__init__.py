"""
Exporters for decoded animations.
"""

from sf3anim.export.csv_export import CsvExporter, csv_filename

__all__ = ['CsvExporter', 'csv_filename']
