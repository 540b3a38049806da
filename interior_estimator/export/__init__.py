"""
Estimate Exports
Plain-text and Excel renditions of an estimate.
"""

from .excel_export import estimate_to_dataframe, export_estimate_to_excel
from .text_export import item_dimensions, render_estimate_text

__all__ = [
    "estimate_to_dataframe",
    "export_estimate_to_excel",
    "item_dimensions",
    "render_estimate_text",
]
