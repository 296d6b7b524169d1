"""
Spreadsheet and PDF exporters.
"""

from .spreadsheet import export_census, export_voters, census_frame, voter_frame
from .register_pdf import write_register_pdf

__all__ = [
    "export_census",
    "export_voters",
    "census_frame",
    "voter_frame",
    "write_register_pdf",
]
