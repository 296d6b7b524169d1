"""
Spreadsheet importers for census and voter data.
"""

from .spreadsheet import (
    ImportMode,
    CensusImport,
    VoterImport,
    read_first_sheet,
    parse_census_rows,
    parse_voter_rows,
    load_census,
    load_voters,
    apply_census_import,
    apply_voter_import,
)

__all__ = [
    "ImportMode",
    "CensusImport",
    "VoterImport",
    "read_first_sheet",
    "parse_census_rows",
    "parse_voter_rows",
    "load_census",
    "load_voters",
    "apply_census_import",
    "apply_voter_import",
]
