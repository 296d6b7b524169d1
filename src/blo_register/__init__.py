"""
BLO Register.

Census and electoral roll register for a Booth Level Officer: households
and members, the voter roll, reconciliation between the two, dashboard
statistics, spreadsheet/PDF exports and JSON backups.
"""

__version__ = "1.0.0"
