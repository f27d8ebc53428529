"""CSV input and export."""

from .csv_export import EXPORT_COLUMNS, write_groups_csv
from .csv_reader import read_participants, read_party_location

__all__ = ["EXPORT_COLUMNS", "read_participants", "read_party_location", "write_groups_csv"]
