from cardsifter.parsers.csv_records import parse_csv_records

__all__ = [
    "parse_csv_records",
]
