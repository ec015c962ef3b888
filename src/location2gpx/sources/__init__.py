from .csv_source import CsvRecordSource
