import logging
from pathlib import Path
from typing import Any, Dict, Iterator

import pandas as pd

logger = logging.getLogger(__name__)


class CsvRecordSource:
    """
    Reads raw location records from a CSV file in chunks.
    Header names are trimmed and lower-cased, cell values are trimmed and blank
    cells come out as None. Values are not parsed: that is the normalizer's job.
    """
    def __init__(
        self,
        filepath: str | Path,
        sep: str = ',',
        chunksize: int = 1000,
    ):
        self.filepath = Path(filepath)
        if not self.filepath.exists():
            raise FileNotFoundError(f"File not found: {self.filepath}")
        self.sep = sep
        self.chunksize = chunksize

    def __iter__(self) -> Iterator[Dict[str, Any]]:
        return self.records()

    def records(self) -> Iterator[Dict[str, Any]]:
        """
        Yields records one by one, in file order.
        """
        try:
            reader = pd.read_csv(
                self.filepath,
                sep=self.sep,
                dtype=str,
                keep_default_na=False,
                skipinitialspace=True,
                chunksize=self.chunksize,
            )
        except pd.errors.EmptyDataError:
            logger.warning("CSV file %s is empty", self.filepath)
            return

        rows = 0
        with reader:
            for chunk in reader:
                chunk.columns = [str(c).strip().lower() for c in chunk.columns]
                for row in chunk.to_dict(orient="records"):
                    rows += 1
                    yield {k: _clean(v) for k, v in row.items()}
        logger.debug("Read %d records from %s", rows, self.filepath)


def _clean(value: Any) -> str | None:
    # Short rows are padded by pandas with NaN
    if not isinstance(value, str):
        return None
    value = value.strip()
    return value or None
