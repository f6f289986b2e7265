# luckyfive/data_loader.py
"""
Loads a Quina draw history from CSV or XLSX into validated ContestDraw records.

Columns are detected by header name (contest: 'concurso'/'contest'/'draw';
balls: 'bola1'..'bola5', 'ball 1', 'dezena1', ...). When no ball headers are
recognized, the first columns after the contest and date columns are used.
"""
import re
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Tuple

import pandas as pd

from .infrastructure.logging import get_logger
from .utils.error_handling import DataError, safe_file_operation
from .utils.input_validation import InputValidator

logger = get_logger(__name__)

CONTEST_NAMES = ["concurso", "contest", "draw", "id"]
DATE_NAMES = ["data", "date", "sorteio"]
BALL_NAMES = ["bola", "ball", "dezena", "num"]


@dataclass(frozen=True)
class ContestDraw:
    """One historical draw with its contest number."""
    contest: int
    numbers: Tuple[int, ...]
    date: Optional[pd.Timestamp] = None


def _trailing_number(header: str) -> int:
    match = re.search(r'(\d+)\D*$', header)
    return int(match.group(1)) if match else 0


def detect_columns(headers: List[str], pick_count: int = 5):
    """
    Find the contest, date and ball columns.

    Returns:
        (contest_col, date_col, ball_cols); date_col may be None
    """
    lower = [str(h).strip().lower() for h in headers]

    def find(names, exclude=()):
        for name in names:
            for i, header in enumerate(lower):
                if i not in exclude and name in header:
                    return i
        return None

    ball_cols = [None] * pick_count
    for i, header in enumerate(lower):
        if any(name in header for name in BALL_NAMES):
            pos = _trailing_number(header)
            if 1 <= pos <= pick_count and ball_cols[pos - 1] is None:
                ball_cols[pos - 1] = i

    used = {c for c in ball_cols if c is not None}
    contest_col = find(CONTEST_NAMES, exclude=used)
    if contest_col is None and headers:
        contest_col = 0
    used.add(contest_col)
    date_col = find(DATE_NAMES, exclude=used)

    if any(c is None for c in ball_cols):
        skip = {contest_col, date_col}
        positional = [i for i in range(len(headers)) if i not in skip]
        if len(positional) < pick_count:
            raise DataError(f"Could not detect {pick_count} ball columns in headers: {headers}")
        ball_cols = positional[:pick_count]

    return contest_col, date_col, ball_cols


def read_table(path: Path) -> pd.DataFrame:
    with safe_file_operation(str(path), "read"):
        if path.suffix.lower() in (".xlsx", ".xls"):
            return pd.read_excel(path, engine='openpyxl')
        return pd.read_csv(path)


def load_draw_history(filepath, pick_count: int = 5, max_num: int = 80) -> List[ContestDraw]:
    """
    Load, validate and sort a draw history (oldest contest first).

    Raises:
        DataError: the file is missing, unreadable, empty, or a row is invalid
    """
    path = Path(filepath)
    df = read_table(path)
    if df.empty:
        raise DataError(f"History file is empty: {path}")

    contest_col, date_col, ball_cols = detect_columns(list(df.columns), pick_count)
    logger.debug(f"Detected columns: contest={contest_col}, date={date_col}, balls={ball_cols}")

    draws = []
    seen_contests = set()
    for row_number, row in enumerate(df.itertuples(index=False), start=2):
        try:
            contest = int(row[contest_col])
            numbers = [int(row[c]) for c in ball_cols]
        except (TypeError, ValueError) as e:
            raise DataError(f"Row {row_number}: non-numeric contest or ball value ({e})") from e

        if contest <= 0:
            raise DataError(f"Row {row_number}: contest must be positive, got {contest}")
        if contest in seen_contests:
            raise DataError(f"Row {row_number}: duplicate contest {contest}")
        seen_contests.add(contest)

        try:
            InputValidator.validate_number_combination(numbers, pick_count, max_num)
        except ValueError as e:
            raise DataError(f"Row {row_number} (contest {contest}): {e}") from e

        date = None
        if date_col is not None:
            date = pd.to_datetime(row[date_col], dayfirst=True, errors='coerce')
            if pd.isna(date):
                date = None
        draws.append(ContestDraw(contest=contest, numbers=tuple(numbers), date=date))

    draws.sort(key=lambda d: d.contest)
    logger.info(f"Loaded {len(draws)} draws from {path} (contests {draws[0].contest}-{draws[-1].contest})")
    return draws
