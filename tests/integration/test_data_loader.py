"""
Tests for loading draw histories from CSV and XLSX files.
"""
import pandas as pd
import pytest

from luckyfive.data_loader import ContestDraw, detect_columns, load_draw_history
from luckyfive.utils.error_handling import DataError

HEADER = "Concurso,Data Sorteio,Bola1,Bola2,Bola3,Bola4,Bola5\n"


def write_csv(path, rows, header=HEADER):
    path.write_text(header + "".join(row + "\n" for row in rows), encoding='utf-8')
    return path


class TestDetectColumns:
    """Test header-based column detection."""

    def test_named_columns(self):
        headers = ["Concurso", "Data Sorteio", "Bola1", "Bola2", "Bola3", "Bola4", "Bola5"]

        assert detect_columns(headers) == (0, 1, [2, 3, 4, 5, 6])

    def test_ball_columns_out_of_order(self):
        headers = ["contest", "ball 2", "ball 1", "ball 3", "ball 4", "ball 5"]

        contest, date, balls = detect_columns(headers)
        assert contest == 0
        assert date is None
        assert balls == [2, 1, 3, 4, 5]

    def test_positional_fallback(self):
        headers = ["contest", "a", "b", "c", "d", "e"]

        assert detect_columns(headers) == (0, None, [1, 2, 3, 4, 5])

    def test_too_few_columns(self):
        with pytest.raises(DataError):
            detect_columns(["contest", "a", "b"])


class TestLoadDrawHistory:
    """Test load_draw_history."""

    def test_loads_and_sorts_by_contest(self, tmp_path):
        path = write_csv(tmp_path / "quina.csv", [
            "2,02/01/2020,6,7,8,9,10",
            "1,01/02/2020,50,10,20,30,40",
        ])

        draws = load_draw_history(path)

        assert [d.contest for d in draws] == [1, 2]
        assert isinstance(draws[0], ContestDraw)
        # Slot order is kept as stored
        assert draws[0].numbers == (50, 10, 20, 30, 40)
        assert draws[0].date.month == 2

    def test_missing_file(self, tmp_path):
        with pytest.raises(DataError):
            load_draw_history(tmp_path / "absent.csv")

    def test_header_only_file(self, tmp_path):
        path = write_csv(tmp_path / "empty.csv", [])

        with pytest.raises(DataError, match="empty"):
            load_draw_history(path)

    @pytest.mark.parametrize("row", [
        "1,01/01/2020,1,2,3,4,81",
        "1,01/01/2020,1,2,3,4,4",
        "1,01/01/2020,1,2,3,4,x",
        "0,01/01/2020,1,2,3,4,5",
    ])
    def test_invalid_rows(self, tmp_path, row):
        path = write_csv(tmp_path / "bad.csv", [row])

        with pytest.raises(DataError):
            load_draw_history(path)

    def test_duplicate_contest(self, tmp_path):
        path = write_csv(tmp_path / "dup.csv", [
            "1,01/01/2020,1,2,3,4,5",
            "1,02/01/2020,6,7,8,9,10",
        ])

        with pytest.raises(DataError, match="duplicate"):
            load_draw_history(path)

    def test_custom_domain(self, tmp_path):
        path = write_csv(tmp_path / "small.csv", ["1,01/01/2020,1,2,3,4,5"])

        with pytest.raises(DataError):
            load_draw_history(path, max_num=4)

    def test_xlsx(self, tmp_path):
        path = tmp_path / "quina.xlsx"
        pd.DataFrame({
            'Concurso': [10, 11],
            'Bola1': [1, 11], 'Bola2': [2, 12], 'Bola3': [3, 13],
            'Bola4': [4, 14], 'Bola5': [5, 15],
        }).to_excel(path, index=False, engine='openpyxl')

        draws = load_draw_history(path)

        assert [d.contest for d in draws] == [10, 11]
        assert draws[1].numbers == (11, 12, 13, 14, 15)
        assert draws[0].date is None
