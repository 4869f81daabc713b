"""
Tests for reporting of knapsack solutions.

Author: KnapsackGA developers
"""
import io

import numpy as np
# noinspection PyPackageRequirements
import pytest

from knapsack_ga.items import Item
from knapsack_ga.report import report, summarise

"""pytest.fixtures"""


@pytest.fixture
def items() -> list:
    return [(60, 10), (100, 20), (120, 30)]


"""TestObjects"""


class TestReport:
    """Tests for `summarise` and `report` (from `knapsack_ga.report`)."""

    def test_summarise(self, items):
        summary = summarise(np.array([False, True, True]), items)
        assert summary['indices'] == [1, 2]
        assert summary['items'] == [Item(100, 20), Item(120, 30)]
        assert summary['value'] == 220
        assert summary['weight'] == 50

    def test_summarise_empty_selection(self, items):
        summary = summarise([False, False, False], items)
        assert summary['items'] == []
        assert summary['value'] == 0
        assert summary['weight'] == 0

    def test_error_summarise_length(self, items):
        with pytest.raises(ValueError):
            summarise([True, False], items)

    def test_report(self, items):
        stream = io.StringIO()
        summary = report([True, False, True], items, stream=stream)
        lines = stream.getvalue().splitlines()
        assert lines[0] == 'Initial item set:'
        assert lines[1:4] == ['{value: 60, weight: 10}', '{value: 100, weight: 20}', '{value: 120, weight: 30}']
        assert 'The items chosen are:' in lines
        assert lines[-1] == 'For a total value of 180 and a total weight of 40'
        assert summary['value'] == 180

    def test_report_stdout(self, items, capsys):
        report([False, True, False], items)
        assert 'For a total value of 100 and a total weight of 20' in capsys.readouterr().out
