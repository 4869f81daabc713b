"""
Reporting of a knapsack solution.

Author: KnapsackGA developers
"""
import sys

import numpy as np
import typing

from knapsack_ga.items import as_items


def summarise(solution: typing.Collection, items: typing.Iterable) -> dict:
    """Summarise a solution: the packed items, and their total value and weight. The capacity is not considered.

    :param solution: solution, i.e. the fittest individual
    :param items: items to choose from

    :type solution: iterable
    :type items: iterable

    :return: summary of solution
    :rtype: dict

    :raises ValueError: if length of `solution` mismatches the number of items
    """
    items = as_items(items)
    solution = np.asarray(solution, dtype=bool)
    if not solution.shape == (len(items),):
        msg = f'Length of `solution` mismatches number of items: {solution.shape} =/= ({len(items)},)'
        raise ValueError(msg)

    indices = [int(i) for i in np.flatnonzero(solution)]
    chosen = [items[i] for i in indices]
    return {
        'indices': indices,
        'items': chosen,
        'value': sum(item.value for item in chosen),
        'weight': sum(item.weight for item in chosen),
    }


def report(solution: typing.Collection, items: typing.Iterable, stream: typing.TextIO = None) -> dict:
    """Write the initial item set, the packed items, and their totals.

    :param solution: solution, i.e. the fittest individual
    :param items: items to choose from
    :param stream: output stream, defaults to None (i.e. `sys.stdout`)

    :type solution: iterable
    :type items: iterable
    :type stream: typing.TextIO, optional

    :return: summary of solution
    :rtype: dict
    """
    stream = stream or sys.stdout
    items = as_items(items)
    summary = summarise(solution, items)

    lines = ['Initial item set:']
    lines.extend(str(item) for item in items)
    lines.append('')
    lines.append('The items chosen are:')
    lines.extend(str(item) for item in summary['items'])
    lines.append(f'For a total value of {summary["value"]} and a total weight of {summary["weight"]}')

    stream.write('\n'.join(lines) + '\n')
    stream.flush()
    return summary
