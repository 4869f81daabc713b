"""
Knapsack items and random problem generation.

Author: KnapsackGA developers
"""
import logging
import numbers

import numpy as np
import typing

_LOG = logging.getLogger(__name__)


class Item(typing.NamedTuple):
    """An item that may be packed in the knapsack."""
    value: int
    weight: int

    def __str__(self) -> str:
        return f'{{value: {self.value}, weight: {self.weight}}}'


def check_non_negative_int(value, name: str) -> int:
    """Check if a value is a non-negative integer.

    :param value: value to check
    :param name: name of the value, used in error messages

    :type value: int
    :type name: str

    :return: value
    :rtype: int

    :raises TypeError: if `value` is not an integer
    :raises ValueError: if `value` is negative
    """
    if isinstance(value, bool) or not isinstance(value, numbers.Integral):
        msg = f'`{name}` must be an integer: `{name}` of type {type(value)}'
        raise TypeError(msg)

    if value < 0:
        msg = f'`{name}` must be non-negative, {value} given.'
        raise ValueError(msg)

    return int(value)


def as_items(items: typing.Iterable) -> typing.Tuple[Item, ...]:
    """Convert a collection of (value, weight)-pairs to a tuple of items.

    :param items: items, either as `Item` or as (value, weight)-pairs
    :type items: iterable

    :return: items
    :rtype: tuple

    :raises TypeError: if an item is not a (value, weight)-pair
    """
    converted = []
    for i, item in enumerate(items):
        try:
            value, weight = item
        except (TypeError, ValueError):
            msg = f'Item {i} is not a (value, weight)-pair: {item!r}'
            raise TypeError(msg) from None
        converted.append(Item(
            check_non_negative_int(value, f'items[{i}].value'),
            check_non_negative_int(weight, f'items[{i}].weight'),
        ))
    return tuple(converted)


def generate_problem(
        size: int, seed: typing.Union[int, np.random.Generator] = None, low: int = 1, high: int = 100
) -> typing.List[Item]:
    """Generate a random knapsack problem. The values and weights of the items are drawn uniformly from [`low`,
    `high`]. The same `seed` always results in the same problem.

    :param size: number of items
    :param seed: random seed, defaults to None
    :param low: lower limit of values and weights, defaults to 1
    :param high: upper limit of values and weights, defaults to 100

    :type size: int
    :type seed: int, numpy.random.Generator, optional
    :type low: int, optional
    :type high: int, optional

    :return: items
    :rtype: list

    :raises ValueError: if `low` exceeds `high`
    """
    size = check_non_negative_int(size, 'size')
    low = check_non_negative_int(low, 'low')
    high = check_non_negative_int(high, 'high')
    if low > high:
        msg = f'Lower limit exceeds upper limit: {low} > {high}'
        raise ValueError(msg)

    rng = np.random.default_rng(seed)
    data = rng.integers(low, high + 1, size=(size, 2))
    _LOG.debug(f'Generated knapsack problem with {size} items (seed={seed})')
    return [Item(int(v), int(w)) for v, w in data]
