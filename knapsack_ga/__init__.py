"""
KnapsackGA is a genetic algorithm using the `numpy`-package to approximate the 0/1 knapsack problem: a selection of
items is evolved that maximises the total value without exceeding the capacity of the knapsack.

Author: KnapsackGA developers
"""
from knapsack_ga.items import Item, as_items, generate_problem
from knapsack_ga.ga import KnapsackSolver
from knapsack_ga.report import report, summarise

__all__ = ['Item', 'KnapsackSolver', 'as_items', 'generate_problem', 'report', 'summarise']

__version__ = '1.0'
__author__ = 'KnapsackGA developers'
__description__ = 'Genetic algorithm for the 0/1 knapsack problem'
