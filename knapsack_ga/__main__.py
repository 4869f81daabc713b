"""
Demonstration of the genetic algorithm on a random knapsack problem.

Author: KnapsackGA developers
"""
import argparse
import logging

from knapsack_ga.ga import KnapsackSolver
from knapsack_ga.items import generate_problem
from knapsack_ga.report import report

_LOG = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='knapsack_ga',
        description='Solve a random 0/1 knapsack problem with a genetic algorithm.',
    )
    parser.add_argument('--items', type=int, default=50, help='number of items (default: %(default)s)')
    parser.add_argument('--seed', type=int, default=57, help='seed of the problem (default: %(default)s)')
    parser.add_argument('--capacity', type=int, default=500, help='capacity of the knapsack (default: %(default)s)')
    parser.add_argument(
        '--population-size', type=int, default=30, help='population size (default: %(default)s)'
    )
    parser.add_argument('--iterations', type=int, default=50000, help='number of iterations (default: %(default)s)')
    parser.add_argument('--solver-seed', type=int, default=None, help='seed of the genetic algorithm')
    parser.add_argument('--progress-bar', action='store_true', help='print a progress bar')
    parser.add_argument('--progress-export', metavar='DIR', default=None, help='export progress data to DIR')
    parser.add_argument(
        '--log-level', default='WARNING', choices=('DEBUG', 'INFO', 'WARNING', 'ERROR'),
        help='logging level (default: %(default)s)'
    )
    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=args.log_level, format='%(asctime)s %(levelname)s %(name)s: %(message)s')

    try:
        items = generate_problem(args.items, args.seed)
        solver = KnapsackSolver(
            items, args.capacity, population_size=args.population_size, max_iterations=args.iterations,
            seed=args.solver_seed
        )
    except (TypeError, ValueError) as e:
        _LOG.error(f'Invalid problem definition: {e}')
        return 2

    solution = solver.solve(progress_bar=args.progress_bar, progress_export=args.progress_export or False)
    report(solution, items)
    return 0


if __name__ == '__main__':
    raise SystemExit(main())
