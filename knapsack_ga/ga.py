"""
Genetic algorithm for the 0/1 knapsack problem.

Author: KnapsackGA developers
"""
import csv
import logging
import os
import sys
import time

import numpy as np
import typing

from knapsack_ga.items import as_items, check_non_negative_int

_LOG = logging.getLogger(__name__)

_PROGRESS_DETAILS = (None, 'range', 'stats', 'full', 'all')
_SOLVE_SETTINGS = ('max_iterations', 'progress_bar', 'progress_bar_length', 'progress_details', 'progress_export')


class KnapsackSolver:
    """A genetic algorithm that searches for the selection of items with the highest total value that fits in the
    knapsack. A "person" is a boolean array with one entry per item, which is `True` when the item is packed.
    """

    def __init__(
            self, items: typing.Iterable, capacity: int, population_size: int = 30, max_iterations: int = None,
            seed: typing.Union[int, np.random.Generator] = None
    ) -> None:
        """
        :param items: items to choose from, as (value, weight)-pairs
        :param capacity: capacity of the knapsack
        :param population_size: population size, defaults to 30
        :param max_iterations: number of iterations, defaults to None
        :param seed: seed of the random number generator, defaults to None

        :type items: iterable
        :type capacity: int
        :type population_size: int, optional
        :type max_iterations: int, optional
        :type seed: int, numpy.random.Generator, optional

        :raises TypeError: if `capacity`, `population_size`, or `max_iterations` is not an integer
        :raises ValueError: if `capacity` or `max_iterations` is negative, or `population_size` is not positive
        """
        # initiate object
        self.items = as_items(items)
        self.dim = len(self.items)
        self.values = np.array([item.value for item in self.items], dtype=np.int64)
        self.weights = np.array([item.weight for item in self.items], dtype=np.int64)
        self.capacity = check_non_negative_int(capacity, 'capacity')

        # set size of the population
        self.pop_size: int = check_non_negative_int(population_size, 'population_size')
        if self.pop_size < 1:
            msg = f'`population_size` must be positive, {population_size} given.'
            raise ValueError(msg)

        # set other settings
        self.n_iterations: int = self._set_iterations(max_iterations)

        # random number generator: owned by the solver
        self.rng: np.random.Generator = np.random.default_rng(seed)

        # solver state
        self.generation: typing.Union[np.ndarray, None] = None
        self.iteration: int = 0
        self.progress: dict = {}

        if not self.dim:
            _LOG.warning('No items provided: the knapsack will remain empty.')

    """Set variables"""

    def _set_iterations(self, iterations: typing.Union[int, None]) -> int:
        """Set maximum number of iterations. If no value is provided (i.e. `None`), the maximum number of iterations is
        determined by means of the number of items and the population size.

        :param iterations: maximum number of iterations
        :type iterations: int, None

        :return: maximum number of iterations
        :rtype: int
        """
        # determine number of iterations
        if iterations is None:
            iterations = 1000 * self.dim
            if iterations * self.pop_size > 1e7:
                iterations = 1e7 / self.pop_size
            return int(iterations)

        # return number of iterations
        return check_non_negative_int(iterations, 'max_iterations')

    def _check_individual(self, individual: typing.Collection, name: str = 'individual') -> np.ndarray:
        """Check the length of an individual, and convert it to a boolean array.

        :param individual: individual
        :param name: name of the individual, used in error messages, defaults to 'individual'

        :type individual: iterable
        :type name: str, optional

        :return: individual
        :rtype: numpy.ndarray

        :raises ValueError: if length of `individual` mismatches the number of items
        """
        individual = np.asarray(individual, dtype=bool)
        if not individual.shape == (self.dim,):
            msg = f'Length of `{name}` mismatches number of items: {individual.shape} =/= ({self.dim},)'
            raise ValueError(msg)
        return individual

    def _check_population(self, population: typing.Collection) -> np.ndarray:
        """Check the shape of a population, and convert it to a two-dimensional boolean array.

        :param population: population
        :type population: iterable

        :return: population
        :rtype: numpy.ndarray

        :raises ValueError: if the individuals' lengths mismatch the number of items
        """
        population = np.asarray(population, dtype=bool)
        if not (population.ndim == 2 and population.shape[1] == self.dim):
            msg = f'Shape of `population` mismatches number of items: {population.shape} =/= (-1, {self.dim})'
            raise ValueError(msg)
        return population

    """Fitness"""

    def fitness(self, individual: typing.Collection) -> int:
        """Fitness of an individual: The total value of the packed items. An individual that exceeds the capacity of
        the knapsack has a fitness of zero.

        :param individual: individual
        :type individual: iterable

        :return: fitness
        :rtype: int
        """
        individual = self._check_individual(individual)
        if self.weights[individual].sum() > self.capacity:
            return 0
        return int(self.values[individual].sum())

    def weight(self, individual: typing.Collection) -> int:
        """Total weight of the packed items."""
        individual = self._check_individual(individual)
        return int(self.weights[individual].sum())

    def population_fitness(self, population: typing.Collection) -> np.ndarray:
        """Fitness of every individual of a population. See `.fitness()`.

        :param population: population
        :type population: iterable

        :return: fitness per individual
        :rtype: numpy.ndarray
        """
        population = self._check_population(population).astype(np.int64)
        fitness = population @ self.values
        fitness[population @ self.weights > self.capacity] = 0
        return fitness

    """Initial population"""

    def generate_individual(self) -> np.ndarray:
        """Generate a random individual. Items are considered in order and every item is packed with a probability of
        50%. As soon as a packed item would exceed the capacity, the generation stops and all remaining items are left
        out, so the result never exceeds the capacity.

        Note that the stopping criterion favours the packing of items at the start of the list. This is intentional.

        :return: individual
        :rtype: numpy.ndarray
        """
        individual = np.zeros(self.dim, dtype=bool)
        weight = 0
        for i in range(self.dim):
            if self.rng.integers(2):
                weight += self.weights[i]
                # quit early if we go over capacity
                if weight > self.capacity:
                    break
                individual[i] = True
        return individual

    def initial_population(self) -> np.ndarray:
        """Generate the initial population of randomly generated individuals; duplicates are allowed.

        :return: population
        :rtype: numpy.ndarray
        """
        population = np.zeros((self.pop_size, self.dim), dtype=bool)
        for pi in range(self.pop_size):
            population[pi] = self.generate_individual()
        _LOG.debug(f'Initial population generated: {self.pop_size} individuals of {self.dim} items')
        return population

    """Genetic operations: Mutation"""

    def mutate(self, parent: typing.Collection) -> np.ndarray:
        """Mutation operation: Copy the parent and flip one randomly selected item.

        :param parent: parent
        :type parent: iterable

        :return: child
        :rtype: numpy.ndarray
        """
        child = self._check_individual(parent, 'parent').copy()
        if self.dim:
            i = self.rng.integers(self.dim)
            child[i] = not child[i]
        return child

    """Genetic operations: Crossover"""

    def crossover(self, parent_1: typing.Collection, parent_2: typing.Collection) -> np.ndarray:
        """Crossover operation: Take the "genes" of the first parent until a randomly selected index of the array, and
        the remaining "genes" from the second parent.

        :param parent_1: parent (1)
        :param parent_2: parent (2)

        :type parent_1: iterable
        :type parent_2: iterable

        :return: child
        :rtype: numpy.ndarray

        :raises ValueError: if the lengths of the parents mismatch the number of items
        """
        parent_1 = self._check_individual(parent_1, 'parent_1')
        child = self._check_individual(parent_2, 'parent_2').copy()
        if self.dim:
            r = self.rng.integers(self.dim)
            child[:r] = parent_1[:r]
        return child

    def breed(self, population: typing.Collection) -> np.ndarray:
        """Breed a new generation: Every individual is mutated, and crossed with a random individual from the same
        population (which may be itself). The children are appended to the unchanged population, tripling its size.

        :param population: population
        :type population: iterable

        :return: extended population
        :rtype: numpy.ndarray

        :raises AssertionError: if the size of the extended population is not three times the original size
        """
        population = self._check_population(population)
        size = len(population)

        # new generation: children
        children = []
        for person in population:
            children.append(self.mutate(person))
            partner = population[self.rng.integers(size)]
            children.append(self.crossover(person, partner))

        # new generation: parents and children
        new_population = np.concatenate([
            population, np.array(children, dtype=bool).reshape((2 * size, self.dim))
        ])
        assert len(new_population) == 3 * size, \
            f'Population size is not ensured: {len(new_population)} =/= {3 * size}'
        return new_population

    """Selection procedure"""

    def sort_population(self, population: typing.Collection) -> np.ndarray:
        """Sort population based on fitness: Highest fitness on top. The sorting is stable, i.e. individuals with equal
        fitness keep their order.

        :param population: population
        :type population: iterable

        :return: sorted population
        :rtype: numpy.ndarray
        """
        population = self._check_population(population)
        order = np.argsort(-self.population_fitness(population), kind='stable')
        return population[order]

    def natural_selection(self, population: typing.Collection) -> np.ndarray:
        """Select the fittest part of the population, reducing it to the population size.

        :param population: population
        :type population: iterable

        :return: selection of population
        :rtype: numpy.ndarray

        :raises ValueError: if the population is smaller than the population size
        """
        population = self._check_population(population)
        if len(population) < self.pop_size:
            msg = f'Population is smaller than the population size: {len(population)} < {self.pop_size}'
            raise ValueError(msg)
        return self.sort_population(population)[:self.pop_size].copy()

    """Progress data"""

    def _collect_progress_data(self, population: np.ndarray, progress_details: str) -> dict:
        """Collect data on evolutionary progress. See documentation of `.progress_update()` on the possible keywords of
        `progress_details`, and what data is collected based on every keyword.

        :param population: population
        :param progress_details: progress details to include

        :type population: numpy.ndarray
        :type progress_details: str

        :return: collected progress data
        :rtype: dict
        """
        fitness = self.population_fitness(population)

        # include best person's fitness
        data = {
            'best_fitness': int(fitness.max(initial=0)),
        }

        # include worst fitness
        if progress_details in ('range', 'stats', 'all'):
            data['worst_fitness'] = int(fitness.min(initial=data['best_fitness']))

        # include fitness statistics
        if progress_details in ('stats', 'all'):
            data['mean_fitness'] = float(np.mean(fitness))
            data['std_fitness'] = float(np.std(fitness))

        # include whole population's fitness
        if progress_details in ('full', 'all'):
            data['pop_fitness'] = fitness.tolist()

        # return progress data
        return data

    def progress_update(self, population: np.ndarray, progress_details: str, progress_data: dict = None) -> dict:
        """Initiate and update progress data. The data included is defined by `progress_details`:
         -  None        :   store the best fitness [default]
         -  'range'     :   store the best fitness, and the worst fitness
         -  'stats'     :   store the best fitness, the worst fitness, the mean fitness, and the standard deviation in
                            fitness
         -  'full'      :   store the fitness of the whole population
         -  'all'       :   all the above

        The returned dictionary includes the following (optional) keys:
         -  'best_fitness'      :   value of best fitness
         -  'worst_fitness'     :   value of worst fitness (optional)
         -  'mean_fitness'      :   mean value of the fitness of the whole population (optional)
         -  'std_fitness'       :   standard deviation of the fitness of the whole population (optional)
         -  'pop_fitness'       :   array of fitness values of the whole population (optional)

        :param population: population
        :param progress_details: progress details to include
        :param progress_data: previous progress data, defaults to None

        :type population: numpy.array
        :type progress_details: str
        :type progress_data: dict, optional

        :return: updated progress data
        :rtype: dict
        """
        # collect progress data
        data = self._collect_progress_data(population, progress_details)

        # initiate progress data
        if progress_data is None:
            progress_data = {k: [] for k in data.keys()}

        # append progress data
        for k in progress_data.keys():
            progress_data[k].append(data[k])

        # return progress data
        return progress_data

    """Execution"""

    def step(self) -> np.ndarray:
        """Execute a single iteration: breed the current generation and select its fittest individuals. If there is no
        current generation, the initial population is generated first.

        :return: new generation
        :rtype: numpy.ndarray
        """
        if self.generation is None:
            self.generation = self.initial_population()
            self.iteration = 0

        self.generation = self.natural_selection(self.breed(self.generation))
        self.iteration += 1

        assert len(self.generation) == self.pop_size, \
            f'Population size is not ensured: {len(self.generation)} =/= {self.pop_size}'
        return self.generation

    def solve(self, **kwargs) -> np.ndarray:
        """Execute genetic algorithm. The full number of iterations is always executed.

        :param kwargs: execution settings
            max_iterations: overwrite the maximum number of iterations, defaults to None

            progress_bar: print a progress bar, defaults to False
            progress_bar_length: print-length of progress bar, defaults to 50
            progress_export: export progress details, if a directory is provided, the progress details are exported
                accordingly, defaults to False
            progress_details: progress details to be stored:
                None        :   store the best fitness [default]
                'range'     :   store the best fitness, and the worst fitness
                'stats'     :   store the best fitness, the worst fitness, the mean fitness, and the standard deviation
                                in fitness
                'full'      :   store the fitness of the whole population
                'all'       :   all the above

        :type kwargs: optional
            max_iterations: int

            progress_bar: bool
            progress_bar_length: int
            progress_export: bool, str
            progress_details: str

        :return: fittest individual
        :rtype: numpy.ndarray

        :raises ValueError: if `progress_details` is unknown
        """
        for k in kwargs:
            if k not in _SOLVE_SETTINGS:
                _LOG.warning(f'Unknown setting\'s key: {k} [skipped]')

        # execution settings
        # > iterations
        n_iterations: int = kwargs.get('max_iterations')
        n_iterations = self.n_iterations if n_iterations is None else self._set_iterations(n_iterations)
        # > progress
        progress_bar: bool = kwargs.get('progress_bar', False)
        progress_bar_length: int = kwargs.get('progress_bar_length', 50)
        progress_export: typing.Union[bool, str] = kwargs.get('progress_export', False)
        progress_details: str = kwargs.get('progress_details')
        if progress_details not in _PROGRESS_DETAILS:
            msg = f'Unknown `progress_details`: {progress_details} not in {_PROGRESS_DETAILS}'
            raise ValueError(msg)

        _LOG.info(
            f'Start of genetic algorithm: {self.dim} items, capacity {self.capacity}, '
            f'population size {self.pop_size}, {n_iterations} iterations'
        )

        # initial population
        self.generation = self.initial_population()
        self.iteration = 0
        progress_data = self.progress_update(self.generation, progress_details)

        # evolution
        for t in range(n_iterations):
            if progress_bar:
                _progress_bar(t, n_iterations, bar_length=progress_bar_length)

            self.step()

            # update progress data
            progress_data = self.progress_update(self.generation, progress_details, progress_data)

        if progress_bar:
            _progress_bar(n_iterations, n_iterations, bar_length=progress_bar_length)
            time.sleep(.1)

        # sort population: required without iterations
        self.generation = self.sort_population(self.generation)
        self.progress = progress_data

        # export progress details
        if progress_export:
            wd = progress_export if isinstance(progress_export, str) else None
            _export2csv(progress_data, wd=wd)

        best_person = self.generation[0].copy()
        _LOG.info(
            f'End of genetic algorithm: best fitness {self.fitness(best_person)} '
            f'with weight {self.weight(best_person)} after {self.iteration} iterations'
        )

        # return best person
        return best_person


def _progress_bar(step: int, n_iterations: int, bar_length: int = 50) -> None:
    """Print the progress of the iterations on a single, overwritten line.

    :param step: number of completed iterations
    :param n_iterations: total number of iterations
    :param bar_length: printed length of progress bar, defaults to 50

    :type step: int
    :type n_iterations: int
    :type bar_length: int, optional
    """
    completed = min(step / n_iterations, 1) if n_iterations else 1
    filled = int(round(completed * bar_length))
    status = f'iteration {step}/{n_iterations}' if step < n_iterations else 'completed\n'

    sys.stdout.write(f'\r|{"#" * filled}{"-" * (bar_length - filled)}| {completed * 100:5.1f}% | {status}')
    sys.stdout.flush()


def _csv_cell(value) -> str:
    """Format a progress value as a single CSV-cell; a list of values is space-separated."""
    if isinstance(value, (list, tuple, np.ndarray)):
        return ' '.join(map(str, value))
    return str(value)


def _export2csv(data: dict, file_name: str = None, wd: str = None) -> str:
    """Export progress data as `*.csv`-file: one column per progress key, one row per generation.

    :param data: progress data
    :param file_name: file name, defaults to None (i.e. 'knapsack_progress.csv')
    :param wd: working directory, defaults to None (i.e. current working directory)

    :type data: dict
    :type file_name: str, optional
    :type wd: str, optional

    :return: file path
    :rtype: str

    :raises ValueError: if not all progress keys hold the same number of generations
    """
    file_name = file_name or 'knapsack_progress.csv'
    if not file_name.endswith('.csv'):
        file_name += '.csv'
    file = os.path.join(wd or os.getcwd(), file_name)

    n_generations = {len(v) for v in data.values()}
    if len(n_generations) > 1:
        msg = f'Progress data of unequal lengths: {sorted(n_generations)}'
        raise ValueError(msg)

    with open(file, mode='w', newline='') as f:
        writer = csv.writer(f)
        writer.writerow(data.keys())
        writer.writerows([_csv_cell(v) for v in row] for row in zip(*data.values()))

    _LOG.info(f'Progress data exported to {file}')
    return file
