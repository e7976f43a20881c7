"""
evochase Genetic Operators Module

This module implements the steps of one generational cycle, applied to a single
population (a list of genomes):

    fitness -> sort -> select -> recombine -> mutate -> reshuffle

Selection and recombination come in two flavours:
    elitist:               only the two best genomes become parents
    fitness proportional:  every genome gets as many copies as its fitness
                           (integer part certainly, fractional part by chance),
                           followed by crossover of random pairs

All randomness comes from the numpy Generator passed in by the caller.

Functions:
    calculate_fitness:              Normalize evaluations by the population mean
    sort_population:                Order genomes by decreasing fitness (stable)
    elitist_selection:              Keep the two best genomes
    fitness_proportional_selection: Clone genomes according to their fitness
    elitist_combination:            Refill the population by crossing the two best parents
    random_combination:             Keep the two best parents, refill with children of random pairs
    mutate_except_best_two:         Mutate every genome but the first two
    shuffle_order:                  Apply a random permutation to the population
"""

from operator import attrgetter

import numpy as np
from loguru import logger

from evochase.genotype import Genome

def calculate_fitness(population: list[Genome]) -> None:
    """
    Set each genome's fitness to its evaluation divided by the mean evaluation.

    If the mean evaluation is 0 (nobody scored), every fitness is set to 0.
    Selection then falls back on the two best genomes.
    """
    if not population:
        return

    mean_evaluation = sum(genome.evaluation for genome in population) / len(population)
    if mean_evaluation == 0:
        logger.warning("Mean evaluation is 0 across {n} genomes, setting all fitness to 0", n=len(population))
        for genome in population:
            genome.fitness = 0.0
        return

    for genome in population:
        genome.fitness = genome.evaluation / mean_evaluation

def sort_population(population: list[Genome]) -> None:
    """
    Sort in place by decreasing fitness. The sort is stable: genomes
    with equal fitness keep their original relative order.
    """
    population.sort(key=attrgetter('fitness'), reverse=True)

def elitist_selection(population: list[Genome]) -> list[Genome]:
    """
    Keep the two best genomes of a sorted population.
    A population with fewer than two genomes is returned unchanged.
    """
    if len(population) < 2:
        return population
    return population[:2]

def fitness_proportional_selection(population     : list[Genome],
                                   population_size: int,
                                   rng            : np.random.Generator) -> list[Genome]:
    """
    Select parents from a sorted population, in proportion to their fitness.

    Each genome with fitness >= 1 is cloned floor(fitness) times. Then, in
    population order, each genome is cloned once more with probability equal
    to the fractional part of its fitness. If this yields fewer than two
    parents (and the target size is not 0), clones of the two best genomes
    are added.

    Parameters:
        population:      genomes sorted by decreasing fitness
        population_size: target size of the next generation
        rng:             the random generator

    Returns:
        clones of the selected genomes, best first
    """
    selected = []

    # Integer part of the fitness
    for genome in population:
        if genome.fitness >= 1:
            selected.extend(genome.clone() for _ in range(int(genome.fitness)))

    # Fractional part of the fitness
    for genome in population:
        remainder = genome.fitness - int(genome.fitness)
        if rng.random() < remainder:
            selected.append(genome.clone())

    # Nobody scored enough: fall back on the two best genomes
    if len(selected) < 2 and population_size != 0:
        logger.debug("Only {n} genomes selected, adding the two best", n=len(selected))
        selected.extend(genome.clone() for genome in population[:2])

    return selected

def elitist_combination(parents: list[Genome], population_size: int, cross_prob: float,
                        rng: np.random.Generator) -> list[Genome]:
    """
    Fill a new population of 'population_size' genomes with children of the first two parents.
    With fewer than two parents, the parents are returned unchanged.
    """
    if len(parents) < 2:
        logger.warning("Cannot recombine {n} parent(s), keeping them unchanged", n=len(parents))
        return parents

    new_population = []
    while len(new_population) < population_size:
        child1, child2 = parents[0].crossover(parents[1], cross_prob, rng)
        new_population.append(child1)
        if len(new_population) < population_size:
            new_population.append(child2)
    return new_population

def random_combination(parents: list[Genome], population_size: int, cross_prob: float,
                       rng: np.random.Generator) -> list[Genome]:
    """
    Fill a new population of 'population_size' genomes: the first two parents are
    carried over unchanged, the rest are children of two distinct random parents.
    With fewer than two parents, the parents are returned unchanged.
    """
    if len(parents) < 2:
        logger.warning("Cannot recombine {n} parent(s), keeping them unchanged", n=len(parents))
        return parents

    new_population = parents[:min(2, population_size)]
    while len(new_population) < population_size:
        i, j = rng.choice(len(parents), size=2, replace=False)
        child1, child2 = parents[i].crossover(parents[j], cross_prob, rng)
        new_population.append(child1)
        if len(new_population) < population_size:
            new_population.append(child2)
    return new_population

def mutate_except_best_two(population     : list[Genome],
                           mutation_amount: float,
                           mutation_prob  : float,
                           mutation_degree: float,
                           rng            : np.random.Generator) -> None:
    """
    Mutate, each with probability 'mutation_amount', all genomes but the first two.
    """
    for genome in population[2:]:
        if rng.random() < mutation_amount:
            genome.mutate(mutation_prob, mutation_degree, rng)

def shuffle_order(population: list[Genome], rng: np.random.Generator) -> None:
    """
    Randomly permute the population in place (Fisher-Yates), so that the
    position of a genome (its starting slot in the next round) does not
    depend on its fitness rank.
    """
    for current in range(len(population) - 1, 0, -1):
        other = int(rng.integers(current + 1))
        population[current], population[other] = population[other], population[current]
