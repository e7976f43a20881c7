"""
Unit tests for evochase.pool.operators module.

Tests cover each step of the generational cycle: fitness, sorting, both
selection strategies, both recombination strategies, mutation and reshuffle.
"""

import numpy as np
import pytest

from evochase.genotype import Genome
from evochase.pool     import operators


def make_genomes(evaluations=None, fitnesses=None, length=3):
    """Genomes whose weights are all equal to their index, for easy tracking."""
    values  = evaluations if evaluations is not None else fitnesses
    genomes = [Genome(np.full(length, float(i))) for i in range(len(values))]
    for genome, value in zip(genomes, values):
        if evaluations is not None:
            genome.evaluation = value
        else:
            genome.fitness = value
    return genomes

def tag(genome):
    return genome.weights[0]


# ============================================================================
# Test Fitness and Sorting
# ============================================================================

class TestCalculateFitness:

    def test_normalized_by_mean(self):
        genomes = make_genomes(evaluations=[10.0, 10.0, 0.0, 0.0])
        operators.calculate_fitness(genomes)

        assert [g.fitness for g in genomes] == [2.0, 2.0, 0.0, 0.0]

    def test_mean_fitness_is_one(self):
        genomes = make_genomes(evaluations=[1.0, 2.0, 3.5, 0.5, 8.0])
        operators.calculate_fitness(genomes)

        assert np.mean([g.fitness for g in genomes]) == pytest.approx(1.0)

    def test_zero_mean_gives_zero_fitness(self, log_messages):
        genomes = make_genomes(evaluations=[0.0, 0.0, 0.0])
        for genome in genomes:
            genome.fitness = 5.0
        operators.calculate_fitness(genomes)

        assert [g.fitness for g in genomes] == [0.0, 0.0, 0.0]
        assert any(message.startswith('WARNING|Mean evaluation is 0') for message in log_messages)

    def test_empty_population(self):
        operators.calculate_fitness([])


class TestSortPopulation:

    def test_descending(self):
        genomes = make_genomes(fitnesses=[0.5, 2.0, 1.0])
        operators.sort_population(genomes)

        assert [g.fitness for g in genomes] == [2.0, 1.0, 0.5]

    def test_stable_for_ties(self):
        genomes = make_genomes(fitnesses=[1.0, 3.0, 1.0, 3.0, 0.0])
        operators.sort_population(genomes)

        assert [tag(g) for g in genomes] == [1.0, 3.0, 0.0, 2.0, 4.0]


# ============================================================================
# Test Selection
# ============================================================================

class TestElitistSelection:

    def test_keeps_two_best(self):
        genomes = make_genomes(evaluations=[5.0, 1.0, 3.0, 1.0])
        operators.calculate_fitness(genomes)
        operators.sort_population(genomes)
        selected = operators.elitist_selection(genomes)

        assert [g.evaluation for g in selected] == [5.0, 3.0]

    def test_two_genomes(self):
        genomes = make_genomes(fitnesses=[5.0, 1.0])

        assert operators.elitist_selection(genomes) == genomes

    @pytest.mark.parametrize("count", [0, 1])
    def test_too_small_population_unchanged(self, count):
        genomes = make_genomes(fitnesses=[1.0] * count)

        assert operators.elitist_selection(genomes) is genomes


class TestFitnessProportionalSelection:

    def test_integer_fitness_cloned_exactly(self, rng):
        genomes  = make_genomes(fitnesses=[2.0, 2.0, 0.0, 0.0])
        selected = operators.fitness_proportional_selection(genomes, 4, rng)

        assert [tag(g) for g in selected] == [0.0, 0.0, 1.0, 1.0]
        assert all(g is not parent for g in selected for parent in genomes)

    def test_fractional_part_is_a_chance(self):
        selected_counts = []
        for seed in range(200):
            genomes = make_genomes(fitnesses=[1.5, 0.5])
            selected = operators.fitness_proportional_selection(genomes, 2, np.random.default_rng(seed))
            selected_counts.append(len(selected))

        # one integer clone plus two coin flips; with no successful flip the two best are added
        assert set(selected_counts) <= {2, 3}
        assert 2.35 < np.mean(selected_counts) < 2.65

    def test_falls_back_on_two_best(self, rng):
        genomes  = make_genomes(fitnesses=[0.0, 0.0, 0.0])
        selected = operators.fitness_proportional_selection(genomes, 3, rng)

        assert [tag(g) for g in selected] == [0.0, 1.0]

    def test_no_fallback_for_empty_target(self, rng):
        genomes = make_genomes(fitnesses=[0.0, 0.0])

        assert operators.fitness_proportional_selection(genomes, 0, rng) == []


# ============================================================================
# Test Recombination
# ============================================================================

class TestElitistCombination:

    @pytest.mark.parametrize("size", [1, 2, 4, 5])
    def test_refills_to_size_from_best_two(self, rng, size):
        parents  = [Genome([1.0, 1.0, 1.0]), Genome([0.0, 0.0, 0.0]), Genome([7.0, 7.0, 7.0])]
        children = operators.elitist_combination(parents, size, 0.5, rng)

        assert len(children) == size
        assert all(set(child.weights.tolist()) <= {0.0, 1.0} for child in children)
        assert all(child is not parent for child in children for parent in parents)

    def test_scenario_two_winners_two_losers(self, rng):
        genomes = [Genome([1.0, 1.0]), Genome([5.0, 5.0]), Genome([2.0, 2.0]), Genome([5.0, 5.0])]
        for genome, evaluation in zip(genomes, [10.0, 0.0, 10.0, 0.0]):
            genome.evaluation = evaluation
        operators.calculate_fitness(genomes)
        operators.sort_population(genomes)
        assert [g.fitness for g in genomes] == [2.0, 2.0, 0.0, 0.0]

        parents  = operators.elitist_selection(genomes)
        children = operators.elitist_combination(parents, 4, 0.6, rng)

        assert len(children) == 4
        assert all(set(child.weights.tolist()) <= {1.0, 2.0} for child in children)

    def test_too_few_parents_unchanged(self, rng, log_messages):
        parents = [Genome([1.0])]

        assert operators.elitist_combination(parents, 4, 0.5, rng) is parents
        assert any(message.startswith('WARNING|') for message in log_messages)


class TestRandomCombination:

    def test_best_two_carried_over(self, rng):
        parents  = make_genomes(fitnesses=[3.0, 2.0, 1.0, 1.0])
        children = operators.random_combination(parents, 6, 0.5, rng)

        assert len(children) == 6
        assert children[0] is parents[0]
        assert children[1] is parents[1]

    def test_children_come_from_distinct_parents(self, rng):
        parents  = [Genome([1.0] * 20), Genome([0.0] * 20)]
        children = operators.random_combination(parents, 10, 0.5, rng)

        for child1, child2 in zip(children[2::2], children[3::2]):
            assert (child1.weights + child2.weights).tolist() == [1.0] * 20

    @pytest.mark.parametrize("size", [0, 1, 3])
    def test_truncated_to_size(self, rng, size):
        parents = make_genomes(fitnesses=[1.0, 1.0, 1.0])

        assert len(operators.random_combination(parents, size, 0.5, rng)) == size

    def test_too_few_parents_unchanged(self, rng):
        parents = []

        assert operators.random_combination(parents, 4, 0.5, rng) is parents


# ============================================================================
# Test Mutation and Reshuffle
# ============================================================================

class TestMutateExceptBestTwo:

    @pytest.mark.parametrize("seed", range(10))
    def test_best_two_untouched(self, seed):
        genomes = make_genomes(fitnesses=[0.0] * 5, length=10)
        operators.mutate_except_best_two(genomes, 1.0, 1.0, 1.0, np.random.default_rng(seed))

        assert genomes[0].weights.tolist() == [0.0] * 10
        assert genomes[1].weights.tolist() == [1.0] * 10
        for index, genome in enumerate(genomes[2:], start=2):
            assert genome.weights.tolist() != [float(index)] * 10

    def test_zero_amount_mutates_nothing(self, rng):
        genomes = make_genomes(fitnesses=[0.0] * 4)
        operators.mutate_except_best_two(genomes, 0.0, 1.0, 1.0, rng)

        assert [g.weights.tolist() for g in genomes] == [[float(i)] * 3 for i in range(4)]


class TestShuffleOrder:

    def test_is_a_permutation(self, rng):
        genomes  = make_genomes(fitnesses=[0.0] * 10)
        original = list(genomes)
        operators.shuffle_order(genomes, rng)

        assert len(genomes) == 10
        assert sorted(map(id, genomes)) == sorted(map(id, original))

    def test_reproducible(self):
        genomes1 = make_genomes(fitnesses=[0.0] * 8)
        genomes2 = make_genomes(fitnesses=[0.0] * 8)
        operators.shuffle_order(genomes1, np.random.default_rng(3))
        operators.shuffle_order(genomes2, np.random.default_rng(3))

        assert [tag(g) for g in genomes1] == [tag(g) for g in genomes2]

    def test_changes_order(self):
        orders = set()
        for seed in range(20):
            genomes = make_genomes(fitnesses=[0.0] * 6)
            operators.shuffle_order(genomes, np.random.default_rng(seed))
            orders.add(tuple(tag(g) for g in genomes))

        assert len(orders) > 1

    @pytest.mark.parametrize("count", [0, 1])
    def test_trivial_populations(self, rng, count):
        genomes = make_genomes(fitnesses=[0.0] * count)
        operators.shuffle_order(genomes, rng)

        assert len(genomes) == count
