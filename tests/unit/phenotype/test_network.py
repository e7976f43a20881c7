"""
Unit tests for evochase.phenotype.network module (Neuron and Network classes).

Tests cover the weight-count contract, decoding, the forward pass with its
activation saturation, arena access and visualization.
"""

import math

import graphviz  # type: ignore
import numpy as np
import pytest

from evochase.errors    import ShapeMismatchError
from evochase.phenotype import Network, Neuron


# ============================================================================
# Test Neuron
# ============================================================================

class TestNeuron:
    """Test the Neuron class."""

    def test_bias_neuron_keeps_value_one(self):
        neuron = Neuron(np.array([5.0, 5.0]), is_input=False, is_bias=True)

        assert neuron.calculate_value(np.array([1.0, 1.0])) == 1.0
        assert neuron.value == 1.0

    def test_input_neuron_keeps_its_value(self):
        neuron = Neuron(np.array([]), is_input=True, is_bias=False)
        neuron.value = 0.3

        assert neuron.calculate_value(np.array([7.0])) == 0.3

    def test_weighted_sum_through_tanh(self):
        neuron = Neuron(np.array([0.5, -1.0]), is_input=False, is_bias=False)

        assert neuron.calculate_value(np.array([1.0, 0.25])) == pytest.approx(math.tanh(0.25))

    def test_wrong_number_of_values(self):
        neuron = Neuron(np.array([0.5, -1.0]), is_input=False, is_bias=False)

        with pytest.raises(ShapeMismatchError):
            neuron.calculate_value(np.array([1.0]))

    def test_connection_count(self):
        assert Neuron(np.zeros(4), is_input=False, is_bias=False).connection_count == 4


# ============================================================================
# Test Weight Count and Decoding
# ============================================================================

class TestNetworkDecode:
    """Test Network construction."""

    @pytest.mark.parametrize("structure, expected", [
        ([1, 1],       2),
        ([2, 1],       3),
        ([1, 1, 1],    6),
        ([2, 2, 1],   12),
        ([4, 3, 2],   28),
        ([3, 4, 5, 2], 4 * 5 + 5 * 5 + 2 * 6),
    ])
    def test_required_weight_count(self, structure, expected):
        assert Network.required_weight_count(structure) == expected

    def test_required_weight_count_is_deterministic(self):
        assert Network.required_weight_count((5, 7, 3)) == Network.required_weight_count([5, 7, 3])

    @pytest.mark.parametrize("structure", [[], [3], [2, 0], [0, 2], [2, -1, 1], [2.5, 1]])
    def test_invalid_structure(self, structure):
        with pytest.raises(ValueError):
            Network.required_weight_count(structure)

    @pytest.mark.parametrize("structure", [[2, 1], [4, 3, 2], [3, 4, 5, 2]])
    def test_decode_exact_length(self, structure, rng):
        weights = rng.uniform(-1, 1, Network.required_weight_count(structure))
        network = Network.decode(structure, weights)

        assert network.structure == tuple(structure)
        assert network.number_weights == len(weights)

    @pytest.mark.parametrize("delta", [-1, 1])
    def test_decode_wrong_length(self, delta):
        weights = np.zeros(Network.required_weight_count([4, 3, 2]) + delta)

        with pytest.raises(ShapeMismatchError, match="requires 28 weights"):
            Network.decode([4, 3, 2], weights)

    def test_shape_mismatch_is_a_value_error(self):
        with pytest.raises(ValueError):
            Network([2, 1], [1.0])

    def test_decoding_copies_weights(self):
        weights = np.array([0.5, 0.5, 0.0])
        network = Network([2, 1], weights)
        weights[0] = 100.0

        assert network.neuron(1, 0).weights.tolist() == [0.5, 0.5, 0.0]


# ============================================================================
# Test Arena Access
# ============================================================================

class TestNetworkLayout:
    """Test the (layer, index) addressing of neurons."""

    @pytest.fixture
    def network(self):
        return Network([4, 3, 2], np.arange(28, dtype=float))

    def test_layer_sizes_include_bias(self, network):
        assert network.number_layers == 3
        assert [network.layer_size(layer) for layer in range(3)] == [5, 4, 2]
        assert network.number_nodes == 11

    def test_input_layer_flags(self, network):
        for index in range(4):
            assert network.neuron(0, index).is_input
            assert not network.neuron(0, index).is_bias
        assert network.neuron(0, 4).is_bias

    def test_output_layer_has_no_bias(self, network):
        assert not any(network.neuron(2, index).is_bias for index in range(2))

    def test_weight_layout(self, network):
        # hidden neurons own 5 weights each, hidden bias last, then the outputs own 4 each
        assert network.neuron(0, 0).connection_count == 0
        assert network.neuron(1, 0).weights.tolist() == [0.0, 1.0, 2.0, 3.0, 4.0]
        assert network.neuron(1, 3).weights.tolist() == [15.0, 16.0, 17.0, 18.0, 19.0]
        assert network.neuron(2, 0).weights.tolist() == [20.0, 21.0, 22.0, 23.0]
        assert network.neuron(2, 1).weights.tolist() == [24.0, 25.0, 26.0, 27.0]

    def test_index_out_of_range(self, network):
        with pytest.raises(IndexError):
            network.neuron(2, 2)


# ============================================================================
# Test Forward Pass
# ============================================================================

class TestNetworkForwardPass:
    """Test Network.forward_pass."""

    def test_single_layer(self):
        network = Network([2, 1], [0.5, -0.25, 0.1])

        assert network.forward_pass([1.0, 2.0]) == [pytest.approx(math.tanh(0.1))]

    def test_hidden_layer_uses_bias_value_one(self):
        # hidden neuron [w_in, w_bias], unused hidden bias weights, output [w_hidden, w_bias]
        network = Network([1, 1, 1], [1.0, 0.0, 99.0, 99.0, 2.0, 0.5])
        expected = math.tanh(2.0 * math.tanh(0.5) + 0.5)

        assert network.forward_pass([0.5]) == [pytest.approx(expected)]

    def test_saturates_to_plus_one(self):
        network = Network([1, 1], [20.0, 0.0])

        assert network.forward_pass([1.0]) == [1.0]

    def test_saturates_to_minus_one(self):
        network = Network([1, 1], [-20.0, 0.0])

        assert network.forward_pass([1.0]) == [-1.0]

    def test_bias_alone_saturates(self):
        network = Network([1, 1], [0.0, 11.0])

        assert network.forward_pass([0.0]) == [1.0]

    def test_output_length(self, rng):
        structure = [3, 4, 5, 2]
        network = Network(structure, rng.uniform(-1, 1, Network.required_weight_count(structure)))
        outputs = network.forward_pass([0.1, 0.2, 0.3])

        assert len(outputs) == 2
        assert all(-1.0 <= value <= 1.0 for value in outputs)

    @pytest.mark.parametrize("inputs", [[], [1.0], [1.0, 2.0, 3.0]])
    def test_wrong_number_of_inputs(self, inputs):
        network = Network([2, 1], [0.5, -0.25, 0.1])

        with pytest.raises(ShapeMismatchError, match="Expected 2 inputs"):
            network.forward_pass(inputs)

    def test_forward_pass_is_pure(self, rng):
        structure = [4, 3, 2]
        weights = rng.uniform(-2, 2, Network.required_weight_count(structure))
        network = Network(structure, weights)
        inputs = [0.3, -0.7, 1.2, 0.0]

        first = network.forward_pass(inputs)
        network.forward_pass([9.0, 9.0, 9.0, 9.0])
        second = network.forward_pass(inputs)
        other = Network(structure, weights).forward_pass(inputs)

        assert first == second == other

    def test_accepts_numpy_inputs(self):
        network = Network([2, 1], [0.5, -0.25, 0.1])

        assert network.forward_pass(np.array([1.0, 2.0])) == [pytest.approx(math.tanh(0.1))]


# ============================================================================
# Test Visualization
# ============================================================================

class TestNetworkVisualize:
    """Test Network.visualize (graph construction only, no rendering)."""

    def test_returns_digraph(self):
        network = Network([2, 1], [0.5, -0.25, 0.1])
        dot = network.visualize(view=False)

        assert isinstance(dot, graphviz.Digraph)

    def test_draws_every_used_connection(self):
        network = Network([2, 2, 1], np.ones(12))
        source = network.visualize(view=False).source

        # 2 hidden neurons x 3 inputs + 1 output x 3 hidden values
        assert source.count('->') == 9
        assert '0_2' in source and '1_2' in source
