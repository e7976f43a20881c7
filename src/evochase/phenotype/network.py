"""
evochase Network Module

This module implements the phenotype of a genome: a fully connected, layered
feedforward neural network with a fixed topology. The topology ('structure') is
a list of layer sizes, from the input layer to the output layer. Every layer
except the output layer gains one extra bias neuron whose value is always 1.

Weight layout (the contract with 'Genome'):
    Layer by layer, skipping the input layer; within a layer neuron by neuron,
    the bias neuron last; each neuron owns (size of previous layer + 1) incoming
    weights, ordered like the previous layer with its bias neuron last.
    Bias neurons of hidden layers own a slice of weights they never use.

Classes:
    Neuron:  A unit of the network (input, bias or computing neuron)
    Network: A feedforward network decoded from a flat weight vector
"""

from typing import Sequence

import graphviz  # type: ignore
import numpy as np

from evochase.activations import tanh_activation
from evochase.errors      import ShapeMismatchError

class Neuron:
    """
    A single unit of the network.

    Input neurons receive their value from the network inputs and bias neurons
    always hold 1; neither recomputes its value. All other neurons compute:
        value = activation(sum(weights[i] * previous_layer_values[i]))

    Public Attributes:
        value:     The last value held by the neuron
        weights:   Incoming weights, one per neuron of the previous layer (bias included)
        is_input:  Whether the neuron belongs to the input layer
        is_bias:   Whether the neuron is the bias neuron of its layer

    Public Methods:
        calculate_value(inputs): Compute and store the neuron's value
    """

    def __init__(self, weights: np.ndarray, is_input: bool, is_bias: bool):
        self.weights : np.ndarray = weights
        self.is_input: bool       = is_input
        self.is_bias : bool       = is_bias
        self.value   : float      = 1.0

    @property
    def connection_count(self) -> int:
        """Number of incoming connections."""
        return len(self.weights)

    def calculate_value(self, inputs: np.ndarray) -> float:
        """
        Compute the neuron value from the values of the previous layer
        (bias value last). Input and bias neurons return their value unchanged.
        """
        if self.is_input or self.is_bias:
            return self.value

        if len(inputs) != self.connection_count:
            raise ShapeMismatchError(f"Expected {self.connection_count} values, got {len(inputs)}")

        self.value = tanh_activation(float(np.dot(self.weights, inputs)))
        return self.value

    def __repr__(self):
        kind = 'INPUT' if self.is_input else 'BIAS' if self.is_bias else 'NEURON'
        return f"Neuron({kind}, value={self.value:+.4f}, connections={self.connection_count})"

class Network:
    """
    Fixed-topology feedforward neural network.

    Neurons are kept in a flat arena and addressed by (layer, index) through a
    per-layer offset/length table, so layers of different sizes need no padding.

    Public Properties:
        structure:     Layer sizes, input layer first (bias neurons excluded)
        number_layers: Number of layers
        number_nodes:  Number of neurons, bias neurons included
        number_weights: Number of weights consumed from the genome

    Public Methods:
        required_weight_count(structure): Weight count required by a topology
        decode(structure, weights):       Build a network from a weight vector
        neuron(layer, index):             Access one neuron
        layer_size(layer):                Number of neurons in a layer, bias included
        forward_pass(inputs):             Map inputs to outputs
        visualize(view):                  Render the network with Graphviz
    """

    def __init__(self, structure: Sequence[int], weights: Sequence[float]):
        """
        Parameters:
            structure: layer sizes, at least 2 positive integers
            weights:   flat weight vector, of length 'required_weight_count(structure)'

        Raises:
            ValueError:         if the structure is invalid
            ShapeMismatchError: if the weight vector has the wrong length
        """
        self._structure = self._validate_structure(structure)

        weights  = np.asarray(weights, dtype=float).reshape(-1)
        required = self.required_weight_count(self._structure)
        if len(weights) != required:
            raise ShapeMismatchError(f"Structure {self._structure} requires {required} weights, "
                                     f"got {len(weights)}")

        # Per-layer length and offset tables into the neuron arena
        self._layer_lengths = [self._layer_length(self._structure, i) for i in range(len(self._structure))]
        self._layer_offsets = [0]
        for length in self._layer_lengths[:-1]:
            self._layer_offsets.append(self._layer_offsets[-1] + length)

        # Slice the weight vector, neuron by neuron
        self._neurons: list[Neuron] = []
        start = 0
        for layer, length in enumerate(self._layer_lengths):
            conn_count = 0 if layer == 0 else self._layer_lengths[layer - 1]
            for index in range(length):
                is_bias = layer < len(self._structure) - 1 and index == length - 1
                neuron_weights = weights[start:start + conn_count].copy()
                self._neurons.append(Neuron(neuron_weights, is_input=layer == 0, is_bias=is_bias))
                start += conn_count

    @classmethod
    def decode(cls, structure: Sequence[int], weights: Sequence[float]) -> 'Network':
        """Build the network encoded by 'weights' for the given topology."""
        return cls(structure, weights)

    @staticmethod
    def _validate_structure(structure: Sequence[int]) -> tuple[int, ...]:
        structure = tuple(structure)
        if len(structure) < 2:
            raise ValueError(f"Network structure needs at least 2 layers, got {list(structure)}")
        for size in structure:
            if isinstance(size, bool) or not isinstance(size, (int, np.integer)) or size < 1:
                raise ValueError(f"Layer sizes must be positive integers, got {list(structure)}")
        return tuple(int(size) for size in structure)

    @staticmethod
    def _layer_length(structure: Sequence[int], layer: int) -> int:
        """Number of neurons in a layer; all layers but the last carry a bias neuron."""
        return structure[layer] if layer == len(structure) - 1 else structure[layer] + 1

    @staticmethod
    def required_weight_count(structure: Sequence[int]) -> int:
        """
        Number of weights needed by a topology:
        sum over non-input layers of (neurons in layer, bias included) * (previous layer size + 1).
        """
        structure = Network._validate_structure(structure)
        return sum(Network._layer_length(structure, i) * (structure[i - 1] + 1)
                   for i in range(1, len(structure)))

    @property
    def structure(self) -> tuple[int, ...]:
        """Layer sizes, input layer first (bias neurons excluded)."""
        return self._structure

    @property
    def number_layers(self) -> int:
        """Number of layers."""
        return len(self._structure)

    @property
    def number_nodes(self) -> int:
        """Number of neurons in the network, bias neurons included."""
        return len(self._neurons)

    @property
    def number_weights(self) -> int:
        """Number of weights consumed from the genome."""
        return sum(neuron.connection_count for neuron in self._neurons)

    def layer_size(self, layer: int) -> int:
        """Number of neurons in 'layer', bias neuron included."""
        return self._layer_lengths[layer]

    def neuron(self, layer: int, index: int) -> Neuron:
        """Return the neuron at position 'index' of 'layer'."""
        if not 0 <= index < self._layer_lengths[layer]:
            raise IndexError(f"Layer {layer} has {self._layer_lengths[layer]} neurons, no index {index}")
        return self._neurons[self._layer_offsets[layer] + index]

    def _layer(self, layer: int) -> list[Neuron]:
        start = self._layer_offsets[layer]
        return self._neurons[start:start + self._layer_lengths[layer]]

    def forward_pass(self, inputs: Sequence[float]) -> list[float]:
        """
        Perform a complete forward pass through the network.

        Parameters:
            inputs: one value per input neuron (bias excluded)

        Returns:
            the values of the output neurons
        """
        if len(inputs) != self._structure[0]:
            raise ShapeMismatchError(f"Expected {self._structure[0]} inputs, got {len(inputs)}")

        # The input layer copies the inputs; its bias neuron keeps its value of 1
        input_layer = self._layer(0)
        for neuron, value in zip(input_layer, inputs):
            neuron.value = float(value)
        previous = np.array([neuron.value for neuron in input_layer])

        # Every later layer is computed from the fully computed previous layer
        for layer in range(1, self.number_layers):
            previous = np.array([neuron.calculate_value(previous) for neuron in self._layer(layer)])

        return previous.tolist()

    def visualize(self, view: bool = False) -> graphviz.Digraph:
        """
        Visualize the network using Graphviz, one cluster per layer.
        Unused weights of hidden bias neurons are not drawn.

        Parameters:
            view: If True, automatically open the visualization after rendering

        Returns:
            graphviz.Digraph object representing the network
        """
        dot = graphviz.Digraph()
        dot.attr(rankdir='LR')
        dot.attr('graph', labelloc='t')

        base = {'color': 'black', 'style': 'filled', 'shape': 'circle', 'penwidth': '0.5',
                'fontsize': '5', 'width': '0.5', 'height': '0.5', 'fixedsize': 'true'}

        for layer in range(self.number_layers):
            with dot.subgraph(name=f'cluster_{layer}') as cluster:
                cluster.attr(rank='same', label=f'Layer {layer}', style='invisible')
                for index, neuron in enumerate(self._layer(layer)):
                    if neuron.is_bias:
                        fill = 'lightyellow'
                    elif neuron.is_input:
                        fill = 'lightgrey'
                    elif layer == self.number_layers - 1:
                        fill = 'white'
                    else:
                        fill = 'lightblue'
                    label = 'bias' if neuron.is_bias else f"{layer}:{index}"
                    cluster.node(f"{layer}_{index}", label=label, fillcolor=fill, **base)

        for layer in range(1, self.number_layers):
            for index, neuron in enumerate(self._layer(layer)):
                if neuron.is_bias:
                    continue
                for source, weight in enumerate(neuron.weights):
                    dot.edge(f"{layer - 1}_{source}", f"{layer}_{index}",
                             label=f"{weight:+.2f}", fontsize='5', penwidth='0.5', arrowsize='0.5',
                             color='blue' if weight >= 0 else 'red')

        if view:
            dot.view(cleanup=True)

        return dot

    def __str__(self):
        return '\n'.join(f"layer {layer}: " + ', '.join(repr(n) for n in self._layer(layer))
                         for layer in range(self.number_layers))

    def __repr__(self):
        return f"Network(structure={list(self._structure)}, weights={self.number_weights})"
