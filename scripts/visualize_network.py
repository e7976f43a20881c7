#!/usr/bin/env python3
"""
Utility script to visualize the network encoded by a saved genome.

Usage:
    python scripts/visualize_network.py --genome results/champion_Runner.txt --structure 4,6,2
"""

import sys
import argparse
from pathlib import Path

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from evochase import Config, Genome, Network, ShapeMismatchError, GenomeFormatError


def visualize_genome(genome, structure, output_file='network', format='png', view=True):
    """
    Visualize the network encoded by a genome.

    Args:
        genome: The genome to visualize
        structure: The layer sizes of the network
        output_file: Output filename (without extension)
        format: Output format (png, pdf, svg, etc.)
        view: Whether to automatically open the generated file
    """
    network = Network.decode(structure, genome.weights)
    dot = network.visualize(view=False)
    dot.format = format
    dot.render(output_file, view=view)
    print(f"Network visualization saved to {output_file}.{format}")


def main():
    parser = argparse.ArgumentParser(description='Visualize evochase networks')
    parser.add_argument('--genome', type=str, required=True,
                        help='Path to a saved genome file')
    parser.add_argument('--structure', type=str, default=None,
                        help='Comma-separated layer sizes, e.g. "4,6,2"')
    parser.add_argument('--config', type=str, default=None,
                        help='Take the structure from this configuration file')
    parser.add_argument('--output', type=str, default='network',
                        help='Output filename (without extension)')
    parser.add_argument('--format', type=str, default='png',
                        choices=['png', 'pdf', 'svg'],
                        help='Output format')
    parser.add_argument('--no-view', action='store_true',
                        help='Do not automatically open the generated file')

    args = parser.parse_args()

    # Resolve the structure
    config = Config(args.config) if args.config else Config()
    if args.structure:
        config.structure = args.structure

    try:
        genome = Genome.load(args.genome)
        visualize_genome(genome, config.structure, args.output, args.format, not args.no_view)
    except (GenomeFormatError, ShapeMismatchError) as e:
        print(f"Error: {e}")
        sys.exit(1)


if __name__ == '__main__':
    main()
