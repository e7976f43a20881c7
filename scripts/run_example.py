#!/usr/bin/env python3
"""
Utility script to run the evochase example easily.

Usage:
    python scripts/run_example.py pursuit
    python scripts/run_example.py pursuit --generations 100 --seed 7 --elitist
"""

import sys
import argparse
from pathlib import Path

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from evochase import Config
from examples.trial_pursuit import Trial_Pursuit


EXAMPLES = {
    'pursuit': {
        'trial': Trial_Pursuit,
        'config': 'examples/configs/config_pursuit.ini',
        'description': 'Runners versus catchers pursuit game'
    }
}


def main():
    parser = argparse.ArgumentParser(description='Run evochase examples')
    parser.add_argument('example', choices=EXAMPLES.keys(),
                        help='Example to run')
    parser.add_argument('--config', type=str, default=None,
                        help='Configuration file (defaults to the example configuration)')
    parser.add_argument('--generations', type=int, default=None,
                        help='Override the number of generations')
    parser.add_argument('--seed', type=int, default=None,
                        help='Seed of the random generator')
    parser.add_argument('--elitist', action='store_true',
                        help='Use elitist selection and combination')

    args = parser.parse_args()

    example = EXAMPLES[args.example]
    print(f"Running {example['description']}...")

    config = Config(args.config or example['config'])
    if args.generations is not None:
        config.max_number_generations = args.generations
    if args.seed is not None:
        config.seed = args.seed
    if args.elitist:
        config.elitist = True
    config.validate()

    trial = example['trial'](config)
    trial.run()


if __name__ == '__main__':
    main()
