#!/usr/bin/env python3
"""
Utility script to visualize the best network of a run.

Reads a results file written by ResultsWriter and draws the network
of the best genotype of the chosen generation (the last one by default).

Usage:
    python scripts/visualize_network.py results/corridor/corridor_sim1
    python scripts/visualize_network.py results/corridor/corridor_sim1 --generation 10
"""

import sys
import argparse
from pathlib import Path

# Add the source directory to the path
sys.path.insert(0, str(Path(__file__).parent.parent / 'src'))

from evodriver.activations import get_activation
from evodriver.phenotype   import DRIVER_TOPOLOGY, NeuralNetwork
from evodriver.run         import Config, read_summaries


def main():
    parser = argparse.ArgumentParser(description='Visualize the best network of a run')
    parser.add_argument('results_file', help='File written by ResultsWriter')
    parser.add_argument('--generation', type=int, default=None,
                        help='Generation to show (default: the last one)')
    parser.add_argument('--config', default=None,
                        help='Configuration file of the run (default: driver topology, sigmoid)')

    args = parser.parse_args()

    summaries = read_summaries(args.results_file)
    if not summaries:
        sys.exit(f"No generations in '{args.results_file}'")

    if args.generation is None:
        summary = summaries[-1]
    else:
        matches = [s for s in summaries if s.generation == args.generation]
        if not matches:
            sys.exit(f"Generation {args.generation} not found in '{args.results_file}'")
        summary = matches[0]

    topology, activation = DRIVER_TOPOLOGY, 'sigmoid'
    if args.config is not None:
        config = Config(args.config)
        topology, activation = config.topology, config.activation

    network = NeuralNetwork(topology, get_activation(activation))
    network.set_weights(summary.best_weights)

    print(f"Generation {summary.generation}: best evaluation = {summary.best_evaluation:.2f}, "
          f"best fitness = {summary.best_fitness:.4f}")
    network.visualize()


if __name__ == '__main__':
    main()
