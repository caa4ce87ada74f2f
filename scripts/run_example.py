#!/usr/bin/env python3
"""
Utility script to run the examples easily.

Usage:
    python scripts/run_example.py corridor
    python scripts/run_example.py corridor --num-jobs 1 --no-results
"""

import sys
import argparse
from pathlib import Path

# Add the project root (examples) and the source directory to the path
root_dir = Path(__file__).parent.parent
sys.path.insert(0, str(root_dir))
sys.path.insert(0, str(root_dir / 'src'))

from evodriver import Config, ResultsWriter
from examples.trial_corridor import Trial_Corridor


EXAMPLES = {
    'corridor': {
        'trial': Trial_Corridor,
        'config': 'examples/configs/config_corridor.ini',
        'description': 'Car driving along a winding corridor'
    }
}


def main():
    parser = argparse.ArgumentParser(description='Run evodriver examples')
    parser.add_argument('example', choices=EXAMPLES.keys(),
                        help='Example to run')
    parser.add_argument('--num-jobs', type=int, default=4,
                        help='Number of parallel jobs')
    parser.add_argument('--no-results', action='store_true',
                        help='Do not write the generation summaries to a results file')

    args = parser.parse_args()

    example = EXAMPLES[args.example]
    print(f"Running {example['description']}...")

    config = Config(str(root_dir / example['config']))

    writer = None
    if not args.no_results:
        writer = ResultsWriter.for_track(config.track_name, config.results_directory)
        print(f"Results file: {writer.path}")

    trial = example['trial'](config, results_sink=writer)
    trial.run(num_jobs=args.num_jobs)
    print(f"\nBest evaluation: {trial.best_agent.genotype.evaluation:.4f}")


if __name__ == '__main__':
    main()
