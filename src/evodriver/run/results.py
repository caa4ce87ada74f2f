"""
Results Module

This module writes, and reads back, the per-generation summary of a run: one
line of whitespace-separated numbers per generation, appended to a file that
belongs to that run only.

Line format:
    generation averageFitness bestFitness averageEvaluation bestEvaluation w0 w1 ... wN

where "best" is the genotype with the highest evaluation, and w0 ... wN its weights.

Classes:
    ResultsSink:       Interface of the objects receiving generation snapshots
    GenerationSummary: One parsed line of a results file
    ResultsWriter:     Appends generation summaries to a per-run file

Functions:
    read_summaries: Parse a results file
"""

from pathlib import Path
from typing  import NamedTuple, Protocol, Sequence

from evodriver.genotype import GenotypeSnapshot

class ResultsSink(Protocol):
    def write_generation_summary(self, generation: int, population: Sequence[GenotypeSnapshot]) -> None:
        ...

class GenerationSummary(NamedTuple):
    generation        : int
    average_fitness   : float
    best_fitness      : float
    average_evaluation: float
    best_evaluation   : float
    best_weights      : tuple[float, ...]

class ResultsWriter:
    """
    Append-only writer of the generation summaries of one run.

    Use 'ResultsWriter.for_track()' to get a file named after the track:
        <directory>/<track>/<track>_sim<N>
    where N is the smallest positive integer for which no file exists yet,
    so that the results of previous runs are never overwritten.

    Public Properties:
        path: The file the summaries are appended to

    Public Methods:
        write_generation_summary(generation, population): Append one summary line

    Class Methods:
        for_track(track_path, directory): Create a writer for a new run on a track
    """

    def __init__(self, path: str | Path):
        """
        Parameters:
            path: The file to append to (created on first write, parent directories included)
        """
        self._path = Path(path)

    @classmethod
    def for_track(cls, track_path: str, directory: str | Path = 'results') -> 'ResultsWriter':
        """
        Create a writer for a new run on the given track.

        The track name is the file name of 'track_path' up to the first dot, so
        "res://tracks/track01/track01.tscn" and "track01" both give "track01".
        The file is created right away, which reserves the run number.
        """
        track_name = track_path.split('/')[-1].split('.')[0]
        base_path  = Path(directory) / track_name
        base_path.mkdir(parents=True, exist_ok=True)

        sim_count = 1
        while True:
            path = base_path / f"{track_name}_sim{sim_count}"
            try:
                with open(path, 'x'):
                    pass
                return cls(path)
            except FileExistsError:
                sim_count += 1

    @property
    def path(self) -> Path:
        return self._path

    def write_generation_summary(self, generation: int, population: Sequence[GenotypeSnapshot]) -> None:
        """
        Append the summary of an evaluated generation.

        Parameters:
            generation: The generation number
            population: A snapshot of every genotype of the generation

        Raises:
            ValueError: if the population is empty
        """
        if not population:
            raise ValueError("Cannot summarize an empty population")

        # the first genotype wins ties
        best = population[0]
        for snapshot in population:
            if snapshot.evaluation > best.evaluation:
                best = snapshot

        average_fitness    = sum(s.fitness    for s in population) / len(population)
        average_evaluation = sum(s.evaluation for s in population) / len(population)

        fields = [generation, average_fitness, best.fitness, average_evaluation, best.evaluation, *best.weights]
        self._path.parent.mkdir(parents=True, exist_ok=True)
        with open(self._path, 'a') as f:
            f.write(' '.join(str(field) for field in fields) + '\n')

    def __repr__(self):
        return f"ResultsWriter(path={str(self._path)!r})"

def read_summaries(path: str | Path) -> list[GenerationSummary]:
    """
    Parse a file written by ResultsWriter.

    Returns:
        One GenerationSummary per non-empty line, in file order
    """
    summaries = []
    with open(path) as f:
        for line in f:
            fields = line.split()
            if not fields:
                continue
            numbers = [float(x) for x in fields[1:]]
            summaries.append(GenerationSummary(int(fields[0]), *numbers[:4], tuple(numbers[4:])))
    return summaries
