"""
Run Package

This package puts the genetic algorithm to work: configuration, the boundary
with the racing simulation, the drivers of the generational loop and the
per-run results file.

Modules:
    config:     Config class, parsing INI configuration files
    results:    ResultsWriter, appending a summary of every generation to a per-run file
    race:       AliveCounter, Track and Race, the bookkeeping of the evaluation phase
    controller: Controller, evolving the population each time a race ends
    trial:      Trial, abstract base class for headless runs evaluated in parallel

Exported Classes:
    Config, ResultsSink, ResultsWriter, GenerationSummary,
    AliveCounter, Track, Race, Controller, Trial
"""

from evodriver.run.config     import Config
from evodriver.run.results    import GenerationSummary, ResultsSink, ResultsWriter, read_summaries
from evodriver.run.race       import AliveCounter, Race, Track
from evodriver.run.controller import Controller
from evodriver.run.trial      import Trial

__all__ = ['AliveCounter',
           'Config',
           'Controller',
           'GenerationSummary',
           'Race',
           'ResultsSink',
           'ResultsWriter',
           'Track',
           'Trial',
           'read_summaries']
