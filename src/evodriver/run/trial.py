"""
Trial Module

This module defines the abstract base class for headless evolutionary runs,
with built-in support for CPU-based parallelization using joblib.

A trial evolves a population of genotypes through generations; each generation
every genotype is decoded into a DriverAgent and evaluated in one episode,
until the maximum number of generations or the target evaluation is reached.

Classes:
    Trial: Abstract base class for implementing an evolutionary run
"""

from abc    import ABC, abstractmethod
from joblib import Parallel, delayed
from typing import Optional

from evodriver.activations import get_activation
from evodriver.phenotype   import DriverAgent
from evodriver.pool        import GeneticAlgorithm
from evodriver.run.config  import Config
from evodriver.run.results import ResultsSink

class Trial(ABC):
    """
    Abstract base class for implementing a headless evolutionary run.

    Where a Controller reacts to the end-of-race signal of a live simulation, a
    Trial drives the same generational loop itself, for problems in which one
    episode of one agent can be run as a function call returning its evaluation.

    Subclasses must implement:
    - _evaluate_agent(agent): Run one episode and return the agent's evaluation
    - _report_progress():     Display progress after each generation
    - _final_report():        Display final results

    Subclasses can override:
    - _reset():     Reset trial-specific state (call super()._reset())
    - _terminate(): Custom termination logic (default: max generations + evaluation threshold)

    Public Attributes:
        failed: False if the evaluation threshold was reached

    Public Methods:
        run(num_jobs): Execute a complete trial

    Parallelization of the agents' evaluation:
        num_jobs=1:  Serial evaluation (no parallelization)
        num_jobs>1:  Use specified number of parallel processes
        num_jobs=-1: Use all available CPU cores
    """

    def __init__(self,
                 config         : Config,
                 suppress_output: bool                  = False,
                 results_sink   : Optional[ResultsSink] = None):
        """
        Initialize the trial.

        Parameters:
            config:          Configuration parameters
            suppress_output: If True, suppress progress and final reports
            results_sink:    Receives a summary of every evaluated generation
        """
        self._config           : Config                     = config
        self._suppress_output  : bool                       = suppress_output
        self._results_sink     : Optional[ResultsSink]      = results_sink
        self._genetic_algorithm: Optional[GeneticAlgorithm] = None
        self._agents           : list[DriverAgent]          = []
        self.failed            : bool                       = True

    @property
    def genetic_algorithm(self) -> Optional[GeneticAlgorithm]:
        return self._genetic_algorithm

    @property
    def agents(self) -> list[DriverAgent]:
        """The agents of the last evaluated generation."""
        return list(self._agents)

    def run(self, num_jobs: int = 1):
        """
        Run the trial.

        Resets the trial state and alternates evaluation and
        evolution until the terminate condition is met.

        Parameters:
            num_jobs: Number of parallel processes for the evaluation of the agents
                      1 = serial (no parallelization)
                     -1 = use all available CPU cores
                     >1 = use specified number of processes
        """
        # Reset the trial state before starting a new run
        self._reset()

        # Create and randomize the initial population
        self._genetic_algorithm = GeneticAlgorithm(self._config.weight_count,
                                                   self._config.population_size,
                                                   self._config,
                                                   self._results_sink)
        self._genetic_algorithm.initialize_population()

        # Evaluate the initial population
        self._evaluate_agents_all(num_jobs)
        if not self._suppress_output:
            self._report_progress()

        # Evolution loop
        while not self._terminate():
            self._genetic_algorithm.evolution()
            self._evaluate_agents_all(num_jobs)
            if not self._suppress_output:
                self._report_progress()

        # Produce final report
        if not self._suppress_output:
            self._final_report()

    def _reset(self):
        """
        Reset the trial state before starting a new run.
        """
        self._genetic_algorithm = None
        self._agents            = []
        self.failed             = True

    @abstractmethod
    def _evaluate_agent(self, agent: DriverAgent) -> float:
        """
        Run one episode and return the evaluation of the agent.

        IMPORTANT: The evaluation must be a positive number (or zero).

        Parameters:
            agent: The DriverAgent to evaluate; 'agent.think()' gives its decisions

        Returns:
            float: Evaluation of the agent's genotype
        """
        pass

    def _evaluate_agents_all(self, num_jobs: int):
        """
        Build one agent per genotype of the current population and evaluate all of them.

        The evaluations are written on the genotypes once all agents have been evaluated.

        Raises:
            ValueError: if an evaluation is negative
        """
        activation   = get_activation(self._config.activation)
        self._agents = [DriverAgent(genotype, self._config.topology, activation)
                        for genotype in self._genetic_algorithm.current_population]

        if num_jobs == 1:
            evaluations = [self._evaluate_agent(agent) for agent in self._agents]
        else:
            evaluations = Parallel(num_jobs)(delayed(self._evaluate_agent)(a) for a in self._agents)

        for agent, evaluation in zip(self._agents, evaluations):
            if evaluation < 0:
                raise ValueError(f"Evaluations must not be negative, got {evaluation}")
            agent.genotype.evaluation = evaluation

    @property
    def best_agent(self) -> Optional[DriverAgent]:
        """The agent with the highest evaluation in the last evaluated generation."""
        if not self._agents:
            return None
        return max(self._agents, key=lambda agent: agent.genotype.evaluation)

    @abstractmethod
    def _report_progress(self):
        """
        Report trial progress after each generation.

        This method is suppressed by setting 'self._suppress_output' to 'True'.
        """
        pass

    @abstractmethod
    def _final_report(self):
        """
        Produce final report at the end of the trial.

        This method is suppressed by setting 'self._suppress_output' to 'True'.
        """
        pass

    def _terminate(self) -> bool:
        """
        Determine whether the trial should terminate.

        This default implementation stops the trial after a maximum number of
        generations, and also stops it if the best evaluation of the last
        generation reached 'evaluation_threshold' (when one is configured).

        Returns:
            bool: True if the trial should stop, False otherwise
        """
        terminate = self._genetic_algorithm.generation_count >= self._config.max_number_generations

        threshold = self._config.evaluation_threshold
        if threshold is not None:
            success   = self.best_agent.genotype.evaluation >= threshold
            terminate = terminate or success
            if terminate:
                self.failed = not success

        return terminate
