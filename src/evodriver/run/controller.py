"""
Controller Module

This module implements the Controller class, which alternates the evaluation
phase (a race) and the evolution phase (the genetic algorithm) of an
event-driven simulation.

Classes:
    Controller: Drives the generational loop from the race's end-of-race signal
"""

from typing import Callable, Sequence

from evodriver.activations import sigmoid_activation
from evodriver.genotype    import Genotype
from evodriver.phenotype   import DRIVER_TOPOLOGY, DriverAgent
from evodriver.pool        import GeneticAlgorithm
from evodriver.run.race    import Race

class Controller:
    """
    The controller of an evolutionary run on a race track.

    The controller owns the link between one genetic algorithm and one race.
    'start()' randomizes the population and launches the race of the first
    generation. Each time the race signals that all cars have stopped, the
    controller evolves the population, gives the cars agents built from the
    new genotypes, and restarts the race; it stops after 'max_generations'
    generations have been raced. The first generation is raced as created,
    without being evolved.

    Public Attributes:
        finished: Whether the last generation has been raced

    Public Properties:
        genetic_algorithm: The genetic algorithm producing the genotypes
        race:              The race evaluating them
        agents:            The agents of the generation being raced

    Public Methods:
        start():         Start the run
        car_evolution(): Move on to the next generation (called at the end of each race)
    """

    def __init__(self,
                 genetic_algorithm: GeneticAlgorithm,
                 race             : Race,
                 max_generations  : int           = 500,
                 topology         : Sequence[int] = DRIVER_TOPOLOGY,
                 activation       : Callable      = sigmoid_activation):
        """
        Parameters:
            genetic_algorithm: Its population size must match the number of cars
            race:              The race evaluating each generation
            max_generations:   The number of generations to race
            topology:          The topology of the agents' neural networks
            activation:        The activation function of the agents' neural networks
        """
        if genetic_algorithm.population_size != race.car_count:
            raise ValueError("The population size must match the number of racing cars")

        self._genetic_algorithm: GeneticAlgorithm  = genetic_algorithm
        self._race             : Race              = race
        self._max_generations  : int               = max_generations
        self._topology         : tuple[int, ...]   = tuple(topology)
        self._activation       : Callable          = activation
        self._agents           : list[DriverAgent] = []
        self._first_generation : bool              = True
        self.finished          : bool              = False

        race.on_all_dead(self.car_evolution)

    @property
    def genetic_algorithm(self) -> GeneticAlgorithm:
        return self._genetic_algorithm

    @property
    def race(self) -> Race:
        return self._race

    @property
    def agents(self) -> list[DriverAgent]:
        return list(self._agents)

    def start(self) -> None:
        """
        Create a random population and start racing it. Call only once per run.
        """
        self._genetic_algorithm.initialize_population()
        self._first_generation = True
        self.finished          = False
        self.car_evolution()

    def car_evolution(self) -> None:
        """
        Evolve the population (except for the first generation) and race the new one.
        """
        if self._first_generation:
            self._first_generation = False
        elif self._genetic_algorithm.generation_count >= self._max_generations:
            self.finished = True
            return
        else:
            self._genetic_algorithm.evolution()

        self._agents = self._create_agents(self._genetic_algorithm.current_population)
        self._race.setup_agents(self._agents)
        self._race.restart(self._genetic_algorithm.generation_count)

    def _create_agents(self, population: list[Genotype]) -> list[DriverAgent]:
        return [DriverAgent(genotype, self._topology, self._activation) for genotype in population]
