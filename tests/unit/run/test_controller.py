"""
Unit tests for the Controller class.
"""

import pytest
import numpy as np
from unittest.mock import Mock

from evodriver.phenotype      import DriverAgent
from evodriver.pool           import GeneticAlgorithm
from evodriver.run.controller import Controller
from evodriver.run.race       import Race, Track


# ============================================================================
# Helpers
# ============================================================================

def kill_all(race):
    for car in range(race.car_count):
        race.kill(car)


# ============================================================================
# Fixtures
# ============================================================================

@pytest.fixture
def track():
    return Track([(0, 0), (100, 0), (100, 100)], distance_threshold=10.0)

@pytest.fixture
def race(track):
    return Race(track, 4, suppress_output=True)

@pytest.fixture
def ga():
    return GeneticAlgorithm(DriverAgent.WEIGHT_COUNT, 4)


# ============================================================================
# Tests
# ============================================================================

class TestControllerInit:

    def test_population_size_must_match_cars(self, track):
        with pytest.raises(ValueError, match="population size"):
            Controller(GeneticAlgorithm(DriverAgent.WEIGHT_COUNT, 5), Race(track, 4))

    def test_registers_for_end_of_race(self, ga):
        race = Mock(spec=Race)
        race.car_count = 4
        controller = Controller(ga, race)
        race.on_all_dead.assert_called_once_with(controller.car_evolution)


class TestControllerStart:

    def test_start_races_first_generation(self, ga, race):
        controller = Controller(ga, race, max_generations=3)
        controller.start()

        assert race.generation == 1
        assert race.alive_count == 4
        assert ga.generation_count == 1
        assert not controller.finished

    def test_agents_follow_population(self, ga, race):
        controller = Controller(ga, race, max_generations=3)
        controller.start()

        agents = controller.agents
        assert len(agents) == 4
        for agent, genotype in zip(agents, ga.current_population):
            assert agent.genotype is genotype
            np.testing.assert_array_equal(agent.network.get_weights(), genotype.weights)
        assert race.agents == agents

    def test_population_is_randomized(self, ga, race):
        Controller(ga, race).start()
        assert not np.all(ga.current_population[0].weights == 0.0)


class TestControllerCarEvolution:

    def test_end_of_race_evolves_and_restarts(self, ga, race):
        controller = Controller(ga, race, max_generations=3)
        controller.start()
        first_agents = controller.agents

        race.update(0, (50, 0))
        kill_all(race)

        assert ga.generation_count == 2
        assert race.generation == 2
        assert race.alive_count == 4
        assert controller.agents != first_agents

    def test_best_driver_carried_over(self, ga, race):
        controller = Controller(ga, race, max_generations=3)
        controller.start()
        best = ga.current_population[2]

        race.update(2, (80, 0))
        race.update(1, (10, 0))
        kill_all(race)

        assert controller.agents[0].genotype is best

    def test_stops_after_max_generations(self, ga, race):
        controller = Controller(ga, race, max_generations=3)
        controller.start()

        kill_all(race)
        kill_all(race)
        assert not controller.finished
        assert race.generation == 3

        kill_all(race)
        assert controller.finished
        assert ga.generation_count == 3
        assert race.alive_count == 0

    def test_single_generation(self, ga, race):
        controller = Controller(ga, race, max_generations=1)
        controller.start()
        kill_all(race)
        assert controller.finished
        assert ga.generation_count == 1
