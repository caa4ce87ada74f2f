"""
Unit tests for the DriverAgent class.
"""

import pickle

import pytest
import numpy as np

from evodriver.exceptions import LengthMismatchError
from evodriver.genotype   import Genotype
from evodriver.phenotype  import DRIVER_TOPOLOGY, DriverAgent


@pytest.fixture
def random_genotype():
    return Genotype.generate_random(DriverAgent.WEIGHT_COUNT, -1.0, 1.0)


class TestDriverAgentInit:

    def test_weight_count(self):
        assert DriverAgent.WEIGHT_COUNT == 67

    def test_network_loaded_from_genotype(self, random_genotype):
        agent = DriverAgent(random_genotype)
        assert agent.genotype is random_genotype
        assert agent.network.topology == DRIVER_TOPOLOGY
        np.testing.assert_array_equal(agent.network.get_weights(), random_genotype.weights)

    def test_wrong_genotype_length_raises(self):
        with pytest.raises(LengthMismatchError):
            DriverAgent(Genotype(np.zeros(10)))

    def test_custom_topology(self):
        agent = DriverAgent(Genotype(np.zeros(9)), topology=(2, 2, 1))
        np.testing.assert_array_equal(agent.think([0.3, 0.7]), [0.5])


class TestDriverAgentThink:

    def test_outputs_engine_force_and_direction(self, random_genotype):
        agent = DriverAgent(random_genotype)
        outputs = agent.think([0.2, 0.9, 1.0, 0.4, 0.0])
        assert outputs.shape == (2,)
        assert np.all((outputs >= 0.0) & (outputs <= 1.0))

    def test_same_inputs_same_outputs(self, random_genotype):
        agent = DriverAgent(random_genotype)
        sensors = [0.5, 0.5, 0.5, 0.5, 0.5]
        np.testing.assert_array_equal(agent.think(sensors), agent.think(sensors))


class TestDriverAgentUpdateKnowledge:

    def test_genotype_changes_do_not_reach_network(self, random_genotype):
        agent = DriverAgent(random_genotype)
        before = agent.network.get_weights().copy()

        random_genotype.mutate(1.0, 5.0)
        random_genotype[0] = 1000.0

        np.testing.assert_array_equal(agent.network.get_weights(), before)

    def test_update_knowledge_swaps_genotype(self, random_genotype):
        agent = DriverAgent(random_genotype)
        other = Genotype.generate_random(DriverAgent.WEIGHT_COUNT, -1.0, 1.0)

        agent.update_knowledge(other)

        assert agent.genotype is other
        np.testing.assert_array_equal(agent.network.get_weights(), other.weights)

    def test_mismatched_genotype_leaves_agent_untouched(self, random_genotype):
        agent = DriverAgent(random_genotype)
        before = agent.network.get_weights().copy()

        with pytest.raises(LengthMismatchError):
            agent.update_knowledge(Genotype(np.zeros(58)))

        assert agent.genotype is random_genotype
        np.testing.assert_array_equal(agent.network.get_weights(), before)


class TestDriverAgentPickling:

    def test_agent_survives_pickling(self, random_genotype):
        agent = DriverAgent(random_genotype)
        sensors = [0.1, 0.2, 0.3, 0.4, 0.5]

        copy = pickle.loads(pickle.dumps(agent))

        np.testing.assert_array_equal(copy.think(sensors), agent.think(sensors))
        np.testing.assert_array_equal(copy.genotype.weights, random_genotype.weights)
