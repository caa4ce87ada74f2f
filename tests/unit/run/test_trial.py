"""
Unit tests for evodriver.run.trial module.

This module contains tests for the Trial class,
the abstract base class for headless evolutionary runs.
"""

import pytest
from unittest.mock import Mock, patch, MagicMock

from evodriver.phenotype  import DriverAgent
from evodriver.pool       import GeneticAlgorithm
from evodriver.run.config import Config
from evodriver.run.trial  import Trial


# ============================================================================
# Concrete Trial Implementation for Testing
# ============================================================================

class ConcreteTrial(Trial):
    """Concrete implementation of Trial for testing purposes."""

    def __init__(self, config, suppress_output=False, results_sink=None):
        super().__init__(config, suppress_output, results_sink)
        self.reset_called = False
        self.evaluate_agent_calls = []
        self.report_progress_calls = []
        self.final_report_called = False

    def _reset(self):
        super()._reset()
        self.reset_called = True

    def _evaluate_agent(self, agent):
        self.evaluate_agent_calls.append(agent)
        # the sum of the outputs for a fixed input: in [0, out_count]
        return float(sum(agent.think([0.5] * self._config.topology[0])))

    def _report_progress(self):
        self.report_progress_calls.append(self._genetic_algorithm.generation_count)

    def _final_report(self):
        self.final_report_called = True


# ============================================================================
# Fixtures
# ============================================================================

@pytest.fixture
def config():
    config = Config()
    config.population_size        = 6
    config.topology               = "2, 3, 1"
    config.max_number_generations = 4
    return config


# ============================================================================
# Test Trial Initialization
# ============================================================================

class TestTrialInit:
    """Test Trial initialization."""

    def test_init_stores_config(self, config):
        trial = ConcreteTrial(config)
        assert trial._config is config

    def test_init_stores_suppress_output(self, config):
        trial = ConcreteTrial(config, suppress_output=True)
        assert trial._suppress_output is True

    def test_init_sets_genetic_algorithm_to_none(self, config):
        trial = ConcreteTrial(config)
        assert trial.genetic_algorithm is None
        assert trial.best_agent is None

    def test_init_sets_failed_to_true(self, config):
        assert ConcreteTrial(config).failed is True

    def test_cannot_instantiate_abstract_trial(self, config):
        with pytest.raises(TypeError):
            Trial(config)


# ============================================================================
# Test Trial _evaluate_agents_all
# ============================================================================

class TestTrialEvaluateAgentsAll:
    """Test Trial._evaluate_agents_all method."""

    @pytest.fixture
    def trial(self, config):
        trial = ConcreteTrial(config)
        trial._genetic_algorithm = GeneticAlgorithm(config.weight_count, config.population_size, config)
        trial._genetic_algorithm.initialize_population()
        return trial

    def test_evaluate_serial(self, trial):
        trial._evaluate_agents_all(num_jobs=1)

        assert len(trial.evaluate_agent_calls) == 6
        for agent in trial.agents:
            assert isinstance(agent, DriverAgent)
            assert 0.0 <= agent.genotype.evaluation <= 1.0

    def test_agents_wrap_current_population(self, trial):
        trial._evaluate_agents_all(num_jobs=1)
        population = trial.genetic_algorithm.current_population
        assert [agent.genotype for agent in trial.agents] == population

    def test_evaluate_parallel(self, trial):
        # Mock Parallel to avoid actual parallelization
        with patch('evodriver.run.trial.Parallel') as mock_parallel:
            mock_parallel.return_value = MagicMock(return_value=[1.0, 2.0, 3.0, 4.0, 5.0, 6.0])

            trial._evaluate_agents_all(num_jobs=2)

        mock_parallel.assert_called_once_with(2)
        population = trial.genetic_algorithm.current_population
        assert [g.evaluation for g in population] == [1.0, 2.0, 3.0, 4.0, 5.0, 6.0]

    def test_negative_evaluation_raises(self, trial):
        with patch('evodriver.run.trial.Parallel') as mock_parallel:
            mock_parallel.return_value = MagicMock(return_value=[1.0, -2.0, 3.0, 4.0, 5.0, 6.0])
            with pytest.raises(ValueError, match="must not be negative"):
                trial._evaluate_agents_all(num_jobs=-1)

    def test_best_agent(self, trial):
        with patch('evodriver.run.trial.Parallel') as mock_parallel:
            mock_parallel.return_value = MagicMock(return_value=[1.0, 7.0, 3.0, 7.0, 5.0, 6.0])
            trial._evaluate_agents_all(num_jobs=2)

        assert trial.best_agent is trial.agents[1]


# ============================================================================
# Test Trial _terminate
# ============================================================================

class TestTrialTerminate:
    """Test Trial._terminate method."""

    @pytest.fixture
    def trial(self, config):
        trial = ConcreteTrial(config)
        trial._genetic_algorithm = Mock(spec=GeneticAlgorithm)
        return trial

    def test_terminate_when_max_generations_reached(self, trial):
        trial._genetic_algorithm.generation_count = 4
        assert trial._terminate() is True

    def test_terminate_when_max_generations_not_reached(self, trial):
        trial._genetic_algorithm.generation_count = 3
        assert trial._terminate() is False

    def test_terminate_on_threshold_success(self, trial, config):
        config.evaluation_threshold = 10.0
        trial._genetic_algorithm.generation_count = 2
        best = Mock()
        best.genotype.evaluation = 12.0
        trial._agents = [best]

        assert trial._terminate() is True
        assert trial.failed is False

    def test_terminate_on_threshold_failure(self, trial, config):
        config.evaluation_threshold = 10.0
        trial._genetic_algorithm.generation_count = 4
        best = Mock()
        best.genotype.evaluation = 8.0
        trial._agents = [best]

        assert trial._terminate() is True
        assert trial.failed is True

    def test_no_termination_below_threshold(self, trial, config):
        config.evaluation_threshold = 10.0
        trial._genetic_algorithm.generation_count = 2
        best = Mock()
        best.genotype.evaluation = 8.0
        trial._agents = [best]

        assert trial._terminate() is False


# ============================================================================
# Test Trial run
# ============================================================================

class TestTrialRun:
    """Test Trial.run method."""

    def test_run_calls_reset(self, config):
        trial = ConcreteTrial(config, suppress_output=True)
        trial.run()
        assert trial.reset_called

    def test_run_creates_genetic_algorithm(self, config):
        trial = ConcreteTrial(config, suppress_output=True)
        trial.run()
        assert isinstance(trial.genetic_algorithm, GeneticAlgorithm)
        assert trial.genetic_algorithm.weight_count == 13
        assert trial.genetic_algorithm.population_size == 6

    def test_run_evaluates_every_generation(self, config):
        trial = ConcreteTrial(config, suppress_output=True)
        trial.run()
        assert trial.genetic_algorithm.generation_count == 4
        assert len(trial.evaluate_agent_calls) == 4 * 6

    def test_run_reports_when_not_suppressed(self, config):
        trial = ConcreteTrial(config)
        trial.run()
        assert trial.report_progress_calls == [1, 2, 3, 4]
        assert trial.final_report_called

    def test_run_suppresses_reports_when_requested(self, config):
        trial = ConcreteTrial(config, suppress_output=True)
        trial.run()
        assert trial.report_progress_calls == []
        assert not trial.final_report_called

    def test_run_sends_summaries_to_sink(self, config):
        sink = Mock()
        trial = ConcreteTrial(config, suppress_output=True, results_sink=sink)
        trial.run()
        # the last generation is evaluated but never evolved
        assert [c.args[0] for c in sink.write_generation_summary.call_args_list] == [1, 2, 3]

    def test_run_twice_starts_over(self, config):
        trial = ConcreteTrial(config, suppress_output=True)
        trial.run()
        first = trial.genetic_algorithm
        trial.run()
        assert trial.genetic_algorithm is not first
        assert trial.genetic_algorithm.generation_count == 4
