"""
Corridor Driving Problem for the Genetic Algorithm

This module implements a headless version of the car racing problem: a car
driven by a DriverAgent has to follow a winding corridor, from its first
checkpoint to its last, without touching the walls.

The Simulation:
    The corridor is the set of points closer than 'HALF_WIDTH' to a polyline,
    whose vertices are the checkpoints of the track. At every tick:
    - five proximity sensors, pointing at -90, -45, 0, 45 and 90 degrees from
      the car's heading, measure the distance to the wall (normalized to [0, 1])
    - the agent turns the readings into [engine_force, direction]
    - the car moves forward by engine_force * MAX_SPEED and turns by
      (direction - 0.5) * 2 * MAX_STEER radians
    The car stops when it leaves the corridor, reaches the last checkpoint,
    or does not reach a new checkpoint for 'time_threshold' seconds.

Evaluation:
    The progress along the track, as scored by Track: the distance covered
    along the checkpoints, plus the progress toward the next checkpoint.
    Reaching the last checkpoint gives the maximum evaluation, the total
    length of the track.

Classes:
    Corridor:       Geometry of the corridor and sensor readings
    Trial_Corridor: Trial evolving drivers for the corridor

Usage:
    config = Config("examples/configs/config_corridor.ini")
    writer = ResultsWriter.for_track(config.track_name, config.results_directory)
    trial  = Trial_Corridor(config, results_sink=writer)
    trial.run(num_jobs=-1)
"""

import math
import autograd.numpy as np  # type: ignore
from pathlib    import Path
from statistics import mean

from evodriver.phenotype import DriverAgent
from evodriver.run       import Config, Race, ResultsWriter, Track, Trial

# Checkpoints of the corridor, in race order
CHECKPOINTS = [(0, 0), (200, 0), (300, 100), (300, 300), (450, 400), (650, 400)]

HALF_WIDTH    = 30.0                                # distance from the centre line to the walls
SENSOR_RANGE  = 60.0                                # readings are capped at this distance
SENSOR_STEP   = 2.0                                 # resolution of the sensor rays
SENSOR_ANGLES = (-math.pi/2, -math.pi/4, 0.0, math.pi/4, math.pi/2)
MAX_SPEED     = 6.0                                 # distance covered per tick at full throttle
MAX_STEER     = 0.15                                # radians turned per tick at full lock
TICK          = 0.05                                # seconds of simulated time per tick
MAX_TICKS     = 2000

class Corridor:
    """
    A corridor of constant width around the polyline joining the checkpoints.
    """

    def __init__(self, checkpoints, half_width: float = HALF_WIDTH):
        self._starts     = np.array(checkpoints[:-1], dtype=float)
        self._ends       = np.array(checkpoints[1:],  dtype=float)
        self._half_width = half_width

    def distance_to_centre(self, point) -> float:
        """The distance between a point and the centre line of the corridor."""
        point    = np.asarray(point, dtype=float)
        segments = self._ends - self._starts
        lengths  = np.sum(segments ** 2, axis=1)
        t        = np.clip(np.sum((point - self._starts) * segments, axis=1) / lengths, 0.0, 1.0)
        closest  = self._starts + t[:, None] * segments
        return float(np.min(np.sqrt(np.sum((closest - point) ** 2, axis=1))))

    def contains(self, point) -> bool:
        return self.distance_to_centre(point) < self._half_width

    def sensor_readings(self, position, heading: float) -> list[float]:
        """
        Cast one ray per sensor, return the distance to the wall normalized by the sensor range.
        """
        readings = []
        for angle in SENSOR_ANGLES:
            direction = np.array([math.cos(heading + angle), math.sin(heading + angle)])
            distance  = 0.0
            while distance < SENSOR_RANGE and self.contains(position + direction * (distance + SENSOR_STEP)):
                distance += SENSOR_STEP
            readings.append(distance / SENSOR_RANGE)
        return readings

class Trial_Corridor(Trial):
    """
    Trial evolving drivers able to follow the corridor.

    Each agent races alone: a one-car Race, driven by a simulated clock,
    keeps track of the checkpoints reached and of the agent's evaluation,
    and stops the car once it is too slow to reach the next checkpoint.

    Implemented Methods:
        _evaluate_agent(agent): Drive one episode, return the progress along the track
        _report_progress():     Display the best and average evaluations
        _final_report():        Visualize the network of the best driver
    """

    def __init__(self, config: Config, suppress_output: bool = False, results_sink=None):
        super().__init__(config, suppress_output, results_sink)
        self.track    = Track(CHECKPOINTS, config.distance_threshold)
        self.corridor = Corridor(CHECKPOINTS)

    def _evaluate_agent(self, agent: DriverAgent) -> float:
        """
        Drive the car until it crashes, stalls or reaches the end of the corridor.
        """
        tick = 0
        race = Race(self.track, 1, self._config.time_threshold,
                    clock=lambda: tick * TICK, suppress_output=True)
        race.setup_agents([agent])
        race.restart(self._genetic_algorithm.generation_count)

        position = np.array(self.track.start, dtype=float)
        heading  = 0.0

        while race.is_alive(0) and tick < MAX_TICKS:
            engine_force, direction = agent.think(self.corridor.sensor_readings(position, heading))

            heading  += (direction - 0.5) * 2 * MAX_STEER
            position  = position + engine_force * MAX_SPEED * np.array([math.cos(heading), math.sin(heading)])
            tick     += 1

            if not self.corridor.contains(position):
                race.kill(0)
                break

            race.update(0, position)
            if race.reached_checkpoint(0) == self.track.last:
                race.kill(0)

        return agent.genotype.evaluation

    def _report_progress(self):
        evaluations = [agent.genotype.evaluation for agent in self.agents]

        s  = f"GENERATION {self._genetic_algorithm.generation_count:04d}: "
        s += f"best evaluation = {max(evaluations):8.2f}, "
        s += f"average evaluation = {mean(evaluations):8.2f}"
        print(s)

    def _final_report(self):
        best = self.best_agent
        s  = "\nSUMMARY:\n"
        s += f"Track length    = {self.track.scores[-1]:.2f}\n"
        s += f"Best evaluation = {best.genotype.evaluation:.2f}\n"
        s += f"Result          = {'[SUCCESS]' if not self.failed else '[FAILED]'}\n"
        print(s)

        best.network.visualize()

if __name__ == '__main__':

    config_file = Path(__file__).parent / 'configs' / 'config_corridor.ini'
    config      = Config(str(config_file))
    writer      = ResultsWriter.for_track(config.track_name, config.results_directory)

    print(f"Writing the generation summaries to '{writer.path}'")
    trial = Trial_Corridor(config, results_sink=writer)
    trial.run(num_jobs=-1)
