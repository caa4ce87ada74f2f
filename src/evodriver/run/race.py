"""
Race Module

This module implements the headless bookkeeping of the evaluation phase: which
cars are still racing, how far along the track each of them got, and when the
whole field has stopped. Moving the cars, reading their sensors and detecting
collisions is the job of the simulation that uses these classes.

Classes:
    AliveCounter: Thread-safe countdown firing a callback exactly once at zero
    Track:        Ordered checkpoints and the score of the progress along them
    Race:         Cars racing on a track, each driven by a DriverAgent
"""

import threading
import time
from typing import Callable, Optional, Sequence, TYPE_CHECKING

import numpy as np

from evodriver.exceptions import AgentCountMismatchError

if TYPE_CHECKING:
    from evodriver.phenotype import DriverAgent

class AliveCounter:
    """
    A counter of the racing cars.

    'decrement()' is atomic: however many threads report car deaths concurrently,
    the callback fires exactly once per 'reset()', when the count reaches zero.
    The callback runs outside the counter's lock, so it may call 'reset()'.
    """

    def __init__(self, on_zero: Callable[[], None]):
        self._on_zero: Callable[[], None] = on_zero
        self._count  : int                = 0
        self._lock   : threading.Lock     = threading.Lock()

    @property
    def count(self) -> int:
        return self._count

    def reset(self, count: int) -> None:
        if count < 0:
            raise ValueError("The alive count cannot be negative")
        with self._lock:
            self._count = count

    def decrement(self) -> None:
        """
        Decrease the count by one; fire the callback if it dropped to zero.

        Raises:
            RuntimeError: if the count is already zero
        """
        with self._lock:
            if self._count == 0:
                raise RuntimeError("Alive count decremented below zero")
            self._count -= 1
            fire = self._count == 0
        if fire:
            self._on_zero()

class Track:
    """
    A race track, described by an ordered sequence of checkpoints.

    Every checkpoint has a score: the first one scores 0, each of the following
    the score of the previous one plus the distance between the two. A car that
    last reached checkpoint k scores:
        score[k] + (distance(k, k+1) - distance(car, k+1))
    that is, the score of checkpoint k plus the progress toward the next one,
    and never less than 0. Once the last checkpoint is reached, the car scores
    exactly the last checkpoint's score.

    Public Properties:
        checkpoints:        The (x, y) positions of the checkpoints, in race order
        scores:             The score of each checkpoint
        distance_threshold: How close a car must get to a checkpoint to reach it
        start:              The position of the first checkpoint

    Public Methods:
        advance(reached, position): Index of the last checkpoint reached after moving to 'position'
        score(reached, position):   Score of a car at 'position' that last reached checkpoint 'reached'
    """

    def __init__(self, checkpoints: Sequence[Sequence[float]], distance_threshold: float = 20.0):
        checkpoints = np.asarray(checkpoints, dtype=float)
        if checkpoints.ndim != 2 or len(checkpoints) < 2:
            raise ValueError("A track needs at least 2 checkpoints, each a point")

        self._checkpoints       : np.ndarray = checkpoints
        self._distance_threshold: float      = distance_threshold

        segments     = np.linalg.norm(np.diff(checkpoints, axis=0), axis=1)
        self._scores = np.concatenate(([0.0], np.cumsum(segments)))

    @property
    def checkpoints(self) -> np.ndarray:
        return self._checkpoints

    @property
    def scores(self) -> np.ndarray:
        return self._scores

    @property
    def distance_threshold(self) -> float:
        return self._distance_threshold

    @property
    def start(self) -> np.ndarray:
        return self._checkpoints[0]

    @property
    def last(self) -> int:
        """The index of the final checkpoint."""
        return len(self._checkpoints) - 1

    def _distance(self, position, index: int) -> float:
        return float(np.linalg.norm(np.asarray(position, dtype=float) - self._checkpoints[index]))

    def advance(self, reached: int, position: Sequence[float]) -> int:
        if reached < self.last and self._distance(position, reached + 1) < self._distance_threshold:
            return reached + 1
        return reached

    def score(self, reached: int, position: Sequence[float]) -> float:
        if reached >= self.last:
            return float(self._scores[self.last])
        segment  = self._scores[reached + 1] - self._scores[reached]
        progress = segment - self._distance(position, reached + 1)
        return max(0.0, float(self._scores[reached] + progress))

class Race:
    """
    The evaluation phase of one generation: a number of cars racing on a track.

    Cars are identified by their index, from 0 to car_count - 1. The simulation
    reports the position of every racing car at each tick through 'update()',
    and reports crashes through 'kill()'. The race writes the score of each car
    on the genotype of its agent, kills cars that have not reached a new
    checkpoint for 'time_threshold' seconds, and notifies the registered
    listeners once the last car has stopped.

    Public Properties:
        track:       The track being raced on
        car_count:   The number of cars
        agents:      The agents driving the cars
        alive_count: The number of cars still racing
        generation:  The generation being raced

    Public Methods:
        on_all_dead(callback):   Register a listener for the end of the race
        setup_agents(agents):    Assign one agent to each car
        restart(generation):     Put all cars back at the start
        is_alive(car):           Whether a car is still racing
        update(car, position):   Record a car's position, update its evaluation
        kill(car):               Stop a car
    """

    def __init__(self,
                 track          : Track,
                 car_count      : int,
                 time_threshold : float = 5.0,
                 clock          : Callable[[], float] = time.monotonic,
                 suppress_output: bool = False):
        """
        Parameters:
            track:           The track to race on
            car_count:       The number of cars
            time_threshold:  Seconds a car may spend without reaching a new checkpoint
            clock:           Source of the current time, in seconds
            suppress_output: If True, do not print race events
        """
        if car_count < 1:
            raise ValueError("A race needs at least one car")

        self._track          : Track                  = track
        self._car_count      : int                    = car_count
        self._time_threshold : float                  = time_threshold
        self._clock          : Callable[[], float]    = clock
        self._suppress_output: bool                   = suppress_output
        self._generation     : Optional[int]          = None
        self._listeners      : list[Callable[[], None]] = []

        self._agents        : list[Optional['DriverAgent']] = [None] * car_count
        self._reached       : list[int]   = [0] * car_count
        self._last_progress : list[float] = [0.0] * car_count
        self._alive         : list[bool]  = [False] * car_count

        self._lock          = threading.Lock()
        self._alive_counter = AliveCounter(self._all_cars_dead)

    @property
    def track(self) -> Track:
        return self._track

    @property
    def car_count(self) -> int:
        return self._car_count

    @property
    def agents(self) -> list[Optional['DriverAgent']]:
        return list(self._agents)

    @property
    def alive_count(self) -> int:
        return self._alive_counter.count

    @property
    def generation(self) -> Optional[int]:
        return self._generation

    def on_all_dead(self, callback: Callable[[], None]) -> None:
        """Register a function to call once every car has stopped."""
        self._listeners.append(callback)

    def setup_agents(self, agents: Sequence['DriverAgent']) -> None:
        """
        Assign one agent to each car, in order.

        Raises:
            AgentCountMismatchError: if the number of agents differs from the number of cars
        """
        if len(agents) != self._car_count:
            raise AgentCountMismatchError(self._car_count, len(agents))
        self._agents = list(agents)

    def restart(self, generation: int) -> None:
        """
        Start a new race: every car is alive, at the first checkpoint, with a fresh timer.
        """
        if any(agent is None for agent in self._agents):
            raise RuntimeError("Agents must be set up before the race starts")

        if not self._suppress_output:
            print(f"Generation {generation}")

        now = self._clock()
        with self._lock:
            self._generation    = generation
            self._reached       = [0] * self._car_count
            self._last_progress = [now] * self._car_count
            self._alive         = [True] * self._car_count
            self._alive_counter.reset(self._car_count)

    def is_alive(self, car: int) -> bool:
        return self._alive[car]

    def reached_checkpoint(self, car: int) -> int:
        return self._reached[car]

    def update(self, car: int, position: Sequence[float]) -> None:
        """
        Record the position of a racing car.

        The car advances to the next checkpoint if it got close enough to it, and
        the evaluation of its agent's genotype is set to the score of its position.
        A car that has not reached a new checkpoint for too long is killed instead.
        """
        if not self._alive[car]:
            return

        now = self._clock()
        if now - self._last_progress[car] > self._time_threshold:
            if not self._suppress_output:
                print(f"Car {car} timed out")
            self.kill(car)
            return

        reached = self._track.advance(self._reached[car], position)
        if reached != self._reached[car]:
            self._reached[car]       = reached
            self._last_progress[car] = now
            if not self._suppress_output:
                print(f"Car {car} reached checkpoint {reached}")

        self._agents[car].genotype.evaluation = self._track.score(reached, position)

    def kill(self, car: int) -> None:
        """
        Stop a car. Killing a car that is not racing has no effect.
        """
        with self._lock:
            if not self._alive[car]:
                return
            self._alive[car] = False
        self._alive_counter.decrement()

    def _all_cars_dead(self) -> None:
        for callback in list(self._listeners):
            callback()
