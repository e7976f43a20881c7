"""
Pursuit Game Implementation for evochase

This module implements a minimal pursuit game, used as the evaluation bridge of
a training run. Runners try to reach a safe house at the top of a square field
while catchers try to touch them.

The Game:
    - Runners start on the bottom edge, catchers in the middle of the field,
      each player in the slot given by its position in the population.
    - Every time step each player feeds 4 sensory values to its network and
      receives 2 outputs, used as its velocity (scaled by the player's speed).
    - A runner within HOUSE_RADIUS of the house is safe; a runner within
      CATCH_RADIUS of a catcher is caught. Both leave the round.
    - The round ends when no runner is left, or after 'round_time' seconds.

Sensory inputs (relative positions, divided by the field size):
    runner:  (house - self), (nearest catcher - self)
    catcher: (nearest runner - self), (nearest other catcher - self)

Scoring:
    runner:  1 for reaching the house, 0 otherwise; with 'time_based_scoring'
             the number of seconds spent in the round (the full round time
             for reaching the house)
    catcher: 1 per catch; with 'bonus_for_teamwork', every other catcher
             within TEAM_RADIUS of a catch gets TEAM_BONUS

Classes:
    Trial_Pursuit: Training run playing the pursuit game

Usage:
    config = Config("examples/configs/config_pursuit.ini")
    trial  = Trial_Pursuit(config)
    trial.run()
"""

import numpy as np
from pathlib import Path

from evochase.phenotype import Individual
from evochase.pool      import Role
from evochase.run       import Config, Trial

class Trial_Pursuit(Trial):
    """
    Training run whose generations are evaluated by rounds of the pursuit game.

    Implemented Methods:
        _play_round(runners, catchers): Simulate one round and score every player
        _report_progress():             Display the results of each generation
        _final_report():                Display and save the champions
    """

    FIELD_SIZE    = 10.0
    TIME_STEP     = 0.1
    RUNNER_SPEED  = 1.0
    CATCHER_SPEED = 1.1
    HOUSE         = np.array([FIELD_SIZE / 2, FIELD_SIZE])
    HOUSE_RADIUS  = 0.75
    CATCH_RADIUS  = 0.4
    TEAM_RADIUS   = 2.0
    TEAM_BONUS    = 0.5

    def __init__(self, config: Config, suppress_output: bool = False, rng: np.random.Generator | None = None):
        super().__init__(config, suppress_output, rng)
        if config.structure[0] != 4 or config.structure[-1] != 2:
            raise ValueError(f"The pursuit game needs 4 inputs and 2 outputs, got structure {config.structure}")

    @classmethod
    def _start_positions(cls, count: int, y: float) -> np.ndarray:
        """Evenly spaced starting slots along a horizontal line."""
        xs = [(i + 1) * cls.FIELD_SIZE / (count + 1) for i in range(count)]
        return np.array([[x, y] for x in xs]).reshape(count, 2)

    @staticmethod
    def _nearest(position: np.ndarray, others: np.ndarray) -> np.ndarray:
        """Offset to the nearest of 'others' (zero if there are none)."""
        if len(others) == 0:
            return np.zeros(2)
        offsets = others - position
        return offsets[np.argmin(np.linalg.norm(offsets, axis=1))]

    def _play_round(self, runners: list[Individual], catchers: list[Individual]):
        config = self._config
        runner_pos  = self._start_positions(len(runners) , 0.5)
        catcher_pos = self._start_positions(len(catchers), self.FIELD_SIZE / 2)
        catcher_score = np.zeros(len(catchers))

        elapsed = 0.0
        while elapsed < config.round_time and any(r.is_alive for r in runners):
            alive = [i for i, r in enumerate(runners) if r.is_alive]

            # Every player decides its move from the same snapshot of the field
            runner_moves = {}
            for i in alive:
                to_house   = self.HOUSE - runner_pos[i]
                to_catcher = self._nearest(runner_pos[i], catcher_pos)
                inputs = np.concatenate([to_house, to_catcher]) / self.FIELD_SIZE
                runner_moves[i] = np.array(runners[i].act(inputs)) * self.RUNNER_SPEED

            catcher_moves = []
            for j, catcher in enumerate(catchers):
                to_runner = self._nearest(catcher_pos[j], runner_pos[alive])
                to_mate   = self._nearest(catcher_pos[j], np.delete(catcher_pos, j, axis=0))
                inputs = np.concatenate([to_runner, to_mate]) / self.FIELD_SIZE
                catcher_moves.append(np.array(catcher.act(inputs)) * self.CATCHER_SPEED)

            for i, move in runner_moves.items():
                runner_pos[i] = np.clip(runner_pos[i] + move * self.TIME_STEP, 0.0, self.FIELD_SIZE)
            for j, move in enumerate(catcher_moves):
                catcher_pos[j] = np.clip(catcher_pos[j] + move * self.TIME_STEP, 0.0, self.FIELD_SIZE)
            elapsed += self.TIME_STEP

            # Resolve houses and catches
            for i in alive:
                if np.linalg.norm(self.HOUSE - runner_pos[i]) <= self.HOUSE_RADIUS:
                    self.safe_runners += 1
                    runners[i].die(config.round_time if config.time_based_scoring else 1.0)
                    continue

                if len(catchers) == 0:
                    continue
                distances = np.linalg.norm(catcher_pos - runner_pos[i], axis=1)
                catcher = int(np.argmin(distances))
                if distances[catcher] <= self.CATCH_RADIUS:
                    runners[i].die(elapsed if config.time_based_scoring else 0.0)
                    catcher_score[catcher] += 1.0
                    if config.bonus_for_teamwork:
                        mates = np.linalg.norm(catcher_pos - catcher_pos[catcher], axis=1) <= self.TEAM_RADIUS
                        mates[catcher] = False
                        catcher_score[mates] += self.TEAM_BONUS

        # The round is over
        for runner in runners:
            runner.die(elapsed if config.time_based_scoring else 0.0)
        for j, catcher in enumerate(catchers):
            catcher.die(catcher_score[j])

    def _report_progress(self):
        generation = self.generation_count - 1
        runner_best , runner_mean  = self._last_results.get(Role.RUNNER.value , (0.0, 0.0))
        catcher_best, catcher_mean = self._last_results.get(Role.CATCHER.value, (0.0, 0.0))
        print(f"Generation {generation:4d}: "
              f"runners best={runner_best:6.2f} mean={runner_mean:6.2f} | "
              f"catchers best={catcher_best:6.2f} mean={catcher_mean:6.2f} | "
              f"safe runners={self.safe_runners}")

    def _final_report(self):
        folder = Path(self._config.output_folder)
        folder.mkdir(parents=True, exist_ok=True)
        print("\nChampions:")
        for role, genome in self.champions.items():
            path = folder / f"champion_{role.value}.txt"
            genome.save(path)
            print(f"  {role.value:8s} evaluation={genome.evaluation:.2f} saved to {path}")

if __name__ == '__main__':
    config = Config(str(Path(__file__).parent / 'configs' / 'config_pursuit.ini'))
    trial  = Trial_Pursuit(config)
    trial.run()
