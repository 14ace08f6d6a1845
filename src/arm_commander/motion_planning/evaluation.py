"""Define the plan evaluator, which plans through waypoints and scores the resulting plan."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from arm_commander.motion_planning.trajectories import Plan
    from arm_commander.motion_planning.waypoints import WaypointSequence
    from arm_commander.robots.interfaces import PlanningEngine

logger = logging.getLogger(__name__)


def compute_success_fraction(planned_waypoints: int, requested_waypoints: int) -> float:
    """Compute the fraction of requested waypoints covered by a plan, in [0, 1]."""
    if requested_waypoints <= 0 or planned_waypoints <= 0:
        return 0.0
    return min(1.0, planned_waypoints / requested_waypoints)


@dataclass(frozen=True)
class PartialPlan:
    """Reports a valid plan that covers only some of the requested waypoints.

    This is not an error: the caller decides whether the covered prefix is acceptable.
    """

    success_fraction: float
    requested: int
    achieved: int


@dataclass(frozen=True)
class EvaluatedPlan:
    """A plan computed for a waypoint sequence, together with its success fraction."""

    plan: Plan
    sequence: WaypointSequence
    success_fraction: float

    @property
    def requested(self) -> int:
        """Retrieve the number of waypoints requested from the planner."""
        return self.sequence.count

    @property
    def achieved(self) -> int:
        """Retrieve the number of requested waypoints covered by the plan."""
        return min(self.plan.planned_waypoints, self.sequence.count)

    @property
    def partial(self) -> PartialPlan | None:
        """Describe the shortfall of a valid but incomplete plan (None if complete or invalid)."""
        if not self.plan.valid or self.success_fraction >= 1.0:
            return None
        return PartialPlan(self.success_fraction, self.requested, self.achieved)


class PlanEvaluator:
    """Submits waypoint sequences to the planning engine and scores the returned plans."""

    def __init__(self, engine: PlanningEngine, velocity_scale: float) -> None:
        """Initialize the evaluator with its planning engine and trajectory velocity scaling.

        :param engine: External planning engine used to compute and time-parameterize plans
        :param velocity_scale: Factor in (0, 1] applied uniformly when re-timing trajectories
        """
        if not 0.0 < velocity_scale <= 1.0:
            raise ValueError(f"Velocity scaling must be in (0, 1], got {velocity_scale}.")

        self._engine = engine
        self.velocity_scale = velocity_scale

    def evaluate(self, sequence: WaypointSequence) -> EvaluatedPlan:
        """Plan through the whole sequence with one planning call and score the result.

        :param sequence: Non-empty sequence of waypoints to be planned through
        :return: Evaluated plan; its plan is time-parameterized whenever it is valid
        """
        plan = self._engine.plan_to(sequence)
        fraction = compute_success_fraction(plan.planned_waypoints, sequence.count)

        if not plan.valid:
            logger.warning(f"Planning call failed for {sequence.count} waypoints: {plan.message}")
            return EvaluatedPlan(plan, sequence, fraction)

        logger.info(
            f"Planned {min(plan.planned_waypoints, sequence.count)}/{sequence.count} "
            f"{sequence.mode.value} waypoints ({fraction * 100.0:.2f}%).",
        )

        if len(plan.trajectory) > 0:
            plan = self._engine.time_parameterize(plan, self.velocity_scale)

        return EvaluatedPlan(plan, sequence, fraction)
