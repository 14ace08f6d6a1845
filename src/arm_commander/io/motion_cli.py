"""Define a command-line interface for sending motion requests to a motion commander."""

from __future__ import annotations

from typing import TYPE_CHECKING, Callable

import click
from rich.table import Table

from arm_commander.errors import SourceUnavailable
from arm_commander.execution import AutoApprovalChannel
from arm_commander.io.logging import console
from arm_commander.kinematics import JointState
from arm_commander.motion_planning import AbsolutePose, JointTarget, NamedTarget, RelativeCartesian
from arm_commander.outcome import Outcome
from arm_commander.robots import StateSource
from arm_commander.spatial import EulerRPY, Pose3D

if TYPE_CHECKING:
    from arm_commander.commander import MotionCommander
    from arm_commander.execution import ExecutionResult
    from arm_commander.motion_planning import MotionRequest

NUMERIC_ARGS = {"ignore_unknown_options": True}
"""Context settings allowing negative numbers as positional arguments."""


def _render_state_table(joint_state: JointState, pose: Pose3D) -> Table:
    """Render the manipulator's joint values and end-effector pose as a table."""
    table = Table(title=f"Manipulator state (frame: {pose.ref_frame})", show_lines=False)
    table.add_column("Quantity", style="cyan", no_wrap=True)
    table.add_column("Value", style="bold", justify="right")

    for name, value in zip(joint_state.joint_names, joint_state.positions):
        table.add_row(name, f"{value:.4f}")

    x, y, z, roll, pitch, yaw = pose.to_xyz_rpy()
    for label, value in (("x", x), ("y", y), ("z", z)):
        table.add_row(label, f"{value:.4f}")
    for label, value in (("roll", roll), ("pitch", pitch), ("yaw", yaw)):
        table.add_row(label, f"{value:.4f}")
    return table


def _render_targets_table(commander: MotionCommander) -> Table:
    """Render the named targets known to the commander's planning engine."""
    table = Table(title="Named targets", show_lines=False)
    table.add_column("Name", style="cyan", no_wrap=True)
    table.add_column("Kind", style="magenta")
    table.add_column("Value")

    targets = commander.engine.named_targets()
    for name in sorted(targets):
        target = targets[name]
        if isinstance(target, JointState):
            values = ", ".join(f"{v:.3f}" for v in target.positions)
            table.add_row(name, "joints", f"[{values}]")
        else:
            table.add_row(name, "pose", str(target))
    return table


def build_cli(commander: MotionCommander) -> click.Group:
    """Create a Click group whose commands send motion requests to the given commander.

    :param commander: Motion commander executing the requested motions
    :return: A Click group that can be used as an entry point or subcommand
    """

    def run(make_request: Callable[[], MotionRequest]) -> None:
        """Build and execute a request, print its outcome, and exit with an error if it failed."""
        try:
            request = make_request()
        except ValueError as error:
            outcome: Outcome[ExecutionResult] = Outcome.failed(error)
        else:
            outcome = commander.try_execute(request)

        color = "green" if outcome.success else "red"
        console.print(f"[{color}]{outcome.message}[/]")
        if not outcome.success:
            click.get_current_context().exit(1)

    def goal_pose(xyz_rpy: tuple[float, ...], frame: str | None) -> Pose3D:
        """Construct a goal pose, expressed in the current pose's frame unless one is given."""
        ref_frame = frame or commander.state.current_pose().ref_frame
        return Pose3D.from_sequence(xyz_rpy, ref_frame)

    @click.group()
    @click.option("--yes", is_flag=True, help="Skip confirmation prompts.")
    def cli(yes: bool) -> None:
        """Plan and execute manipulator motions."""
        if yes:
            commander.gate.channel = AutoApprovalChannel()

    @cli.command(context_settings=NUMERIC_ARGS)
    @click.argument("dx", type=float)
    @click.argument("dy", type=float)
    @click.argument("dz", type=float)
    @click.option("--rpy", type=float, nargs=3, default=None, help="Goal roll, pitch, yaw (rad).")
    @click.option("--points", type=int, default=None, help="Number of Cartesian waypoints.")
    def delta(
        dx: float,
        dy: float,
        dz: float,
        rpy: tuple[float, float, float] | None,
        points: int | None,
    ) -> None:
        """Move the end-effector in a straight line by (DX, DY, DZ) meters."""
        goal_rpy = EulerRPY.from_sequence(rpy) if rpy else None
        run(lambda: RelativeCartesian(dx, dy, dz, goal_rpy, num_cartesian_points=points))

    @cli.command(context_settings=NUMERIC_ARGS)
    @click.argument("xyz_rpy", type=float, nargs=6)
    @click.option("--frame", default=None, help="Reference frame of the pose.")
    def pose(xyz_rpy: tuple[float, ...], frame: str | None) -> None:
        """Move the end-effector to the pose X Y Z ROLL PITCH YAW along any feasible path."""
        run(lambda: AbsolutePose(goal_pose(xyz_rpy, frame), straight_line=False))

    @cli.command(context_settings=NUMERIC_ARGS)
    @click.argument("xyz_rpy", type=float, nargs=6)
    @click.option("--frame", default=None, help="Reference frame of the pose.")
    @click.option("--points", type=int, default=None, help="Number of Cartesian waypoints.")
    def line(xyz_rpy: tuple[float, ...], frame: str | None, points: int | None) -> None:
        """Move the end-effector in a straight line to the pose X Y Z ROLL PITCH YAW."""
        run(lambda: AbsolutePose(goal_pose(xyz_rpy, frame), num_cartesian_points=points))

    @cli.command()
    @click.argument("name")
    def named(name: str) -> None:
        """Move to the named target NAME (e.g., "home")."""
        run(lambda: NamedTarget(name))

    @cli.command(context_settings=NUMERIC_ARGS)
    @click.argument("values", type=float, nargs=-1, required=True)
    @click.option("--points", type=int, default=None, help="Number of joint-space waypoints.")
    def joints(values: tuple[float, ...], points: int | None) -> None:
        """Move all joints to the absolute VALUES (canonical joint order)."""
        run(lambda: JointTarget.absolute(values, num_joint_points=points))

    @cli.command(context_settings=NUMERIC_ARGS)
    @click.argument("index", type=int)
    @click.argument("value", type=float)
    @click.option("--absolute", is_flag=True, help="Set the joint instead of offsetting it.")
    def joint(index: int, value: float, absolute: bool) -> None:
        """Offset joint INDEX by VALUE (or set it to VALUE with --absolute)."""
        if absolute:
            run(lambda: JointTarget.single(index, value))
        else:
            run(lambda: JointTarget.relative_to_current(index, value))

    @cli.command()
    @click.option("--live", is_flag=True, help="Read from the live feedback source.")
    def state(live: bool) -> None:
        """Print the current joint values and end-effector pose."""
        source = StateSource.LIVE if live else StateSource.PLANNER
        try:
            joint_state = commander.state.current_joint_state(source)
            ee_pose = commander.state.current_pose(source)
        except SourceUnavailable as error:
            console.print(f"[red]{error}[/]")
            click.get_current_context().exit(1)

        console.print(_render_state_table(joint_state, ee_pose))

    @cli.command()
    def targets() -> None:
        """List the named targets available to the planning engine."""
        console.print(_render_targets_table(commander))

    return cli
