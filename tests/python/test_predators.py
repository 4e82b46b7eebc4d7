from __future__ import annotations

from pytest import approx

from boidsim.sim.core.frames import AgentFrame
from boidsim.sim.core.params import PredatorParams
from boidsim.sim.systems.predators import nearest_index, update_predators


def _params(**overrides) -> PredatorParams:
    values = dict(width=100.0, height=100.0, max_speed=2.0, pred_rel_speed=1.5)
    values.update(overrides)
    return PredatorParams(**values)


def test_predator_steers_toward_nearest_boid():
    predators = AgentFrame(x=[10.0], y=[10.0], vx=[0.0], vy=[0.0])
    boids = AgentFrame(x=[10.0, 20.0], y=[30.0, 10.0], vx=[0.0, 0.0], vy=[0.0, 0.0])

    result = update_predators(predators, boids, _params())

    assert result.vx[0] == approx(0.05)
    assert result.vy[0] == approx(0.0)
    assert result.x[0] == approx(10.05)


def test_ties_go_to_the_first_boid():
    boids_x = [20.0, 0.0]
    boids_y = [10.0, 10.0]

    assert nearest_index(10.0, 10.0, boids_x, boids_y) == 0

    predators = AgentFrame(x=[10.0], y=[10.0], vx=[0.0], vy=[0.0])
    result = update_predators(predators, AgentFrame(x=boids_x, y=boids_y, vx=[0.0, 0.0], vy=[0.0, 0.0]), _params())
    assert result.vx[0] > 0.0


def test_speed_is_limited_by_relative_speed():
    predators = AgentFrame(x=[10.0], y=[50.0], vx=[5.0], vy=[0.0])
    boids = AgentFrame(x=[90.0], y=[50.0], vx=[0.0], vy=[0.0])
    params = _params()

    result = update_predators(predators, boids, params)

    assert params.speed_limit == approx(3.0)
    assert result.vx[0] == approx(3.0)
    assert result.x[0] == approx(13.0)


def test_without_boids_velocity_carries_over():
    predators = AgentFrame(x=[50.0, 99.5], y=[50.0, 50.0], vx=[1.0, 1.0], vy=[1.0, 0.0])

    result = update_predators(predators, AgentFrame(), _params())

    assert (result.x[0], result.y[0]) == (approx(51.0), approx(51.0))
    assert (result.vx[0], result.vy[0]) == (1.0, 1.0)
    assert result.x[1] == 100.0
    assert result.vx[1] == -1.0


def test_coincident_boid_does_not_steer():
    predators = AgentFrame(x=[40.0], y=[40.0], vx=[0.2], vy=[0.0])
    boids = AgentFrame(x=[40.0], y=[40.0], vx=[0.0], vy=[0.0])

    result = update_predators(predators, boids, _params())

    assert result.vx == [0.2]
    assert result.vy == [0.0]
    assert result.x[0] == approx(40.2)


def test_empty_predators_and_input_untouched():
    boids = AgentFrame(x=[1.0], y=[1.0], vx=[0.0], vy=[0.0])
    assert len(update_predators(AgentFrame(), boids, _params())) == 0

    predators = AgentFrame(x=[5.0], y=[5.0], vx=[0.5], vy=[0.5])
    before = predators.copy()
    update_predators(predators, boids, _params())
    assert predators == before
