from __future__ import annotations

from pytest import approx

from boidsim.config import BoidConfig, HazardConfig, HazardZoneConfig, PredatorConfig, SimulationConfig
from boidsim.sim.core.world import World


def _small_config(**overrides) -> SimulationConfig:
    values = dict(
        width=200.0,
        height=150.0,
        seed=1234,
        boids=BoidConfig(count=30, neighbor_radius=30.0),
        predators=PredatorConfig(count=2),
        hazards=HazardConfig(count=3),
    )
    values.update(overrides)
    return SimulationConfig(**values)


def run_steps(config: SimulationConfig, steps: int):
    world = World(config)
    for tick in range(steps):
        world.step(tick)
    return world


def test_deterministic_steps():
    world_a = run_steps(_small_config(), 10)
    # recreate config to ensure RNG resets
    world_b = run_steps(_small_config(), 10)

    assert world_a.boids == world_b.boids
    assert world_a.predators == world_b.predators
    assert world_a.hazards == world_b.hazards


def test_reset_restores_initial_state():
    world = World(_small_config())
    initial_boids = world.boids.copy()
    initial_hazards = world.hazards.to_records()

    for tick in range(5):
        world.step(tick)
    assert world.boids != initial_boids

    world.reset()
    assert world.boids == initial_boids
    assert world.hazards.to_records() == initial_hazards
    assert world.metrics is None


def test_world_keeps_entities_inside_the_domain():
    config = _small_config()
    world = run_steps(config, 20)

    for frame in (world.boids, world.predators):
        assert all(0.0 <= x <= config.width for x in frame.x)
        assert all(0.0 <= y <= config.height for y in frame.y)


def test_step_reports_metrics():
    config = _small_config()
    world = World(config)

    metrics = world.step(0)

    assert metrics.tick == 0
    assert metrics.boids == 30
    assert metrics.predators == 2
    assert metrics.hazards == 3
    assert metrics.neighbor_checks == 30 * 29 + 30 * 5 + 2 * 30
    assert 0.0 <= metrics.polarization <= 1.0 + 1e-9
    assert metrics.max_speed >= metrics.average_speed
    assert world.metrics is metrics


def test_explicit_hazard_zones_are_used_verbatim():
    zones = [HazardZoneConfig(position=(10.0, 20.0), radius=5.0), HazardZoneConfig(position=(50.0, 60.0), radius=8.0)]
    world = World(_small_config(hazards=HazardConfig(zones=zones)))

    assert world.hazards.to_records() == [
        {"x": 10.0, "y": 20.0, "radius": 5.0},
        {"x": 50.0, "y": 60.0, "radius": 8.0},
    ]


def test_random_hazard_radii_follow_width_divisors():
    config = _small_config(hazards=HazardConfig(count=20, radius_divisor_min=10.0, radius_divisor_max=30.0))
    world = World(config)

    assert len(world.hazards) == 20
    for radius in world.hazards.radius:
        assert round(config.width / 30.0) <= radius <= round(config.width / 10.0)
        assert radius == int(radius)


def test_initial_speed_normalizes_boid_velocities():
    config = _small_config(variant="classic", boids=BoidConfig(count=10, initial_speed=5.0, max_speed=5.0))
    world = World(config)

    assert all(speed == approx(5.0) for speed in world.boids.speeds())


def test_snapshot_contains_metadata_and_entities():
    config = _small_config(seed=7)
    world = World(config)
    world.step(0)

    snapshot = world.snapshot(1)

    assert snapshot.tick == 1
    assert snapshot.world.width == approx(200.0)
    assert snapshot.world.height == approx(150.0)
    assert snapshot.metadata.seed == 7
    assert snapshot.metadata.variant == "weighted"
    assert len(snapshot.boids) == 30
    assert len(snapshot.predators) == 2
    assert len(snapshot.hazards) == 3
    for key in ["x", "y", "vx", "vy"]:
        assert key in snapshot.boids[0]
    assert snapshot.metrics.boids == 30


def test_snapshot_before_first_step_builds_metrics():
    world = World(_small_config(predators=PredatorConfig(count=0), hazards=HazardConfig(count=0)))

    snapshot = world.snapshot(0)

    assert snapshot.metrics.tick == 0
    assert snapshot.metrics.tick_duration_ms == 0.0
    assert snapshot.predators == []
    assert snapshot.hazards == []
