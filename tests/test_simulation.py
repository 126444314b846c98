"""
Integration tests for the APU host driver, controllers, configuration
and scenario runner.
"""

import pandas as pd
import pytest

from apu_sim.core.context import UpdateContext
from apu_sim.scripts.run_apu import main
from apu_sim.simulation.apu import AuxiliaryPowerUnit
from apu_sim.simulation.controller import (
    ManualTurbineController,
    ScheduledTurbineController,
)
from apu_sim.turbine.aps3200 import TurbineState
from apu_sim.utils.config import APUConfig, GeneratorConfig, SimulationConfig


def running_apu(config=None):
    """APU that has completed its start sequence."""
    controller = ManualTurbineController(start=True)
    apu = AuxiliaryPowerUnit(controller, config)
    for _ in range(2000):
        if apu.step().state is TurbineState.RUNNING:
            return apu
    pytest.fail("APU did not reach Running")


class TestControllers:

    def test_manual_requests(self):
        controller = ManualTurbineController()
        assert not controller.should_start()
        assert not controller.should_stop()

        controller.request_start()
        assert controller.should_start()
        assert not controller.should_stop()

        controller.request_stop()
        assert not controller.should_start()
        assert controller.should_stop()

        controller.release()
        assert not controller.should_stop()

    def test_scheduled_requests(self):
        controller = ScheduledTurbineController(start_at=1.0, stop_at=2.0)
        context = UpdateContext(delta=0.5, ambient_temperature=15.)

        assert not controller.should_start()

        controller.update(context)
        controller.update(context)
        assert controller.should_start()
        assert not controller.should_stop()

        controller.update(context)
        controller.update(context)
        assert controller.should_stop()
        assert not controller.should_start()

    def test_scheduled_never_stops(self):
        controller = ScheduledTurbineController(start_at=0.0, stop_at=None)
        controller.update(UpdateContext(delta=1e6, ambient_temperature=15.))

        assert controller.should_start()
        assert not controller.should_stop()

    def test_stop_before_start_rejected(self):
        with pytest.raises(ValueError):
            ScheduledTurbineController(start_at=10.0, stop_at=5.0)


class TestAuxiliaryPowerUnit:

    def test_full_cycle(self):
        apu = AuxiliaryPowerUnit(ScheduledTurbineController(start_at=0.0, stop_at=100.0))

        trajectory = apu.run(200.0)

        assert len(trajectory) == 4000
        states = list(dict.fromkeys(trajectory['state']))
        assert states == ['STARTING', 'RUNNING', 'STOPPING', 'SHUTDOWN']
        assert trajectory['n'].iloc[-1] == 0.
        assert trajectory['time'].iloc[-1] == pytest.approx(200.0)

    def test_generator_follows_speed(self):
        apu = AuxiliaryPowerUnit(ScheduledTurbineController(start_at=0.0, stop_at=100.0))

        trajectory = apu.run(200.0)

        powered = trajectory[trajectory['n'] >= 84.]
        unpowered = trajectory[trajectory['n'] < 84.]
        assert (powered['potential'] > 0.).all()
        assert (powered['frequency'] > 0.).all()
        assert (unpowered['potential'] == 0.).all()
        assert (unpowered['frequency'] == 0.).all()
        assert not unpowered['powered'].any()

    def test_running_output_normal(self):
        apu = running_apu()

        for _ in range(100):
            snapshot = apu.step()
            assert 114. <= snapshot.potential <= 115.
            assert snapshot.frequency == 400.
            assert snapshot.potential_normal
            assert snapshot.frequency_normal

    def test_emergency_shutdown(self):
        apu = running_apu()

        snapshot = apu.step(is_emergency_shutdown=True)

        assert snapshot.n == 100.
        assert not snapshot.powered
        assert snapshot.potential == 0.

    def test_shutdown_output_not_normal(self):
        apu = AuxiliaryPowerUnit(ManualTurbineController())

        trajectory = apu.run(10.0)

        assert (trajectory['state'] == 'SHUTDOWN').all()
        assert not trajectory['potential_normal'].any()
        assert not trajectory['frequency_normal'].any()

    def test_publishes_telemetry(self):
        apu = running_apu()

        apu.step()

        assert len(apu.telemetry) == 6
        assert apu.telemetry.read("ELEC_APU_GEN_1_FREQUENCY") == 400.

    def test_seeded_runs_reproducible(self):
        config = APUConfig(simulation=SimulationConfig(random_seed=11))
        first = AuxiliaryPowerUnit(ScheduledTurbineController(stop_at=80.0), config).run(150.0, apu_gen_is_used=True)
        second = AuxiliaryPowerUnit(ScheduledTurbineController(stop_at=80.0), config).run(150.0, apu_gen_is_used=True)

        pd.testing.assert_frame_equal(first, second)

    def test_loads_raise_running_egt(self):
        unloaded = AuxiliaryPowerUnit(ManualTurbineController(start=True)).run(150.0)
        loaded = AuxiliaryPowerUnit(ManualTurbineController(start=True)).run(
            150.0, apu_bleed_is_used=True, apu_gen_is_used=True
        )

        assert loaded['egt'].iloc[-1] > unloaded['egt'].iloc[-1] + 50.

    def test_negative_duration_rejected(self):
        apu = AuxiliaryPowerUnit(ManualTurbineController())

        with pytest.raises(ValueError):
            apu.run(-1.0)


class TestConfig:

    def test_defaults_valid(self):
        APUConfig().validate()

    def test_invalid_generator_config(self):
        with pytest.raises(AssertionError):
            GeneratorConfig(jitter_values=[]).validate()

    def test_save_load_roundtrip(self, tmp_path):
        config = APUConfig()
        config.turbine.base_egt = 335.0
        config.generator.jitter_values = [113., 115.]
        config.simulation.ambient_temperature = -10.0
        path = tmp_path / 'apu.yaml'

        config.save(path)
        loaded = APUConfig.load(path)

        assert loaded == config

    def test_partial_file_uses_defaults(self, tmp_path):
        path = tmp_path / 'apu.yaml'
        path.write_text("simulation:\n  dt: 0.1\n")

        loaded = APUConfig.load(path)

        assert loaded.simulation.dt == 0.1
        assert loaded.turbine == APUConfig().turbine


class TestRunApuScript:

    def test_writes_trajectory(self, tmp_path):
        result = main([
            '--duration', '10',
            '--output-dir', str(tmp_path),
            '--save-config',
        ])

        assert result == 0
        trajectory = pd.read_csv(tmp_path / 'apu_trajectory.csv')
        assert len(trajectory) == 200
        assert (tmp_path / 'apu_config.yaml').exists()

    def test_writes_plot(self, tmp_path):
        result = main([
            '--duration', '5',
            '--output-dir', str(tmp_path),
            '--plot',
        ])

        assert result == 0
        assert (tmp_path / 'apu_trajectory.png').exists()
