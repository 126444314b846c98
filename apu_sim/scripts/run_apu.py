#!/usr/bin/env python3
"""
APS3200 APU Scenario Runner.

Runs a start / run / stop cycle of the APU and records the trajectory of
turbine speed, EGT and generator output.

Features:
- Configurable start and stop times, loads and ambient conditions
- Optional YAML configuration file
- CSV trajectory export
- Optional trajectory plot

Usage:
    python -m apu_sim.scripts.run_apu --duration 200 --stop-at 120

    # Loaded APU with custom config
    python -m apu_sim.scripts.run_apu --config apu.yaml --bleed --gen --plot
"""

import argparse
import sys
from pathlib import Path

import matplotlib
matplotlib.use('Agg')
import matplotlib.pyplot as plt
import pandas as pd
from loguru import logger

from apu_sim.simulation.apu import AuxiliaryPowerUnit
from apu_sim.simulation.controller import ScheduledTurbineController
from apu_sim.utils.config import APUConfig
from apu_sim.utils.logging_config import setup_logging


def parse_args(argv=None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description='Run an APS3200 APU start/stop scenario',
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )
    
    parser.add_argument(
        '--config', type=str, default=None,
        help='YAML configuration file'
    )
    parser.add_argument(
        '--duration', type=float, default=200.0,
        help='Simulated duration (s)'
    )
    parser.add_argument(
        '--start-at', type=float, default=0.0,
        help='Time of the start request (s)'
    )
    parser.add_argument(
        '--stop-at', type=float, default=120.0,
        help='Time of the stop request (s), negative for never'
    )
    parser.add_argument(
        '--dt', type=float, default=None,
        help='Time step (s), overrides the configuration'
    )
    parser.add_argument(
        '--ambient', type=float, default=None,
        help='Ambient temperature (°C), overrides the configuration'
    )
    parser.add_argument(
        '--seed', type=int, default=None,
        help='Random seed, overrides the configuration'
    )
    parser.add_argument(
        '--bleed', action='store_true',
        help='Draw bleed air throughout the run'
    )
    parser.add_argument(
        '--gen', action='store_true',
        help='Load the generator throughout the run'
    )
    parser.add_argument(
        '--output-dir', type=str, default='outputs',
        help='Directory for the trajectory and plot'
    )
    parser.add_argument(
        '--plot', action='store_true',
        help='Save a trajectory plot'
    )
    parser.add_argument(
        '--save-config', action='store_true',
        help='Save the effective configuration next to the trajectory'
    )
    parser.add_argument(
        '--log-level', type=str, default='INFO',
        help='Library log level'
    )
    
    return parser.parse_args(argv)


def build_config(args: argparse.Namespace) -> APUConfig:
    """Load the configuration and apply command line overrides."""
    config = APUConfig.load(Path(args.config)) if args.config else APUConfig()
    
    if args.dt is not None:
        config.simulation.dt = args.dt
    if args.ambient is not None:
        config.simulation.ambient_temperature = args.ambient
    if args.seed is not None:
        config.simulation.random_seed = args.seed
    
    config.validate()
    return config


def plot_trajectory(trajectory: pd.DataFrame, save_path: Path) -> None:
    """Plot speed, EGT and generator output over time.
    
    Args:
        trajectory: Trajectory from ``AuxiliaryPowerUnit.run``
        save_path: Path of the PNG file
    """
    fig, axes = plt.subplots(3, 1, figsize=(12, 10), sharex=True)
    
    axes[0].plot(trajectory['time'], trajectory['n'], color='#1f77b4')
    axes[0].set_ylabel('N (%)', fontsize=10, fontweight='bold')
    axes[0].set_title('APS3200 APU Trajectory', fontsize=12, fontweight='bold')
    
    axes[1].plot(trajectory['time'], trajectory['egt'], color='#d62728')
    axes[1].set_ylabel('EGT (°C)', fontsize=10, fontweight='bold')
    
    axes[2].plot(trajectory['time'], trajectory['potential'], label='Potential (V)', color='#2ca02c')
    axes[2].plot(trajectory['time'], trajectory['frequency'], label='Frequency (Hz)', color='#ff7f0e')
    axes[2].set_ylabel('Generator', fontsize=10, fontweight='bold')
    axes[2].set_xlabel('Time (s)', fontsize=10, fontweight='bold')
    axes[2].legend(loc='upper right')
    
    for ax in axes:
        ax.grid(True, alpha=0.3)
    
    plt.savefig(save_path, dpi=150, bbox_inches='tight')
    plt.close(fig)


def main(argv=None) -> int:
    """Main scenario workflow."""
    args = parse_args(argv)
    
    config = build_config(args)
    setup_logging(log_dir=config.simulation.log_dir, level=args.log_level)
    
    output_dir = Path(args.output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)
    
    stop_at = args.stop_at if args.stop_at >= 0 else None
    controller = ScheduledTurbineController(start_at=args.start_at, stop_at=stop_at)
    apu = AuxiliaryPowerUnit(controller, config)
    
    logger.info(
        f"Running APU scenario: duration={args.duration}s, start={args.start_at}s, "
        f"stop={stop_at}s, bleed={args.bleed}, gen={args.gen}"
    )
    
    trajectory = apu.run(
        args.duration,
        apu_bleed_is_used=args.bleed,
        apu_gen_is_used=args.gen,
    )
    
    trajectory_path = output_dir / 'apu_trajectory.csv'
    trajectory.to_csv(trajectory_path, index=False)
    logger.info(f"Saved trajectory to {trajectory_path}")
    
    if args.save_config:
        config_path = output_dir / 'apu_config.yaml'
        config.save(config_path)
        logger.info(f"Saved configuration to {config_path}")
    
    if args.plot:
        plot_path = output_dir / 'apu_trajectory.png'
        plot_trajectory(trajectory, plot_path)
        logger.info(f"Saved plot to {plot_path}")
    
    if len(trajectory):
        final = trajectory.iloc[-1]
        logger.success(
            f"Final state {final['state']}: N={final['n']:.2f}%, EGT={final['egt']:.1f}°C, "
            f"potential={final['potential']:.1f}V, frequency={final['frequency']:.1f}Hz"
        )
    
    return 0


if __name__ == '__main__':
    sys.exit(main())
