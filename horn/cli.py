"""Command-line interface for the horn profile generator.

Usage:
    horn run config.yaml [--output-dir DIR] [--verbose]
    horn example [--type exponential] [--plot]
    horn list
"""

import argparse
import json
import logging
from pathlib import Path

import numpy as np
import matplotlib
matplotlib.use('Agg')  # Non-interactive backend
import matplotlib.pyplot as plt

from horn.analysis import profile_summary
from horn.config import load_config, build_horn_spec
from horn.plots import (
    plot_profile, plot_profile_comparison, plot_shape_transition,
)
from horn.registry import default_registry


def main(args=None):
    parser = argparse.ArgumentParser(
        prog='horn',
        description='Acoustic horn profile generator',
    )
    parser.add_argument('--verbose', '-v', action='store_true',
                        help='Log generation details')
    subparsers = parser.add_subparsers(dest='command')

    # --- run command ---
    run_parser = subparsers.add_parser('run', help='Run from config file')
    run_parser.add_argument('config', type=str, help='YAML config file')
    run_parser.add_argument('--output-dir', '-o', default=None,
                            help='Output directory (default: ./output)')

    # --- example command ---
    example_parser = subparsers.add_parser(
        'example', help='Compare all profile types on the default horn')
    example_parser.add_argument('--type', default=None,
                                help='Only this profile type')
    example_parser.add_argument('--plot', action='store_true',
                                help='Show plots interactively')

    # --- list command ---
    subparsers.add_parser('list', help='List available profile types')

    parsed = parser.parse_args(args)

    if parsed.verbose:
        logging.basicConfig(level=logging.DEBUG,
                            format='%(name)s %(levelname)s: %(message)s')

    registry = default_registry()
    if parsed.command == 'run':
        return cmd_run(parsed, registry)
    elif parsed.command == 'example':
        return cmd_example(parsed, registry)
    elif parsed.command == 'list':
        for name in registry.list():
            print(name)
        return 0
    else:
        parser.print_help()
        return 1


def cmd_run(args, registry):
    """Generate every horn in a YAML config file."""
    config_path = Path(args.config)
    if not config_path.exists():
        print(f"Error: config file not found: {config_path}")
        return 1

    output_dir = Path(args.output_dir) if args.output_dir else Path('output')
    output_dir.mkdir(parents=True, exist_ok=True)

    try:
        spec = load_config(config_path)
    except ValueError as e:
        print(f"Error: {e}")
        return 1
    outputs = spec['outputs']

    results = {}
    failed = False
    for name, cfg in spec['configs'].items():
        try:
            profile_type, params = build_horn_spec(cfg)
            generator = registry.create_instance(profile_type)
            result = generator.generate(params)
        except (KeyError, ValueError) as e:
            print(f"  {name}: {e}")
            failed = True
            continue
        results[name] = result
        _report(name, result)
        _write_outputs(name, result, output_dir, outputs)

    if 'summary' in outputs and results:
        summary = {name: profile_summary(r) for name, r in results.items()}
        json_path = output_dir / 'summary.json'
        with open(json_path, 'w') as f:
            json.dump(summary, f, indent=2)
        print(f"Saved summary to {json_path}")

    for i, names in enumerate(spec['comparisons']):
        selected = [(results[n], n) for n in names if n in results]
        if len(selected) < 2:
            continue
        fig, _ = plot_profile_comparison(selected)
        path = output_dir / f'comparison_{i + 1}.png'
        fig.savefig(path, dpi=150, bbox_inches='tight')
        plt.close(fig)
        print(f"Saved comparison to {path}")

    return 1 if failed else 0


def _report(name, result):
    values = result.metadata.calculated_values
    pts = result.points
    line = (f"  {name} ({result.metadata.profile_type}): {len(pts)} pts, "
            f"r {pts.y[0]:.1f} → {pts.y[-1]:.1f} mm over {pts.x[-1]:.1f} mm")
    for key in ('flareAngle', 'flareConstant', 'tractrixParameter'):
        if key in values:
            line += f", {key}={values[key]:.4g}"
            break
    print(line)


def _write_profile_csv(path, name, result):
    """Write profile coordinates to CSV.

    Adds half-width, half-height and morphing-factor columns when the
    generator produced them.
    """
    columns = [result.points.x, result.points.y]
    header = ['x_mm', 'r_mm']
    if result.width_profile is not None:
        columns += [result.width_profile.y, result.height_profile.y]
        header += ['half_width_mm', 'half_height_mm']
    if result.shape_profile is not None:
        columns.append([sp.morphing_factor for sp in result.shape_profile])
        header.append('morphing_factor')

    params = result.metadata.parameters
    comment = (f"{name} horn profile\n"
               f"type={result.metadata.profile_type} "
               f"length={params.length} resolution={params.resolution}\n"
               + ','.join(header))
    np.savetxt(path, np.column_stack(columns), delimiter=',', fmt='%.8f',
               header=comment)


def _write_outputs(name, result, output_dir, outputs):
    if 'profile' in outputs:
        _write_profile_csv(output_dir / f'{name}_profile.csv', name, result)
    if 'plot' in outputs:
        fig, _ = plot_profile(result, label=name,
                              title=f"{name} Horn Profile")
        fig.savefig(output_dir / f'{name}_profile.png', dpi=150,
                    bbox_inches='tight')
        plt.close(fig)
        if result.shape_profile is not None:
            fig, _ = plot_shape_transition(result)
            fig.savefig(output_dir / f'{name}_transition.png', dpi=150,
                        bbox_inches='tight')
            plt.close(fig)


def cmd_example(args, registry):
    """Generate the default horn with each profile family."""
    names = [args.type] if args.type else registry.list()
    results = []
    print("Horn Profile Comparison (default parameters)")
    for name in names:
        try:
            generator = registry.create_instance(name)
        except KeyError as e:
            print(f"Error: {e.args[0]}")
            return 1
        result = generator.generate(generator.get_defaults())
        _report(name, result)
        results.append((result, name))

    if args.plot:
        matplotlib.use('TkAgg')
        plot_profile_comparison(results)
        plt.show()

    return 0
