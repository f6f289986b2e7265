"""
Command-line interface for the luckyfive prediction engine.

Subcommands:
    predict   propose combinations for the next contest
    backtest  replay a contest range and report hit statistics
    sweep     expand a sweep file into parameter variations
"""
import argparse
import json
import sys
import threading
from dataclasses import asdict

import yaml

from .backtest import run_backtest
from .data_loader import load_draw_history
from .infrastructure.config import get_config_manager
from .infrastructure.logging import configure_logging, get_logger
from .prediction_engine import generate
from .sweep import SweepConfig, expand_sweep
from .utils.error_handling import InvalidConfigurationError, LuckyFiveError, safe_file_operation

logger = get_logger(__name__)


def create_cli_parser() -> argparse.ArgumentParser:
    """Create command-line argument parser."""
    parser = argparse.ArgumentParser(
        description="Heuristic candidate generation and backtesting for Quina (5 of 80)",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  luckyfive predict --data-path data/raw/quina.csv --num-predictions 10 --seed 42
  luckyfive backtest --start 6000 --end 6100 --plot outputs/hits.png
  luckyfive sweep sweeps/alpha_beta.yml
        """
    )
    parser.add_argument('--env', help='Configuration environment (config/<env>.yml)')
    parser.add_argument('--config', help='Path to a configuration YAML file')
    parser.add_argument('--verbose', action='store_true', help='Enable debug logging')

    sub = parser.add_subparsers(dest='command', required=True)

    predict = sub.add_parser('predict', help='Generate predictions for the next contest')
    predict.add_argument('--data-path', help='History CSV/XLSX file')
    predict.add_argument('--num-predictions', type=int, help='Number of combinations to return')
    predict.add_argument('--seed', type=int, help='RNG seed (0 = from clock)')
    predict.add_argument('--smart-filters', action='store_true', help='Enable topological filters')
    predict.add_argument('--json', action='store_true', help='Print predictions as JSON')

    backtest = sub.add_parser('backtest', help='Replay a contest range')
    backtest.add_argument('--data-path', help='History CSV/XLSX file')
    backtest.add_argument('--start', type=int, help='First contest to predict')
    backtest.add_argument('--end', type=int, help='Last contest to predict')
    backtest.add_argument('--seed', type=int, help='Base RNG seed')
    backtest.add_argument('--plot', help='Save a hit chart to this path')
    backtest.add_argument('--no-progress', action='store_true', help='Hide the progress bar')

    sweep = sub.add_parser('sweep', help='Expand a sweep file into parameter variations')
    sweep.add_argument('sweep_file', help='YAML file describing the sweep')

    return parser


def _engine_params(config, args):
    overrides = {}
    if getattr(args, 'num_predictions', None) is not None:
        overrides['num_predictions'] = args.num_predictions
    if getattr(args, 'seed', None) is not None:
        overrides['seed'] = args.seed
    if getattr(args, 'smart_filters', False):
        overrides['use_smart_filters'] = True
    return config['engine'].with_overrides(**overrides).validate()


def cmd_predict(config, args, cancel_event) -> int:
    params = _engine_params(config, args)
    data_path = args.data_path or config['backtest'].data_path
    draws = load_draw_history(data_path, params.pick_count, params.max_num)
    history = [d.numbers for d in draws][-params.max_history:]

    predictions = generate(history, params, cancel_event=cancel_event,
                           search=config['search'], filters=config['filters'])

    next_contest = draws[-1].contest + 1 if draws else 1
    if args.json:
        print(json.dumps({
            'contest': next_contest,
            'seed': predictions.seed,
            'predictions': predictions.to_lists(),
        }))
        return 0

    print(f"\nPredictions for contest {next_contest} (seed {predictions.seed}):")
    for i, (combo, fitness) in enumerate(zip(predictions, predictions.fitness), start=1):
        print(f"  {i:2d}. {' '.join(f'{n:02d}' for n in combo)}   fitness {fitness:.4f}")
    return 0


def cmd_backtest(config, args, cancel_event) -> int:
    params = _engine_params(config, args)
    settings = config['backtest']
    draws = load_draw_history(args.data_path or settings.data_path, params.pick_count, params.max_num)

    start = args.start or settings.start_contest or draws[0].contest + 1
    end = args.end or settings.end_contest or draws[-1].contest
    result = run_backtest(
        draws, start, end, params,
        search=config['search'], filters=config['filters'],
        cancel_event=cancel_event,
        show_progress=settings.show_progress and not args.no_progress,
    )

    summary = result.summary
    print("\n" + "=" * 60)
    print("BACKTEST COMPLETED")
    print("=" * 60)
    print(f"Contests: {summary.total_contests} ({start}-{end})")
    print(f"Average best hits: {summary.average_hits:.3f}")
    print(f"Quina:  {summary.quina_hits} ({summary.hit_rate_quina:.2%})")
    print(f"Quadra: {summary.quadra_hits} ({summary.hit_rate_quadra:.2%})")
    print(f"Terno:  {summary.terno_hits} ({summary.hit_rate_terno:.2%})")
    print(f"Duration: {result.duration_ms} ms")

    plot_path = args.plot or settings.plot_path
    if plot_path and result.contest_results:
        from .visualization import plot_backtest_hits
        print(f"Chart saved to: {plot_backtest_hits(result, plot_path)}")
    return 0


def cmd_sweep(config, args, cancel_event) -> int:
    with safe_file_operation(args.sweep_file, "read"):
        with open(args.sweep_file, 'r', encoding='utf-8') as f:
            try:
                data = yaml.safe_load(f) or {}
            except yaml.YAMLError as e:
                raise InvalidConfigurationError(f"Malformed sweep file {args.sweep_file}: {e}") from e
    if not isinstance(data, dict):
        raise InvalidConfigurationError(f"Sweep file {args.sweep_file} must contain a mapping.")

    data.setdefault('base_params', {})
    base = {**asdict(config['engine']), **data['base_params']}
    data['base_params'] = base
    variations = expand_sweep(SweepConfig.from_dict(data))

    print(f"Sweep '{data.get('name')}' expanded to {len(variations)} variations")
    for i, params in enumerate(variations):
        changed = {k: v for k, v in asdict(params).items() if v != asdict(config['engine']).get(k)}
        print(f"  {i:3d}: {changed}")
    return 0


COMMANDS = {
    'predict': cmd_predict,
    'backtest': cmd_backtest,
    'sweep': cmd_sweep,
}


def main(argv=None) -> int:
    """Main entry point for CLI."""
    parser = create_cli_parser()
    args = parser.parse_args(argv)

    try:
        manager = get_config_manager(args.env, args.config)
        config = manager.load_config()
        log_settings = config['logging']
        configure_logging(
            log_level="DEBUG" if args.verbose else log_settings.level,
            log_file=log_settings.log_file,
            log_format=log_settings.format,
            output_dir=log_settings.output_dir,
        )
        cancel_event = threading.Event()
        return COMMANDS[args.command](config, args, cancel_event)

    except KeyboardInterrupt:
        print("\nInterrupted by user")
        return 130
    except LuckyFiveError as e:
        print(f"Error: {e}", file=sys.stderr)
        if args.verbose:
            logger.exception("Command failed")
        return 1


if __name__ == "__main__":
    sys.exit(main())
