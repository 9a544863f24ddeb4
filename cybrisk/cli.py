#!/usr/bin/env python3
"""
CybRisk - Command Line Interface
Run FAIR assessments and scenario comparisons from YAML/JSON payloads.

Usage:
    cybrisk assess company.yaml --seed 42
    cybrisk compare base.yaml hardened.yaml --format json
    cybrisk industries
    cybrisk init-config
"""

import argparse
import json
import sys
from typing import Optional, Sequence

import yaml

from . import __version__
from .config import config
from .logger import get_logger
from .lookup_tables import rank_industries, scale_bar
from .loss_statistics import format_currency
from .models import AssessmentInputs, InvalidAssessmentError, SimulationResults
from .paths import paths
from .rng import make_rng
from .scenarios import ScenarioComparison, compare_scenarios
from .simulation import simulate

logger = get_logger('cli')

EXIT_OK = 0
EXIT_INVALID_INPUT = 1
EXIT_USAGE = 2

BAR_WIDTH = 40


def load_inputs(path: str) -> AssessmentInputs:
    """Read a camelCase assessment payload (YAML or JSON) from disk."""
    try:
        with open(path, 'r', encoding='utf-8') as f:
            payload = yaml.safe_load(f)
    except OSError as e:
        raise InvalidAssessmentError(f"Cannot read {path}: {e.strerror or e}") from None
    except UnicodeDecodeError as e:
        raise InvalidAssessmentError(f"Cannot decode {path}: {e}") from None
    except yaml.YAMLError as e:
        raise InvalidAssessmentError(f"Cannot parse {path}: {e}") from None

    if not isinstance(payload, dict):
        raise InvalidAssessmentError(f"{path} does not contain an assessment mapping")
    return AssessmentInputs.from_dict(payload)


# ---------------------------------------------------------------------------
# Output
# ---------------------------------------------------------------------------

def print_results(results: SimulationResults, title: str = 'FAIR RISK ASSESSMENT'):
    ale = results.ale
    benchmark = results.industry_benchmark

    print("\n" + "=" * 70)
    print(title)
    print("=" * 70)
    print(f"\n  Risk Rating:        {results.risk_rating.value}")
    print(f"  ALE (mean):         {format_currency(ale.mean)}")
    print(f"  ALE (median):       {format_currency(ale.median)}")
    print(f"  ALE range (p10-p90): {format_currency(ale.p10)} - {format_currency(ale.p90)}")
    print(f"  PML (p95):          {format_currency(ale.p95)}")
    print(f"  Gordon-Loeb spend:  {format_currency(results.gordon_loeb_spend)}/year")
    print(f"  Industry median:    {format_currency(benchmark.industry_median)} "
          f"(percentile rank {benchmark.percentile_rank})")

    if results.key_drivers:
        print("\n  KEY DRIVERS")
        for driver in results.key_drivers:
            print(f"    [{driver.impact.value:<6}] {driver.factor}: {driver.description}")

    if results.recommendations:
        print("\n  RECOMMENDATIONS")
        for i, rec in enumerate(results.recommendations, 1):
            print(f"    {i}. {rec}")

    print("\n" + "=" * 70)


def print_comparison(comparison: ScenarioComparison):
    base, modified = comparison.base, comparison.modified
    savings = comparison.savings

    print("\n" + "=" * 70)
    print("SCENARIO COMPARISON")
    print("=" * 70)
    print(f"\n  {'':<20}{'Base':>15}{'Modified':>15}{'Savings':>15}")
    print(f"  {'ALE (mean)':<20}{format_currency(base.ale.mean):>15}"
          f"{format_currency(modified.ale.mean):>15}{format_currency(savings.ale_mean):>15}")
    print(f"  {'PML (p95)':<20}{format_currency(base.ale.p95):>15}"
          f"{format_currency(modified.ale.p95):>15}{format_currency(savings.ale_pml95):>15}")
    print(f"  {'Gordon-Loeb spend':<20}{format_currency(base.gordon_loeb_spend):>15}"
          f"{format_currency(modified.gordon_loeb_spend):>15}"
          f"{format_currency(savings.gordon_loeb):>15}")
    print(f"  {'Risk rating':<20}{base.risk_rating.value:>15}{modified.risk_rating.value:>15}")
    if comparison.delta.risk_rating_changed:
        print("\n  Risk rating changed between scenarios.")
    print("\n" + "=" * 70)


def print_industries():
    ranking = rank_industries()
    top = ranking[0][1] if ranking else 0.0

    print("\n" + "=" * 70)
    print("AVERAGE BREACH COST BY INDUSTRY (IBM 2025, $M)")
    print("=" * 70)
    for industry, cost in ranking:
        width = int(round(scale_bar(cost, top) / 100 * BAR_WIDTH))
        print(f"  {industry.value:<16}{cost:>6.2f}  {'#' * width}")
    print("=" * 70)


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='cybrisk',
        description='CybRisk - FAIR cyber loss Monte Carlo engine'
    )
    parser.add_argument('--version', action='version', version=f'%(prog)s {__version__}')

    subparsers = parser.add_subparsers(dest='command', help='Command')

    # Single assessment
    assess_parser = subparsers.add_parser('assess', help='Simulate one assessment')
    assess_parser.add_argument('input', help='Assessment payload (YAML or JSON)')
    _add_run_options(assess_parser)
    assess_parser.add_argument('--include-raw-losses', action='store_true',
                               default=None, help='Include every trial loss in JSON output')

    # Scenario comparison
    compare_parser = subparsers.add_parser('compare', help='Compare two scenarios')
    compare_parser.add_argument('base', help='Base assessment payload')
    compare_parser.add_argument('modified', help='Modified assessment payload')
    _add_run_options(compare_parser)

    # Industry table
    subparsers.add_parser('industries', help='Show industry breach cost ranking')

    # Config file
    subparsers.add_parser('init-config', help='Write the default configuration file')

    return parser


def _add_run_options(subparser: argparse.ArgumentParser):
    subparser.add_argument('--iterations', '-n', type=int, default=None,
                           help='Trials per simulation (default from config)')
    subparser.add_argument('--seed', type=int, default=None,
                           help='Seed for the deterministic LCG source')
    subparser.add_argument('--format', choices=('text', 'json'), default='text',
                           help='Output format (default: text)')


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Main entry point"""
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return EXIT_USAGE

    if args.command == 'industries':
        print_industries()
        return EXIT_OK

    if args.command == 'init-config':
        config.save()
        print(f"Configuration written to {paths.config_active}")
        return EXIT_OK

    if args.iterations is not None:
        max_iterations = config.get_max_iterations()
        if args.iterations < 0 or args.iterations > max_iterations:
            logger.error(f"Rejected iteration count {args.iterations}")
            parser.error(f"--iterations must be between 0 and {max_iterations:,}")

    rng = make_rng(args.seed)

    try:
        if args.command == 'assess':
            inputs = load_inputs(args.input)
            results = simulate(inputs, args.iterations, rng)

            if args.format == 'json':
                include_raw = args.include_raw_losses
                if include_raw is None:
                    include_raw = bool(config.get('output.include_raw_losses', False))
                print(json.dumps(results.to_dict(include_raw), indent=2))
            else:
                print_results(results)

        elif args.command == 'compare':
            base = load_inputs(args.base)
            modified = load_inputs(args.modified)
            comparison = compare_scenarios(base, modified, args.iterations, rng)

            if args.format == 'json':
                print(json.dumps(comparison.to_dict(), indent=2))
            else:
                print_comparison(comparison)

    except InvalidAssessmentError as e:
        logger.error(f"Rejected assessment input: {e}")
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_INVALID_INPUT

    return EXIT_OK


if __name__ == '__main__':
    sys.exit(main())
