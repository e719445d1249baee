"""
Command line interface.

Usage:
    olsbench report --n 10000000 --times 10 --output report.html
    olsbench bench --n 100000 --methods lm,crossprod,jit --unit ms
    olsbench check --n 100000
    olsbench methods
"""

from __future__ import annotations

import argparse
import sys

from olsbench import __version__
from olsbench.benchmark import CONTROLS, microbenchmark
from olsbench.core.compute.environment import get_environment_info
from olsbench.core.exceptions import OlsBenchError
from olsbench.data import DEFAULT_N, DEFAULT_SEED, SMALL_N, simulate
from olsbench.methods import available_methods, get_method
from olsbench.report import TutorialConfig, build_tutorial, write_report
from olsbench.report.plotting import plot_timings, save_figure
from olsbench.report.tutorial import agreement_table


def _method_list(value: str) -> tuple[str, ...]:
    names = tuple(v.strip() for v in value.split(',') if v.strip())
    if not names:
        raise argparse.ArgumentTypeError("no methods given")
    for name in names:
        try:
            get_method(name)
        except ValueError as e:
            raise argparse.ArgumentTypeError(str(e)) from None
    return names


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='olsbench',
        description='Benchmark ways of computing least-squares coefficients',
    )
    parser.add_argument('--version', action='version', version=f'%(prog)s {__version__}')
    sub = parser.add_subparsers(dest='command', required=True)

    all_methods = ','.join(m.name for m in available_methods())

    report = sub.add_parser('report', help='Run the tutorial and write the HTML report')
    report.add_argument('--n', type=int, default=DEFAULT_N, help='Main sample size')
    report.add_argument('--small-n', type=int, default=SMALL_N, help='Small-sample aside size')
    report.add_argument('--times', type=int, default=10, help='Evaluations per expression')
    report.add_argument('--small-times', type=int, default=100,
                        help='Evaluations per expression on the small sample')
    report.add_argument('--seed', type=int, default=DEFAULT_SEED)
    report.add_argument('--control', choices=CONTROLS, default='random')
    report.add_argument('--methods', type=_method_list, default=_method_list(all_methods),
                        help='Comma-separated method names')
    report.add_argument('--output', '-o', default='olsbench_report.html')

    bench = sub.add_parser('bench', help='Time methods and print the summary table')
    bench.add_argument('--n', type=int, default=1_000_000)
    bench.add_argument('--times', type=int, default=20)
    bench.add_argument('--warmup', type=int, default=2)
    bench.add_argument('--seed', type=int, default=DEFAULT_SEED)
    bench.add_argument('--control', choices=CONTROLS, default='random')
    bench.add_argument('--methods', type=_method_list, default=_method_list(all_methods))
    bench.add_argument('--unit', choices=('ns', 'us', 'ms', 's'), default=None)
    bench.add_argument('--relative', action='store_true',
                       help='Report each statistic relative to the fastest method')
    bench.add_argument('--plot', default=None, help='Also save a violin plot to this path')

    check = sub.add_parser('check', help='Compare every method against the full fit')
    check.add_argument('--n', type=int, default=100_000)
    check.add_argument('--seed', type=int, default=DEFAULT_SEED)
    check.add_argument('--methods', type=_method_list, default=_method_list(all_methods))

    sub.add_parser('methods', help='List registered methods')

    return parser


def _cmd_report(args: argparse.Namespace) -> int:
    config = TutorialConfig(
        n=args.n,
        small_n=args.small_n,
        times=args.times,
        small_times=args.small_times,
        seed=args.seed,
        control=args.control,
        methods=args.methods,
    )
    tutorial = build_tutorial(config, progress=print)
    path = write_report(tutorial, args.output)
    print(f"Report written to {path}")
    return 0


def _cmd_bench(args: argparse.Namespace) -> int:
    sample = simulate(args.n, seed=args.seed)
    print(f"n={sample.n:,}, {args.times} evaluations per method, control={args.control}")
    result = microbenchmark(
        *[get_method(name) for name in args.methods],
        data=sample,
        times=args.times,
        warmup=args.warmup,
        control=args.control,
        seed=args.seed,
    )
    print(result.table(unit=args.unit, relative=args.relative))
    if args.plot:
        path = save_figure(plot_timings(result, title=f"n = {sample.n:,}"), args.plot)
        print(f"Plot written to {path}")
    return 0


def _cmd_check(args: argparse.Namespace) -> int:
    sample = simulate(args.n, seed=args.seed)
    table = agreement_table(sample, args.methods)
    print(table.to_string(index=False, float_format=lambda v: f"{v:.12g}"))
    failed = table.loc[~table['agrees'], 'method'].tolist()
    if failed:
        print(f"DISAGREE: {', '.join(failed)}")
        return 1
    print("All methods agree with the full fit.")
    return 0


def _cmd_methods(args: argparse.Namespace) -> int:
    print(get_environment_info())
    print()
    for m in available_methods():
        print(f"[{m.step}] {m.name:<17} {m.label}")
        for line in m.expression.splitlines():
            print(f"      {line}")
    return 0


_COMMANDS = {
    'report': _cmd_report,
    'bench': _cmd_bench,
    'check': _cmd_check,
    'methods': _cmd_methods,
}


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    try:
        return _COMMANDS[args.command](args)
    except OlsBenchError as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return 1


if __name__ == '__main__':
    sys.exit(main())
