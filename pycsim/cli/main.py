from __future__ import annotations
import argparse
import sys
from ..cache.address import AddressDecoder
from ..config import ConfigError, SimConfig
from ..runtime.simulator import run as run_sim
from ..utils.logging import set_verbosity
from ..utils.reporting import format_config, generate_report, print_summary

EXAMPLES = """\
Examples:
  pycsim run -s 4 -E 1 -b 4 -t traces/yi.trace
  pycsim run -v -s 8 -E 2 -b 4 -p LFU -t traces/yi.trace
  pycsim decode -s 4 -b 4 0x7ff000398
"""


def cmd_run(args):
    """Handles the 'run' command."""
    try:
        config = SimConfig.from_args(args)
    except ConfigError as e:
        print(f"Invalid configuration: {e}", file=sys.stderr)
        return 2

    set_verbosity(config.verbose)
    if config.verbose:
        print(format_config(config), file=sys.stderr)

    def echo(result):
        print(result.verbose_line())

    try:
        results, stats, model = run_sim(
            config,
            on_access=echo if config.verbose else None,
            keep_results=bool(config.report_dir),
        )
    except FileNotFoundError:
        print(f"\"{config.trace}\" does not exist.", file=sys.stderr)
        return 1
    except OSError as e:
        print(f"\"{config.trace}\" cannot be read: {e.strerror or e}", file=sys.stderr)
        return 1

    if config.report_dir:
        generate_report(results, config, stats, model.set_stats)

    print_summary(stats)
    return 0


def cmd_decode(args):
    """Handles the 'decode' command."""
    try:
        decoder = AddressDecoder(args.sbits, args.bbits)
    except ValueError as e:
        print(f"Invalid configuration: {e}", file=sys.stderr)
        return 2

    for text in args.addresses:
        try:
            address = int(text, 16)
        except ValueError:
            print(f"Not a hex address: {text}", file=sys.stderr)
            return 2
        tag, set_index, offset = decoder.decode(address)
        print(f"{address:#x}: tag={tag:#x} set={set_index} offset={offset}")
    return 0


def build_parser():
    p = argparse.ArgumentParser(
        prog="pycsim",
        description="Set-associative cache simulator for valgrind memory traces",
        epilog=EXAMPLES,
        formatter_class=argparse.RawDescriptionHelpFormatter
    )
    sub = p.add_subparsers(dest="cmd", required=True)

    # --- Run Command ---
    pr = sub.add_parser("run", help="Replay a trace and print hit/miss/eviction counts",
                        epilog=EXAMPLES,
                        formatter_class=argparse.RawDescriptionHelpFormatter)

    # Config file
    pr.add_argument("-c", "--config", type=str, default=None,
                    help="Path to YAML config file to override defaults")

    # Core args (set default=None to allow override from YAML)
    pr.add_argument("-v", "--verbose", action="store_true", default=None,
                    help="Print the arguments and annotate every trace line")
    pr.add_argument("-s", "--sbits", type=int, default=None,
                    help="Number of set index bits (default 8)")
    pr.add_argument("-E", "--perset", type=int, default=None,
                    help="Number of lines per set (default 1)")
    pr.add_argument("-b", "--bbits", type=int, default=None,
                    help="Number of block offset bits (default 8)")
    pr.add_argument("-p", "--policy", type=str, default=None,
                    help="Eviction policy: LRU or LFU (0 and 1 are accepted too)")
    pr.add_argument("-t", "--trace", type=str, default=None,
                    help="Valgrind trace to replay (default traces/dave.trace)")
    pr.add_argument("--report", type=str, default=None, dest="report_dir",
                    help="Directory to save report.json and report.html")
    pr.set_defaults(func=cmd_run)

    # --- Decode Command ---
    pd_ = sub.add_parser("decode", help="Show the tag, set and offset of addresses")
    pd_.add_argument("-s", "--sbits", type=int, default=8, help="Number of set index bits")
    pd_.add_argument("-b", "--bbits", type=int, default=8, help="Number of block offset bits")
    pd_.add_argument("addresses", nargs="+", help="Hex addresses, with or without 0x")
    pd_.set_defaults(func=cmd_decode)

    return p


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
