"""
Benchmark driver for the fair exchange.

Runs ``FairExchange`` repeatedly and appends one line per run to
``selling_signature_service_times_<curve>.csv``::

    <S1 ns>, <B1 ns>, <S2 ns>, <B2 ns>

Existing lines are kept, so repeated invocations accumulate samples.

    sigswap-bench --iterations 100 --results-dir out/
"""

from __future__ import annotations

import argparse
import logging
from pathlib import Path
from typing import List, Optional, Sequence

from .config import ExchangeConfig
from .exchange import FairExchange, StepTimings
from .hash import HashSuite, DEFAULT_SUITE

logger = logging.getLogger(__name__)


def run_benchmark(
    config: ExchangeConfig,
    suite: HashSuite = DEFAULT_SUITE,
) -> List[StepTimings]:
    """Run ``config.iterations`` exchanges and append their timings."""
    exchange = FairExchange(config, suite)
    path = config.results_file
    path.parent.mkdir(parents=True, exist_ok=True)

    timings: List[StepTimings] = []
    with open(path, "a", encoding="utf-8") as fh:
        for i in range(config.iterations):
            result = exchange.run()
            fh.write(result.timings.as_row())
            timings.append(result.timings)
            logger.debug("run %d/%d done", i + 1, config.iterations)

    logger.info("appended %d runs to %s", len(timings), path)
    return timings


def _parse_args(argv: Optional[Sequence[str]]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="sigswap-bench",
        description="Time the steps of the notarised-signature exchange.",
    )
    parser.add_argument("--iterations", type=int, default=None,
                        help="number of runs (default: config / 1000)")
    parser.add_argument("--results-dir", type=Path, default=None,
                        help="directory of the timings CSV")
    parser.add_argument("--log-level", default=None,
                        help="DEBUG, INFO, WARNING or ERROR")
    return parser.parse_args(argv)


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = _parse_args(argv)
    overrides = {
        k: v for k, v in (
            ("iterations", args.iterations),
            ("results_dir", args.results_dir),
            ("log_level", args.log_level),
        ) if v is not None
    }
    config = ExchangeConfig.from_env(**overrides)
    logging.basicConfig(
        level=config.level,
        format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
    )
    run_benchmark(config)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
