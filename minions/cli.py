"""
Headless runner.

    minions --ticks 20000 --seed 7 --save-snapshot run.snap --plot run.png
    minions --snapshot run.snap --ticks 5000          # resume
    minions --gene-pool evolved.csv --ticks 10000     # seed with founders
    minions --ticks 20000 --plot-lineages lineages.png
"""

import argparse
import sys
from pathlib import Path
from typing import List, Optional

import structlog

from .config import EcosystemConfig
from .ecosystem import Ecosystem
from .errors import MinionsError
from .genepool import import_gene_pool
from .logging_setup import configure_logging
from .phenotype import minion_layout

logger = structlog.get_logger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="minions",
                                     description="Run the evolving minions ecosystem headless.")
    parser.add_argument("--ticks", type=int, default=10000, help="Ticks to simulate")
    parser.add_argument("--seed", type=int, default=None, help="Random seed (fresh runs only)")
    parser.add_argument("--config", type=Path, default=None, help="JSON config overrides")
    parser.add_argument("--snapshot", type=Path, default=None, help="Resume from this world snapshot")
    parser.add_argument("--reset", action="store_true",
                        help="Ignore --snapshot and start a fresh population")
    parser.add_argument("--save-snapshot", type=Path, default=None, help="Write a snapshot when done")
    parser.add_argument("--gene-pool", type=Path, default=None, help="CSV gene pool of founders")
    parser.add_argument("--export-gene-pool", type=Path, default=None,
                        help="Write the surviving genotypes to a CSV gene pool")
    parser.add_argument("--workers", type=int, default=None, help="Planning threads")
    parser.add_argument("--log-level", default="INFO")
    parser.add_argument("--json-logs", action="store_true", help="Emit JSON log lines")
    parser.add_argument("--plot", type=Path, default=None, help="Save a population plot")
    parser.add_argument("--plot-lineages", type=Path, default=None,
                        help="Save a bar chart of births per lineage")
    return parser


def create_ecosystem(args: argparse.Namespace) -> Ecosystem:
    """Resume from a snapshot or build a fresh ecosystem from the arguments."""
    if args.snapshot is not None and not args.reset:
        if not args.snapshot.exists():
            logger.warning("snapshot_missing", path=str(args.snapshot), action="starting fresh run")
            return _fresh_ecosystem(args)
        eco = Ecosystem.load(args.snapshot)
        if args.seed is not None:
            logger.warning("seed_ignored", reason="resuming from snapshot", seed=args.seed)
        if args.workers is not None:
            eco.config.run.workers = args.workers
            eco.config.validate()
        return eco
    return _fresh_ecosystem(args)


def _fresh_ecosystem(args: argparse.Namespace) -> Ecosystem:
    config = EcosystemConfig.from_json_file(args.config) if args.config else EcosystemConfig()
    if args.seed is not None:
        config.run.seed = args.seed
    if args.workers is not None:
        config.run.workers = args.workers
    config.validate()

    founders = None
    if args.gene_pool is not None:
        pool = import_gene_pool(args.gene_pool, minion_layout(config))
        founders = pool.genotypes or None
    return Ecosystem(config, founders=founders)


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(args.log_level, json_logs=args.json_logs)

    try:
        eco = create_ecosystem(args)
    except (MinionsError, ValueError, OSError) as e:
        logger.error("startup_failed", error=str(e))
        return 1

    with eco:
        logger.info("run_started", tick=eco.world.tick, ticks=args.ticks,
                    minions=len(eco.world.minions), workers=eco.config.run.workers)
        try:
            eco.run(args.ticks)
        except KeyboardInterrupt:
            logger.warning("run_interrupted", tick=eco.world.tick)

        logger.info("run_finished", tick=eco.world.tick, minions=len(eco.world.minions),
                    spores=len(eco.world.spores), extinct=eco.is_extinct)
        for stats in eco.world.lineages.get_dominant_lineages():
            logger.info("lineage", lineage=stats.id, living=stats.living_minions,
                        total_born=stats.total_born, generations=stats.max_generation)

        if args.save_snapshot is not None:
            eco.save(args.save_snapshot)
        if args.export_gene_pool is not None:
            eco.export_gene_pool(args.export_gene_pool)
        if args.plot is not None or args.plot_lineages is not None:
            from .visualization import plot_lineages, plot_population
            if args.plot is not None:
                plot_population(eco.history, save_path=str(args.plot))
            if args.plot_lineages is not None:
                plot_lineages(list(eco.world.lineages.lineages.values()), save_path=str(args.plot_lineages))

    return 0


if __name__ == "__main__":
    sys.exit(main())
