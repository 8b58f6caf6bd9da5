"""
Command line argument parsing and validation for the dStruct pipeline.
"""

import argparse
import os
from dataclasses import dataclass
from typing import List, Optional

from dstruct.domain.models import DStructConfig
from dstruct.infrastructure.logger import Logger


@dataclass
class RunOptions:
    """Input/output options of a command line run"""

    data_file: str
    out_dir: str
    sample_name: str
    mode: str
    id_column: str
    within_combs_file: Optional[str]
    between_combs_file: Optional[str]
    log_file: Optional[str]
    verbose: bool


class ArgumentParser:
    """Command line argument parsing and validation"""

    def __init__(self):
        self.logger = Logger()
        self.parser = self._create_parser()

    def _create_parser(self) -> argparse.ArgumentParser:
        """Create and configure the argument parser"""
        parser = argparse.ArgumentParser(
            description="Identify differentially reactive regions from RNA structurome profiling data"
        )

        # Required arguments
        parser.add_argument(
            "-d", "--data_file",
            type=str,
            required=True,
            help="CSV/TSV of reactivities with an id column and replicate columns A1.., B1..",
        )
        parser.add_argument(
            "-o", "--out_dir",
            type=str,
            required=True,
            help="Output directory for saving results",
        )
        parser.add_argument(
            "-s", "--sample_name",
            type=str,
            required=True,
            help="Sample name used to prefix output files",
        )

        # Design
        parser.add_argument(
            "-a", "--reps_A",
            type=int,
            help="Number of replicates of group A (default: inferred from columns)",
        )
        parser.add_argument(
            "-b", "--reps_B",
            type=int,
            help="Number of replicates of group B (default: inferred from columns)",
        )
        parser.add_argument(
            "--batches",
            action="store_true",
            help="Replicates with the same number (A1/B1, A2/B2, ...) were prepared in the same batch",
        )
        parser.add_argument(
            "--within_combs",
            type=str,
            help="Header-less CSV, one within-group combination per column",
        )
        parser.add_argument(
            "--between_combs",
            type=str,
            help="Header-less CSV, one between-group combination per column",
        )

        # Discovery and testing
        parser.add_argument(
            "-m", "--mode",
            choices=["denovo", "guided"],
            default="denovo",
            help="denovo: scan whole transcripts; guided: each id is a user-defined region (default: denovo)",
        )
        parser.add_argument(
            "-l", "--min_length",
            type=int,
            default=11,
            help="Minimum length of a discovered region in nucleotides (default: 11)",
        )
        parser.add_argument(
            "-q", "--quality",
            type=float,
            help="Worst allowed mean within-group d-score (default: 0.5 with replicates in both groups, else 0.2)",
        )
        parser.add_argument(
            "-e", "--evidence",
            type=float,
            default=0.0,
            help="Minimum median increase of between- over within-group d-score (default: 0)",
        )
        parser.add_argument(
            "--no_quality_check",
            action="store_true",
            help="Test regions regardless of their within-group d-scores",
        )
        parser.add_argument(
            "--check_signal_strength",
            action="store_true",
            help="Skip units where no replicate of a group reaches the signal strength",
        )
        parser.add_argument(
            "--signal_strength",
            type=float,
            default=0.1,
            help="Minimum median reactivity of a replicate (default: 0.1)",
        )
        parser.add_argument(
            "--collective",
            action="store_true",
            help="Test the regions of each transcript jointly instead of individually",
        )

        # Execution
        parser.add_argument(
            "-p", "--processes",
            type=int,
            default=1,
            help="Number of worker processes (default: 1)",
        )
        parser.add_argument(
            "--id_column",
            type=str,
            default="transcript",
            help="Column naming the transcript or region of each row (default: transcript)",
        )
        parser.add_argument(
            "--log_file",
            type=str,
            help="Also write the log to this file",
        )
        parser.add_argument(
            "-v", "--verbose",
            action="store_true",
            help="Log per-transcript details",
        )

        return parser

    def parse_arguments(self, argv: Optional[List[str]] = None):
        """
        Parse command line arguments.

        Replicate counts left unset are returned as 0 and inferred from the
        data by the caller.

        Returns:
            Tuple[DStructConfig, RunOptions]: Run configuration and I/O options
        """
        args = self.parser.parse_args(argv)

        config = DStructConfig(
            reps_A=args.reps_A or 0,
            reps_B=args.reps_B or 0,
            batches=args.batches,
            min_length=args.min_length,
            quality=args.quality,
            evidence=args.evidence,
            check_quality=not args.no_quality_check,
            check_signal_strength=args.check_signal_strength,
            signal_strength=args.signal_strength,
            ind_regions=not args.collective,
            processes=args.processes,
        )
        options = RunOptions(
            data_file=args.data_file,
            out_dir=args.out_dir,
            sample_name=args.sample_name,
            mode=args.mode,
            id_column=args.id_column,
            within_combs_file=args.within_combs,
            between_combs_file=args.between_combs,
            log_file=args.log_file,
            verbose=args.verbose,
        )

        if not self.validate(config, options):
            raise ValueError("Invalid configuration")

        return config, options

    def validate(self, config: DStructConfig, options: RunOptions) -> bool:
        """Validate the run configuration"""
        try:
            os.makedirs(options.out_dir, exist_ok=True)

            for path in (
                options.data_file,
                options.within_combs_file,
                options.between_combs_file,
            ):
                if path and not os.path.exists(path):
                    self.logger.log_error(
                        FileNotFoundError(f"File not found: {path}"),
                        "Configuration validation",
                    )
                    return False

            if config.reps_A < 0 or config.reps_B < 0:
                self.logger.log_error(
                    ValueError("Replicate counts must be positive"),
                    "Configuration validation",
                )
                return False

            if config.min_length < 1:
                self.logger.log_error(
                    ValueError(f"min_length must be at least 1, got {config.min_length}"),
                    "Configuration validation",
                )
                return False

            if config.processes < 1:
                self.logger.log_error(
                    ValueError(f"processes must be at least 1, got {config.processes}"),
                    "Configuration validation",
                )
                return False

            if config.quality is not None and not 0 < config.quality <= 1:
                self.logger.log_warning(
                    f"Quality {config.quality} is outside the d-score range (0, 1]"
                )

            if config.evidence < 0:
                self.logger.log_warning(
                    f"Negative evidence {config.evidence} admits regions with lower between-group variation"
                )

            if options.mode == "guided" and not config.ind_regions:
                self.logger.log_warning("--collective has no effect in guided mode")

            self.logger.log_success("Configuration validation passed")
            return True

        except OSError as e:
            self.logger.log_error(e, "Configuration validation")
            return False
