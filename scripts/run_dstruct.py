#!/usr/bin/env python3
"""
dStruct Pipeline - Main Entry Point

Detects differentially reactive regions between two groups of structurome
replicates. All processing is delegated to DStructService.
"""

import logging
import sys
from pathlib import Path

# Add the project root to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from dstruct.application.dstruct_service import DStructService
from dstruct.infrastructure.argument_parser import ArgumentParser
from dstruct.infrastructure.logger import Logger


def main(argv=None):
    """Parse arguments, run the service and map failures to exit codes"""
    logger = Logger()

    try:
        config, options = ArgumentParser().parse_arguments(argv)
        if options.log_file or options.verbose:
            logger = Logger(
                log_file=options.log_file,
                level=logging.DEBUG if options.verbose else logging.INFO,
            )
        logger.log_step("Starting", f"dStruct {options.mode} run for {options.sample_name}")

        results = DStructService(config, options).process()

        significant = int((results["fdr"] < 0.05).sum())
        print(f"✅ {len(results)} records, {significant} significant at FDR 0.05")
        return 0

    except KeyboardInterrupt:
        logger.log_warning("Processing interrupted by user")
        return 130

    except Exception as e:
        logger.log_error(e, "Main execution")
        print(f"❌ Processing failed: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
