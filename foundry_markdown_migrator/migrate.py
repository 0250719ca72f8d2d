#!/usr/bin/env python3
"""
Foundry Journal to Markdown Import Tool - Main CLI Entry Point

This script provides the command-line interface for importing the journal
entries of a Foundry VTT world into a folder of an Obsidian-style markdown
vault, preserving the folder hierarchy, cross-entry links and images.
"""

import argparse
import logging
import sys
from typing import List, Optional

import yaml

from . import __version__
from .config_loader import ConfigLoader, get_nested
from .fetchers import RecordReadError
from .logger import log_config, log_section, setup_logging
from .orchestrator import ImportOrchestrator, ImportReport


def create_argument_parser() -> argparse.ArgumentParser:
    """Create and configure the argument parser for CLI."""
    parser = argparse.ArgumentParser(
        description="Import Foundry VTT journal entries into a markdown vault",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Import using a configuration file
  foundry-markdown-migrator --config config.yaml

  # Import a world into a vault folder
  foundry-markdown-migrator --world ~/FoundryData/Data/worlds/my-world --vault ~/Vault

  # Preview without touching the vault
  foundry-markdown-migrator --world ./my-world --vault ~/Vault --dry-run

  # Write folder notes and a JSON report
  foundry-markdown-migrator --config config.yaml --folder-notes --report report.json

  # Verbose logging
  foundry-markdown-migrator --config config.yaml -vv
        """
    )

    parser.add_argument(
        '--version',
        action='version',
        version=f'%(prog)s {__version__}'
    )

    parser.add_argument(
        '--config',
        type=str,
        help='Path to configuration YAML file'
    )

    parser.add_argument(
        '--world',
        type=str,
        help='Foundry world folder (containing data/folders.db and data/journal.db)'
    )

    parser.add_argument(
        '--data-path',
        type=str,
        help='Foundry data folder that image paths are relative to (default: two levels above the world)'
    )

    parser.add_argument(
        '--folders-file',
        type=str,
        help='Folder records file (default: <world>/data/folders.db)'
    )

    parser.add_argument(
        '--journal-file',
        type=str,
        help='Journal records file (default: <world>/data/journal.db)'
    )

    parser.add_argument(
        '--vault',
        type=str,
        help='Vault directory to import into'
    )

    parser.add_argument(
        '--destination',
        type=str,
        help='Import root folder inside the vault (default: FoundryImport)'
    )

    parser.add_argument(
        '--asset-folder',
        type=str,
        help='Asset folder under the import root (default: assets)'
    )

    parser.add_argument(
        '--folder-notes',
        action=argparse.BooleanOptionalAction,
        default=None,
        help='Write a note file into every imported folder'
    )

    parser.add_argument(
        '--dry-run',
        action=argparse.BooleanOptionalAction,
        default=None,
        help='Preview the import without making changes'
    )

    parser.add_argument(
        '--report',
        type=str,
        help='Write the import report as JSON to this path'
    )

    parser.add_argument(
        '--log-file',
        type=str,
        help='Also write log output to this file'
    )

    parser.add_argument(
        '-v', '--verbose',
        action='count',
        default=0,
        help='Increase verbosity (-v for INFO, -vv for DEBUG)'
    )

    return parser


def run_import(config: dict, args: argparse.Namespace, logger: logging.Logger) -> int:
    """Execute the complete import pipeline."""
    dry_run = bool(args.dry_run)
    logger.info(f"Dry-run: {dry_run}")

    try:
        orchestrator = ImportOrchestrator(config, logger=logger)
        report = orchestrator.run(dry_run=dry_run)
    except RecordReadError as e:
        logger.error(f"Cannot read world data: {e}")
        return 2
    except KeyboardInterrupt:
        logger.error("Import interrupted by user")
        return 130

    report_generator = ImportReport(logger)
    print("\n" + report_generator.format_console_report(report))

    if args.report:
        report_generator.export_json_report(report, args.report)

    errors = report.get('summary', {}).get('total_errors', 0)
    if errors > 0:
        logger.warning(f"Import completed with {errors} errors")
        return 1

    logger.info("Import completed successfully")
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the CLI."""
    parser = create_argument_parser()
    args = parser.parse_args(argv)

    try:
        # Console logging for config loading
        setup_logging(verbosity=args.verbose)

        if args.config:
            config = ConfigLoader.load(args.config)
        else:
            config = ConfigLoader.with_defaults()

        # CLI takes precedence
        config = ConfigLoader.merge_with_args(config, args)
        ConfigLoader.validate(config)

        # Reconfigure logging with config file settings
        logger = setup_logging(
            log_file=get_nested(config, 'logging.file'),
            level=get_nested(config, 'logging.level', 'WARNING')
        )

        log_section("Foundry Journal to Markdown Import")
        logger.info(f"Version: {__version__}")
        log_config(config)

        return run_import(config, args, logger)

    except FileNotFoundError as e:
        print(f"ERROR: File not found: {e}", file=sys.stderr)
        return 2
    except ValueError as e:
        print(f"ERROR: Configuration error: {e}", file=sys.stderr)
        return 2
    except yaml.YAMLError as e:
        print(f"ERROR: Invalid configuration file: {e}", file=sys.stderr)
        return 2
    except KeyboardInterrupt:
        print("\nImport interrupted by user", file=sys.stderr)
        return 130


if __name__ == "__main__":
    sys.exit(main())
