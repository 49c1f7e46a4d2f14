"""
Reaction analysis CLI.

Analyzes a single reaction description, a CSV/Excel file of descriptions,
or reports how one identifier is resolved.

Usage:
    python scripts/analyze_reactions.py --text "5 g NaCl, 1 mmol AcOH"
    python scripts/analyze_reactions.py --input reactions.xlsx --column reaction --output analyzed.xlsx
    python scripts/analyze_reactions.py --debug-identifier 64-19-7 --offline
"""

import argparse
import json
import logging
import sys
from pathlib import Path

from loguru import logger

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from reaction_analyzer.batch import analyze_frame, detect_text_column, load_input_file, report_to_json
from reaction_analyzer.matching import build_engine
from reaction_analyzer.pipeline import analyze_reaction
from reaction_analyzer.utils.config_manager import DEFAULT_CONFIG_PATH, ConfigManager


def setup_logging(verbose: bool = False):
    """Configure logging (stdout stays reserved for JSON output)."""
    level = "DEBUG" if verbose else "INFO"

    logging.basicConfig(
        level=getattr(logging, level),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=[logging.StreamHandler(sys.stderr)]
    )

    logger.remove()  # Remove default handler
    logger.add(
        sys.stderr,
        format="<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | <level>{message}</level>",
        level=level,
    )


def write_output(content: str, output: Path = None):
    if output is None:
        print(content)
        return
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(content, encoding='utf-8')
    logger.info(f"Wrote {output}")


def main():
    parser = argparse.ArgumentParser(
        description="Analyze chemical reaction descriptions (limiting reagent, equivalents, yield)"
    )
    source = parser.add_mutually_exclusive_group(required=True)
    source.add_argument('--text', help='Reaction description, e.g. "5 g NaCl, 1 mmol AcOH"')
    source.add_argument('--input', type=Path, help='CSV or Excel file with one reaction per row')
    source.add_argument('--debug-identifier', help='Show how a single identifier is resolved')
    parser.add_argument('--column', help='Text column of --input (auto-detected if omitted)')
    parser.add_argument('--output', type=Path, help='Output file (.json, .csv or .xlsx)')
    parser.add_argument('--config', type=Path, default=DEFAULT_CONFIG_PATH, help='YAML config file')
    parser.add_argument('--offline', action='store_true', help='Use the local fallback table only')
    parser.add_argument('--no-trace', action='store_true', help='Omit the diagnostic steps')
    parser.add_argument('--verbose', '-v', action='store_true', help='Debug logging')

    args = parser.parse_args()
    setup_logging(args.verbose)

    config_manager = ConfigManager(args.config)
    errors = config_manager.validate_config()
    if errors:
        for error in errors:
            logger.error(f"Config: {error}")
        return 1

    config = config_manager.get_all_config()
    if args.offline:
        config['resolution']['enable_remote'] = False
    engine = build_engine(config)
    collect_trace = config['resolution']['collect_trace'] and not args.no_trace

    try:
        if args.debug_identifier is not None:
            result = engine.debug_lookup(args.debug_identifier)
            write_output(json.dumps(result, indent=2, ensure_ascii=False), args.output)

        elif args.text is not None:
            report = analyze_reaction(args.text, engine=engine, collect_trace=collect_trace)
            write_output(report_to_json(report), args.output)

        else:
            df = load_input_file(args.input)
            column = args.column or detect_text_column(df)
            if column is None:
                logger.error(
                    f"Could not auto-detect text column. Please specify with --column.\n"
                    f"Available columns: {', '.join(map(str, df.columns))}"
                )
                return 1

            results = analyze_frame(df, column, engine=engine)
            output = args.output
            if output is None:
                print(results.to_json(orient='records', force_ascii=False, indent=2))
            elif output.suffix.lower() == '.xlsx':
                output.parent.mkdir(parents=True, exist_ok=True)
                results.to_excel(output, index=False, engine='openpyxl')
                logger.info(f"Wrote {output}")
            elif output.suffix.lower() == '.csv':
                output.parent.mkdir(parents=True, exist_ok=True)
                results.to_csv(output, index=False)
                logger.info(f"Wrote {output}")
            else:
                write_output(results.to_json(orient='records', force_ascii=False, indent=2), output)

    except (FileNotFoundError, ValueError) as e:
        logger.error(str(e))
        return 1
    finally:
        fetch = engine.fetch
        if hasattr(fetch, 'close'):
            fetch.close()

    return 0


if __name__ == "__main__":
    sys.exit(main())
