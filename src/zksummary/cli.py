"""zksummary CLI: summarize, prove and check journals."""

import argparse
import logging
import sys
from importlib.metadata import version as get_version, PackageNotFoundError
from pathlib import Path


def _configure_logging(args) -> None:
    if getattr(args, "verbose", False):
        level = logging.DEBUG
    elif getattr(args, "quiet", False):
        level = logging.ERROR
    else:
        level = logging.WARNING
    logging.basicConfig(
        level=level,
        stream=sys.stderr,
        format="%(levelname)s %(name)s: %(message)s",
    )


def main():
    """Main CLI entry point for zksummary commands."""
    try:
        zksummary_version = get_version("zksummary")
    except PackageNotFoundError:
        zksummary_version = "dev"

    parser = argparse.ArgumentParser(
        prog="zksummary",
        description="zksummary: keyword summaries committed to verifiable journals"
    )
    parser.add_argument("--version", action="version", version=f"zksummary {zksummary_version}")
    # Common arguments
    parent_parser = argparse.ArgumentParser(add_help=False)
    parent_parser.add_argument(
        "--quiet",
        action="store_true",
        help="Suppress all non-error output."
    )
    parent_parser.add_argument(
        "--verbose",
        action="store_true",
        help="Log pipeline steps to stderr."
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # prove command
    prove_parser = subparsers.add_parser(
        "prove",
        help="Prove a summary of an input file and write journal + proof",
        parents=[parent_parser]
    )
    prove_parser.add_argument(
        "--input",
        type=Path,
        required=True,
        help="Path to input text file (UTF-8)"
    )
    prove_parser.add_argument(
        "--out",
        type=Path,
        required=True,
        help="Path to output journal JSON"
    )
    prove_parser.add_argument(
        "--proof",
        type=Path,
        required=True,
        help="Path to output proof file"
    )

    # summarize command
    summarize_parser = subparsers.add_parser(
        "summarize",
        help="Run the guest logic locally and print the unproven journal",
        parents=[parent_parser]
    )
    summarize_parser.add_argument(
        "--input",
        type=Path,
        required=True,
        help="Path to input text file (UTF-8)"
    )

    # check command
    check_parser = subparsers.add_parser(
        "check",
        help="Check a persisted journal against its input and/or proof",
        parents=[parent_parser]
    )
    check_parser.add_argument(
        "--journal",
        type=Path,
        required=True,
        help="Path to journal JSON"
    )
    check_parser.add_argument(
        "--input",
        type=Path,
        default=None,
        help="Path to the input the journal claims to summarize"
    )
    check_parser.add_argument(
        "--proof",
        type=Path,
        default=None,
        help="Path to the proof written alongside the journal"
    )

    args = parser.parse_args()

    if not args.command:
        parser.print_help()
        sys.exit(1)

    _configure_logging(args)

    from .errors import ZkSummaryError

    try:
        if args.command == "prove":
            from .api import prove
            from .kernel.normalize import stopwords_digest

            result = prove(args.input, args.out, args.proof)
            if not args.quiet:
                print("[OK] Proof generated and verified")
                print(f"  Journal: {result.journal_path}")
                print(f"  Proof: {result.proof_path}")
                print(f"  Program Hash: {result.program_hash}")
                print(f"  Stopwords: {stopwords_digest()}")
            sys.exit(0)
        elif args.command == "summarize":
            from .api import summarize
            from ._internal.io.artifacts import read_input
            from .kernel.canonical import encode_journal

            journal = summarize(read_input(args.input))
            print(encode_journal(journal).decode("utf-8"))
            sys.exit(0)
        elif args.command == "check":
            from .api import check_journal

            result = check_journal(args.journal, input_path=args.input, proof_path=args.proof)
            if not args.quiet:
                status = "OK" if result.ok else "FAILED"
                print(f"[{status}] Journal check complete")
                print(f"  Program Hash: {result.journal.program_hash}")
                print(f"  Issues: {len(result.issues)}")
                for issue in result.issues:
                    print(f"  - {issue.code.value}: {issue.message}")
            sys.exit(0 if result.ok else 1)
        else:
            parser.print_help()
            sys.exit(1)
    except ZkSummaryError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)
    except Exception as e:
        print(f"Unexpected error: {e}", file=sys.stderr)
        import traceback
        traceback.print_exc()
        sys.exit(1)


if __name__ == "__main__":
    main()
