"""Command-line interface for Dictation Pad.

WHY: The transcript rules are easiest to check and reuse from a terminal:
normalize a sentence, replay a recorded stream of recognition results,
or serve the HTTP API for a renderer. The CLI wires those together
behind one command.

HOW: argparse with three subcommands:
  normalize TEXT...  — print the normalized text
  replay FILE        — feed JSON Lines fragment batches through a
                       DictationSession and print the final transcript
  serve              — run the FastAPI app with uvicorn
Each replay line is validated with jsonschema before it is applied.
Status messages go to stderr; results go to stdout.

RULES:
- replay reads one JSON array of fragments per line; "-" means stdin
- Blank lines are skipped
- An invalid line reports its line number and exits with status 1
- Unreadable or non-UTF-8 input also exits with status 1
- --seed sets the pad text before the first batch
- --show-preview prints every display text to stderr as it changes
- Ctrl-C exits with status 130
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from typing import IO, Iterator, List, Optional, Tuple

import jsonschema

from dictation_pad.config import API_HOST, API_PORT, LOG_FORMAT, LOG_LEVEL
from dictation_pad.core.models import Fragment, fragments_from_dicts, validate_batch
from dictation_pad.core.normalizer import normalize
from dictation_pad.session import DictationSession

logger = logging.getLogger(__name__)


class BatchFormatError(ValueError):
    """A replay line is not valid JSON or not a valid fragment batch."""


def _status(msg: str) -> None:
    """Print a status message to stderr.

    WHY: Status output must not pollute stdout so the CLI can be piped.
    """
    print(msg, file=sys.stderr, flush=True)


def read_batches(stream: IO[str]) -> Iterator[Tuple[int, List[Fragment]]]:
    """Yield ``(line_number, fragments)`` for each non-blank JSON line.

    Raises:
        BatchFormatError: On the first line that is not valid JSON or does
            not match the fragment batch schema.
    """
    for line_number, line in enumerate(stream, start=1):
        line = line.strip()
        if not line:
            continue
        try:
            batch = json.loads(line)
        except json.JSONDecodeError as exc:
            raise BatchFormatError(
                "line {}: invalid JSON ({})".format(line_number, exc.msg)
            ) from exc
        try:
            validate_batch(batch)
        except jsonschema.ValidationError as exc:
            raise BatchFormatError(
                "line {}: invalid batch ({})".format(line_number, exc.message)
            ) from exc
        yield line_number, fragments_from_dicts(batch)


def replay(
    stream: IO[str],
    seed: str = "",
    show_preview: bool = False,
) -> str:
    """Run a recorded batch stream through a session and return the transcript.

    HOW: Starts a session seeded with ``seed``, applies every batch in
    file order, then stops the session (final normalization pass).
    """
    session = DictationSession()
    session.start(seed)

    for line_number, fragments in read_batches(stream):
        preview = session.handle_batch(fragments)
        logger.debug("line %d: %d fragment(s)", line_number, len(fragments))
        if show_preview:
            _status(preview.display_text)

    session.stop()
    return session.accumulator.authoritative_text


def _cmd_normalize(args: argparse.Namespace) -> int:
    print(normalize(" ".join(args.text)))
    return 0


def _cmd_replay(args: argparse.Namespace) -> int:
    if args.file == "-":
        text = replay(sys.stdin, seed=args.seed, show_preview=args.show_preview)
    else:
        with open(args.file, encoding="utf-8") as stream:
            text = replay(stream, seed=args.seed, show_preview=args.show_preview)
    print(text)
    return 0


def _cmd_serve(args: argparse.Namespace) -> int:
    from dictation_pad.server.app import run_api

    run_api(host=args.host, port=args.port)
    return 0


def build_parser() -> argparse.ArgumentParser:
    """Build the argparse parser for the CLI.

    WHY: Separating parser construction from main() makes the CLI
    testable — tests can inspect the parser without running anything.
    """
    parser = argparse.ArgumentParser(
        prog="dictation-pad",
        description="Turn streamed speech recognition results into a clean "
                    "transcript with spoken punctuation rewritten.",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Log debug output to stderr.",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    normalize_parser = subparsers.add_parser(
        "normalize",
        help="Normalize text given on the command line.",
    )
    normalize_parser.add_argument("text", nargs="+", help="Text to normalize.")
    normalize_parser.set_defaults(func=_cmd_normalize)

    replay_parser = subparsers.add_parser(
        "replay",
        help="Replay JSON Lines fragment batches and print the transcript.",
    )
    replay_parser.add_argument(
        "file",
        help="JSON Lines file, one fragment batch per line ('-' for stdin).",
    )
    replay_parser.add_argument(
        "--seed",
        default="",
        help="Pad text to start from (default: empty).",
    )
    replay_parser.add_argument(
        "--show-preview",
        action="store_true",
        help="Print the display text after every batch to stderr.",
    )
    replay_parser.set_defaults(func=_cmd_replay)

    serve_parser = subparsers.add_parser("serve", help="Run the HTTP API.")
    serve_parser.add_argument(
        "--host",
        default=API_HOST,
        help="Bind address (default: %(default)s).",
    )
    serve_parser.add_argument(
        "--port",
        type=int,
        default=API_PORT,
        help="Port (default: %(default)s).",
    )
    serve_parser.set_defaults(func=_cmd_serve)

    return parser


def main(argv: Optional[List[str]] = None) -> None:
    """Entry point for the CLI.

    RULES:
    - argv=None means use sys.argv (normal CLI invocation)
    - Explicit argv is for testing
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else LOG_LEVEL,
        format=LOG_FORMAT,
    )

    try:
        code = args.func(args)
    except KeyboardInterrupt:
        _status("\nCancelled by user.")
        sys.exit(130)
    except (BatchFormatError, UnicodeDecodeError, OSError) as e:
        print("Error: {}".format(e), file=sys.stderr)
        sys.exit(1)
    if code:
        sys.exit(code)


if __name__ == "__main__":
    main()
