"""Runs the lambda DSL interpreter on a file, on program text given as an argument, or in command-line mode. Also uses
error handling context manager. Called from the lambdadsl executable script.
"""

import argparse
import logging
import sys

from lambdadsl.lang.error import ErrorHandler
from lambdadsl.lang.session import Session
from lambdadsl.lang.shell import Shell

ARG_FILE = "<arg>"  # filename used in messages for programs given with `run`


def get_parser():
    parser = argparse.ArgumentParser(prog="lambdadsl", description="A DSL for lambda expressions.")
    parser.add_argument("-v", "--verbose", action="count", default=0,
                        help="log evaluation (-v) or every reduction step (-vv) to stderr")
    parser.add_argument("--max-steps", type=int, default=None, metavar="N",
                        help="give up on an eval after N reduction steps (default: no limit)")

    commands = parser.add_subparsers(dest="command")

    run_file = commands.add_parser("run-file", help="evaluate a lambda program from a file")
    run_file.add_argument("path", help="path to the file containing the program")

    run = commands.add_parser("run", help="evaluate a lambda program provided as plain text")
    run.add_argument("expr", help="program to parse and evaluate, e.g. 'eval (\\x.x a)'")

    commands.add_parser("shell", help="start the interactive interpreter (default)")

    return parser


def configure_logging(verbosity):
    level = logging.WARNING
    if verbosity == 1:
        level = logging.INFO
    elif verbosity > 1:
        level = logging.DEBUG
    logging.basicConfig(level=level, stream=sys.stderr, format="%(levelname)s:%(name)s: %(message)s")


def main(argv=None):
    """Runs the interpreter. Called from the lambdadsl executable script."""
    parser = get_parser()
    args = parser.parse_args(argv)
    configure_logging(args.verbose)

    if args.max_steps is not None and args.max_steps < 0:
        parser.error("--max-steps must not be negative")

    if args.command in (None, "shell"):
        with ErrorHandler(fatal=False) as error_handler:
            session = Session(error_handler, Session.SH_FILE, max_steps=args.max_steps, cmd_line=True)
            Shell(session).cmdloop()
        return

    with ErrorHandler() as error_handler:
        if args.command == "run-file":
            session = Session(error_handler, args.path, max_steps=args.max_steps, echo=True)
        else:
            session = Session(error_handler, ARG_FILE, args.expr, max_steps=args.max_steps, echo=True)
        session.run()


if __name__ == "__main__":
    main()
