import argparse
import logging
import os
import sys

from commands import init, add, commit, log, status, config
from utils.errors import JotError

DEBUG_ENV = 'JOT_DEBUG'


def configure_logging(): # DEBUG when JOT_DEBUG is set to a truthy value, WARNING otherwise
    debug = os.environ.get(DEBUG_ENV, '').lower() in ('1', 'true', 'yes')
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.WARNING,
        format='%(levelname)s %(name)s: %(message)s',
        stream=sys.stderr,
    )


def build_parser():
    # The main parser
    parser = argparse.ArgumentParser(prog="jot", description="Jot: a miniature version control system.")
    parser.add_argument("-C", dest="path", default=".", metavar="DIR", help="Run as if jot was started in DIR.")
    subparsers = parser.add_subparsers(dest="command", help="Available commands", required=True)

    # Command: init
    init_parser = subparsers.add_parser("init", help="Initialize a new, empty repository.")
    init_parser.set_defaults(func=init.run)

    # Command: add
    add_parser = subparsers.add_parser("add", help="Add file contents to the index.")
    add_parser.add_argument("files", nargs="+", help="Files or directories to add.")
    add_parser.set_defaults(func=add.run)

    # Command: commit
    commit_parser = subparsers.add_parser("commit", help="Record changes to the repository.")
    commit_parser.add_argument("-m", "--message", required=True, help="Commit message.")
    commit_parser.set_defaults(func=commit.run)

    # Command: log
    log_parser = subparsers.add_parser("log", help="Show commit logs.")
    log_parser.set_defaults(func=log.run)

    # Command: status
    status_parser = subparsers.add_parser("status", help="Show the working tree status.")
    status_parser.add_argument("--porcelain", action="store_true", help="Give the output in a stable, machine-parsable format.")
    status_parser.set_defaults(func=status.run)

    # Command: config
    config_parser = subparsers.add_parser("config", help="Set user name and email.")
    config_parser.add_argument("key", help="The configuration key (e.g., user.name).")
    config_parser.add_argument("value", help="The configuration value.")
    config_parser.set_defaults(func=config.run)

    return parser


# The main entry point for the Jot version control system
def main(argv=None):
    configure_logging()
    args = build_parser().parse_args(argv)

    try:
        return args.func(args) or 0
    except JotError as e:
        print(f"fatal: {e}", file=sys.stderr)
        return 1
    except OSError as e:
        logging.getLogger(__name__).debug("command failed", exc_info=True)
        print(f"fatal: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
