# The command: jot status [--porcelain]
# What it does: Provides a summary of the repository state by comparing the HEAD commit, the index (staging area), and the working directory
# How it does: It asks `utils/status.py` for the four classes (added, modified, deleted, untracked) and renders them either for humans or as stable two-column porcelain lines
# What data structure it uses: Sets (one per class), sorted Lists for output

import os

from utils import repository, status as status_utils


def run(args): # Compares the HEAD, index, and working directory states and prints the status
    repo_root = repository.require_repo_root(os.path.abspath(args.path))
    result = status_utils.collect_status(repo_root)

    if args.porcelain:
        for line in status_utils.porcelain_lines(result):
            print(line)
        return 0

    print(repository.get_head_status(repo_root))
    print_long_status(result)
    return 0


def print_long_status(result):
    if result.added:
        print("\nChanges to be committed:")
        for path in sorted(result.added):
            print(f"\tnew file:   {path}")

    if result.modified or result.deleted:
        print("\nChanges not staged for commit:")
        for path in sorted(result.modified):
            print(f"\tmodified:   {path}")
        for path in sorted(result.deleted):
            print(f"\tdeleted:    {path}")

    if result.untracked:
        print("\nUntracked files:")
        print("  (use \"jot add <file>...\" to include in what will be committed)")
        for path in sorted(result.untracked):
            print(f"\t{path}")

    if result.is_clean():
        print("\nnothing to commit, working tree clean")
