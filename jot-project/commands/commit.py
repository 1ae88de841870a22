# The command: jot commit -m "<message>"
# What it does: Creates a permanent, uniquely identified snapshot (a commit object) of the currently staged changes.
# How it does: It builds a hierarchical Merkle Tree from the flat index to get a single root hash for the project's state. It then finds the parent commit, gathers metadata (author, message), and hashes them all into a new "commit" object. Finally, it updates the current branch file to point to this new commit's hash.
# What data structure it uses: Merkle Tree (to represent the project's file structure), Directed Acyclic Graph (DAG) (as each commit links to its parent, forming the history graph), Hash Table / Dictionary (the underlying object store)

import logging
import os

from utils import repository, objects, config
from utils.errors import NothingToCommit
from utils.index import Index
from utils.models import Commit

logger = logging.getLogger(__name__)


def run(args):
    repo_root = repository.require_repo_root(os.path.abspath(args.path))
    commit_hash = create_commit(repo_root, args.message)

    current_branch = repository.get_current_branch(repo_root) or 'detached HEAD'
    first_line = args.message.splitlines()[0] if args.message else ''
    print(f"[{current_branch} {commit_hash[:7]}] {first_line}")
    return 0


def create_commit(repo_root, message, author=None): # Creates a commit object from the index and advances the current branch
    index = Index(repo_root).load()
    if index.is_empty():
        raise NothingToCommit()

    # Build the tree from the index and write one tree object per directory
    tree_hash = objects.build_tree_from_index(repo_root, index.entries())

    parent = repository.get_head_commit(repo_root)
    author = author or config.get_identity(repo_root)
    commit = Commit(tree=tree_hash, parent=parent, author=author, committer=author, message=message)
    commit_hash = objects.store_object(repo_root, commit)

    repository.update_head(repo_root, commit_hash)
    logger.debug("commit %s tree=%s parent=%s", commit_hash, tree_hash, parent)
    return commit_hash
