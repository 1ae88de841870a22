# The command: jot log
# What it does: Displays the commit history by starting at the current HEAD and walking backward through the parent links
# How it does: It starts with the current commit hash and enters a loop. Inside the loop, it loads the commit object, prints its information, and follows its parent hash, continuing until the first commit (which has no parent)
# What data structure it uses: It performs a linear traversal up the parent chain of the commit history, which here is a Linked List

import os

from utils import repository, objects


def run(args):
    repo_root = repository.require_repo_root(os.path.abspath(args.path))

    commit_hash = repository.get_head_commit(repo_root)
    if not commit_hash: # Check if there are any commits
        current_branch = repository.get_current_branch(repo_root) or repository.DEFAULT_BRANCH
        print(f"fatal: your current branch '{current_branch}' does not have any commits yet")
        return 1

    for current_hash, commit in iter_history(repo_root, commit_hash):
        print(f"commit {current_hash}")
        print(f"Author: {commit.author}")
        print(f"Committer: {commit.committer}")
        print()
        for line in commit.message.splitlines():
            print(f"    {line}")
        print()
    return 0


def iter_history(repo_root, commit_hash): # Yields (oid, Commit) from commit_hash back to the root commit
    visited = set()
    while commit_hash and commit_hash not in visited:
        visited.add(commit_hash)
        commit = objects.read_commit(repo_root, commit_hash)
        yield commit_hash, commit
        commit_hash = commit.parent
