# What it does: Provides high-level functions for interacting with the repository structure, like finding the repo root and managing the branch pointer
# How it does: It reads/writes to files like `HEAD` and those in `refs/heads` to manage the repository's current state. `find_repo_root` walks up the directory tree to locate the `.jot` directory
# What data structure it uses: Uses recursion (specifically, linear recursion) to find the repo root. Conceptually, it manages pointers (the `HEAD` file and branch files), which are fundamental components of data structures like Graphs and Linked Lists

import logging
import os
import tempfile

from .errors import NotARepository

logger = logging.getLogger(__name__)

JOT_DIR = '.jot'
DEFAULT_BRANCH = 'master'


def jot_path(repo_root, *parts): # Joins parts under the repository's control directory
    return os.path.join(repo_root, JOT_DIR, *parts)


def find_repo_root(path='.'): # Recursively searches for the .jot directory to find the repository root
    path = os.path.abspath(path)
    if os.path.isdir(os.path.join(path, JOT_DIR)):
        return path
    parent_path = os.path.dirname(path)
    if parent_path == path:
        return None
    return find_repo_root(parent_path)


def require_repo_root(path='.'): # Like find_repo_root, but raises NotARepository instead of returning None
    repo_root = find_repo_root(path)
    if repo_root is None:
        raise NotARepository(os.path.abspath(path))
    logger.debug("repository root %s", repo_root)
    return repo_root


def _read_head(repo_root):
    head_path = jot_path(repo_root, 'HEAD')
    if not os.path.exists(head_path):
        return None
    with open(head_path, 'r') as f:
        return f.read().strip()


def _head_ref(repo_root): # Returns the ref path HEAD points at ('refs/heads/master'), or None when HEAD is absent or detached
    head_content = _read_head(repo_root)
    if head_content and head_content.startswith('ref:'):
        return head_content.split(':', 1)[1].strip()
    return None


def get_head_commit(repo_root): # Retrieves the commit hash that HEAD points to, or None if there are no commits
    head_content = _read_head(repo_root)
    if not head_content:
        return None
    ref_path = _head_ref(repo_root)
    if ref_path is None:
        return head_content
    branch_path = jot_path(repo_root, *ref_path.split('/'))
    if not os.path.exists(branch_path) or os.path.getsize(branch_path) == 0:
        return None
    with open(branch_path, 'r') as f:
        return f.read().strip() or None


def update_head(repo_root, commit_hash): # Moves the current branch (or a detached HEAD) to commit_hash
    ref_path = _head_ref(repo_root)
    if ref_path is None and not _read_head(repo_root):
        ref_path = f'refs/heads/{DEFAULT_BRANCH}'
        _write_atomic(jot_path(repo_root, 'HEAD'), f'ref: {ref_path}\n')

    if ref_path is None:
        target = jot_path(repo_root, 'HEAD')
    else:
        target = jot_path(repo_root, *ref_path.split('/'))
    _write_atomic(target, f'{commit_hash}\n')
    logger.debug("%s -> %s", ref_path or 'HEAD', commit_hash)


def _write_atomic(path, text):
    directory = os.path.dirname(path)
    os.makedirs(directory, exist_ok=True)
    fd, temp_path = tempfile.mkstemp(prefix='tmp_ref_', dir=directory)
    try:
        with os.fdopen(fd, 'w') as f:
            f.write(text)
        os.replace(temp_path, path)
    except BaseException:
        if os.path.exists(temp_path):
            os.remove(temp_path)
        raise


def get_current_branch(repo_root): # Retrieves the name of the current branch HEAD points to, or None if in detached HEAD state
    ref_path = _head_ref(repo_root)
    if ref_path and ref_path.startswith('refs/heads/'):
        return ref_path[len('refs/heads/'):]
    return None


def get_head_status(repo_root): # Returns a user-friendly string describing HEAD state
    current_branch = get_current_branch(repo_root)
    if current_branch:
        return f"On branch {current_branch}"
    else:
        head_commit = get_head_commit(repo_root)
        if head_commit:
            return f"HEAD detached at {head_commit[:7]}"
        else:
            return "HEAD detached (no commits yet)"
