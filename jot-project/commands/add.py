# The command: jot add <path>...
# What it does: Takes a snapshot of files from the working directory and stages them for the next commit by updating the index
# How it does: It loads the binary index, then for each requested file (directories are expanded recursively) it stores a blob object, captures the file's mode and stat, and records them under its repository-relative path. Finally it saves the index atomically
# What data structure it uses: Hash Table / Dictionary (the in-memory index), List (of files to add), and a Tree Traversal (when expanding directories)

import logging
import os
import sys

from utils import repository, objects, workspace
from utils.index import Index
from utils.models import Blob

logger = logging.getLogger(__name__)


def run(args):
    start = os.path.abspath(args.path)
    repo_root = repository.require_repo_root(start)

    index = Index(repo_root).load()
    exit_code = 0

    for file_arg in args.files:
        resolved = os.path.normpath(os.path.join(start, file_arg))
        if not os.path.exists(resolved):
            print(f"fatal: pathspec '{file_arg}' did not match any files", file=sys.stderr)
            exit_code = 1
            continue
        if os.path.commonpath([resolved, repo_root]) != repo_root:
            print(f"fatal: '{file_arg}' is outside repository at '{repo_root}'", file=sys.stderr)
            exit_code = 1
            continue
        control_dir = repository.jot_path(repo_root)
        if os.path.commonpath([resolved, control_dir]) == control_dir:
            print(f"fatal: '{file_arg}' is inside the {repository.JOT_DIR} directory", file=sys.stderr)
            exit_code = 1
            continue

        for file_path in _expand_files(resolved):
            add_file(repo_root, index, file_path)

    index.save()
    logger.debug("add completed, index entries=%d", len(index))
    return exit_code


def add_file(repo_root, index, file_path): # Stores one file as a blob and stages it
    rel_path = os.path.relpath(file_path, repo_root).replace(os.sep, '/')
    content = workspace.read_file(file_path)
    hash_val = objects.store_object(repo_root, Blob(content))

    st = os.stat(file_path)
    index.add(rel_path, workspace.file_mode(file_path, st), hash_val, len(content), workspace.file_stat(file_path, st))
    return hash_val


def _expand_files(path):
    """
    Expands a directory argument into every regular file beneath it.
    """
    if os.path.isdir(path):
        return workspace.list_files(path)
    return [path]
