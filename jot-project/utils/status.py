# What it does: Classifies paths as added, modified, deleted or untracked by reconciling the HEAD commit, the index (staging area) and the working tree
# How it does: It collects the working tree (expanding only directories that hold tracked paths), then runs two merge-joins over path-sorted sequences: index vs working tree (modified/deleted/untracked) and index vs HEAD tree (added). Modified checks short-circuit on size, mode and timestamps before falling back to hashing
# What data structure it uses: Sorted Lists walked with two pointers (a single O(n) pass each), Sets (for the four result classes and the tracked-directory lookup)

import logging
import os
from dataclasses import dataclass, field

from . import objects, repository, workspace
from .index import UINT32, Index, IndexStat

logger = logging.getLogger(__name__)


@dataclass
class WorkspaceFile:
    path: str
    abs_path: str
    is_directory: bool = False
    # Captured for tracked files only
    size: int = 0
    mode: str = None
    stat: IndexStat = None


@dataclass
class StatusResult:
    added: set = field(default_factory=set)
    modified: set = field(default_factory=set)
    deleted: set = field(default_factory=set)
    untracked: set = field(default_factory=set)

    def is_clean(self):
        return not (self.added or self.modified or self.deleted or self.untracked)


def _tracked_directories(tracked_paths): # Every ancestor directory of a tracked path, e.g. 'a/b/c.txt' -> {'a', 'a/b'}
    directories = set()
    for path in tracked_paths:
        parent = path.rpartition('/')[0]
        while parent and parent not in directories:
            directories.add(parent)
            parent = parent.rpartition('/')[0]
    return directories


def collect_workspace_files(repo_root, tracked_paths): # Lists the working tree as WorkspaceFile records sorted by path
    """
    A directory with no tracked path at or beneath it is reported once as a
    directory and not expanded; if it contains no file anywhere beneath it,
    it is skipped entirely. Directories holding tracked paths are expanded.
    """
    tracked_paths = set(tracked_paths)
    tracked_dirs = _tracked_directories(tracked_paths)

    files = []
    pending = [(repo_root, '')]
    while pending:
        directory, prefix = pending.pop()
        for child in workspace.list_entries(directory):
            relative_path = prefix + os.path.basename(child)
            if os.path.isfile(child):
                if relative_path in tracked_paths:
                    st = os.stat(child)
                    files.append(WorkspaceFile(
                        relative_path, child,
                        size=st.st_size & UINT32,
                        mode=workspace.file_mode(child, st),
                        stat=workspace.file_stat(child, st),
                    ))
                else:
                    files.append(WorkspaceFile(relative_path, child))
            elif os.path.isdir(child):
                if relative_path in tracked_dirs or relative_path in tracked_paths:
                    pending.append((child, relative_path + '/'))
                elif workspace.has_any_file(child):
                    files.append(WorkspaceFile(relative_path, child, is_directory=True))

    files.sort(key=lambda f: f.path)
    return files


def is_modified(entry, disk_file, repo_root=None): # Decides whether a tracked file differs from its index entry, cheapest checks first
    """
    1. size differs -> modified
    2. mode differs -> modified
    3. ctime and mtime both equal the staged stat -> unchanged, content not read
    4. otherwise compare the would-be blob oid with the staged oid

    Rule 3 trusts timestamps: a write that preserves both ctime and mtime
    (clock skew, deliberate forgery) goes undetected.
    """
    if disk_file.size != entry.size:
        logger.debug("modified: %s size %d -> %d", entry.path, entry.size, disk_file.size)
        return True

    if disk_file.mode != entry.mode:
        logger.debug("modified: %s mode %s -> %s", entry.path, entry.mode, disk_file.mode)
        return True

    if disk_file.stat is not None and entry.stat is not None and disk_file.stat.same_timestamps(entry.stat):
        logger.debug("unchanged: %s timestamps match, content not read", entry.path)
        return False

    content = workspace.read_file(disk_file.abs_path)
    disk_oid = objects.hash_object(repo_root, content, 'blob', write=False)
    if disk_oid != entry.oid:
        logger.debug("modified: %s oid %s -> %s", entry.path, entry.oid, disk_oid)
        return True
    return False


def compare_index_to_workspace(index_entries, workspace_files, result, repo_root=None): # Merge-join filling modified, deleted and untracked
    i = w = 0
    while i < len(index_entries) or w < len(workspace_files):
        entry = index_entries[i] if i < len(index_entries) else None
        disk_file = workspace_files[w] if w < len(workspace_files) else None

        if disk_file is None or (entry is not None and entry.path < disk_file.path):
            result.deleted.add(entry.path)
            logger.debug("deleted: %s", entry.path)
            i += 1
        elif entry is None or disk_file.path < entry.path:
            result.untracked.add(disk_file.path + '/' if disk_file.is_directory else disk_file.path)
            w += 1
        else:
            if not disk_file.is_directory and is_modified(entry, disk_file, repo_root):
                result.modified.add(entry.path)
            i += 1
            w += 1
    return result


def compare_index_to_head(index_entries, head_paths, result): # Merge-join filling added: staged paths the HEAD tree does not have
    i = h = 0
    while i < len(index_entries):
        path = index_entries[i].path
        head_path = head_paths[h] if h < len(head_paths) else None

        if head_path is None or path < head_path:
            result.added.add(path)
            i += 1
        elif path > head_path:
            h += 1
        else:
            i += 1
            h += 1
    return result


def head_paths(repo_root): # Sorted file paths of the HEAD commit's tree, empty when there is no commit yet
    head_commit = repository.get_head_commit(repo_root)
    if not head_commit:
        return []
    tree_hash = objects.get_commit_tree_hash(repo_root, head_commit)
    return sorted(objects.read_tree_paths(repo_root, tree_hash))


def collect_status(repo_root, index=None): # Computes the four status classes for one repository
    if index is None:
        index = Index(repo_root).load()

    index_entries = sorted(index.entries(), key=lambda e: e.path)
    workspace_files = collect_workspace_files(repo_root, [e.path for e in index_entries])

    result = StatusResult()
    compare_index_to_workspace(index_entries, workspace_files, result, repo_root)
    compare_index_to_head(index_entries, head_paths(repo_root), result)
    logger.debug("status: %d added, %d modified, %d deleted, %d untracked",
                 len(result.added), len(result.modified), len(result.deleted), len(result.untracked))
    return result


def porcelain_lines(result): # Two-column machine-readable lines: index-vs-HEAD then working-tree-vs-index, untracked as '??'
    lines = []
    for path in sorted(result.added | result.modified | result.deleted):
        x = 'A' if path in result.added else ' '
        if path in result.modified:
            y = 'M'
        elif path in result.deleted:
            y = 'D'
        else:
            y = ' '
        lines.append(f'{x}{y} {path}')
    for path in sorted(result.untracked):
        lines.append(f'?? {path}')
    return lines
