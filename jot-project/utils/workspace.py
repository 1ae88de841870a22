# What it does: Reads the live working tree: lists directory entries, reads file bytes, derives mode strings and stat snapshots
# How it does: Thin wrappers over os.scandir / os.stat that always skip the .jot control directory
# What data structure it uses: List (of directory entries, sorted by name) and a small stat record (IndexStat)

import logging
import os
import stat as stat_module

from .index import UINT32, IndexStat
from .models import TREE_MODE
from .repository import JOT_DIR

logger = logging.getLogger(__name__)


def list_entries(directory): # Lists the immediate children of a directory as absolute paths sorted by name, excluding .jot
    if not os.path.isdir(directory):
        return []
    with os.scandir(directory) as it:
        names = sorted(entry.name for entry in it if entry.name != JOT_DIR)
    return [os.path.join(directory, name) for name in names]


def read_file(path):
    with open(path, 'rb') as f:
        return f.read()


def file_mode(path, st=None): # "40000" for directories, otherwise "100" followed by the owner/group/other permission digits
    st = st or os.stat(path)
    if stat_module.S_ISDIR(st.st_mode):
        return TREE_MODE
    return f'100{stat_module.S_IMODE(st.st_mode) & 0o777:03o}'


def file_stat(path, st=None): # Captures the ctime/mtime/dev/ino/uid/gid fields the index records, truncated to 32 bits like the index stores them
    st = st or os.stat(path)
    return IndexStat(
        ctime_sec=(st.st_ctime_ns // 1_000_000_000) & UINT32,
        ctime_nsec=st.st_ctime_ns % 1_000_000_000,
        mtime_sec=(st.st_mtime_ns // 1_000_000_000) & UINT32,
        mtime_nsec=st.st_mtime_ns % 1_000_000_000,
        dev=st.st_dev & UINT32,
        ino=st.st_ino & UINT32,
        uid=getattr(st, 'st_uid', 0) & UINT32,
        gid=getattr(st, 'st_gid', 0) & UINT32,
    )


def has_any_file(directory): # True if a regular file exists anywhere beneath directory
    pending = [directory]
    while pending:
        for child in list_entries(pending.pop()):
            if os.path.isfile(child):
                return True
            if os.path.isdir(child):
                pending.append(child)
    return False


def list_files(directory): # Every regular file beneath directory, depth first in name order
    files = []
    pending = [directory]
    while pending:
        current = pending.pop()
        children = list_entries(current)
        subdirectories = []
        for child in children:
            if os.path.isfile(child):
                files.append(child)
            elif os.path.isdir(child):
                subdirectories.append(child)
        pending.extend(reversed(subdirectories))
    logger.debug("found %d file(s) under %s", len(files), directory)
    return files
