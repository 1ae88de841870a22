# What it does: Reads and writes the .jot/index staging area, the record of what the next commit would contain
# How it does: Serializes entries in the big-endian "DIRC" binary layout (12-byte header, one 62-byte fixed block + NUL-terminated path + zero padding per entry, trailing SHA-1 of everything before it) using `struct`. Corrupt files reset to an empty index
# What data structure it uses: Dictionary (mapping paths to entries in memory), sorted List (on disk and for every snapshot handed out)

import hashlib
import logging
import os
import struct
import tempfile
from typing import NamedTuple

from .errors import CorruptIndex
from .repository import jot_path

logger = logging.getLogger(__name__)

SIGNATURE = b'DIRC'
VERSION = 2
SUPPORTED_VERSIONS = (2, 3, 4)

HEADER = struct.Struct('>4sII')
# ctime s/ns, mtime s/ns, dev, ino, mode, uid, gid, size, oid, flags
ENTRY = struct.Struct('>10I20sH')
CHECKSUM_SIZE = 20
NAME_MASK = 0x0FFF

UINT32 = 0xFFFFFFFF


class IndexStat(NamedTuple):
    ctime_sec: int = 0
    ctime_nsec: int = 0
    mtime_sec: int = 0
    mtime_nsec: int = 0
    dev: int = 0
    ino: int = 0
    uid: int = 0
    gid: int = 0

    def same_timestamps(self, other):
        return (self.ctime_sec, self.ctime_nsec, self.mtime_sec, self.mtime_nsec) == \
            (other.ctime_sec, other.ctime_nsec, other.mtime_sec, other.mtime_nsec)


ZERO_STAT = IndexStat()


class IndexEntry(NamedTuple):
    path: str
    mode: str
    oid: str
    size: int
    stat: IndexStat = ZERO_STAT


def _padded_length(name_length):
    # fixed block + name + NUL, rounded up to a multiple of 8
    return (ENTRY.size + name_length + 1 + 7) // 8 * 8


def encode_entries(entries): # Serializes entries (already sorted by the caller) into the full index file bytes, checksum included
    out = bytearray(HEADER.pack(SIGNATURE, VERSION, len(entries)))
    for entry in entries:
        stat = entry.stat or ZERO_STAT
        name = entry.path.encode()
        out += ENTRY.pack(
            stat.ctime_sec & UINT32, stat.ctime_nsec & UINT32,
            stat.mtime_sec & UINT32, stat.mtime_nsec & UINT32,
            stat.dev & UINT32, stat.ino & UINT32,
            int(entry.mode, 8),
            stat.uid & UINT32, stat.gid & UINT32,
            entry.size & UINT32,
            bytes.fromhex(entry.oid),
            min(len(name), NAME_MASK),
        )
        out += name
        out += b'\0' * (_padded_length(len(name)) - ENTRY.size - len(name))
    out += hashlib.sha1(out).digest()
    return bytes(out)


def decode_entries(raw): # Parses index file bytes into a list of IndexEntry, raising CorruptIndex on any inconsistency
    if len(raw) < HEADER.size + CHECKSUM_SIZE:
        raise CorruptIndex("file too short")

    content, checksum = raw[:-CHECKSUM_SIZE], raw[-CHECKSUM_SIZE:]
    if hashlib.sha1(content).digest() != checksum:
        raise CorruptIndex("checksum mismatch")

    signature, version, count = HEADER.unpack_from(content, 0)
    if signature != SIGNATURE:
        raise CorruptIndex(f"bad signature {signature!r}")
    if version not in SUPPORTED_VERSIONS:
        raise CorruptIndex(f"unsupported version {version}")

    entries = []
    pos = HEADER.size
    for i in range(count):
        if pos + ENTRY.size > len(content):
            raise CorruptIndex(f"truncated at entry {i}")
        (ctime_sec, ctime_nsec, mtime_sec, mtime_nsec, dev, ino,
         mode, uid, gid, size, oid, flags) = ENTRY.unpack_from(content, pos)

        name_start = pos + ENTRY.size
        name_length = flags & NAME_MASK
        if name_length == NAME_MASK:
            name_end = content.find(b'\0', name_start)
        else:
            name_end = name_start + name_length
        if name_end < 0 or name_end >= len(content):
            raise CorruptIndex(f"unterminated path at entry {i}")

        name = content[name_start:name_end]
        try:
            path = name.decode()
        except UnicodeDecodeError as e:
            raise CorruptIndex(f"undecodable path at entry {i}") from e
        entries.append(IndexEntry(
            path=path,
            mode=format(mode, 'o'),
            oid=oid.hex(),
            size=size,
            stat=IndexStat(ctime_sec, ctime_nsec, mtime_sec, mtime_nsec, dev, ino, uid, gid),
        ))
        pos += _padded_length(len(name))

    logger.debug("decoded index version=%d entries=%d", version, len(entries))
    return entries


class Index:
    """The staging area of one repository.

    Paths are repository-relative and '/'-separated. A path is never both a
    file and a directory: adding ``a/b`` drops ``a``, adding ``a`` drops
    everything under ``a/``.
    """

    def __init__(self, repo_root):
        self.repo_root = repo_root
        self.path = jot_path(repo_root, 'index')
        self._entries = {}

    def load(self, strict=False):
        """Replace the in-memory entries with the on-disk index.

        A missing file is an empty index. A corrupt file (short, checksum or
        signature mismatch, unknown version, truncated entry table) resets to
        empty with a logged warning, or raises CorruptIndex when ``strict``.
        """
        self._entries = {}
        if not os.path.exists(self.path):
            logger.debug("no index at %s, starting empty", self.path)
            return self

        with open(self.path, 'rb') as f:
            raw = f.read()
        try:
            entries = decode_entries(raw)
        except CorruptIndex as e:
            if strict:
                raise
            logger.warning("%s; staging area reset to empty", e)
            return self

        self._entries = {entry.path: entry for entry in entries}
        return self

    def save(self):
        data = encode_entries(self.entries())
        directory = os.path.dirname(self.path)
        os.makedirs(directory, exist_ok=True)
        fd, temp_path = tempfile.mkstemp(prefix='tmp_index_', dir=directory)
        try:
            with os.fdopen(fd, 'wb') as f:
                f.write(data)
            os.replace(temp_path, self.path)
        except BaseException:
            if os.path.exists(temp_path):
                os.remove(temp_path)
            raise
        logger.debug("saved index entries=%d checksum=%s", len(self._entries), data[-CHECKSUM_SIZE:].hex())

    def add(self, path, mode, oid, size, stat=None):
        path = path.replace('\\', '/')
        for existing in list(self._entries):
            if existing == path or path.startswith(existing + '/') or existing.startswith(path + '/'):
                del self._entries[existing]
        self._entries[path] = IndexEntry(path, mode, oid, size & UINT32, stat or ZERO_STAT)
        logger.debug("staged %s mode=%s oid=%s size=%d", path, mode, oid, size)

    def get(self, path):
        return self._entries.get(path)

    def entries(self): # A sorted snapshot; later add() calls do not show up in it
        return [self._entries[path] for path in sorted(self._entries)]

    def is_empty(self):
        return not self._entries

    def __len__(self):
        return len(self._entries)

    def __contains__(self, path):
        return path in self._entries
