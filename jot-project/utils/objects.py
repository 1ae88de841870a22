# What it does: Manages the low-level object database, handling the storage and retrieval of all blobs, trees, and commits
# How it does: It implements a content-addressed storage system. `hash_object` frames and hashes content and writes it once, atomically. `read_object` retrieves and validates content by its hash. It also builds the hierarchical tree structure from the flat index and flattens stored trees back into paths
# What data structure it uses: Hash Table / Dictionary (the entire object store is a content-addressed dictionary where the SHA-1 hash is the key).
# Trees form a Merkle Tree; building and reading it uses explicit work lists instead of recursion

import hashlib
import logging
import os
import tempfile
import zlib

from .errors import CorruptObject, ObjectNotFound
from .models import TREE_MODE, Commit, Tree, TreeEntry, parse_object
from .repository import JOT_DIR

logger = logging.getLogger(__name__)

OID_HEX_LENGTH = 40


def frame(content, obj_type): # Returns the canonical bytes "<type> <length>\0<content>" that get hashed and stored
    return f'{obj_type} {len(content)}\0'.encode() + content


def object_path(repo_root, sha1): # Maps an oid to .jot/objects/<first two hex chars>/<remaining 38>
    if len(sha1) != OID_HEX_LENGTH or any(c not in '0123456789abcdef' for c in sha1):
        raise ValueError(f"invalid object id: {sha1!r}")
    return os.path.join(repo_root, JOT_DIR, 'objects', sha1[:2], sha1[2:])


def hash_object(repo_root, content, obj_type, write=True): #Hashes content and optionally writes it as an object of the given type ('blob', 'tree', 'commit')
    data = frame(content, obj_type)
    sha1 = hashlib.sha1(data).hexdigest()

    if write:
        path = object_path(repo_root, sha1)
        if os.path.exists(path):
            logger.debug("object %s already stored", sha1)
            return sha1

        object_dir = os.path.dirname(path)
        os.makedirs(object_dir, exist_ok=True)
        fd, temp_path = tempfile.mkstemp(prefix='tmp_obj_', dir=object_dir)
        try:
            with os.fdopen(fd, 'wb') as f:
                f.write(zlib.compress(data))
            os.replace(temp_path, path)
        except BaseException:
            if os.path.exists(temp_path):
                os.remove(temp_path)
            raise
        logger.debug("stored %s %s (%d bytes)", obj_type, sha1, len(content))

    return sha1


def store_object(repo_root, obj): # Stores a Blob, Tree or Commit and returns its oid
    return hash_object(repo_root, obj.canonical_bytes(), obj.type)


def object_exists(repo_root, sha1):
    return os.path.exists(object_path(repo_root, sha1))


def read_object(repo_root, sha1): #Reads an object by its SHA-1 hash and returns its type and content
    object_path_ = object_path(repo_root, sha1)

    if not os.path.exists(object_path_):
        raise ObjectNotFound(sha1)

    with open(object_path_, 'rb') as f:
        compressed_data = f.read()

    try:
        data = zlib.decompress(compressed_data)
    except zlib.error as e:
        raise CorruptObject(sha1, f"cannot decompress: {e}") from e

    null_byte_index = data.find(b'\0')
    if null_byte_index < 0:
        raise CorruptObject(sha1, "missing header terminator")
    header = data[:null_byte_index].decode(errors='replace')
    content = data[null_byte_index + 1:]

    obj_type, _, size = header.partition(' ')
    if not obj_type or not size.isdigit():
        raise CorruptObject(sha1, f"malformed header {header!r}")
    if int(size) != len(content):
        raise CorruptObject(sha1, f"declared length {size} but body has {len(content)} bytes")

    return obj_type, content


def load_object(repo_root, sha1, expected=None): # Reads an object and decodes it into a Blob, Tree or Commit
    obj_type, content = read_object(repo_root, sha1)
    if expected is not None and obj_type != expected:
        raise CorruptObject(sha1, f"expected {expected}, found {obj_type}")
    return parse_object(obj_type, content, sha1)


def build_tree_from_index(repo_root, entries): # Builds and stores one tree object per directory level from the flat index entries, returns the root tree oid
    """
    Group the flat, slash-separated index paths by parent directory, then
    write directories deepest first so every sub-tree oid is known before its
    parent is serialized. Sub-trees stay stored even if a parent write fails;
    re-storing them later is a no-op.
    """
    directories = {'': []}
    for entry in entries:
        parent, _, name = entry.path.rpartition('/')
        directories.setdefault(parent, []).append(TreeEntry(entry.mode, name, entry.oid))

        # Register every ancestor so directories holding only sub-directories still exist
        while parent:
            grandparent = parent.rpartition('/')[0]
            if parent in directories and grandparent in directories:
                break
            directories.setdefault(parent, [])
            directories.setdefault(grandparent, [])
            parent = grandparent

    subdirectories = {directory: [] for directory in directories}
    for directory in directories:
        if directory:
            subdirectories[directory.rpartition('/')[0]].append(directory)

    subtree_oids = {}
    for directory in sorted(directories, key=lambda d: (-_depth(d), d.encode())):
        tree_entries = list(directories[directory])
        for child in subdirectories[directory]:
            name = child.rpartition('/')[2]
            tree_entries.append(TreeEntry(TREE_MODE, name, subtree_oids[child]))
        subtree_oids[directory] = store_object(repo_root, Tree(tuple(tree_entries)))

    root_oid = subtree_oids['']
    logger.debug("built %d tree(s), root %s", len(subtree_oids), root_oid)
    return root_oid


def _depth(directory):
    return directory.count('/') + 1 if directory else 0


def get_commit_tree_hash(repo_root, commit_hash): # Retrieves the tree hash from a commit object
    if not commit_hash:
        return None
    commit = load_object(repo_root, commit_hash, expected='commit')
    return commit.tree


def read_tree_paths(repo_root, tree_hash): # Flattens a stored tree into {path: (mode, oid)} for every file beneath it
    files = {}
    pending = [(tree_hash, '')]
    while pending:
        tree_sha, path_prefix = pending.pop()
        tree = load_object(repo_root, tree_sha, expected='tree')
        for entry in tree.entries:
            current_path = f'{path_prefix}{entry.name}'
            if entry.is_tree():
                pending.append((entry.oid, f'{current_path}/'))
            else:
                files[current_path] = (entry.mode, entry.oid)
    return files


def get_commit_files(repo_root, commit_hash): #Retrieves all files and their hashes from a commit by reading its tree
    if not commit_hash:
        return {}
    tree_hash = get_commit_tree_hash(repo_root, commit_hash)
    return {path: oid for path, (_, oid) in read_tree_paths(repo_root, tree_hash).items()}


def read_commit(repo_root, commit_hash) -> Commit:
    return load_object(repo_root, commit_hash, expected='commit')
