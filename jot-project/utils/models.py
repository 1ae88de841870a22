# What it does: Defines the three object variants (blob, tree, commit) and their canonical byte encoding
# How it does: Each variant is a frozen dataclass with a fixed `type` discriminator, a canonical_bytes() serializer and a parse() classmethod. parse_object() dispatches on the type string over the closed set of variants
# What data structure it uses: Tagged union (Blob | Tree | Commit). A Tree is a sorted tuple of entries, i.e. one node of a Merkle Tree

from dataclasses import dataclass, field
from typing import ClassVar, Optional, Union

from .errors import CorruptObject

TREE_MODE = '40000'
REGULAR_MODE = '100644'
EXECUTABLE_MODE = '100755'


@dataclass(frozen=True)
class Blob:
    type: ClassVar[str] = 'blob'

    data: bytes

    def __post_init__(self):
        # bytearray/memoryview inputs are copied so later mutation cannot leak in
        object.__setattr__(self, 'data', bytes(self.data))

    def canonical_bytes(self) -> bytes:
        return self.data

    @classmethod
    def parse(cls, body: bytes, oid: str = None) -> 'Blob':
        return cls(body)


@dataclass(frozen=True)
class TreeEntry:
    mode: str
    name: str
    oid: str

    def is_tree(self) -> bool:
        return self.mode == TREE_MODE


@dataclass(frozen=True)
class Tree:
    type: ClassVar[str] = 'tree'

    entries: tuple = field(default_factory=tuple)

    def __post_init__(self):
        entries = tuple(sorted(self.entries, key=lambda e: e.name.encode()))
        for previous, current in zip(entries, entries[1:]):
            if previous.name == current.name:
                raise ValueError(f"duplicate tree entry name: {current.name!r}")
        object.__setattr__(self, 'entries', entries)

    def canonical_bytes(self) -> bytes:
        parts = []
        for entry in self.entries:
            parts.append(f'{entry.mode} {entry.name}\0'.encode())
            parts.append(bytes.fromhex(entry.oid))
        return b''.join(parts)

    @classmethod
    def parse(cls, body: bytes, oid: str = None) -> 'Tree':
        """Decode a tree body: repeated ``<mode> <name>\\0<20-byte oid>``."""
        entries = []
        pos = 0
        while pos < len(body):
            nul = body.find(b'\0', pos)
            if nul < 0:
                raise CorruptObject(oid, "tree entry missing NUL separator")
            try:
                header = body[pos:nul].decode()
            except UnicodeDecodeError as e:
                raise CorruptObject(oid, f"undecodable tree entry name: {e}") from e
            if ' ' not in header:
                raise CorruptObject(oid, f"malformed tree entry header {header!r}")
            mode, name = header.split(' ', 1)
            oid_end = nul + 1 + 20
            if oid_end > len(body):
                raise CorruptObject(oid, "truncated oid in tree entry")
            entries.append(TreeEntry(mode, name, body[nul + 1:oid_end].hex()))
            pos = oid_end
        return cls(tuple(entries))


@dataclass(frozen=True)
class Commit:
    type: ClassVar[str] = 'commit'

    tree: str
    parent: Optional[str]
    author: str
    committer: str
    message: str = ''

    def __post_init__(self):
        if self.message is None:
            object.__setattr__(self, 'message', '')

    def canonical_bytes(self) -> bytes:
        lines = [f'tree {self.tree}']
        if self.parent:
            lines.append(f'parent {self.parent}')
        lines.append(f'author {self.author}')
        lines.append(f'committer {self.committer}')
        lines.append('')
        lines.append(self.message)
        return '\n'.join(lines).encode()

    @classmethod
    def parse(cls, body: bytes, oid: str = None) -> 'Commit':
        try:
            text = body.decode()
        except UnicodeDecodeError as e:
            raise CorruptObject(oid, f"undecodable commit: {e}") from e
        header, _, message = text.partition('\n\n')
        fields = {}
        for line in header.split('\n'):
            key, _, value = line.partition(' ')
            fields.setdefault(key, value)
        if 'tree' not in fields:
            raise CorruptObject(oid, "commit has no tree")
        return cls(
            tree=fields['tree'],
            parent=fields.get('parent'),
            author=fields.get('author', ''),
            committer=fields.get('committer', ''),
            message=message,
        )


JotObject = Union[Blob, Tree, Commit]

_VARIANTS = {variant.type: variant for variant in (Blob, Tree, Commit)}


def parse_object(obj_type, body, oid=None) -> JotObject:
    variant = _VARIANTS.get(obj_type)
    if variant is None:
        raise CorruptObject(oid, f"unknown object type {obj_type!r}")
    return variant.parse(body, oid)
