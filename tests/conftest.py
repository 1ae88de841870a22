# Shared pytest fixtures for Jot tests

import pytest
import os
import sys
import shutil
import tempfile

# Add jot-project to path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'jot-project'))

from utils.index import Index
from commands import add, commit


@pytest.fixture
def temp_dir():
    # Creates a temporary directory that is cleaned up after the test
    # Also saves/restores cwd to prevent issues when tests change directories
    original_dir = os.getcwd()
    tmp = os.path.realpath(tempfile.mkdtemp())
    yield tmp
    os.chdir(original_dir)
    shutil.rmtree(tmp, ignore_errors=True)


@pytest.fixture
def temp_repo(temp_dir):
    # Creates an initialized Jot repository in a temporary directory
    original_dir = os.getcwd()
    os.chdir(temp_dir)

    # Initialize repository
    jot_dir = os.path.join(temp_dir, '.jot')
    os.makedirs(os.path.join(jot_dir, 'objects'))
    os.makedirs(os.path.join(jot_dir, 'refs', 'heads'))
    with open(os.path.join(jot_dir, 'HEAD'), 'w') as f:
        f.write('ref: refs/heads/master\n')

    # Set up config
    config_path = os.path.join(jot_dir, 'config')
    with open(config_path, 'w') as f:
        f.write('[user]\n')
        f.write('name = Test User\n')
        f.write('email = test@example.com\n')

    yield temp_dir

    os.chdir(original_dir)


@pytest.fixture
def write_file():
    # Writes (and creates parent directories for) a file relative to a root
    def _write(root, rel_path, content):
        path = os.path.join(root, *rel_path.split('/'))
        os.makedirs(os.path.dirname(path), exist_ok=True)
        mode = 'wb' if isinstance(content, bytes) else 'w'
        with open(path, mode) as f:
            f.write(content)
        return path
    return _write


@pytest.fixture
def stage():
    # Stages files the same way `jot add` does
    def _stage(repo_root, *rel_paths):
        index = Index(repo_root).load()
        for rel_path in rel_paths:
            add.add_file(repo_root, index, os.path.join(repo_root, *rel_path.split('/')))
        index.save()
        return index
    return _stage


@pytest.fixture
def repo_with_commit(temp_repo, write_file, stage):
    # Creates a repo with one committed file
    write_file(temp_repo, 'README.md', '# Test Project\n')
    stage(temp_repo, 'README.md')
    commit_hash = commit.create_commit(
        temp_repo, 'Initial commit', author='Test User <test@example.com> 1700000000 +0000')
    return temp_repo, commit_hash
