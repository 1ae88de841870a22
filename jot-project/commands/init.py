# The command: jot init
# What it does: Initializes a new, empty repository by creating the hidden `.jot` directory and its internal structure
# How it does: It creates the `objects` and `refs/heads` subdirectories. It then creates the `HEAD` file and writes a symbolic reference pointing to the default 'master' branch
# What data structure it uses: Tree (the file system directory structure is a tree). It also lays the foundation for a Hash Table (the object database) and a Directed Acyclic Graph (the commit history)

import logging
import os

from utils import repository

logger = logging.getLogger(__name__)


def run(args):
    repo_path = os.path.join(os.path.abspath(args.path), repository.JOT_DIR)

    if os.path.exists(repo_path):
        print(f"Reinitialized existing Jot repository in {repo_path}/")
        return 0

    # Create the main .jot directory and subdirectories
    os.makedirs(os.path.join(repo_path, 'objects'), exist_ok=True)
    os.makedirs(os.path.join(repo_path, 'refs', 'heads'), exist_ok=True)

    # Create the HEAD file to point to the master branch; the branch file appears with the first commit
    with open(os.path.join(repo_path, 'HEAD'), 'w') as f:
        f.write(f'ref: refs/heads/{repository.DEFAULT_BRANCH}\n')

    logger.debug("initialized %s", repo_path)
    print(f"Initialized empty Jot repository in {repo_path}/")
    return 0
