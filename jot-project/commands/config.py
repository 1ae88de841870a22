# The command: jot config <key> <value>
# What it does: A user-facing command to set a configuration key-value pair (e.g., user.name)
# How it does: It acts as a simple dispatcher, passing the key and value to the `write_config` function in the `utils/config.py` module, which handles the file I/O and parsing logic
# What data structure it uses: None directly, but it provides the interface to the underlying Map / Dictionary structure managed by `utils/config.py`

import os
import sys

from utils import repository, config as config_utils


def run(args):
    repo_root = repository.require_repo_root(os.path.abspath(args.path))
    try: # Set the configuration key-value pair
        config_utils.write_config(repo_root, args.key, args.value)
    except ValueError as e:
        print(f"error: {e}", file=sys.stderr)
        return 1
    print(f"Set {args.key} to '{args.value}'")
    return 0
