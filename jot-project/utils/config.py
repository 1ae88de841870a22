# What it does: Manages all read/write operations for the `.jot/config` file and derives the commit identity from it
# What data structure it uses: Map / Hash Table / Dictionary (the INI file format is a map of sections to key-value pairs, managed by Python's `configparser`)

import configparser
import getpass
import logging
import os
import time

from .repository import jot_path

logger = logging.getLogger(__name__)


def get_config_path(repo_root):  # Returns the path to the config file within the repository
    return jot_path(repo_root, 'config')


def read_config(repo_root): # Reads and returns the configuration as a ConfigParser object
    config_path = get_config_path(repo_root)
    config = configparser.ConfigParser()
    if os.path.exists(config_path):
        config.read(config_path)
    return config


def write_config(repo_root, key, value): # Sets a configuration key to a value and writes it to the config file
    try:
        section, option = key.split('.', 1)
    except ValueError:
        raise ValueError(f"invalid key '{key}', expected 'section.key'")

    config = read_config(repo_root)
    if not config.has_section(section):
        config.add_section(section)

    config.set(section, option, value)

    with open(get_config_path(repo_root), 'w') as configfile:
        config.write(configfile)
    logger.debug("config %s = %s", key, value)


def get_user_config(repo_root): # Retrieves user.name and user.email from the config, or None if not set
    config = read_config(repo_root)
    user_name = config.get('user', 'name', fallback=None)
    user_email = config.get('user', 'email', fallback=None)
    return user_name, user_email


def get_identity(repo_root, timestamp=None): # Builds "Name <email> <unix-seconds> <tz>", falling back to the login name when user.* is unset
    user_name, user_email = get_user_config(repo_root)
    if not user_name or not user_email:
        login = getpass.getuser()
        user_name = user_name or login
        user_email = user_email or f"{login}@local"

    if timestamp is None:
        timestamp = int(time.time())
    timezone = time.strftime('%z', time.localtime(timestamp)) or '+0000'
    return f"{user_name} <{user_email}> {timestamp} {timezone}"
