"""Thin wrappers around the Plastic SCM ``cm`` command-line client.

Each wrapper invokes one ``cm`` subcommand in a workspace directory:
- ``cm status --xml --fullpath``: pending changes (status)
- ``cm undo <path>``: revert a single change (undo)
- ``cm update --last --override --forced``: move to latest (update)
"""
