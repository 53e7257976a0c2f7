"""Core modules for quills-daemon.

This package contains the reusable chat API client, wallet login and the
daemon entry point.

Recommended invocation (ensures imports work reliably):
- python -m core.quills_daemon
- python -m core.authorize
"""
