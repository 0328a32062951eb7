#!/usr/bin/env python
"""
Taskboard management entry point.

Defaults to development settings; set DJANGO_SETTINGS_MODULE to
``core.settings.production`` or ``core.settings.test`` to switch.
"""

import os
import sys


def main():
    os.environ.setdefault("DJANGO_SETTINGS_MODULE", "core.settings.dev")

    try:
        from django.core.management import execute_from_command_line
    except ImportError as exc:
        raise ImportError(
            "Couldn't import Django. Is it installed and is the taskboard "
            "virtual environment active?"
        ) from exc

    execute_from_command_line(sys.argv)


if __name__ == "__main__":
    main()
