# src/nginx_controller/commands/common.py
"""Shared CLI annotations for consistency across commands.

All common flags use long+short forms for consistency:
  --dry-run, -n
  --verbose, -v
"""

from typing import Annotated

import cyclopts

DryRun = Annotated[
    bool,
    cyclopts.Parameter(
        name=["--dry-run", "-n"],
        help="Print rendered config and commands without writing or running them",
        negative=[],  # Disable --no-dry-run generation
    ),
]

Verbose = Annotated[
    bool,
    cyclopts.Parameter(
        name=["--verbose", "-v"],
        help="Log every write, deletion and command",
        negative=[],
    ),
]

Reload = Annotated[
    bool,
    cyclopts.Parameter(
        name=["--reload"],
        help="Validate and reload nginx after the change",
    ),
]
