"""Lambda handler that runs the bundled unique port executable.

Triggered by SNS notifications carrying CloudFormation custom resource
requests. The whole event is handed to ``./uniqueport`` as one JSON
argument; the child's output goes straight to the function's log stream.
"""

import logging

from .config import settings
from .invocation import run

# Setup logging
logger = logging.getLogger()
logger.setLevel(settings.log_level.upper())


def external(event, context):
    """
    Lambda entry point.

    Returns None when the executable exits 0 and raises otherwise, so the
    runtime reports the failure for this invocation.
    """
    run(event, context, settings).result()


handler = external
