"""Root conftest: runs before any test module imports."""

import os

# CI runners set FORCE_COLOR=1, which makes Rich inject ANSI escape
# codes into CLI output and breaks tests that parse stdout as JSON or
# match plain-text messages. It must be removed before any Console()
# is created.
os.environ.pop("FORCE_COLOR", None)
os.environ["NO_COLOR"] = "1"
