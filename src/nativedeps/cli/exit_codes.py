"""Process exit codes for the nativedeps CLI."""

EXIT_SUCCESS = 0
EXIT_MISSING_DEPENDENCIES = 1
EXIT_RUNTIME_ERROR = 2
EXIT_INVALID_USAGE = 3
