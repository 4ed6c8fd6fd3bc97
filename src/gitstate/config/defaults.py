"""Starter .gitstate.toml template."""

DEFAULT_TOML = """\
# gitstate configuration
version = "1.0"

[status]
entry_limit = 0           # max entries to read from git status; 0 = unbounded
no_optional_locks = true  # pass --no-optional-locks when git >= 2.15

[output]
format = "terminal"       # terminal | json
show_summary = true

[git]
executable = "git"
timeout = 30              # seconds

[logging]
level = "WARNING"         # DEBUG | INFO | WARNING | ERROR
"""
