"""Starter .diffsense.toml template."""

DEFAULT_TOML = """\
# diffsense configuration
version = "1.0"

[diff]
staged = false            # analyze the index instead of the working tree
context_lines = 0         # -U<n> passed to git diff

[scope]
# map = { "client/" = "frontend", "server/" = "backend" }

[history]
limit = 5

[redaction]
enabled = true
# disable = ["bearer-token"]             # built-in pattern names to drop
# patterns_dir = ".diffsense-patterns"   # extra YAML patterns

[output]
format = "terminal"       # terminal | json
"""
