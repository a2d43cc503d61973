"""
Argv preprocessor for the launchwrap command line.

launchwrap's own options come first; everything from the JVM binary on is
the launch line and must reach the command untouched, including tokens
such as ``--module`` or ``-h`` that Typer would otherwise parse:

- ``launchwrap --debug java -cp a.jar Main`` → ``--debug -- java -cp a.jar Main``
- ``launchwrap help`` → ``--help``
"""

_FLAGS = {"--debug", "--no-log-file", "--help", "-h", "--version", "-V"}
_VALUE_OPTIONS = {"--log-file"}


def preprocess_argv(argv: list[str]) -> list[str]:
    """Normalize CLI arguments for Typer.

    Applied rules (in order):
    1. ``help`` as first arg → ``--help``
    2. ``--`` inserted before the first token that is not a launchwrap option
    """
    if not argv:
        return argv

    # Rule 1: help pseudo-command → --help
    if argv[0] == "help":
        return ["--help"]

    # Rule 2: separate launchwrap options from the launch line
    own: list[str] = []
    i = 0
    while i < len(argv):
        token = argv[i]
        if token == "--":
            return argv
        if token in _FLAGS or token.startswith(tuple(o + "=" for o in _VALUE_OPTIONS)):
            own.append(token)
        elif token in _VALUE_OPTIONS:
            own.extend(argv[i:i + 2])
            i += 1
        else:
            return [*own, "--", *argv[i:]]
        i += 1
    return own
