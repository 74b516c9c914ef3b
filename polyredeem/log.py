from rich.console import Console


# Diagnostics go to stderr so CLI tables on stdout stay clean.
console = Console(stderr=True)
