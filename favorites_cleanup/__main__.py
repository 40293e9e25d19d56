from favorites_cleanup.cli import run_cli

run_cli()
