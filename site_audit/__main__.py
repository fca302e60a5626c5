from site_audit.cli import cli

cli()
