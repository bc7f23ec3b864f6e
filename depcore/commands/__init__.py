"""Click subcommands for the depcore CLI."""
