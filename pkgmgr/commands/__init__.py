"""Click subcommands for pkgmgr."""
