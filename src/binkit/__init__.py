"""Build and install command-line tools from a git-hosted package registry."""
