"""
shell-secrets - plain-file secret store for shell sessions.

Keep API keys and tokens out of your dotfiles and pull them into the
environment when you need them.

Features:
- set: Store a secret (argument or hidden prompt)
- get: Print a secret, e.g. export API_KEY=$(shell-secrets get api_key)
- del: Forget a secret
- list: Show keys with their last-modified date (no values)
- dump: Print the raw store file

Secrets are NOT encrypted. The store is a text file readable only by you.
"""

__version__ = "0.1.0"
