"""client/ -- Client-side session state, navigation guard, and API client.

Runs in the caller's process, not the server's. Shares only the domain
dataclasses and exceptions from auth/ with the server side.
"""
