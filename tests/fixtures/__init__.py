"""Test fixtures for launcher tests.

- releases: release archives, SHA256SUMS manifests and a local release server

Import fixtures in your tests using:
    from tests.fixtures.releases import release_server, write_release
"""

__all__ = [
    "releases",
]
