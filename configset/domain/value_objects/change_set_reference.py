"""
Change Set Reference Value Object

Architectural Intent:
- Identifies where a change set's scripts live once the repository archive
  has been fetched and extracted on an agent
- Derives the archive URL and the extracted directory name from the
  repository URL and branch
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Optional
from urllib.parse import urlparse

from configset.domain.exceptions import InvalidReference

DEFAULT_BRANCH = "master"


@dataclass(frozen=True)
class ChangeSetReference:
    """
    Value Object pointing at one change set inside a change set repository.
    """
    repository_url: str
    change_set_name: str = ""
    branch_name: Optional[str] = None

    @property
    def branch(self) -> str:
        return self.branch_name or DEFAULT_BRANCH

    @property
    def has_explicit_branch(self) -> bool:
        return bool(self.branch_name)

    def _validated_url(self) -> str:
        if not self.repository_url or not self.repository_url.strip():
            raise InvalidReference("Change set repository URL is not set")
        url = self.repository_url.strip().rstrip("/")
        parsed = urlparse(url)
        if not parsed.scheme or not parsed.netloc or not parsed.path.strip("/"):
            raise InvalidReference(
                f"Error parsing change set repository URL: {self.repository_url!r}"
            )
        return url

    @property
    def repository_name(self) -> str:
        """Last path segment of the repository URL.

        Raises InvalidReference when the URL has no scheme, host or path.
        """
        return urlparse(self._validated_url()).path.rsplit("/", 1)[-1]

    @property
    def directory_name(self) -> str:
        return f"{self.repository_name}-{self.branch}"

    @property
    def archive_url(self) -> str:
        return f"{self._validated_url()}/archive/{self.branch}.tar.gz"

    @property
    def archive_file_name(self) -> str:
        return f"{self.directory_name}.tar.gz"

    def __str__(self) -> str:
        return f"{self.repository_url}@{self.branch}:{self.change_set_name}"
