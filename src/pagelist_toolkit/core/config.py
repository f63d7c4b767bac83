"""
Module: core.config

Purpose:
    Configuration dataclass for page lists. Immutable configuration with
    validation on construction.

Key Classes:
    - PageListConfig: Ownership release policy for a host document

Dependencies:
    - dataclasses (std)
    - os (std): Environment override

Used By:
    - core.pagelist.PageList
    - cli: --release-policy option
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Mapping, Optional

from .ownership import ReleasePolicy

ENV_RELEASE_POLICY = "PAGELIST_RELEASE_POLICY"


@dataclass(frozen=True)
class PageListConfig:
    """
    Configuration for page lists (immutable).

    Attributes:
        release_policy: When keep-alives for foreign documents are dropped
            after their last borrowed page is deleted.

    Example:
        >>> config = PageListConfig(release_policy=ReleasePolicy.EAGER)
        >>> config.release_policy.value
        'eager'
    """

    release_policy: ReleasePolicy = ReleasePolicy.DEFERRED

    def __post_init__(self) -> None:
        """Validate configuration on construction."""
        if not isinstance(self.release_policy, ReleasePolicy):
            raise ValueError(f"release_policy must be a ReleasePolicy: {self.release_policy!r}")

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "PageListConfig":
        """
        Build configuration from PAGELIST_RELEASE_POLICY.

        Args:
            environ: Mapping to read from. Defaults to os.environ.

        Returns:
            PageListConfig, with defaults for unset variables.

        Raises:
            ValueError: If the variable holds an unknown policy name.
        """
        env = os.environ if environ is None else environ
        raw = env.get(ENV_RELEASE_POLICY, "").strip().lower()
        if not raw:
            return cls()
        try:
            policy = ReleasePolicy(raw)
        except ValueError:
            choices = ", ".join(p.value for p in ReleasePolicy)
            raise ValueError(
                f"{ENV_RELEASE_POLICY} must be one of {choices}: {raw!r}"
            ) from None
        return cls(release_policy=policy)
