#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/mdxtree/options/base.py
"""Base classes for parser and renderer options.

This module defines the foundation classes for the options used by the
mdxtree parser and renderer.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Any, TypeVar

_OptionsT = TypeVar("_OptionsT", bound="CloneFrozenMixin")


@dataclass(frozen=True)
class CloneFrozenMixin:
    """Mixin providing frozen dataclass cloning capabilities.

    This mixin adds the ability to create modified copies of frozen dataclass
    instances, which is useful for immutable configuration objects.
    """

    def create_updated(self: _OptionsT, **kwargs: Any) -> _OptionsT:
        """Create a new instance with updated field values.

        Parameters
        ----------
        **kwargs : Any
            Field names and their new values

        Returns
        -------
        Self
            New instance with specified fields updated

        """
        return replace(self, **kwargs)


@dataclass(frozen=True)
class BaseRendererOptions(CloneFrozenMixin):
    """Base class for renderer options.

    Notes
    -----
    Subclasses should define format-specific rendering options as frozen dataclass fields.

    """


@dataclass(frozen=True)
class BaseParserOptions(CloneFrozenMixin):
    """Base class for parser options.

    Notes
    -----
    Subclasses should define format-specific parsing options as frozen dataclass fields.

    """
