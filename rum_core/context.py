"""Context bags and the helpers that merge them.

A Context is a plain ``dict[str, Any]``. Every helper here returns fresh containers,
so a merged record never aliases a layer it was built from. That is what keeps an
already-assembled record immune to later mutation of the global context store.
"""

import copy
import re
from collections.abc import Mapping
from typing import Any
from typing import Final
from typing import TypeAlias

from pydantic import BaseModel
from pydantic import Field

from rum_core.common.models import MutableModel
from rum_core.common.models import WireModel
from rum_core.common.pure import pure

Context: TypeAlias = dict[str, Any]

ContextSource: TypeAlias = Mapping[str, Any] | BaseModel | None

_UPPERCASE_LETTER: Final[re.Pattern[str]] = re.compile(r"[A-Z]")


@pure
def as_context(source: ContextSource) -> Context | None:
    """Normalize a provider answer (model, mapping or None) into a Context."""
    if source is None:
        return None
    if isinstance(source, WireModel):
        return source.to_context()
    if isinstance(source, BaseModel):
        return source.model_dump(exclude_none=True)
    return dict(source)


@pure
def combine(*sources: ContextSource) -> Context:
    """Deep-merge the sources left to right into a new Context.

    Later sources win on conflicting keys, nested mappings are merged key by key,
    and sequences or scalars are replaced whole. A None value is an explicit null
    that overwrites like any scalar. None sources are skipped, and so are the unset
    fields of a model source.
    """
    destination: Context = {}
    for source in sources:
        context = as_context(source)
        if context is not None:
            _merge_into(destination, context)
    return destination


def _merge_into(destination: Context, source: Mapping[str, Any]) -> None:
    for key, value in source.items():
        if isinstance(value, BaseModel):
            value = as_context(value)
        if isinstance(value, Mapping):
            existing = destination.get(key)
            # Only containers created by this module end up in destination, so they can be merged in place
            if not isinstance(existing, dict):
                existing = {}
                destination[key] = existing
            _merge_into(existing, value)
        else:
            destination[key] = copy.deepcopy(value)


@pure
def to_snake_case(word: str) -> str:
    """Convert a medial-capitalized key to its underscore-separated form ('bytesWritten' -> 'bytes_written')."""
    converted = _UPPERCASE_LETTER.sub(
        lambda match: ("_" if match.start() != 0 else "") + match.group(0).lower(),
        word,
    )
    return converted.replace("-", "_")


@pure
def with_snake_case_keys(value: Any) -> Any:
    """Return a copy of value with every mapping key (at any depth) converted to snake_case."""
    if isinstance(value, Mapping):
        return {to_snake_case(str(key)): with_snake_case_keys(item) for key, item in value.items()}
    if isinstance(value, list | tuple):
        return [with_snake_case_keys(item) for item in value]
    return value


class GlobalContextStore(MutableModel):
    """Mutable key-value bag owned by the host application.

    ``set()`` keeps the mapping the host hands over, so the host may keep mutating
    it. Readers only ever see ``get()`` snapshots, which are deep copies taken at
    the moment of the call.
    """

    context: Context = Field(default_factory=dict, description="The live global context")

    def get(self) -> Context:
        """Return a deep, independent snapshot of the current global context."""
        return copy.deepcopy(self.context)

    def set(self, context: Context) -> None:
        """Replace the whole global context with the given mapping."""
        self.context = context

    def add(self, key: str, value: Any) -> None:
        """Set a single key of the global context."""
        self.context[key] = value

    def remove(self, key: str) -> None:
        """Remove a key from the global context, if present."""
        self.context.pop(key, None)
