"""ParserBackend Protocol for the stable-uid parse/print extension point.

Defines the structural interface a source-language bridge must satisfy.
Users can plug in their own parser/printer without inheriting from any base
class: any object with conformant ``parse`` and ``print`` methods passes
``isinstance`` checks.

The reconciler makes no assumption about caching on the other side of this
interface; a backend is free to memoize parses or not.

Example::

    from stable_uid.protocols import ParserBackend
    from stable_uid.tree import ParsedFile

    class MyBackend:
        def parse(self, text: str) -> ParsedFile:
            ...

        def print(self, parsed_file: ParsedFile) -> str:
            ...

    assert isinstance(MyBackend(), ParserBackend)  # structural conformance
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from stable_uid.tree.nodes import ParsedFile


@runtime_checkable
class ParserBackend(Protocol):
    """Structural protocol for parser/printer bridges.

    - ``parse`` turns source text into an unlabeled ParsedFile.  Parse errors
      are the backend's to raise; the reconciler never reports them.
    - ``print`` serializes a labeled ParsedFile back to source text.
    """

    def parse(self, text: str) -> ParsedFile: ...

    def print(self, parsed_file: ParsedFile) -> str: ...
