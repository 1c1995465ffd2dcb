"""
Lexical scopes used while parsing definitions.

Every definition opens a scope one level deeper than the one it is
declared in. A scope holds the definition's arguments, its temporary
piles and the nested definitions declared so far. Names are resolved
innermost first; the depth difference between use and declaration
becomes the ``levels_up`` stored in the AST, so the evaluator never
looks names up.

Author: xwest
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

from .ast_nodes import ArgKind, Identifier, MoveDefinition


@dataclass(frozen=True)
class ScopeEntry:
    """A declared argument or temporary pile."""
    name: str
    kind: ArgKind
    depth: int
    index: int
    is_temporary: bool = False


@dataclass
class Scope:
    """A lexical scope: one per enclosing definition, plus the top level."""
    name: str
    depth: int = 0
    parent: Optional["Scope"] = None
    symbols: Dict[str, ScopeEntry] = field(default_factory=dict)
    definitions: List[MoveDefinition] = field(default_factory=list)

    @classmethod
    def top_level(cls) -> "Scope":
        return cls("<top>")

    def enter(self, name: str) -> "Scope":
        """Open the scope of a definition declared in this scope."""
        return Scope(name, self.depth + 1, parent=self)

    @property
    def path(self) -> Tuple[str, ...]:
        """Names of the definitions enclosing this scope, outermost first."""
        if self.parent is None:
            return ()
        return self.parent.path + (self.name,)

    def define_argument(self, name: str, kind: ArgKind, index: int) -> ScopeEntry:
        entry = ScopeEntry(name, kind, self.depth, index)
        self.symbols[name] = entry
        return entry

    def define_temporary(self, name: str, index: int) -> ScopeEntry:
        entry = ScopeEntry(name, ArgKind.PILE, self.depth, index, is_temporary=True)
        self.symbols[name] = entry
        return entry

    def define_definition(self, definition: MoveDefinition) -> None:
        self.definitions.append(definition)

    def lookup_symbol(self, name: str) -> Optional[ScopeEntry]:
        """Look up an argument or temporary here and in enclosing scopes."""
        if name in self.symbols:
            return self.symbols[name]
        if self.parent:
            return self.parent.lookup_symbol(name)
        return None

    def lookup_definitions(self, name: str) -> List[MoveDefinition]:
        """Nested definitions named ``name`` visible here, innermost first."""
        found = [d for d in self.definitions if d.name == name]
        if self.parent:
            found.extend(self.parent.lookup_definitions(name))
        return found

    def lookup_definition_local(self, identifier: Identifier) -> Optional[MoveDefinition]:
        """Look up a nested definition declared directly in this scope."""
        for definition in self.definitions:
            if definition.identifier == identifier:
                return definition
        return None

    def __str__(self) -> str:
        return f"Scope({self.name}, depth {self.depth}, {len(self.symbols)} symbols)"
