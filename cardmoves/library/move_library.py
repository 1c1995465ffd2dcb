"""
The move library: registry of named, overloaded move definitions.

Besides storing definitions by identifier, the library keeps the reverse
dependency edges (``used_by``) so that removing a definition also removes
everything that calls it, and so that the whole library can be laid out
in dependency order for serialization.

Library values are persistent: ``insert`` and ``remove`` return a new
library and leave the receiver untouched.

Invariants:
- every identifier in ``leaves`` has no direct uses
- ``used_by[x]`` holds exactly the registered definitions that directly
  invoke the library-level definition ``x``
- ``by_name[n]`` holds exactly the identifiers of definitions named ``n``

Author: xwest
"""

import logging
from typing import Dict, Iterable, Iterator, List, Optional, Set, Tuple

from ..config import MovesConfiguration, DEFAULT_CONFIGURATION
from ..parser.ast_nodes import Identifier, MoveDefinition, UserDefined, iter_invocations

logger = logging.getLogger(__name__)


def direct_uses(definition: MoveDefinition) -> List[Identifier]:
    """
    Identifiers of the library-level definitions ``definition`` invokes.

    Invocations inside nested definitions count for the enclosing
    definition; invocations of nested definitions themselves do not.
    Order of first appearance, no repeats.
    """
    uses: List[Identifier] = []
    seen: Set[Identifier] = set()

    def collect(body):
        if not isinstance(body, UserDefined):
            return
        for nested in body.nested_definitions:
            collect(nested.body)
        for invocation in iter_invocations(body.moves):
            callee = invocation.definition
            if callee.is_global and callee.identifier not in seen:
                seen.add(callee.identifier)
                uses.append(callee.identifier)

    collect(definition.body)
    return uses


class MoveLibrary:
    """
    Registry of move definitions keyed by identifier.
    """

    def __init__(self, config: Optional[MovesConfiguration] = None):
        self.config = config or DEFAULT_CONFIGURATION
        self.by_identifier: Dict[Identifier, MoveDefinition] = {}
        self.leaves: Set[Identifier] = set()
        self.by_name: Dict[str, List[Identifier]] = {}
        self.used_by: Dict[Identifier, Set[Identifier]] = {}

    @classmethod
    def with_primitives(cls, config: Optional[MovesConfiguration] = None) -> "MoveLibrary":
        """A library holding the built-in moves."""
        from ..evaluator.primitives import PRIMITIVES
        return cls(config).insert_all(PRIMITIVES)

    def _copy(self) -> "MoveLibrary":
        library = MoveLibrary(self.config)
        library.by_identifier = dict(self.by_identifier)
        library.leaves = set(self.leaves)
        library.by_name = {name: list(ids) for name, ids in self.by_name.items()}
        library.used_by = {used: set(users) for used, users in self.used_by.items()}
        return library

    # Queries

    def get(self, identifier: Identifier) -> Optional[MoveDefinition]:
        return self.by_identifier.get(identifier)

    def get_by_name(self, name: str) -> List[MoveDefinition]:
        """All overloads registered under ``name``."""
        return [self.by_identifier[identifier] for identifier in self.by_name.get(name, [])]

    def names(self) -> List[str]:
        return sorted(self.by_name)

    def __contains__(self, identifier: Identifier) -> bool:
        return identifier in self.by_identifier

    def __len__(self) -> int:
        return len(self.by_identifier)

    def __iter__(self) -> Iterator[MoveDefinition]:
        return iter(self.by_identifier.values())

    # Updates

    def insert(self, definition: MoveDefinition) -> "MoveLibrary":
        """
        Return a library with ``definition`` registered.

        Re-inserting an existing identifier replaces the old definition and
        its outgoing dependency edges; callers of the old definition keep
        their edges.
        """
        identifier = definition.identifier
        uses = direct_uses(definition)
        library = self._copy()

        previous = library.by_identifier.get(identifier)
        if previous is not None:
            for used in direct_uses(previous):
                users = library.used_by.get(used)
                if users is not None:
                    users.discard(identifier)
            library.leaves.discard(identifier)

        library.by_identifier[identifier] = definition

        if not uses:
            library.leaves.add(identifier)

        same_name = [i for i in library.by_name.get(definition.name, []) if i != identifier]
        same_name.append(identifier)
        library.by_name[definition.name] = same_name

        library.used_by.setdefault(identifier, set())
        for used in uses:
            library.used_by.setdefault(used, set()).add(identifier)

        logger.debug("Inserted %s (uses: %s)", identifier, ", ".join(str(u) for u in uses) or "none")
        library._verify("insert", identifier)
        return library

    def insert_all(self, definitions: Iterable[MoveDefinition]) -> "MoveLibrary":
        library = self
        for definition in definitions:
            library = library.insert(definition)
        return library

    def transitive_dependents(self, identifier: Identifier) -> List[Identifier]:
        """
        ``identifier`` plus everything that uses it, directly or not.

        Each identifier in the result comes after every identifier of the
        result that it uses, so reversing the list gives a safe removal
        order. Unknown identifiers give an empty list.
        """
        if identifier not in self.by_identifier:
            return []

        visited: Set[Identifier] = {identifier}
        postorder: List[Identifier] = []
        # Iterative depth-first search over users
        stack = [(identifier, iter(sorted(self.used_by.get(identifier, ()))))]
        while stack:
            current, users = stack[-1]
            for user in users:
                if user not in visited and user in self.by_identifier:
                    visited.add(user)
                    stack.append((user, iter(sorted(self.used_by.get(user, ())))))
                    break
            else:
                stack.pop()
                postorder.append(current)

        postorder.reverse()
        return postorder

    # Historical name: what would break if this were removed
    dependencies = transitive_dependents

    def remove(self, identifier: Identifier) -> Tuple[List[MoveDefinition], "MoveLibrary"]:
        """
        Remove ``identifier`` and everything depending on it.

        Returns the removed definitions, dependents first, and the pruned
        library. Unknown identifiers remove nothing.
        """
        doomed = self.transitive_dependents(identifier)
        if not doomed:
            return [], self

        library = self._copy()
        removed: List[MoveDefinition] = []
        for current in reversed(doomed):
            definition = library.by_identifier.pop(current)
            removed.append(definition)

            same_name = [i for i in library.by_name.get(definition.name, []) if i != current]
            if same_name:
                library.by_name[definition.name] = same_name
            else:
                library.by_name.pop(definition.name, None)

            library.used_by.pop(current, None)

        removed_ids = set(doomed)
        library.leaves -= removed_ids
        for users in library.used_by.values():
            users -= removed_ids

        logger.debug("Removed %s", ", ".join(str(d.identifier) for d in removed))
        library._verify("remove", identifier)
        return removed, library

    # Listings

    def to_list_top_sort(self) -> List[MoveDefinition]:
        """
        All definitions, each one before the definitions it uses.

        Repeatedly removes the smallest leaf together with its dependents.
        """
        result: List[MoveDefinition] = []
        library = self
        while library.leaves:
            leaf = min(library.leaves)
            removed, library = library.remove(leaf)
            result.extend(removed)

        if library.by_identifier:
            # Only reachable through a dependency cycle created by re-insertion
            leftovers = library.to_list_alphabetic()
            logger.warning(
                "Definitions not reachable from any leaf: %s",
                ", ".join(str(d.identifier) for d in leftovers)
            )
            result.extend(leftovers)

        return result

    def to_list_alphabetic(self) -> List[MoveDefinition]:
        return sorted(self.by_identifier.values(), key=lambda d: (d.name, str(d.identifier)))

    # Consistency

    def check_invariants(self) -> List[str]:
        """Describe every broken library invariant; empty when consistent."""
        problems: List[str] = []
        uses_of = {identifier: set(direct_uses(definition))
                   for identifier, definition in self.by_identifier.items()}

        expected_leaves = {identifier for identifier, uses in uses_of.items() if not uses}
        if self.leaves != expected_leaves:
            problems.append(
                f"leaves mismatch: extra {sorted(map(str, self.leaves - expected_leaves))}, "
                f"missing {sorted(map(str, expected_leaves - self.leaves))}"
            )

        for used, users in self.used_by.items():
            for user in users:
                if user not in self.by_identifier:
                    problems.append(f"used_by[{used}] holds unregistered {user}")
                elif used not in uses_of[user]:
                    problems.append(f"used_by[{used}] holds {user}, which does not use it")

        for user, uses in uses_of.items():
            for used in uses:
                if used in self.by_identifier and user not in self.used_by.get(used, set()):
                    problems.append(f"{user} uses {used} but is missing from used_by")

        for name, identifiers in self.by_name.items():
            if len(set(identifiers)) != len(identifiers):
                problems.append(f"by_name[{name}] has repeated identifiers")
            for identifier in identifiers:
                definition = self.by_identifier.get(identifier)
                if definition is None or definition.name != name:
                    problems.append(f"by_name[{name}] holds stale {identifier}")

        for identifier, definition in self.by_identifier.items():
            if identifier not in self.by_name.get(definition.name, []):
                problems.append(f"{identifier} missing from by_name[{definition.name}]")

        return problems

    def _verify(self, operation: str, identifier: Identifier):
        if not self.config.check_library_invariants:
            return
        for problem in self.check_invariants():
            logger.error("Library invariant broken after %s %s: %s", operation, identifier, problem)

    def __repr__(self) -> str:
        return f"MoveLibrary({len(self)} definitions)"
