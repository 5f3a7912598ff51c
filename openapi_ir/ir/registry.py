"""
Type registry built during a conversion pass.

Entries are only ever added. Adding a name twice fails loudly instead of
overwriting, so two nesting paths that synthesize the same name surface as
an error.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Iterable, Iterator

from ..errors import DuplicateTypeNameError, UnresolvedReferenceError
from .declarations import HttpService, TypeDeclaration


class TypeRegistry(Mapping):
    """Read-only mapping from name to TypeDeclaration."""

    def __init__(self, declarations: Iterable[TypeDeclaration] = ()):
        self._declarations: dict[str, TypeDeclaration] = {}
        for declaration in declarations:
            if declaration.name in self._declarations:
                raise DuplicateTypeNameError(declaration.name)
            self._declarations[declaration.name] = declaration

    def __getitem__(self, name: str) -> TypeDeclaration:
        return self._declarations[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._declarations)

    def __len__(self) -> int:
        return len(self._declarations)

    def __repr__(self) -> str:
        return f"TypeRegistry({list(self._declarations)!r})"

    def declarations(self) -> tuple[TypeDeclaration, ...]:
        return tuple(self._declarations.values())

    def unresolved_references(self, services: Iterable[HttpService] = ()) -> list[tuple[str, str]]:
        """Return (owner, name) pairs whose name is not declared here."""
        unresolved = []
        for declaration in self._declarations.values():
            for name in declaration.referenced_names():
                if name not in self._declarations:
                    unresolved.append((declaration.name, name))
        for service in services:
            for operation_id, endpoint in service.endpoints.items():
                for name in endpoint.referenced_names():
                    if name not in self._declarations:
                        unresolved.append((operation_id, name))
        return unresolved

    def check_references(self, services: Iterable[HttpService] = ()) -> None:
        unresolved = self.unresolved_references(services)
        if unresolved:
            raise UnresolvedReferenceError(unresolved)


class RegistryBuilder:
    """Accumulates declarations for one conversion pass."""

    def __init__(self):
        self._declarations: dict[str, TypeDeclaration] = {}

    def add(self, declaration: TypeDeclaration) -> None:
        if declaration.name in self._declarations:
            raise DuplicateTypeNameError(declaration.name)
        self._declarations[declaration.name] = declaration

    def extend(self, declarations: Iterable[TypeDeclaration]) -> None:
        """Add a fragment atomically: nothing is added if any name collides."""
        fragment = list(declarations)
        seen = set()
        for declaration in fragment:
            if declaration.name in self._declarations or declaration.name in seen:
                raise DuplicateTypeNameError(declaration.name)
            seen.add(declaration.name)
        for declaration in fragment:
            self._declarations[declaration.name] = declaration

    def __contains__(self, name: object) -> bool:
        return name in self._declarations

    def __len__(self) -> int:
        return len(self._declarations)

    def build(self) -> TypeRegistry:
        return TypeRegistry(self._declarations.values())
