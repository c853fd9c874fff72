"""Grammar definitions and the registry that picks one per file extension."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import PurePath
from typing import Dict, FrozenSet, Iterable, Iterator, Optional, Tuple

from hecto_engine.buffer import graphemes
from hecto_engine.runtime.telemetry import span


def _normalize_extension(extension: str) -> str:
    return extension.strip().lower().lstrip(".")


@dataclass(frozen=True, slots=True)
class Grammar:
    """Lexical description of a language.

    ``strings`` lists the characters that open (and close) a string literal;
    ``characters`` enables short single-quoted character literals such as
    ``'a'`` or ``'\\n'``. With ``multiline_strings`` an unterminated string
    carries over into the next row.
    """

    name: str
    extensions: Tuple[str, ...] = ()
    numbers: bool = False
    characters: bool = False
    strings: Tuple[str, ...] = ()
    multiline_strings: bool = False
    line_comment: Optional[str] = None
    block_comment: Optional[Tuple[str, str]] = None
    keywords: FrozenSet[str] = frozenset()
    types: FrozenSet[str] = frozenset()
    operators: str = ""
    _line_comment: Tuple[str, ...] = field(default=(), init=False, repr=False, compare=False)
    _block_open: Tuple[str, ...] = field(default=(), init=False, repr=False, compare=False)
    _block_close: Tuple[str, ...] = field(default=(), init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        if not self.name:
            raise ValueError("grammar name cannot be empty")
        object.__setattr__(
            self, "extensions", tuple(_normalize_extension(e) for e in self.extensions)
        )
        object.__setattr__(self, "keywords", frozenset(self.keywords))
        object.__setattr__(self, "types", frozenset(self.types))
        if self.line_comment:
            object.__setattr__(self, "_line_comment", tuple(graphemes.split(self.line_comment)))
        if self.block_comment:
            opener, closer = self.block_comment
            if not opener or not closer:
                raise ValueError(f"grammar '{self.name}' has an empty block comment marker")
            object.__setattr__(self, "_block_open", tuple(graphemes.split(opener)))
            object.__setattr__(self, "_block_close", tuple(graphemes.split(closer)))

    @property
    def is_plain(self) -> bool:
        return not (
            self.numbers
            or self.characters
            or self.strings
            or self.line_comment
            or self.block_comment
            or self.keywords
            or self.types
            or self.operators
        )

    @property
    def line_comment_token(self) -> Tuple[str, ...]:
        return self._line_comment

    @property
    def block_tokens(self) -> Tuple[Tuple[str, ...], Tuple[str, ...]]:
        return self._block_open, self._block_close


PLAIN_TEXT = Grammar(name="No filetype")


class GrammarConflictError(RuntimeError):
    """Raised when a grammar claims an extension another grammar owns."""

    def __init__(self, grammar: Grammar, extension: str, owner: Grammar) -> None:
        super().__init__(
            f"Grammar '{grammar.name}' claims '.{extension}' already owned by '{owner.name}'"
        )
        self.grammar = grammar
        self.extension = extension
        self.owner = owner


class GrammarRegistry:
    """Maps file extensions to grammars; unknown extensions get plain text."""

    def __init__(self, *, fallback: Grammar = PLAIN_TEXT, logger_name: str | None = None) -> None:
        self._grammars: Dict[str, Grammar] = {}
        self._by_extension: Dict[str, str] = {}
        self._fallback = fallback
        self._logger_name = logger_name

    def __len__(self) -> int:
        return len(self._grammars)

    def __iter__(self) -> Iterator[Grammar]:
        return iter(self._grammars.values())

    @property
    def fallback(self) -> Grammar:
        return self._fallback

    def get(self, name: str) -> Grammar:
        try:
            return self._grammars[name]
        except KeyError as exc:
            raise KeyError(f"Grammar '{name}' is not registered") from exc

    def register(self, grammar: Grammar, *, replace: bool = False) -> Grammar:
        with span(
            "highlight::register_grammar",
            logger_name=self._logger_name,
            component="highlight",
            metadata={"grammar": grammar.name},
        ) as handle:
            if grammar.name in self._grammars and not replace:
                raise ValueError(f"Grammar '{grammar.name}' already registered")
            for extension in grammar.extensions:
                owner_name = self._by_extension.get(extension)
                if owner_name and owner_name != grammar.name and not replace:
                    handle.add_metadata("conflict", extension)
                    raise GrammarConflictError(grammar, extension, self._grammars[owner_name])
            previous = self._grammars.get(grammar.name)
            if previous is not None:
                for extension in previous.extensions:
                    self._by_extension.pop(extension, None)
            self._grammars[grammar.name] = grammar
            for extension in grammar.extensions:
                self._by_extension[extension] = grammar.name
            return grammar

    def register_many(self, grammars: Iterable[Grammar]) -> None:
        for grammar in grammars:
            self.register(grammar)

    def for_extension(self, extension: str) -> Grammar:
        name = self._by_extension.get(_normalize_extension(extension))
        return self._grammars[name] if name else self._fallback

    def for_filename(self, filename: Optional[str]) -> Grammar:
        if not filename:
            return self._fallback
        return self.for_extension(PurePath(filename).suffix)


__all__ = [
    "Grammar",
    "PLAIN_TEXT",
    "GrammarConflictError",
    "GrammarRegistry",
]
