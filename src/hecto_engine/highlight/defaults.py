"""Built-in grammars registered with every new session."""

from __future__ import annotations

from .grammar import Grammar, GrammarRegistry

C_OPERATORS = "+-*/%=<>!&|^~?:"

RUST = Grammar(
    name="Rust",
    extensions=("rs",),
    numbers=True,
    characters=True,
    strings=('"',),
    multiline_strings=True,
    line_comment="//",
    block_comment=("/*", "*/"),
    keywords=frozenset(
        """as break const continue crate dyn else enum extern false fn for if impl
        in let loop match mod move mut pub ref return self Self static struct
        super trait true type unsafe use where while async await""".split()
    ),
    types=frozenset(
        """bool char i8 i16 i32 i64 i128 isize u8 u16 u32 u64 u128 usize f32 f64
        str String Vec Option Result Box""".split()
    ),
    operators=C_OPERATORS,
)

PYTHON = Grammar(
    name="Python",
    extensions=("py", "pyi"),
    numbers=True,
    strings=('"', "'"),
    line_comment="#",
    keywords=frozenset(
        """False None True and as assert async await break class continue def del
        elif else except finally for from global if import in is lambda nonlocal
        not or pass raise return try while with yield""".split()
    ),
    types=frozenset("int float str bytes bool list dict set tuple object".split()),
    operators="+-*/%=<>!&|^~@",
)

JAVA = Grammar(
    name="Java",
    extensions=("java",),
    numbers=True,
    characters=True,
    strings=('"',),
    line_comment="//",
    block_comment=("/*", "*/"),
    keywords=frozenset(
        """abstract assert break case catch class const continue default do else
        enum extends final finally for goto if implements import instanceof
        interface native new package private protected public return static
        strictfp super switch synchronized this throw throws transient try
        volatile while true false null var""".split()
    ),
    types=frozenset("boolean byte char double float int long short void String".split()),
    operators=C_OPERATORS,
)

C = Grammar(
    name="C",
    extensions=("c", "h"),
    numbers=True,
    characters=True,
    strings=('"',),
    line_comment="//",
    block_comment=("/*", "*/"),
    keywords=frozenset(
        """auto break case const continue default do else enum extern for goto if
        inline register restrict return sizeof static struct switch typedef
        union volatile while""".split()
    ),
    types=frozenset(
        "char double float int long short signed unsigned void size_t bool".split()
    ),
    operators=C_OPERATORS,
)

JAVASCRIPT = Grammar(
    name="JavaScript",
    extensions=("js", "mjs", "cjs", "ts"),
    numbers=True,
    strings=('"', "'", "`"),
    multiline_strings=True,
    line_comment="//",
    block_comment=("/*", "*/"),
    keywords=frozenset(
        """async await break case catch class const continue debugger default
        delete do else export extends finally for function if import in
        instanceof let new return super switch this throw try typeof var void
        while with yield true false null undefined""".split()
    ),
    types=frozenset("Array Boolean Map Number Object Promise Set String".split()),
    operators=C_OPERATORS,
)

DEFAULT_GRAMMARS: tuple[Grammar, ...] = (RUST, PYTHON, JAVA, C, JAVASCRIPT)


def load_default_grammars(registry: GrammarRegistry) -> GrammarRegistry:
    registry.register_many(DEFAULT_GRAMMARS)
    return registry


__all__ = [
    "DEFAULT_GRAMMARS",
    "RUST",
    "PYTHON",
    "JAVA",
    "C",
    "JAVASCRIPT",
    "load_default_grammars",
]
