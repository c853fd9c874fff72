"""Editor session: owns one document and processes one command per input event."""

from __future__ import annotations

from typing import Callable, Dict, Iterable, List, Optional

from hecto_engine.analysis.expression import ExpressionEvaluator
from hecto_engine.analysis.indent import IndentDetector, IndentPolicy
from hecto_engine.buffer.buffer import Buffer
from hecto_engine.buffer.document import Document
from hecto_engine.buffer.view import RendererSink, RenderRow, RenderView
from hecto_engine.highlight.defaults import load_default_grammars
from hecto_engine.highlight.engine import HighlightEngine
from hecto_engine.highlight.grammar import Grammar, GrammarRegistry
from hecto_engine.runtime import telemetry
from hecto_engine.runtime.config import EngineConfig
from hecto_engine.search.engine import SearchEngine

from . import editing, navigation, searching
from .models import (
    EDIT_MODE,
    SEARCH_MODE,
    Command,
    CommandKind,
    CommandResult,
    SessionBus,
)

Handler = Callable[["EditorSession", Command], CommandResult]

DEFAULT_VIEWPORT_HEIGHT = 24


class EditorSession:
    """Single-document editing session.

    ``handle`` is the entry point for every input event: it dispatches the
    command, applies mode switches, keeps the viewport on the cursor and
    publishes ``status`` and ``buffer.changed`` on :attr:`bus`. Any search
    still open when a non-search command arrives is committed first.
    """

    def __init__(
        self,
        lines: Optional[Iterable[str]] = None,
        *,
        filename: Optional[str] = None,
        config: Optional[EngineConfig] = None,
        registry: Optional[GrammarRegistry] = None,
        renderer: Optional[RendererSink] = None,
        logger_name: str = "hecto_engine.session",
    ) -> None:
        self.config = config or EngineConfig()
        self.logger_name = logger_name
        self.logger = telemetry.get_logger(logger_name)
        self.registry = registry or load_default_grammars(
            GrammarRegistry(logger_name="hecto_engine.highlight")
        )
        self.bus = SessionBus()
        self.evaluator = ExpressionEvaluator()
        self.renderer = renderer
        self.mode = EDIT_MODE
        self.status: Optional[str] = None
        self.message: Optional[str] = None
        self.viewport_top = 0
        self.viewport_height = DEFAULT_VIEWPORT_HEIGHT
        self.filename: Optional[str] = None
        self.grammar: Grammar
        self.indent: IndentPolicy
        self.buffer: Buffer
        self.search: SearchEngine
        self.open(lines or (), filename)

    def open(self, lines: Iterable[str], filename: Optional[str] = None) -> None:
        """Replace the session's document with ``lines``.

        Detects indentation, expands tabs when configured to, picks the
        grammar from ``filename`` and highlights every row.
        """

        with telemetry.span(
            name="session::open",
            logger_name=self.logger_name,
            component="session",
            metadata={"filename": filename or ""},
        ) as handle:
            document = Document.from_lines(lines)
            indent = IndentDetector(self.config).detect(document)
            if self.config.expand_tabs_on_load and not indent.uses_tabs:
                handle.add_metadata("expanded_rows", document.expand_tabs(indent.unit))
            self.filename = filename
            self.indent = indent
            self.grammar = self.registry.for_filename(filename)
            highlighter = HighlightEngine(self.grammar, logger_name="hecto_engine.highlight")
            self.buffer = Buffer(
                name=filename or "untitled",
                document=document,
                highlighter=highlighter,
                config=self.config,
            )
            self.search = SearchEngine(
                document,
                case_sensitive=self.config.search_case_sensitive,
                logger_name="hecto_engine.search",
            )
            self.mode = EDIT_MODE
            self.viewport_top = 0
            handle.add_metadata("rows", document.row_count())
            handle.add_metadata("grammar", self.grammar.name)
            handle.add_metadata("indent", repr(indent.unit))
        self.bus.emit("buffer.opened", {"filename": filename, "rows": document.row_count()})

    @property
    def document(self) -> Document:
        return self.buffer.document

    def lines(self) -> List[str]:
        return self.buffer.document.lines()

    def attach(self, renderer: Optional[RendererSink]) -> None:
        self.renderer = renderer

    def resize(self, height: int) -> None:
        if height < 1:
            raise ValueError("viewport height must be positive")
        self.viewport_height = height
        self._scroll()

    def handle(self, command: Command) -> CommandResult:
        handler = _HANDLERS.get(command.kind)
        if handler is None:
            raise KeyError(f"Unknown command '{command.kind}'")
        version = self.buffer.document.version
        with telemetry.span(
            name=f"session::{command.kind.value}",
            logger_name=self.logger_name,
            component="session",
            metadata={"mode": self.mode},
        ) as handle:
            if self.mode == SEARCH_MODE and not command.is_search:
                self._after(searching.commit_search(self, command))
            result = self._after(handler(self, command))
            handle.add_metadata("status", result.status)
        result.mode = self.mode
        result.changed = self.buffer.document.version != version
        self._publish(result)
        return result

    def _after(self, result: CommandResult) -> CommandResult:
        if result.switch_to and result.switch_to != self.mode:
            self._switch_mode(result.switch_to)
        return result

    def _switch_mode(self, name: str) -> None:
        previous = self.mode
        self.buffer.undo.close_group()
        self.mode = name
        telemetry.record_event(
            "mode.switch",
            data={"mode": name, "previous": previous},
            logger_name=self.logger_name,
        )
        self.bus.emit("mode.switch", name)

    def _publish(self, result: CommandResult) -> None:
        self.status = result.status
        self.message = result.message
        self._scroll()
        self.bus.emit("status", result)
        if result.changed:
            document = self.buffer.document
            self.bus.emit(
                "buffer.changed",
                {"version": document.version, "modified": document.modified},
            )
        if self.renderer is not None:
            self.renderer.paint(self.render_view())

    def _scroll(self) -> None:
        row = self.buffer.state.cursor.row
        if row < self.viewport_top:
            self.viewport_top = row
        elif row >= self.viewport_top + self.viewport_height:
            self.viewport_top = row - self.viewport_height + 1

    def render_view(self, top: Optional[int] = None, height: Optional[int] = None) -> RenderView:
        """Snapshot rows ``top..top+height`` with spans, cursor and search state."""

        document = self.buffer.document
        if document.peek_dirty_range() is not None:
            self.buffer.refresh_highlight()
        top = self.viewport_top if top is None else top
        height = self.viewport_height if height is None else height
        top = max(0, min(top, document.row_count() - 1))
        last = min(document.row_count(), top + max(height, 0))
        rows = tuple(
            RenderRow(index=index, text=row.text, spans=row.spans)
            for index, row in enumerate(document.rows(top, last), start=top)
        )

        pattern = None
        matches: tuple = ()
        current = None
        search_state = self.search.state
        if search_state is not None:
            pattern = search_state.pattern
            matches = tuple(match.as_range() for match in self.search.matches_between(top, last - 1))
            if search_state.current is not None:
                current = search_state.current.as_range()

        state = self.buffer.state
        selections = tuple(state.selections)
        if not selections and state.selection is not None:
            selections = (state.selection,)
        return RenderView(
            top=top,
            rows=rows,
            cursor=state.cursor,
            selections=selections,
            mode=self.mode,
            grammar=self.grammar.name,
            row_count=document.row_count(),
            modified=document.modified,
            search_pattern=pattern,
            matches=matches,
            current_match=current,
            status=self.message or self.status,
            attributes={"filename": self.filename or "", "indent": self.indent.unit},
        )


_HANDLERS: Dict[CommandKind, Handler] = {
    CommandKind.INSERT_CHAR: editing.insert_char,
    CommandKind.INSERT_TAB: editing.insert_tab,
    CommandKind.INSERT_NEWLINE: editing.insert_newline,
    CommandKind.DELETE_BACKWARD: editing.delete_backward,
    CommandKind.DELETE_FORWARD: editing.delete_forward,
    CommandKind.UNDO: editing.undo,
    CommandKind.REDO: editing.redo,
    CommandKind.COPY: editing.copy,
    CommandKind.PASTE: editing.paste,
    CommandKind.EVALUATE_EXPRESSION: editing.evaluate_expression,
    CommandKind.MOVE_CURSOR: navigation.move_cursor,
    CommandKind.BEGIN_SELECTION: navigation.begin_selection,
    CommandKind.CLEAR_SELECTION: navigation.clear_selection,
    CommandKind.BEGIN_SEARCH: searching.begin_search,
    CommandKind.SEARCH_NEXT: searching.search_next,
    CommandKind.SEARCH_PREV: searching.search_prev,
    CommandKind.ADD_AND_SEARCH: searching.add_and_search,
    CommandKind.DELETE_MATCHES: searching.delete_matches,
    CommandKind.REPLACE_MATCHES: searching.replace_matches,
    CommandKind.COMMIT_SEARCH: searching.commit_search,
    CommandKind.CANCEL_SEARCH: searching.cancel_search,
}


__all__ = ["EditorSession", "Handler", "DEFAULT_VIEWPORT_HEIGHT"]
