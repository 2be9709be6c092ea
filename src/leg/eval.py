"""Tree-walking evaluator — closure arena, frame stack, and node dispatch."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TextIO

from leg.ast import (
    Alias,
    Assignment,
    Ast,
    Block,
    FunctionCall,
    FunctionDeclaration,
    Node,
    NullValue,
    NumberValue,
    OperatorCall,
    StringValue,
    StructDeclaration,
    Variable,
)
from leg.builtins import IF, PRINT, WHILE, print_values
from leg.errors import InterpError
from leg.operators import apply_operation
from leg.strings import resolve_escapes
from leg.values import (
    VOID,
    Function,
    InterpValue,
    Number,
    String,
    Struct,
    is_truthy,
)

logger = logging.getLogger(__name__)

DEFAULT_MAX_STACK_DEPTH = 10


@dataclass
class Closure:
    """One lexical scope: its own bindings plus the id of the enclosing scope."""

    creator: Node
    parent_id: int | None
    variables: dict[str, InterpValue] = field(default_factory=dict)


@dataclass(frozen=True, slots=True)
class Frame:
    """Activation record pointing at the closure active while it is on top."""

    depth: int
    creator: Node
    closure_id: int


class Interpreter:
    """Evaluation context for a single script run.

    Closures live in an append-only arena and refer to their parent by id.
    Function and struct values refer to declarations by index into the
    function and struct tables. Nothing is freed until the interpreter is
    discarded.
    """

    def __init__(
        self,
        *,
        max_stack_depth: int = DEFAULT_MAX_STACK_DEPTH,
        out: TextIO | None = None,
    ) -> None:
        if max_stack_depth < 1:
            raise ValueError(f"max_stack_depth must be positive, got {max_stack_depth}")
        self.max_stack_depth = max_stack_depth
        self.out = out
        self.closures: list[Closure] = []
        self.functions: list[FunctionDeclaration] = []
        self.structs: list[StructDeclaration] = []
        self.frames: list[Frame] = []
        self.call_stack: list[str] = []

    def run(self, ast: Ast) -> InterpValue:
        """Evaluate the script and return the root block's value."""
        root = ast.root
        self.closures = [Closure(root, None)]
        self.functions = []
        self.structs = []
        self.frames = [Frame(0, root, 0)]
        self.call_stack = []
        try:
            return self.evaluate(root)
        except RecursionError:
            raise InterpError(
                "stack overflow (native recursion limit reached)",
                call_stack=list(self.call_stack),
            ) from None

    # ------------------------------------------------------------------
    # Node dispatch
    # ------------------------------------------------------------------

    def evaluate(self, node: Node) -> InterpValue:
        if isinstance(node, Block):
            return self._evaluate_block(node, node)

        if isinstance(node, FunctionCall):
            return self._evaluate_call(node)

        if isinstance(node, OperatorCall):
            lhs = self.evaluate(node.lhs)
            rhs = self.evaluate(node.rhs)
            try:
                return apply_operation(node.operator, lhs, rhs)
            except InterpError as exc:
                raise self._error(exc.message, node) from None

        if isinstance(node, Variable):
            value = self._lookup(node.name)
            if value is None:
                raise self._error(f"undefined variable '{node.name}'", node)
            return value

        if isinstance(node, (Assignment, Alias)):
            value = self.evaluate(node.value)
            self._set_variable(node.target.name, value)
            return VOID

        if isinstance(node, NumberValue):
            return Number(node.value)

        if isinstance(node, StringValue):
            return String(resolve_escapes(node.value))

        if isinstance(node, FunctionDeclaration):
            index = len(self.functions)
            self.functions.append(node)
            # Capture the declaring scope, not the calling one
            closure_id = self._add_closure(node, self._current_frame().closure_id)
            return Function(index, closure_id)

        if isinstance(node, StructDeclaration):
            index = len(self.structs)
            self.structs.append(node)
            return Struct(index)

        if isinstance(node, NullValue):
            return VOID

        raise self._error(f"cannot interpret node {type(node).__name__}", node)

    def _evaluate_block(self, creator: Node, block: Block) -> InterpValue:
        closure_id = self._add_closure(creator, self._current_frame().closure_id)
        self._push_frame(creator, closure_id)
        try:
            result: InterpValue = VOID
            for statement in block.statements:
                result = self.evaluate(statement)
        finally:
            self._pop_frame()
        return result

    # ------------------------------------------------------------------
    # Calls
    # ------------------------------------------------------------------

    def _evaluate_call(self, node: FunctionCall) -> InterpValue:
        args = [self.evaluate(arg) for arg in node.arguments]

        if node.name == IF:
            return self._evaluate_if(node, args)

        if node.name == WHILE:
            logger.debug("while is not evaluated, returning Void")
            return VOID

        if node.name == PRINT:
            print_values(args, file=self.out)
            return VOID

        target = self._lookup(node.name)
        if not isinstance(target, Function):
            raise self._error(f"unable to find function '{node.name}'", node)
        return self._call_function(node, target, args)

    def _evaluate_if(self, node: FunctionCall, args: list[InterpValue]) -> InterpValue:
        if len(args) != 1:
            raise self._error(f"if takes exactly one argument, got {len(args)}", node)
        if node.body is None:
            raise self._error("if requires a body block", node)
        if is_truthy(args[0]):
            return self._evaluate_block(node, node.body)
        return VOID

    def _call_function(
        self, node: FunctionCall, function: Function, args: list[InterpValue]
    ) -> InterpValue:
        decl = self.functions[function.index]

        names: list[str] = []
        for param in decl.arguments:
            if not isinstance(param, Variable):
                raise self._error("invalid argument expression in function declaration", node)
            names.append(param.name)

        # Arity mismatch is a contract violation, not a script error
        assert len(names) == len(args), (
            f"'{node.name}' declares {len(names)} argument(s) but was called with {len(args)}"
        )
        bindings = list(zip(names, args, strict=True))

        logger.debug("call %s(%d args), depth %d", node.name, len(args), self._current_frame().depth)
        closure_id = self._add_closure(node, function.closure_id)
        self._push_frame(node, closure_id)
        self.call_stack.append(node.name)
        try:
            for name, value in bindings:
                self._set_variable(name, value)
            return self._evaluate_block(node, decl.body)
        finally:
            self.call_stack.pop()
            self._pop_frame()

    # ------------------------------------------------------------------
    # Scopes and frames
    # ------------------------------------------------------------------

    def _current_frame(self) -> Frame:
        return self.frames[-1]

    def _add_closure(self, creator: Node, parent_id: int) -> int:
        closure_id = len(self.closures)
        self.closures.append(Closure(creator, parent_id))
        return closure_id

    def _lookup(self, name: str) -> InterpValue | None:
        """Walk the closure chain from the current frame up to the root."""
        closure_id: int | None = self._current_frame().closure_id
        while closure_id is not None:
            closure = self.closures[closure_id]
            if name in closure.variables:
                return closure.variables[name]
            closure_id = closure.parent_id
        return None

    def _set_variable(self, name: str, value: InterpValue) -> None:
        # Always binds locally; an outer binding of the same name is shadowed
        self.closures[self._current_frame().closure_id].variables[name] = value

    def _push_frame(self, creator: Node, closure_id: int) -> None:
        depth = self._current_frame().depth + 1
        if depth > self.max_stack_depth:
            raise self._error(f"stack overflow (maximum depth {self.max_stack_depth} exceeded)", creator)
        self.frames.append(Frame(depth, creator, closure_id))
        logger.debug("push frame %d (closure %d)", depth, closure_id)

    def _pop_frame(self) -> Frame:
        if len(self.frames) <= 1:
            raise InterpError("unable to pop from stack: no parent frame")
        frame = self.frames.pop()
        logger.debug("pop frame %d", frame.depth)
        return frame

    def _error(self, message: str, node: Node) -> InterpError:
        return InterpError(message, getattr(node, "span", None), list(self.call_stack))


def evaluate(
    ast: Ast,
    *,
    max_stack_depth: int = DEFAULT_MAX_STACK_DEPTH,
    out: TextIO | None = None,
) -> InterpValue:
    """Convenience function: evaluate an Ast with a fresh Interpreter."""
    return Interpreter(max_stack_depth=max_stack_depth, out=out).run(ast)

