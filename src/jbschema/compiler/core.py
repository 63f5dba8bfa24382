"""Template compiler: Jbuilder source to node tree.

Walks the tree-sitter tree of one template depth-first and builds the node
tree bottom-up. Every call is classified once and handed to the handler for
its primitive; conditionals mark everything they contain as conditional;
partial references compile the partial in the same session.

Design Principles:
1. **Static only**: Templates are parsed, never executed
2. **Best effort**: Nothing inside a walk raises; anomalies degrade to
   missing annotations or empty subtrees
3. **Explicit state**: A frozen `Frame` is passed down, the only shared
   mutable state is the `CompileSession` of the current compilation
4. **O(1) dispatch**: Dict-based primitive → handler lookup

Example:
    >>> from jbschema import DictLoader, TemplateCompiler
    >>> loader = DictLoader({"users/show.json.jbuilder": (
    ...     "# @openapi id:integer\\n"
    ...     "json.id @user.id\\n"
    ... )})
    >>> result = TemplateCompiler(loader).compile("users/show.json.jbuilder")
    >>> result.root.children[0].annotation.type
    'integer'

"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass, field, replace

from tree_sitter import Node as SyntaxNode

from jbschema.analysis.coverage import MissingAnnotation, find_missing_annotations
from jbschema.annotations import AnnotationData, OperationDeclaration
from jbschema.classifier import CallArgument, CallShape, Primitive, classify
from jbschema.compiler.context import CompileSession, Frame, SourceFile
from jbschema.compiler.partials import (
    component_name,
    partial_property_name,
    resolve_partial_name,
)
from jbschema.environment.config import DEFAULT_CONFIG, CompilerConfig
from jbschema.environment.exceptions import TemplateNotFoundError
from jbschema.environment.loaders import Loader
from jbschema.nodes import ArrayNode, Node, ObjectNode, PartialNode, PropertyNode
from jbschema.parser import (
    CONDITIONAL_TYPES,
    block_statements,
    branches,
    call_operands,
    call_shape,
    is_call,
    new_parser,
    parse_source,
)

logger = logging.getLogger(__name__)

# Annotation of synthetic containers: the tree root and array item objects.
OBJECT_ANNOTATION = AnnotationData(type="object")

# Name given to an unnamed array that ends up inside an object.
ORPHAN_ARRAY_NAME = "items"

Handler = Callable[[SyntaxNode, CallShape, Frame], None]


@dataclass(frozen=True, slots=True)
class CompilationResult:
    """Output of compiling one top-level template.

    Attributes:
        name: Template name that was compiled.
        root: Root object, or the root array for ``json.array!`` templates.
        operation: First ``@openapi_operation`` of the top-level template.
        components: Compiled partial roots by PascalCase component name.
        unresolved_partials: Partial template names the loader did not have.
    """

    name: str
    root: ObjectNode | ArrayNode
    operation: OperationDeclaration | None = None
    components: Mapping[str, Node] = field(default_factory=dict)
    unresolved_partials: tuple[str, ...] = ()

    def missing_annotations(self) -> list[MissingAnnotation]:
        """Unannotated keys of the compiled tree, for coverage reports."""
        return find_missing_annotations(self.root)


class TemplateCompiler:
    """Compile Jbuilder templates into node trees.

    A compiler holds the loader, an immutable configuration and its own
    tree-sitter parser. Compilations on one instance are independent but
    sequential; use one instance per thread.

    Attributes:
        loader: Source of templates and partials.
        config: Classification and compilation settings.

    Example:
            >>> compiler = TemplateCompiler(FileSystemLoader("app/views"))
            >>> result = compiler.compile("api/posts/index.json.jbuilder")
            >>> result.root.is_root_array
            True

    """

    __slots__ = ("_dispatch", "_parser", "config", "loader")

    def __init__(self, loader: Loader, config: CompilerConfig | None = None):
        self.loader = loader
        self.config = config or DEFAULT_CONFIG
        self._parser = new_parser()
        self._dispatch: dict[Primitive, Handler] = {
            Primitive.PROPERTY_CALL: self._compile_property,
            Primitive.OBJECT_BLOCK: self._compile_object_block,
            Primitive.ARRAY_DECLARATION: self._compile_array,
            Primitive.PARTIAL_REFERENCE: self._compile_partial,
            Primitive.NO_OP_DIRECTIVE: self._compile_directive,
        }

    def compile(self, name: str) -> CompilationResult:
        """Load and compile a template by name.

        Raises:
            TemplateNotFoundError: If the loader does not have the template.
        """
        source, _filename = self.loader.get_source(name)
        return self.compile_source(source, name=name)

    def compile_source(self, source: str, name: str = "<string>") -> CompilationResult:
        """Compile template source directly."""
        session = CompileSession()
        nodes = self._compile_file(source, name, session)
        return CompilationResult(
            name=name,
            root=self._finish_root(nodes),
            operation=session.operation,
            components=dict(session.components),
            unresolved_partials=tuple(session.unresolved),
        )

    # ------------------------------------------------------------------
    # Files
    # ------------------------------------------------------------------

    def _compile_file(self, source: str, name: str, session: CompileSession) -> list[Node]:
        """Compile one file to its list of top-level nodes."""
        tree = parse_source(source, self._parser)
        if tree.has_error:
            logger.debug(f"Syntax errors in {name}; compiling the recovered tree")

        file = SourceFile.from_tree(name, tree)
        if session.depth == 0 and session.operation is None:
            session.operation = file.first_operation()

        sink: list[Node] = []
        session.active.append(name)
        try:
            self._walk_all(tree.root.named_children, Frame(file=file, session=session, sink=sink))
        finally:
            session.active.pop()
        return sink

    def _finish_root(self, nodes: Sequence[Node]) -> ObjectNode | ArrayNode:
        """Wrap a file's top-level nodes into the tree root."""
        if len(nodes) == 1 and _is_unnamed_array(nodes[0]):
            return replace(nodes[0], is_root_array=True)
        return ObjectNode(1, 0, None, _name_orphans(nodes), OBJECT_ANNOTATION)

    # ------------------------------------------------------------------
    # Walk
    # ------------------------------------------------------------------

    def _walk_all(self, nodes: Sequence[SyntaxNode], frame: Frame) -> None:
        for node in nodes:
            self._walk(node, frame)

    def _walk(self, node: SyntaxNode, frame: Frame) -> None:
        if node.type == "comment":
            return
        if is_call(node):
            self._visit_call(node, frame)
        elif node.type in CONDITIONAL_TYPES:
            self._walk_all(branches(node), frame.branch())
        else:
            self._walk_all(node.named_children, frame)

    def _visit_call(self, node: SyntaxNode, frame: Frame) -> None:
        shape = call_shape(node)
        primitive = classify(shape, self.config)
        handler = self._dispatch.get(primitive) if primitive is not None else None
        if handler is None:
            if shape.receiver == self.config.root_receiver:
                logger.debug(
                    f"Unclassified builder call {shape.receiver}.{shape.name} "
                    f"at {frame.file.name}:{shape.lineno}"
                )
            # Not a builder call: keep looking for builder calls inside it
            self._walk_all(call_operands(node), frame)
            return
        handler(node, shape, frame)

    def _annotation(self, shape: CallShape, frame: Frame) -> AnnotationData:
        return frame.file.lookup(shape.lineno, self.config.annotation_window)

    def _emit(self, frame: Frame, node: Node) -> None:
        """Append a node to the current sink, marking it conditional if needed."""
        if frame.in_conditional:
            annotation: AnnotationData = node.annotation  # type: ignore[attr-defined]
            node = replace(node, annotation=annotation.as_conditional())
        frame.sink.append(node)

    def _collect(self, statements: Sequence[SyntaxNode], frame: Frame) -> list[Node]:
        sink: list[Node] = []
        self._walk_all(statements, frame.nested(sink))
        return sink

    # ------------------------------------------------------------------
    # Primitives
    # ------------------------------------------------------------------

    def _compile_property(self, node: SyntaxNode, shape: CallShape, frame: Frame) -> None:
        """``json.key value``, ``json.key coll do |x|``, ``json.key coll, partial:``."""
        annotation = self._annotation(shape, frame)
        partial = shape.option(self.config.partial_key)

        if partial is not None:
            items = self._partial_items(partial, shape, frame)
            self._emit(frame, ArrayNode(shape.lineno, shape.col_offset, shape.name, items, annotation))
        elif shape.has_block:
            items = self._block_items(node, shape, frame)
            self._emit(frame, ArrayNode(shape.lineno, shape.col_offset, shape.name, items, annotation))
        elif (attributes := _extracted_attributes(shape)) is not None:
            children = tuple(
                PropertyNode(shape.lineno, shape.col_offset, attribute) for attribute in attributes
            )
            self._emit(
                frame, ObjectNode(shape.lineno, shape.col_offset, shape.name, children, annotation)
            )
        else:
            self._emit(frame, PropertyNode(shape.lineno, shape.col_offset, shape.name, annotation))

    def _compile_object_block(self, node: SyntaxNode, shape: CallShape, frame: Frame) -> None:
        """``json.key do ... end``"""
        annotation = self._annotation(shape, frame)
        children = self._collect(block_statements(node), frame)

        if len(children) == 1 and _is_unnamed_array(children[0]):
            inner: ArrayNode = children[0]  # type: ignore[assignment]
            self._emit(
                frame,
                replace(
                    inner,
                    name=shape.name,
                    annotation=inner.annotation if annotation.missing else annotation,
                ),
            )
            return

        self._emit(
            frame,
            ObjectNode(shape.lineno, shape.col_offset, shape.name, _name_orphans(children), annotation),
        )

    def _compile_array(self, node: SyntaxNode, shape: CallShape, frame: Frame) -> None:
        """``json.array! coll do |x| ... end`` and its partial/extract forms."""
        annotation = self._annotation(shape, frame)
        partial = shape.option(self.config.partial_key)

        items: tuple[Node, ...] = ()
        if shape.has_block:
            items = self._block_items(node, shape, frame)
        elif partial is not None:
            items = self._partial_items(partial, shape, frame)
        elif (attributes := _extracted_attributes(shape)) is not None:
            children = tuple(
                PropertyNode(shape.lineno, shape.col_offset, attribute) for attribute in attributes
            )
            items = (ObjectNode(shape.lineno, shape.col_offset, None, children, OBJECT_ANNOTATION),)

        self._emit(frame, ArrayNode(shape.lineno, shape.col_offset, None, items, annotation))

    def _compile_partial(self, node: SyntaxNode, shape: CallShape, frame: Frame) -> None:
        """``json.partial! 'path', locals`` and ``json.partial! 'path', collection:``"""
        path = _partial_path(shape, self.config.partial_key)
        if path is None:
            logger.debug(f"Dynamic partial path at {frame.file.name}:{shape.lineno}; skipped")
            return

        if shape.has_option(self.config.collection_key):
            annotation = self._annotation(shape, frame)
            items = self._partial_items(CallArgument("string", path), shape, frame)
            self._emit(frame, ArrayNode(shape.lineno, shape.col_offset, None, items, annotation))
            return

        resolved = self._include(path, frame)
        if resolved is None:
            return
        template, nodes = resolved

        if self.config.inline_partials:
            for child in nodes:
                self._emit(frame, child)
            return

        self._emit(
            frame,
            PartialNode(
                shape.lineno,
                shape.col_offset,
                partial_property_name(path, self.config.template_extension),
                template,
                nodes,
                self._annotation(shape, frame),
            ),
        )

    def _compile_directive(self, node: SyntaxNode, shape: CallShape, frame: Frame) -> None:
        """``json.cache! key do ... end``: the body emits into the current parent."""
        self._walk_all(block_statements(node), frame)

    # ------------------------------------------------------------------
    # Items and partials
    # ------------------------------------------------------------------

    def _block_items(self, node: SyntaxNode, shape: CallShape, frame: Frame) -> tuple[Node, ...]:
        """Compile an iteration block body into one item object."""
        children = self._collect(block_statements(node), frame)
        if not children:
            return ()
        return (
            ObjectNode(shape.lineno, shape.col_offset, None, _name_orphans(children), OBJECT_ANNOTATION),
        )

    def _partial_items(
        self, argument: CallArgument, shape: CallShape, frame: Frame
    ) -> tuple[Node, ...]:
        """Compile ``partial: 'path'`` into the item of an array."""
        if argument.kind != "string":
            logger.debug(f"Dynamic partial path at {frame.file.name}:{shape.lineno}; skipped")
            return ()

        resolved = self._include(argument.value, frame)
        if resolved is None:
            return ()
        template, nodes = resolved

        if not self.config.inline_partials:
            name = partial_property_name(argument.value, self.config.template_extension)
            return (PartialNode(shape.lineno, shape.col_offset, name, template, nodes, OBJECT_ANNOTATION),)
        if not nodes:
            return ()
        if len(nodes) == 1 and _is_unnamed_array(nodes[0]):
            return nodes
        return (ObjectNode(shape.lineno, shape.col_offset, None, _name_orphans(nodes), OBJECT_ANNOTATION),)

    def _include(self, path: str, frame: Frame) -> tuple[str, tuple[Node, ...]] | None:
        """Resolve, load and compile a partial in the current session.

        Returns:
            The partial's template name and top-level nodes, or None when it
            is cyclic, too deep or missing.
        """
        session = frame.session
        template = resolve_partial_name(path, frame.file.name, self.config.template_extension)

        if template in session.active:
            logger.debug(f"Cyclic partial {template} from {frame.file.name}; skipped")
            return None
        if session.depth > self.config.max_partial_depth:
            logger.warning(
                f"Partial {template} exceeds max_partial_depth="
                f"{self.config.max_partial_depth} (chain: {' -> '.join(session.active)}); skipped"
            )
            return None

        try:
            source, _filename = self.loader.get_source(template)
        except TemplateNotFoundError:
            logger.debug(f"Partial {template} referenced from {frame.file.name} not found")
            session.record_unresolved(template)
            return None

        nodes = tuple(self._compile_file(source, template, session))
        session.components.setdefault(
            component_name(template, self.config.template_extension), self._finish_root(nodes)
        )
        return template, nodes


def _is_unnamed_array(node: Node) -> bool:
    return isinstance(node, ArrayNode) and node.name is None


def _name_orphans(nodes: Sequence[Node]) -> tuple[Node, ...]:
    """Give unnamed arrays inside an object a key."""
    return tuple(
        replace(node, name=ORPHAN_ARRAY_NAME) if _is_unnamed_array(node) else node
        for node in nodes
    )


def _extracted_attributes(shape: CallShape) -> tuple[str, ...] | None:
    """Symbols of ``json.author @author, :id, :name``, or None."""
    positional = shape.positional
    if len(positional) < 2:
        return None
    tail = positional[1:]
    if not all(argument.kind == "symbol" for argument in tail):
        return None
    return tuple(argument.value for argument in tail)


def _partial_path(shape: CallShape, partial_key: str) -> str | None:
    path = shape.first_string()
    if path is not None:
        return path
    option = shape.option(partial_key)
    if option is not None and option.kind == "string":
        return option.value
    return None
