"""Type descriptors read from Python source text with libcst.

``SourceModuleReader`` parses one module without importing it and exposes
its classes (module-level classes and classes nested in class bodies;
classes defined inside functions are skipped) as ``SourceTypeDescriptor``
objects. Binding annotations are recognised by name: decorators such as
``binding_name("x")``, ``transient`` or ``annotate(Nillable(False))`` and
``Annotated[...]`` field annotations whose extras construct a binding
annotation kind. Arguments must be literals; anything else is skipped.

Base classes are resolved by name inside the module. Bases defined
elsewhere cannot be described and are ignored. An inheritance cycle among
the module's own classes raises ``DescriptorError``.

Copyright (c) 2025 Jim Schilling
This software is released under the MIT License.
"""

from __future__ import annotations

import ast
import functools
import logging
from collections.abc import Hashable
from dataclasses import dataclass, field
from typing import Any

import libcst as cst

from ..annotations import ANNOTATION_KINDS, BindingAnnotation, BindingName, PropertyOrder, Transient
from ..exceptions import DescriptorError
from ..naming import AccessorRole
from .base import CreatorSpec, FieldHandle, MethodHandle, TypeDescriptor, is_public_name, is_synthetic_name

_logger = logging.getLogger(__name__)

_MARKER_NAMES = frozenset({"object", "ABC", "Protocol", "Generic"})
_PROTOCOL_NAMES = frozenset({"Protocol"})
_ABC_NAMES = frozenset({"ABC", "ABCMeta"})
_ANNOTATED_NAMES = frozenset({"Annotated"})

# Decorator helpers from ``splurge_property_model.annotations`` and the kind they record.
_DECORATOR_KINDS: dict[str, type[BindingAnnotation]] = {
    "binding_name": BindingName,
    "nillable": ANNOTATION_KINDS["Nillable"],
    "date_format": ANNOTATION_KINDS["DateFormat"],
    "number_format": ANNOTATION_KINDS["NumberFormat"],
}


def dotted_name(node: cst.BaseExpression) -> str | None:
    """Return ``a.b.c`` for a name/attribute chain, the subscripted name for ``X[...]``."""
    if isinstance(node, cst.Name):
        return node.value
    if isinstance(node, cst.Attribute):
        prefix = dotted_name(node.value)
        return f"{prefix}.{node.attr.value}" if prefix else None
    if isinstance(node, cst.Subscript):
        return dotted_name(node.value)
    return None


def _last(name: str | None) -> str | None:
    return name.rsplit(".", 1)[-1] if name else None


@dataclass
class _ClassRecord:
    qualname: str
    node: cst.ClassDef
    enclosing: tuple[str, ...]
    base_names: list[str] = field(default_factory=list)


class _ClassCollector(cst.CSTVisitor):
    """Collect class definitions reachable from module and class scope."""

    def __init__(self) -> None:
        self.records: list[_ClassRecord] = []
        self._stack: list[str] = []

    def visit_ClassDef(self, node: cst.ClassDef) -> bool:  # noqa: N802 - libcst naming
        qualname = ".".join([*self._stack, node.name.value])
        record = _ClassRecord(qualname=qualname, node=node, enclosing=tuple(self._stack))
        for arg in node.bases:
            name = dotted_name(arg.value)
            if name is not None:
                record.base_names.append(name)
        self.records.append(record)
        self._stack.append(node.name.value)
        return True

    def leave_ClassDef(self, original_node: cst.ClassDef) -> None:  # noqa: N802 - libcst naming
        self._stack.pop()

    def visit_FunctionDef(self, node: cst.FunctionDef) -> bool:  # noqa: N802 - libcst naming
        return False


class SourceModuleReader:
    """Parse a module and hand out descriptors for its classes.

    Args:
        source_code: Python source text.
        module_name: Module name used to qualify class names and keys.

    Raises:
        DescriptorError: If the source cannot be parsed or its classes form
            an inheritance cycle.
    """

    def __init__(self, source_code: str, module_name: str = "__main__") -> None:
        self.module_name = module_name
        try:
            self._module = cst.parse_module(source_code)
        except cst.ParserSyntaxError as e:
            raise DescriptorError(f"Cannot parse module {module_name}: {e}", source=module_name) from e

        collector = _ClassCollector()
        self._module.visit(collector)
        self._records: dict[str, _ClassRecord] = {record.qualname: record for record in collector.records}
        self._descriptors: dict[str, SourceTypeDescriptor] = {}
        self._check_cycles()

    @property
    def class_names(self) -> list[str]:
        return list(self._records)

    def classes(self) -> list[SourceTypeDescriptor]:
        return [self.get(name) for name in self._records]

    def get(self, qualname: str) -> SourceTypeDescriptor:
        """Return the descriptor of the class named ``qualname``.

        Raises:
            DescriptorError: If the module defines no such class.
        """
        if qualname not in self._records:
            raise DescriptorError(
                f"Class {qualname} is not defined in module {self.module_name}",
                type_name=qualname,
                source=self.module_name,
            )
        descriptor = self._descriptors.get(qualname)
        if descriptor is None:
            descriptor = SourceTypeDescriptor(self, self._records[qualname])
            self._descriptors[qualname] = descriptor
        return descriptor

    def resolve_base(self, record: _ClassRecord, base_name: str) -> _ClassRecord | None:
        """Resolve a base class name as seen from the body enclosing ``record``."""
        scope = list(record.enclosing)
        while True:
            candidate = ".".join([*scope, base_name])
            if candidate in self._records and candidate != record.qualname:
                return self._records[candidate]
            if not scope:
                return None
            scope.pop()

    def code_for(self, node: cst.CSTNode) -> str:
        return self._module.code_for_node(node)

    def literal(self, node: cst.BaseExpression) -> tuple[bool, Any]:
        """Evaluate a literal expression, returning ``(ok, value)``."""
        code = self.code_for(node)
        try:
            return True, ast.literal_eval(code)
        except (ValueError, SyntaxError, TypeError) as e:
            _logger.debug("Skipping non-literal argument %r: %s", code, e)
            return False, None

    def _check_cycles(self) -> None:
        visiting: set[str] = set()
        done: set[str] = set()

        def visit(record: _ClassRecord, path: list[str]) -> None:
            if record.qualname in done:
                return
            if record.qualname in visiting:
                cycle = " -> ".join([*path[path.index(record.qualname) :], record.qualname])
                raise DescriptorError(
                    f"Inheritance cycle detected: {cycle}", type_name=record.qualname, source=self.module_name
                )
            visiting.add(record.qualname)
            for base_name in record.base_names:
                base = self.resolve_base(record, base_name)
                if base is not None:
                    visit(base, [*path, record.qualname])
            visiting.discard(record.qualname)
            done.add(record.qualname)

        for record in self._records.values():
            visit(record, [])


@dataclass
class _Decorators:
    """Decorator facts for one function definition."""

    is_static: bool = False
    is_classmethod: bool = False
    is_abstract: bool = False
    is_creator: bool = False
    skip: bool = False
    bound_property: str | None = None
    accessor_role: AccessorRole | None = None
    metadata: list[BindingAnnotation] = field(default_factory=list)


class SourceTypeDescriptor(TypeDescriptor):
    """Descriptor for a class definition read from source."""

    def __init__(self, reader: SourceModuleReader, record: _ClassRecord) -> None:
        self._reader = reader
        self._record = record

    @property
    def qualname(self) -> str:
        return self._record.qualname

    @property
    def name(self) -> str:
        return f"{self._reader.module_name}.{self._record.qualname}"

    @property
    def key(self) -> Hashable:
        return (self._reader.module_name, self._record.qualname)

    @property
    def _body(self) -> list[cst.BaseStatement]:
        body = self._record.node.body
        if isinstance(body, cst.IndentedBlock):
            return list(body.body)
        # ``class A: x: int`` keeps its statements on the header line.
        return [cst.SimpleStatementLine(body=body.body)]

    @functools.cached_property
    def _resolved_bases(self) -> tuple[SourceTypeDescriptor, ...]:
        bases: list[SourceTypeDescriptor] = []
        for base_name in self._record.base_names:
            if _last(base_name) in _MARKER_NAMES:
                continue
            base = self._reader.resolve_base(self._record, base_name)
            if base is None:
                _logger.debug("Ignoring unresolved base %s of %s", base_name, self.name)
                continue
            bases.append(self._reader.get(base.qualname))
        return tuple(bases)

    @property
    def is_protocol(self) -> bool:
        return any(_last(name) in _PROTOCOL_NAMES for name in self._record.base_names)

    @functools.cached_property
    def is_abc(self) -> bool:
        """Whether the class (or a base defined in this module) uses ``ABCMeta``."""
        if any(_last(name) in _ABC_NAMES for name in self._record.base_names):
            return True
        for keyword in self._record.node.keywords:
            if keyword.keyword is not None and keyword.keyword.value == "metaclass":
                if _last(dotted_name(keyword.value)) in _ABC_NAMES:
                    return True
        return any(base.is_abc for base in self._resolved_bases)

    @functools.cached_property
    def supertype(self) -> TypeDescriptor | None:  # type: ignore[override]
        if self.is_interface:
            return None
        for base in self._resolved_bases:
            if not base.is_interface:
                return base
        return None

    @functools.cached_property
    def interfaces(self) -> tuple[TypeDescriptor, ...]:  # type: ignore[override]
        return tuple(base for base in self._resolved_bases if base.is_interface)

    @functools.cached_property
    def is_interface(self) -> bool:  # type: ignore[override]
        if self.is_protocol:
            return True
        if not self.is_abc:
            return False
        methods = [m for m in self._read_methods() if not m.is_synthetic]
        if not methods or not all(m.is_abstract for m in methods):
            return False
        return all(f.is_static for f in self._read_fields())

    @property
    def metadata(self) -> tuple[BindingAnnotation, ...]:
        collected: list[BindingAnnotation] = []
        for decorator in reversed(self._record.node.decorators):
            collected.extend(self._decorator_metadata(decorator.decorator))
        return tuple(collected)

    # Fields

    def _read_fields(self) -> list[FieldHandle]:
        fields: list[FieldHandle] = []
        seen: set[str] = set()
        slots: list[str] = []
        for statement in self._body:
            if not isinstance(statement, cst.SimpleStatementLine):
                continue
            for small in statement.body:
                if isinstance(small, cst.AnnAssign) and isinstance(small.target, cst.Name):
                    name = small.target.value
                    if name not in seen:
                        fields.append(self._field_handle(name, small.annotation.annotation))
                        seen.add(name)
                elif isinstance(small, cst.Assign):
                    if any(isinstance(t.target, cst.Name) and t.target.value == "__slots__" for t in small.targets):
                        ok, value = self._reader.literal(small.value)
                        if ok:
                            slots.extend([value] if isinstance(value, str) else list(value))

        for name in slots:
            if name in seen or name in ("__dict__", "__weakref__"):
                continue
            fields.append(self._field_handle(name, None))
            seen.add(name)
        return fields

    def _field_handle(self, name: str, annotation: cst.BaseExpression | None) -> FieldHandle:
        is_static = is_final = False
        inner = annotation
        if isinstance(inner, cst.Subscript) and _last(dotted_name(inner)) == "ClassVar":
            is_static, inner = True, self._first_subscript_element(inner)
        elif inner is not None and _last(dotted_name(inner)) == "ClassVar":
            is_static, inner = True, None
        if isinstance(inner, cst.Subscript) and _last(dotted_name(inner)) == "Final":
            is_final, inner = True, self._first_subscript_element(inner)
        elif inner is not None and _last(dotted_name(inner)) == "Final":
            is_final, inner = True, None
        return FieldHandle(
            name=name,
            owner=self.name,
            is_public=is_public_name(name),
            is_static=is_static,
            is_final=is_final,
            is_synthetic=is_synthetic_name(name, self._record.node.name.value),
            metadata=self._annotated_metadata(inner),
            annotation=self._reader.code_for(annotation) if annotation is not None else None,
        )

    @staticmethod
    def _subscript_elements(node: cst.Subscript) -> list[cst.BaseExpression]:
        elements: list[cst.BaseExpression] = []
        for element in node.slice:
            if isinstance(element.slice, cst.Index):
                elements.append(element.slice.value)
        return elements

    def _first_subscript_element(self, node: cst.Subscript) -> cst.BaseExpression | None:
        elements = self._subscript_elements(node)
        return elements[0] if elements else None

    def _annotated_metadata(self, annotation: cst.BaseExpression | None) -> tuple[BindingAnnotation, ...]:
        if not isinstance(annotation, cst.Subscript) or _last(dotted_name(annotation)) not in _ANNOTATED_NAMES:
            return ()
        metadata: list[BindingAnnotation] = []
        for extra in self._subscript_elements(annotation)[1:]:
            built = self._construct_annotation(extra)
            if built is not None:
                metadata.append(built)
        return tuple(metadata)

    # Binding annotation construction

    def _call_arguments(self, call: cst.Call) -> tuple[bool, list[Any], dict[str, Any]]:
        args: list[Any] = []
        kwargs: dict[str, Any] = {}
        for arg in call.args:
            if arg.star:
                return False, [], {}
            ok, value = self._reader.literal(arg.value)
            if not ok:
                return False, [], {}
            if arg.keyword is not None:
                kwargs[arg.keyword.value] = value
            else:
                args.append(value)
        return True, args, kwargs

    def _build(self, kind: type[BindingAnnotation], call: cst.Call | None) -> BindingAnnotation | None:
        if call is None:
            args: list[Any] = []
            kwargs: dict[str, Any] = {}
        else:
            ok, args, kwargs = self._call_arguments(call)
            if not ok:
                return None
        try:
            if kind is PropertyOrder and not kwargs and not (len(args) == 1 and isinstance(args[0], (tuple, list))):
                return PropertyOrder(tuple(args))
            if kind is PropertyOrder:
                names = kwargs.get("names", args[0] if args else ())
                return PropertyOrder(tuple(names))
            return kind(*args, **kwargs)
        except TypeError as e:
            _logger.debug("Cannot build %s in %s: %s", kind.__name__, self.name, e)
            return None

    def _construct_annotation(self, node: cst.BaseExpression) -> BindingAnnotation | None:
        """Build an annotation from ``Kind(...)`` or a bare ``Kind`` reference."""
        if isinstance(node, cst.Call):
            kind = ANNOTATION_KINDS.get(_last(dotted_name(node.func)) or "")
            return self._build(kind, node) if kind is not None else None
        kind = ANNOTATION_KINDS.get(_last(dotted_name(node)) or "")
        return self._build(kind, None) if kind is not None else None

    def _decorator_metadata(self, decorator: cst.BaseExpression) -> list[BindingAnnotation]:
        if isinstance(decorator, cst.Call):
            func_name = _last(dotted_name(decorator.func))
            if func_name == "annotate":
                built = [self._construct_annotation(arg.value) for arg in decorator.args if not arg.star]
                return [item for item in built if item is not None]
            if func_name == "property_order":
                item = self._build(PropertyOrder, decorator)
                return [item] if item is not None else []
            kind = _DECORATOR_KINDS.get(func_name or "")
            if kind is not None:
                item = self._build(kind, decorator)
                return [item] if item is not None else []
            return []
        if _last(dotted_name(decorator)) == "transient":
            return [Transient()]
        return []

    # Methods

    def _function_defs(self) -> list[cst.FunctionDef]:
        return [statement for statement in self._body if isinstance(statement, cst.FunctionDef)]

    def _decorators(self, node: cst.FunctionDef) -> _Decorators:
        facts = _Decorators()
        # Innermost decorator is applied first.
        for decorator in reversed(node.decorators):
            expr = decorator.decorator
            name = dotted_name(expr) if not isinstance(expr, cst.Call) else None
            last = _last(name)
            if last in ("property", "cached_property"):
                facts.bound_property = node.name.value
                facts.accessor_role = AccessorRole.GETTER
            elif isinstance(expr, cst.Attribute) and expr.attr.value in ("setter", "getter", "deleter"):
                if expr.attr.value == "deleter":
                    facts.skip = True
                facts.bound_property = node.name.value
                facts.accessor_role = AccessorRole.SETTER if expr.attr.value == "setter" else AccessorRole.GETTER
            elif last == "staticmethod":
                facts.is_static = True
            elif last == "classmethod":
                facts.is_classmethod = True
            elif last == "abstractmethod":
                facts.is_abstract = True
            elif last == "creator":
                facts.is_creator = True
            else:
                facts.metadata.extend(self._decorator_metadata(expr))
        return facts

    @staticmethod
    def _all_parameters(params: cst.Parameters) -> list[cst.Param]:
        return [*params.posonly_params, *params.params, *params.kwonly_params]

    def _parameter_count(self, params: cst.Parameters, facts: _Decorators) -> int:
        count = len(self._all_parameters(params))
        if isinstance(params.star_arg, cst.Param):
            count += 1
        if params.star_kwarg is not None:
            count += 1
        return count if facts.is_static else max(count - 1, 0)

    def _read_methods(self) -> list[MethodHandle]:
        methods: list[MethodHandle] = []
        owner_simple = self._record.node.name.value
        for node in self._function_defs():
            facts = self._decorators(node)
            if facts.skip:
                continue
            name = node.name.value
            if facts.accessor_role is AccessorRole.GETTER:
                count = 0
            elif facts.accessor_role is AccessorRole.SETTER:
                count = 1
            else:
                count = self._parameter_count(node.params, facts)
            methods.append(
                MethodHandle(
                    name=name,
                    owner=self.name,
                    parameter_count=count,
                    is_public=is_public_name(name),
                    is_static=facts.is_static or facts.is_classmethod,
                    is_abstract=facts.is_abstract,
                    is_synthetic=is_synthetic_name(name, owner_simple),
                    metadata=tuple(facts.metadata),
                    bound_property=facts.bound_property,
                    accessor_role=facts.accessor_role,
                    target=node,
                )
            )
        return methods

    def find_creator(self) -> CreatorSpec | None:
        for node in self._function_defs():
            facts = self._decorators(node)
            if not facts.is_creator:
                continue
            parameters = self._all_parameters(node.params)
            if not facts.is_static:
                parameters = parameters[1:]
            names: list[str] = []
            for parameter in parameters:
                annotation = parameter.annotation.annotation if parameter.annotation is not None else None
                renamed = [m for m in self._annotated_metadata(annotation) if isinstance(m, BindingName)]
                names.append(renamed[0].value if renamed else parameter.name.value)
            return CreatorSpec(
                name=node.name.value,
                owner=self.name,
                parameter_names=tuple(names),
                is_factory=node.name.value != "__init__",
                target=node,
            )
        return None
