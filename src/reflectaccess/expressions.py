"""
Property-name extraction from accessor lambdas.

``extract_property_name(lambda: employee.name)`` returns ``"name"`` without
calling the property. The lambda is inspected through its bytecode: after
interpreter bookkeeping opcodes are dropped, the body must be exactly

    <load root>  LOAD_ATTR <attribute>  RETURN_VALUE

The root is a captured variable, a module global, or the lambda's single
parameter (``lambda e: e.name``, with ``owner`` naming the parameter's type).
Only the root binding is looked up to learn its type; the attribute itself
is never read.
"""

import builtins
import dataclasses
import dis
import logging
import types
from typing import Any, Callable, List, Optional, Tuple

from reflectaccess.config import get_accessor_settings
from reflectaccess.errors import InvalidArgumentError, InvalidExpressionShapeError, ShapeViolation
from reflectaccess.member_resolver import qualified_type_name, resolve_property

logger = logging.getLogger(__name__)

# Opcodes emitted around every function body that carry no expression meaning
_BOOKKEEPING_OPS = frozenset({
    'RESUME', 'COPY_FREE_VARS', 'MAKE_CELL', 'NOP', 'CACHE', 'EXTENDED_ARG', 'NOT_TAKEN',
})
_PARAMETER_LOADS = frozenset({'LOAD_FAST', 'LOAD_FAST_CHECK', 'LOAD_FAST_BORROW'})
_CLOSURE_LOADS = frozenset({'LOAD_DEREF', 'LOAD_CLASSDEREF'})
_GLOBAL_LOADS = frozenset({'LOAD_GLOBAL', 'LOAD_NAME'})
_ROOT_LOADS = _PARAMETER_LOADS | _CLOSURE_LOADS | _GLOBAL_LOADS


def _body_instructions(accessor: types.FunctionType) -> List[dis.Instruction]:
    return [ins for ins in dis.get_instructions(accessor) if ins.opname not in _BOOKKEEPING_OPS]


def _describe(instructions: List[dis.Instruction]) -> str:
    return ' '.join(
        f"{ins.opname}({ins.argval})" if ins.argval is not None else ins.opname
        for ins in instructions
    )


def _lookup_global(accessor: types.FunctionType, name: str) -> Any:
    if name in accessor.__globals__:
        return accessor.__globals__[name]
    if hasattr(builtins, name):
        return getattr(builtins, name)
    raise InvalidExpressionShapeError(
        ShapeViolation.NOT_MEMBER_ACCESS,
        f"Expression root {name!r} is not defined",
    )


def _root_type(accessor: types.FunctionType, root: dis.Instruction, owner: Optional[type]) -> Tuple[type, bool]:
    """Return (type to search, accessed through a class object)."""
    code = accessor.__code__
    if root.opname in _PARAMETER_LOADS:
        if code.co_argcount != 1 or root.argval != code.co_varnames[0]:
            raise InvalidExpressionShapeError(
                ShapeViolation.NOT_MEMBER_ACCESS,
                f"Expression root {root.argval!r} must be the accessor's only parameter",
            )
        if owner is None:
            raise InvalidArgumentError('owner', "Accessors that take a parameter need its type as 'owner'")
        if not isinstance(owner, type):
            raise InvalidArgumentError('owner', f"owner must be a type, got {type(owner).__name__}")
        return owner, False

    if root.opname in _CLOSURE_LOADS:
        if root.argval not in code.co_freevars:
            raise InvalidExpressionShapeError(
                ShapeViolation.NOT_MEMBER_ACCESS,
                f"Expression root {root.argval!r} is not a captured variable",
            )
        cell = accessor.__closure__[code.co_freevars.index(root.argval)]
        try:
            obj = cell.cell_contents
        except ValueError:
            # captured variable not bound yet, or deleted
            raise InvalidExpressionShapeError(
                ShapeViolation.NOT_MEMBER_ACCESS,
                f"Expression root {root.argval!r} is not bound",
            ) from None
    else:
        obj = _lookup_global(accessor, root.argval)

    if isinstance(obj, type):
        return obj, True
    return type(obj), False


def extract_property_name(accessor: Callable[..., Any], owner: Optional[type] = None) -> str:
    """
    Return the name of the property read by ``accessor``.

    Args:
        accessor: ``lambda: obj.prop`` or ``lambda o: o.prop``
        owner: Type of the lambda's parameter, for the second form

    Returns:
        The attribute name as compiled (mangled for ``__x`` inside a class)

    Raises:
        InvalidArgumentError: accessor is None or not a Python function
        InvalidExpressionShapeError: the body is not a direct member access,
            the member is not a property, or the property is static
    """
    if accessor is None:
        raise InvalidArgumentError('accessor')
    if not isinstance(accessor, types.FunctionType):
        raise InvalidArgumentError(
            'accessor', f"Accessor must be a lambda or function, got {type(accessor).__name__}"
        )

    body = _body_instructions(accessor)
    if (len(body) != 3
            or body[0].opname not in _ROOT_LOADS
            or body[1].opname != 'LOAD_ATTR'
            or body[2].opname != 'RETURN_VALUE'):
        raise InvalidExpressionShapeError(
            ShapeViolation.NOT_MEMBER_ACCESS,
            f"Expression body must be a single member access, got: {_describe(body)}",
        )

    attribute = body[1].argval
    search_type, through_class = _root_type(accessor, body[0], owner)

    # The compiler has already mangled private names, and static members must
    # be visible to be rejected
    settings = dataclasses.replace(get_accessor_settings(), mangle_private_names=False, include_static=True)
    member = resolve_property(search_type, attribute, settings)
    type_name = qualified_type_name(search_type)
    if member is None:
        raise InvalidExpressionShapeError(
            ShapeViolation.NOT_PROPERTY,
            f"Member {attribute} of Type {type_name} is not a property",
        )
    if member.is_static or through_class:
        raise InvalidExpressionShapeError(
            ShapeViolation.STATIC_PROPERTY,
            f"Property {attribute} of Type {type_name} is static",
        )

    logger.debug(f"Extracted property name {attribute!r} from accessor on {type_name}")
    return attribute
