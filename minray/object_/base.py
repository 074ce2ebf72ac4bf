import numpy as np

from types import UnionType
from typing import Annotated, Any, Union, get_args, get_origin

####

from minray.print_ import print_error

# ======================================================================================
# Object base class
# ======================================================================================


class ObjectBase:
    """
    Input object with type-checked attributes

    Assignments to annotated attributes are checked against the annotation;
    a mismatch is a fatal input error.
    """

    # Annotations for Numba mode
    label: str = "object"

    def __setattr__(self, key, value):
        hints = {}
        for class_ in reversed(self.__class__.mro()):
            hints.update(getattr(class_, "__annotations__", {}))
        if key in hints and not check_type(value, hints[key]):
            print_error(
                f"{self.label}: {key} must be {describe_type(hints[key])}, got {value!r}"
            )
        super().__setattr__(key, value)


# ======================================================================================
# Type checker
# ======================================================================================


def check_type(value, hint) -> bool:
    """
    Best-effort runtime check of a value against a type hint

    Supports builtins, classes, `list[T]`, unions, `NDArray[dtype]`, and
    `Annotated[NDArray[dtype], shape]` where the shape tuple fixes the number of
    dimensions.
    """
    if hint is Any:
        return True

    origin = get_origin(hint)

    if origin is Annotated:
        base, *meta = get_args(hint)
        if not check_type(value, base):
            return False
        for item in meta:
            if isinstance(item, tuple) and isinstance(value, np.ndarray):
                if value.ndim != len(item):
                    return False
        return True

    if origin is Union or origin is UnionType:
        return any(check_type(value, arg) for arg in get_args(hint))

    if origin is list:
        if not isinstance(value, list):
            return False
        args = get_args(hint)
        return len(args) == 0 or all(check_type(x, args[0]) for x in value)

    if origin is np.ndarray:
        if not isinstance(value, np.ndarray):
            return False
        dtype_args = get_args(get_args(hint)[1])
        if len(dtype_args) == 0:
            return True
        return np.issubdtype(value.dtype, dtype_args[0])

    if hint is bool:
        return isinstance(value, (bool, np.bool_))
    if hint is int:
        return isinstance(value, (int, np.integer)) and not isinstance(value, bool)
    if hint is float:
        return isinstance(value, (int, float, np.integer, np.floating)) and not isinstance(
            value, bool
        )
    if hint is type(None):
        return value is None

    if isinstance(hint, type):
        return isinstance(value, hint)

    # Unsupported hint
    return True


def describe_type(hint):
    if isinstance(hint, type):
        return hint.__name__
    return str(hint).replace("numpy.", "")
