"""Accessor generator.

``@getters`` adds one accessor method per annotated field of a class::

    @getters
    @dataclass
    class Probe:
        label: Annotated[str, getter(vis="pub(crate)"), getter(name="read_label")]
        \"\"\"Human readable label.\"\"\"
        count: int

    Probe("a", 1)._read_label()        # "a"
    Probe("a", 1).read_label_desc()    # "Human readable label."
    Probe("a", 1).get_count()          # 1

A field's attribute docstring (the string literal right after it) adds a
public ``<name>_desc`` method returning that text, named after the accessor
without its visibility prefix.
"""

import ast
import enum
import inspect
import keyword
import logging
import textwrap
import typing
from dataclasses import dataclass
from typing import Optional, Union

from codegen.attrs import merge

logger = logging.getLogger(__name__)


class Visibility(enum.Enum):
    PUBLIC = "pub"
    CRATE = "pub(crate)"

    @property
    def prefix(self) -> str:
        return "" if self is Visibility.PUBLIC else "_"

    @classmethod
    def parse(cls, value: Union["Visibility", str]) -> "Visibility":
        if isinstance(value, cls):
            return value
        text = "".join(str(value).split())
        if text in ("pub", "public"):
            return cls.PUBLIC
        if text in ("pub(crate)", "crate"):
            return cls.CRATE
        raise ValueError(
            f"Unknown visibility {value!r}. Use 'pub' or 'pub(crate)'.")


@dataclass(frozen=True)
class GetterMeta:
    name: Optional[str] = None
    vis: Optional[Visibility] = None


def getter(name: Optional[str] = None,
           vis: Union[Visibility, str, None] = None) -> GetterMeta:
    """Per-field accessor options, used as ``Annotated`` metadata."""
    if name is not None:
        name = name.strip()
        if not name.isidentifier() or keyword.iskeyword(name):
            raise ValueError(f"getter name {name!r} is not a valid identifier")
    return GetterMeta(
        name=name,
        vis=Visibility.parse(vis) if vis is not None else None,
    )


def _field_docs(cls) -> dict:
    """Map field name -> attribute docstring, read from the class source."""
    try:
        source = textwrap.dedent(inspect.getsource(cls))
    except (OSError, TypeError):
        return {}
    class_def = next(
        (node for node in ast.parse(source).body if isinstance(node, ast.ClassDef)),
        None,
    )
    if class_def is None:
        return {}
    docs = {}
    body = class_def.body
    for node, nxt in zip(body, body[1:]):
        if (
            isinstance(node, ast.AnnAssign)
            and isinstance(node.target, ast.Name)
            and isinstance(nxt, ast.Expr)
            and isinstance(nxt.value, ast.Constant)
            and isinstance(nxt.value.value, str)
        ):
            doc = inspect.cleandoc(nxt.value.value)
            if doc:
                docs[node.target.id] = doc
    return docs


def _field_hints(cls) -> dict:
    own = inspect.get_annotations(cls)
    try:
        resolved = typing.get_type_hints(cls, include_extras=True)
    except NameError:
        # Unresolvable forward reference; metadata of string annotations is lost.
        resolved = {}
    return {name: resolved.get(name, hint) for name, hint in own.items()}


def _field_meta(cls, field_name: str, hint) -> GetterMeta:
    meta = GetterMeta()
    if typing.get_origin(hint) is typing.Annotated:
        for item in hint.__metadata__:
            if isinstance(item, GetterMeta):
                meta = merge(meta, item, target=f"{cls.__name__}.{field_name}")
    return meta


def _is_class_var(hint) -> bool:
    if typing.get_origin(hint) is typing.Annotated:
        hint = typing.get_args(hint)[0]
    return hint is typing.ClassVar or typing.get_origin(hint) is typing.ClassVar


def _make_accessor(cls, field_name: str, fn_name: str):
    def accessor(self):
        return getattr(self, field_name)

    accessor.__name__ = fn_name
    accessor.__qualname__ = f"{cls.__qualname__}.{fn_name}"
    accessor.__doc__ = f"Return ``{field_name}``."
    return accessor


def _make_desc(cls, fn_name: str, doc: str):
    def desc(self) -> str:
        return doc

    desc.__name__ = fn_name
    desc.__qualname__ = f"{cls.__qualname__}.{fn_name}"
    return desc


def getters(cls):
    """Class decorator adding ``get_<field>`` accessors (see module docs)."""
    if not inspect.isclass(cls):
        raise TypeError(f"@getters only applies to classes, got {cls!r}")

    docs = _field_docs(cls)
    generated = {}
    for field_name, hint in _field_hints(cls).items():
        if _is_class_var(hint):
            continue
        meta = _field_meta(cls, field_name, hint)
        vis = meta.vis or Visibility.PUBLIC
        base = meta.name or f"get_{field_name}"
        fn_name = vis.prefix + base

        methods = {fn_name: _make_accessor(cls, field_name, fn_name)}
        if field_name in docs:
            # Descriptions are always public, whatever the accessor visibility.
            desc_name = f"{base}_desc"
            methods[desc_name] = _make_desc(cls, desc_name, docs[field_name])

        for name, method in methods.items():
            if name in cls.__dict__ or name in generated:
                raise ValueError(
                    f"{cls.__name__} already defines {name!r}; "
                    f"pick another getter name for field {field_name!r}")
            generated[name] = method

    for name, method in generated.items():
        setattr(cls, name, method)
    cls.__getters__ = tuple(generated)
    logger.debug("%s: generated %s", cls.__name__, ", ".join(generated) or "nothing")
    return cls
