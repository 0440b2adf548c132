"""
Lifecycle Adapters

Glue between a host's persistence events and CurrencyConverter: produce a
plain nested record, run the conversions, merge the result back. Also
provides writable-path predicates built from pydantic models or from a set
of declared paths.
"""

import copy
import logging
import types
from collections.abc import Iterable, Mapping, MutableMapping
from typing import Any, TypeVar, Union, get_args, get_origin

from pydantic import BaseModel

from fxconvert.converter import CurrencyConverter, WritablePredicate
from fxconvert.paths import is_index, parse_path

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)

UPDATE_SET_KEY = "$set"


# === Record Boundaries ===

async def convert_document(converter: CurrencyConverter, document: Mapping[str, Any]) -> dict[str, Any]:
    """
    Convert a full document before it is saved.

    The input is left untouched; the converted copy is returned.
    """
    record = copy.deepcopy(dict(document))
    await converter.apply_conversions(record)
    return record


async def convert_update(
    converter: CurrencyConverter, update: MutableMapping[str, Any]
) -> MutableMapping[str, Any]:
    """
    Convert a partial update payload in place.

    With a "$set" mapping only that part is converted and replaced;
    otherwise the payload root is treated as the partial record. Targets
    erased by a rollback are removed from the payload as well.
    """
    if not update:
        return update

    set_part = update.get(UPDATE_SET_KEY)
    if isinstance(set_part, Mapping):
        logger.debug("Converting %s part of update payload", UPDATE_SET_KEY)
        record = copy.deepcopy(dict(set_part))
        await converter.apply_conversions(record)
        update[UPDATE_SET_KEY] = record
        return update

    record = copy.deepcopy(dict(update))
    await converter.apply_conversions(record)
    update.clear()
    update.update(record)
    return update


async def convert_model(converter: CurrencyConverter, instance: ModelT) -> ModelT:
    """Dump a pydantic model, convert it and validate the result into a new instance."""
    record = instance.model_dump()
    await converter.apply_conversions(record)
    return type(instance).model_validate(record)


# === Writable Path Predicates ===

def _unwrap_optional(annotation: Any) -> Any:
    origin = get_origin(annotation)
    if origin is Union or origin is types.UnionType:
        members = [a for a in get_args(annotation) if a is not type(None)]
        if len(members) == 1:
            return members[0]
    return annotation


def _is_open_container(annotation: Any) -> bool:
    """Types that accept any nested key."""
    if annotation is Any or annotation is object:
        return True
    origin = get_origin(annotation) or annotation
    return isinstance(origin, type) and issubclass(origin, Mapping) and not issubclass(origin, BaseModel)


def _field_annotation(model: type[BaseModel], segment: str) -> Any | None:
    for name, info in model.model_fields.items():
        if segment == name or segment == info.alias:
            return info.annotation
    return None


def is_declared_path(model: type[BaseModel], path: str) -> bool:
    """
    Tell whether a dotted path is declared on a pydantic model.

    Nested models are descended field by field, list items are addressed by
    numeric segments, and dict/Any typed fields accept any sub-path.
    """
    segments = parse_path(path)
    if not all(segments):
        return False

    annotation: Any = model
    for segment in segments:
        annotation = _unwrap_optional(annotation)
        if _is_open_container(annotation):
            return True
        if isinstance(annotation, type) and issubclass(annotation, BaseModel):
            annotation = _field_annotation(annotation, segment)
            if annotation is None:
                return False
            continue
        origin = get_origin(annotation)
        if origin in (list, tuple) and is_index(segment):
            args = get_args(annotation)
            annotation = args[0] if args else Any
            continue
        return False
    return True


def model_path_predicate(model: type[BaseModel]) -> WritablePredicate:
    """Writable predicate accepting the paths declared on model."""

    def is_writable(path: str) -> bool:
        return is_declared_path(model, path)

    return is_writable


def declared_paths_predicate(paths: Iterable[str]) -> WritablePredicate:
    """
    Writable predicate from a list of declared dotted paths.

    A target is writable when it, or one of its parent paths, is declared.
    """
    declared = frozenset(paths)

    def is_writable(path: str) -> bool:
        segments = parse_path(path)
        return any(".".join(segments[:n]) in declared for n in range(1, len(segments) + 1))

    return is_writable
