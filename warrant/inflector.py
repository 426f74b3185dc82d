"""
Naming rules for Warrant.

Resource resolution depends on a handful of name transformations:
model names, parameter keys, singular and plural binding names, and
association accessors. They are collected here so every resolver derives
names the same way. Word inflection is delegated to the ``inflection``
package, which implements the same rules as Rails' ActiveSupport.

Naming conventions:
    A model's *model name* is ``Lottery::Package`` style. It is taken from
    a ``__model_name__`` attribute defined on the class itself, or derived
    from ``__qualname__`` (nested classes act as namespaces, so
    ``Lottery.Package`` becomes ``Lottery::Package``).

    Declared resource paths are ``lottery/packages`` style and may be
    singular or plural.

Example:
    >>> var_name(Lottery.Package)
    'lottery_package'
    >>> plural_name("lottery/packages")
    'lottery_packages'
    >>> singular_name("lottery/packages")
    'package'
"""

from __future__ import annotations

import re

import inflection

NAMESPACE_SEPARATOR = "::"

# Namespaces may arrive as "::", "." or "/" separated segments.
_SEGMENT_SPLIT = re.compile(r"::|\.|/")


def model_name(klass: type) -> str:
    """Return the namespaced model name of ``klass``."""
    explicit = klass.__dict__.get("__model_name__")
    if explicit:
        return str(explicit)
    return klass.__qualname__.replace(".", NAMESPACE_SEPARATOR)


def is_namespaced(klass: type) -> bool:
    return NAMESPACE_SEPARATOR in model_name(klass)


def underscore_path(name: str) -> str:
    """``Lottery::Package`` -> ``lottery/package``; paths pass through."""
    segments = _SEGMENT_SPLIT.split(name)
    return "/".join(inflection.underscore(segment) for segment in segments)


def var_name(klass: type) -> str:
    """
    Parameter key for ``klass``: underscored with namespaces flattened.

    Example:
        >>> var_name(SecretAccount)
        'secret_account'
    """
    return underscore_path(model_name(klass)).replace("/", "_")


def demodulized_var_name(klass: type) -> str:
    """Parameter key for ``klass`` with its namespace stripped."""
    bare_name = _SEGMENT_SPLIT.split(model_name(klass))[-1]
    return inflection.underscore(bare_name)


def classify_name(identifier: str) -> str:
    """
    Turn a resource identifier into a model name.

    Singularizes the identifier and camelizes it, keeping namespace
    separators that are already present.

    Example:
        >>> classify_name("lottery/packages")
        'Lottery::Package'
    """
    singular = inflection.singularize(underscore_path(str(identifier)))
    return NAMESPACE_SEPARATOR.join(
        inflection.camelize(segment) for segment in singular.split("/")
    )


def singular_name(path: str) -> str:
    """Singular binding name from the last segment of a declared path."""
    last_segment = underscore_path(str(path)).rsplit("/", 1)[-1]
    return inflection.singularize(last_segment)


def plural_name(path: str) -> str:
    """Plural binding name from the entire declared path."""
    return inflection.pluralize(underscore_path(str(path))).replace("/", "_")


def association_accessor(klass: type) -> str:
    """Conventional collection accessor for ``klass`` on a parent record."""
    return inflection.pluralize(demodulized_var_name(klass))
