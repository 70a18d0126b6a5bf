"""
Metric and label name helpers.

WebLogic attribute names are camelCase (``heapFreeCurrent``) and may contain
acronyms (``JVMRuntime``, ``HTTPClntSend``). Prometheus names are snake_case.
"""

import re

_ACRONYM_BOUNDARY = re.compile(r"([A-Z]+)([A-Z][a-z])")
_WORD_BOUNDARY = re.compile(r"([a-z0-9])([A-Z])")
_LETTER_DIGIT = re.compile(r"([A-Za-z])([0-9])")
_DIGIT_LETTER = re.compile(r"([0-9])([A-Za-z])")
_SEPARATORS = re.compile(r"[\s.\-_]+")


def to_snake(name: str) -> str:
    """
    Convert an attribute name to lower snake_case.

    Parameters
    ----------
    name : str
        Attribute name, typically camelCase

    Returns
    -------
    str
        Lower snake_case form; digit runs are split from surrounding
        letters, separators (space, dot, hyphen) become underscores and runs
        of underscores collapse to one

    Examples
    --------
    >>> to_snake("heapFreeCurrent")
    'heap_free_current'
    >>> to_snake("JVMRuntime")
    'jvm_runtime'
    >>> to_snake("already_snake")
    'already_snake'
    >>> to_snake("http2Enabled")
    'http_2_enabled'
    """
    converted = _ACRONYM_BOUNDARY.sub(r"\1_\2", name)
    converted = _WORD_BOUNDARY.sub(r"\1_\2", converted)
    converted = _LETTER_DIGIT.sub(r"\1_\2", converted)
    converted = _DIGIT_LETTER.sub(r"\1_\2", converted)
    converted = _SEPARATORS.sub("_", converted)
    return converted.strip("_").lower()
