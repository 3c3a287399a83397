"""
Naming utilities for safe code generation.

Handles name sanitization, case conversions and keyword conflicts.
Every conversion is a pure function of its input: collisions between
generated names are detected by the renderers, not patched up here.
"""

import re
from typing import Set
from enum import Enum


class NamingCase(Enum):
    """Different naming case styles."""

    SNAKE_CASE = "snake"  # user_name
    CAMEL_CASE = "camel"  # userName
    PASCAL_CASE = "pascal"  # UserName
    KEBAB_CASE = "kebab"  # user-name
    SCREAMING_SNAKE = "screaming_snake"  # USER_NAME


# Letters other than ASCII capitals; non-ASCII letters never start a new word
_LOWER = r"[^\W\d_A-Z]"

# Acronym runs, capitalised words, lowercase runs and digit runs
_WORD_RE = re.compile(rf"[A-Z]+(?=[A-Z]{_LOWER})|[A-Z]?{_LOWER}+|[A-Z]+|\d+")


def split_words(name: str) -> list[str]:
    """Split an identifier into words on separators and case boundaries."""
    return _WORD_RE.findall(name)


class NameSanitizer:
    """Handles name sanitization and case conversion."""

    def __init__(self, reserved_words: Set[str] = None, builtin_types: Set[str] = None):
        """
        Initialize name sanitizer.

        Args:
            reserved_words: Set of language reserved words
            builtin_types: Set of builtin type names that might conflict
        """
        self.reserved_words = frozenset(reserved_words or ())
        self.builtin_types = frozenset(builtin_types or ())

    def sanitize_name(
        self,
        name: str,
        target_case: NamingCase = NamingCase.SNAKE_CASE,
        suffix_on_conflict: str = "_",
    ) -> str:
        """
        Sanitize a name for safe use in target language.

        Args:
            name: Original name to sanitize
            target_case: Desired case style
            suffix_on_conflict: Suffix to add for reserved words

        Returns:
            Sanitized name, empty if the input has no usable characters
        """
        words = split_words(str(name))
        if not words:
            return ""

        # Identifiers cannot start with a digit
        if words[0][0].isdigit():
            words.insert(0, "number")

        converted = self._convert_case(words, target_case)
        return self._resolve_conflicts(converted, suffix_on_conflict)

    def sanitize_key(self, value: str, target_case: NamingCase = NamingCase.PASCAL_CASE) -> str:
        """Case-convert a fragment that is appended to an existing name."""
        return self._convert_case(split_words(str(value)), target_case)

    def _convert_case(self, words: list[str], target_case: NamingCase) -> str:
        """Join words in the target case style."""
        lowered = [word.lower() for word in words]

        if target_case == NamingCase.SNAKE_CASE:
            return "_".join(lowered)
        elif target_case == NamingCase.CAMEL_CASE:
            if not lowered:
                return ""
            return lowered[0] + "".join(word.capitalize() for word in lowered[1:])
        elif target_case == NamingCase.PASCAL_CASE:
            return "".join(word.capitalize() for word in lowered)
        elif target_case == NamingCase.KEBAB_CASE:
            return "-".join(lowered)
        elif target_case == NamingCase.SCREAMING_SNAKE:
            return "_".join(lowered).upper()
        else:
            return "".join(words)

    def _resolve_conflicts(self, name: str, suffix: str) -> str:
        """Suffix names that clash with reserved words or builtins."""
        if name in self.reserved_words or name in self.builtin_types:
            return f"{name}{suffix}"
        return name
