"""
text_match.py - Filename Pattern Matching

Two modes:
- regex: found anywhere in the name, every occurrence replaced
- literal (glob-lite): one "*" splits the pattern into prefix/suffix,
  otherwise substring containment with any "*" stripped; only the first
  occurrence is replaced

The replace-all / replace-first difference between the two modes is kept
on purpose, callers rely on it.
"""

from typing import Optional
import re

from .errors import InvalidPattern
from .models_fs import PatternConfig


# $$, ${name}, $name (name is the longest run of [_0-9A-Za-z])
_GROUP_REF = re.compile(r"\$(?:(\$)|\{([^}]*)\}|([_0-9A-Za-z]+))")


def replace_text_once(text: str, old: str, new: str, case_sensitive: bool = True) -> str:
    """
    Replace only the first matched string, keeping the casing around it

    Args:
        text: Original text
        old: String to replace
        new: Replacement string (inserted literally)
        case_sensitive: Whether case-sensitive

    Returns:
        Replaced text
    """
    if not old:
        return text

    if case_sensitive:
        return text.replace(old, new, 1)
    else:
        pattern = re.compile(re.escape(old), re.IGNORECASE)
        return pattern.sub(lambda _: new, text, count=1)


def literal_regex(pattern: str, case_sensitive: bool = True) -> re.Pattern:
    """
    Compile a glob-lite pattern

    With a single wildcard the pattern must cover the whole name and the
    group holds what the wildcard matched. Otherwise the pattern, with any
    "*" stripped, is searched for as plain text.
    """
    flags = 0 if case_sensitive else re.IGNORECASE
    if pattern.count("*") == 1:
        prefix, suffix = pattern.split("*")
        return re.compile(f"{re.escape(prefix)}(.*){re.escape(suffix)}", flags | re.DOTALL)
    return re.compile(re.escape(pattern.replace("*", "")), flags)


def simple_match(text: str, pattern: str, case_sensitive: bool = True) -> bool:
    """Glob-lite test, case folded the same way the replacement is"""
    compiled = literal_regex(pattern, case_sensitive)
    if pattern.count("*") == 1:
        return compiled.fullmatch(text) is not None
    return compiled.search(text) is not None


def simple_replace(text: str, pattern: str, replacement: str, case_sensitive: bool = True) -> str:
    """
    Compute the new name for a literal pattern that already matched

    With a single wildcard the whole name is the matched span, and the first
    "*" of the replacement receives what the wildcard covered. Otherwise the
    first occurrence of the pattern (wildcards stripped) is replaced.
    """
    if pattern.count("*") == 1:
        found = literal_regex(pattern, case_sensitive).fullmatch(text)
        if found is None:
            return text
        if "*" in replacement:
            return replacement.replace("*", found.group(1), 1)
        return replacement

    return replace_text_once(text, pattern.replace("*", ""), replacement, case_sensitive)


def expand_replacement(found: re.Match, template: str) -> str:
    """Expand $1 / $name / ${name} / $$ against a regex match"""

    def _ref(ref: re.Match) -> str:
        if ref.group(1) is not None:
            return "$"
        name = ref.group(2) if ref.group(2) is not None else ref.group(3)
        if not name:
            return ref.group(0)
        try:
            value = found.group(int(name) if name.isdigit() else name)
        except IndexError:
            # Unknown group expands to nothing
            return ""
        return value or ""

    return _GROUP_REF.sub(_ref, template)


def compile_regex(pattern: str, case_sensitive: bool = False) -> re.Pattern:
    flags = 0 if case_sensitive else re.IGNORECASE
    try:
        return re.compile(pattern, flags)
    except re.error as e:
        raise InvalidPattern(f"Invalid regex pattern {pattern!r}: {e}") from e


class Matcher:
    """Compiled pattern configuration"""

    def __init__(self, config: PatternConfig):
        self.config = config
        self.regex: Optional[re.Pattern] = None

        if config.rename_mode and not config.pattern:
            raise InvalidPattern("Pattern cannot be empty when renaming")

        if config.regex:
            self.regex = compile_regex(config.pattern, config.case_sensitive)
        elif config.rename_mode and config.pattern.count("*") != 1 and not config.pattern.replace("*", ""):
            raise InvalidPattern(f"Pattern {config.pattern!r} has nothing to replace")

    def matches_only(self, filename: str) -> bool:
        """Search mode test"""
        if self.regex is not None:
            return self.regex.search(filename) is not None

        return simple_match(filename, self.config.pattern, self.config.case_sensitive)

    def match(self, filename: str) -> Optional[str]:
        """
        Return the new name for filename, or None if it does not match

        In search mode the new name is the filename itself.
        """
        if not self.matches_only(filename):
            return None

        replacement = self.config.replacement
        if replacement is None:
            return filename

        if self.regex is not None:
            return self.regex.sub(lambda found: expand_replacement(found, replacement), filename)

        return simple_replace(filename, self.config.pattern, replacement, self.config.case_sensitive)


def match(
    filename: str,
    pattern: str,
    replacement: Optional[str] = None,
    regex: bool = False,
    case_sensitive: bool = False,
) -> Optional[str]:
    """One-shot form of Matcher.match"""
    config = PatternConfig(pattern, replacement, regex=regex, case_sensitive=case_sensitive)
    return Matcher(config).match(filename)


def matches_only(filename: str, pattern: str, regex: bool = False, case_sensitive: bool = False) -> bool:
    """One-shot form of Matcher.matches_only"""
    config = PatternConfig(pattern, regex=regex, case_sensitive=case_sensitive)
    return Matcher(config).matches_only(filename)
