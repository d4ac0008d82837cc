"""Rule plugin system: every rule module registers itself on import."""

# Import rules to trigger registration
import yamlstyle.rules.anchors as _anchors  # noqa: F401
import yamlstyle.rules.braces as _braces  # noqa: F401
import yamlstyle.rules.brackets as _brackets  # noqa: F401
import yamlstyle.rules.colons as _colons  # noqa: F401
import yamlstyle.rules.commas as _commas  # noqa: F401
import yamlstyle.rules.comments as _comments  # noqa: F401
import yamlstyle.rules.comments_indentation as _comments_indentation  # noqa: F401
import yamlstyle.rules.document_end as _document_end  # noqa: F401
import yamlstyle.rules.document_start as _document_start  # noqa: F401
import yamlstyle.rules.empty_lines as _empty_lines  # noqa: F401
import yamlstyle.rules.empty_values as _empty_values  # noqa: F401
import yamlstyle.rules.float_values as _float_values  # noqa: F401
import yamlstyle.rules.hyphens as _hyphens  # noqa: F401
import yamlstyle.rules.indentation as _indentation  # noqa: F401
import yamlstyle.rules.key_duplicates as _key_duplicates  # noqa: F401
import yamlstyle.rules.key_ordering as _key_ordering  # noqa: F401
import yamlstyle.rules.line_length as _line_length  # noqa: F401
import yamlstyle.rules.new_line_at_end_of_file as _new_line_at_end_of_file  # noqa: F401
import yamlstyle.rules.new_lines as _new_lines  # noqa: F401
import yamlstyle.rules.octal_values as _octal_values  # noqa: F401
import yamlstyle.rules.quoted_strings as _quoted_strings  # noqa: F401
import yamlstyle.rules.trailing_spaces as _trailing_spaces  # noqa: F401
import yamlstyle.rules.truthy as _truthy  # noqa: F401
from yamlstyle.rules.base import Rule, RuleOptions, RuleType
from yamlstyle.rules.registry import RuleRegistry, UnsupportedRuleError

__all__ = [
    "Rule",
    "RuleOptions",
    "RuleRegistry",
    "RuleType",
    "UnsupportedRuleError",
]
