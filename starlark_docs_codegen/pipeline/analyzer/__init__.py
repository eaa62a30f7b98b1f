"""
Analyzer - target selection, field classification and member collection.
"""

from .classifier import ARG_NAME_OVERRIDES, ParamSpec, arg_name, classify, is_time_member
from .comment_tags import extract_bool_comment_tag, extract_comment_tags, filter_comment_tags
from .member_collector import MemberCollector, collect_members
from .targets import load_generation_targets, require_spec_member_type, select_generation_targets

__all__ = [
    "ARG_NAME_OVERRIDES",
    "MemberCollector",
    "ParamSpec",
    "arg_name",
    "classify",
    "collect_members",
    "extract_bool_comment_tag",
    "extract_comment_tags",
    "filter_comment_tags",
    "is_time_member",
    "load_generation_targets",
    "require_spec_member_type",
    "select_generation_targets",
]
