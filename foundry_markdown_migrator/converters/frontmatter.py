"""YAML frontmatter generation shared by entries and folder notes."""

from typing import Any, Dict

import yaml


class _QuotedString(str):
    """String that is always emitted double-quoted."""


class _FrontmatterDumper(yaml.SafeDumper):
    pass


def _represent_quoted(dumper: yaml.SafeDumper, data: _QuotedString) -> yaml.ScalarNode:
    return dumper.represent_scalar('tag:yaml.org,2002:str', str(data), style='"')


_FrontmatterDumper.add_representer(_QuotedString, _represent_quoted)


def build_frontmatter(title: str, import_id: str) -> str:
    """
    Generate the ``---`` delimited frontmatter block.

    Args:
        title: Display title, also used as the single alias
        import_id: Stable identifier of the imported record

    Returns:
        Frontmatter block without a trailing newline
    """
    frontmatter: Dict[str, Any] = {
        'title': _QuotedString(title),
        'aliases': [_QuotedString(title)],
        'foundry_id': _QuotedString(import_id)
    }

    # default_flow_style=False keeps aliases in block style
    yaml_str = yaml.dump(
        frontmatter,
        Dumper=_FrontmatterDumper,
        default_flow_style=False,
        allow_unicode=True,
        sort_keys=False,
        width=1000
    )

    return f"---\n{yaml_str}---"


__all__ = ['build_frontmatter']
