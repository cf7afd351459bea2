from __future__ import annotations

from django import template

from policy.engine import permits as _permits

register = template.Library()


@register.simple_tag
def permits(actor, op: str, table: str, row=None) -> bool:
    """`{% permits actor "delete" "books" book as can_delete %}`"""
    return _permits(actor, op, table, row)
