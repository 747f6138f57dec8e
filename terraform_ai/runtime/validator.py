"""Syntax validation of generated HCL."""

import re

import hcl2
from lark.exceptions import LarkError

from terraform_ai.errors import InvalidTemplateError


def strip_markdown_fences(text: str) -> str:
    """Strip markdown code fences from LLM output."""
    # Match ```hcl, ```terraform, or plain ``` blocks
    fence_pattern = r"```(?:hcl|terraform|tf)?\s*\n(.*?)```"
    matches = re.findall(fence_pattern, text, flags=re.DOTALL)
    if matches:
        return "\n\n".join(matches)
    return text


def check_template(template: str) -> None:
    """
    Parse a template and fail on any diagnostic.

    Args:
        template: HCL text

    Raises:
        InvalidTemplateError: carrying the parser's diagnostic text
    """
    source = template if template.endswith("\n") else template + "\n"
    try:
        hcl2.loads(source)
    except (LarkError, ValueError) as e:
        raise InvalidTemplateError(str(e).strip() or type(e).__name__, template=template) from e
