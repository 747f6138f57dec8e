"""Runtime collaborators: validation, file storage and Terraform execution."""

from .terraform import TerraformRuntime, TerraformOperation, CommandResult
from .validator import check_template, strip_markdown_fences
from .files import remove_blank_lines, store_file, get_name, random_name, ends_with_tf

__all__ = [
    'TerraformRuntime',
    'TerraformOperation',
    'CommandResult',
    'check_template',
    'strip_markdown_fences',
    'remove_blank_lines',
    'store_file',
    'get_name',
    'random_name',
    'ends_with_tf',
]
