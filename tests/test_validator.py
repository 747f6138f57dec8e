from __future__ import annotations

import pytest

from terraform_ai.errors import InvalidTemplateError
from terraform_ai.runtime import validator
from terraform_ai.runtime.validator import check_template, strip_markdown_fences

VALID_TEMPLATE = '''resource "aws_s3_bucket" "logs" {
  bucket = "my-logs"

  tags = {
    Environment = "dev"
  }
}
'''


def test_check_template_accepts_valid_hcl() -> None:
    check_template(VALID_TEMPLATE)


def test_check_template_accepts_missing_trailing_newline() -> None:
    check_template('provider "aws" {\n  region = "us-east-1"\n}')


def test_check_template_rejects_unclosed_block() -> None:
    template = 'resource "aws_s3_bucket" "logs" {\n  bucket = "my-logs"\n'

    with pytest.raises(InvalidTemplateError) as excinfo:
        check_template(template)

    assert excinfo.value.template == template
    assert excinfo.value.diagnostics


def test_check_template_rejects_prose() -> None:
    with pytest.raises(InvalidTemplateError):
        check_template("Sure! Here is your template: {{{")


def test_strip_markdown_fences() -> None:
    text = "Here you go:\n```hcl\n" + VALID_TEMPLATE + "```\nEnjoy"

    assert strip_markdown_fences(text) == VALID_TEMPLATE


def test_strip_markdown_fences_leaves_plain_text() -> None:
    assert strip_markdown_fences(VALID_TEMPLATE) == VALID_TEMPLATE


def test_transformer_value_errors_are_reported_as_invalid(monkeypatch: pytest.MonkeyPatch) -> None:
    def bad_value(text: str) -> dict:
        raise ValueError("Unexpected heredoc")

    monkeypatch.setattr(validator.hcl2, "loads", bad_value)

    with pytest.raises(InvalidTemplateError) as excinfo:
        check_template(VALID_TEMPLATE)

    assert excinfo.value.diagnostics == "Unexpected heredoc"


def test_unrelated_parser_failures_propagate(monkeypatch: pytest.MonkeyPatch) -> None:
    def broken(text: str) -> dict:
        raise RuntimeError("parser bug")

    monkeypatch.setattr(validator.hcl2, "loads", broken)

    with pytest.raises(RuntimeError):
        check_template(VALID_TEMPLATE)
