"""
XSLT Chain Tests

Run with: pytest tests/test_xslt.py -v
"""

import pytest
from lxml import etree

from schematron_core.transform.xslt import (
    RESOURCE_DIR,
    TransformError,
    XSLTTransformer,
    apply_xslt_transform,
    load_xslt_transform,
    string_params,
)
from schematron_core.validation.errors import ValidationErrorHandler

XSL = 'xmlns:xsl="http://www.w3.org/1999/XSL/Transform"'

WRAP = f"""<xsl:stylesheet version="1.0" {XSL}>
  <xsl:param name="label" select="'wrapped'"/>
  <xsl:template match="/">
    <xsl:element name="{{$label}}"><xsl:copy-of select="/*"/></xsl:element>
  </xsl:template>
</xsl:stylesheet>"""

COUNT = f"""<xsl:stylesheet version="1.0" {XSL}>
  <xsl:template match="/">
    <depth><xsl:value-of select="count(//*)"/></depth>
  </xsl:template>
</xsl:stylesheet>"""

NOTIFY = f"""<xsl:stylesheet version="1.0" {XSL}>
  <xsl:template match="/">
    <xsl:message>Processing <xsl:value-of select="name(/*)"/></xsl:message>
    <xsl:copy-of select="/*"/>
  </xsl:template>
</xsl:stylesheet>"""

ABORT = f"""<xsl:stylesheet version="1.0" {XSL}>
  <xsl:template match="/">
    <xsl:message terminate="yes">Unsupported input</xsl:message>
  </xsl:template>
</xsl:stylesheet>"""

EMPTY = f"""<xsl:stylesheet version="1.0" {XSL}>
  <xsl:template match="/"/>
</xsl:stylesheet>"""


def compiled(text):
    return etree.XSLT(etree.fromstring(text.encode("utf-8")))


class TestApplyTransform:
    """Tests for single stylesheet application."""

    def test_string_params_are_quoted(self):
        params = string_params({"label": "it's"})
        assert set(params) == {"label"}

    def test_apply_with_param(self):
        result = apply_xslt_transform(b"<doc/>", compiled(WRAP), params={"label": "outer"})
        assert result.getroot().tag == "outer"
        assert result.getroot()[0].tag == "doc"

    def test_param_named_like_keyword(self):
        handler = ValidationErrorHandler()
        transform = compiled(WRAP.replace("label", "diagnostics"))
        result = apply_xslt_transform(b"<doc/>", transform, handler,
                                      params={"diagnostics": "outer"})
        assert result.getroot().tag == "outer"

    def test_messages_reach_diagnostics(self):
        handler = ValidationErrorHandler()
        apply_xslt_transform(b"<doc/>", compiled(NOTIFY), handler)
        assert "Processing doc" in handler.messages()

    def test_apply_error_propagates(self):
        handler = ValidationErrorHandler()
        with pytest.raises(etree.XSLTApplyError):
            apply_xslt_transform(b"<doc/>", compiled(ABORT), handler)
        assert "Unsupported input" in handler.messages()

    def test_load_missing_stylesheet(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_xslt_transform(tmp_path / "missing.xsl")

    def test_bundled_text_stylesheet_loads(self):
        assert load_xslt_transform(RESOURCE_DIR / "svrl2text.xsl") is not None


class TestXSLTTransformer:
    """Tests for chained stages."""

    def test_empty_chain(self):
        with pytest.raises(ValueError):
            XSLTTransformer().transform(b"<doc/>")

    def test_stages_run_in_order(self):
        transformer = (XSLTTransformer()
                       .load_string(WRAP, "wrap")
                       .load_string(COUNT, "count"))
        assert transformer.transform_count == 2
        assert transformer.transform_names == ["wrap", "count"]
        result = transformer.transform(b"<doc><a/></doc>")
        assert result.getroot().text == "3"

    def test_stage_params_override_run_params(self):
        transformer = (XSLTTransformer()
                       .load_string(WRAP, "inner", label="inner")
                       .load_string(WRAP, "outer"))
        result = transformer.transform(b"<doc/>", label="outer")
        assert result.getroot().tag == "outer"
        assert result.getroot()[0].tag == "inner"

    def test_none_params_are_skipped(self):
        transformer = XSLTTransformer().add(compiled(WRAP), "wrap", label=None)
        assert transformer.transform(b"<doc/>").getroot().tag == "wrapped"

    def test_load_from_file(self, tmp_path):
        path = tmp_path / "wrap.xsl"
        path.write_text(WRAP, encoding="utf-8")
        transformer = XSLTTransformer().load(path)
        assert transformer.transform_names == ["wrap"]

    def test_messages_collected_per_stage(self):
        handler = ValidationErrorHandler()
        (XSLTTransformer()
         .load_string(NOTIFY, "first")
         .load_string(WRAP, "wrap")
         .load_string(NOTIFY, "second")
         .transform(b"<doc/>", handler))
        messages = handler.messages()
        assert messages.index("Processing doc") < messages.index("Processing wrapped")

    def test_terminating_stage_raises_transform_error(self):
        handler = ValidationErrorHandler()
        transformer = (XSLTTransformer()
                       .load_string(NOTIFY, "notify")
                       .load_string(ABORT, "abort"))
        with pytest.raises(TransformError) as info:
            transformer.transform(b"<doc/>", handler)
        assert info.value.stage == "abort"
        assert "Unsupported input" in handler.messages()

    def test_empty_result_raises_transform_error(self):
        with pytest.raises(TransformError) as info:
            XSLTTransformer().load_string(EMPTY, "empty").transform(b"<doc/>")
        assert info.value.stage == "empty"

    def test_shared_stylesheet_logs_are_separate(self):
        shared = compiled(NOTIFY)
        first = ValidationErrorHandler()
        second = ValidationErrorHandler()
        XSLTTransformer().add(shared, "a").transform(b"<one/>", first)
        XSLTTransformer().add(shared, "b").transform(b"<two/>", second)
        assert "Processing one" in first.messages()
        assert "Processing two" not in first.messages()
        assert "Processing two" in second.messages()

    def test_clear(self):
        transformer = XSLTTransformer().load_string(WRAP)
        assert transformer.clear().transform_count == 0
