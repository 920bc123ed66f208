"""Tests for balanced tag-region scanning."""

from __future__ import annotations

from docx2html.scanner import Region, find_region, first_region, has_element, iter_regions


def texts(regions) -> list[str]:
    return [r.text for r in regions]


class TestFindRegion:

    def test_returns_region_and_next_cursor(self):
        xml = "<w:body><w:p>one</w:p><w:p>two</w:p></w:body>"
        region, cursor = find_region(xml, "w:p")
        assert region == Region("<w:p>one</w:p>", 8, 22)
        assert cursor == 22
        second, cursor = find_region(xml, "w:p", cursor)
        assert second is not None
        assert second.text == "<w:p>two</w:p>"
        third, cursor = find_region(xml, "w:p", cursor)
        assert third is None
        assert cursor == len(xml)

    def test_open_tag_with_attributes(self):
        xml = '<w:p w:rsidR="00AB12CD" w:rsidRDefault="00AB12CD">x</w:p>'
        assert first_region(xml, "w:p").text == xml

    def test_longer_tag_names_are_not_matches(self):
        xml = (
            '<w:p><w:pPr><w:pStyle w:val="Heading1"/></w:pPr>'
            '<w:r><w:rPr><w:b/></w:rPr><w:t>x</w:t></w:r></w:p>'
        )
        assert texts(iter_regions(xml, "w:p")) == [xml]
        runs = list(iter_regions(xml, "w:r"))
        assert len(runs) == 1
        assert runs[0].text.startswith("<w:r><w:rPr>")

    def test_nested_same_name_is_balanced(self):
        xml = "<w:p>A<w:p>B</w:p>C</w:p><w:p>D</w:p>"
        assert texts(iter_regions(xml, "w:p")) == [
            "<w:p>A<w:p>B</w:p>C</w:p>",
            "<w:p>D</w:p>",
        ]

    def test_nested_self_closing_does_not_deepen(self):
        xml = "<w:p>A<w:p/>B</w:p><w:p>C</w:p>"
        assert texts(iter_regions(xml, "w:p")) == ["<w:p>A<w:p/>B</w:p>", "<w:p>C</w:p>"]

    def test_self_closing_region(self):
        xml = '<w:p/><w:p w:rsidR="1"/><w:p>x</w:p>'
        regions = list(iter_regions(xml, "w:p"))
        assert texts(regions) == ["<w:p/>", '<w:p w:rsidR="1"/>', "<w:p>x</w:p>"]
        assert regions[0].self_closing
        assert regions[0].inner == ""
        assert not regions[2].self_closing


class TestMalformedInput:

    def test_missing_close_tag_truncates_at_end(self):
        xml = "<w:p>one</w:p><w:p>two<w:r>"
        regions = list(iter_regions(xml, "w:p"))
        assert texts(regions) == ["<w:p>one</w:p>", "<w:p>two<w:r>"]
        assert regions[0].closed
        assert not regions[1].closed
        assert regions[1].inner == "two<w:r>"

    def test_unterminated_open_tag(self):
        region, cursor = find_region('<w:p w:rsidR="1', "w:p")
        assert region is not None
        assert not region.closed
        assert cursor == len('<w:p w:rsidR="1')

    def test_no_matches(self):
        assert list(iter_regions("<w:body></w:body>", "w:p")) == []
        assert list(iter_regions("", "w:p")) == []


class TestRestartable:

    def test_inner_scan_is_independent(self):
        xml = (
            "<w:p><w:r><w:t>a</w:t></w:r><w:r><w:t>b</w:t></w:r></w:p>"
            "<w:p><w:r><w:t>c</w:t></w:r></w:p>"
        )
        outer = iter_regions(xml, "w:p")
        first = next(outer)
        assert texts(iter_regions(first.text, "w:r")) == [
            "<w:r><w:t>a</w:t></w:r>",
            "<w:r><w:t>b</w:t></w:r>",
        ]
        second = next(outer)
        assert texts(iter_regions(second.text, "w:r")) == ["<w:r><w:t>c</w:t></w:r>"]

    def test_generator_can_be_rerun(self):
        xml = "<w:p>1</w:p><w:p>2</w:p>"
        assert texts(iter_regions(xml, "w:p")) == texts(iter_regions(xml, "w:p"))


class TestRegionHelpers:

    def test_inner(self):
        region = first_region("<w:rPr><w:b/><w:i/></w:rPr>", "w:rPr")
        assert region.inner == "<w:b/><w:i/>"

    def test_has_element(self):
        assert has_element("<w:pPr><w:numPr/></w:pPr>", "w:numPr")
        assert has_element('<w:numPr><w:numId w:val="1"/></w:numPr>', "w:numPr")
        assert not has_element("<w:numPrChange/>", "w:numPr")
