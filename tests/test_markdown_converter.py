"""Tests for journal HTML to markdown rendering."""

import unittest

from bs4 import BeautifulSoup

from foundry_markdown_migrator.converters import HtmlCleaner, MarkdownConverter


class TestMarkdownConverter(unittest.TestCase):
    def setUp(self):
        self.converter = MarkdownConverter()

    def test_paragraph(self):
        self.assertEqual(self.converter.render_html('<p>Hi</p>'), 'Hi\n')

    def test_empty_input(self):
        self.assertEqual(self.converter.render_html(''), '')
        self.assertEqual(self.converter.render_html(None), '')
        self.assertEqual(self.converter.render_html('   \n'), '')

    def test_atx_headings_and_emphasis(self):
        markdown = self.converter.render_html('<h2>The Gate</h2><p><strong>Bold</strong> and <em>it</em></p>')

        self.assertIn('## The Gate', markdown)
        self.assertIn('**Bold** and *it*', markdown)

    def test_bullets(self):
        markdown = self.converter.render_html('<ul><li>One</li><li>Two</li></ul>')

        self.assertEqual(markdown, '- One\n- Two\n')

    def test_underscores_are_not_escaped(self):
        markdown = self.converter.render_html('<p>snake_case_name and [brackets]</p>')

        self.assertEqual(markdown, 'snake_case_name and [brackets]\n')

    def test_table(self):
        html = '''
        <table>
            <thead><tr><th>Name</th><th>Notes</th></tr></thead>
            <tbody>
                <tr><td>Gate</td><td>a|b</td></tr>
                <tr><td>Wall</td></tr>
            </tbody>
        </table>
        '''

        markdown = self.converter.render_html(html)

        self.assertIn('| Name | Notes |\n| --- | --- |\n| Gate | a\\|b |\n| Wall |  |', markdown)

    def test_image_without_title(self):
        markdown = self.converter.render_html('<p><img src="worlds/w/map.png" title="Map"></p>')

        self.assertEqual(markdown, '![](worlds/w/map.png)\n')

    def test_image_alt_text(self):
        markdown = self.converter.render_html('<img src="map.png" alt="A map">')

        self.assertEqual(markdown, '![A map](map.png)\n')

    def test_scripts_are_dropped(self):
        markdown = self.converter.render_html('<p>a</p><script>alert(1)</script><style>p {}</style>')

        self.assertEqual(markdown, 'a\n')

    def test_blank_lines_are_collapsed(self):
        markdown = self.converter.render_html('<p>a</p><p></p><p> </p><br><p>b</p>')

        self.assertNotIn('\n\n\n', markdown)
        self.assertTrue(markdown.startswith('a\n'))
        self.assertTrue(markdown.endswith('b\n'))


class TestContentLinks(unittest.TestCase):
    def setUp(self):
        self.converter = MarkdownConverter()

    def test_uuid_content_link(self):
        html = (
            '<p>See <a class="content-link" draggable="true" data-uuid="JournalEntry.abc" '
            'data-id="abc" data-type="JournalEntry"><i class="fas fa-book-open"></i>Other</a></p>'
        )

        self.assertEqual(self.converter.render_html(html), 'See @UUID[JournalEntry.abc]{Other}\n')

    def test_page_content_link(self):
        html = (
            '<a class="content-link" data-uuid="JournalEntry.d2.JournalEntryPage.p1">Page A</a>'
        )

        self.assertEqual(
            self.converter.render_html(html),
            '@UUID[JournalEntry.d2.JournalEntryPage.p1]{Page A}\n'
        )

    def test_legacy_entity_link(self):
        html = '<p><a class="entity-link" data-entity="JournalEntry" data-id="abc">Old</a></p>'

        self.assertEqual(self.converter.render_html(html), '@JournalEntry[abc]{Old}\n')

    def test_other_documents_keep_text(self):
        html = '<p><a class="content-link" data-uuid="Actor.x" data-type="Actor">Bob</a></p>'

        markdown = self.converter.render_html(html)

        self.assertEqual(markdown, 'Bob\n')

    def test_regular_links(self):
        markdown = self.converter.render_html('<p><a href="https://example.com">site</a></p>')

        self.assertEqual(markdown, '[site](https://example.com)\n')


class TestHtmlCleaner(unittest.TestCase):
    def test_removes_empty_wrappers(self):
        soup = BeautifulSoup('<div><span></span><p><strong> </strong>text</p></div>', 'lxml')

        cleaned = HtmlCleaner().clean(soup)

        self.assertIsNone(cleaned.find('span'))
        self.assertIsNone(cleaned.find('strong'))
        self.assertEqual(cleaned.get_text(), 'text')

    def test_keeps_media_only_wrappers(self):
        soup = BeautifulSoup('<p><span><img src="a.png"></span></p>', 'lxml')

        cleaned = HtmlCleaner().clean(soup)

        self.assertIsNotNone(cleaned.find('img'))


if __name__ == '__main__':
    unittest.main()
