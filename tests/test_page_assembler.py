"""
Tests for cascade_migration.page_assembler module

Assembles pages from source files written to a temporary export directory.
"""

import os
import tempfile
import unittest
from pathlib import Path
from unittest.mock import patch

import pytest

from cascade_migration.destination import CascadeDestination
from cascade_migration.exceptions import DocumentParseError, MappingConfigurationError
from cascade_migration.fields import MetadataField, StructuredField
from cascade_migration.migration_logger import MigrationLogger
from cascade_migration.page_assembler import (
    Page,
    body_from_structured_data,
    get_page_identity,
    setup_page_object,
)
from cascade_migration.page_metadata import DynamicMetadataField, Metadata
from cascade_migration.project import ContentTypeInformation, ProjectInformation
from cascade_migration.structured_data import StructuredDataNode


ARTICLE_PAGE = """<html>
<head><title>About Us</title></head>
<body>
<div id="main"><p>Hello <a href="team.html">team</a></p></div>
<div id="article">
<ControlWidget><ControlType>ContentBlock</ControlType><ContentID>201</ContentID></ControlWidget>
<ControlWidget><ControlType>Image</ControlType><ContentID>202</ContentID></ControlWidget>
</div>
</body>
</html>"""

SIMPLE_PAGE = """<html><body><div id="main"><p>Body</p></div><div id="side">Side</div></body></html>"""


class TestPageIdentity(unittest.TestCase):

    def test_nested_page(self):
        self.assertEqual(
            get_page_identity(Path("/export/about/index.xml"), Path("/export")),
            ("index", "about"),
        )

    def test_root_page(self):
        self.assertEqual(get_page_identity(Path("/export/home.html"), Path("/export")), ("home", "/"))

    def test_illegal_characters(self):
        self.assertEqual(
            get_page_identity(Path("/export/about us/our team!.htm"), Path("/export")),
            ("our-team", "about-us"),
        )

    def test_relative_page_file_with_absolute_export_directory(self):
        with tempfile.TemporaryDirectory() as temp_dir:
            export_dir = Path(temp_dir)
            (export_dir / "about.xml").write_text("<html/>", encoding="utf-8")
            previous_cwd = os.getcwd()
            os.chdir(export_dir)
            try:
                identity = get_page_identity(Path("about.xml"), export_dir)
            finally:
                os.chdir(previous_cwd)

        self.assertEqual(identity, ("about", "/"))

    def test_page_outside_export_directory(self):
        with pytest.raises(MappingConfigurationError):
            get_page_identity(Path("/elsewhere/about.xml"), Path("/export"))

    def test_page_path(self):
        page = Page("home", "/", "www", "/Page")
        self.assertEqual(page.path, "/home")
        page = Page("index", "about/staff", "www", "/Page")
        self.assertEqual(page.path, "/about/staff/index")


class TestBodyFromStructuredData(unittest.TestCase):

    def test_single_node(self):
        self.assertEqual(
            body_from_structured_data([StructuredDataNode.text_node("body", "<p>x</p>")]), "<p>x</p>"
        )

    def test_no_nodes(self):
        self.assertEqual(body_from_structured_data([]), "")

    def test_too_many_nodes(self):
        with pytest.raises(MappingConfigurationError):
            body_from_structured_data([
                StructuredDataNode.text_node("a", "1"),
                StructuredDataNode.text_node("b", "2"),
            ])


class TestSetupPageObject(unittest.TestCase):

    def setUp(self):
        """Set up test fixtures"""
        self.temp_dir = tempfile.TemporaryDirectory()
        self.addCleanup(self.temp_dir.cleanup)
        self.export_dir = Path(self.temp_dir.name)

        self.project = ProjectInformation(
            xml_directory=self.export_dir,
            site_name="www",
            content_type_path="/Page",
            content_types={
                "/Page": ContentTypeInformation(
                    "/Page",
                    metadata_fields={
                        "title": MetadataField("title"),
                        "audience": MetadataField("audience", dynamic=True),
                    },
                ),
                "/Plain": ContentTypeInformation("/Plain", uses_data_definition=False),
            },
            field_mapping={
                "//title": MetadataField("title"),
                "//div[@id='main']": StructuredField("main/body", wysiwyg=True),
            },
            static_value_mapping={StructuredField("settings/theme"): "Black & White"},
            block_id_to_path_map={"201": "/_blocks/special", "202": "/_blocks/photo"},
            special_block_ids={"201"},
            existing_cascade_xhtml_blocks={"/_blocks/special": "blk-1"},
        )
        self.destination = CascadeDestination(self.project)

        self.block_nodes = [StructuredDataNode.text_node("intro", "From the block")]
        self.block_metadata = Metadata(
            title="Block title", dynamic_fields=[DynamicMetadataField("audience", ["All"])]
        )

    def write_page(self, relative_path, contents):
        page_file = self.export_dir / relative_path
        page_file.parent.mkdir(parents=True, exist_ok=True)
        page_file.write_text(contents, encoding="utf-8")
        return page_file

    def test_data_definition_page(self):
        page_file = self.write_page("about/index.xml", ARTICLE_PAGE)
        self.project.block_id_to_path_map.pop("201")

        page = setup_page_object(page_file, self.project, self.destination)

        self.assertEqual((page.name, page.parent_folder_path), ("index", "about"))
        self.assertEqual(page.metadata.title, "About Us")
        self.assertEqual(page.metadata.dynamic_fields, [DynamicMetadataField("audience", [""])])
        self.assertEqual(page.structured_data, [
            StructuredDataNode.block_node("article", "/_blocks/photo"),
            StructuredDataNode.group_node("main", [
                StructuredDataNode.text_node("body", '<p>Hello <a href="/about/team">team</a></p>'),
            ]),
            StructuredDataNode.group_node("settings", [
                StructuredDataNode.text_node("theme", "Black &amp; White"),
            ]),
        ])
        self.assertIsNone(page.xhtml)

        payload = page.to_dict()
        self.assertEqual(payload["parentFolderPath"], "about")
        self.assertEqual(payload["contentTypePath"], "/Page")
        self.assertEqual(len(payload["structuredData"]["structuredDataNodes"]), 3)
        self.assertNotIn("xhtml", payload)

    def test_special_block_merged(self):
        page_file = self.write_page("about/index.xml", ARTICLE_PAGE)
        log = MigrationLogger()

        with patch.object(
            self.destination, "fetch_block_content",
            return_value=(self.block_nodes, self.block_metadata),
        ) as mock_fetch:
            page = setup_page_object(page_file, self.project, self.destination, log)

        mock_fetch.assert_called_once_with("blk-1")
        self.assertEqual(page.structured_data[-1], self.block_nodes[0])
        self.assertEqual(len(page.structured_data), 4)
        self.assertIs(page.metadata, self.block_metadata)
        self.assertEqual(log.page_path, "/about/index")
        self.assertEqual(log.get_stats()["info"], 1)

    def test_page_without_data_definition(self):
        page_file = self.write_page("home.html", SIMPLE_PAGE)
        self.project.content_type_path = "/Plain"
        self.project.field_mapping = {"//div[@id='main']": StructuredField("body")}
        self.project.static_value_mapping = {}

        page = setup_page_object(page_file, self.project, self.destination)

        self.assertEqual(page.xhtml, "<p>Body</p>")
        self.assertIsNone(page.structured_data)
        self.assertEqual(page.to_dict()["xhtml"], "<p>Body</p>")
        self.assertNotIn("structuredData", page.to_dict())

    def test_page_without_data_definition_and_no_fields(self):
        page_file = self.write_page("home.html", SIMPLE_PAGE)
        self.project.content_type_path = "/Plain"
        self.project.field_mapping = {"//title": MetadataField("title")}
        self.project.static_value_mapping = {}

        page = setup_page_object(page_file, self.project, self.destination)

        self.assertEqual(page.xhtml, "")

    def test_page_without_data_definition_rejects_two_fields(self):
        page_file = self.write_page("home.html", SIMPLE_PAGE)
        self.project.content_type_path = "/Plain"
        self.project.field_mapping = {
            "//div[@id='main']": StructuredField("body"),
            "//div[@id='side']": StructuredField("side"),
        }
        self.project.static_value_mapping = {}
        log = MigrationLogger()

        with pytest.raises(MappingConfigurationError):
            setup_page_object(page_file, self.project, self.destination, log)
        self.assertTrue(log.has_errors())

    def test_malformed_source_is_repaired(self):
        page_file = self.write_page(
            "news/item.htm",
            "<html><body><div id='main'><p>Caf&eacute; news<br></div></body></html>",
        )
        self.project.field_mapping = {"//div[@id='main']": StructuredField("body")}
        self.project.static_value_mapping = {}

        page = setup_page_object(page_file, self.project, self.destination)

        self.assertEqual(page.path, "/news/item")
        self.assertIn("Café news", page.structured_data[0].text)

    def test_latin1_source(self):
        page_file = self.export_dir / "news" / "cafe.html"
        page_file.parent.mkdir(parents=True)
        page_file.write_bytes(
            "<html><body><div id=\"main\">Caf\u00e9 opening</div></body></html>".encode("latin-1")
        )
        self.project.field_mapping = {"//div[@id='main']": StructuredField("body")}
        self.project.static_value_mapping = {}

        page = setup_page_object(page_file, self.project, self.destination)

        self.assertEqual(page.structured_data[0].text, "Caf\u00e9 opening")

    @patch("cascade_migration.page_assembler.logger")
    def test_operation_records_paired(self, mock_logger):
        page_file = self.write_page("home.html", SIMPLE_PAGE)

        setup_page_object(page_file, self.project, self.destination)

        mock_logger.log_operation_start.assert_called_once_with(
            "assemble_page", page="/home", file=str(page_file)
        )
        args, kwargs = mock_logger.log_operation_end.call_args
        self.assertEqual(args, ("assemble_page", True))
        self.assertEqual(kwargs["page"], "/home")
        self.assertEqual(kwargs["errors"], 0)

    def test_empty_source(self):
        page_file = self.write_page("empty.xml", "")

        with pytest.raises(DocumentParseError):
            setup_page_object(page_file, self.project, self.destination)


if __name__ == "__main__":
    unittest.main()
