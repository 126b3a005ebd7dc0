"""
RSS Changelog Parser
====================

Turns RSS 2.0 XML into ChangelogEntry records.

Feed shapes vary between producers, so the parser tolerates:
- a channel holding a single item or many
- a plain ``<guid>`` or one carrying attributes such as ``isPermaLink``
- rich bodies in ``content:encoded`` or plain ``description``
- zero or more ``<category domain="...">`` elements per item

Any failure is reported as FeedParseError; partial results are never returned.
"""

from typing import Any, List, Mapping, NamedTuple, Optional, Union

from lxml import etree

from ..utils.exceptions import FeedParseError, InvalidFeedStructureError
from ..utils.logging import get_logger_for_component
from .label_normalizer import normalize_label_case
from .models import ChangelogEntry

CONTENT_NAMESPACE = "http://purl.org/rss/1.0/modules/content/"
CONTENT_ENCODED_TAG = f"{{{CONTENT_NAMESPACE}}}encoded"

CHANGELOG_TYPE_DOMAIN = "changelog-type"
CHANGELOG_LABEL_DOMAIN = "changelog-label"

REQUIRED_ITEM_FIELDS = ("title", "link", "pubDate")


class AttributedText(NamedTuple):
    """Element value carrying attributes alongside its inner text."""

    text: str
    attributes: Mapping[str, str]


ElementValue = Union[str, AttributedText]


def _inner_text(element: Any) -> str:
    # XPath string-value: all descendant text (CDATA included), no comments
    return str(element.xpath("string()")).strip()


def read_element_value(element: Any) -> ElementValue:
    """Read an element as plain text, or as AttributedText when it has attributes."""
    text = _inner_text(element)
    if element.attrib:
        return AttributedText(text=text, attributes=dict(element.attrib))
    return text


def resolve_guid(value: Any) -> str:
    """Resolve the dual-shape guid: inner text of an attributed element, else str()."""
    if isinstance(value, AttributedText):
        return value.text
    return str(value)


def _new_xml_parser(encoding: Optional[str] = None) -> Any:
    # One parser per document; entity expansion and network access stay off.
    # A forced encoding overrides the XML declaration.
    return etree.XMLParser(
        encoding=encoding,
        recover=False,
        resolve_entities=False,
        no_network=True,
        huge_tree=False,
    )


class RssFeedParser:
    """Parser for changelog RSS feeds."""

    def __init__(self, logger: Optional[Any] = None):
        """Initialize parser.

        Args:
            logger: Diagnostic sink receiving a warning for each failed parse
                (defaults to the component logger)
        """
        self.logger = logger or get_logger_for_component("rss_parser")

    def parse(self, xml_text: Union[str, bytes]) -> List[ChangelogEntry]:
        """Parse feed XML into entries in document order.

        Args:
            xml_text: Complete RSS document

        Returns:
            One ChangelogEntry per item

        Raises:
            FeedParseError: If the XML is malformed, the document is not an
                rss > channel > item tree, or an item cannot be mapped
        """
        try:
            items = self._extract_items(xml_text)
            entries = [
                self._map_item(item, position)
                for position, item in enumerate(items, start=1)
            ]
        except Exception as e:
            self._report_failure(f"Error parsing RSS feed: {e}")
            raise FeedParseError(str(e)) from e

        self.logger.debug(f"Parsed {len(entries)} changelog entries")
        return entries

    def _report_failure(self, message: str) -> None:
        try:
            self.logger.warning(message)
        except Exception:
            # A broken diagnostic sink must not replace the parse error
            pass

    def _extract_items(self, xml_text: Union[str, bytes]) -> List[Any]:
        if isinstance(xml_text, str):
            # Already decoded text: the declared encoding no longer applies
            root = etree.fromstring(
                xml_text.encode("utf-8"), parser=_new_xml_parser(encoding="utf-8")
            )
        else:
            root = etree.fromstring(xml_text, parser=_new_xml_parser())

        if root.tag != "rss":
            raise InvalidFeedStructureError()

        channel = root.find("channel")
        if channel is None:
            raise InvalidFeedStructureError()

        # findall yields a list for one item or many alike
        items = channel.findall("item")
        if not items:
            raise InvalidFeedStructureError()

        version = root.get("version")
        if version != "2.0":
            self.logger.debug(f"Feed declares RSS version {version!r}, parsing as 2.0")

        return items

    def _map_item(self, item: Any, position: int) -> ChangelogEntry:
        fields = {}
        for name in REQUIRED_ITEM_FIELDS:
            element = item.find(name)
            value = _inner_text(element) if element is not None else ""
            if not value:
                raise ValueError(f"Item {position} is missing required element <{name}>")
            fields[name] = value

        guid_element = item.find("guid")
        guid = resolve_guid(read_element_value(guid_element)) if guid_element is not None else ""
        if not guid:
            raise ValueError(f"Item {position} is missing required element <guid>")

        changelog_type, changelog_label = self._extract_categories(item)

        return ChangelogEntry(
            title=fields["title"],
            link=fields["link"],
            pub_date=fields["pubDate"],
            content=self._extract_content(item),
            guid=guid,
            changelog_type=changelog_type,
            changelog_label=changelog_label,
        )

    def _extract_content(self, item: Any) -> str:
        """Prefer content:encoded, then description, then empty."""
        for tag in (CONTENT_ENCODED_TAG, "description"):
            element = item.find(tag)
            if element is not None:
                text = _inner_text(element)
                if text:
                    return text
        return ""

    def _extract_categories(self, item: Any) -> tuple:
        """Pick the changelog-type and changelog-label categories.

        Categories in other domains are ignored. When a domain repeats,
        the last one wins.
        """
        changelog_type = None
        changelog_label = None

        for category in item.iterfind("category"):
            value = read_element_value(category)
            if not isinstance(value, AttributedText) or not value.text:
                continue

            domain = value.attributes.get("domain")
            if domain == CHANGELOG_TYPE_DOMAIN:
                changelog_type = value.text
            elif domain == CHANGELOG_LABEL_DOMAIN:
                changelog_label = normalize_label_case(value.text)

        return changelog_type, changelog_label


def parse_rss_feed(xml_text: Union[str, bytes], logger: Optional[Any] = None) -> List[ChangelogEntry]:
    """Parse changelog feed XML with a default RssFeedParser."""
    return RssFeedParser(logger=logger).parse(xml_text)
