"""EPUB container parser producing normalized books."""

import logging
import posixpath
import xml.etree.ElementTree as ET
import zipfile
import zlib
from pathlib import Path
from urllib.parse import unquote

import chardet
from bs4 import BeautifulSoup

from learnfeed.config import ParsingConfig
from learnfeed.errors import ChapterExtractionError, MissingArtifactError
from learnfeed.ingestion.normalizer import normalize_markup
from learnfeed.models.book import Book, Chapter

logger = logging.getLogger(__name__)

CONTAINER_PATH = "META-INF/container.xml"
CONTAINER_NS = "urn:oasis:names:tc:opendocument:xmlns:container"
OPF_NS = "http://www.idpf.org/2007/opf"
DC_NS = "http://purl.org/dc/elements/1.1/"
NCX_NS = "http://www.daisy.org/z3986/2005/ncx/"

NCX_MEDIA_TYPE = "application/x-dtbncx+xml"


class BookParser:
    """Parses packed EPUB files into Book records.

    Chapters follow the spine order. Each chapter's markup is normalized
    to plain text and chapters that are not substantial enough are
    dropped. A chapter that cannot be read is skipped with a warning; it
    never aborts the whole book.

    Args:
        config: ParsingConfig with the minimum chapter length.
    """

    def __init__(self, config: ParsingConfig | None = None) -> None:
        self._config = config or ParsingConfig()

    def parse_directory(self, books_dir: str | Path) -> list[Book]:
        """Parse every EPUB file in a directory.

        A document that fails entirely is logged and skipped.

        Args:
            books_dir: Directory containing ``*.epub`` files.

        Returns:
            Books in file-name order.

        Raises:
            MissingArtifactError: If books_dir does not exist.
        """
        directory = Path(books_dir)
        if not directory.is_dir():
            raise MissingArtifactError(
                f"Books directory {directory}", "Place the source EPUB files there first."
            )

        files = sorted(directory.glob("*.epub"))
        logger.info("Found %d EPUB files to parse in %s", len(files), directory)

        books: list[Book] = []
        for path in files:
            try:
                book = self.parse(path)
            except Exception:
                logger.exception("Failed to parse EPUB: %s", path)
                continue
            logger.info(
                "Parsed %s: title=%r chapters=%d", path.name, book.title, len(book.chapters)
            )
            books.append(book)

        return books

    def parse(self, file_path: str | Path) -> Book:
        """Parse a single EPUB file.

        Args:
            file_path: Path to the ``.epub`` file.

        Returns:
            A Book with its substantial chapters.

        Raises:
            FileNotFoundError: If file_path does not exist.
            ValueError: If the file is not a readable EPUB container.
        """
        path = Path(file_path)
        if not path.exists():
            raise FileNotFoundError(f"File not found: {path}")
        if not zipfile.is_zipfile(path):
            raise ValueError(f"Not an EPUB container: {path}")

        with zipfile.ZipFile(path) as archive:
            opf_path = self._find_package_document(archive)
            package = self._read_xml(archive, opf_path)
            base_dir = posixpath.dirname(opf_path)

            title, author = self._extract_metadata(package)
            manifest = self._read_manifest(package, base_dir)
            titles = self._read_toc_titles(archive, package, manifest)

            chapters: list[Chapter] = []
            for order, item_id in enumerate(self._read_spine(package)):
                href = manifest.get(item_id, {}).get("href", "")
                try:
                    content = self._extract_chapter_text(archive, item_id, href)
                except ChapterExtractionError as exc:
                    logger.warning("Skipping chapter %d of %s: %s", order, path.name, exc)
                    continue

                if len(content) <= self._config.min_chapter_chars:
                    continue

                chapters.append(
                    Chapter(
                        chapter_id=item_id,
                        title=titles.get(href) or f"Chapter {order + 1}",
                        order=order,
                        content=content,
                    )
                )

        return Book(title=title, author=author, source_path=path.name, chapters=chapters)

    def _find_package_document(self, archive: zipfile.ZipFile) -> str:
        """Locate the OPF package document via META-INF/container.xml."""
        try:
            container = self._read_xml(archive, CONTAINER_PATH)
        except KeyError as exc:
            raise ValueError(f"Missing {CONTAINER_PATH}") from exc

        rootfile = container.find(f".//{{{CONTAINER_NS}}}rootfile")
        if rootfile is None or not rootfile.get("full-path"):
            raise ValueError("No rootfile declared in container.xml")
        return rootfile.get("full-path", "")

    def _read_xml(self, archive: zipfile.ZipFile, name: str) -> ET.Element:
        return ET.fromstring(archive.read(name))

    def _extract_metadata(self, package: ET.Element) -> tuple[str, str]:
        """Read title and author from the OPF metadata block."""
        title, author = "Unknown", "Unknown"
        t = package.find(f".//{{{DC_NS}}}title")
        if t is not None and t.text and t.text.strip():
            title = t.text.strip()
        a = package.find(f".//{{{DC_NS}}}creator")
        if a is not None and a.text and a.text.strip():
            author = a.text.strip()
        return title, author

    def _read_manifest(self, package: ET.Element, base_dir: str) -> dict[str, dict[str, str]]:
        """Map manifest item ids to archive paths, media types and properties."""
        manifest: dict[str, dict[str, str]] = {}
        for item in package.findall(f".//{{{OPF_NS}}}manifest/{{{OPF_NS}}}item"):
            item_id = item.get("id")
            if not item_id:
                continue
            manifest[item_id] = {
                "href": _resolve(base_dir, item.get("href", "")),
                "media_type": item.get("media-type", ""),
                "properties": item.get("properties", ""),
            }
        return manifest

    def _read_spine(self, package: ET.Element) -> list[str]:
        spine = package.find(f".//{{{OPF_NS}}}spine")
        if spine is None:
            raise ValueError("No spine found in package document")
        return [ref.get("idref", "") for ref in spine.findall(f"{{{OPF_NS}}}itemref")]

    def _read_toc_titles(
        self,
        archive: zipfile.ZipFile,
        package: ET.Element,
        manifest: dict[str, dict[str, str]],
    ) -> dict[str, str]:
        """Map chapter archive paths to their table-of-contents labels.

        Uses the NCX (EPUB 2) when present, otherwise the XHTML navigation
        document (EPUB 3). A broken table of contents only costs titles.
        """
        spine = package.find(f".//{{{OPF_NS}}}spine")
        ncx_id = spine.get("toc") if spine is not None else None
        ncx_path = manifest.get(ncx_id or "", {}).get("href")
        if not ncx_path:
            ncx_path = next(
                (m["href"] for m in manifest.values() if m["media_type"] == NCX_MEDIA_TYPE),
                None,
            )
        nav_path = next(
            (m["href"] for m in manifest.values() if "nav" in m["properties"].split()),
            None,
        )

        try:
            if ncx_path:
                return self._titles_from_ncx(archive, ncx_path)
            if nav_path:
                return self._titles_from_nav(archive, nav_path)
        except (KeyError, ET.ParseError) as exc:
            logger.warning("Unreadable table of contents: %s", exc)
        return {}

    def _titles_from_ncx(self, archive: zipfile.ZipFile, ncx_path: str) -> dict[str, str]:
        root = self._read_xml(archive, ncx_path)
        base_dir = posixpath.dirname(ncx_path)
        titles: dict[str, str] = {}
        for nav_point in root.iter(f"{{{NCX_NS}}}navPoint"):
            label = nav_point.find(f"{{{NCX_NS}}}navLabel/{{{NCX_NS}}}text")
            content = nav_point.find(f"{{{NCX_NS}}}content")
            if label is None or not label.text or content is None:
                continue
            src = _resolve(base_dir, content.get("src", "").split("#")[0])
            titles.setdefault(src, label.text.strip())
        return titles

    def _titles_from_nav(self, archive: zipfile.ZipFile, nav_path: str) -> dict[str, str]:
        soup = BeautifulSoup(archive.read(nav_path), "lxml")
        base_dir = posixpath.dirname(nav_path)
        navs = soup.find_all("nav")
        toc = next((n for n in navs if n.get("epub:type") == "toc"), navs[0] if navs else None)
        titles: dict[str, str] = {}
        if toc is None:
            return titles
        for link in toc.find_all("a", href=True):
            label = link.get_text(separator=" ", strip=True)
            if label:
                titles.setdefault(_resolve(base_dir, link["href"].split("#")[0]), label)
        return titles

    def _extract_chapter_text(
        self, archive: zipfile.ZipFile, item_id: str, href: str
    ) -> str:
        """Read, decode and normalize one chapter document.

        Raises:
            ChapterExtractionError: If the chapter is missing, corrupt or undecodable.
        """
        if not href:
            raise ChapterExtractionError(item_id, "not declared in manifest")
        try:
            raw_bytes = archive.read(href)
        except (KeyError, EOFError, zipfile.BadZipFile, zlib.error) as exc:
            raise ChapterExtractionError(item_id, f"cannot read {href}: {exc}") from exc

        text = self._decode(item_id, raw_bytes)
        try:
            return normalize_markup(text)
        except Exception as exc:
            raise ChapterExtractionError(item_id, f"cannot normalize markup: {exc}") from exc

    def _decode(self, item_id: str, raw_bytes: bytes) -> str:
        """Decode chapter bytes, trying UTF-8 first then chardet detection."""
        try:
            return raw_bytes.decode("utf-8")
        except UnicodeDecodeError:
            pass

        detected = chardet.detect(raw_bytes)
        encoding = detected.get("encoding")
        confidence = detected.get("confidence") or 0

        if not encoding:
            raise ChapterExtractionError(item_id, "unknown text encoding")
        if confidence < 0.7:
            logger.warning(
                "Low confidence encoding detection for %s: %s (%.0f%%)",
                item_id,
                encoding,
                confidence * 100,
            )

        try:
            return raw_bytes.decode(encoding)
        except (UnicodeDecodeError, LookupError) as exc:
            raise ChapterExtractionError(item_id, f"decode error: {exc}") from exc


def _resolve(base_dir: str, href: str) -> str:
    """Resolve a package-relative href to an archive member name."""
    if not href:
        return ""
    return posixpath.normpath(posixpath.join(base_dir, unquote(href)))
